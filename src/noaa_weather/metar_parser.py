"""METAR parser: decodes one raw METAR report into a WeatherInfo.

Handles the day/time, wind, visibility, present weather, sky condition,
temperature/dewpoint and pressure groups of the report body, plus the
SLP and T groups of the remarks. Pure and deterministic: the only
outside input is the reference date that supplies year and month.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import Optional

from noaa_weather.codes import (
    NO_SIGNIFICANT_WEATHER,
    SKY_PHRASES,
    SkyCover,
    describe_weather_group,
    governing_sky_cover,
)
from noaa_weather.errors import (
    EmptyInputError,
    MalformedGroupError,
    MissingRequiredGroupError,
)
from noaa_weather.schemas import Temperature, WeatherInfo, WeatherTime, WindInfo
from noaa_weather.units import (
    c_to_f,
    degrees_to_cardinal,
    inhg_to_hpa,
    knots_to_mph,
    meters_to_statute_miles,
    nws_round,
    relative_humidity,
)

logger = logging.getLogger(__name__)

CALM = "Calm"
VARIABLE = "Variable"
VARIABLE_AZIMUTH = "VRB"

_REPORT_TYPES = {"METAR", "SPECI"}
# Trend forecasts describe future conditions, not the observation.
_TREND_MARKERS = {"NOSIG", "BECMG", "TEMPO"}


# ── Station & day/time ───────────────────────────────────────────────

_STATION_RE = re.compile(r"^[A-Z][A-Z0-9]{3}$")

# DDHHMMZ, e.g. "301330Z"
_TIME_RE = re.compile(r"^(\d{2})(\d{2})(\d{2})Z$")
_TIME_LIKE_RE = re.compile(r"^\d+Z$")


def parse_day_time(token: str, reference_date: date) -> WeatherTime:
    """Decode a DDHHMMZ group; year and month come from reference_date."""
    m = _TIME_RE.match(token)
    if not m:
        raise MalformedGroupError("weather_time", token)
    day, hour, minute = (int(x) for x in m.groups())
    if not (1 <= day <= 31 and hour <= 23 and minute <= 59):
        raise MalformedGroupError("weather_time", token)

    return WeatherTime(
        year=reference_date.year,
        month=reference_date.month,
        day=day,
        time=f"{m.group(2)}{m.group(3)} UTC",
    )


# ── Wind ─────────────────────────────────────────────────────────────

# dddss[Ggg]KT or VRBss[Ggg]KT
_WIND_RE = re.compile(
    r"^(?P<direction>\d{3}|VRB)(?P<speed>\d{2,3})(?:G(?P<gust>\d{2,3}))?KT$"
)
_WIND_LIKE_RE = re.compile(r"^(?:\d|/|VRB).*(?:KT|MPS|KMH)$")


def parse_wind(token: str) -> WindInfo:
    """Decode a wind group.

    Knots keep the reported value (without leading zeros); mph is
    derived. A zero speed is reported as calm and a VRB direction as
    variable, neither is mapped to a compass point.
    """
    m = _WIND_RE.match(token)
    if not m:
        raise MalformedGroupError("wind", token)

    direction = m.group("direction")
    speed = int(m.group("speed"))
    gust = int(m.group("gust")) if m.group("gust") else None

    if direction == VARIABLE_AZIMUTH:
        cardinal = VARIABLE
    elif int(direction) > 360:
        raise MalformedGroupError("wind", token)
    elif speed == 0:
        cardinal = CALM
    else:
        cardinal = degrees_to_cardinal(int(direction))

    return WindInfo(
        cardinal=cardinal,
        azimuth=direction,
        mph=str(knots_to_mph(speed)),
        knots=str(speed),
        gust_knots=str(gust) if gust is not None else None,
        gust_mph=str(knots_to_mph(gust)) if gust is not None else None,
    )


# ── Visibility ───────────────────────────────────────────────────────

_VIS_SM_RE = re.compile(r"^(?P<qualifier>[PM])?(?P<value>\d+(?:/\d+)?)SM$")
_VIS_WHOLE_RE = re.compile(r"^\d{1,2}$")
_VIS_FRACTION_RE = re.compile(r"^\d/\d{1,2}SM$")
_VIS_METRIC_RE = re.compile(r"^(\d{4})(?:NDV)?$")

_VIS_QUALIFIERS = {"P": "greater than ", "M": "less than "}
_VIS_SUFFIX = " mile(s):0"
_METRIC_UNLIMITED = 9999
CAVOK = "CAVOK"


def describe_visibility(value: str, qualifier: str = "") -> str:
    return f"{qualifier}{value}{_VIS_SUFFIX}"


def parse_visibility(token: str, whole_miles: Optional[str] = None) -> str:
    """Decode a statute-mile or metric visibility group.

    ``whole_miles`` is the separate whole-number token of a mixed
    fraction such as "1 1/2SM".
    """
    if token == CAVOK:
        return describe_visibility("6", _VIS_QUALIFIERS["P"])

    m = _VIS_METRIC_RE.match(token)
    if m:
        meters = int(m.group(1))
        if meters >= _METRIC_UNLIMITED:
            return describe_visibility("6", _VIS_QUALIFIERS["P"])
        miles = meters_to_statute_miles(meters)
        if miles < 1:
            return describe_visibility("1", _VIS_QUALIFIERS["M"])
        return describe_visibility(str(miles))

    m = _VIS_SM_RE.match(token)
    if not m:
        raise MalformedGroupError("visibility", token)
    qualifier = _VIS_QUALIFIERS.get(m.group("qualifier") or "", "")
    value = m.group("value")
    if "/" in value and int(value.split("/")[1]) == 0:
        raise MalformedGroupError("visibility", token)
    if whole_miles is not None:
        value = f"{int(whole_miles)} {value}"
    return describe_visibility(value, qualifier)


# ── Sky condition ────────────────────────────────────────────────────

_SKY_RE = re.compile(
    r"^(?P<cover>" + "|".join(c.value for c in SkyCover) + r")"
    r"(?P<height>\d{3}|///)?(?:CB|TCU|///)?$"
)
# "//////" is an automated station that could not observe the sky.
_SKY_LIKE_RE = re.compile(r"^(?:FEW|SCT|BKN|OVC|VV|/{6})")


def parse_sky_condition(tokens: list[str]) -> str:
    """Phrase for the governing layer among the given sky-cover groups."""
    layers = []
    for token in tokens:
        m = _SKY_RE.match(token)
        if not m:
            raise MalformedGroupError("sky_condition", token)
        layers.append(SkyCover(m.group("cover")))
    if not layers:
        raise MissingRequiredGroupError("sky_condition")
    return SKY_PHRASES[governing_sky_cover(layers)]


# ── Temperature & humidity ───────────────────────────────────────────

# Standard METAR temperature: TT/DD where M prefix means negative.
# e.g. "04/M11" = temp 4°C, dewpoint -11°C
_TEMP_RE = re.compile(r"^(M?\d{2})/(M?\d{2})$")
_TEMP_LIKE_RE = re.compile(r"^M?\d{1,3}/(?:M?\d{0,3}|/+)$")
_TEMP_VALUE_RE = re.compile(r"^M?\d{2}$")


def _signed(value: str) -> int:
    if value.startswith("M"):
        return -int(value[1:])
    return int(value)


def parse_temperature_group(token: str) -> tuple[int, int]:
    """Parse a TT/DD group into whole °C (temperature, dewpoint)."""
    m = _TEMP_RE.match(token)
    if m:
        raw_t, raw_d = m.groups()
        return _signed(raw_t), _signed(raw_d)

    raw_t, _, raw_d = token.partition("/")
    if _TEMP_VALUE_RE.match(raw_t) and raw_d.strip("/M") == "":
        raise MalformedGroupError("dewpoint", token)
    raise MalformedGroupError("temperature", token)


def build_temperature(celsius: int) -> Temperature:
    return Temperature(celsius=celsius, fahrenheit=c_to_f(celsius))


# T-group in remarks: T followed by 8 digits.
# Format: T[sign_t][3 digits temp][sign_d][3 digits dewpoint]
# sign: 0 = positive, 1 = negative
_T_GROUP_RE = re.compile(r"\bT([01])(\d{3})([01])(\d{3})\b")


def parse_t_group(remarks: str) -> tuple[Optional[float], Optional[float]]:
    """Parse the T-group from METAR remarks.

    Returns (temp_c_tenths, dewpoint_c_tenths) or (None, None).
    """
    m = _T_GROUP_RE.search(remarks)
    if not m:
        return None, None

    sign_t, digits_t, sign_d, digits_d = m.groups()
    temp = int(digits_t) / 10.0
    if sign_t == "1":
        temp = -temp
    dew = int(digits_d) / 10.0
    if sign_d == "1":
        dew = -dew
    return temp, dew


# ── Pressure ─────────────────────────────────────────────────────────

_ALTIMETER_RE = re.compile(r"^A(\d{4})$")   # hundredths of inHg
_QNH_RE = re.compile(r"^Q(\d{4})$")         # hPa
_PRESSURE_LIKE_RE = re.compile(r"^[AQ](?:\d[\dA-Z/]{3}|/{4})$")
_PRESSURE_NOT_REPORTED_RE = re.compile(r"^[AQ]/{4}$")

# Sea-level pressure in remarks, tenths of hPa without the leading 9/10.
_SLP_RE = re.compile(r"\bSLP(\d{3})\b")


def parse_pressure_group(token: str) -> int:
    """Altimeter (Axxxx, inHg) or QNH (Qxxxx, hPa) group to whole hPa."""
    m = _QNH_RE.match(token)
    if m:
        return int(m.group(1))
    m = _ALTIMETER_RE.match(token)
    if m:
        return inhg_to_hpa(int(m.group(1)) / 100.0)
    raise MalformedGroupError("pressure", token)


def parse_sea_level_pressure(remarks: str) -> Optional[int]:
    """Decode SLPxxx from the remarks, e.g. SLP185 -> 1019 (1018.5 hPa)."""
    m = _SLP_RE.search(remarks)
    if not m:
        return None
    tenths = int(m.group(1))
    base = 1000.0 if tenths < 500 else 900.0
    return nws_round(base + tenths / 10.0)


# ── Tokenising ───────────────────────────────────────────────────────


def _split_report(raw_report: str) -> tuple[list[str], list[str]]:
    """Split into (body tokens, remark tokens) around RMK."""
    tokens = [t.rstrip("=") for t in raw_report.upper().split()]
    tokens = [t for t in tokens if t]
    if "RMK" in tokens:
        idx = tokens.index("RMK")
        return tokens[:idx], tokens[idx + 1:]
    return tokens, []


def _find_time_index(body: list[str]) -> int:
    for i, token in enumerate(body):
        if _TIME_LIKE_RE.match(token):
            return i
    raise MissingRequiredGroupError("weather_time")


# ── Main entry point ─────────────────────────────────────────────────


def parse_metar(raw_report: str, reference_date: Optional[date] = None) -> WeatherInfo:
    """Parse a raw METAR report into a WeatherInfo.

    Parameters
    ----------
    raw_report : the encoded report, e.g. "KXYZ 301330Z 08008KT 7SM CLR 23/14 A3005".
                 A leading NOAA header line ("2023/12/31 03:53") is tolerated.
    reference_date : supplies year and month, which the report does not carry.
                     Defaults to today's UTC date. Reconciling a report day
                     from the previous month is left to the caller.

    Raises
    ------
    EmptyInputError, MissingRequiredGroupError, MalformedGroupError
    """
    if not raw_report or not raw_report.strip():
        raise EmptyInputError()
    if reference_date is None:
        reference_date = datetime.now(timezone.utc).date()

    body, remarks = _split_report(raw_report)

    time_idx = _find_time_index(body)
    weather_time = parse_day_time(body[time_idx], reference_date)

    station = None
    if time_idx > 0 and body[time_idx - 1] not in _REPORT_TYPES:
        if _STATION_RE.match(body[time_idx - 1]):
            station = body[time_idx - 1]

    wind: Optional[WindInfo] = None
    visibility: Optional[str] = None
    sky_tokens: list[str] = []
    weather: list[str] = []
    temps: Optional[tuple[int, int]] = None
    body_pressure: Optional[int] = None
    cavok = False

    groups = body[time_idx + 1:]
    skip_next = False
    for i, token in enumerate(groups):
        if skip_next:
            skip_next = False
            continue
        if token in _TREND_MARKERS:
            break
        nxt = groups[i + 1] if i + 1 < len(groups) else None

        if _WIND_LIKE_RE.match(token):
            if wind is None:
                wind = parse_wind(token)
        elif token == CAVOK:
            cavok = True
            if visibility is None:
                visibility = parse_visibility(token)
        elif _VIS_WHOLE_RE.match(token) and nxt and _VIS_FRACTION_RE.match(nxt):
            if visibility is None:
                visibility = parse_visibility(nxt, whole_miles=token)
            skip_next = True
        elif token.endswith("SM") or _VIS_METRIC_RE.match(token):
            if visibility is None:
                visibility = parse_visibility(token)
        elif _SKY_RE.match(token) or _SKY_LIKE_RE.match(token):
            sky_tokens.append(token)
        elif _TEMP_LIKE_RE.match(token):
            if temps is None:
                temps = parse_temperature_group(token)
        elif _PRESSURE_LIKE_RE.match(token):
            if _PRESSURE_NOT_REPORTED_RE.match(token):
                logger.debug("Pressure group %r not reported", token)
            elif body_pressure is None:
                body_pressure = parse_pressure_group(token)
        elif token == NO_SIGNIFICANT_WEATHER:
            continue
        else:
            phrase = describe_weather_group(token)
            if phrase is not None:
                weather.append(phrase)
            else:
                logger.debug("Ignoring METAR group %r", token)

    if wind is None:
        raise MissingRequiredGroupError("wind")
    if visibility is None:
        raise MissingRequiredGroupError("visibility")
    if sky_tokens:
        sky_condition = parse_sky_condition(sky_tokens)
    elif cavok:
        sky_condition = SKY_PHRASES[SkyCover.CLR]
    else:
        raise MissingRequiredGroupError("sky_condition")
    if temps is None:
        raise MissingRequiredGroupError("temperature")

    remarks_text = " ".join(remarks)
    pressure = parse_sea_level_pressure(remarks_text)
    if pressure is None:
        pressure = body_pressure
    if pressure is None:
        raise MissingRequiredGroupError("pressure")

    temp_c, dew_c = temps
    precise_t, precise_d = parse_t_group(remarks_text)
    if precise_t is not None and precise_d is not None:
        humidity = relative_humidity(precise_t, precise_d)
    else:
        humidity = relative_humidity(temp_c, dew_c)

    return WeatherInfo(
        station=station,
        weather_time=weather_time,
        wind=wind,
        visibility=visibility,
        sky_condition=sky_condition,
        weather="; ".join(weather) if weather else None,
        temperature=build_temperature(temp_c),
        dewpoint=build_temperature(dew_c),
        relative_humidity=f"{humidity}%",
        pressure=pressure,
    )
