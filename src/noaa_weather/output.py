"""Console rendering of a decoded WeatherInfo."""

from __future__ import annotations

from noaa_weather.metar_parser import CALM, VARIABLE
from noaa_weather.schemas import Temperature, WeatherInfo, WindInfo

_NOT_REPORTED = "not reported"


def _format_wind(wind: WindInfo) -> str:
    if wind.cardinal == CALM:
        return CALM
    if wind.cardinal == VARIABLE:
        text = f"Variable at {wind.mph} MPH ({wind.knots} KT)"
    else:
        text = (
            f"from the {wind.cardinal} ({wind.azimuth} degrees) "
            f"at {wind.mph} MPH ({wind.knots} KT)"
        )
    if wind.gust_knots is not None:
        text += f" gusting to {wind.gust_mph} MPH ({wind.gust_knots} KT)"
    return text


def _format_temperature(temp: Temperature) -> str:
    return f"{temp.fahrenheit} F ({temp.celsius} C)"


def format_weather(info: WeatherInfo) -> str:
    """Pretty key/value text, one field per line."""
    t = info.weather_time
    rows = [
        ("Station", info.station or _NOT_REPORTED),
        ("Observed", f"{t.year:04d}.{t.month:02d}.{t.day:02d} {t.time}"),
        ("Wind", _format_wind(info.wind)),
        ("Visibility", info.visibility),
        ("Sky conditions", info.sky_condition),
        ("Weather", info.weather or _NOT_REPORTED),
        ("Temperature", _format_temperature(info.temperature)),
        ("Dew Point", _format_temperature(info.dewpoint)),
        ("Relative Humidity", info.relative_humidity),
        ("Pressure", f"{info.pressure} hPa"),
    ]
    width = max(len(k) for k, _ in rows)
    return "\n".join(f"{k + ':':<{width + 1}} {v}" for k, v in rows)


def format_weather_json(info: WeatherInfo) -> str:
    return info.model_dump_json(indent=2)
