"""Unit conversions used when decoding METAR groups.

All integer results use NWS-style rounding (half rounds UP), never
Python's banker's rounding.
"""

from __future__ import annotations

import math

KNOTS_TO_MPH = 1.15078
INHG_TO_HPA = 33.8639
METERS_PER_STATUTE_MILE = 1609.344

# Magnus formula constants (Alduchov & Eskridge, 1996).
_MAGNUS_A = 17.625
_MAGNUS_B = 243.04

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
)


def nws_round(value: float) -> int:
    """NWS-style rounding: half rounds UP (not banker's rounding).

    >>> nws_round(9.5)
    10
    >>> nws_round(9.4999)
    9
    """
    return math.floor(value + 0.5)


def knots_to_mph(knots: int) -> int:
    return nws_round(knots * KNOTS_TO_MPH)


def c_to_f(c: float) -> int:
    """Convert Celsius to whole Fahrenheit, rounding half-up."""
    return nws_round(c * 9.0 / 5.0 + 32.0)


def inhg_to_hpa(inhg: float) -> int:
    return nws_round(inhg * INHG_TO_HPA)


def degrees_to_cardinal(degrees: int) -> str:
    """Map a wind direction to the nearest of the 16 compass points.

    Each point covers a 22.5° bucket centred on it, so 0° and 360° are
    both "N" and 11.25° rounds up to "NNE".
    """
    index = nws_round(degrees / 22.5) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]


def relative_humidity(temp_c: float, dewpoint_c: float) -> int:
    """Relative humidity in whole percent from temperature and dewpoint.

    Uses the Magnus approximation of saturation vapour pressure. The
    result is truncated, not rounded, which is how the NOAA decoded
    reports present it (29/22 gives 65%, not 66%). Capped at 100.
    """
    actual = math.exp(_MAGNUS_A * dewpoint_c / (_MAGNUS_B + dewpoint_c))
    saturation = math.exp(_MAGNUS_A * temp_c / (_MAGNUS_B + temp_c))
    return min(100, math.floor(100.0 * actual / saturation))


def meters_to_statute_miles(meters: int) -> int:
    """Whole statute miles, truncated (6000 m is reported as 3 miles)."""
    return int(meters // METERS_PER_STATUTE_MILE)
