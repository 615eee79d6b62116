"""Tests for unit conversions and the METAR code tables."""

from __future__ import annotations

import pytest

from noaa_weather.codes import (
    DESCRIPTOR_PHRASES,
    PHENOMENON_PHRASES,
    SKY_PHRASES,
    Descriptor,
    Phenomenon,
    SkyCover,
    describe_weather_group,
    governing_sky_cover,
)
from noaa_weather.units import (
    c_to_f,
    degrees_to_cardinal,
    inhg_to_hpa,
    knots_to_mph,
    meters_to_statute_miles,
    nws_round,
    relative_humidity,
)


# ═══════════════════════════════════════════════════════════════════════
# Unit conversions
# ═══════════════════════════════════════════════════════════════════════


class TestNwsRound:
    """NWS uses standard rounding (half rounds UP), not Python banker's rounding."""

    def test_half_rounds_up(self):
        assert nws_round(72.5) == 73

    def test_just_below_half(self):
        assert nws_round(72.4999) == 72

    def test_negative_half(self):
        # -0.5 → floor(-0.5 + 0.5) = floor(0.0) = 0
        assert nws_round(-0.5) == 0

    def test_differs_from_python_round_at_2_5(self):
        assert nws_round(2.5) == 3
        assert round(2.5) == 2  # banker's rounding


class TestConversions:
    @pytest.mark.parametrize("knots,mph", [(0, 0), (6, 7), (8, 9), (10, 12), (14, 16)])
    def test_knots_to_mph(self, knots, mph):
        assert knots_to_mph(knots) == mph

    @pytest.mark.parametrize("c,f", [(0, 32), (100, 212), (-40, -40), (23, 73), (22, 72)])
    def test_c_to_f(self, c, f):
        assert c_to_f(c) == f

    def test_inhg_to_hpa(self):
        assert inhg_to_hpa(29.92) == 1013
        assert inhg_to_hpa(29.65) == 1004

    def test_meters_to_statute_miles(self):
        assert meters_to_statute_miles(6000) == 3
        assert meters_to_statute_miles(1600) == 0
        assert meters_to_statute_miles(1610) == 1


class TestCardinal:
    @pytest.mark.parametrize("degrees,cardinal", [
        (0, "N"),
        (360, "N"),
        (11, "N"),
        (12, "NNE"),
        (80, "E"),
        (180, "S"),
        (200, "SSW"),
        (340, "NNW"),
        (350, "N"),
    ])
    def test_nearest_bucket(self, degrees, cardinal):
        assert degrees_to_cardinal(degrees) == cardinal

    def test_bucket_boundary_rounds_up(self):
        assert degrees_to_cardinal(11.25) == "NNE"


class TestRelativeHumidity:
    """Matches the humidity NOAA publishes in its decoded reports."""

    @pytest.mark.parametrize("temp,dew,expected", [
        (29, 22, 65),
        (27, 19, 61),
        (18, 6, 45),
        (5.6, 3.9, 88),
        (23, 14, 56),
    ])
    def test_published_samples(self, temp, dew, expected):
        assert relative_humidity(temp, dew) == expected

    def test_saturated(self):
        assert relative_humidity(10, 10) == 100

    def test_capped_at_100(self):
        assert relative_humidity(10, 12) == 100


# ═══════════════════════════════════════════════════════════════════════
# Code tables
# ═══════════════════════════════════════════════════════════════════════


class TestSkyCover:
    def test_phrases(self):
        assert SKY_PHRASES[SkyCover.CLR] == "clear"
        assert SKY_PHRASES[SkyCover.SKC] == "clear"
        assert SKY_PHRASES[SkyCover.FEW] == "few clouds"
        assert SKY_PHRASES[SkyCover.SCT] == "partly cloudy"
        assert SKY_PHRASES[SkyCover.BKN] == "mostly cloudy"
        assert SKY_PHRASES[SkyCover.OVC] == "overcast"

    def test_every_member_has_a_phrase(self):
        assert set(SKY_PHRASES) == set(SkyCover)

    def test_governing_layer(self):
        layers = [SkyCover.SCT, SkyCover.BKN, SkyCover.FEW]
        assert governing_sky_cover(layers) is SkyCover.BKN

    def test_tie_goes_to_first_layer(self):
        layers = [SkyCover.CLR, SkyCover.SKC]
        assert governing_sky_cover(layers) is SkyCover.CLR


class TestWeatherGroups:
    @pytest.mark.parametrize("token,phrase", [
        ("-DZ", "light drizzle"),
        ("PRFG", "partial fog"),
        ("DU", "widespread dust"),
        ("BR", "mist"),
        ("RA", "rain"),
        ("-SHRA", "light rain showers"),
        ("+TSRA", "thunderstorm with heavy rain"),
        ("TS", "thunderstorm"),
        ("+TS", "heavy thunderstorm"),
        ("VCTS", "thunderstorm in the vicinity"),
        ("VCSH", "showers in the vicinity"),
        ("FZFG", "freezing fog"),
        ("BCFG", "patches of fog"),
        ("BLSN", "blowing snow"),
        ("-RASN", "light rain and snow"),
        ("+FC", "tornado/waterspout"),
    ])
    def test_phrases(self, token, phrase):
        assert describe_weather_group(token) == phrase

    @pytest.mark.parametrize("token", ["A3005", "AUTO", "NOSIG", "-", "VC", "RMK", "KSEA"])
    def test_non_weather_tokens(self, token):
        assert describe_weather_group(token) is None

    def test_tables_are_exhaustive(self):
        assert set(DESCRIPTOR_PHRASES) == set(Descriptor)
        assert set(PHENOMENON_PHRASES) == set(Phenomenon)
