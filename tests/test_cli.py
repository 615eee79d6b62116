"""Tests for configuration defaults, console rendering and the CLI."""

from __future__ import annotations

import json
import logging
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from noaa_weather.__main__ import _config_from_env, main
from noaa_weather.config import DEFAULT_CONFIG, Config
from noaa_weather.errors import StationNotFoundError, TransportError
from noaa_weather.metar_parser import parse_metar
from noaa_weather.output import format_weather, format_weather_json

SCENARIO = "301330Z 08008KT 7SM CLR 23/14 A3005"
GUSTY = "KDEN 121753Z 27015G25KT P6SM -SHRA SCT080 M05/M10 A3010"


# ═══════════════════════════════════════════════════════════════════════
# Config
# ═══════════════════════════════════════════════════════════════════════


def test_config_defaults():
    c = DEFAULT_CONFIG
    assert c.fetch.base_url == "https://tgftp.nws.noaa.gov/data/observations/metar/stations"
    assert c.fetch.timeout_seconds == 15.0
    assert c.cli.default_station_id == "VOBL"


def test_config_frozen():
    c = Config()
    try:
        c.fetch = None
        assert False, "Should be frozen"
    except AttributeError:
        pass


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("NOAA_METAR_BASE_URL", "https://mirror.example.com/metar")
    monkeypatch.setenv("NOAA_TIMEOUT_SECONDS", "3.5")
    config = _config_from_env()
    assert config.fetch.base_url == "https://mirror.example.com/metar"
    assert config.fetch.timeout_seconds == 3.5
    assert DEFAULT_CONFIG.fetch.timeout_seconds == 15.0


def test_config_from_env_ignores_bad_timeout(monkeypatch):
    monkeypatch.delenv("NOAA_METAR_BASE_URL", raising=False)
    monkeypatch.setenv("NOAA_TIMEOUT_SECONDS", "soon")
    config = _config_from_env()
    assert config == DEFAULT_CONFIG


# ═══════════════════════════════════════════════════════════════════════
# Rendering
# ═══════════════════════════════════════════════════════════════════════


class TestFormatWeather:
    def test_key_value_lines(self):
        text = format_weather(parse_metar(SCENARIO, date(2023, 12, 1)))
        lines = text.splitlines()
        assert lines[0].startswith("Station:")
        assert lines[0].endswith("not reported")
        assert "2023.12.30 1330 UTC" in text
        assert "from the E (080 degrees) at 9 MPH (8 KT)" in text
        assert "7 mile(s):0" in text
        assert "73 F (23 C)" in text
        assert "57 F (14 C)" in text
        assert "56%" in text
        assert "1018 hPa" in text

    def test_gusts_and_weather(self):
        text = format_weather(parse_metar(GUSTY, date(2023, 12, 1)))
        assert "gusting to 29 MPH (25 KT)" in text
        assert "light rain showers" in text

    def test_calm(self):
        raw = "KYKM 310353Z 00000KT 5SM OVC025 06/04 A3005"
        text = format_weather(parse_metar(raw, date(2023, 12, 1)))
        assert "Wind:" in text
        assert "Calm" in text

    def test_json(self):
        data = json.loads(format_weather_json(parse_metar(SCENARIO, date(2023, 12, 1))))
        assert data["wind"]["azimuth"] == "080"
        assert data["station"] is None
        assert data["temperature"] == {"celsius": 23, "fahrenheit": 73}


# ═══════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════


class TestParseCommand:
    def test_parse_prints_report(self, capsys):
        rc = main(["parse", SCENARIO, "--date", "2023-12-30"])
        assert rc == 0
        out = capsys.readouterr().out
        assert "Visibility:" in out
        assert "7 mile(s):0" in out

    def test_parse_json(self, capsys):
        rc = main(["-v", "parse", SCENARIO, "--date", "2023-12-30", "--json"])
        assert rc == 0
        data = json.loads(capsys.readouterr().out)
        assert data["wind"]["cardinal"] == "E"
        assert data["weather_time"]["year"] == 2023

    @pytest.mark.parametrize("argv", [
        ["-v", "parse", SCENARIO, "--date", "2023-12-30"],
        ["parse", SCENARIO, "--date", "2023-12-30", "-v"],
        ["parse", "--verbose", SCENARIO],
    ])
    def test_verbose_before_or_after_subcommand(self, argv):
        with patch("noaa_weather.__main__.logging.basicConfig") as basic_config:
            assert main(argv) == 0
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_default_log_level(self, monkeypatch):
        monkeypatch.delenv("LOGLEVEL", raising=False)
        with patch("noaa_weather.__main__.logging.basicConfig") as basic_config:
            assert main(["parse", SCENARIO, "--date", "2023-12-30"]) == 0
        assert basic_config.call_args.kwargs["level"] == logging.WARNING

    def test_parse_failure_exits_nonzero(self, capsys):
        rc = main(["parse", "KXYZ 08008KT 7SM CLR 23/14 A3005"])
        assert rc == 1
        assert capsys.readouterr().out == ""


class TestInfoCommand:
    def _patched_fetcher(self, **get_weather_kwargs):
        fetcher = MagicMock()
        fetcher.get_weather = MagicMock(**get_weather_kwargs)
        cls = MagicMock()
        cls.return_value.__enter__.return_value = fetcher
        return cls, fetcher

    def test_info_success(self, capsys):
        info = parse_metar("VOBL 161030Z 20010KT 4SM SCT020 27/19 Q1009", date(2021, 5, 16))
        cls, fetcher = self._patched_fetcher(return_value=info)
        with patch("noaa_weather.fetcher.MetarFetcher", cls):
            rc = main(["info", "--station-id", "VOBL"])
        assert rc == 0
        fetcher.get_weather.assert_called_once_with("VOBL")
        out = capsys.readouterr().out
        assert "from the SSW (200 degrees) at 12 MPH (10 KT)" in out
        assert "61%" in out

    def test_default_station(self):
        cls, fetcher = self._patched_fetcher(side_effect=StationNotFoundError("VOBL"))
        with patch("noaa_weather.fetcher.MetarFetcher", cls):
            main(["info"])
        fetcher.get_weather.assert_called_once_with("VOBL")

    def test_no_subcommand_runs_info(self):
        cls, fetcher = self._patched_fetcher(side_effect=StationNotFoundError("VOBL"))
        with patch("noaa_weather.fetcher.MetarFetcher", cls):
            rc = main([])
        assert rc == 1
        fetcher.get_weather.assert_called_once_with("VOBL")

    def test_not_found_exits_nonzero(self, capsys):
        cls, _ = self._patched_fetcher(side_effect=StationNotFoundError("ZZZZ"))
        with patch("noaa_weather.fetcher.MetarFetcher", cls):
            rc = main(["info", "--station-id", "ZZZZ"])
        assert rc == 1
        assert capsys.readouterr().out == ""

    def test_transport_error_exits_nonzero(self):
        cls, _ = self._patched_fetcher(side_effect=TransportError("VOBL", "timeout"))
        with patch("noaa_weather.fetcher.MetarFetcher", cls):
            assert main(["info"]) == 1

    def test_parse_error_exits_nonzero(self):
        from noaa_weather.errors import MissingRequiredGroupError

        cls, _ = self._patched_fetcher(side_effect=MissingRequiredGroupError("wind"))
        with patch("noaa_weather.fetcher.MetarFetcher", cls):
            assert main(["info"]) == 1
