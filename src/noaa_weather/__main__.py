"""CLI entry point: run via `python -m noaa_weather`.

Subcommands:
  info   Fetch and decode the latest METAR for a station (default)
  parse  Decode a raw METAR report given on the command line
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from datetime import date

from dotenv import load_dotenv

from noaa_weather.config import DEFAULT_CONFIG, Config
from noaa_weather.errors import FetchError, ParseError
from noaa_weather.schemas import WeatherInfo

logger = logging.getLogger("noaa_weather")


def _output(text: str) -> None:
    """Write text to stdout (avoids bare print() for lint compliance)."""
    sys.stdout.write(text + "\n")


def _render(info: WeatherInfo, as_json: bool) -> None:
    from noaa_weather.output import format_weather, format_weather_json

    _output(format_weather_json(info) if as_json else format_weather(info))


def _config_from_env(base: Config = DEFAULT_CONFIG) -> Config:
    """Apply NOAA_METAR_BASE_URL / NOAA_TIMEOUT_SECONDS overrides."""
    fetch = base.fetch
    base_url = os.environ.get("NOAA_METAR_BASE_URL", "")
    if base_url:
        fetch = replace(fetch, base_url=base_url)
    timeout = os.environ.get("NOAA_TIMEOUT_SECONDS", "")
    if timeout:
        try:
            fetch = replace(fetch, timeout_seconds=float(timeout))
        except ValueError:
            logger.warning("Ignoring invalid NOAA_TIMEOUT_SECONDS=%r", timeout)
    return replace(base, fetch=fetch)


# ── Info subcommand ──────────────────────────────────────────────────


def _run_info(station_id: str, as_json: bool, config: Config) -> int:
    """Fetch the latest report for a station and print it decoded."""
    from noaa_weather.fetcher import MetarFetcher

    logger.info("Fetching METAR for %s", station_id)
    with MetarFetcher(config=config) as fetcher:
        try:
            info = fetcher.get_weather(station_id)
        except FetchError as exc:
            logger.error("%s", exc)
            return 1
        except ParseError as exc:
            logger.error("Could not decode report for %s: %s", station_id, exc)
            return 1

    _render(info, as_json)
    return 0


# ── Parse subcommand ─────────────────────────────────────────────────


def _run_parse(report: str, reference_date: date | None, as_json: bool) -> int:
    from noaa_weather.metar_parser import parse_metar

    try:
        info = parse_metar(report, reference_date=reference_date)
    except ParseError as exc:
        logger.error("Could not decode report: %s", exc)
        return 1

    _render(info, as_json)
    return 0


# ── Main with argparse ───────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and dispatch to the appropriate subcommand.

    Parameters
    ----------
    argv : list of CLI args. Defaults to [] (runs 'info' for the
           default station). Pass sys.argv[1:] for real CLI usage.
    """
    if argv is None:
        argv = []
    config = DEFAULT_CONFIG

    # -v is accepted before or after the subcommand; SUPPRESS keeps the
    # subparser from resetting a flag given to the main parser.
    verbose_parent = argparse.ArgumentParser(add_help=False)
    verbose_parent.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Turn on verbose (DEBUG) logging",
    )

    parser = argparse.ArgumentParser(
        prog="noaa_weather",
        description="Decode NOAA METAR weather reports",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Turn on verbose (DEBUG) logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    # info subcommand (default)
    info_parser = subparsers.add_parser(
        "info", help="Display weather information for a station",
        parents=[verbose_parent],
    )
    info_parser.add_argument(
        "--station-id", type=str, default=config.cli.default_station_id,
        help=f"Station code (default: {config.cli.default_station_id})",
    )
    info_parser.add_argument(
        "--json", action="store_true", help="Print the record as JSON",
    )

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse", help="Decode a raw METAR report without fetching",
        parents=[verbose_parent],
    )
    parse_parser.add_argument("report", type=str, help="Raw METAR text (quote it)")
    parse_parser.add_argument(
        "--date", type=date.fromisoformat, default=None,
        help="Reference date YYYY-MM-DD for year/month (default: today, UTC)",
    )
    parse_parser.add_argument(
        "--json", action="store_true", help="Print the record as JSON",
    )

    args = parser.parse_args(argv)

    load_dotenv(config.cli.env_file)
    # Configure logging early; stdout is reserved for the report itself.
    log_level = "DEBUG" if args.verbose else os.environ.get("LOGLEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # Silence httpx request/response chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if args.command is None:
        return _run_info(config.cli.default_station_id, False, _config_from_env(config))
    elif args.command == "info":
        return _run_info(args.station_id, args.json, _config_from_env(config))
    elif args.command == "parse":
        return _run_parse(args.report, args.date, args.json)

    parser.print_help()
    return 1


def cli() -> None:
    """Console-script entry point."""
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
