"""NOAA METAR fetcher: retrieves raw reports from tgftp.nws.noaa.gov.

The station files look like::

    2023/12/31 03:53
    KYKM 310353Z AUTO 00000KT 5SM BR OVC025 06/04 A3005 RMK AO2 SLP185 T00560039

The first line is the observation time (UTC); the second is the report.
No retries: a failed request is reported once as a FetchError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import httpx

from noaa_weather.config import DEFAULT_CONFIG, Config
from noaa_weather.errors import StationNotFoundError, TransportError
from noaa_weather.metar_parser import parse_metar
from noaa_weather.schemas import WeatherInfo

logger = logging.getLogger(__name__)

# e.g. "2023/12/31 03:53" on the first line of NWS METAR text files.
_OBS_TIME_RE = re.compile(r"^(\d{4})/(\d{2})/(\d{2})\s+(\d{2}):(\d{2})$")


@dataclass(frozen=True)
class RawReport:
    """Raw METAR text plus the observation time from the feed header."""

    station_code: str
    observed_at: Optional[datetime]
    text: str


def split_station_file(station_code: str, body: str) -> RawReport:
    """Separate the NWS header line from the report line(s)."""
    lines = [line.strip() for line in body.strip().splitlines() if line.strip()]
    if not lines:
        raise StationNotFoundError(station_code)

    observed_at = None
    m = _OBS_TIME_RE.match(lines[0])
    if m:
        year, month, day, hour, minute = (int(x) for x in m.groups())
        observed_at = datetime(year, month, day, hour, minute)
        lines = lines[1:]
    if not lines:
        raise StationNotFoundError(station_code)

    return RawReport(
        station_code=station_code,
        observed_at=observed_at,
        text=" ".join(lines),
    )


def _parse_report(report: RawReport) -> WeatherInfo:
    reference = report.observed_at.date() if report.observed_at else None
    return parse_metar(report.text, reference_date=reference)


class MetarFetcher:
    """Fetches raw METAR reports, blocking or async.

    Follows the client pattern: one httpx.Client per instance, closed
    via close() or the context manager. Async calls open a short-lived
    AsyncClient each, so concurrent fetches share no state. An injected
    transport must also be an httpx.AsyncBaseTransport for the async
    calls (httpx.MockTransport is both); otherwise they raise TypeError.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        config: Config = DEFAULT_CONFIG,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._timeout = timeout if timeout is not None else config.fetch.timeout_seconds
        self._headers = {
            "User-Agent": config.fetch.user_agent,
            "Accept": "text/plain, */*",
        }
        self._transport = transport
        self._client = httpx.Client(
            timeout=self._timeout, headers=self._headers, transport=transport,
        )
        logger.debug("MetarFetcher initialized (base %s)", config.fetch.base_url)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def station_url(self, station_code: str) -> str:
        return f"{self._config.fetch.base_url.rstrip('/')}/{station_code.upper()}.TXT"

    @staticmethod
    def _check_response(station_code: str, resp: httpx.Response) -> RawReport:
        if resp.status_code == 404:
            raise StationNotFoundError(station_code)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(station_code, f"HTTP {resp.status_code}") from exc
        return split_station_file(station_code, resp.text)

    # ── Blocking ─────────────────────────────────────────────────────

    def fetch(self, station_code: str) -> RawReport:
        """Fetch the latest raw report for a station (e.g. 'KYKM')."""
        url = self.station_url(station_code)
        logger.debug("GET %s", url)
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(station_code, str(exc) or type(exc).__name__) from exc
        return self._check_response(station_code, resp)

    def get_weather(self, station_code: str) -> WeatherInfo:
        """Fetch and decode, using the feed's header date for year/month."""
        return _parse_report(self.fetch(station_code))

    # ── Async ────────────────────────────────────────────────────────

    async def fetch_async(self, station_code: str) -> RawReport:
        url = self.station_url(station_code)
        logger.debug("GET %s (async)", url)
        if self._transport is not None and not isinstance(
            self._transport, httpx.AsyncBaseTransport
        ):
            raise TypeError(
                f"{type(self._transport).__name__} cannot serve async requests; "
                "pass an httpx.AsyncBaseTransport"
            )
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, headers=self._headers, transport=self._transport,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(station_code, str(exc) or type(exc).__name__) from exc
        return self._check_response(station_code, resp)

    async def get_weather_async(self, station_code: str) -> WeatherInfo:
        return _parse_report(await self.fetch_async(station_code))
