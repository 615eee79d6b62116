"""Exception taxonomy for parsing and fetching METAR reports."""

from __future__ import annotations

from typing import Optional


# ── Parse errors ─────────────────────────────────────────────────────


class ParseError(ValueError):
    """Base class for every failure raised by the METAR parser."""


class EmptyInputError(ParseError):
    def __init__(self) -> None:
        super().__init__("Empty METAR report")


class MissingRequiredGroupError(ParseError):
    """A mandatory group (wind, visibility, ...) is absent from the report."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Missing required group: {field_name}")


class MalformedGroupError(ParseError):
    """A group was recognised for a field but could not be decoded."""

    def __init__(self, field_name: str, raw_token: str) -> None:
        self.field_name = field_name
        self.raw_token = raw_token
        super().__init__(f"Malformed {field_name} group: {raw_token!r}")


# ── Fetch errors ─────────────────────────────────────────────────────


class FetchError(Exception):
    """Base class for failures retrieving a raw report."""

    def __init__(self, station_code: str, message: str) -> None:
        self.station_code = station_code
        super().__init__(message)


class StationNotFoundError(FetchError):
    def __init__(self, station_code: str) -> None:
        super().__init__(station_code, f"No METAR report found for station {station_code}")


class TransportError(FetchError):
    """The request failed before a usable report came back."""

    def __init__(self, station_code: str, detail: Optional[str] = None) -> None:
        self.detail = detail
        message = f"Failed to fetch METAR report for {station_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(station_code, message)
