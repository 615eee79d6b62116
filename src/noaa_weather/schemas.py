"""Pydantic models for the decoded weather record.

Every model is frozen: a WeatherInfo is built once per parse and never
mutated afterwards.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WeatherTime(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    time: str                       # e.g. "1330 UTC"


class WindInfo(BaseModel):
    """Wind as reported, plus the derived cardinal point and mph."""

    model_config = ConfigDict(frozen=True)

    cardinal: str                   # "SSW", "Calm" or "Variable"
    azimuth: str                    # original 3-digit direction, or "VRB"
    mph: str
    knots: str
    gust_knots: Optional[str] = None
    gust_mph: Optional[str] = None


class Temperature(BaseModel):
    model_config = ConfigDict(frozen=True)

    celsius: int
    fahrenheit: int


class WeatherInfo(BaseModel):
    """Structured result of decoding one METAR report."""

    model_config = ConfigDict(frozen=True)

    station: Optional[str] = None
    weather_time: WeatherTime
    wind: WindInfo
    visibility: str                 # e.g. "4 mile(s):0"
    sky_condition: str              # e.g. "partly cloudy"
    weather: Optional[str] = None   # e.g. "light drizzle; partial fog"
    temperature: Temperature
    dewpoint: Temperature
    relative_humidity: str          # e.g. "61%"
    pressure: int                   # hPa
