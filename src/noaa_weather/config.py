"""Central configuration for the NOAA METAR weather client."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FetchConfig:
    """Where and how raw METAR reports are retrieved."""

    base_url: str = "https://tgftp.nws.noaa.gov/data/observations/metar/stations"
    timeout_seconds: float = 15.0
    user_agent: str = "(noaa-weather, contact@example.com)"


@dataclass(frozen=True)
class CliConfig:
    default_station_id: str = "VOBL"
    env_file: str = ".env.local"


@dataclass(frozen=True)
class Config:
    """Top-level configuration aggregating all sub-configs."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    cli: CliConfig = field(default_factory=CliConfig)


# Singleton default config: import this throughout the project.
DEFAULT_CONFIG = Config()
