"""METAR code tables for sky cover and present weather.

Each code family is a closed ``Enum`` paired with an explicit phrase
table; the tables are checked for completeness at import time.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

# ── Sky cover ────────────────────────────────────────────────────────


class SkyCover(str, Enum):
    SKC = "SKC"
    CLR = "CLR"
    NCD = "NCD"   # no clouds detected (automated)
    NSC = "NSC"   # no significant cloud
    FEW = "FEW"
    SCT = "SCT"
    BKN = "BKN"
    OVC = "OVC"
    VV = "VV"     # vertical visibility, sky obscured


SKY_PHRASES: dict[SkyCover, str] = {
    SkyCover.SKC: "clear",
    SkyCover.CLR: "clear",
    SkyCover.NCD: "clear",
    SkyCover.NSC: "clear",
    SkyCover.FEW: "few clouds",
    SkyCover.SCT: "partly cloudy",
    SkyCover.BKN: "mostly cloudy",
    SkyCover.OVC: "overcast",
    SkyCover.VV: "obscured",
}

# Higher rank governs the reported sky condition.
SKY_COVERAGE_RANK: dict[SkyCover, int] = {
    SkyCover.SKC: 0,
    SkyCover.CLR: 0,
    SkyCover.NCD: 0,
    SkyCover.NSC: 0,
    SkyCover.FEW: 1,
    SkyCover.SCT: 2,
    SkyCover.BKN: 3,
    SkyCover.OVC: 4,
    SkyCover.VV: 5,
}


def governing_sky_cover(layers: list[SkyCover]) -> SkyCover:
    """Pick the layer with the highest coverage.

    Ties go to the first (lowest) layer in report order.
    """
    best = layers[0]
    for layer in layers[1:]:
        if SKY_COVERAGE_RANK[layer] > SKY_COVERAGE_RANK[best]:
            best = layer
    return best


# ── Present weather ──────────────────────────────────────────────────


class Intensity(str, Enum):
    LIGHT = "-"
    HEAVY = "+"
    VICINITY = "VC"


class Descriptor(str, Enum):
    SHALLOW = "MI"
    PARTIAL = "PR"
    PATCHES = "BC"
    LOW_DRIFTING = "DR"
    BLOWING = "BL"
    SHOWERS = "SH"
    THUNDERSTORM = "TS"
    FREEZING = "FZ"


class Phenomenon(str, Enum):
    DRIZZLE = "DZ"
    RAIN = "RA"
    SNOW = "SN"
    SNOW_GRAINS = "SG"
    ICE_CRYSTALS = "IC"
    ICE_PELLETS = "PL"
    HAIL = "GR"
    SMALL_HAIL = "GS"
    UNKNOWN_PRECIPITATION = "UP"
    MIST = "BR"
    FOG = "FG"
    SMOKE = "FU"
    VOLCANIC_ASH = "VA"
    DUST = "DU"
    SAND = "SA"
    HAZE = "HZ"
    SPRAY = "PY"
    DUST_WHIRLS = "PO"
    SQUALLS = "SQ"
    FUNNEL_CLOUD = "FC"
    SANDSTORM = "SS"
    DUSTSTORM = "DS"


INTENSITY_PHRASES: dict[Intensity, str] = {
    Intensity.LIGHT: "light",
    Intensity.HEAVY: "heavy",
    Intensity.VICINITY: "in the vicinity",
}

DESCRIPTOR_PHRASES: dict[Descriptor, str] = {
    Descriptor.SHALLOW: "shallow",
    Descriptor.PARTIAL: "partial",
    Descriptor.PATCHES: "patches of",
    Descriptor.LOW_DRIFTING: "low drifting",
    Descriptor.BLOWING: "blowing",
    Descriptor.SHOWERS: "showers",
    Descriptor.THUNDERSTORM: "thunderstorm",
    Descriptor.FREEZING: "freezing",
}

PHENOMENON_PHRASES: dict[Phenomenon, str] = {
    Phenomenon.DRIZZLE: "drizzle",
    Phenomenon.RAIN: "rain",
    Phenomenon.SNOW: "snow",
    Phenomenon.SNOW_GRAINS: "snow grains",
    Phenomenon.ICE_CRYSTALS: "ice crystals",
    Phenomenon.ICE_PELLETS: "ice pellets",
    Phenomenon.HAIL: "hail",
    Phenomenon.SMALL_HAIL: "small hail",
    Phenomenon.UNKNOWN_PRECIPITATION: "unknown precipitation",
    Phenomenon.MIST: "mist",
    Phenomenon.FOG: "fog",
    Phenomenon.SMOKE: "smoke",
    Phenomenon.VOLCANIC_ASH: "volcanic ash",
    Phenomenon.DUST: "widespread dust",
    Phenomenon.SAND: "sand",
    Phenomenon.HAZE: "haze",
    Phenomenon.SPRAY: "spray",
    Phenomenon.DUST_WHIRLS: "dust/sand whirls",
    Phenomenon.SQUALLS: "squalls",
    Phenomenon.FUNNEL_CLOUD: "funnel cloud",
    Phenomenon.SANDSTORM: "sandstorm",
    Phenomenon.DUSTSTORM: "duststorm",
}

for _table, _enum in (
    (SKY_PHRASES, SkyCover),
    (SKY_COVERAGE_RANK, SkyCover),
    (INTENSITY_PHRASES, Intensity),
    (DESCRIPTOR_PHRASES, Descriptor),
    (PHENOMENON_PHRASES, Phenomenon),
):
    _missing = set(_enum) - set(_table)
    if _missing:
        raise RuntimeError(f"{_enum.__name__} members without a table entry: {_missing}")


def _alternation(members) -> str:
    return "|".join(re.escape(m.value) for m in members)


# Intensity, one optional descriptor, then zero or more two-letter phenomena.
WEATHER_GROUP_RE = re.compile(
    rf"^(?P<intensity>{_alternation(Intensity)})?"
    rf"(?P<descriptor>{_alternation(Descriptor)})?"
    rf"(?P<phenomena>(?:{_alternation(Phenomenon)})*)$"
)

NO_SIGNIFICANT_WEATHER = "NSW"


def describe_weather_group(token: str) -> Optional[str]:
    """Turn one present-weather group into a phrase.

    Returns None when the token is not a present-weather group.

    >>> describe_weather_group("-DZ")
    'light drizzle'
    >>> describe_weather_group("VCSH")
    'showers in the vicinity'
    """
    m = WEATHER_GROUP_RE.match(token)
    if not m or not (m.group("descriptor") or m.group("phenomena")):
        return None

    raw_phenomena = m.group("phenomena")
    phenomena = [
        Phenomenon(raw_phenomena[i:i + 2]) for i in range(0, len(raw_phenomena), 2)
    ]
    intensity = Intensity(m.group("intensity")) if m.group("intensity") else None
    descriptor = Descriptor(m.group("descriptor")) if m.group("descriptor") else None

    core = " and ".join(PHENOMENON_PHRASES[p] for p in phenomena)
    if intensity is Intensity.HEAVY and phenomena == [Phenomenon.FUNNEL_CLOUD]:
        # +FC is the code for a tornado or waterspout.
        core = "tornado/waterspout"
        intensity = None

    if descriptor is Descriptor.SHOWERS:
        core = f"{core} showers" if core else "showers"
    elif descriptor is not None and descriptor is not Descriptor.THUNDERSTORM:
        core = f"{DESCRIPTOR_PHRASES[descriptor]} {core}".rstrip()

    if intensity in (Intensity.LIGHT, Intensity.HEAVY):
        core = f"{INTENSITY_PHRASES[intensity]} {core}".rstrip()

    if descriptor is Descriptor.THUNDERSTORM:
        if phenomena:
            core = f"thunderstorm with {core}"
        else:
            core = f"{core} thunderstorm".lstrip()

    if intensity is Intensity.VICINITY:
        core = f"{core} {INTENSITY_PHRASES[intensity]}"

    return core
