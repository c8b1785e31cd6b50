# harvest_service/parsing/constants.py
"""Static lookup tables shared by the page parsers."""

from types import MappingProxyType
from typing import Final, Mapping
from zoneinfo import ZoneInfo

# JRA venue code -> display name
TRACK_MAP: Final[Mapping[str, str]] = MappingProxyType({
    "01": "Sapporo",
    "02": "Hakodate",
    "03": "Fukushima",
    "04": "Niigata",
    "05": "Tokyo",
    "06": "Nakayama",
    "07": "Chukyo",
    "08": "Kyoto",
    "09": "Hanshin",
    "10": "Kokura",
})

# Race dates on the site are JRA local dates
RACE_TIMEZONE: Final[ZoneInfo] = ZoneInfo("Asia/Tokyo")

SITE_BRAND: Final[str] = "netkeiba"

TITLE_SEPARATORS: Final[tuple] = ("|", "｜", " - ", "–")
MIN_TITLE_LENGTH: Final[int] = 3

SURFACE_CODES: Final[Mapping[str, str]] = MappingProxyType({
    "T": "Turf",
    "D": "Dirt",
})
DEFAULT_SURFACE: Final[str] = "Turf"
UNKNOWN_DISTANCE: Final[str] = "Unknown"

POSITION_MIN: Final[int] = 1
POSITION_MAX: Final[int] = 20
