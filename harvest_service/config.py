# harvest_service/config.py
import re
from functools import lru_cache
from typing import Any
from typing import List
from typing import Literal
from typing import Tuple

import structlog
from pydantic import Field
from pydantic import ValidationError
from pydantic import model_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsError

from .core.exceptions import ConfigError

VENUE_CODE_RE = re.compile(r"^\d{2}$")

# Venues ordered by race volume, busiest first.
DEFAULT_VENUE_CODES = ["05", "06", "08", "09", "07", "04", "03", "10", "01", "02"]


class Settings(BaseSettings):
    # --- Target Site ---
    BASE_URL: str = "https://en.netkeiba.com"
    PAGE_KIND: Literal["entry", "result"] = "entry"

    # --- Fetching & Pacing ---
    BATCH_SIZE: int = Field(12, ge=1, le=100)
    BATCH_DELAY_MS: int = Field(300, ge=0)
    MAX_CANDIDATES: int = Field(1500, ge=0)
    REQUEST_TIMEOUT: float = Field(10.0, gt=0)

    # --- Date Window (days relative to now) ---
    DAYS_BACK: int = Field(30, ge=0)
    DAYS_FORWARD: int = Field(30, ge=0)

    # --- Extraction ---
    MIN_HORSES: int = Field(4, ge=1, le=20)
    JOCKEY_STRICT: bool = True

    # --- Identifier Space ---
    VENUE_CODES: List[str] = Field(default_factory=lambda: list(DEFAULT_VENUE_CODES))
    MEETING_RANGE: Tuple[int, int] = (1, 6)
    DAY_RANGE: Tuple[int, int] = (1, 12)
    RACE_RANGE: Tuple[int, int] = (1, 12)
    PREVIOUS_YEAR_MEETINGS: int = Field(2, ge=0)

    # --- Output ---
    OUTPUT_DIR: str = "data"
    STRICT_MODE: bool = False

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}

    @model_validator(mode="after")
    def check_identifier_space(self) -> "Settings":
        """
        Rejects identifier-space settings that cannot be rendered into a
        12-digit race id. Every part of the id is two digits wide, so all
        ranges must lie in 1..99 and be ordered low to high.
        """
        for code in self.VENUE_CODES:
            if not VENUE_CODE_RE.match(code):
                raise ValueError(f"VENUE_CODES entry {code!r} is not a two-digit code")
        if len(set(self.VENUE_CODES)) != len(self.VENUE_CODES):
            raise ValueError("VENUE_CODES contains duplicates")

        for name in ("MEETING_RANGE", "DAY_RANGE", "RACE_RANGE"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} is inverted: {low} > {high}")
            if low < 1 or high > 99:
                raise ValueError(f"{name} must lie within 1..99, got {low}..{high}")

        if self.PREVIOUS_YEAR_MEETINGS > self.MEETING_RANGE[1]:
            raise ValueError("PREVIOUS_YEAR_MEETINGS exceeds the highest meeting number")
        return self

    @property
    def batch_delay(self) -> float:
        return self.BATCH_DELAY_MS / 1000


def load_settings(**overrides: Any) -> Settings:
    """
    Builds settings from the environment plus explicit overrides, turning
    validation failures into a ConfigError so callers can abort the run.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ConfigError(first.get("msg", str(e)), field=field) from e
    except SettingsError as e:
        # Raised while decoding environment or .env values, before validation
        raise ConfigError(str(e)) from e


@lru_cache()
def get_settings() -> Settings:
    log = structlog.get_logger(__name__)
    settings = load_settings()
    log.debug(
        "settings_loaded",
        venues=len(settings.VENUE_CODES),
        batch_size=settings.BATCH_SIZE,
        max_candidates=settings.MAX_CANDIDATES,
    )
    return settings
