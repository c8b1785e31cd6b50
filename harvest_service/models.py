# harvest_service/models.py

import re
from dataclasses import dataclass
from datetime import date
from datetime import datetime
from enum import Enum
from typing import Dict
from typing import List
from typing import Literal
from typing import Optional
from typing import Tuple

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

LETTER_RE = re.compile(r"[A-Za-z]")


class HarvestBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# --- Scan Keys & Fetch Results ---
@dataclass(frozen=True)
class CandidateId:
    """One structured key into the remote identifier space."""

    year: int
    venue_code: str
    meeting: int
    day: int
    race_number: int

    @property
    def race_id(self) -> str:
        return (
            f"{self.year:04d}{self.venue_code}{self.meeting:02d}"
            f"{self.day:02d}{self.race_number:02d}"
        )

    def __str__(self) -> str:
        return self.race_id


class FetchStatus(Enum):
    """Status of a single candidate lookup."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of fetching one candidate; produced once and never retried."""

    candidate: CandidateId
    status: FetchStatus
    url: str
    body: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, candidate: CandidateId, url: str, body: str) -> "FetchOutcome":
        return cls(candidate, FetchStatus.SUCCESS, url, body=body)

    @classmethod
    def not_found(cls, candidate: CandidateId, url: str) -> "FetchOutcome":
        return cls(candidate, FetchStatus.NOT_FOUND, url)

    @classmethod
    def transient(cls, candidate: CandidateId, url: str, error: str) -> "FetchOutcome":
        return cls(candidate, FetchStatus.TRANSIENT_ERROR, url, error=error)


# --- Core Data Models ---
class HorseEntry(HarvestBaseModel):
    position: int = Field(..., ge=1, le=20)
    name: str = Field(..., min_length=1, max_length=50)
    jockey: str = Field(..., min_length=4, max_length=30)

    @field_validator("name", "jockey")
    @classmethod
    def must_read_like_a_name(cls, value: str) -> str:
        if value.isdigit() or not LETTER_RE.search(value):
            raise ValueError(f"{value!r} does not contain a name")
        return value


class RaceRecord(HarvestBaseModel):
    id: int = 0
    title: str
    grade: Optional[Literal["G1", "G2", "G3"]] = None
    date: date
    venue: str
    distance: str = "Unknown"
    surface: Literal["Turf", "Dirt"] = "Turf"
    horses: List[HorseEntry]
    source_urls: List[str] = Field(default_factory=list, alias="sourceUrls")

    @field_validator("horses")
    @classmethod
    def horses_sorted_and_unique(cls, horses: List[HorseEntry]) -> List[HorseEntry]:
        positions = [h.position for h in horses]
        if len(set(positions)) != len(positions):
            raise ValueError("duplicate horse positions")
        if positions != sorted(positions):
            raise ValueError("horses must be sorted by position")
        return horses

    @property
    def is_graded(self) -> bool:
        return self.grade is not None

    def dedup_key(self) -> Tuple:
        return (
            self.date,
            self.venue,
            self.title.casefold(),
            tuple(h.name.casefold() for h in self.horses),
        )


class DateRange(HarvestBaseModel):
    earliest: date
    latest: date


class ScanSummary(HarvestBaseModel):
    last_updated: datetime = Field(..., alias="lastUpdated")
    total_races: int = Field(..., alias="totalRaces")
    graded_stakes: int = Field(..., alias="gradedStakes")
    date_range: Optional[DateRange] = Field(None, alias="dateRange")
    by_venue: Dict[str, int] = Field(default_factory=dict, alias="byVenue")
    by_date: Dict[str, int] = Field(default_factory=dict, alias="byDate")

    def to_payload(self) -> dict:
        """The summary object written next to the race list."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            include={"last_updated", "total_races", "graded_stakes", "date_range"},
        )
