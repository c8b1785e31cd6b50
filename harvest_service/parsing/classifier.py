# harvest_service/parsing/classifier.py
"""
Decides whether a fetched page is an in-window race page and pulls its
metadata (title, grade, date, distance, surface, venue).

Every check is fail-fast: the first failed check raises
ClassificationReject and no partial metadata is returned.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple

from ..core.exceptions import ClassificationReject
from ..models import CandidateId
from ..utils.text import clean_text
from .constants import (
    DEFAULT_SURFACE,
    MIN_TITLE_LENGTH,
    RACE_TIMEZONE,
    SITE_BRAND,
    SURFACE_CODES,
    TITLE_SEPARATORS,
    TRACK_MAP,
    UNKNOWN_DISTANCE,
)
from .document import RaceDocument

MONTHS = r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?"

GRADE_RE = re.compile(r"\(\s*(?:Jpn|G)\s*(I{1,3}|[1-3])\s*\)", re.IGNORECASE)
DAY_MONTH_YEAR_RE = re.compile(rf"\b(\d{{1,2}})\s+{MONTHS},?\s+(\d{{4}})\b", re.IGNORECASE)
MONTH_DAY_YEAR_RE = re.compile(rf"\b{MONTHS}\s+(\d{{1,2}}),?\s+(\d{{4}})\b", re.IGNORECASE)
NUMERIC_DATE_RE = re.compile(r"(\d{4})\s*[/.\-年]\s*(\d{1,2})\s*[/.\-月]\s*(\d{1,2})")
DISTANCE_CODE_RE = re.compile(r"\b([TD])\s?(\d{3,4})\s?m\b")
DISTANCE_WORD_RE = re.compile(r"\b(Turf|Dirt)\s*:?\s*(\d{3,4})\s?m\b", re.IGNORECASE)

ROMAN_GRADES = {"I": "1", "II": "2", "III": "3"}
MONTH_NUMBERS = {
    name: number
    for number, name in enumerate(
        ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"],
        start=1,
    )
}


def race_day(now: datetime) -> date:
    """Calendar date at the racecourse for the given instant."""
    return now.astimezone(RACE_TIMEZONE).date()


@dataclass(frozen=True)
class DateWindow:
    """Inclusive window of accepted race dates around a reference time."""

    days_back: int = 30
    days_forward: int = 30

    def bounds(self, now: datetime) -> Tuple[date, date]:
        today = race_day(now)
        return today - timedelta(days=self.days_back), today + timedelta(days=self.days_forward)

    def contains(self, race_date: date, now: datetime) -> bool:
        earliest, latest = self.bounds(now)
        return earliest <= race_date <= latest


@dataclass(frozen=True)
class RaceMetadata:
    title: str
    grade: Optional[str]
    date: date
    venue: str
    distance: str
    surface: str


def extract_title(document: RaceDocument) -> str:
    raw = document.title
    cut = len(raw)
    for sep in TITLE_SEPARATORS:
        idx = raw.find(sep)
        if idx != -1:
            cut = min(cut, idx)
    title = clean_text(raw[:cut])
    if len(title) < MIN_TITLE_LENGTH:
        title = document.first_heading
    return title


def extract_grade(raw_title: str) -> Optional[str]:
    match = GRADE_RE.search(raw_title)
    if not match:
        return None
    token = match.group(1).upper()
    return f"G{ROMAN_GRADES.get(token, token)}"


def _safe_date(year: str, month: int, day: str) -> Optional[date]:
    try:
        return date(int(year), month, int(day))
    except ValueError:
        return None


def _day_month_year(text: str) -> Optional[date]:
    match = DAY_MONTH_YEAR_RE.search(text)
    if match:
        return _safe_date(match.group(3), MONTH_NUMBERS[match.group(2)[:3].lower()], match.group(1))
    match = MONTH_DAY_YEAR_RE.search(text)
    if match:
        return _safe_date(match.group(3), MONTH_NUMBERS[match.group(1)[:3].lower()], match.group(2))
    return None


def _numeric_date(text: str) -> Optional[date]:
    match = NUMERIC_DATE_RE.search(text)
    if not match:
        return None
    return _safe_date(match.group(1), int(match.group(2)), match.group(3))


def date_sources(document: RaceDocument) -> List[Callable[[], Optional[date]]]:
    """Ordered fallback chain; the first source producing a date wins."""
    return [
        lambda: _day_month_year(document.title),
        lambda: _numeric_date(document.title),
        lambda: _numeric_date(document.body_text),
    ]


def extract_date(document: RaceDocument) -> Optional[date]:
    for source in date_sources(document):
        found = source()
        if found is not None:
            return found
    return None


def extract_distance(document: RaceDocument) -> Tuple[str, str]:
    text = document.body_text
    match = DISTANCE_CODE_RE.search(text)
    if match:
        return f"{match.group(2)}m", SURFACE_CODES[match.group(1)]
    match = DISTANCE_WORD_RE.search(text)
    if match:
        return f"{match.group(2)}m", match.group(1).capitalize()
    return UNKNOWN_DISTANCE, DEFAULT_SURFACE


def classify_page(
    document: RaceDocument,
    candidate: CandidateId,
    window: DateWindow,
    now: datetime,
) -> RaceMetadata:
    race_id = candidate.race_id

    title = extract_title(document)
    if len(title) < MIN_TITLE_LENGTH:
        raise ClassificationReject("missing title", race_id=race_id)
    if SITE_BRAND in title.lower():
        raise ClassificationReject(f"placeholder title {title!r}", race_id=race_id)

    venue = TRACK_MAP.get(candidate.venue_code)
    if venue is None:
        raise ClassificationReject(f"unknown venue code {candidate.venue_code}", race_id=race_id)

    race_date = extract_date(document)
    if race_date is None:
        raise ClassificationReject("no recoverable date", race_id=race_id)
    if not window.contains(race_date, now):
        raise ClassificationReject(f"date {race_date} outside window", race_id=race_id)

    distance, surface = extract_distance(document)
    return RaceMetadata(
        title=title,
        grade=extract_grade(document.title),
        date=race_date,
        venue=venue,
        distance=distance,
        surface=surface,
    )
