# harvest_service/generation/candidates.py
"""
Candidate identifier generation.

The site has no listing API, so the scan walks the whole
year x venue x meeting x day x race space. Order matters because the run
is capped: meetings closest to "now" come first, the opening days of
nearby meetings come before the late days of any one meeting, and busy
venues go before quiet ones. Meeting numbers reset every January, so
early in the year the tail of the previous year's meetings is added to
the space.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List, Optional, Tuple

from ..models import CandidateId


@dataclass(frozen=True)
class IdentifierSpace:
    venue_codes: Tuple[str, ...]
    meeting_range: Tuple[int, int] = (1, 6)
    day_range: Tuple[int, int] = (1, 12)
    race_range: Tuple[int, int] = (1, 12)
    days_back: int = 30
    previous_year_meetings: int = 2

    @classmethod
    def from_settings(cls, settings) -> "IdentifierSpace":
        return cls(
            venue_codes=tuple(settings.VENUE_CODES),
            meeting_range=tuple(settings.MEETING_RANGE),
            day_range=tuple(settings.DAY_RANGE),
            race_range=tuple(settings.RACE_RANGE),
            days_back=settings.DAYS_BACK,
            previous_year_meetings=settings.PREVIOUS_YEAR_MEETINGS,
        )


def estimated_meeting(reference: date, max_meeting: int) -> int:
    """Meeting number a venue is likely running on the reference date."""
    days_in_year = 366 if calendar.isleap(reference.year) else 365
    ordinal = reference.timetuple().tm_yday - 1
    return 1 + ordinal * max_meeting // days_in_year


def reaches_previous_year(reference: date, days_back: int) -> bool:
    return (reference - timedelta(days=days_back)).year < reference.year


def meeting_order(space: IdentifierSpace, reference: date) -> List[Tuple[int, int]]:
    """
    (year, meeting) pairs ordered by distance from the estimated current
    meeting on a continuous timeline; ties go to the earlier meeting.
    """
    low, high = space.meeting_range
    if low > high:
        return []

    timeline = [(reference.year, m, m) for m in range(low, high + 1)]
    if space.previous_year_meetings and reaches_previous_year(reference, space.days_back):
        tail_start = max(low, high - space.previous_year_meetings + 1)
        timeline += [(reference.year - 1, m, m - high) for m in range(tail_start, high + 1)]

    current = estimated_meeting(reference, high)
    timeline.sort(key=lambda item: (abs(item[2] - current), item[2]))
    return [(year, meeting) for year, meeting, _ in timeline]


def schedule(space: IdentifierSpace, reference: date) -> List[Tuple[int, int, int]]:
    """
    (year, meeting, day) slots in scan order. Slots are walked along
    diagonals of meeting rank + day offset, so a capped run covers the
    first days of several nearby meetings before the late days of the
    current one. Within a diagonal the nearer meeting goes first.
    """
    day_low, day_high = space.day_range
    days = list(range(day_low, day_high + 1))
    tiers = meeting_order(space, reference)

    slots = [(rank, offset) for rank in range(len(tiers)) for offset in range(len(days))]
    slots.sort(key=lambda slot: (slot[0] + slot[1], slot[0]))
    return [(*tiers[rank], days[offset]) for rank, offset in slots]


def iter_candidates(space: IdentifierSpace, reference: date) -> Iterator[CandidateId]:
    seen = set()
    race_low, race_high = space.race_range

    for year, meeting, day in schedule(space, reference):
        for venue in space.venue_codes:
            for race_number in range(race_low, race_high + 1):
                candidate = CandidateId(year, venue, meeting, day, race_number)
                if candidate in seen:
                    continue
                seen.add(candidate)
                yield candidate


def generate_candidates(
    space: IdentifierSpace,
    reference: date,
    limit: Optional[int] = None,
) -> List[CandidateId]:
    """Ordered, duplicate-free candidates, cut to `limit` when given."""
    candidates: List[CandidateId] = []
    for candidate in iter_candidates(space, reference):
        if limit is not None and len(candidates) >= limit:
            break
        candidates.append(candidate)
    return candidates
