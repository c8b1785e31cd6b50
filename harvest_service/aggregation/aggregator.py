# harvest_service/aggregation/aggregator.py
"""
Collects validated race records as batches complete, assigns ids, drops
cross-scan duplicates, and produces the final ordering and summary.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import structlog

from ..models import DateRange, RaceRecord, ScanSummary

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HarvestResult:
    races: List[RaceRecord]
    summary: ScanSummary


def summarize(races: Sequence[RaceRecord], now: Optional[datetime] = None) -> ScanSummary:
    dates = [r.date for r in races]
    return ScanSummary(
        last_updated=now or datetime.now(timezone.utc),
        total_races=len(races),
        graded_stakes=sum(1 for r in races if r.is_graded),
        date_range=DateRange(earliest=min(dates), latest=max(dates)) if dates else None,
        by_venue=dict(Counter(r.venue for r in races)),
        by_date=dict(sorted(Counter(r.date.isoformat() for r in races).items())),
    )


class Aggregator:
    """Owns the only mutable collection of a run."""

    def __init__(self):
        self._records: List[RaceRecord] = []
        self._seen = set()
        self.duplicates = 0

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: RaceRecord) -> Optional[RaceRecord]:
        """
        Stores a copy of the record carrying the next sequential id.
        Returns None when an identical race was already received.
        """
        key = record.dedup_key()
        if key in self._seen:
            self.duplicates += 1
            log.debug("duplicate_race_dropped", title=record.title, date=str(record.date))
            return None
        self._seen.add(key)
        stored = record.model_copy(update={"id": len(self._records) + 1})
        self._records.append(stored)
        return stored

    def finalize(self, now: Optional[datetime] = None) -> HarvestResult:
        # sorted() is stable, so receipt order breaks date ties
        races = sorted(self._records, key=lambda r: r.date, reverse=True)
        return HarvestResult(races=races, summary=summarize(races, now))
