"""
Batch orchestrator: walks the candidate list in fixed-size concurrent
batches and feeds accepted pages to the aggregator.
"""

import asyncio
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterator, Optional, Sequence

import structlog
from pydantic import ValidationError

from ..aggregation.aggregator import Aggregator
from ..core.exceptions import ClassificationReject, ExtractionReject
from ..models import CandidateId, FetchOutcome, FetchStatus
from ..observability.metrics import MetricsCollector

logger = structlog.get_logger(__name__)


@dataclass
class RunCounters:
    """Run-scoped counters; nothing here outlives a run."""

    checked: int = 0
    pages: int = 0
    found: int = 0
    graded: int = 0
    not_found: int = 0
    transient_errors: int = 0
    classification_rejects: int = 0
    extraction_rejects: int = 0
    duplicates: int = 0
    first_error: Optional[str] = None

    def record_error(self, message: str) -> None:
        """Keeps the first transport error of the run; later ones are only counted."""
        if self.first_error is None:
            self.first_error = message

    def as_dict(self) -> dict:
        return asdict(self)


def batched(items: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class BatchFetcher:
    """
    Orchestrates candidate lookups in bounded concurrent batches.

    - All fetches of a batch run concurrently; failures stay isolated
    - Batches run strictly in sequence with a fixed pause between them
    - Parsing and aggregation happen after each batch's concurrent phase
    - No retries: a miss is final for the run
    """

    def __init__(
        self,
        adapter,
        aggregator: Aggregator,
        batch_size: int = 12,
        batch_delay: float = 0.3,
        fetch_timeout: Optional[float] = None,
        now: Optional[datetime] = None,
        metrics: Optional[MetricsCollector] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.adapter = adapter
        self.aggregator = aggregator
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.fetch_timeout = fetch_timeout
        self.now = now or datetime.now(timezone.utc)
        self.metrics = metrics or MetricsCollector()
        self._sleep = sleep
        self.counters = RunCounters()

    async def run(self, candidates: Sequence[CandidateId]) -> RunCounters:
        total = len(candidates)
        batches = list(batched(list(candidates), self.batch_size))
        logger.info("Starting batch scan", candidates=total, batches=len(batches), batch_size=self.batch_size)

        for index, batch in enumerate(batches, start=1):
            async with self.metrics.timer("batch_duration_seconds"):
                outcomes = await asyncio.gather(
                    *(self._fetch_single(candidate) for candidate in batch),
                    return_exceptions=True,
                )

            for candidate, outcome in zip(batch, outcomes):
                self._handle(candidate, outcome)

            logger.info(
                "Batch complete",
                batch=index,
                checked=f"{self.counters.checked}/{total}",
                found=self.counters.found,
                graded=self.counters.graded,
            )
            if index < len(batches) and self.batch_delay > 0:
                await self._sleep(self.batch_delay)

        self.metrics.set("races_found", self.counters.found)
        self.metrics.set("candidates_checked", self.counters.checked)
        return self.counters

    async def _fetch_single(self, candidate: CandidateId) -> FetchOutcome:
        if self.fetch_timeout is None:
            return await self.adapter.fetch(candidate)
        return await asyncio.wait_for(self.adapter.fetch(candidate), timeout=self.fetch_timeout)

    def _handle(self, candidate: CandidateId, outcome: Any) -> None:
        counters = self.counters
        counters.checked += 1

        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            counters.transient_errors += 1
            counters.record_error(f"{candidate.race_id}: {type(outcome).__name__}: {outcome}")
            self.metrics.inc("fetch_transient_error")
            logger.debug("Fetch raised", race_id=candidate.race_id, error=repr(outcome))
            return

        if outcome.status is FetchStatus.NOT_FOUND:
            counters.not_found += 1
            self.metrics.inc("fetch_not_found")
            return
        if outcome.status is FetchStatus.TRANSIENT_ERROR:
            counters.transient_errors += 1
            counters.record_error(f"{candidate.race_id}: {outcome.error}")
            self.metrics.inc("fetch_transient_error")
            return

        counters.pages += 1
        self.metrics.inc("fetch_success")
        try:
            record = self.adapter.parse(outcome, self.now)
        except ClassificationReject as e:
            counters.classification_rejects += 1
            logger.debug("Page rejected", race_id=candidate.race_id, reason=e.reason)
            return
        except ExtractionReject as e:
            counters.extraction_rejects += 1
            logger.debug("Horse table rejected", race_id=candidate.race_id, found=e.found, minimum=e.minimum)
            return
        except ValidationError as e:
            counters.extraction_rejects += 1
            logger.warning("Race record failed validation", race_id=candidate.race_id, error=str(e))
            return

        stored = self.aggregator.add(record)
        if stored is None:
            counters.duplicates += 1
            return
        counters.found += 1
        if stored.is_graded:
            counters.graded += 1
        logger.info(
            "Race found",
            race_id=candidate.race_id,
            title=stored.title,
            grade=stored.grade,
            date=stored.date.isoformat(),
            horses=len(stored.horses),
        )
