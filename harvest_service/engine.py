# harvest_service/engine.py

from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import List
from typing import Optional

import httpx
import structlog

from .adapters.base_v3 import BaseAdapterV3
from .adapters.netkeiba_adapter import NetkeibaAdapter
from .aggregation.aggregator import Aggregator
from .aggregation.aggregator import HarvestResult
from .config import Settings
from .config import get_settings
from .generation.candidates import IdentifierSpace
from .generation.candidates import generate_candidates
from .models import CandidateId
from .observability.metrics import MetricsCollector
from .orchestration.batch_fetcher import BatchFetcher
from .orchestration.batch_fetcher import RunCounters
from .parsing.classifier import race_day

log = structlog.get_logger(__name__)

ZERO_RESULT_CAUSES = (
    "requests are being blocked or rate limited by the site (check first_error)",
    "no races fall inside the date window",
    "venue, meeting, day or race ranges do not cover the current meetings",
    "the page layout changed and no horse table could be recovered",
)


@dataclass(frozen=True)
class HarvestRun:
    result: HarvestResult
    counters: RunCounters
    candidates: int
    metrics: dict


class HarvestEngine:
    """
    Wires candidate generation, batch fetching and aggregation for one run.
    The reference time is fixed when the engine is built so every page of
    the run is judged against the same date window.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        adapter: Optional[BaseAdapterV3] = None,
        now: Optional[datetime] = None,
    ):
        self.config = config or get_settings()
        self.now = now or datetime.now(timezone.utc)
        self.http_client = http_client
        self.adapter = adapter or NetkeibaAdapter(config=self.config)
        self.metrics = MetricsCollector()
        self.logger = log.bind(source=self.adapter.source_name)

    def build_candidates(self) -> List[CandidateId]:
        space = IdentifierSpace.from_settings(self.config)
        return generate_candidates(space, race_day(self.now), limit=self.config.MAX_CANDIDATES)

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=httpx.Timeout(self.config.REQUEST_TIMEOUT),
            limits=httpx.Limits(
                max_connections=self.config.BATCH_SIZE,
                max_keepalive_connections=self.config.BATCH_SIZE,
            ),
        )

    async def run(self) -> HarvestRun:
        candidates = self.build_candidates()
        self.logger.info(
            "Harvest starting",
            candidates=len(candidates),
            venues=len(self.config.VENUE_CODES),
            window=f"-{self.config.DAYS_BACK}/+{self.config.DAYS_FORWARD} days",
            min_horses=self.config.MIN_HORSES,
        )

        owns_client = self.http_client is None
        client = self.http_client or self._create_client()
        self.adapter.http_client = client
        aggregator = Aggregator()
        fetcher = BatchFetcher(
            self.adapter,
            aggregator,
            batch_size=self.config.BATCH_SIZE,
            batch_delay=self.config.batch_delay,
            fetch_timeout=self.config.REQUEST_TIMEOUT * 2,
            now=self.now,
            metrics=self.metrics,
        )
        try:
            counters = await fetcher.run(candidates)
        finally:
            if owns_client:
                await client.aclose()

        result = aggregator.finalize(self.now)
        snapshot = self.metrics.snapshot()
        self.logger.info(
            "Harvest complete",
            checked=counters.checked,
            found=counters.found,
            graded=counters.graded,
            rejected=counters.classification_rejects + counters.extraction_rejects,
            errors=counters.transient_errors,
            by_venue=result.summary.by_venue,
            by_date=result.summary.by_date,
        )
        self.logger.debug("Harvest metrics", **snapshot)
        if counters.found == 0:
            self.report_zero_results(counters)

        return HarvestRun(result=result, counters=counters, candidates=len(candidates), metrics=snapshot)

    def report_zero_results(self, counters: RunCounters) -> None:
        self.logger.warning(
            "No races found",
            likely_causes=list(ZERO_RESULT_CAUSES),
            checked=counters.checked,
            pages=counters.pages,
            not_found=counters.not_found,
            transient_errors=counters.transient_errors,
            first_error=counters.first_error,
        )
