# harvest_service/adapters/netkeiba_adapter.py
from datetime import datetime
from typing import List, Optional

from ..models import CandidateId, FetchOutcome, FetchStatus, RaceRecord
from ..parsing.classifier import DateWindow, classify_page
from ..parsing.document import RaceDocument
from ..parsing.entries import ExtractionStrategy, default_strategies, extract_entries, require_minimum
from .base_v3 import BaseAdapterV3
from .constants import RACE_PAGE_PATHS
from .mixins import BrowserHeadersMixin


class NetkeibaAdapter(BrowserHeadersMixin, BaseAdapterV3):
    """
    Adapter for netkeiba race pages addressed by a 12-digit race_id.
    There is no index to crawl, so every page is reached from a generated
    candidate identifier.
    """

    SOURCE_NAME = "Netkeiba"
    BASE_URL = "https://en.netkeiba.com"

    def __init__(
        self,
        config=None,
        base_url: Optional[str] = None,
        page_kind: str = "entry",
        window: Optional[DateWindow] = None,
        min_horses: int = 4,
        strategies: Optional[List[ExtractionStrategy]] = None,
        timeout: float = 10.0,
    ):
        if config is not None:
            base_url = base_url or config.BASE_URL
            page_kind = config.PAGE_KIND
            window = window or DateWindow(config.DAYS_BACK, config.DAYS_FORWARD)
            min_horses = config.MIN_HORSES
            timeout = config.REQUEST_TIMEOUT
            strategies = strategies or default_strategies(page_kind, config.JOCKEY_STRICT)

        super().__init__(
            source_name=self.SOURCE_NAME,
            base_url=(base_url or self.BASE_URL).rstrip("/"),
            config=config,
            timeout=timeout,
        )
        if page_kind not in RACE_PAGE_PATHS:
            raise ValueError(f"Unknown page kind: {page_kind}")
        self.page_kind = page_kind
        self.window = window or DateWindow()
        self.min_horses = min_horses
        self.strategies = strategies or default_strategies(page_kind)

    def build_url(self, candidate: CandidateId) -> str:
        return f"{self.base_url}{RACE_PAGE_PATHS[self.page_kind]}?race_id={candidate.race_id}"

    def _get_headers(self) -> dict:
        return self._get_browser_headers()

    def parse(self, outcome: FetchOutcome, now: datetime) -> RaceRecord:
        if outcome.status is not FetchStatus.SUCCESS:
            raise ValueError(f"Cannot parse a {outcome.status.value} outcome")
        return self.parse_document(outcome.body, outcome.candidate, now, source_url=outcome.url)

    def parse_document(
        self,
        html: str,
        candidate: CandidateId,
        now: datetime,
        source_url: Optional[str] = None,
    ) -> RaceRecord:
        """Classification first, extraction second; either may reject the page."""
        document = RaceDocument(html)
        meta = classify_page(document, candidate, self.window, now)

        entries = extract_entries(document, self.strategies, minimum=self.min_horses)
        require_minimum(entries, self.min_horses, race_id=candidate.race_id)

        return RaceRecord(
            title=meta.title,
            grade=meta.grade,
            date=meta.date,
            venue=meta.venue,
            distance=meta.distance,
            surface=meta.surface,
            horses=entries,
            source_urls=[source_url or self.build_url(candidate)],
        )
