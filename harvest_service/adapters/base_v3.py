# harvest_service/adapters/base_v3.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

import httpx
import structlog

from ..core.exceptions import FetchFailedError
from ..models import CandidateId, FetchOutcome, RaceRecord

NOT_FOUND_STATUSES = frozenset({404, 410})


class BaseAdapterV3(ABC):
    """
    Abstract base class for candidate-addressed page adapters.
    Enforces a standardized fetch/parse split: fetching is the only network
    operation, parsing is a pure function of the fetched document.
    """

    def __init__(self, source_name: str, base_url: str, config=None, timeout: float = 10.0):
        self.source_name = source_name
        self.base_url = base_url
        self.config = config
        self.timeout = timeout
        self.logger = structlog.get_logger(adapter_name=self.source_name)
        self.http_client: Optional[httpx.AsyncClient] = None  # Injected by the engine

    @abstractmethod
    def build_url(self, candidate: CandidateId) -> str:
        raise NotImplementedError

    @abstractmethod
    def _get_headers(self) -> dict:
        raise NotImplementedError

    @abstractmethod
    def parse(self, outcome: FetchOutcome, now: datetime) -> RaceRecord:
        """
        Turns a successful fetch into a race record or raises PageRejected.
        This method should be a pure function with no side effects.
        """
        raise NotImplementedError

    async def fetch(self, candidate: CandidateId) -> FetchOutcome:
        """
        Fetches one candidate page. Never raises for network problems: they
        come back as NOT_FOUND or TRANSIENT_ERROR outcomes. No retries.
        """
        url = self.build_url(candidate)
        try:
            response = await self.make_request(url, race_id=candidate.race_id)
        except FetchFailedError as e:
            if e.status_code in NOT_FOUND_STATUSES:
                return FetchOutcome.not_found(candidate, url)
            return FetchOutcome.transient(candidate, url, str(e))

        if not response.text.strip():
            return FetchOutcome.not_found(candidate, url)
        return FetchOutcome.success(candidate, url, response.text)

    async def make_request(self, url: str, race_id: str = "") -> httpx.Response:
        if self.http_client is None:
            raise RuntimeError(f"{self.source_name} has no HTTP client attached")

        try:
            self.logger.debug("Making request", url=url)
            response = await self.http_client.get(
                url, headers=self._get_headers(), timeout=self.timeout
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            self.logger.debug(
                "HTTP Status Error during request",
                status_code=e.response.status_code,
                url=url,
            )
            raise FetchFailedError(
                race_id=race_id, url=url, status_code=e.response.status_code
            ) from e
        except httpx.TimeoutException as e:
            raise FetchFailedError(race_id=race_id, url=url, message=f"Timed out fetching {url}") from e
        except httpx.RequestError as e:
            self.logger.debug("Request Error", url=url, error=str(e))
            raise FetchFailedError(race_id=race_id, url=url, message=str(e) or type(e).__name__) from e
