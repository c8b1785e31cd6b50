# harvest_service/core/exceptions.py
"""
Custom, application-specific exceptions for the race harvester.

This module defines a hierarchy of exception classes used to separate the
four failure families of a harvest run: configuration problems that stop a
run before it starts, transient network failures for a single candidate,
and the two kinds of page rejection raised while turning a fetched
document into a race record.
"""


class HarvestException(Exception):
    """Base class for all custom exceptions in this application."""

    pass


class ConfigError(HarvestException):
    """Raised when a run cannot start because its configuration is invalid."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(f"[{field}] {message}" if field else message)


class FetchFailedError(HarvestException):
    """Raised for a failed page fetch (non-2xx status, timeout, transport error)."""

    def __init__(
        self,
        race_id: str,
        url: str,
        status_code: int | None = None,
        message: str | None = None,
    ):
        self.race_id = race_id
        self.url = url
        self.status_code = status_code

        final_message = message or (
            f"Received HTTP {status_code} from {url}"
            if status_code
            else f"Request to {url} failed"
        )
        super().__init__(final_message)


class PageRejected(HarvestException):
    """Base class for pages that were fetched but cannot become a race record."""

    def __init__(self, reason: str, race_id: str | None = None):
        self.reason = reason
        self.race_id = race_id
        super().__init__(f"[{race_id}] {reason}" if race_id else reason)


class ClassificationReject(PageRejected):
    """Raised when a page fails the title, date, window or venue checks."""

    pass


class ExtractionReject(PageRejected):
    """Raised when too few valid horse entries were recovered from a page."""

    def __init__(self, reason: str, found: int, minimum: int, race_id: str | None = None):
        self.found = found
        self.minimum = minimum
        super().__init__(reason, race_id=race_id)
