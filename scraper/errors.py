"""Errors raised by the event-page scraper."""
from typing import Optional


class ScrapeError(Exception):
    """Scraping an event page failed."""


class FetchError(ScrapeError):
    """The event page could not be retrieved."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
