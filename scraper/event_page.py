"""Scraper that turns an event page URL into pre-filled event fields."""
import logging

import requests

from processor.categories import detect_categories
from processor.models import ScrapedEvent
from scraper.errors import FetchError, ScrapeError
from scraper.fallback import extract_fallback_event
from scraper.location import extract_location, looks_like_url
from scraper.structured_data import extract_structured_event

logger = logging.getLogger(__name__)


class EventPageScraper:
    """Scraper for arbitrary conference and event pages."""

    HEADERS = {
        'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36',
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    }

    def __init__(self, timeout: int = 15):
        """
        Initialize the event page scraper.

        Args:
            timeout: HTTP request timeout in seconds (default: 15)
        """
        self.timeout = timeout

    def scrape(self, url: str) -> ScrapedEvent:
        """
        Scrape event data from a URL.

        JSON-LD Event data is used when present; otherwise fields are
        recovered heuristically from the markup. Category suggestions are
        attached in both cases.

        Args:
            url: Event page URL

        Returns:
            ScrapedEvent with whatever fields could be recovered

        Raises:
            ScrapeError: If the page cannot be fetched or processing fails
        """
        try:
            html = self.fetch_html(url)

            event = extract_structured_event(html)
            if event is not None:
                logger.info(f"Found JSON-LD event data for {url}")
                self._reconcile(event, html, url)
            else:
                logger.info(f"No JSON-LD event data for {url}, using heuristics")
                event = extract_fallback_event(html, url)

            event.category, event.suggested_categories = detect_categories(event)
            return event

        except Exception as e:
            logger.error(f"Failed to scrape {url}: {e}")
            raise ScrapeError(f"Failed to scrape event data: {e}") from e

    def fetch_html(self, url: str) -> str:
        """
        Fetch page markup with browser-like headers.

        Args:
            url: Page URL

        Returns:
            Response body as text

        Raises:
            FetchError: On transport failure or a non-success status
        """
        logger.info(f"Fetching event page: {url}")
        try:
            response = requests.get(url, headers=self.HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(str(e)) from e

        if not response.ok:
            raise FetchError(
                f"Failed to fetch URL: {response.status_code} {response.reason}",
                status_code=response.status_code,
                reason=response.reason
            )
        return response.text

    def _reconcile(self, event: ScrapedEvent, html: str, url: str) -> None:
        """
        Fill gaps in structured data from the markup.

        Args:
            event: Event built from JSON-LD, updated in place
            html: Page markup
            url: Page URL, used when the event has none
        """
        if not event.url:
            event.url = url

        if event.location and not (
            looks_like_url(event.location) or 'http' in event.location
        ):
            return

        html_location = extract_location(html)
        if html_location:
            event.location = html_location
        elif event.location:
            logger.info(f"Discarding URL-like location: {event.location}")
            event.location = None
