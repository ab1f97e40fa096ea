"""Best-effort event extraction for pages without structured data."""
import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from processor.models import ScrapedEvent
from processor.normalize import normalize_date, normalize_price
from scraper.location import extract_location

logger = logging.getLogger(__name__)

DATE_PATTERNS = (
    # "Date: 15/03/2025", "When 15.03.2025"
    re.compile(
        r'(?:date|when|event date)[\s:]*(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{4})',
        re.IGNORECASE
    ),
    # "2025-03-15"
    re.compile(r'(\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2})'),
)

PRICE_PATTERNS = (
    # "Price: €450", "Tickets $1,200.50"
    re.compile(
        r'(?:price|cost|ticket|fee)[\s:]*([€$£]?\s*\d[\d,]*(?:\.\d+)?)',
        re.IGNORECASE
    ),
    # "4,500 SEK", "450kr"
    re.compile(
        r'([€$£]?\s*\d[\d,]*(?:\.\d+)?)\s*(?:sek|kr|eur|usd|gbp)\b',
        re.IGNORECASE
    ),
)


def extract_title(html: str) -> Optional[str]:
    """Return the text of the page's <title> element."""
    soup = BeautifulSoup(html, 'html.parser')
    if soup.title is None:
        return None
    title = soup.title.get_text(' ', strip=True)
    return title or None


def extract_date(html: str) -> Optional[str]:
    """Return the first date in the markup that normalizes cleanly."""
    for pattern in DATE_PATTERNS:
        match = pattern.search(html)
        if not match:
            continue
        start_date = normalize_date(match.group(1))
        if start_date:
            return start_date
    return None


def extract_price(html: str) -> Optional[float]:
    """Return the first labeled or currency-tagged price in the markup."""
    for pattern in PRICE_PATTERNS:
        match = pattern.search(html)
        if not match:
            continue
        price = normalize_price(match.group(1))
        if price is not None:
            return price
    return None


def extract_fallback_event(html: str, url: str) -> ScrapedEvent:
    """
    Recover what event fields can be found by pattern matching.

    Fields that cannot be found are left unset.

    Args:
        html: Raw page markup
        url: Address the markup was fetched from

    Returns:
        ScrapedEvent with url set and any recovered fields
    """
    event = ScrapedEvent(
        name=extract_title(html),
        start_date=extract_date(html),
        location=extract_location(html),
        price=extract_price(html),
        url=url,
    )
    logger.info(
        f"Heuristic extraction for {url}: name={event.name!r}, "
        f"date={event.start_date}, location={event.location!r}, price={event.price}"
    )
    return event
