"""Date and price normalization for scraped values."""
import logging
import math
import re
from datetime import datetime
from typing import Optional, Union

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    '%Y-%m-%d',             # ISO 8601
    '%Y-%m-%dT%H:%M:%S',    # ISO date-time
    '%Y-%m-%dT%H:%M:%SZ',   # ISO date-time, UTC suffix
    '%m/%d/%Y',             # US format
    '%d/%m/%Y',             # European format
    '%d-%m-%Y',             # European format with dashes
)

PRICE_PATTERN = re.compile(r'\d[\d,]*(?:\.\d+)?')


def normalize_date(date_str: str) -> Optional[str]:
    """
    Normalize a date string to an ISO calendar date (YYYY-MM-DD).

    Native ISO parsing is tried first, then the explicit formats in
    DATE_FORMATS, then a lenient dateutil parse. The time of day and any
    timezone are dropped without conversion.

    Args:
        date_str: Date string in any of the supported formats

    Returns:
        ISO 8601 date string or None if parsing fails
    """
    if not date_str or not isinstance(date_str, str):
        return None

    value = date_str.strip()

    try:
        return datetime.fromisoformat(value).date().isoformat()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue

    try:
        return dateutil_parser.parse(value).date().isoformat()
    except (ValueError, OverflowError):
        logger.debug(f"Could not parse date: {date_str!r}")
        return None


def normalize_price(price: Union[str, int, float, None]) -> Optional[float]:
    """
    Extract the numeric amount from a price value.

    Currency symbols and units are discarded; the amount is taken to be in
    the major unit of whatever currency the page uses.

    Args:
        price: Number, or text such as "100 SEK" or "$1,200.50"

    Returns:
        The amount, or None if no number is present
    """
    if isinstance(price, bool):
        return None
    if isinstance(price, (int, float)):
        return price if math.isfinite(price) else None
    if not price:
        return None

    match = PRICE_PATTERN.search(str(price))
    if not match:
        return None

    try:
        return float(match.group(0).replace(',', ''))
    except ValueError:
        return None
