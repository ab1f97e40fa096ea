"""Extraction of schema.org Event data from JSON-LD blocks."""
import json
import logging
import re
from typing import Any, Iterator, Optional

from bs4 import BeautifulSoup

from processor.models import ScrapedEvent
from processor.normalize import normalize_date, normalize_price

logger = logging.getLogger(__name__)

JSON_LD_TYPE = re.compile(r'^\s*application/ld\+json\s*$', re.IGNORECASE)

EVENT_TYPES = frozenset({
    'Event',
    'https://schema.org/Event',
    'http://schema.org/Event',
})

ADDRESS_FIELDS = (
    'streetAddress',
    'addressLocality',
    'addressRegion',
    'postalCode',
    'addressCountry',
)


def _first(value: Any) -> Any:
    """Unwrap array-valued JSON-LD properties to their first element."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _text(value: Any) -> Optional[str]:
    value = _first(value)
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def is_event(entry: Any) -> bool:
    """Return True if a JSON-LD entry declares an Event type."""
    if not isinstance(entry, dict):
        return False
    entry_type = entry.get('@type')
    if isinstance(entry_type, list):
        return any(t in EVENT_TYPES for t in entry_type if isinstance(t, str))
    return isinstance(entry_type, str) and entry_type in EVENT_TYPES


def _entries(payload: Any) -> Iterator[Any]:
    """Yield the entries of a payload: one object, an array or a @graph."""
    items = payload if isinstance(payload, list) else [payload]
    for item in items:
        yield item
        if isinstance(item, dict) and isinstance(item.get('@graph'), list):
            yield from item['@graph']


def _json_ld_payloads(html: str) -> Iterator[Any]:
    """Yield every parseable JSON-LD payload in the page."""
    soup = BeautifulSoup(html, 'html.parser')
    for script in soup.find_all('script', attrs={'type': JSON_LD_TYPE}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            yield json.loads(raw)
        except ValueError as e:
            logger.debug(f"Skipping malformed JSON-LD block: {e}")
            continue


def compose_address(address: Any) -> list[str]:
    """Return the non-empty parts of a PostalAddress, in display order."""
    if isinstance(address, str):
        return [address] if address.strip() else []
    if not isinstance(address, dict):
        return []

    parts = []
    for key in ADDRESS_FIELDS:
        part = address.get(key)
        # addressCountry may be a Country object
        if isinstance(part, dict):
            part = part.get('name')
        part = _text(part)
        if part:
            parts.append(part)
    return parts


def compose_location(location: Any) -> Optional[str]:
    """
    Build a location string from a JSON-LD location property.

    A plain string is used as-is. A Place contributes its name followed by
    its address parts; a Place without a name contributes the address only.

    Args:
        location: The Event's location property

    Returns:
        Comma-joined location, or None if nothing usable was present
    """
    location = _first(location)
    if isinstance(location, str):
        return location
    if not isinstance(location, dict):
        return None

    parts = []
    name = _text(location.get('name'))
    if name:
        parts.append(name)
    parts.extend(compose_address(location.get('address')))

    return ', '.join(parts) or None


def _offer_price(offers: Any) -> Optional[float]:
    offers = offers if isinstance(offers, list) else [offers]
    for offer in offers:
        if not isinstance(offer, dict) or offer.get('price') is None:
            continue
        price = normalize_price(offer['price'])
        if price is not None:
            return price
    return None


def _event_from_entry(entry: dict) -> ScrapedEvent:
    event = ScrapedEvent(name=_text(entry.get('name')))

    if entry.get('location'):
        event.location = compose_location(entry['location'])

    if entry.get('startDate'):
        event.start_date = normalize_date(_text(entry['startDate']))
    if entry.get('endDate'):
        event.end_date = normalize_date(_text(entry['endDate']))

    if entry.get('offers'):
        event.price = _offer_price(entry['offers'])

    event.description = _text(entry.get('description'))
    event.url = _text(entry.get('url'))
    return event


def extract_structured_event(html: str) -> Optional[ScrapedEvent]:
    """
    Extract the first schema.org Event found in the page's JSON-LD.

    Malformed JSON-LD blocks are skipped. Only the first Event entry is
    used; an Event without a name counts as not found.

    Args:
        html: Raw page markup

    Returns:
        ScrapedEvent, or None if no named Event is present
    """
    for payload in _json_ld_payloads(html):
        for entry in _entries(payload):
            if not is_event(entry):
                continue
            event = _event_from_entry(entry)
            if not event.name:
                logger.info("JSON-LD Event found without a name")
                return None
            return event

    return None
