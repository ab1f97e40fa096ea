"""Heuristic venue/location extraction from event page markup.

The page is parsed once into a ``ParsedPage``. Each strategy takes that page
and returns a location string or None. ``extract_location`` tries them in
priority order and returns the first plausible result.
"""
import html as html_lib
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

MIN_LOCATION_LENGTH = 4
MAX_LOCATION_LENGTH = 200

META_LOCATION_ATTRS = (
    ('property', 'og:locality'),
    ('name', 'location'),
    ('name', 'geo.placename'),
)

DATA_LOCATION_ATTRS = ('data-location', 'data-venue')

STOP_WORDS = re.compile(
    r'^(date|time|when|price|cost|ticket|register|click|here)$', re.IGNORECASE
)

CSS_ARTIFACTS = ('class=', 'header-', 'style-', 'container', 'cover-')
CSS_CLASS_LIST = re.compile(r'^[a-z-]+(?:\s+[a-z-]+)?\s*$')

URL_SCHEME = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)
URL_FRAGMENTS = ('www.', '.com', '.se', '.org')

WHERE_SECTION = re.compile(
    r'_?Where\?_?\s+([A-Z0-9][A-Za-z0-9\s,&-]{10,150}?)(?:\s+&|\s+Online|$)',
    re.IGNORECASE
)
STREET_ADDRESS = re.compile(
    r'(\d+[A-Z]?\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),\s*([A-Z][a-z]+),\s*([A-Z][a-z]+)'
)
CITY_COUNTRY = re.compile(
    r'(?:>|^)\s*([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),\s*([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s*(?:<|$)'
)
LOCATION_LABEL = re.compile(
    r'(?:^|>)\s*(?:Where\?|Location|Venue|Place|Address)[\s:]*'
    r'([A-Z0-9][A-Za-z0-9\s,&-]{10,150})(?:<|$)',
    re.IGNORECASE
)
TAG = re.compile(r'<[^>]+>')
WHITESPACE = re.compile(r'\s+')


def looks_like_url(text: str) -> bool:
    """Return True if text is (or contains) a web address."""
    if not text:
        return False
    if URL_SCHEME.match(text):
        return True
    return any(fragment in text for fragment in URL_FRAGMENTS)


def is_plausible_location(text: Optional[str], min_length: int = MIN_LOCATION_LENGTH) -> bool:
    """Return True if text could be a venue or address."""
    if not text:
        return False
    return (
        min_length <= len(text) < MAX_LOCATION_LENGTH
        and not looks_like_url(text)
        and any(char.isupper() for char in text)
    )


def looks_like_css_artifact(text: str) -> bool:
    """Return True if text looks like class names leaked from markup."""
    if any(artifact in text for artifact in CSS_ARTIFACTS):
        return True
    return bool(CSS_CLASS_LIST.match(text))


@dataclass
class ParsedPage:
    """Page markup with its parse tree and visible text."""
    html: str
    soup: BeautifulSoup
    text: str


def parse_page(html: str) -> ParsedPage:
    """Parse markup once; script and style elements are dropped from the tree."""
    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup(['script', 'style']):
        tag.decompose()
    text = soup.get_text(' ').replace('\xa0', ' ')
    return ParsedPage(html=html, soup=soup, text=WHITESPACE.sub(' ', text).strip())


def visible_text(html: str) -> str:
    """Project markup to its visible text with whitespace collapsed."""
    return parse_page(html).text


def _clean_fragment(fragment: str) -> str:
    text = html_lib.unescape(TAG.sub('', fragment)).replace('\xa0', ' ')
    return WHITESPACE.sub(' ', text).strip()


def from_meta_tags(page: ParsedPage) -> Optional[str]:
    """Location from og:locality, location or geo.placename meta tags."""
    soup = page.soup
    for attr, value in META_LOCATION_ATTRS:
        pattern = re.compile(r'^' + re.escape(value) + r'$', re.IGNORECASE)
        meta = soup.find('meta', attrs={attr: pattern})
        if meta is None:
            continue
        location = (meta.get('content') or '').strip()
        if is_plausible_location(location):
            return location
    return None


def from_data_attributes(page: ParsedPage) -> Optional[str]:
    """Location from data-location/data-venue or an itemprop=location block."""
    soup = page.soup
    for attr in DATA_LOCATION_ATTRS:
        element = soup.find(attrs={attr: True})
        if element is None:
            continue
        location = _clean_fragment(element.get(attr) or '')
        if is_plausible_location(location):
            return location

    place = soup.find(attrs={'itemprop': 'location'})
    if place is not None:
        name = place.find(attrs={'itemprop': 'name'})
        if name is not None:
            location = name.get_text(' ', strip=True)
            if is_plausible_location(location):
                return location
    return None


def from_where_section(page: ParsedPage) -> Optional[str]:
    """Location following a "Where?" label in the visible text."""
    match = WHERE_SECTION.search(page.text)
    if not match:
        return None
    location = match.group(1).strip(' ,&-')
    if STOP_WORDS.match(location):
        return None
    if is_plausible_location(location, min_length=6):
        return location
    return None


def from_street_address(page: ParsedPage) -> Optional[str]:
    """Location shaped like "7A Posthuset, Stockholm, Sweden" in the visible text."""
    match = STREET_ADDRESS.search(page.text)
    if not match:
        return None
    location = ', '.join(part.strip() for part in match.groups())
    if len(location) > 10 and is_plausible_location(location):
        return location
    return None


def from_city_country(page: ParsedPage) -> Optional[str]:
    """Location shaped like "City, Country" as the whole text of an element."""
    for match in CITY_COUNTRY.finditer(page.html):
        location = f'{match.group(1).strip()}, {match.group(2).strip()}'
        if looks_like_css_artifact(location):
            continue
        if is_plausible_location(location, min_length=6):
            return location
    return None


def from_location_label(page: ParsedPage) -> Optional[str]:
    """Location following a Where?/Location/Venue/Place/Address label."""
    for match in LOCATION_LABEL.finditer(page.html):
        location = _clean_fragment(match.group(1))
        if looks_like_css_artifact(location):
            continue
        if is_plausible_location(location, min_length=6):
            return location
    return None


LOCATION_STRATEGIES: Tuple[Callable[[ParsedPage], Optional[str]], ...] = (
    from_meta_tags,
    from_data_attributes,
    from_where_section,
    from_street_address,
    from_city_country,
    from_location_label,
)


def extract_location(html: str) -> Optional[str]:
    """
    Find the event location in page markup.

    Args:
        html: Raw page markup

    Returns:
        The first plausible location found, or None
    """
    page = parse_page(html)
    for strategy in LOCATION_STRATEGIES:
        location = strategy(page)
        if location:
            logger.debug(f"Location found by {strategy.__name__}: {location}")
            return location
    return None
