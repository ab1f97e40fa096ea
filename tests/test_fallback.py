"""Unit tests for heuristic full-event extraction."""
from scraper.fallback import (
    extract_date,
    extract_fallback_event,
    extract_price,
    extract_title,
)


def test_title_only_page():
    """Test that a bare page still yields its title as the name."""
    html = '<html><head><title>Tech Summit 2025</title></head><body></body></html>'

    event = extract_fallback_event(html, "https://example.com/summit")

    assert event.name == "Tech Summit 2025"
    assert event.url == "https://example.com/summit"
    assert event.start_date is None
    assert event.location is None
    assert event.price is None


def test_all_fields():
    html = """
    <html>
        <head><title>Nordic <b>Design</b> Week</title></head>
        <body>
            <p>Date: 15/03/2025</p>
            <div>Location: Kista Science Tower, Stockholm</div>
            <p>Price: 1,200 SEK</p>
        </body>
    </html>
    """

    event = extract_fallback_event(html, "https://example.com/ndw")

    assert event.name == "Nordic Design Week"
    assert event.start_date == "2025-03-15"
    assert event.location == "Kista Science Tower, Stockholm"
    assert event.price == 1200
    assert event.end_date is None
    assert event.description is None


def test_extract_title_missing():
    assert extract_title('<html><body><h1>Heading</h1></body></html>') is None


def test_extract_date_iso_in_text():
    assert extract_date('<time>2025-09-01</time>') == "2025-09-01"


def test_extract_date_labeled_us_date():
    assert extract_date('<span>When: 09/30/2025</span>') == "2025-09-30"


def test_extract_date_none():
    assert extract_date('<p>Dates to be announced</p>') is None


def test_extract_price_with_currency_suffix():
    assert extract_price('<p>Early bird 450 kr</p>') == 450


def test_extract_price_labeled_with_symbol():
    assert extract_price('<span>Ticket: €99.50</span>') == 99.50


def test_extract_price_none():
    assert extract_price('<p>Free entry for members</p>') is None
