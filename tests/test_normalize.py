"""Unit tests for date and price normalization."""
import pytest

from processor.normalize import normalize_date, normalize_price


class TestNormalizeDate:
    """Test cases for normalize_date."""

    def test_iso_date_is_unchanged(self):
        """Test that an ISO date normalizes to itself."""
        assert normalize_date("2025-03-15") == "2025-03-15"
        assert normalize_date(normalize_date("2025-03-15")) == "2025-03-15"

    def test_us_slash_format(self):
        """Test month-first slash dates."""
        assert normalize_date("03/15/2025") == "2025-03-15"

    def test_european_slash_format(self):
        """Test day-first slash dates that cannot be month-first."""
        assert normalize_date("15/03/2025") == "2025-03-15"

    def test_european_dash_format(self):
        """Test day-month-year dates with dashes."""
        assert normalize_date("15-03-2025") == "2025-03-15"

    def test_utc_datetime(self):
        """Test date-time with a trailing Z."""
        assert normalize_date("2025-03-15T09:00:00Z") == "2025-03-15"

    def test_offset_is_not_converted(self):
        """Test that the calendar date is kept regardless of offset."""
        assert normalize_date("2025-03-15T23:30:00-05:00") == "2025-03-15"

    def test_month_name_falls_back_to_dateutil(self):
        """Test free-form dates parsed by the lenient fallback."""
        assert normalize_date("March 15, 2025") == "2025-03-15"

    def test_surrounding_whitespace(self):
        """Test that whitespace is ignored."""
        assert normalize_date("  2025-03-15\n") == "2025-03-15"

    @pytest.mark.parametrize("value", [None, "", "invalid-date"])
    def test_unparseable_returns_none(self, value):
        """Test that missing or invalid dates return None."""
        assert normalize_date(value) is None


class TestNormalizePrice:
    """Test cases for normalize_price."""

    def test_amount_with_currency_code(self):
        assert normalize_price("100 SEK") == 100

    def test_thousands_separator_and_decimals(self):
        assert normalize_price("$1,200.50") == 1200.50

    def test_currency_symbol_with_space(self):
        assert normalize_price("€ 49.99") == 49.99

    def test_numbers_pass_through(self):
        assert normalize_price(250) == 250
        assert normalize_price(0) == 0
        assert normalize_price(12.5) == 12.5

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_return_none(self, value):
        assert normalize_price(value) is None

    @pytest.mark.parametrize("value", [None, "", "free", "TBA"])
    def test_no_digits_returns_none(self, value):
        assert normalize_price(value) is None
