"""Unit tests for form validation and conference filtering."""
import pytest

from processor.filters import filter_conferences, split_categories
from processor.models import Conference, ConferenceFilters
from processor.validation import (
    ValidationError,
    has_rating,
    is_valid_url,
    validate_conference,
    validate_named,
    validate_person,
    validate_rating,
)


@pytest.fixture
def conference_form():
    """Minimal valid conference form data."""
    return {
        'name': 'Nordic Dev Days',
        'location': 'Stockholm, Sweden',
        'category': 'Technology',
        'price': '4500',
        'assigned_to': 'person-1',
    }


class TestValidateConference:
    """Test cases for validate_conference."""

    def test_defaults(self, conference_form):
        cleaned = validate_conference(conference_form)

        assert cleaned['name'] == 'Nordic Dev Days'
        assert cleaned['price'] == 4500.0
        assert cleaned['currency'] == 'SEK'
        assert cleaned['status'] is None
        assert cleaned['start_date'] is None
        assert cleaned['event_link'] is None
        assert 'accessibility_rating' not in cleaned

    @pytest.mark.parametrize("price", ['', None, 'abc'])
    def test_blank_or_junk_price_becomes_zero(self, conference_form, price):
        conference_form['price'] = price

        assert validate_conference(conference_form)['price'] == 0

    def test_all_optional_fields(self, conference_form):
        conference_form.update({
            'currency': 'EUR',
            'start_date': '2025-05-20',
            'end_date': '2025-05-21',
            'event_link': 'https://nordicdevdays.example',
            'fee_link': 'https://nordicdevdays.example/tickets',
            'status': 'Booked',
            'reason_to_go': 'Meet clients',
            'office_id': 'office-1',
            'notes': '',
            'accessibility_rating': 4,
        })

        cleaned = validate_conference(conference_form)

        assert cleaned['currency'] == 'EUR'
        assert cleaned['end_date'] == '2025-05-21'
        assert cleaned['status'] == 'Booked'
        assert cleaned['office_id'] == 'office-1'
        assert cleaned['notes'] is None

    def test_required_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_conference({'name': '  '})

        errors = exc_info.value.errors
        assert errors['name'] == 'Name is required'
        assert errors['location'] == 'Location is required'
        assert errors['category'] == 'Category is required'
        assert errors['assigned_to'] == 'Please assign to a person'

    @pytest.mark.parametrize("field,value,message", [
        ('price', -1, 'Price must be 0 or greater'),
        ('event_link', 'not a url', 'Invalid URL'),
        ('fee_link', 'tickets', 'Invalid URL'),
        ('start_date', '20/05/2025', 'Invalid date'),
        ('accessibility_rating', 6, 'Rating must be a whole number from 1 to 5'),
        ('finding_partners_rating', 2.5, 'Rating must be a whole number from 1 to 5'),
    ])
    def test_invalid_field(self, conference_form, field, value, message):
        conference_form[field] = value

        with pytest.raises(ValidationError) as exc_info:
            validate_conference(conference_form)

        assert exc_info.value.errors == {field: message}

    def test_invalid_enums(self, conference_form):
        conference_form['currency'] = 'JPY'
        conference_form['status'] = 'Maybe'

        with pytest.raises(ValidationError) as exc_info:
            validate_conference(conference_form)

        assert set(exc_info.value.errors) == {'currency', 'status'}

    def test_end_before_start(self, conference_form):
        conference_form['start_date'] = '2025-05-21'
        conference_form['end_date'] = '2025-05-20'

        with pytest.raises(ValidationError) as exc_info:
            validate_conference(conference_form)

        assert 'end_date' in exc_info.value.errors

    def test_reason_too_long(self, conference_form):
        conference_form['reason_to_go'] = 'x' * 501

        with pytest.raises(ValidationError) as exc_info:
            validate_conference(conference_form)

        assert 'reason_to_go' in exc_info.value.errors


def test_validate_person():
    assert validate_person({'name': 'Ada', 'email': 'ada@example.com'}) == {
        'name': 'Ada',
        'email': 'ada@example.com',
    }


def test_validate_person_invalid():
    with pytest.raises(ValidationError) as exc_info:
        validate_person({'name': '', 'email': 'ada@'})

    assert exc_info.value.errors == {
        'name': 'Name is required',
        'email': 'Invalid email address',
    }


def test_validate_named():
    assert validate_named({'name': ' Stockholm '}) == {'name': 'Stockholm'}
    with pytest.raises(ValidationError):
        validate_named({})


def test_validate_rating():
    assert validate_rating({'accessibility_rating': 5}) == {
        'accessibility_rating': 5,
        'skill_improvement_rating': None,
        'finding_partners_rating': None,
    }
    with pytest.raises(ValidationError):
        validate_rating({'skill_improvement_rating': 0})


def test_has_rating():
    assert has_rating({'finding_partners_rating': None})
    assert not has_rating({'name': 'Nordic Dev Days'})


@pytest.mark.parametrize("value,expected", [
    ('https://example.com/event', True),
    ('http://localhost:8080', True),
    ('not a url', False),
    ('example.com', False),
    ('https://', False),
    ('', False),
    (None, False),
])
def test_is_valid_url(value, expected):
    assert is_valid_url(value) is expected


def make_conference(conference_id, category='Technology', office_id=None, assigned_to=None):
    return Conference(
        id=conference_id,
        name=f'Conference {conference_id}',
        location='Stockholm',
        category=category,
        price=0.0,
        currency='SEK',
        created_at='2025-01-01T00:00:00+00:00',
        updated_at='2025-01-01T00:00:00+00:00',
        office_id=office_id,
        assigned_to=assigned_to
    )


class TestFilterConferences:
    """Test cases for filter_conferences."""

    @pytest.fixture
    def conferences(self):
        return [
            make_conference('1', 'Technology', 'sthlm', 'ada'),
            make_conference('2', 'Design, Technology', 'gbg', 'ada'),
            make_conference('3', 'Business', 'sthlm', 'bob'),
        ]

    def test_no_filters(self, conferences):
        assert filter_conferences(conferences, ConferenceFilters()) == conferences

    def test_all_is_ignored(self, conferences):
        filters = ConferenceFilters(office='all', category='all', assigned_to='all')

        assert len(filter_conferences(conferences, filters)) == 3

    def test_category_matches_any_listed(self, conferences):
        result = filter_conferences(conferences, ConferenceFilters(category='Technology'))

        assert [c.id for c in result] == ['1', '2']

    def test_combined_filters(self, conferences):
        filters = ConferenceFilters(office='sthlm', assigned_to='ada')

        assert [c.id for c in filter_conferences(conferences, filters)] == ['1']


def test_split_categories():
    assert split_categories('Design, Technology,') == ['Design', 'Technology']
    assert split_categories('') == []
