"""Validation for form data submitted to the API."""
import re
from datetime import date
from typing import Any, Dict, Optional
from urllib.parse import urlparse

CURRENCIES = ('SEK', 'USD', 'EUR', 'GBP', 'NOK', 'DKK')
DEFAULT_CURRENCY = 'SEK'
STATUSES = ('Interested', 'Planned', 'Booked', 'Attended')
RATING_FIELDS = (
    'accessibility_rating',
    'skill_improvement_rating',
    'finding_partners_rating',
)
MAX_REASON_LENGTH = 500

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

OPTIONAL_TEXT_FIELDS = ('office_id', 'notes', 'partnership', 'fee')


class ValidationError(Exception):
    """Raised when submitted data fails validation."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__('Validation failed')
        self.errors = errors


def is_valid_url(value: Any) -> bool:
    """Return True if value is a string with a scheme and a host."""
    if not isinstance(value, str) or not value.strip() or ' ' in value.strip():
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def _text(data: Dict[str, Any], key: str) -> Optional[str]:
    """Return a stripped string field, treating blanks as missing."""
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _required(data, key, message, errors) -> Optional[str]:
    value = _text(data, key)
    if value is None:
        errors[key] = message
    return value


def _form_number(value: Any) -> float:
    """Coerce a form number input; blanks and junk become 0."""
    if isinstance(value, bool) or value is None or value == '':
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0.0
    return number if number == number else 0.0


def _rating(data, key, errors) -> Optional[int]:
    value = data.get(key)
    if value is None or value == '':
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        errors[key] = 'Rating must be a whole number from 1 to 5'
        return None
    return value


def _iso_date(data, key, errors) -> Optional[str]:
    value = _text(data, key)
    if value is None:
        return None
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        errors[key] = 'Invalid date'
        return None


def validate_person(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate person form data.

    Args:
        data: Submitted fields

    Returns:
        Cleaned fields

    Raises:
        ValidationError: If any field is invalid
    """
    errors = {}
    name = _required(data, 'name', 'Name is required', errors)
    email = _text(data, 'email')
    if email is None or not EMAIL_PATTERN.match(email):
        errors['email'] = 'Invalid email address'

    if errors:
        raise ValidationError(errors)
    return {'name': name, 'email': email}


def validate_named(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate category or office form data (a single name)."""
    errors = {}
    name = _required(data, 'name', 'Name is required', errors)
    if errors:
        raise ValidationError(errors)
    return {'name': name}


def validate_rating(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate the three 1-5 rating fields; each may be null."""
    errors = {}
    cleaned = {key: _rating(data, key, errors) for key in RATING_FIELDS}
    if errors:
        raise ValidationError(errors)
    return cleaned


def has_rating(data: Dict[str, Any]) -> bool:
    """Return True if any rating field was submitted."""
    return any(key in data for key in RATING_FIELDS)


def validate_conference(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate conference form data.

    Rating fields are checked here as well so that a form can be
    rejected as a whole, but they are returned separately by
    validate_rating and are not part of the returned conference fields.

    Args:
        data: Submitted fields

    Returns:
        Cleaned conference fields

    Raises:
        ValidationError: If any field is invalid
    """
    errors = {}
    cleaned = {
        'name': _required(data, 'name', 'Name is required', errors),
        'location': _required(data, 'location', 'Location is required', errors),
        'category': _required(data, 'category', 'Category is required', errors),
        'assigned_to': _required(
            data, 'assigned_to', 'Please assign to a person', errors
        ),
    }

    price = _form_number(data.get('price'))
    if price < 0:
        errors['price'] = 'Price must be 0 or greater'
    cleaned['price'] = price

    currency = _text(data, 'currency') or DEFAULT_CURRENCY
    if currency not in CURRENCIES:
        errors['currency'] = f"Currency must be one of {', '.join(CURRENCIES)}"
    cleaned['currency'] = currency

    cleaned['start_date'] = _iso_date(data, 'start_date', errors)
    cleaned['end_date'] = _iso_date(data, 'end_date', errors)
    if (cleaned['start_date'] and cleaned['end_date']
            and cleaned['end_date'] < cleaned['start_date']):
        errors['end_date'] = 'End date cannot be before start date'

    for key in ('event_link', 'fee_link'):
        link = _text(data, key)
        if link is not None and not is_valid_url(link):
            errors[key] = 'Invalid URL'
        cleaned[key] = link

    status = _text(data, 'status')
    if status is not None and status not in STATUSES:
        errors['status'] = f"Status must be one of {', '.join(STATUSES)}"
    cleaned['status'] = status

    reason = _text(data, 'reason_to_go')
    if reason is not None and len(reason) > MAX_REASON_LENGTH:
        errors['reason_to_go'] = (
            f'Reason to go must be at most {MAX_REASON_LENGTH} characters'
        )
    cleaned['reason_to_go'] = reason

    for key in OPTIONAL_TEXT_FIELDS:
        cleaned[key] = _text(data, key)

    for key in RATING_FIELDS:
        _rating(data, key, errors)

    if errors:
        raise ValidationError(errors)
    return cleaned
