"""AWS Lambda handler for the conference tracker API."""
import json
import logging
import os
import time
from typing import Any, Callable, Dict, Optional, Tuple

from processor.filters import filter_conferences
from processor.models import ConferenceFilters
from processor.validation import (
    ValidationError,
    has_rating,
    is_valid_url,
    validate_conference,
    validate_named,
    validate_person,
    validate_rating,
)
from scraper.errors import ScrapeError
from scraper.event_page import EventPageScraper
from storage.dynamodb_manager import (
    DuplicateRecordError,
    DynamoDBManager,
    RecordNotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)

# Attributes every LogRecord has; anything else came from extra=
_RESERVED_LOG_ATTRS = frozenset(
    logging.LogRecord('', 0, '', 0, '', (), None).__dict__
) | {'message', 'asctime', 'taskName'}


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON, including extra fields."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_LOG_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


class BadRequest(Exception):
    """Request body could not be used."""


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def _json_body(event: Dict[str, Any]) -> Any:
    """Decode the JSON request body; an empty body is an empty object."""
    body = event.get('body')
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError as e:
        raise BadRequest('Invalid JSON body') from e


def _form_body(event: Dict[str, Any]) -> Dict[str, Any]:
    body = _json_body(event)
    if not isinstance(body, dict):
        raise BadRequest('Request body must be a JSON object')
    return body


def _path_id(event: Dict[str, Any]) -> str:
    return (event.get('pathParameters') or {}).get('id', '')


# Route handlers take (event, config) and return a response dict.

def scrape_event(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Scrape an event page into fields for the conference form."""
    body = _json_body(event)
    url = body.get('url') if isinstance(body, dict) else None

    if not url or not isinstance(url, str):
        return _response(400, {'error': 'URL is required'})
    if not is_valid_url(url):
        return _response(400, {'error': 'Invalid URL format'})

    scraper = EventPageScraper(timeout=config['timeout_seconds'])
    try:
        scraped = scraper.scrape(url)
    except ScrapeError as e:
        logger.error(f"Error scraping event: {e}", extra={'url': url})
        return _response(500, {'error': str(e)})

    return _response(200, {'data': scraped.to_dict()})


def list_conferences(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """List conferences with assignee and rating, filtered by query parameters."""
    params = event.get('queryStringParameters') or {}
    filters = ConferenceFilters(
        office=params.get('office'),
        category=params.get('category'),
        assigned_to=params.get('assigned_to')
    )

    manager = DynamoDBManager(table_prefix=config['table_prefix'])
    pairs = manager.get_conferences_with_people()
    ratings = manager.get_all_ratings()

    people = {conference.id: person for conference, person in pairs}
    conferences = filter_conferences([conference for conference, _ in pairs], filters)

    data = []
    for conference in conferences:
        person = people.get(conference.id)
        rating = ratings.get(conference.id)
        data.append({
            **conference.to_dict(),
            'person': person.to_dict() if person else None,
            'rating': rating.to_dict() if rating else None
        })
    return _response(200, {'data': data})


def _save_conference(
    event: Dict[str, Any],
    config: Dict[str, Any],
    conference_id: Optional[str] = None
) -> Dict[str, Any]:
    """Validate the form, then create or update the conference and its rating."""
    data = _form_body(event)
    fields = validate_conference(data)

    manager = DynamoDBManager(table_prefix=config['table_prefix'])
    if conference_id is None:
        conference = manager.create_conference(fields)
        status_code = 201
    else:
        conference = manager.update_conference(conference_id, fields)
        status_code = 200

    result = conference.to_dict()
    if has_rating(data):
        rating = manager.upsert_rating(conference.id, validate_rating(data))
        result['rating'] = rating.to_dict()
    return _response(status_code, {'data': result})


def create_conference(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Create a conference from the request body."""
    return _save_conference(event, config)


def update_conference(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Replace the fields of an existing conference."""
    return _save_conference(event, config, conference_id=_path_id(event))


def delete_conference(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Delete a conference and its rating."""
    conference_id = _path_id(event)
    DynamoDBManager(table_prefix=config['table_prefix']).delete_conference(conference_id)
    return _response(200, {'data': {'id': conference_id}})


def save_rating(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Create or replace the rating of a conference."""
    conference_id = _path_id(event)
    fields = validate_rating(_form_body(event))

    manager = DynamoDBManager(table_prefix=config['table_prefix'])
    if manager.get_conference(conference_id) is None:
        raise RecordNotFoundError('Conference not found')
    rating = manager.upsert_rating(conference_id, fields)
    return _response(200, {'data': rating.to_dict()})


def list_people(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """List people by name."""
    people = DynamoDBManager(table_prefix=config['table_prefix']).get_all_people()
    return _response(200, {'data': [person.to_dict() for person in people]})


def create_person(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Create a person with a unique email."""
    fields = validate_person(_form_body(event))
    person = DynamoDBManager(table_prefix=config['table_prefix']).create_person(fields)
    return _response(201, {'data': person.to_dict()})


def delete_person(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Delete a person."""
    person_id = _path_id(event)
    DynamoDBManager(table_prefix=config['table_prefix']).delete_person(person_id)
    return _response(200, {'data': {'id': person_id}})


def list_categories(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """List categories by name."""
    categories = DynamoDBManager(table_prefix=config['table_prefix']).get_all_categories()
    return _response(200, {'data': [category.to_dict() for category in categories]})


def create_category(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Create a category with a unique name."""
    fields = validate_named(_form_body(event))
    category = DynamoDBManager(table_prefix=config['table_prefix']).create_category(fields)
    return _response(201, {'data': category.to_dict()})


def delete_category(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Delete a category."""
    category_id = _path_id(event)
    DynamoDBManager(table_prefix=config['table_prefix']).delete_category(category_id)
    return _response(200, {'data': {'id': category_id}})


def list_offices(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """List offices by name."""
    offices = DynamoDBManager(table_prefix=config['table_prefix']).get_all_offices()
    return _response(200, {'data': [office.to_dict() for office in offices]})


def create_office(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Create an office with a unique name."""
    fields = validate_named(_form_body(event))
    office = DynamoDBManager(table_prefix=config['table_prefix']).create_office(fields)
    return _response(201, {'data': office.to_dict()})


def delete_office(event: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    """Delete an office."""
    office_id = _path_id(event)
    DynamoDBManager(table_prefix=config['table_prefix']).delete_office(office_id)
    return _response(200, {'data': {'id': office_id}})


ROUTES: Dict[Tuple[str, str], Callable[[Dict[str, Any], Dict[str, Any]], Dict[str, Any]]] = {
    ('POST', '/api/scrape-event'): scrape_event,
    ('GET', '/api/conferences'): list_conferences,
    ('POST', '/api/conferences'): create_conference,
    ('PUT', '/api/conferences/{id}'): update_conference,
    ('DELETE', '/api/conferences/{id}'): delete_conference,
    ('PUT', '/api/conferences/{id}/rating'): save_rating,
    ('GET', '/api/people'): list_people,
    ('POST', '/api/people'): create_person,
    ('DELETE', '/api/people/{id}'): delete_person,
    ('GET', '/api/categories'): list_categories,
    ('POST', '/api/categories'): create_category,
    ('DELETE', '/api/categories/{id}'): delete_category,
    ('GET', '/api/offices'): list_offices,
    ('POST', '/api/offices'): create_office,
    ('DELETE', '/api/offices/{id}'): delete_office,
}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler for API Gateway proxy requests.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response with statusCode, headers and JSON body
    """
    # Read configuration from environment variables
    config = {
        'log_level': os.environ.get('LOG_LEVEL', 'INFO'),
        'timeout_seconds': int(os.environ.get('TIMEOUT_SECONDS', '15')),
        'table_prefix': os.environ.get('TABLE_PREFIX', 'conference-tracker'),
    }

    setup_logging(config['log_level'])

    method = (event.get('httpMethod') or '').upper()
    resource = event.get('resource') or event.get('path') or ''
    route = ROUTES.get((method, resource))

    start_time = time.time()
    log_extra = {
        'method': method,
        'resource': resource,
        'request_id': getattr(context, 'aws_request_id', None)
    }

    if route is None:
        logger.warning(f"No route for {method} {resource}", extra=log_extra)
        return _response(404, {'error': 'Not found'})

    try:
        response = route(event, config)

    except BadRequest as e:
        response = _response(400, {'error': str(e)})

    except ValidationError as e:
        response = _response(400, {'error': str(e), 'details': e.errors})

    except RecordNotFoundError as e:
        response = _response(404, {'error': e.message})

    except DuplicateRecordError as e:
        response = _response(409, {'error': e.message, 'code': e.code})

    except StorageError as e:
        logger.error(f"Storage error: {e}", extra=log_extra, exc_info=True)
        response = _response(500, {'error': e.message})

    except Exception as e:
        logger.error(
            f"Request failed: {str(e)}",
            extra={**log_extra, 'error_type': type(e).__name__},
            exc_info=True
        )
        response = _response(500, {'error': str(e) or 'Internal server error'})

    duration = time.time() - start_time
    logger.info(
        f"{method} {resource} -> {response['statusCode']}",
        extra={**log_extra, 'duration_seconds': round(duration, 2)}
    )
    return response
