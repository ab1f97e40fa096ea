"""DynamoDB manager for conference tracker records."""
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from processor.models import Category, Conference, Office, Person, Rating

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = '23505'

CONFERENCE_FIELDS = (
    'name', 'location', 'category', 'price', 'currency', 'office_id',
    'assigned_to', 'start_date', 'end_date', 'event_link', 'notes', 'status',
    'reason_to_go', 'fee_link', 'partnership', 'fee',
)
RATING_FIELDS = (
    'accessibility_rating',
    'skill_improvement_rating',
    'finding_partners_rating',
)


class StorageError(Exception):
    """Raised when a storage operation fails."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class DuplicateRecordError(StorageError):
    """Raised when a write would break a uniqueness constraint."""

    def __init__(self, message: str):
        super().__init__(message, code=UNIQUE_VIOLATION)


class RecordNotFoundError(StorageError):
    """Raised when a record to update does not exist."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_item(record: Dict[str, Any]) -> dict:
    """Drop empty values and convert floats for DynamoDB."""
    item = {}
    for key, value in record.items():
        if value is None:
            continue
        if isinstance(value, float):
            value = Decimal(str(value))
        item[key] = value
    return item


def _int_or_none(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


class DynamoDBManager:
    """Manager for the people, office, category, conference and rating tables."""

    def __init__(self, table_prefix: str, region_name: Optional[str] = None):
        """
        Initialize DynamoDB resource and table references.

        Args:
            table_prefix: Prefix of the table names, e.g. "conference-tracker"
            region_name: AWS region (default: boto3 configuration)
        """
        self.table_prefix = table_prefix
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.people = self.dynamodb.Table(f'{table_prefix}-people')
        self.offices = self.dynamodb.Table(f'{table_prefix}-offices')
        self.categories = self.dynamodb.Table(f'{table_prefix}-categories')
        self.conferences = self.dynamodb.Table(f'{table_prefix}-conferences')
        self.ratings = self.dynamodb.Table(f'{table_prefix}-ratings')
        logger.info(f"Initialized DynamoDBManager for tables: {table_prefix}-*")

    def _scan(self, table, action: str, **kwargs) -> List[dict]:
        """
        Scan a table, following pagination.

        Args:
            table: DynamoDB Table resource
            action: Description used in error messages, e.g. "fetch people"
            **kwargs: Extra scan arguments such as FilterExpression

        Returns:
            All matching items
        """
        try:
            response = table.scan(**kwargs)
            items = response.get('Items', [])

            while 'LastEvaluatedKey' in response:
                response = table.scan(
                    ExclusiveStartKey=response['LastEvaluatedKey'],
                    **kwargs
                )
                items.extend(response.get('Items', []))

            return items

        except ClientError as e:
            logger.error(f"Error scanning {table.name}: {e}")
            raise StorageError(f"Failed to {action}: {e}") from e

    def _put(self, table, item: dict, action: str, **kwargs) -> None:
        try:
            table.put_item(Item=item, **kwargs)
        except ClientError as e:
            if e.response['Error']['Code'] == 'ConditionalCheckFailedException':
                raise RecordNotFoundError(f"Failed to {action}: record not found") from e
            logger.error(f"Error writing to {table.name}: {e}")
            raise StorageError(f"Failed to {action}: {e}") from e

    def _delete(self, table, key: dict, action: str) -> None:
        try:
            table.delete_item(Key=key)
        except ClientError as e:
            logger.error(f"Error deleting from {table.name}: {e}")
            raise StorageError(f"Failed to {action}: {e}") from e

    def _ensure_unique(self, table, attribute: str, value: str, message: str) -> None:
        existing = self._scan(
            table,
            f'check {attribute}',
            FilterExpression=Attr(attribute).eq(value)
        )
        if existing:
            raise DuplicateRecordError(message)

    # People

    def get_all_people(self) -> List[Person]:
        """Return all people ordered by name."""
        items = self._scan(self.people, 'fetch people')
        people = [Person(**self._record(item, Person)) for item in items]
        return sorted(people, key=lambda p: p.name.lower())

    def create_person(self, data: Dict[str, Any]) -> Person:
        """
        Create a person.

        Args:
            data: Validated person fields (name, email)

        Returns:
            The stored Person

        Raises:
            DuplicateRecordError: If the email is already registered
        """
        self._ensure_unique(
            self.people, 'email', data['email'],
            'Email already exists. Please use a different email.'
        )
        timestamp = _now()
        person = Person(
            id=str(uuid.uuid4()),
            name=data['name'],
            email=data['email'],
            created_at=timestamp,
            updated_at=timestamp
        )
        self._put(self.people, _to_item(person.to_dict()), 'create person')
        logger.info(f"Created person {person.id}")
        return person

    def delete_person(self, person_id: str) -> None:
        self._delete(self.people, {'id': person_id}, 'delete person')

    # Categories and offices

    def get_all_categories(self) -> List[Category]:
        """Return all categories ordered by name."""
        items = self._scan(self.categories, 'fetch categories')
        categories = [Category(**self._record(item, Category)) for item in items]
        return sorted(categories, key=lambda c: c.name.lower())

    def get_unique_categories(self) -> List[str]:
        """Return category names ordered by name."""
        return [category.name for category in self.get_all_categories()]

    def create_category(self, data: Dict[str, Any]) -> Category:
        self._ensure_unique(
            self.categories, 'name', data['name'],
            'Category already exists. Please use a different name.'
        )
        timestamp = _now()
        category = Category(
            id=str(uuid.uuid4()),
            name=data['name'],
            created_at=timestamp,
            updated_at=timestamp
        )
        self._put(self.categories, _to_item(category.to_dict()), 'create category')
        return category

    def delete_category(self, category_id: str) -> None:
        self._delete(self.categories, {'id': category_id}, 'delete category')

    def get_all_offices(self) -> List[Office]:
        """Return all offices ordered by name."""
        items = self._scan(self.offices, 'fetch offices')
        offices = [Office(**self._record(item, Office)) for item in items]
        return sorted(offices, key=lambda o: o.name.lower())

    def create_office(self, data: Dict[str, Any]) -> Office:
        self._ensure_unique(
            self.offices, 'name', data['name'],
            'Office already exists. Please use a different name.'
        )
        timestamp = _now()
        office = Office(
            id=str(uuid.uuid4()),
            name=data['name'],
            created_at=timestamp,
            updated_at=timestamp
        )
        self._put(self.offices, _to_item(office.to_dict()), 'create office')
        return office

    def delete_office(self, office_id: str) -> None:
        self._delete(self.offices, {'id': office_id}, 'delete office')

    # Conferences

    def get_all_conferences(self) -> List[Conference]:
        """Return all conferences, most recently created first."""
        items = self._scan(self.conferences, 'fetch conferences')
        conferences = [self._item_to_conference(item) for item in items]
        return sorted(conferences, key=lambda c: c.created_at, reverse=True)

    def get_conferences_with_people(self) -> List[Tuple[Conference, Optional[Person]]]:
        """
        Return all conferences paired with the person assigned to them.

        Returns:
            List of (Conference, Person or None), most recent first
        """
        conferences = self.get_all_conferences()
        if not conferences:
            return []

        people = {person.id: person for person in self.get_all_people()}
        return [
            (conference, people.get(conference.assigned_to))
            for conference in conferences
        ]

    def get_conference(self, conference_id: str) -> Optional[Conference]:
        try:
            response = self.conferences.get_item(Key={'id': conference_id})
        except ClientError as e:
            raise StorageError(f"Failed to fetch conference: {e}") from e
        item = response.get('Item')
        return self._item_to_conference(item) if item else None

    def create_conference(self, data: Dict[str, Any]) -> Conference:
        """
        Create a conference.

        Args:
            data: Validated conference fields

        Returns:
            The stored Conference
        """
        timestamp = _now()
        conference = self._build_conference(
            str(uuid.uuid4()), data, created_at=timestamp, updated_at=timestamp
        )
        self._put(
            self.conferences,
            _to_item(conference.to_dict()),
            'create conference'
        )
        logger.info(f"Created conference {conference.id}: {conference.name}")
        return conference

    def update_conference(self, conference_id: str, data: Dict[str, Any]) -> Conference:
        """
        Replace the fields of an existing conference.

        Args:
            conference_id: Conference to update
            data: Validated conference fields

        Returns:
            The updated Conference

        Raises:
            RecordNotFoundError: If the conference does not exist
        """
        existing = self.get_conference(conference_id)
        if existing is None:
            raise RecordNotFoundError("Failed to update conference: record not found")

        conference = self._build_conference(
            conference_id, data,
            created_at=existing.created_at,
            updated_at=_now()
        )
        self._put(
            self.conferences,
            _to_item(conference.to_dict()),
            'update conference',
            ConditionExpression=Attr('id').exists()
        )
        return conference

    def delete_conference(self, conference_id: str) -> None:
        """Delete a conference and its rating."""
        self._delete(self.ratings, {'conference_id': conference_id}, 'delete rating')
        self._delete(self.conferences, {'id': conference_id}, 'delete conference')
        logger.info(f"Deleted conference {conference_id}")

    # Ratings

    def get_rating(self, conference_id: str) -> Optional[Rating]:
        try:
            response = self.ratings.get_item(Key={'conference_id': conference_id})
        except ClientError as e:
            raise StorageError(f"Failed to fetch rating: {e}") from e
        item = response.get('Item')
        return self._item_to_rating(item) if item else None

    def get_all_ratings(self) -> Dict[str, Rating]:
        """Return all ratings keyed by conference id."""
        items = self._scan(self.ratings, 'fetch ratings')
        ratings = [self._item_to_rating(item) for item in items]
        return {rating.conference_id: rating for rating in ratings}

    def upsert_rating(self, conference_id: str, data: Dict[str, Any]) -> Rating:
        """
        Insert or replace the rating of a conference.

        Args:
            conference_id: Rated conference
            data: Validated rating fields

        Returns:
            The stored Rating
        """
        existing = self.get_rating(conference_id)
        timestamp = _now()
        rating = Rating(
            conference_id=conference_id,
            created_at=existing.created_at if existing else timestamp,
            updated_at=timestamp,
            **{key: data.get(key) for key in RATING_FIELDS}
        )
        self._put(self.ratings, _to_item(rating.to_dict()), 'save rating')
        return rating

    # Conversion

    def _record(self, item: dict, model) -> dict:
        return {key: item[key] for key in model.__dataclass_fields__ if key in item}

    def _build_conference(self, conference_id: str, data: Dict[str, Any],
                          created_at: str, updated_at: str) -> Conference:
        fields = {key: data.get(key) for key in CONFERENCE_FIELDS}
        fields['price'] = float(fields['price'] or 0)
        fields['currency'] = fields['currency'] or 'SEK'
        return Conference(
            id=conference_id,
            created_at=created_at,
            updated_at=updated_at,
            **fields
        )

    def _item_to_conference(self, item: dict) -> Conference:
        fields = self._record(item, Conference)
        fields['price'] = float(fields.get('price', 0))
        fields.setdefault('currency', 'SEK')
        return Conference(**fields)

    def _item_to_rating(self, item: dict) -> Rating:
        fields = self._record(item, Rating)
        for key in RATING_FIELDS:
            fields[key] = _int_or_none(fields.get(key))
        return Rating(**fields)
