"""Data models for scraped events and tracked conferences."""
from dataclasses import asdict, dataclass, field
from typing import List, Optional


@dataclass
class ScrapedEvent:
    """Event fields recovered from an event page."""
    name: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    suggested_categories: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize, leaving out fields that were not recovered."""
        return {
            key: value for key, value in asdict(self).items()
            if value is not None
        }


@dataclass
class Person:
    """Person who attends conferences."""
    id: str
    name: str
    email: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Office:
    """Company office a conference is booked for."""
    id: str
    name: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Category:
    """Conference category label."""
    id: str
    name: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Conference:
    """Tracked conference or event."""
    id: str
    name: str
    location: str
    category: str
    price: float
    currency: str
    created_at: str
    updated_at: str
    office_id: Optional[str] = None
    assigned_to: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    event_link: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    reason_to_go: Optional[str] = None
    fee_link: Optional[str] = None
    partnership: Optional[str] = None
    fee: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Rating:
    """Post-event rating, at most one per conference."""
    conference_id: str
    created_at: str
    updated_at: str
    accessibility_rating: Optional[int] = None
    skill_improvement_rating: Optional[int] = None
    finding_partners_rating: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ConferenceFilters:
    """List filters; None or 'all' leaves a dimension unfiltered."""
    office: Optional[str] = None
    category: Optional[str] = None
    assigned_to: Optional[str] = None
