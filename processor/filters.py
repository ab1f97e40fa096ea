"""Filtering of conference lists."""
from typing import List, Optional

from processor.models import Conference, ConferenceFilters

ALL = 'all'


def _active(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def split_categories(category: str) -> List[str]:
    """Split a comma-joined category field into its labels."""
    return [part.strip() for part in (category or '').split(',') if part.strip()]


def filter_conferences(
    conferences: List[Conference],
    filters: ConferenceFilters
) -> List[Conference]:
    """
    Apply office, category and assignee filters to a conference list.

    Args:
        conferences: Conferences to filter, order is preserved
        filters: Filters to apply; None or 'all' skips a filter

    Returns:
        Conferences matching every active filter
    """
    filtered = list(conferences)

    if _active(filters.office):
        filtered = [c for c in filtered if c.office_id == filters.office]

    if _active(filters.category):
        filtered = [
            c for c in filtered
            if filters.category in split_categories(c.category)
        ]

    if _active(filters.assigned_to):
        filtered = [c for c in filtered if c.assigned_to == filters.assigned_to]

    return filtered
