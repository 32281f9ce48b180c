"""
Event domain models: fixtures/sessions, their category selections and performance categories.
Based on the hosted backend's events, event_selections and performance_categories tables.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import datetime

from core.utils import DataValidator

from .base import BaseEntity, EventType, record_id


@dataclass(frozen=True)
class PerformanceCategory(BaseEntity):
    """A named squad tier (e.g. "A Team") that can field its own side."""
    name: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'PerformanceCategory':
        """Create PerformanceCategory from a performance_categories row."""
        name = record.get('name')
        return cls(
            id=record_id(record),
            name=name if isinstance(name, str) else "",
            raw_data=record
        )


@dataclass(frozen=True)
class EventSelection(BaseEntity):
    """
    Links an event to a performance category for one team slot.

    Rows for the same event with different team numbers are independent
    sub-matches played under the same fixture.
    """
    event_id: str = ""
    team_number: int = 1
    performance_category_id: Optional[str] = None

    # Name of the joined category row, when the backend embeds it
    category_name: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'EventSelection':
        """Create EventSelection from an event_selections row."""
        team_number = DataValidator.coerce_int(record.get('team_number'), default=1)
        if team_number < 1:
            team_number = 1

        category_id = record.get('performance_category_id')

        # PostgREST embeds the joined row as an object (or a one-item list)
        embedded = record.get('performance_categories')
        if isinstance(embedded, list):
            embedded = embedded[0] if embedded else None
        category_name = None
        if isinstance(embedded, dict) and isinstance(embedded.get('name'), str):
            category_name = embedded['name'] or None

        return cls(
            id=record_id(record),
            event_id=record_id(record, 'event_id'),
            team_number=team_number,
            performance_category_id=None if category_id is None else str(category_id),
            category_name=category_name,
            raw_data=record
        )


@dataclass(frozen=True)
class Event(BaseEntity):
    """
    One fixture or session.

    ``scores`` is the free-form score map exactly as stored; ``None`` means
    the event has not been played or recorded yet.
    """
    date: Optional[datetime.date] = None
    title: str = ""
    opponent: Optional[str] = None
    is_home: Optional[bool] = None
    scores: Optional[Dict[str, Any]] = None
    event_type: EventType = EventType.MATCH

    @property
    def has_scores(self) -> bool:
        """Whether the event carries a score payload."""
        return self.scores is not None

    @property
    def display_title(self) -> str:
        """Title for result listings."""
        if self.title:
            return self.title
        if self.opponent:
            return f"vs {self.opponent}"
        return self.event_type.display_name

    def is_before(self, day: datetime.date) -> bool:
        """Whether the event took place strictly before ``day``."""
        return self.date is not None and self.date < day

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Event':
        """Create Event from an events row."""
        scores = record.get('scores')
        opponent = record.get('opponent')

        return cls(
            id=record_id(record),
            date=DataValidator.coerce_date(record.get('date')),
            title=record.get('title') or "",
            opponent=opponent if isinstance(opponent, str) and opponent else None,
            is_home=DataValidator.coerce_optional_bool(record.get('is_home')),
            scores=scores,
            event_type=EventType.from_value(record.get('event_type') or record.get('type')),
            raw_data=record
        )
