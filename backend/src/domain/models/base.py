"""
Base domain models and common patterns for the club analytics engine.
"""

from abc import ABC
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional
from datetime import date


class EventType(str, Enum):
    """
    Kinds of team activity an event record can describe.
    """
    MATCH = "match"
    FIXTURE = "fixture"
    FRIENDLY = "friendly"
    TRAINING = "training"
    TOURNAMENT = "tournament"
    FESTIVAL = "festival"
    SOCIAL = "social"

    @property
    def display_name(self) -> str:
        """Get the label shown on dashboards."""
        return self.value.capitalize()

    @classmethod
    def from_value(cls, value: Any) -> 'EventType':
        """
        Map a raw event_type string.

        A missing or blank value is a match; unrecognised labels count as fixtures.
        """
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.MATCH
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.FIXTURE


def serialize_value(value: Any) -> Any:
    """Convert a model attribute into plain JSON-friendly data."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {serialize_value(k): serialize_value(v) for k, v in value.items()}
    return value


class Serializable:
    """Mixin giving dataclasses a recursive ``to_dict``."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert the model to dictionary representation."""
        return {
            f.name: serialize_value(getattr(self, f.name))
            for f in fields(self)
            if f.repr
        }


@dataclass(frozen=True)
class BaseEntity(Serializable, ABC):
    """
    Base entity class for all snapshot records.

    Entities are read-only for the duration of an aggregation run.
    """
    id: str = ""

    # Raw backend row for debugging and future use
    raw_data: Optional[Dict[str, Any]] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'BaseEntity':
        """
        Create entity from a backend row.
        Should be overridden by subclasses for specific transformation logic.
        """
        raise NotImplementedError("Subclasses must implement from_record")

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary representation, without the raw row."""
        result = super().to_dict()
        result.pop('raw_data', None)
        return result


def record_id(record: Dict[str, Any], key: str = 'id') -> str:
    """Read an opaque identifier as a string ('' when absent)."""
    value = record.get(key)
    return "" if value is None else str(value)
