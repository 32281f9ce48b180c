"""
Category attribution resolver.

Maps each event to the performance categories that played under it, one per
team slot.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from core.utils import LoggerFactory

from ..models.event import EventSelection, PerformanceCategory
from ..models.statistics import Attribution

logger = LoggerFactory.get_logger(__name__)

DEFAULT_CATEGORY_LABEL = "Default"


def _category_lookup(categories: Optional[Iterable[PerformanceCategory]]) -> Dict[str, str]:
    if not categories:
        return {}
    return {c.id: c.name for c in categories if c.id and c.name}


def _attribution_for(selection: EventSelection, names: Mapping[str, str]) -> Attribution:
    name = selection.category_name
    if not name and selection.performance_category_id is not None:
        name = names.get(selection.performance_category_id)
    return Attribution(
        team_number=selection.team_number,
        category_id=selection.performance_category_id,
        category_name=name or f"Team {selection.team_number}"
    )


def _dedupe(selections: Iterable[EventSelection], names: Mapping[str, str]) -> List[Attribution]:
    attributions = []
    seen = set()
    for selection in selections:
        if selection.team_number in seen:
            logger.debug(
                f"Duplicate team slot {selection.team_number} for event "
                f"{selection.event_id}, keeping first selection"
            )
            continue
        seen.add(selection.team_number)
        attributions.append(_attribution_for(selection, names))
    return attributions


def default_attribution(fallback_label: str = DEFAULT_CATEGORY_LABEL) -> Attribution:
    """Synthetic single-slot attribution for events without selections."""
    return Attribution(team_number=1, category_id=None, category_name=fallback_label)


def resolve_attributions(
    event_id: str,
    selection_rows: Iterable[EventSelection],
    fallback_label: str = DEFAULT_CATEGORY_LABEL,
    categories: Optional[Iterable[PerformanceCategory]] = None
) -> List[Attribution]:
    """
    Resolve the team slots of one event.

    Args:
        event_id: Event to resolve
        selection_rows: Selection rows (rows of other events are ignored)
        fallback_label: Category name used when the event has no selections
        categories: Optional category records to name selections that only carry an id

    Returns:
        Attributions in row order, one per team number, never empty
    """
    rows = [row for row in selection_rows if row.event_id == event_id]
    if not rows:
        return [default_attribution(fallback_label)]
    return _dedupe(rows, _category_lookup(categories))


def build_attribution_map(
    selection_rows: Iterable[EventSelection],
    fallback_label: str = DEFAULT_CATEGORY_LABEL,
    categories: Optional[Iterable[PerformanceCategory]] = None
) -> Dict[str, List[Attribution]]:
    """
    Group selection rows by event in a single pass.

    Events absent from the result have no selections; callers fall back to
    ``default_attribution(fallback_label)`` for them.
    """
    grouped: Dict[str, List[EventSelection]] = {}
    for row in selection_rows:
        grouped.setdefault(row.event_id, []).append(row)

    names = _category_lookup(categories)
    return {event_id: _dedupe(rows, names) for event_id, rows in grouped.items()}
