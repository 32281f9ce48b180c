"""
Aggregate statistics engine.

Folds classified outcomes into season totals, globally and per partition.
Every function returns new immutable values and leaves its input untouched.
"""

from functools import reduce
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple, TypeVar

from ..models.base import EventType
from ..models.statistics import (
    AggregateStats, CategoryStats, ClassifiedOutcome, EventResult, EventTypeStats
)

K = TypeVar('K', bound=Hashable)


def aggregate(outcomes: Iterable[ClassifiedOutcome]) -> AggregateStats:
    """
    Fold outcomes into one aggregate.

    A fixture fielding several team slots contributes once per slot.
    """
    return reduce(AggregateStats.add, outcomes, AggregateStats())


def partition(
    outcomes: Iterable[ClassifiedOutcome],
    key: Callable[[ClassifiedOutcome], K]
) -> Dict[K, AggregateStats]:
    """
    Aggregate outcomes per partition key.

    Keys appear in order of first occurrence.
    """
    return reduce(
        lambda acc, item: {**acc, key(item): acc.get(key(item), AggregateStats()).add(item)},
        outcomes,
        {}
    )


def aggregate_by_category(outcomes: Iterable[ClassifiedOutcome]) -> List[CategoryStats]:
    """
    Aggregate outcomes per performance category.

    Categories are keyed by id, or by name for synthetic ones. The result
    skips categories without games and is ordered by games played,
    descending, with ties kept in order of first appearance.
    """
    outcomes = list(outcomes)

    labels: Dict[str, Tuple] = {}
    for item in outcomes:
        labels.setdefault(
            item.attribution.category_key,
            (item.attribution.category_id, item.attribution.category_name)
        )

    totals = partition(outcomes, lambda item: item.attribution.category_key)
    categories = [
        CategoryStats(category_id=labels[key][0], category_name=labels[key][1], stats=stats)
        for key, stats in totals.items()
        if stats.total_games > 0
    ]
    return sorted(categories, key=lambda c: c.stats.total_games, reverse=True)


def aggregate_by_event_type(outcomes: Iterable[ClassifiedOutcome]) -> Dict[EventType, EventTypeStats]:
    """
    Aggregate outcomes per kind of event (match, fixture, tournament...).

    Each event type carries its own total and its per-category breakdown.
    Types appear in order of first occurrence.
    """
    grouped: Dict[EventType, List[ClassifiedOutcome]] = {}
    for item in outcomes:
        grouped.setdefault(item.event_type, []).append(item)

    return {
        event_type: EventTypeStats(
            event_type=event_type,
            stats=aggregate(items),
            categories=tuple(aggregate_by_category(items))
        )
        for event_type, items in grouped.items()
    }


# =============================================================================
# Results summary
# =============================================================================

def filter_results(
    results: Iterable[EventResult],
    event_type: Optional[EventType] = None,
    category_name: Optional[str] = None
) -> List[EventResult]:
    """
    Narrow listed results to one event type and/or one category.

    An event matches a category when any of its slots was played under that
    name. Matching events are returned whole, in their original order.
    """
    return [
        result for result in results
        if (event_type is None or result.event_type is event_type)
        and (category_name is None or any(slot.category_name == category_name for slot in result.slots))
    ]


def summarize_results(
    results: Iterable[EventResult],
    event_type: Optional[EventType] = None,
    category_name: Optional[str] = None
) -> AggregateStats:
    """
    Total the slots of the filtered results.

    With a category, only that category's slots count, even when an event
    also fielded other teams.
    """
    slots = (
        slot
        for result in filter_results(results, event_type, category_name)
        for slot in result.slots
        if category_name is None or slot.category_name == category_name
    )
    return reduce(AggregateStats.add_slot, slots, AggregateStats())
