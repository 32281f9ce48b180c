"""
Season analytics engine.

Single entry point shared by every dashboard: takes an already-fetched
snapshot and returns all aggregates as immutable values. Pure and
synchronous; calling it twice on the same snapshot gives identical output.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import datetime

from core.utils import LoggerFactory

from ..models.event import Event, EventSelection, PerformanceCategory
from ..models.player import Player
from ..models.statistics import ClassifiedOutcome, EventResult, SeasonAnalytics, SlotResult
from .aggregation import aggregate, aggregate_by_category, aggregate_by_event_type
from .attribution import DEFAULT_CATEGORY_LABEL, build_attribution_map, default_attribution
from .leaderboard import DEFAULT_PLAYER_STATUS, build_leaderboards, players_with_status, team_totals
from .outcome import classify_slot
from .score_normalizer import normalize_scores

logger = LoggerFactory.get_logger(__name__)


@dataclass(frozen=True)
class SeasonSnapshot:
    """Inputs of one aggregation run, fetched by the caller."""
    events: Tuple[Event, ...] = ()
    selections: Tuple[EventSelection, ...] = ()
    players: Tuple[Player, ...] = ()
    categories: Tuple[PerformanceCategory, ...] = ()


def _sort_key(event: Event):
    # Most recent first, undated events last
    return (event.date is not None, event.date or datetime.date.min)


def played_events(events: Sequence[Event], as_of: Optional[datetime.date] = None) -> List[Event]:
    """
    Keep events that carry scores (and took place before ``as_of`` when given).

    Unscored events are unplayed; they are dropped, never counted as losses.
    """
    played = []
    for event in events:
        if not event.has_scores:
            continue
        if as_of is not None and not event.is_before(as_of):
            continue
        played.append(event)
    return played


def classify_events(
    events: Sequence[Event],
    selections: Sequence[EventSelection],
    fallback_label: str = DEFAULT_CATEGORY_LABEL,
    categories: Sequence[PerformanceCategory] = ()
) -> List[Tuple[Event, List[ClassifiedOutcome]]]:
    """Attribute, normalize and classify every team slot of every event."""
    attribution_map = build_attribution_map(selections, fallback_label, categories)
    fallback = [default_attribution(fallback_label)]

    classified = []
    for event in events:
        attributions = attribution_map.get(event.id, fallback)
        by_slot = {a.team_number: a for a in attributions}
        scores = normalize_scores(event.scores, event.is_home, [a.team_number for a in attributions])
        classified.append((
            event,
            [classify_slot(event.id, event.event_type, by_slot[s.team_number], s) for s in scores]
        ))
    return classified


def _event_result(event: Event, outcomes: Sequence[ClassifiedOutcome]) -> EventResult:
    return EventResult(
        event_id=event.id,
        date=event.date,
        title=event.display_title,
        opponent=event.opponent,
        event_type=event.event_type,
        slots=tuple(
            SlotResult(
                team_number=o.score.team_number,
                category_name=o.attribution.category_name,
                our_score=o.score.our_score,
                opponent_score=o.score.opponent_score,
                outcome=o.outcome
            )
            for o in outcomes
        )
    )


def compute_season_analytics(
    snapshot: SeasonSnapshot,
    top_n: int,
    fallback_label: str = DEFAULT_CATEGORY_LABEL,
    as_of: Optional[datetime.date] = None,
    recent_limit: int = 5,
    player_status: Optional[str] = DEFAULT_PLAYER_STATUS
) -> SeasonAnalytics:
    """
    Compute every aggregate a team dashboard shows.

    Args:
        snapshot: Events, selections, categories and roster
        top_n: Leaderboard size chosen by the caller
        fallback_label: Category name for events without selections (usually the team name)
        as_of: When given, only events dated strictly before it count
        recent_limit: Number of most recent results to expose separately
        player_status: Roster status counted in totals and leaderboards; None counts everyone

    Returns:
        SeasonAnalytics
    """
    events = sorted(played_events(snapshot.events, as_of), key=_sort_key, reverse=True)
    classified = classify_events(events, snapshot.selections, fallback_label, snapshot.categories)
    outcomes = [o for _, slot_outcomes in classified for o in slot_outcomes]

    logger.debug(
        f"Aggregating {len(outcomes)} team slots from {len(events)} played events "
        f"({len(snapshot.events) - len(events)} skipped)"
    )

    # Events with no scorable slot are left out of the listings
    results = tuple(
        _event_result(event, slot_outcomes)
        for event, slot_outcomes in classified
        if slot_outcomes
    )
    roster = players_with_status(snapshot.players, player_status)

    return SeasonAnalytics(
        overall=aggregate(outcomes),
        categories=tuple(aggregate_by_category(outcomes)),
        event_types=aggregate_by_event_type(outcomes),
        results=results,
        recent_results=results[:max(recent_limit, 0)],
        team_totals=team_totals(snapshot.players, player_status),
        leaderboards=build_leaderboards(roster, top_n)
    )
