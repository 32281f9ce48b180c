"""
Statistics domain models for the club analytics engine.
Score encodings, classified outcomes, aggregates and leaderboards.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union
import datetime

from .base import EventType, Serializable
from .player import MatchStats


class Outcome(str, Enum):
    """Result of one team slot in one fixture."""
    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"

    @property
    def points(self) -> int:
        """Standard league points for this outcome."""
        return {Outcome.WIN: 3, Outcome.DRAW: 1}.get(self, 0)


class LeaderboardMetric(str, Enum):
    """Player statistics that dashboards rank."""
    MINUTES = "minutes"
    GAMES = "games"
    CAPTAINCY = "captaincy"
    PLAYER_OF_THE_MATCH = "player_of_the_match"
    GOALS = "goals"
    ASSISTS = "assists"
    SAVES = "saves"
    DISCIPLINE = "discipline"

    @property
    def selector(self) -> Callable[[MatchStats], int]:
        """Read this metric from a player's match stats."""
        return _METRIC_SELECTORS[self]

    @property
    def include_zero(self) -> bool:
        """Minutes and games are reported for every player, even at zero."""
        return self in (LeaderboardMetric.MINUTES, LeaderboardMetric.GAMES)


_METRIC_SELECTORS: Dict[LeaderboardMetric, Callable[[MatchStats], int]] = {
    LeaderboardMetric.MINUTES: lambda s: s.total_minutes,
    LeaderboardMetric.GAMES: lambda s: s.total_games,
    LeaderboardMetric.CAPTAINCY: lambda s: s.captain_games,
    LeaderboardMetric.PLAYER_OF_THE_MATCH: lambda s: s.player_of_the_match_count,
    LeaderboardMetric.GOALS: lambda s: s.total_goals,
    LeaderboardMetric.ASSISTS: lambda s: s.total_assists,
    LeaderboardMetric.SAVES: lambda s: s.total_saves,
    LeaderboardMetric.DISCIPLINE: lambda s: s.discipline_points,
}


# =============================================================================
# Score encodings
# =============================================================================

@dataclass(frozen=True)
class ScoreTuple(Serializable):
    """Normalized score of one team slot, from our side's point of view."""
    team_number: int
    our_score: int
    opponent_score: int


@dataclass(frozen=True)
class CategoryScore(Serializable):
    """Category-aware encoding: ``team_{n}`` / ``opponent_{n}`` keys."""
    team: int
    opponent: int
    team_number: int

    def to_tuple(self, is_home: Optional[bool] = None) -> ScoreTuple:
        return ScoreTuple(self.team_number, self.team, self.opponent)


@dataclass(frozen=True)
class LegacyHomeAway(Serializable):
    """Venue-keyed encoding: ``home`` / ``away``, first team slot only."""
    home: int
    away: int

    def to_tuple(self, is_home: Optional[bool] = None) -> ScoreTuple:
        if is_home:
            return ScoreTuple(1, self.home, self.away)
        return ScoreTuple(1, self.away, self.home)


ScoreEncoding = Union[CategoryScore, LegacyHomeAway]


# =============================================================================
# Attribution and classified outcomes
# =============================================================================

@dataclass(frozen=True)
class Attribution(Serializable):
    """Which performance category played in a given team slot of an event."""
    team_number: int
    category_id: Optional[str]
    category_name: str

    @property
    def category_key(self) -> str:
        """Partition key: the category id, or its name for synthetic categories."""
        return self.category_id if self.category_id is not None else self.category_name


@dataclass(frozen=True)
class ClassifiedOutcome(Serializable):
    """One team slot of one event, with its score and verdict."""
    event_id: str
    event_type: EventType
    attribution: Attribution
    score: ScoreTuple
    outcome: Outcome


# =============================================================================
# Aggregates
# =============================================================================

def _round_half_up(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AggregateStats(Serializable):
    """
    Season totals for one partition of outcomes.

    Instances are immutable; ``add`` returns a new aggregate.
    """
    wins: int = 0
    draws: int = 0
    losses: int = 0
    total_games: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    win_rate: int = 0
    avg_goals_per_game: float = 0.0
    points: int = 0

    @classmethod
    def from_counts(
        cls,
        wins: int = 0,
        draws: int = 0,
        losses: int = 0,
        goals_for: int = 0,
        goals_against: int = 0
    ) -> 'AggregateStats':
        """Build an aggregate, deriving every dependent figure from the raw counts."""
        total_games = wins + draws + losses

        win_rate = 0
        avg_goals_per_game = 0.0
        if total_games > 0:
            win_rate = int(_round_half_up(Decimal(100 * wins) / Decimal(total_games), '1'))
            avg_goals_per_game = float(
                _round_half_up(Decimal(goals_for) / Decimal(total_games), '0.1')
            )

        return cls(
            wins=wins,
            draws=draws,
            losses=losses,
            total_games=total_games,
            goals_for=goals_for,
            goals_against=goals_against,
            goal_difference=goals_for - goals_against,
            win_rate=win_rate,
            avg_goals_per_game=avg_goals_per_game,
            points=wins * 3 + draws
        )

    def _counting(self, outcome: Outcome, our_score: int, opponent_score: int) -> 'AggregateStats':
        return AggregateStats.from_counts(
            wins=self.wins + (outcome is Outcome.WIN),
            draws=self.draws + (outcome is Outcome.DRAW),
            losses=self.losses + (outcome is Outcome.LOSS),
            goals_for=self.goals_for + our_score,
            goals_against=self.goals_against + opponent_score
        )

    def add(self, item: ClassifiedOutcome) -> 'AggregateStats':
        """Return a new aggregate that also counts ``item``."""
        return self._counting(item.outcome, item.score.our_score, item.score.opponent_score)

    def add_slot(self, slot: 'SlotResult') -> 'AggregateStats':
        """Return a new aggregate that also counts a listed slot result."""
        return self._counting(slot.outcome, slot.our_score, slot.opponent_score)

    def __add__(self, other: 'AggregateStats') -> 'AggregateStats':
        if not isinstance(other, AggregateStats):
            return NotImplemented
        return AggregateStats.from_counts(
            wins=self.wins + other.wins,
            draws=self.draws + other.draws,
            losses=self.losses + other.losses,
            goals_for=self.goals_for + other.goals_for,
            goals_against=self.goals_against + other.goals_against
        )


@dataclass(frozen=True)
class CategoryStats(Serializable):
    """Aggregate for one performance category."""
    category_id: Optional[str]
    category_name: str
    stats: AggregateStats


@dataclass(frozen=True)
class EventTypeStats(Serializable):
    """Aggregate for one kind of event, broken down per performance category."""
    event_type: EventType
    stats: AggregateStats
    categories: Tuple[CategoryStats, ...] = ()


# =============================================================================
# Per-event results
# =============================================================================

@dataclass(frozen=True)
class SlotResult(Serializable):
    """Score line of one team slot, as listed under its event."""
    team_number: int
    category_name: str
    our_score: int
    opponent_score: int
    outcome: Outcome


@dataclass(frozen=True)
class EventResult(Serializable):
    """One played event with the results of each of its team slots."""
    event_id: str
    date: Optional[datetime.date]
    title: str
    opponent: Optional[str]
    event_type: EventType
    slots: Tuple[SlotResult, ...] = ()


# =============================================================================
# Players
# =============================================================================

@dataclass(frozen=True)
class TeamTotals(Serializable):
    """Sum of match statistics over the filtered roster."""
    player_count: int = 0
    stats: MatchStats = field(default_factory=MatchStats)


@dataclass(frozen=True)
class LeaderboardEntry(Serializable):
    """One ranked row of a leaderboard."""
    rank: int
    player_id: str
    player_name: str
    value: int


@dataclass(frozen=True)
class SeasonAnalytics(Serializable):
    """Everything a team dashboard renders for one season snapshot."""
    overall: AggregateStats
    categories: Tuple[CategoryStats, ...]
    event_types: Dict[EventType, EventTypeStats]
    results: Tuple[EventResult, ...]
    recent_results: Tuple[EventResult, ...]
    team_totals: TeamTotals
    leaderboards: Dict[LeaderboardMetric, Tuple[LeaderboardEntry, ...]]

    def leaderboard(self, metric: LeaderboardMetric) -> List[LeaderboardEntry]:
        """Get one leaderboard as a list (empty when not built)."""
        return list(self.leaderboards.get(metric, ()))
