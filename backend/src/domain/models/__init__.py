"""
Domain models for the club analytics engine.
Read-only snapshot records and the immutable results computed from them.
"""

from .base import EventType, BaseEntity
from .event import Event, EventSelection, PerformanceCategory
from .player import Player, MatchStats
from .statistics import (
    Outcome,
    LeaderboardMetric,
    ScoreTuple,
    CategoryScore,
    LegacyHomeAway,
    ScoreEncoding,
    Attribution,
    ClassifiedOutcome,
    AggregateStats,
    CategoryStats,
    EventTypeStats,
    SlotResult,
    EventResult,
    TeamTotals,
    LeaderboardEntry,
    SeasonAnalytics,
)

__all__ = [
    # Base models
    "EventType",
    "BaseEntity",

    # Snapshot records
    "Event",
    "EventSelection",
    "PerformanceCategory",
    "Player",
    "MatchStats",

    # Scores and outcomes
    "Outcome",
    "ScoreTuple",
    "CategoryScore",
    "LegacyHomeAway",
    "ScoreEncoding",
    "Attribution",
    "ClassifiedOutcome",

    # Aggregates and leaderboards
    "AggregateStats",
    "CategoryStats",
    "EventTypeStats",
    "SlotResult",
    "EventResult",
    "TeamTotals",
    "LeaderboardMetric",
    "LeaderboardEntry",
    "SeasonAnalytics",
]
