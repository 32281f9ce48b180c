"""
Domain services for the club analytics engine.
Pure aggregation functions plus the async service that feeds them a snapshot.
"""

from .score_normalizer import normalize_scores, read_score_encoding
from .attribution import resolve_attributions, build_attribution_map, default_attribution
from .outcome import classify, classify_slot
from .aggregation import (
    aggregate, aggregate_by_category, aggregate_by_event_type, filter_results, summarize_results
)
from .leaderboard import team_totals, build_leaderboard, build_leaderboards
from .analytics_engine import SeasonSnapshot, compute_season_analytics
from .analytics_service import AnalyticsService

__all__ = [
    "normalize_scores",
    "read_score_encoding",
    "resolve_attributions",
    "build_attribution_map",
    "default_attribution",
    "classify",
    "classify_slot",
    "aggregate",
    "aggregate_by_category",
    "aggregate_by_event_type",
    "filter_results",
    "summarize_results",
    "team_totals",
    "build_leaderboard",
    "build_leaderboards",
    "SeasonSnapshot",
    "compute_season_analytics",
    "AnalyticsService",
]
