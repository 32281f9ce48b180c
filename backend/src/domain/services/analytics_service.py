"""
Analytics domain service.

Fetches a season snapshot from the data source and runs the analytics
engine on it. The engine is invoked only once every request has resolved.
"""

import asyncio
from typing import Any, Dict, List, Optional, Type, TypeVar
import datetime

from core.utils import LoggerFactory
from core.exceptions import ValidationError, ErrorContext
from core.error_handler import error_handler, with_domain_error_handling
from config.settings import Settings, settings as default_settings

from ..models.base import BaseEntity, EventType, serialize_value
from ..models.event import Event, EventSelection, PerformanceCategory
from ..models.player import Player
from ..models.statistics import SeasonAnalytics
from .aggregation import filter_results, summarize_results
from .analytics_engine import SeasonSnapshot, compute_season_analytics

T = TypeVar('T', bound=BaseEntity)


class AnalyticsService:
    """
    Domain service for team season analytics.
    Orchestrates snapshot retrieval and hands it to the pure engine.
    """

    def __init__(self, data_source, config: Optional[Settings] = None):
        """
        Initialize with a data source dependency.

        Args:
            data_source: Object exposing async get_events, get_event_selections,
                get_players and get_performance_categories (see SupabaseClient)
            config: Application settings (global settings by default)
        """
        self.data_source = data_source
        self.config = config or default_settings
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    def _parse_rows(self, rows: Any, entity_class: Type[T]) -> List[T]:
        """Convert raw rows, skipping the ones that cannot be read."""
        if not isinstance(rows, list):
            return []

        entities = []
        for row in rows:
            if not isinstance(row, dict):
                self.logger.warning(f"Skipping invalid {entity_class.__name__} row: {row!r}")
                continue
            try:
                entities.append(entity_class.from_record(row))
            except (TypeError, ValueError) as e:
                self.logger.warning(f"Skipping invalid {entity_class.__name__} data: {e}")
        return entities

    def resolve_top_n(self, top_n: Optional[int] = None, compact: bool = False) -> int:
        """Leaderboard size: explicit value, or the configured compact/full size."""
        if top_n is not None:
            return top_n
        if compact:
            return self.config.leaderboard_compact_size
        return self.config.leaderboard_full_size

    @error_handler.with_error_context(operation="fetch_snapshot")
    async def fetch_snapshot(
        self,
        team_id: str,
        today: Optional[datetime.date] = None,
        season_start: Optional[datetime.date] = None,
        season_end: Optional[datetime.date] = None
    ) -> SeasonSnapshot:
        """
        Fetch everything one aggregation run needs.

        Events come first (their ids scope the selection query); selections,
        roster and categories are then requested concurrently.
        """
        today = today or datetime.date.today()

        events_response = await self.data_source.get_events(
            team_id, before=today, season_start=season_start, season_end=season_end
        )
        events = self._parse_rows(events_response.data, Event)

        selections_response, players_response, categories_response = await asyncio.gather(
            self.data_source.get_event_selections([e.id for e in events]),
            self.data_source.get_players(team_id),
            self.data_source.get_performance_categories(team_id)
        )

        snapshot = SeasonSnapshot(
            events=tuple(events),
            selections=tuple(self._parse_rows(selections_response.data, EventSelection)),
            players=tuple(self._parse_rows(players_response.data, Player)),
            categories=tuple(self._parse_rows(categories_response.data, PerformanceCategory))
        )

        self.logger.info(
            f"Fetched snapshot for team {team_id}: {len(snapshot.events)} events, "
            f"{len(snapshot.selections)} selections, {len(snapshot.players)} players"
        )
        return snapshot

    @with_domain_error_handling
    async def get_season_analytics(
        self,
        team_id: str,
        team_name: Optional[str] = None,
        top_n: Optional[int] = None,
        compact: bool = False,
        season_start: Optional[datetime.date] = None,
        season_end: Optional[datetime.date] = None,
        today: Optional[datetime.date] = None
    ) -> SeasonAnalytics:
        """
        Compute season analytics for one team.

        Args:
            team_id: Team whose events and roster are aggregated
            team_name: Label of the synthetic category for events without selections
            top_n: Leaderboard size; defaults to the compact or full configured size
            compact: Use the compact (mobile) leaderboard size when top_n is not given
            season_start: Optional first day of the season
            season_end: Optional last day of the season
            today: Events dated on or after this day are ignored (defaults to today)

        Returns:
            SeasonAnalytics
        """
        if not isinstance(team_id, str) or not team_id.strip():
            raise ValidationError(
                field="team_id",
                value=team_id,
                constraint="must be a non-empty identifier",
                context=ErrorContext(operation="get_season_analytics")
            )

        today = today or datetime.date.today()
        snapshot = await self.fetch_snapshot(
            team_id, today=today, season_start=season_start, season_end=season_end
        )

        return compute_season_analytics(
            snapshot,
            top_n=self.resolve_top_n(top_n, compact),
            fallback_label=team_name or self.config.default_category_label,
            as_of=today,
            recent_limit=self.config.recent_results_limit,
            player_status=self.config.active_player_status
        )

    async def get_season_summary(self, team_id: str, **kwargs) -> Dict[str, Any]:
        """Season analytics as plain data for dashboards."""
        analytics = await self.get_season_analytics(team_id, **kwargs)
        return analytics.to_dict()

    async def get_results_summary(
        self,
        team_id: str,
        event_type: Optional[Any] = None,
        category_name: Optional[str] = None,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Listed results narrowed to one event type and/or category, with their totals.

        ``event_type`` accepts an EventType or its raw string; None keeps every type.
        Remaining keyword arguments are passed to get_season_analytics.
        """
        analytics = await self.get_season_analytics(team_id, **kwargs)
        selected_type = None if event_type is None else EventType.from_value(event_type)

        results = filter_results(analytics.results, selected_type, category_name)
        return {
            "event_type": serialize_value(selected_type),
            "category_name": category_name,
            "summary": summarize_results(results, selected_type, category_name).to_dict(),
            "results": [result.to_dict() for result in results],
        }
