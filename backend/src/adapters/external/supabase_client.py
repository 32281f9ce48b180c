"""
REST client for the hosted relational backend (PostgREST interface).
Fetches the raw rows the analytics engine needs: events, event selections,
performance categories and players.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass
import datetime

import aiohttp

from core.error_handler import error_handler
from core.exceptions import (
    DataSourceConnectionError, DataSourceTimeoutError, DataSourceRateLimitError,
    DataSourceAuthenticationError, DataSourceNotFoundError, DataSourceServerError,
    DataSourceResponseError, ConfigurationError, ErrorContext,
    RECOVERABLE_DATA_SOURCE_ERRORS
)
from config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# Keeps `in.(...)` filters well below common URL length limits
EVENT_ID_BATCH_SIZE = 100

EVENT_COLUMNS = "id,team_id,title,date,opponent,is_home,scores,event_type"
SELECTION_COLUMNS = "event_id,team_number,performance_category_id,performance_categories(id,name)"
PLAYER_COLUMNS = "id,name,squad_number,status,match_stats"
CATEGORY_COLUMNS = "id,name"

Params = List[Tuple[str, str]]


@dataclass
class APIResponse:
    """Standardized response structure."""
    data: Any
    success: bool
    error: Optional[str] = None
    table: Optional[str] = None
    meta: Optional[Dict] = None


class SupabaseClient:
    """
    Async client for the backend's table endpoints.
    Handles authentication headers, retries and HTTP error mapping.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        config: Optional[Settings] = None
    ):
        """Initialize the client from explicit values or application settings."""
        config = config or default_settings

        # Explicit values override the configured ones for this client only
        overrides = {}
        if api_key:
            overrides["supabase_key"] = api_key
        if base_url:
            overrides["supabase_url"] = base_url
        self.config = config.model_copy(update=overrides) if overrides else config

        self.api_key = self.config.supabase_key
        if not self.api_key:
            raise ConfigurationError(
                "supabase_key",
                "API key is required. Provide it as parameter or set SUPABASE_KEY environment variable."
            )

        if not self.config.supabase_url:
            raise ConfigurationError(
                "supabase_url",
                "Backend URL is required. Provide it as parameter or set SUPABASE_URL environment variable."
            )
        self.base_url = self.config.rest_base_url

        self.session: Optional[aiohttp.ClientSession] = None
        self.timeout = self.config.api_request_timeout
        self.max_retries = max(self.config.max_retries, 0)
        self.retry_delay = self.config.retry_delay
        self.user_agent = self.config.api_user_agent

    async def __aenter__(self):
        """Async context manager entry."""
        connector = aiohttp.TCPConnector(limit=10, limit_per_host=5)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        self.session = aiohttp.ClientSession(
            headers=self.config.rest_headers,
            connector=connector,
            timeout=timeout
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/{table.lstrip('/')}"

    async def _make_request(self, table: str, params: Params) -> APIResponse:
        """Fetch rows from one table, retrying transient failures."""
        if self.session is None:
            raise DataSourceConnectionError(
                url=self._table_url(table),
                original_error=RuntimeError("Client session not started; use 'async with'")
            )

        context = ErrorContext(
            operation="table_request",
            table=table,
            parameters=dict(params),
            user_agent=self.user_agent
        )

        fetch = error_handler.with_retry(
            max_retries=self.max_retries,
            delay=self.retry_delay,
            retryable_exceptions=RECOVERABLE_DATA_SOURCE_ERRORS
        )(self._fetch_rows)
        return await fetch(table, params, context)

    async def _fetch_rows(self, table: str, params: Params, context: ErrorContext) -> APIResponse:
        """Single request against one table, mapping failures to typed errors."""
        url = self._table_url(table)
        logger.info(f"Requesting {table} with params: {params}")

        try:
            async with self.session.get(url, params=params) as response:
                if response.status == 200:
                    data = await response.json()
                    if not isinstance(data, list):
                        raise DataSourceResponseError(
                            f"expected a list of rows from {table}",
                            response_data=data,
                            context=context
                        )
                    return APIResponse(
                        data=data,
                        success=True,
                        table=table,
                        meta={"request_url": url, "rows": len(data)}
                    )

                if response.status in (401, 403):
                    raise DataSourceAuthenticationError(status_code=response.status, context=context)

                if response.status == 404:
                    raise DataSourceNotFoundError(resource=table, context=context)

                if response.status == 429:
                    retry_after = response.headers.get('Retry-After')
                    retry_seconds = int(retry_after) if retry_after and retry_after.isdigit() else None
                    raise DataSourceRateLimitError(retry_after=retry_seconds, context=context)

                response_data = None
                try:
                    response_data = await response.json()
                except (aiohttp.ContentTypeError, ValueError):
                    response_data = None

                raise DataSourceServerError(
                    status_code=response.status,
                    response_data=response_data,
                    context=context
                )

        except asyncio.TimeoutError as e:
            raise DataSourceTimeoutError(timeout=self.timeout, context=context) from e

        except aiohttp.ClientError as e:
            raise DataSourceConnectionError(url=url, context=context, original_error=e) from e

    # Table-specific methods
    async def get_events(
        self,
        team_id: str,
        before: Optional[datetime.date] = None,
        season_start: Optional[datetime.date] = None,
        season_end: Optional[datetime.date] = None
    ) -> APIResponse:
        """Get a team's scored events, most recent first."""
        params: Params = [
            ("select", EVENT_COLUMNS),
            ("team_id", f"eq.{team_id}"),
            ("scores", "not.is.null"),
        ]
        if before:
            params.append(("date", f"lt.{before.isoformat()}"))
        if season_start:
            params.append(("date", f"gte.{season_start.isoformat()}"))
        if season_end:
            params.append(("date", f"lte.{season_end.isoformat()}"))
        params.append(("order", "date.desc"))
        return await self._make_request("events", params)

    async def get_event_selections(self, event_ids: Sequence[str]) -> APIResponse:
        """Get selection rows (with embedded category names) for the given events."""
        event_ids = list(dict.fromkeys(event_ids))
        if not event_ids:
            return APIResponse(data=[], success=True, table="event_selections", meta={"rows": 0})

        rows: List[Dict[str, Any]] = []
        for start in range(0, len(event_ids), EVENT_ID_BATCH_SIZE):
            batch = event_ids[start:start + EVENT_ID_BATCH_SIZE]
            params: Params = [
                ("select", SELECTION_COLUMNS),
                ("event_id", f"in.({','.join(batch)})"),
            ]
            response = await self._make_request("event_selections", params)
            rows.extend(response.data)

        return APIResponse(data=rows, success=True, table="event_selections", meta={"rows": len(rows)})

    async def get_players(self, team_id: str, status: Optional[str] = None) -> APIResponse:
        """Get a team's roster with match statistics."""
        params: Params = [
            ("select", PLAYER_COLUMNS),
            ("team_id", f"eq.{team_id}"),
        ]
        if status:
            params.append(("status", f"eq.{status}"))
        return await self._make_request("players", params)

    async def get_performance_categories(self, team_id: str) -> APIResponse:
        """Get a team's performance categories."""
        params: Params = [
            ("select", CATEGORY_COLUMNS),
            ("team_id", f"eq.{team_id}"),
        ]
        return await self._make_request("performance_categories", params)
