"""
Unit tests for the table client, with a fake aiohttp session.
"""
import asyncio
import os
import sys
import datetime
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

# Add backend source to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend', 'src'))

from adapters.external import supabase_client
from adapters.external.supabase_client import SupabaseClient
from core.exceptions import (
    ConfigurationError, DataSourceAuthenticationError, DataSourceConnectionError,
    DataSourceNotFoundError, DataSourceRateLimitError, DataSourceResponseError,
    DataSourceServerError, DataSourceTimeoutError
)
from test_utils import FakeResponse, FakeSession, make_settings


class TestClientConfiguration:
    """Client construction from settings."""

    def test_base_url_from_settings(self):
        client = SupabaseClient(config=make_settings(supabase_url="https://club.example.test/"))
        assert client.base_url == "https://club.example.test/rest/v1"
        assert client.api_key == "test_anon_key"

    def test_explicit_values_win(self):
        client = SupabaseClient(
            base_url="https://other.example.test", api_key="explicit", config=make_settings()
        )
        assert client.base_url == "https://other.example.test/rest/v1"
        assert client.api_key == "explicit"

    def test_missing_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SupabaseClient(config=make_settings(supabase_key=""))
        assert exc_info.value.setting == "supabase_key"

    def test_missing_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SupabaseClient(config=make_settings(supabase_url=""))
        assert exc_info.value.setting == "supabase_url"

    def test_auth_headers(self):
        headers = make_settings().rest_headers
        assert headers["apikey"] == "test_anon_key"
        assert headers["Authorization"] == "Bearer test_anon_key"

    def test_explicit_key_does_not_change_shared_settings(self):
        config = make_settings()
        client = SupabaseClient(api_key="explicit", config=config)

        assert client.config.rest_headers["Authorization"] == "Bearer explicit"
        assert config.supabase_key == "test_anon_key"

    @pytest.mark.asyncio
    async def test_session_lifecycle(self):
        async with SupabaseClient(api_key="explicit", config=make_settings()) as client:
            assert isinstance(client.session, aiohttp.ClientSession)
            assert client.session.headers["apikey"] == "explicit"
            assert client.session.headers["User-Agent"] == "clubstats/0.1.0"
        assert client.session is None


class TestMakeRequest:
    """HTTP status and transport error mapping."""

    def setup_method(self):
        self.client = SupabaseClient(config=make_settings())

    def use(self, *responses) -> FakeSession:
        self.client.session = FakeSession(*responses)
        return self.client.session

    @pytest.mark.asyncio
    async def test_rows_returned(self):
        session = self.use(FakeResponse(200, [{"id": "e1"}]))

        response = await self.client._make_request("events", [("select", "id")])

        assert response.success
        assert response.data == [{"id": "e1"}]
        assert response.meta["rows"] == 1
        assert session.requests[0] == (
            "https://club.example.test/rest/v1/events", [("select", "id")]
        )

    @pytest.mark.asyncio
    async def test_non_list_body(self):
        self.use(FakeResponse(200, {"message": "unexpected"}))
        with pytest.raises(DataSourceResponseError):
            await self.client._make_request("events", [])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_authentication_errors(self, status):
        self.use(FakeResponse(status))
        with pytest.raises(DataSourceAuthenticationError) as exc_info:
            await self.client._make_request("players", [])
        assert exc_info.value.status_code == status
        assert exc_info.value.context.table == "players"

    @pytest.mark.asyncio
    async def test_not_found(self):
        self.use(FakeResponse(404))
        with pytest.raises(DataSourceNotFoundError):
            await self.client._make_request("missing_table", [])

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self):
        session = self.use(FakeResponse(503, {"message": "down"}), FakeResponse(200, []))

        response = await self.client._make_request("events", [])

        assert response.data == []
        assert len(session.requests) == 2

    @pytest.mark.asyncio
    async def test_server_error_after_retries(self):
        self.use(*[FakeResponse(500, {"message": "down"}) for _ in range(3)])

        with pytest.raises(DataSourceServerError) as exc_info:
            await self.client._make_request("events", [])
        assert exc_info.value.status_code == 500
        assert exc_info.value.recoverable

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        session = self.use(FakeResponse(400, ValueError("no json")))

        with pytest.raises(DataSourceServerError) as exc_info:
            await self.client._make_request("events", [])
        assert exc_info.value.status_code == 400
        assert len(session.requests) == 1

    @pytest.mark.asyncio
    async def test_client_error_status_range_is_not_retried(self):
        session = self.use(FakeResponse(422, {"message": "bad filter"}), FakeResponse(200, []))

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(DataSourceServerError) as exc_info:
                await self.client._make_request("events", [])

        assert not exc_info.value.recoverable
        assert len(session.requests) == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_server_errors_back_off_exponentially(self):
        client = SupabaseClient(config=make_settings(retry_delay=0.5))
        client.session = FakeSession(*[FakeResponse(502) for _ in range(3)])

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(DataSourceServerError):
                await client._make_request("events", [])

        assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0]
        assert len(client.session.requests) == 3

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self):
        client = SupabaseClient(config=make_settings(max_retries=0))
        client.session = FakeSession(FakeResponse(503), FakeResponse(200, []))

        with pytest.raises(DataSourceServerError):
            await client._make_request("events", [])
        assert len(client.session.requests) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_honours_retry_after(self):
        self.use(FakeResponse(429, headers={"Retry-After": "2"}), FakeResponse(200, []))

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            await self.client._make_request("events", [])
        sleep.assert_awaited_once_with(2)

    @pytest.mark.asyncio
    async def test_rate_limit_without_header_uses_backoff(self):
        client = SupabaseClient(config=make_settings(retry_delay=0.25))
        client.session = FakeSession(FakeResponse(429), FakeResponse(200, []))

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            await client._make_request("events", [])
        sleep.assert_awaited_once_with(0.25)

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self):
        self.use(*[FakeResponse(429, headers={"Retry-After": "0"}) for _ in range(3)])

        with pytest.raises(DataSourceRateLimitError) as exc_info:
            await self.client._make_request("events", [])
        assert exc_info.value.retry_after == 0

    @pytest.mark.asyncio
    async def test_timeout(self):
        self.use(*[asyncio.TimeoutError() for _ in range(3)])
        with pytest.raises(DataSourceTimeoutError):
            await self.client._make_request("events", [])

    @pytest.mark.asyncio
    async def test_connection_error_recovers(self):
        self.use(aiohttp.ClientConnectionError("reset"), FakeResponse(200, [{"id": "p1"}]))
        response = await self.client._make_request("players", [])
        assert response.data == [{"id": "p1"}]

    @pytest.mark.asyncio
    async def test_connection_error_after_retries(self):
        self.use(*[aiohttp.ClientConnectionError("reset") for _ in range(3)])
        with pytest.raises(DataSourceConnectionError):
            await self.client._make_request("players", [])

    @pytest.mark.asyncio
    async def test_requires_session(self):
        with pytest.raises(DataSourceConnectionError):
            await self.client._make_request("events", [])


class TestTableQueries:
    """Query parameters of the table methods."""

    def setup_method(self):
        self.client = SupabaseClient(config=make_settings())

    @pytest.mark.asyncio
    async def test_get_events_filters(self):
        session = FakeSession(FakeResponse(200, []))
        self.client.session = session

        await self.client.get_events(
            "t1",
            before=datetime.date(2024, 4, 1),
            season_start=datetime.date(2023, 9, 1),
            season_end=datetime.date(2024, 6, 30)
        )

        url, params = session.requests[0]
        assert url.endswith("/rest/v1/events")
        assert ("team_id", "eq.t1") in params
        assert ("scores", "not.is.null") in params
        assert ("date", "lt.2024-04-01") in params
        assert ("date", "gte.2023-09-01") in params
        assert ("date", "lte.2024-06-30") in params
        assert params[-1] == ("order", "date.desc")

    @pytest.mark.asyncio
    async def test_get_event_selections_without_ids(self):
        self.client.session = FakeSession()
        response = await self.client.get_event_selections([])
        assert response.data == []
        assert self.client.session.requests == []

    @pytest.mark.asyncio
    async def test_get_event_selections_batches(self):
        ids = [f"e{i}" for i in range(supabase_client.EVENT_ID_BATCH_SIZE + 1)]
        session = FakeSession(
            FakeResponse(200, [{"event_id": "e0"}]),
            FakeResponse(200, [{"event_id": ids[-1]}])
        )
        self.client.session = session

        response = await self.client.get_event_selections(ids + ["e0"])

        assert len(session.requests) == 2
        assert len(response.data) == 2
        first_filter = dict(session.requests[0][1])["event_id"]
        assert first_filter.startswith("in.(e0,e1,")
        assert dict(session.requests[1][1])["event_id"] == f"in.({ids[-1]})"
        assert "performance_categories(id,name)" in dict(session.requests[0][1])["select"]

    @pytest.mark.asyncio
    async def test_get_players_status_filter(self):
        session = FakeSession(FakeResponse(200, []))
        self.client.session = session

        await self.client.get_players("t1", status="active")

        params = session.requests[0][1]
        assert ("status", "eq.active") in params
        assert ("team_id", "eq.t1") in params

    @pytest.mark.asyncio
    async def test_get_performance_categories(self):
        session = FakeSession(FakeResponse(200, [{"id": "c1", "name": "A Team"}]))
        self.client.session = session

        response = await self.client.get_performance_categories("t1")

        assert session.requests[0][0].endswith("/performance_categories")
        assert response.data[0]["name"] == "A Team"
