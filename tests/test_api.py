"""Tests for the HTTP API."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from nexmeet_bot.api.app import create_app
from nexmeet_bot.api.rate_limit import RATE_LIMIT_MESSAGE, RateLimiter
from nexmeet_bot.store.gateway import EventGateway

from fakes import FakeSupabase, make_row


def client_for(settings, supabase, rate_limiter=None, **kwargs) -> TestClient:
    app = create_app(settings, EventGateway(settings, client=supabase), rate_limiter=rate_limiter)
    return TestClient(app, **kwargs)


@pytest.fixture
def unlimited():
    return RateLimiter(max_requests=1000, window_seconds=60)


class TestEventRoutes:
    """Test suite for /api/events."""

    @pytest.mark.parametrize("path", [
        "/api/events/active",
        "/api/events/past",
        "/api/events/location/Delhi",
        "/api/events/category/Hackathon",
        "/api/events/popular",
    ])
    def test_routes_return_rows(self, settings, unlimited, path):
        supabase = FakeSupabase(rows=[make_row(1, extra_column="x"), make_row(2)])
        client = client_for(settings, supabase, unlimited)

        response = client.get(path)

        assert response.status_code == 200
        body = response.json()
        assert [row["id"] for row in body] == [1, 2]
        assert body[0]["isEventFree"] is True
        assert body[0]["extra_column"] == "x"
        assert ("is_approved", True) in [args for args, _ in supabase.last_query.called("eq")]

    def test_sparse_row_returned_without_defaults(self, settings, unlimited):
        sparse = {"id": 3, "event_title": "Meetup", "is_approved": True, "organizer_contact": 9876543210}
        client = client_for(settings, FakeSupabase(rows=[sparse]), unlimited)

        response = client.get("/api/events/popular")

        assert response.status_code == 200
        assert response.json() == [{**sparse, "organizer_contact": "9876543210"}]

    def test_popular_empty_table(self, settings, unlimited):
        client = client_for(settings, FakeSupabase(rows=[]), unlimited)

        response = client.get("/api/events/popular")

        assert response.status_code == 200
        assert response.json() == []

    def test_past_capped_at_five(self, settings, unlimited):
        supabase = FakeSupabase(rows=[make_row(i) for i in range(1, 10)])
        client = client_for(settings, supabase, unlimited)

        response = client.get("/api/events/past")

        assert len(response.json()) == 5

    def test_location_path_parameter(self, settings, unlimited):
        supabase = FakeSupabase(rows=[])
        client = client_for(settings, supabase, unlimited)

        client.get("/api/events/location/New%20Delhi")

        assert supabase.last_query.called("ilike") == [(("event_location", "%New Delhi%"), {})]

    def test_store_failure_returns_500(self, settings, unlimited):
        client = client_for(settings, FakeSupabase(error=RuntimeError("permission denied")), unlimited)

        response = client.get("/api/events/active")

        assert response.status_code == 500
        assert response.json() == {"error": "permission denied"}


class TestSystemRoutes:
    """Test suite for status and health routes."""

    def test_status_connected(self, settings, unlimited):
        client = client_for(settings, FakeSupabase(rows=[make_row(1)]), unlimited)

        response = client.get("/api/system/status")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["server"]["status"] == "running"
        assert body["server"]["environment"] == "development"
        assert body["database"] == {"status": "connected", "timestamp": "2026-09-01T08:00:00+00:00"}

    def test_status_store_unreachable(self, settings, unlimited):
        client = client_for(settings, FakeSupabase(error=ConnectionError("connection refused")), unlimited)

        response = client.get("/api/system/status")

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "error"
        assert body["server"]["status"] == "running"
        assert body["database"] == {"status": "error", "error": "connection refused"}

    def test_health_makes_no_external_calls(self, settings, unlimited):
        supabase = FakeSupabase(error=ConnectionError("should not be called"))
        client = client_for(settings, supabase, unlimited)

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("Z")
        datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
        assert supabase.queries == []

    def test_cors_headers(self, settings, unlimited):
        client = client_for(settings, FakeSupabase(), unlimited)

        response = client.get("/health", headers={"Origin": "https://app.example"})

        assert response.headers["access-control-allow-origin"] == "*"


class TestRateLimiting:
    """Test the /api throttle and the catch-all error responder."""

    def test_api_requests_throttled(self, settings):
        client = client_for(settings, FakeSupabase(rows=[]), RateLimiter(max_requests=2, window_seconds=60))

        assert client.get("/api/events/popular").status_code == 200
        assert client.get("/api/events/past").status_code == 200
        response = client.get("/api/events/popular")

        assert response.status_code == 429
        assert response.json() == {"error": RATE_LIMIT_MESSAGE}

    def test_health_not_throttled(self, settings):
        client = client_for(settings, FakeSupabase(rows=[]), RateLimiter(max_requests=1, window_seconds=60))

        for _ in range(3):
            assert client.get("/health").status_code == 200

    def test_default_limit_from_settings(self, settings):
        client = client_for(settings, FakeSupabase(rows=[]))

        statuses = [client.get("/api/events/popular").status_code for _ in range(6)]

        assert statuses == [200] * 5 + [429]

    def test_unhandled_error_returns_generic_body(self, settings, unlimited):
        class ExplodingGateway(EventGateway):
            async def list_popular(self, limit: int = 5):
                raise KeyError("unexpected")

        app = create_app(settings, ExplodingGateway(settings, client=FakeSupabase()), rate_limiter=unlimited)
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/events/popular")

        assert response.status_code == 500
        assert response.json() == {"error": "Something went wrong!"}
