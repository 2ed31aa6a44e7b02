"""Tests for the rate limiting pure function and middleware integration."""

from fastapi.testclient import TestClient

from deskspace.core.config import Settings
from deskspace.main import create_app
from deskspace.middleware.request_context import check_rate_limit, evict_stale


class TestCheckRateLimit:
    """Unit tests for the pure function: no middleware, no HTTP."""

    def test_allows_within_limit(self):
        bucket: dict = {}
        allowed, retry = check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)
        assert allowed is True
        assert retry == 0.0

    def test_denies_after_exhaustion(self):
        bucket: dict = {}
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)

        allowed, retry = check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)
        assert allowed is False
        assert retry > 0

    def test_refills_over_time(self):
        bucket: dict = {}
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)

        allowed, _ = check_rate_limit(bucket, "client-a", max_per_minute=60, now=2.0)
        assert allowed is True

    def test_separate_keys_independent(self):
        bucket: dict = {}
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)

        allowed, _ = check_rate_limit(bucket, "client-b", max_per_minute=60, now=0.0)
        assert allowed is True

    def test_zero_limit_always_allows(self):
        allowed, _ = check_rate_limit({}, "any", max_per_minute=0, now=0.0)
        assert allowed is True

    def test_evict_stale_entries(self):
        bucket = {"old": (1.0, 0.0), "fresh": (1.0, 500.0)}
        assert evict_stale(bucket, now=600.0) == 1
        assert list(bucket) == ["fresh"]


class TestMiddleware:

    def test_returns_429_with_retry_after(self, database, storage, llm, fetcher):
        settings = Settings(_env_file=None, rate_limit_per_minute=2)
        app = create_app(settings=settings, database=database, storage=storage, llm=llm, fetcher=fetcher, seed=False)
        with TestClient(app) as c:
            assert c.get("/api/folders").status_code == 200
            assert c.get("/api/folders").status_code == 200
            resp = c.get("/api/folders")

        assert resp.status_code == 429
        assert resp.json()["error"] == "RATE_LIMITED"
        assert int(resp.headers["Retry-After"]) >= 1

    def test_health_is_exempt(self, database, storage, llm, fetcher):
        settings = Settings(_env_file=None, rate_limit_per_minute=1)
        app = create_app(settings=settings, database=database, storage=storage, llm=llm, fetcher=fetcher, seed=False)
        with TestClient(app) as c:
            statuses = [c.get("/health").status_code for _ in range(5)]
        assert statuses == [200] * 5
