"""Tests for the rate limiting pure function and middleware integration."""

from memory_bank.core.config import settings
from memory_bank.middleware.request_context import check_rate_limit


class TestCheckRateLimit:
    """Unit tests for the pure function, no middleware, no HTTP."""

    def test_allows_within_limit(self):
        buckets: dict = {}
        allowed, retry = check_rate_limit(buckets, "client-a", max_per_minute=60, now=0.0)
        assert allowed is True
        assert retry == 0.0

    def test_denies_after_exhaustion(self):
        buckets: dict = {}
        for _ in range(60):
            check_rate_limit(buckets, "client-a", max_per_minute=60, now=0.0)

        allowed, retry = check_rate_limit(buckets, "client-a", max_per_minute=60, now=0.0)
        assert allowed is False
        assert retry > 0

    def test_refills_over_time(self):
        buckets: dict = {}
        for _ in range(60):
            check_rate_limit(buckets, "client-a", max_per_minute=60, now=0.0)

        # One token per second at 60/minute
        allowed, _ = check_rate_limit(buckets, "client-a", max_per_minute=60, now=2.0)
        assert allowed is True

    def test_separate_keys_independent(self):
        buckets: dict = {}
        for _ in range(60):
            check_rate_limit(buckets, "client-a", max_per_minute=60, now=0.0)

        allowed, _ = check_rate_limit(buckets, "client-b", max_per_minute=60, now=0.0)
        assert allowed is True

    def test_zero_limit_always_allows(self):
        buckets: dict = {}
        allowed, _ = check_rate_limit(buckets, "any", max_per_minute=0, now=0.0)
        assert allowed is True
        assert buckets == {}


class TestRateLimitMiddleware:

    def test_returns_429_when_exhausted(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_per_minute", 2)

        assert client.get("/api/projects").status_code == 200
        assert client.get("/api/projects").status_code == 200
        resp = client.get("/api/projects")

        assert resp.status_code == 429
        assert resp.json()["error"] == "RATE_LIMITED"
        assert "retry-after" in resp.headers

    def test_health_is_exempt(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_per_minute", 1)

        for _ in range(3):
            assert client.get("/health").status_code == 200

    def test_disabled_limiter_never_blocks(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", False)
        monkeypatch.setattr(settings, "rate_limit_per_minute", 1)

        for _ in range(3):
            assert client.get("/api/projects").status_code == 200
