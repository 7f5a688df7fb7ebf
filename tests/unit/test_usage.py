"""Unit tests for usage statistics."""

import threading

from neurolink_demo.llm.usage import UsageStats


class TestUsageStats:
    """Counter updates."""

    def test_starts_empty(self):
        snapshot = UsageStats().snapshot()
        assert snapshot.requests == 0
        assert snapshot.errors == 0
        assert snapshot.total_tokens == 0
        assert snapshot.providers == {}

    def test_successful_attempt_counts_tokens(self):
        stats = UsageStats()
        stats.record_request()
        stats.record_attempt("openai", succeeded=True, tokens=42)

        snapshot = stats.snapshot()
        assert snapshot.requests == 1
        assert snapshot.total_tokens == 42
        assert snapshot.providers["openai"].attempts == 1
        assert snapshot.providers["openai"].successes == 1
        assert snapshot.providers["openai"].tokens == 42

    def test_failed_attempt_ignores_tokens(self):
        stats = UsageStats()
        stats.record_attempt("openai", succeeded=False, tokens=99)

        snapshot = stats.snapshot()
        assert snapshot.total_tokens == 0
        assert snapshot.providers["openai"].failures == 1
        assert snapshot.providers["openai"].tokens == 0

    def test_snapshot_is_a_copy(self):
        stats = UsageStats()
        stats.record_attempt("openai", succeeded=True, tokens=5)
        snapshot = stats.snapshot()

        stats.record_attempt("openai", succeeded=True, tokens=5)

        assert snapshot.providers["openai"].attempts == 1
        assert stats.snapshot().providers["openai"].attempts == 2

    def test_reset(self):
        stats = UsageStats()
        stats.record_request()
        stats.record_failure()
        stats.record_attempt("openai", succeeded=True, tokens=5)
        stats.reset()

        snapshot = stats.snapshot()
        assert (snapshot.requests, snapshot.errors, snapshot.total_tokens) == (0, 0, 0)
        assert snapshot.providers == {}

    def test_concurrent_updates(self):
        stats = UsageStats()

        def worker():
            for _ in range(500):
                stats.record_request()
                stats.record_attempt("openai", succeeded=True, tokens=1)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = stats.snapshot()
        assert snapshot.requests == 4000
        assert snapshot.total_tokens == 4000
        assert snapshot.providers["openai"].attempts == 4000


class TestUsageSnapshot:
    """Derived analytics values."""

    def test_derived_values_with_no_requests(self):
        snapshot = UsageStats().snapshot()
        assert snapshot.average_tokens_per_request == 0
        assert snapshot.error_rate == 0

    def test_derived_values(self):
        stats = UsageStats()
        for _ in range(3):
            stats.record_request()
        stats.record_attempt("openai", succeeded=True, tokens=100)
        stats.record_failure()

        snapshot = stats.snapshot()
        assert snapshot.average_tokens_per_request == 33
        assert snapshot.error_rate == 33

    def test_to_dict(self):
        stats = UsageStats()
        stats.record_request()
        stats.record_attempt("anthropic", succeeded=True, tokens=12)

        data = stats.snapshot().to_dict()
        assert data["total_requests"] == 1
        assert data["total_tokens"] == 12
        assert data["total_errors"] == 0
        assert data["provider_usage"]["anthropic"] == {
            "attempts": 1, "successes": 1, "failures": 0, "tokens": 12,
        }
        assert data["average_tokens_per_request"] == 12
        assert data["error_rate"] == 0
        assert "timestamp" in data
