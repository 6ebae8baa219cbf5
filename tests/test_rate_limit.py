"""Tests for the fixed-window rate limiter."""

from article_studio.core.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_allows_up_to_limit():
    limiter = RateLimiter(limit=3, window_seconds=60, clock=FakeClock())

    assert [limiter.allow("user-1") for _ in range(4)] == [True, True, True, False]


def test_keys_are_independent():
    limiter = RateLimiter(limit=1, window_seconds=60, clock=FakeClock())

    assert limiter.allow("generate:alice")
    assert not limiter.allow("generate:alice")
    assert limiter.allow("generate:bob")


def test_window_expiry_opens_new_window():
    clock = FakeClock()
    limiter = RateLimiter(limit=2, window_seconds=60, clock=clock)
    limiter.allow("ip")
    limiter.allow("ip")
    assert not limiter.allow("ip")

    clock.now += 60
    assert not limiter.allow("ip")

    clock.now += 0.5
    assert limiter.allow("ip")
    assert limiter.allow("ip")
    assert not limiter.allow("ip")


def test_reset_clears_counters():
    limiter = RateLimiter(limit=1, clock=FakeClock())
    limiter.allow("ip")

    limiter.reset()

    assert limiter.allow("ip")


def test_from_settings(mock_settings):
    limiter = RateLimiter.from_settings(mock_settings)

    assert limiter.limit == mock_settings.rate_limit_requests
    assert limiter.window_seconds == mock_settings.rate_limit_window_seconds


def test_expired_windows_are_evicted():
    clock = FakeClock()
    limiter = RateLimiter(limit=5, window_seconds=1, clock=clock)

    for i in range(10000):
        limiter.allow(f"ideas:10.0.{i // 256}.{i % 256}")
        clock.now += 5

    assert len(limiter._windows) < 100


def test_live_windows_survive_pruning():
    clock = FakeClock()
    limiter = RateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.allow("alice")

    clock.now += 30
    limiter.allow("bob")

    assert not limiter.allow("alice")
    assert set(limiter._windows) == {"alice", "bob"}
