#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the fixed-window rate limiter."""

import pytest

from structcompare.ratelimit import RateLimiter


class FakeClock:
    """Manually advanced clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock starting at zero."""
    return FakeClock()


@pytest.mark.unit
class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_allows_up_to_limit(self, clock):
        """Test that requests within the limit are allowed."""
        limiter = RateLimiter(limit=2, window_seconds=10, clock=clock)

        first = limiter.check("a")
        second = limiter.check("a")

        assert (first.allowed, first.remaining, first.reset_after) == (True, 1, 10)
        assert (second.allowed, second.remaining) == (True, 0)

    def test_denies_over_limit(self, clock):
        """Test that the request after the limit is denied."""
        limiter = RateLimiter(limit=2, window_seconds=10, clock=clock)
        limiter.check("a")
        limiter.check("a")
        clock.advance(4)

        decision = limiter.check("a")

        assert decision.allowed is False
        assert decision.remaining == 0
        assert decision.reset_after == pytest.approx(6)

    def test_window_resets(self, clock):
        """Test that counts start over after the window elapses."""
        limiter = RateLimiter(limit=1, window_seconds=10, clock=clock)
        limiter.check("a")
        assert limiter.check("a").allowed is False

        clock.advance(10)

        assert limiter.check("a").allowed is True

    def test_keys_are_independent(self, clock):
        """Test that each client has its own counter."""
        limiter = RateLimiter(limit=1, window_seconds=10, clock=clock)
        assert limiter.check("a").allowed is True
        assert limiter.check("b").allowed is True
        assert limiter.check("a").allowed is False

    def test_instances_do_not_share_state(self, clock):
        """Test that two limiters keep separate counts."""
        first = RateLimiter(limit=1, window_seconds=10, clock=clock)
        second = RateLimiter(limit=1, window_seconds=10, clock=clock)
        first.check("a")
        assert second.check("a").allowed is True

    def test_cleanup_and_reset(self, clock):
        """Test forgetting expired and all windows."""
        limiter = RateLimiter(limit=5, window_seconds=10, clock=clock)
        limiter.check("a")
        clock.advance(5)
        limiter.check("b")
        clock.advance(6)

        assert limiter.cleanup() == 1
        assert len(limiter) == 1

        limiter.reset()
        assert len(limiter) == 0

    @pytest.mark.parametrize("limit,window", [(0, 10), (1, 0), (1, -5)])
    def test_invalid_configuration(self, limit, window):
        """Test that non-positive limits and windows are rejected."""
        with pytest.raises(ValueError):
            RateLimiter(limit=limit, window_seconds=window)
