"""Unit tests for the in-process rate limiter."""

import asyncio

import pytest

from compare_api.infrastructure.rate_limit import (
    DEFAULT_POLICIES,
    OperationClass,
    RateLimitDecision,
    RateLimiter,
    RateLimitPolicy,
    rate_limit_headers,
    resolve_client_identity,
)


class TestWindowCounting:
    """Test admission and rejection within a window."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", list(OperationClass))
    async def test_rejects_request_after_ceiling(self, limiter, operation):
        """Test the (N+1)th request in a window is rejected with a positive retry-after."""
        ceiling = DEFAULT_POLICIES[operation].max_requests

        for i in range(ceiling):
            decision = await limiter.check(operation, "203.0.113.7")
            assert decision.admitted
            assert decision.remaining == ceiling - i - 1

        decision = await limiter.check(operation, "203.0.113.7")

        assert not decision.admitted
        assert decision.remaining == 0
        assert decision.retry_after is not None and decision.retry_after > 0

    @pytest.mark.asyncio
    async def test_window_restarts_after_reset(self, limiter, clock):
        """Test counter restarts at 1 once reset_at has passed."""
        for _ in range(6):
            await limiter.check(OperationClass.DELETE, "client")

        clock.advance(61)
        decision = await limiter.check(OperationClass.DELETE, "client")

        assert decision.admitted
        assert decision.remaining == DEFAULT_POLICIES[OperationClass.DELETE].max_requests - 1
        assert decision.reset_at == clock.now + 60

    @pytest.mark.asyncio
    async def test_retry_after_counts_down(self, limiter, clock):
        """Test retry-after reflects the time left in the window."""
        limiter_policy = {OperationClass.STRICT: RateLimitPolicy(window_seconds=60, max_requests=1)}
        strict = RateLimiter(policies=limiter_policy, clock=clock)

        await strict.check(OperationClass.STRICT, "client")
        clock.advance(45.5)
        decision = await strict.check(OperationClass.STRICT, "client")

        assert decision.retry_after == 15

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, limiter):
        """Test identities and operation classes do not share windows."""
        for _ in range(5):
            await limiter.check(OperationClass.DELETE, "alice")

        assert not (await limiter.check(OperationClass.DELETE, "alice")).admitted
        assert (await limiter.check(OperationClass.DELETE, "bob")).admitted
        assert (await limiter.check(OperationClass.READ, "alice")).admitted

    @pytest.mark.asyncio
    async def test_concurrent_checks_do_not_lose_increments(self, limiter):
        """Test concurrent checks on one key admit exactly the ceiling."""
        decisions = await asyncio.gather(
            *(limiter.check(OperationClass.UPLOAD, "client") for _ in range(25))
        )

        assert sum(1 for decision in decisions if decision.admitted) == 10


class TestRemaining:
    """Test the read-only projection."""

    @pytest.mark.asyncio
    async def test_remaining_does_not_count(self, limiter):
        """Test remaining() reports state without incrementing."""
        await limiter.check(OperationClass.UPDATE, "client")

        first = limiter.remaining(OperationClass.UPDATE, "client")
        second = limiter.remaining(OperationClass.UPDATE, "client")

        assert first == second
        assert first.remaining == 19
        assert first.total == 20

    def test_remaining_for_unknown_key_is_full(self, limiter, clock):
        """Test an unseen key reports the full allowance."""
        status = limiter.remaining(OperationClass.BURST, "nobody")

        assert status.remaining == 30
        assert status.reset_at == clock.now


class TestFailOpen:
    """Test internal faults never block requests."""

    @pytest.mark.asyncio
    async def test_broken_clock_admits(self):
        """Test a failing store admits with the full allowance."""

        def broken_clock():
            raise RuntimeError("clock unavailable")

        limiter = RateLimiter(clock=broken_clock)

        decision = await limiter.check(OperationClass.UPLOAD, "client")

        assert decision.admitted
        assert decision.remaining == 10

    @pytest.mark.asyncio
    async def test_unknown_operation_admits(self, clock):
        """Test a limiter without a policy for the operation admits."""
        limiter = RateLimiter(
            policies={OperationClass.READ: RateLimitPolicy(60, 100)}, clock=clock
        )

        decision = await limiter.check(OperationClass.UPLOAD, "client")

        assert decision.admitted


class TestSweep:
    """Test eviction of expired windows."""

    @pytest.mark.asyncio
    async def test_sweep_removes_only_expired(self, limiter, clock):
        """Test sweep keeps live windows."""
        await limiter.check(OperationClass.BURST, "old")
        clock.advance(11)
        await limiter.check(OperationClass.READ, "fresh")

        removed = limiter.sweep()

        assert removed == 1
        assert len(limiter) == 1

    @pytest.mark.asyncio
    async def test_background_sweep_runs_until_stopped(self, clock):
        """Test start() sweeps periodically and stop() clears the store."""
        limiter = RateLimiter(sweep_interval=0.01, clock=clock)
        await limiter.check(OperationClass.BURST, "client")
        clock.advance(11)

        await limiter.start()
        await asyncio.sleep(0.05)

        assert len(limiter) == 0

        await limiter.check(OperationClass.READ, "client")
        await limiter.stop()

        assert len(limiter) == 0


class TestIdentity:
    """Test client identity resolution."""

    def test_edge_header_wins(self):
        """Test cf-connecting-ip beats the other headers."""
        headers = {
            "cf-connecting-ip": "198.51.100.1",
            "x-real-ip": "198.51.100.2",
            "x-forwarded-for": "198.51.100.3, 10.0.0.1",
        }

        assert resolve_client_identity(headers) == "198.51.100.1"

    def test_real_ip_before_forwarded_for(self):
        """Test x-real-ip beats x-forwarded-for."""
        headers = {"x-real-ip": "198.51.100.2", "x-forwarded-for": "198.51.100.3"}

        assert resolve_client_identity(headers) == "198.51.100.2"

    def test_first_forwarded_for_entry(self):
        """Test only the first forwarded-for hop is used."""
        headers = {"x-forwarded-for": " 198.51.100.3 , 10.0.0.1"}

        assert resolve_client_identity(headers) == "198.51.100.3"

    def test_placeholder_when_no_headers(self):
        """Test the constant placeholder identity."""
        assert resolve_client_identity({}) == "unknown"

    def test_development_identity(self):
        """Test development mode uses a fixed identity."""
        assert resolve_client_identity({"x-real-ip": "198.51.100.2"}, development=True) == "dev-user"


class TestHeaders:
    """Test rate limit response headers."""

    def test_headers_when_allowance_left(self):
        """Test no Retry-After while requests remain."""
        decision = RateLimitDecision(admitted=True, remaining=4, reset_at=1_000_060.0, limit=5)

        headers = rate_limit_headers(decision, now=1_000_000.0)

        assert headers["X-RateLimit-Limit"] == "5"
        assert headers["X-RateLimit-Remaining"] == "4"
        assert headers["X-RateLimit-Reset-In"] == "60"
        assert headers["X-RateLimit-Reset"].startswith("1970-01-12T")
        assert "Retry-After" not in headers

    def test_retry_after_when_exhausted(self):
        """Test Retry-After appears once the allowance is spent."""
        decision = RateLimitDecision(
            admitted=False, remaining=0, reset_at=1_000_030.0, limit=5, retry_after=30
        )

        headers = rate_limit_headers(decision, now=1_000_000.0)

        assert headers["Retry-After"] == "30"
