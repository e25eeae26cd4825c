"""In-process rate limiting for the comparison API.

Fixed windows keyed by (operation class, client identity). State lives in the
RateLimiter instance, so it is only correct for a single-instance deployment.
"""

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from compare_api.core.logging import logger
from compare_api.infrastructure.rate_limit.policies import (
    DEFAULT_POLICIES,
    OperationClass,
    RateLimitPolicy,
)

WindowKey = Tuple[OperationClass, str]


@dataclass
class RateLimitWindow:
    """Counter for one (operation class, identity) key."""

    count: int
    window_start: float
    reset_at: float
    last_request: float

    def expired(self, now: float) -> bool:
        return now > self.reset_at


@dataclass
class RateLimitDecision:
    """Result of RateLimiter.check."""

    admitted: bool
    remaining: int
    reset_at: float
    limit: int
    retry_after: Optional[int] = None


@dataclass
class RateLimitStatus:
    """Read-only view of a key's window."""

    remaining: int
    reset_at: float
    total: int


class RateLimiter:
    """Fixed-window request counter shared by all requests in the process.

    Construct once at startup, call start() to launch the periodic sweep and
    stop() on shutdown. Handlers receive the instance through a dependency.
    """

    def __init__(
        self,
        policies: Optional[Mapping[OperationClass, RateLimitPolicy]] = None,
        sweep_interval: float = 300.0,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize an empty store.

        Args:
            policies: Window/ceiling per operation class (defaults to DEFAULT_POLICIES)
            sweep_interval: Seconds between removals of expired windows
            clock: Returns the current time in epoch seconds
        """
        self._policies: Dict[OperationClass, RateLimitPolicy] = dict(policies or DEFAULT_POLICIES)
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._windows: Dict[WindowKey, RateLimitWindow] = {}
        self._lock = asyncio.Lock()
        self._sweep_task: Optional[asyncio.Task] = None

    def policy(self, operation: OperationClass) -> RateLimitPolicy:
        return self._policies[operation]

    def __len__(self) -> int:
        return len(self._windows)

    def now(self) -> float:
        """Current time on the limiter's clock."""
        return self._clock()

    async def check(self, operation: OperationClass, identity: str) -> RateLimitDecision:
        """Count a request and decide whether it is admitted.

        Args:
            operation: Operation class of the request
            identity: Client identity

        Returns:
            RateLimitDecision; admitted with a full allowance if the store fails
        """
        try:
            policy = self.policy(operation)
            async with self._lock:
                now = self._clock()
                window = self._increment((operation, identity), policy, now)

            if window.count > policy.max_requests:
                retry_after = max(1, math.ceil(window.reset_at - now))
                logger.warning(
                    "rate_limit_exceeded",
                    operation=operation.value,
                    identity=identity,
                    count=window.count,
                    limit=policy.max_requests,
                    retry_after=retry_after,
                )
                return RateLimitDecision(
                    admitted=False,
                    remaining=0,
                    reset_at=window.reset_at,
                    limit=policy.max_requests,
                    retry_after=retry_after,
                )

            return RateLimitDecision(
                admitted=True,
                remaining=policy.max_requests - window.count,
                reset_at=window.reset_at,
                limit=policy.max_requests,
            )

        except Exception as e:
            logger.warning(
                "rate_limit_check_failed",
                operation=getattr(operation, "value", str(operation)),
                identity=identity,
                error=str(e),
            )
            fallback = self._policies.get(operation, DEFAULT_POLICIES[OperationClass.READ])
            return RateLimitDecision(
                admitted=True,
                remaining=fallback.max_requests,
                reset_at=time.time() + fallback.window_seconds,
                limit=fallback.max_requests,
            )

    def _increment(self, key: WindowKey, policy: RateLimitPolicy, now: float) -> RateLimitWindow:
        window = self._windows.get(key)

        if window is None or window.expired(now):
            window = RateLimitWindow(
                count=1,
                window_start=now,
                reset_at=now + policy.window_seconds,
                last_request=now,
            )
            self._windows[key] = window
            return window

        window.count += 1
        window.last_request = now
        return window

    def remaining(self, operation: OperationClass, identity: str) -> RateLimitStatus:
        """Current allowance for a key without counting a request."""
        policy = self.policy(operation)
        now = self._clock()
        window = self._windows.get((operation, identity))

        if window is None or window.expired(now):
            return RateLimitStatus(
                remaining=policy.max_requests, reset_at=now, total=policy.max_requests
            )

        return RateLimitStatus(
            remaining=max(0, policy.max_requests - window.count),
            reset_at=window.reset_at,
            total=policy.max_requests,
        )

    def sweep(self) -> int:
        """Remove expired windows. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, window in self._windows.items() if window.expired(now)]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def reset(self) -> None:
        """Drop all windows."""
        self._windows.clear()

    async def start(self) -> None:
        """Launch the periodic sweep task."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.info("rate_limit_sweep_started", interval=self._sweep_interval)

    async def stop(self) -> None:
        """Cancel the sweep task and clear the store."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
        self.reset()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            removed = self.sweep()
            if removed:
                logger.debug("rate_limit_windows_swept", removed=removed, active=len(self._windows))
