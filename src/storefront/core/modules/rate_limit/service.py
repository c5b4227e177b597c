import math
from collections.abc import Callable

import structlog

from storefront.config import Config
from storefront.core.core import Service
from storefront.core.modules.rate_limit.models import RateLimitEntry, RateLimitPolicy, RateLimitResult
from storefront.core.modules.rate_limit.store import MemoryRateLimitStore, RateLimitStore
from storefront.utils import now_ms

logger = structlog.get_logger(__name__)

SWEEP_INTERVAL_MS = 5 * 60 * 1000


class RateLimitService(Service):
    """Fixed-window attempt counter keyed by composite identifiers.

    Blocked checks do not count as attempts, so a lockout never outlasts the
    window opened by the first attempt. Expired entries are swept at most once
    every five minutes, piggybacking on regular checks.
    """

    def __init__(
        self,
        config: Config,
        store: RateLimitStore | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        super().__init__(config)
        self.store: RateLimitStore = store if store is not None else MemoryRateLimitStore()
        self._clock = clock
        self._last_sweep = clock()

    def check(self, key: str, max_attempts: int, window_ms: int) -> RateLimitResult:
        """Record an attempt for key and report whether it is allowed."""
        current = self._clock()
        if current - self._last_sweep > SWEEP_INTERVAL_MS:
            self.sweep(current)

        entry = self.store.get(key)

        if entry is None or entry.is_expired(current):
            self.store.set(key, RateLimitEntry(attempt_count=1, window_start=current, window_ms=window_ms))
            return RateLimitResult(success=True, remaining=max_attempts - 1, reset_in=math.ceil(window_ms / 1000))

        if entry.attempt_count >= max_attempts:
            reset_in = entry.seconds_left(current)
            logger.warning("rate_limit_blocked", key=key, reset_in=reset_in)
            return RateLimitResult(success=False, remaining=0, reset_in=reset_in)

        entry.attempt_count += 1
        self.store.set(key, entry)
        return RateLimitResult(
            success=True,
            remaining=max_attempts - entry.attempt_count,
            reset_in=entry.seconds_left(current),
        )

    def check_policy(self, key: str, policy: RateLimitPolicy) -> RateLimitResult:
        return self.check(key, policy.max_attempts, policy.window_ms)

    def reset(self, key: str) -> None:
        """Forget all attempts for key, e.g. after a successful login."""
        self.store.delete(key)

    def sweep(self, current: int | None = None) -> int:
        """Delete entries whose window has expired and return how many were removed."""
        if current is None:
            current = self._clock()
        expired = [key for key, entry in self.store.items() if entry.is_expired(current)]
        for key in expired:
            self.store.delete(key)
        self._last_sweep = current
        logger.debug("rate_limit_sweep", removed=len(expired))
        return len(expired)
