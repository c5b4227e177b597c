"""Rate limiting models."""

import math

from pydantic import BaseModel, Field


class RateLimitPolicy(BaseModel):
    """Attempts allowed per fixed window."""

    max_attempts: int = Field(..., gt=0)
    window_ms: int = Field(..., gt=0)

    model_config = {"frozen": True}


class RateLimitEntry(BaseModel):
    """Attempts observed for one key in its current window.

    window_ms is the window the entry was opened with, so the sweep can
    expire entries created under different policies.
    """

    attempt_count: int
    window_start: int  # epoch milliseconds
    window_ms: int

    def is_expired(self, now_ms: int) -> bool:
        return now_ms - self.window_start > self.window_ms

    def seconds_left(self, now_ms: int) -> int:
        return max(0, math.ceil((self.window_ms - (now_ms - self.window_start)) / 1000))


class RateLimitResult(BaseModel):
    """Outcome of a rate limit check; blocked results still report when the window resets."""

    success: bool
    remaining: int = Field(..., ge=0)
    reset_in: int = Field(..., ge=0, description="Seconds until the window resets")

    @property
    def reset_in_minutes(self) -> int:
        return max(1, math.ceil(self.reset_in / 60))
