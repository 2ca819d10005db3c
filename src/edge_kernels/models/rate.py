"""
Rate Limit Models
=================

Data models for the fixed-window request counter.

RateCounter is the record persisted in the key-value store.
RateDecision is what the counter hands back to the caller.
"""

import json
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class RateCounter:
    """
    Per-client counter record.

    Attributes:
        count: Requests admitted in the current window
        window_start: UNIX seconds at which the window opened
    """

    count: int
    window_start: int

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.count < 0:
            raise ValueError("count must be non-negative")

    def is_expired(self, now: int, window_seconds: int) -> bool:
        """Whether the window has elapsed at `now`."""
        return now - self.window_start >= window_seconds

    def to_json(self) -> str:
        """Serialize to the stored JSON form."""
        return json.dumps({"count": self.count, "window_start": self.window_start})

    @classmethod
    def from_json(cls, raw: str) -> Optional["RateCounter"]:
        """
        Parse a stored record.

        Returns:
            RateCounter, or None if the value is not a valid record.
        """
        try:
            payload = json.loads(raw)
            count = payload["count"]
            window_start = payload["window_start"]
        except (ValueError, TypeError, KeyError):
            return None

        # bool is an int subclass; reject it along with floats and strings
        for value in (count, window_start):
            if isinstance(value, bool) or not isinstance(value, int):
                return None
        if count < 0:
            return None

        return cls(count=count, window_start=window_start)


@dataclass(frozen=True, slots=True)
class RateDecision:
    """
    Admission decision for one request.

    Attributes:
        admitted: Whether the request may proceed
        count: Counter value after the operation
        window_start: Start of the window the decision belongs to
        limit: Requests allowed per window
        window_seconds: Window length
        now: Clock reading the decision was made at
    """

    admitted: bool
    count: int
    window_start: int
    limit: int
    window_seconds: int
    now: int

    @property
    def remaining(self) -> int:
        """Requests left in the current window."""
        return max(0, self.limit - self.count)

    @property
    def reset_in_seconds(self) -> int:
        """Seconds until the window elapses."""
        return max(0, self.window_seconds - (self.now - self.window_start))

    def __repr__(self) -> str:
        return (
            f"RateDecision(admitted={self.admitted}, "
            f"count={self.count}/{self.limit}, "
            f"reset_in={self.reset_in_seconds}s)"
        )
