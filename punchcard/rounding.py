"""Rounding of durations to a fixed granularity.

A rounding specification has the form ``<direction>,<amount><unit>``, e.g.
``nearest,15m`` or ``up,1h``. Ties in ``nearest`` mode always go up so that
totals are reproducible.
"""

from __future__ import annotations

import datetime as dt
import enum
import re
from dataclasses import dataclass

from .errors import InvalidConfiguration, InvalidRoundingDirection, InvalidTimeInterval
from .timeutils import Duration, Interval


class RoundingDirection(enum.Enum):
    DOWN = "down"
    UP = "up"
    NEAREST = "nearest"

    @classmethod
    def parse(cls, token: str) -> "RoundingDirection":
        try:
            return _DIRECTION_TOKENS[token.strip().lower()]
        except KeyError:
            raise InvalidRoundingDirection(token) from None


_DIRECTION_TOKENS = {
    "down": RoundingDirection.DOWN,
    "d": RoundingDirection.DOWN,
    "up": RoundingDirection.UP,
    "u": RoundingDirection.UP,
    "nearest": RoundingDirection.NEAREST,
    "n": RoundingDirection.NEAREST,
}

# Units accepted for the granularity part. Month and year have no fixed length.
_GRANULARITY_UNITS = (Interval.SECOND, Interval.MINUTE, Interval.HOUR, Interval.DAY, Interval.WEEK)

_GRANULARITY_RE = re.compile(r"^\s*(?P<amount>\d+)\s*(?P<unit>[A-Za-z]+)\s*$")

# Largest span a timedelta can hold.
MAX_GRANULARITY = dt.timedelta.max.days * 86400 + dt.timedelta.max.seconds


def parse_granularity(text: str) -> int:
    """Convert ``<amount><unit>`` into seconds."""
    match = _GRANULARITY_RE.match(text)
    if not match:
        raise InvalidTimeInterval(text)
    interval = Interval.parse(match.group("unit"))
    if interval not in _GRANULARITY_UNITS:
        raise InvalidTimeInterval(text)
    amount = int(match.group("amount"))
    if amount <= 0:
        raise InvalidTimeInterval(text)
    granularity = amount * interval.seconds
    if granularity > MAX_GRANULARITY:
        raise InvalidTimeInterval(text)
    return granularity


@dataclass(frozen=True)
class RoundingOptions:
    direction: RoundingDirection
    granularity: int  # seconds

    def __post_init__(self) -> None:
        if isinstance(self.granularity, bool) or not isinstance(self.granularity, int):
            raise InvalidConfiguration(f"Rounding granularity must be an integer, got {self.granularity!r}")
        if self.granularity <= 0:
            raise InvalidConfiguration(f"Rounding granularity must be positive, got {self.granularity}")
        if self.granularity > MAX_GRANULARITY:
            raise InvalidConfiguration(f"Rounding granularity is too large: {self.granularity}")

    @classmethod
    def parse(cls, spec: str) -> "RoundingOptions":
        parts = spec.split(",")
        if len(parts) != 2:
            raise InvalidTimeInterval(spec)
        direction = RoundingDirection.parse(parts[0])
        granularity = parse_granularity(parts[1])
        return cls(direction=direction, granularity=granularity)

    def round_seconds(self, exact: int) -> int:
        remainder = exact % self.granularity
        if remainder == 0:
            return exact
        lower = exact - remainder
        upper = lower + self.granularity
        if self.direction is RoundingDirection.DOWN:
            return lower
        if self.direction is RoundingDirection.UP:
            return upper
        if remainder >= self.granularity / 2:
            return upper
        return lower

    def round_duration(self, duration: Duration) -> Duration:
        return Duration.from_seconds(self.round_seconds(duration.in_seconds()))

    def __str__(self) -> str:
        return f"{self.direction.value},{self.granularity}s"


__all__ = ["RoundingDirection", "RoundingOptions", "parse_granularity"]
