from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from .errors import InvalidTimeInterval

if TYPE_CHECKING:  # pragma: no cover
    from .rounding import RoundingOptions


UTC = dt.timezone.utc


def _as_local(value: dt.datetime) -> dt.datetime:
    """Express any instant in the local zone; naive values are taken as local time."""
    return value.astimezone()


class Interval(enum.Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def seconds(self) -> Optional[int]:
        """Fixed length in seconds, ``None`` for calendar intervals of varying length."""
        return _FIXED_SECONDS.get(self)

    @classmethod
    def parse(cls, token: str) -> "Interval":
        try:
            return _INTERVAL_TOKENS[token.strip().lower()]
        except (KeyError, AttributeError):
            raise InvalidTimeInterval(str(token)) from None

    def __str__(self) -> str:
        return self.value


_FIXED_SECONDS = {
    Interval.SECOND: 1,
    Interval.MINUTE: 60,
    Interval.HOUR: 3600,
    Interval.DAY: 86400,
    Interval.WEEK: 7 * 86400,
}

_INTERVAL_TOKENS = {
    "s": Interval.SECOND,
    "sec": Interval.SECOND,
    "second": Interval.SECOND,
    "m": Interval.MINUTE,
    "min": Interval.MINUTE,
    "minute": Interval.MINUTE,
    "h": Interval.HOUR,
    "hour": Interval.HOUR,
    "d": Interval.DAY,
    "day": Interval.DAY,
    "w": Interval.WEEK,
    "week": Interval.WEEK,
    "month": Interval.MONTH,
    "year": Interval.YEAR,
}


@dataclass(frozen=True, order=True)
class Duration:
    """Signed span of time, backed by :class:`datetime.timedelta`."""

    delta: dt.timedelta = dt.timedelta(0)

    @classmethod
    def zero(cls) -> "Duration":
        return cls(dt.timedelta(0))

    @classmethod
    def from_seconds(cls, seconds: int) -> "Duration":
        return cls(dt.timedelta(seconds=seconds))

    @classmethod
    def between(cls, start: "Timestamp", end: Optional["Timestamp"] = None) -> "Duration":
        """Span from ``start`` to ``end``; an open end means "until now"."""
        if end is None:
            end = Timestamp.now()
        return cls(end.value - start.value)

    @classmethod
    def sum(cls, durations: Iterable["Duration"]) -> "Duration":
        total = dt.timedelta(0)
        for duration in durations:
            total += duration.delta
        return cls(total)

    @classmethod
    def mean(cls, durations: Iterable["Duration"]) -> "Duration":
        total = dt.timedelta(0)
        count = 0
        for duration in durations:
            total += duration.delta
            count += 1
        if count == 0:
            raise ValueError("Cannot compute the mean of zero durations")
        return cls(total / count)

    def in_seconds(self) -> int:
        """Whole seconds, sub-second remainder truncated toward zero."""
        return int(self.delta.total_seconds())

    def round(self, options: "RoundingOptions") -> "Duration":
        return options.round_duration(self)

    def __add__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.delta + other.delta)

    def __sub__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.delta - other.delta)


@dataclass(frozen=True, order=True)
class Timestamp:
    """Timezone-aware instant with local-time semantics."""

    value: dt.datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _as_local(self.value))

    @classmethod
    def now(cls) -> "Timestamp":
        return cls(dt.datetime.now().astimezone())

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """Parse an RFC 3339 / ISO 8601 string; raises ``ValueError`` on garbage."""
        raw = text.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        return cls(dt.datetime.fromisoformat(raw))

    def to_rfc3339(self) -> str:
        return self.value.isoformat()

    def format(self, pattern: str) -> str:
        return self.value.strftime(pattern)

    def __add__(self, other: Duration) -> "Timestamp":
        if not isinstance(other, Duration):
            return NotImplemented
        return Timestamp(self.value + other.delta)

    def floor_to_interval_units(self, interval: Interval) -> int:
        """Integer key shared by all instants in the same calendar bucket."""
        value = self.value
        epoch = int(value.timestamp())
        if interval is Interval.SECOND:
            return epoch
        if interval is Interval.MINUTE:
            return epoch // 60
        if interval is Interval.HOUR:
            return epoch // 3600
        if interval is Interval.DAY:
            return value.year * 10000 + value.month * 100 + value.day
        if interval is Interval.WEEK:
            iso_year, iso_week, _ = value.isocalendar()
            return iso_year * 100 + iso_week
        if interval is Interval.MONTH:
            return value.year * 100 + value.month
        if interval is Interval.YEAR:
            return value.year
        raise AssertionError(f"Unhandled interval: {interval!r}")

    def __str__(self) -> str:
        return self.to_rfc3339()


__all__ = ["Interval", "Duration", "Timestamp", "UTC"]
