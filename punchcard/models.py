from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .timeutils import Duration, Interval, Timestamp

NOTE_SEPARATOR = ";"


@dataclass(slots=True)
class Record:
    """A single punch interval. ``end`` is ``None`` while punched in."""

    index: int
    start: Timestamp
    end: Optional[Timestamp] = None
    note: Optional[str] = None

    @classmethod
    def open(cls, timestamp: Timestamp, existing_count: int, note: Optional[str] = None) -> "Record":
        return cls(index=existing_count, start=timestamp, end=None, note=note or None)

    @property
    def is_open(self) -> bool:
        return self.end is None

    def is_terminated(self) -> bool:
        return self.end is not None and self.end >= self.start

    def duration(self) -> Duration:
        return Duration.between(self.start, self.end)

    def bucket_key(self, interval: Interval) -> int:
        return self.start.floor_to_interval_units(interval)

    def terminate(self, timestamp: Timestamp, note: Optional[str] = None) -> None:
        self.end = timestamp
        if note:
            self.note = f"{self.note}{NOTE_SEPARATOR}{note}" if self.note else note


__all__ = ["Record", "NOTE_SEPARATOR"]
