"""Grouping of records into calendar buckets and per-bucket statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .models import Record
from .rounding import RoundingOptions
from .timeutils import Duration, Interval


@dataclass(frozen=True)
class BucketStatistics:
    count: int
    sum: Duration
    avg: Duration
    # Both are reported because rounding does not distribute over the sum.
    rounded_sum: Optional[Duration] = None
    sum_of_rounded: Optional[Duration] = None


@dataclass
class RecordBucket:
    interval: Interval
    precise: bool = False
    records: List[Record] = field(default_factory=list)

    def add(self, record: Record) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def name(self) -> str:
        if not self.records:
            raise RuntimeError("Cannot name an empty bucket")
        start = self.records[0].start
        interval = self.interval
        if interval is Interval.SECOND:
            return start.format("%Y-%m-%d (%A), %H:%M:%S")
        if interval is Interval.MINUTE:
            following = start + Duration.from_seconds(60)
            return start.format("%Y-%m-%d (%A), %H:%M-") + following.format("%H:%M (%Z)")
        if interval is Interval.HOUR:
            following = start + Duration.from_seconds(3600)
            return start.format("%Y-%m-%d (%A), %H:00-") + following.format("%H:00 (%Z)")
        if interval is Interval.DAY:
            return start.format("%Y-%m-%d (%A)")
        if interval is Interval.WEEK:
            iso_year, iso_week, _ = start.value.isocalendar()
            return f"CW {iso_week:02d} ({start.format('%B')} {iso_year})"
        if interval is Interval.MONTH:
            return start.format("%B %Y")
        if interval is Interval.YEAR:
            return start.format("%Y")
        raise AssertionError(f"Unhandled interval: {interval!r}")

    def durations(self) -> List[Duration]:
        return [record.duration() for record in self.records]

    def statistics(self, rounding: Optional[RoundingOptions] = None) -> BucketStatistics:
        durations = self.durations()
        total = Duration.sum(durations)
        average = Duration.mean(durations)
        if rounding is None:
            return BucketStatistics(count=len(durations), sum=total, avg=average)
        return BucketStatistics(
            count=len(durations),
            sum=total,
            avg=average,
            rounded_sum=rounding.round_duration(total),
            sum_of_rounded=Duration.sum(rounding.round_duration(d) for d in durations),
        )


def group_by_interval(
    records: Iterable[Record],
    interval: Interval,
    precise: bool = False,
) -> Dict[int, RecordBucket]:
    """Map bucket keys to buckets, in ascending key order."""
    buckets: Dict[int, RecordBucket] = {}
    for record in records:
        key = record.bucket_key(interval)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = RecordBucket(interval=interval, precise=precise)
        bucket.add(record)
    return dict(sorted(buckets.items()))


__all__ = ["BucketStatistics", "RecordBucket", "group_by_interval"]
