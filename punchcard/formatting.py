from __future__ import annotations

from typing import List, Mapping, Optional

from .buckets import RecordBucket
from .models import Record
from .rounding import RoundingOptions
from .timeutils import Duration, Timestamp

ONGOING = "ongoing..."
NO_PUNCHES = "no punches yet"


def format_duration(duration: Duration, *, seconds: bool = True) -> str:
    total = duration.in_seconds()
    sign = "-" if total < 0 else ""
    hours, rest = divmod(abs(total), 3600)
    minutes, secs = divmod(rest, 60)
    if seconds:
        return f"{sign}{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _show_seconds(rounding: Optional[RoundingOptions]) -> bool:
    return rounding is None or rounding.granularity < 60


def format_timestamp(timestamp: Timestamp, precise: bool = False) -> str:
    if precise:
        return timestamp.to_rfc3339()
    return timestamp.format("%Y-%m-%d %H:%M:%S %Z")


def format_record(
    record: Record,
    *,
    precise: bool = False,
    rounding: Optional[RoundingOptions] = None,
    align_with: int = 0,
) -> str:
    index_width = len(str(align_with)) if align_with else 1
    end_width = 33 if precise else 27
    start = format_timestamp(record.start, precise)
    end = format_timestamp(record.end, precise) if record.end else ONGOING
    duration = record.duration()
    if rounding is not None:
        duration = rounding.round_duration(duration)
    duration_text = f"({format_duration(duration, seconds=_show_seconds(rounding))})"
    line = f"{record.index:0{index_width}d}: {start} -> {end:<{end_width}} {duration_text:<12}"
    if record.note:
        line = f"{line} {record.note}"
    return line.rstrip()


def format_statistics(bucket: RecordBucket, rounding: Optional[RoundingOptions] = None) -> str:
    stats = bucket.statistics(rounding)
    show_seconds = _show_seconds(rounding)

    def fmt(value: Duration) -> str:
        return format_duration(value, seconds=show_seconds)

    if stats.rounded_sum is None or stats.sum_of_rounded is None:
        return f"{stats.count} punches - sum: {fmt(stats.sum)}, avg: {fmt(stats.avg)}"
    return (
        f"{stats.count} punches - sum: {fmt(stats.sum)}, "
        f"rounded sum: {fmt(stats.rounded_sum)}, "
        f"sum of rounded: {fmt(stats.sum_of_rounded)}, "
        f"avg: {fmt(stats.avg)}"
    )


def format_bucket(
    bucket: RecordBucket,
    rounding: Optional[RoundingOptions] = None,
    align_with: int = 0,
) -> str:
    lines: List[str] = [bucket.name(), format_statistics(bucket, rounding)]
    lines.extend(
        format_record(record, precise=bucket.precise, rounding=rounding, align_with=align_with)
        for record in bucket.records
    )
    return "\n".join(lines) + "\n"


def format_card(
    name: str,
    buckets: Mapping[int, RecordBucket],
    rounding: Optional[RoundingOptions] = None,
) -> str:
    total = sum(len(bucket) for bucket in buckets.values())
    parts = [f"Showing card {name}\n"]
    if total == 0:
        parts.append(f"{NO_PUNCHES}\n")
    else:
        parts.extend(format_bucket(bucket, rounding, align_with=total) for bucket in buckets.values())
    return "\n".join(parts)


__all__ = [
    "format_bucket",
    "format_card",
    "format_duration",
    "format_record",
    "format_statistics",
    "format_timestamp",
]
