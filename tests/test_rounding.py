from __future__ import annotations

import datetime as dt

import pytest

from punchcard.errors import InvalidConfiguration, InvalidRoundingDirection, InvalidTimeInterval
from punchcard.rounding import MAX_GRANULARITY, RoundingDirection, RoundingOptions, parse_granularity
from punchcard.timeutils import Duration


def _minutes(value: int) -> Duration:
    return Duration(dt.timedelta(minutes=value))


@pytest.mark.parametrize(
    "direction,minutes,expected",
    [
        (RoundingDirection.DOWN, 50, 0),
        (RoundingDirection.UP, 50, 60),
        (RoundingDirection.NEAREST, 50, 60),
        (RoundingDirection.NEAREST, 29, 0),
        (RoundingDirection.DOWN, 119, 60),
        (RoundingDirection.UP, 61, 120),
        (RoundingDirection.NEAREST, 480, 480),
    ],
)
def test_round_duration_to_hours(direction: RoundingDirection, minutes: int, expected: int) -> None:
    options = RoundingOptions(direction, 3600)
    assert options.round_duration(_minutes(minutes)) == _minutes(expected)


def test_nearest_tie_rounds_up() -> None:
    options = RoundingOptions(RoundingDirection.NEAREST, 3600)
    assert options.round_duration(_minutes(90)) == _minutes(120)
    odd = RoundingOptions(RoundingDirection.NEAREST, 3)
    # 4 exceeds 3 by 1 < 1.5, 5 exceeds it by 2 >= 1.5
    assert odd.round_seconds(4) == 3
    assert odd.round_seconds(5) == 6


def test_rounded_value_is_aligned_and_idempotent() -> None:
    for direction in RoundingDirection:
        for granularity in (60, 900, 3600, 7 * 86400):
            options = RoundingOptions(direction, granularity)
            for seconds in (0, 1, 59, 61, 899, 1799, 1800, 3601, 86399, 123457):
                rounded = options.round_seconds(seconds)
                assert rounded % granularity == 0
                assert abs(rounded - seconds) <= granularity
                assert options.round_seconds(rounded) == rounded


def test_sub_second_part_is_truncated() -> None:
    options = RoundingOptions(RoundingDirection.UP, 60)
    duration = Duration(dt.timedelta(seconds=60, microseconds=500_000))
    assert options.round_duration(duration) == Duration.from_seconds(60)


def test_duration_round_delegates_to_options() -> None:
    options = RoundingOptions(RoundingDirection.DOWN, 900)
    assert _minutes(44).round(options) == _minutes(30)


@pytest.mark.parametrize("granularity", [0, -60])
def test_non_positive_granularity_is_rejected(granularity: int) -> None:
    with pytest.raises(InvalidConfiguration):
        RoundingOptions(RoundingDirection.UP, granularity)


def test_granularity_is_capped_at_largest_timedelta() -> None:
    widest = RoundingOptions(RoundingDirection.DOWN, MAX_GRANULARITY)
    assert widest.round_duration(_minutes(90)) == Duration.zero()
    with pytest.raises(InvalidConfiguration, match="too large"):
        RoundingOptions(RoundingDirection.UP, MAX_GRANULARITY + 1)


@pytest.mark.parametrize(
    "spec,direction,granularity",
    [
        ("nearest,15m", RoundingDirection.NEAREST, 900),
        ("N,1h", RoundingDirection.NEAREST, 3600),
        ("down,2min", RoundingDirection.DOWN, 120),
        ("Up,1Hour", RoundingDirection.UP, 3600),
        ("u,1d", RoundingDirection.UP, 86400),
        ("d,1w", RoundingDirection.DOWN, 604800),
        ("n,30s", RoundingDirection.NEAREST, 30),
    ],
)
def test_parse_rounding_spec(spec: str, direction: RoundingDirection, granularity: int) -> None:
    options = RoundingOptions.parse(spec)
    assert options.direction is direction
    assert options.granularity == granularity


@pytest.mark.parametrize("spec", ["sideways,1h", ",1h", "x,15m"])
def test_parse_rejects_bad_direction(spec: str) -> None:
    with pytest.raises(InvalidRoundingDirection):
        RoundingOptions.parse(spec)


@pytest.mark.parametrize(
    "spec",
    ["nearest", "nearest,1h,2h", "nearest,1fortnight", "up,h", "up,0h", "up,1month", "up,2000000000d"],
)
def test_parse_rejects_bad_interval(spec: str) -> None:
    with pytest.raises(InvalidTimeInterval):
        RoundingOptions.parse(spec)


def test_parse_granularity_units() -> None:
    assert parse_granularity("3m") == 180
    assert parse_granularity("2 hour") == 7200
