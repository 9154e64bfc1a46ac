from __future__ import annotations

import datetime as dt
import os
import time
from pathlib import Path
from typing import Callable, Generator

import pytest

from punchcard.card import Card
from punchcard.models import Record
from punchcard.timeutils import Timestamp

UTC = dt.timezone.utc


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("PUNCH_CARD_DIR", "PUNCH_CARD_NAME", "PUNCH_DEFAULT_INTERVAL", "PUNCH_ROUNDING",
                 "PUNCH_PRECISE", "PUNCH_LOG_LEVEL", "EDITOR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _apply_zone(name: str | None) -> None:
    if name is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = name
    time.tzset()


@pytest.fixture(autouse=True)
def local_zone() -> Generator[Callable[[str], None], None, None]:
    """Run every test in UTC; tests may switch to another zone through the returned setter."""
    if not hasattr(time, "tzset"):
        pytest.skip("changing the local zone needs time.tzset")
    previous = os.environ.get("TZ")
    _apply_zone("UTC")
    try:
        yield _apply_zone
    finally:
        _apply_zone(previous)


@pytest.fixture()
def card_dir(tmp_path: Path) -> Path:
    path = tmp_path / "cards"
    path.mkdir()
    return path


@pytest.fixture()
def card(card_dir: Path) -> Card:
    return Card.in_directory(card_dir, "main").ensure_exists()


@pytest.fixture()
def ts() -> Callable[..., Timestamp]:
    def _make(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> Timestamp:
        return Timestamp(dt.datetime(year, month, day, hour, minute, second, tzinfo=UTC))

    return _make


@pytest.fixture()
def make_record() -> Callable[..., Record]:
    def _make(index: int, start: str, end: str | None = None, note: str | None = None) -> Record:
        return Record(
            index=index,
            start=Timestamp.parse(start),
            end=Timestamp.parse(end) if end else None,
            note=note,
        )

    return _make
