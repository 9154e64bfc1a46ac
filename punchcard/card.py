from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import IncorrectCardStateForIn, IncorrectCardStateForOut
from .models import Record
from .storage import CardContents, ensure_card_file, load_card, write_records
from .timeutils import Timestamp

logger = logging.getLogger(__name__)

CARD_EXT = ".csv"


class CardStatus(enum.Enum):
    PUNCHED_IN = "PunchedIn"
    PUNCHED_OUT = "PunchedOut"
    CORRUPTED = "Corrupted"

    def __str__(self) -> str:
        return self.value


def status_of(records: Sequence[Record]) -> CardStatus:
    """Derive the card state from records given oldest first."""
    if not records:
        return CardStatus.PUNCHED_OUT
    *older, last = records
    if not all(record.is_terminated() for record in older):
        return CardStatus.CORRUPTED
    if last.end is None:
        return CardStatus.PUNCHED_IN
    if not last.is_terminated():
        return CardStatus.CORRUPTED
    return CardStatus.PUNCHED_OUT


class Card:
    """A punch card backed by a single CSV file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @classmethod
    def in_directory(cls, directory: Path, name: str) -> "Card":
        return cls(Path(directory) / f"{name}{CARD_EXT}")

    @property
    def name(self) -> str:
        return self.path.stem

    def ensure_exists(self) -> "Card":
        ensure_card_file(self.path)
        return self

    def load(self) -> CardContents:
        return load_card(self.path)

    def records(self) -> List[Record]:
        return self.load().records

    def _unreadable_reason(self, contents: CardContents) -> Optional[str]:
        if not contents.unreadable_rows:
            return None
        rows = ", ".join(str(line) for line in contents.unreadable_rows)
        return f"unreadable rows ({rows}) in {self.path}; fix them with 'punch edit'"

    def status(self) -> CardStatus:
        contents = self.load()
        status = CardStatus.CORRUPTED if contents.unreadable_rows else status_of(contents.records)
        if status is CardStatus.CORRUPTED:
            logger.warning("Card %s is corrupted; fix it with 'punch edit'", self.path)
        return status

    def punch_in(self, timestamp: Timestamp, note: Optional[str] = None) -> Record:
        contents = self.load()
        reason = self._unreadable_reason(contents)
        if reason:
            raise IncorrectCardStateForIn(self.path, reason=reason)
        records = contents.records
        if not all(record.is_terminated() for record in records):
            raise IncorrectCardStateForIn(self.path)
        record = Record.open(timestamp, len(records), note)
        records.append(record)
        write_records(self.path, records)
        logger.debug("Punched in on %s at %s", self.name, timestamp)
        return record

    def punch_out(self, timestamp: Timestamp, note: Optional[str] = None) -> Record:
        contents = self.load()
        reason = self._unreadable_reason(contents)
        if reason:
            raise IncorrectCardStateForOut(self.path, reason=reason)
        records = contents.records
        if not records:
            raise IncorrectCardStateForOut(self.path)
        *older, last = records
        if last.end is not None or not all(record.is_terminated() for record in older):
            raise IncorrectCardStateForOut(self.path)
        if timestamp < last.start:
            raise IncorrectCardStateForOut(
                self.path,
                reason=f"end {timestamp} is before start {last.start}",
            )
        last.terminate(timestamp, note)
        write_records(self.path, records)
        logger.debug("Punched out on %s at %s", self.name, timestamp)
        return last


__all__ = ["Card", "CardStatus", "status_of", "CARD_EXT"]
