"""CSV persistence for punch cards.

Rows are stored most-recent-first and every mutation rewrites the whole file
through a temporary file that is renamed over the card. There is no locking:
two invocations racing on the same card may lose an update.
"""

from __future__ import annotations

import csv
import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Generator, Iterable, List

from pydantic import ValidationError

from .errors import FileDoesNotExist, FileIsEmpty
from .models import Record
from .schemas import RecordRow

logger = logging.getLogger(__name__)


def ensure_card_file(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.touch()
        logger.debug("Created card file %s", path)
    return path


def require_existing(path: Path) -> Path:
    if not path.is_file():
        raise FileDoesNotExist(path)
    return path


def require_non_empty(path: Path) -> Path:
    require_existing(path)
    if path.stat().st_size == 0:
        raise FileIsEmpty(path)
    return path


@dataclass
class CardContents:
    """Records in insertion order plus the line numbers of rows that could not be read."""

    records: List[Record] = field(default_factory=list)
    unreadable_rows: List[int] = field(default_factory=list)


def load_card(path: Path) -> CardContents:
    contents = CardContents()
    if not path.exists():
        return contents
    records = contents.records
    with path.open("r", newline="", encoding="utf-8") as handle:
        for line_no, fields in enumerate(csv.reader(handle), start=1):
            if not fields or all(not value.strip() for value in fields):
                continue
            try:
                records.append(RecordRow.from_fields(fields).to_record())
            except ValidationError as exc:
                contents.unreadable_rows.append(line_no)
                logger.warning(
                    "Unreadable row %d in %s: %s",
                    line_no,
                    path,
                    exc.errors(include_url=False)[0]["msg"],
                )
    records.reverse()
    logger.debug("Read %d records from %s", len(records), path)
    return contents


def read_records(path: Path) -> List[Record]:
    """Return the readable records in insertion order (oldest first)."""
    return load_card(path).records


@contextmanager
def atomic_write(path: Path) -> Generator[IO[str], None, None]:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as handle:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def write_records(path: Path, records: Iterable[Record]) -> None:
    """Replace the card with ``records`` (given oldest first)."""
    rows = [RecordRow.from_record(record).to_fields() for record in records]
    rows.reverse()
    with atomic_write(path) as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerows(rows)
    logger.debug("Wrote %d records to %s", len(rows), path)


__all__ = [
    "atomic_write",
    "CardContents",
    "ensure_card_file",
    "load_card",
    "read_records",
    "require_existing",
    "require_non_empty",
    "write_records",
]
