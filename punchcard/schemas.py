from __future__ import annotations

import datetime as dt
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import Record
from .timeutils import Timestamp

FIELD_NAMES = ("index", "start", "end", "note")


def _serialize_datetime(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


class RecordRow(BaseModel):
    """One row of a card file: ``index,start[,end[,note]]``."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    start: dt.datetime
    end: Optional[dt.datetime] = None
    note: Optional[str] = None

    @field_validator("end", "note", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip():
            return Timestamp.parse(value).value
        return value

    @field_validator("start", "end")
    @classmethod
    def _attach_zone(cls, value: Optional[dt.datetime]) -> Optional[dt.datetime]:
        if value is not None and value.tzinfo is None:
            return value.astimezone()
        return value

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if not 2 <= len(data) <= len(FIELD_NAMES):
                raise ValueError(f"expected 2 to {len(FIELD_NAMES)} fields, got {len(data)}")
            return dict(zip(FIELD_NAMES, data))
        return data

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "RecordRow":
        return cls.model_validate(list(fields))

    @classmethod
    def from_record(cls, record: Record) -> "RecordRow":
        return cls(
            index=record.index,
            start=record.start.value,
            end=record.end.value if record.end else None,
            note=record.note,
        )

    def to_record(self) -> Record:
        return Record(
            index=self.index,
            start=Timestamp(self.start),
            end=Timestamp(self.end) if self.end else None,
            note=self.note,
        )

    def to_fields(self) -> List[str]:
        fields = [str(self.index), _serialize_datetime(self.start)]
        if self.end is not None:
            fields.append(_serialize_datetime(self.end))
        if self.note:
            if self.end is None:
                fields.append("")
            fields.append(self.note)
        return fields


__all__ = ["RecordRow", "FIELD_NAMES"]
