"""Error types raised by punchcard."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class PunchError(RuntimeError):
    """Base class for every user-facing failure."""

    def __init__(self, message: str, *, path: Optional[PathLike] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class IncorrectCardStateForIn(PunchError):
    def __init__(self, path: Optional[PathLike] = None, *, reason: Optional[str] = None) -> None:
        message = "Cannot punch in. Did you punch out last time?"
        if reason:
            message = f"Cannot punch in: {reason}"
        super().__init__(message, path=path)


class IncorrectCardStateForOut(PunchError):
    def __init__(self, path: Optional[PathLike] = None, *, reason: Optional[str] = None) -> None:
        message = "Cannot punch out. Did you punch in before?"
        if reason:
            message = f"Cannot punch out: {reason}"
        super().__init__(message, path=path)


class InvalidConfiguration(PunchError):
    pass


class InvalidRoundingDirection(InvalidConfiguration):
    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid rounding direction: {value!r} (expected down|d, up|u or nearest|n)")
        self.value = value


class InvalidTimeInterval(InvalidConfiguration):
    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid time interval: {value!r}")
        self.value = value


class FileDoesNotExist(PunchError):
    def __init__(self, path: PathLike) -> None:
        super().__init__(f"File does not exist: {path}", path=path)


class FileIsEmpty(PunchError):
    def __init__(self, path: PathLike) -> None:
        super().__init__(f"File is empty: {path}", path=path)


class EnvVarNotFound(PunchError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Environment variable not set: {name}")
        self.name = name


class EditorFailed(PunchError):
    pass


__all__ = [
    "PunchError",
    "IncorrectCardStateForIn",
    "IncorrectCardStateForOut",
    "InvalidConfiguration",
    "InvalidRoundingDirection",
    "InvalidTimeInterval",
    "FileDoesNotExist",
    "FileIsEmpty",
    "EnvVarNotFound",
    "EditorFailed",
]
