from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .card import Card
from .errors import InvalidConfiguration
from .rounding import RoundingOptions
from .timeutils import Interval

DEFAULT_CARD_DIR = Path("~/.punch")
DEFAULT_CARD_NAME = "main"
DEFAULT_INTERVAL = "week"


def normalize_card_name(value: str) -> str:
    """Strip a card name and reject anything that is not a plain file name."""
    name = value.strip()
    if not name or "/" in name or "\\" in name or name in {".", ".."}:
        raise ValueError(f"card name must be a plain file name, got {value!r}")
    return name


class Settings(BaseSettings):
    """Defaults read from ``PUNCH_*`` environment variables or a ``.env`` file."""

    model_config = SettingsConfigDict(env_prefix="PUNCH_", env_file=".env", extra="ignore", case_sensitive=False)

    card_dir: Path = DEFAULT_CARD_DIR
    card_name: str = DEFAULT_CARD_NAME
    default_interval: str = DEFAULT_INTERVAL
    rounding: Optional[str] = None
    precise: bool = False
    log_level: str = "WARNING"

    @field_validator("card_dir", mode="after")
    @classmethod
    def _expand_card_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("card_name")
    @classmethod
    def _check_card_name(cls, value: str) -> str:
        return normalize_card_name(value)

    @field_validator("rounding", mode="before")
    @classmethod
    def _blank_rounding(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


@dataclass(frozen=True)
class PunchConfig:
    """Everything one invocation needs, resolved once at the boundary."""

    card_path: Path
    interval: Interval = Interval.WEEK
    rounding: Optional[RoundingOptions] = None
    precise: bool = False

    @property
    def card(self) -> Card:
        return Card(self.card_path)


def build_config(
    settings: Settings,
    *,
    card_name: Optional[str] = None,
    card_dir: Optional[Path] = None,
    interval: Optional[str] = None,
    rounding: Optional[str] = None,
    precise: Optional[bool] = None,
) -> PunchConfig:
    """Merge CLI overrides into settings; parse errors surface before any file access."""
    try:
        name = normalize_card_name(card_name) if card_name is not None else settings.card_name
    except ValueError as exc:
        raise InvalidConfiguration(f"Invalid card name: {card_name!r}") from exc
    directory = Path(card_dir).expanduser() if card_dir else settings.card_dir
    rounding_spec = rounding if rounding is not None else settings.rounding
    return PunchConfig(
        card_path=Card.in_directory(directory, name).path,
        interval=Interval.parse(interval or settings.default_interval),
        rounding=RoundingOptions.parse(rounding_spec) if rounding_spec else None,
        precise=settings.precise if precise is None else precise,
    )


__all__ = ["Settings", "PunchConfig", "build_config", "normalize_card_name"]
