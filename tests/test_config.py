from __future__ import annotations

from pathlib import Path

import pytest

from punchcard.config import Settings, build_config, normalize_card_name
from punchcard.errors import InvalidConfiguration, InvalidRoundingDirection, InvalidTimeInterval
from punchcard.rounding import RoundingDirection
from punchcard.timeutils import Interval


def test_defaults() -> None:
    settings = Settings()
    assert settings.card_name == "main"
    assert settings.card_dir == Path("~/.punch").expanduser()
    config = build_config(settings)
    assert config.card_path == Path("~/.punch/main.csv").expanduser()
    assert config.interval is Interval.WEEK
    assert config.rounding is None
    assert config.precise is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PUNCH_CARD_DIR", str(tmp_path))
    monkeypatch.setenv("PUNCH_CARD_NAME", "work")
    monkeypatch.setenv("PUNCH_DEFAULT_INTERVAL", "day")
    monkeypatch.setenv("PUNCH_ROUNDING", "nearest,15m")
    monkeypatch.setenv("PUNCH_PRECISE", "true")
    config = build_config(Settings())
    assert config.card_path == tmp_path / "work.csv"
    assert config.interval is Interval.DAY
    assert config.rounding is not None
    assert config.rounding.direction is RoundingDirection.NEAREST
    assert config.rounding.granularity == 900
    assert config.precise is True


def test_dotenv_file_is_read(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("PUNCH_CARD_NAME=side-project\n", encoding="utf-8")
    assert Settings().card_name == "side-project"


def test_cli_overrides_win(tmp_path: Path) -> None:
    settings = Settings(card_name="main", rounding="up,1h")
    config = build_config(
        settings,
        card_name="other",
        card_dir=tmp_path,
        interval="month",
        rounding="down,30m",
        precise=True,
    )
    assert config.card_path == tmp_path / "other.csv"
    assert config.card.name == "other"
    assert config.interval is Interval.MONTH
    assert config.rounding.direction is RoundingDirection.DOWN
    assert config.rounding.granularity == 1800
    assert config.precise


def test_invalid_inputs_fail_before_file_access(tmp_path: Path) -> None:
    settings = Settings(card_dir=tmp_path / "never-created")
    with pytest.raises(InvalidRoundingDirection):
        build_config(settings, rounding="sideways,1h")
    with pytest.raises(InvalidTimeInterval):
        build_config(settings, interval="fortnight")
    with pytest.raises(InvalidConfiguration):
        build_config(settings, card_name="../escape")
    assert not (tmp_path / "never-created").exists()


def test_card_name_is_normalized() -> None:
    assert normalize_card_name("  work ") == "work"
    for bad in ("", "   ", "a/b", "a\\b", ".", ".."):
        with pytest.raises(ValueError):
            normalize_card_name(bad)


def test_card_name_rules_match_for_settings_and_overrides(tmp_path: Path) -> None:
    assert Settings(card_name=" work ").card_name == "work"
    settings = Settings(card_dir=tmp_path)
    assert build_config(settings, card_name=" work ").card_path == tmp_path / "work.csv"
    with pytest.raises(InvalidConfiguration, match="Invalid card name"):
        build_config(settings, card_name="..")
