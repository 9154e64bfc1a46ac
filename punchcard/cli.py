"""Command line front end: ``punch in|out|status|show|edit``."""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

from pydantic import ValidationError

from . import __version__
from .buckets import group_by_interval
from .config import PunchConfig, Settings, build_config
from .errors import EditorFailed, EnvVarNotFound, InvalidConfiguration, PunchError
from .formatting import format_card
from .storage import ensure_card_file, require_non_empty
from .timeutils import Timestamp

logger = logging.getLogger(__name__)

EDITOR_ENV = "EDITOR"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="punch", description="Punch in and out to track your time.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--card", help="name of the punch card (default: main)")
    parser.add_argument("--dir", type=Path, help="directory holding the punch cards (default: ~/.punch)")
    parser.add_argument("-v", "--verbose", action="store_true", help="print debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    inn = subparsers.add_parser("in", help="punch in - start tracking time")
    inn.add_argument("-n", "--note", help="note attached to the new record")

    out = subparsers.add_parser("out", help="punch out - stop tracking time")
    out.add_argument("-n", "--note", help="note appended to the current record")

    subparsers.add_parser("status", help="show whether you are punched in or out")

    show = subparsers.add_parser("show", help="show the records of a punch card")
    show.add_argument(
        "interval",
        nargs="?",
        help="interval to group records by: min, hour, day, week, month, year (default: week)",
    )
    show.add_argument(
        "-p",
        "--precise",
        action="store_true",
        default=None,
        help="print timestamps in RFC 3339 format",
    )
    show.add_argument(
        "-r",
        "--round",
        dest="rounding",
        metavar="SPEC",
        help="round durations, e.g. 'nearest,15m' or 'up,1h'",
    )

    subparsers.add_parser("edit", help="open the punch card in $EDITOR")
    return parser


def configure_logging(level: str, verbose: bool = False) -> None:
    resolved = logging.DEBUG if verbose else getattr(logging, level, logging.WARNING)
    logging.basicConfig(level=resolved, format="%(levelname)s: %(message)s")


def cmd_in(config: PunchConfig, args: argparse.Namespace, out: TextIO) -> int:
    card = config.card.ensure_exists()
    record = card.punch_in(Timestamp.now(), args.note)
    print(f"in - at {record.start.to_rfc3339()}", file=out)
    return 0


def cmd_out(config: PunchConfig, args: argparse.Namespace, out: TextIO) -> int:
    card = config.card
    require_non_empty(card.path)
    record = card.punch_out(Timestamp.now(), args.note)
    print(f"out - at {record.end.to_rfc3339()}", file=out)
    return 0


def cmd_status(config: PunchConfig, args: argparse.Namespace, out: TextIO) -> int:
    print(config.card.status(), file=out)
    return 0


def cmd_show(config: PunchConfig, args: argparse.Namespace, out: TextIO) -> int:
    card = config.card
    buckets = group_by_interval(card.records(), config.interval, precise=config.precise)
    print(format_card(card.name, buckets, config.rounding), file=out, end="")
    return 0


def cmd_edit(config: PunchConfig, args: argparse.Namespace, out: TextIO) -> int:
    editor = os.environ.get(EDITOR_ENV)
    if not editor:
        raise EnvVarNotFound(EDITOR_ENV)
    path = ensure_card_file(config.card_path)
    try:
        completed = subprocess.run([*shlex.split(editor), str(path)], check=False)
    except OSError as exc:
        raise EditorFailed(f"Failed to open editor {editor!r}: {exc}") from exc
    if completed.returncode != 0:
        raise EditorFailed(f"Editor returned non-zero exit code {completed.returncode}")
    return 0


COMMANDS: Dict[str, Callable[[PunchConfig, argparse.Namespace, TextIO], int]] = {
    "in": cmd_in,
    "out": cmd_out,
    "status": cmd_status,
    "show": cmd_show,
    "edit": cmd_edit,
}


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        error = exc.errors(include_url=False)[0]
        field = ".".join(str(part) for part in error["loc"])
        raise InvalidConfiguration(f"Invalid setting {field}: {error['msg']}") from exc


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        configure_logging(settings.log_level, args.verbose)
        config = build_config(
            settings,
            card_name=args.card,
            card_dir=args.dir,
            interval=getattr(args, "interval", None),
            rounding=getattr(args, "rounding", None),
            precise=getattr(args, "precise", None),
        )
        logger.debug("Using card %s", config.card_path)
        return COMMANDS[args.command](config, args, out)
    except PunchError as exc:
        print(f"[punch error]: {exc}", file=err)
        return 1


__all__ = ["build_parser", "main", "COMMANDS"]
