"""CLI module for tc-progress."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from tc_progress.config import ConfigError, ProgressConfig, load_config
from tc_progress.errors import RecordingError
from tc_progress.messages import escape_value
from tc_progress.replay import load_recording, replay
from tc_progress.reports import ReporterGroup, find_reporter
from tc_progress.reports.base import Reporter


log = logging.getLogger("tc_progress")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the tc-progress CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "replay":
        raise SystemExit(_run_replay(args))

    if args.command == "escape":
        # Raw write: rich would interpret markup in the escaped value
        sys.stdout.write(escape_value(args.value) + "\n")
        raise SystemExit(0)

    parser.print_help()
    raise SystemExit(0)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tc-progress",
        description="Translate test harness callbacks into TeamCity service messages",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    subparsers = parser.add_subparsers(dest="command")

    replay_parser = subparsers.add_parser("replay", help="Replay a recorded callback stream")
    replay_parser.add_argument("recording", type=Path, help="JSON-lines recording file")
    replay_parser.add_argument(
        "-r",
        "--reporter",
        dest="reporters",
        action="append",
        help="Reporter name or import string (repeatable, default from config)",
    )
    replay_parser.add_argument("--suite-name", help="Name of the root test suite")

    escape_parser = subparsers.add_parser("escape", help="Escape a value for a service message")
    escape_parser.add_argument("value", help="Raw value")

    return parser


def _resolve_config(args: argparse.Namespace, config: ProgressConfig) -> ProgressConfig:
    updates: dict[str, object] = {}
    if args.reporters:
        updates["reporters"] = ",".join(args.reporters)
    if args.suite_name is not None:
        updates["suite_name"] = args.suite_name
    if not updates:
        return config
    try:
        return ProgressConfig(**{**config.model_dump(), **updates})
    except ValidationError as exc:
        msg = f"Invalid command line option: {exc}"
        raise ConfigError(msg) from exc


def _build_reporter(config: ProgressConfig) -> Reporter:
    reporters = []
    for name in config.reporters:
        cls = find_reporter(name)
        reporters.append(cls(**config.options_for(name, cls)))
    if len(reporters) == 1:
        return reporters[0]
    return ReporterGroup(reporters)


def _run_replay(args: argparse.Namespace) -> int:
    console = Console(stderr=True)
    try:
        config = _resolve_config(args, load_config())
        reporter = _build_reporter(config)
        events = load_recording(args.recording)
    except (ConfigError, RecordingError, ValueError, TypeError, ImportError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]", highlight=False, soft_wrap=True)
        return 2
    except OSError as exc:
        console.print(
            f"[red]Cannot read {escape(str(args.recording))}: {escape(str(exc))}[/red]",
            highlight=False,
            soft_wrap=True,
        )
        return 2

    count = replay(events, reporter)
    log.debug("Replayed %d event(s)", count)
    return 0


__all__ = ["main"]
