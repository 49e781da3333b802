"""Plain-text console reporter."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from tc_progress.reports.teamcity import elapsed_duration, presentation_name
from tc_progress.types import StatusKind

if TYPE_CHECKING:
    from tc_progress.harness.result import RunParameters, TestResultLike


_LABELS: dict[StatusKind, tuple[str, str]] = {
    StatusKind.PASSED: ("PASSED", "green"),
    StatusKind.FAILED: ("FAILED", "red"),
    StatusKind.ERROR: ("ERROR", "red"),
    StatusKind.NOT_RUN: ("NOT RUN", "yellow"),
}


class ConsoleReporter:
    """Human-readable progress lines, one per finished test."""

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        self.console = console or Console(highlight=False)
        self.verbosity = verbosity
        self.counts: Counter[StatusKind] = Counter()

    def starting_test_run(self, parameters: RunParameters) -> None:
        self.counts.clear()
        if self.verbosity > 0:
            self.console.print("[bold]Test run started[/bold]")

    def starting_test(self, result: TestResultLike) -> None:
        if self.verbosity > 0:
            self.console.print(f"  [dim]running[/dim] {escape(presentation_name(result))}")

    def finished_test(self, result: TestResultLike) -> None:
        status = result.status
        self.counts[status.kind] += 1
        label, color = _LABELS[status.kind]
        line = f"[{color}]{label}[/{color}] {escape(presentation_name(result))}"
        duration = elapsed_duration(result)
        if duration != "0":
            line += f" [dim]({escape(duration)} ms)[/dim]"
        self.console.print(line)
        if status.kind.is_failure and status.reason:
            self.console.print(f"    {escape(status.reason)}")

    def stopping_test_run(self) -> None:
        if self.verbosity > 0:
            self.console.print("[yellow]Stopping test run[/yellow]")

    def finished_test_run(self, all_ok: bool) -> None:
        total = sum(self.counts.values())
        parts = [
            f"{self.counts[kind]} {_LABELS[kind][0].lower()}"
            for kind in StatusKind
            if self.counts[kind]
        ]
        summary = ", ".join(parts) if parts else "no tests"
        color = "green" if all_ok else "red"
        self.console.print(f"[{color}]{total} test(s): {summary}[/{color}]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")


__all__ = ["ConsoleReporter"]
