"""Fan-out of harness callbacks to several reporters."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tc_progress.harness.result import RunParameters, TestResultLike
    from tc_progress.reports.base import Reporter


class ReporterGroup:
    """Forwards every callback to each member reporter, in order."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self.reporters = list(reporters)

    def starting_test_run(self, parameters: RunParameters) -> None:
        for member in self.reporters:
            member.starting_test_run(parameters)

    def starting_test(self, result: TestResultLike) -> None:
        for member in self.reporters:
            member.starting_test(result)

    def finished_test(self, result: TestResultLike) -> None:
        for member in self.reporters:
            member.finished_test(result)

    def stopping_test_run(self) -> None:
        for member in self.reporters:
            member.stopping_test_run()

    def finished_test_run(self, all_ok: bool) -> None:
        for member in self.reporters:
            member.finished_test_run(all_ok)

    def error(self, message: str) -> None:
        for member in self.reporters:
            member.error(message)


__all__ = ["ReporterGroup"]
