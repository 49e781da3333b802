"""Base reporter protocol for harness progress output."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tc_progress.harness.result import RunParameters, TestResultLike


class Reporter(Protocol):
    """Protocol defining the harness observer interface.

    The harness calls these sequentially for a run. Implementations must not
    raise out of a callback because of bad result data: a reporter is never
    allowed to be the reason a test run fails.
    """

    def starting_test_run(self, parameters: RunParameters) -> None:
        """Called once before any test starts."""
        ...

    def starting_test(self, result: TestResultLike) -> None:
        """Called when a single test execution starts."""
        ...

    def finished_test(self, result: TestResultLike) -> None:
        """Called when a single test execution finishes."""
        ...

    def stopping_test_run(self) -> None:
        """Called when the harness begins stopping the run, possibly early."""
        ...

    def finished_test_run(self, all_ok: bool) -> None:
        """Called once after all tests finish."""
        ...

    def error(self, message: str) -> None:
        """Called when the harness itself reports an error."""
        ...


# Callback names a reporter class must provide, in the order a run calls them
HARNESS_CALLBACKS = (
    "starting_test_run",
    "starting_test",
    "finished_test",
    "stopping_test_run",
    "finished_test_run",
    "error",
)
