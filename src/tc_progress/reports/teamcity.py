"""TeamCity service message reporter.

Translates harness callbacks into ``##teamcity[...]`` lines:

- the whole run is wrapped in a root ``testSuiteStarted``/``testSuiteFinished``
  pair;
- each execution becomes ``testStarted`` ... ``testFinished``, with
  ``testStdOut``/``testFailed`` or ``testIgnored`` in between;
- executions of a repeated test are grouped in a nested suite named after the
  test, opened on execution 1 and closed when the repeat terminates.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from tc_progress.errors import ResultFault
from tc_progress.harness.properties import get_int_property, get_property
from tc_progress.messages import format_message
from tc_progress.sinks import Sink, StreamSink
from tc_progress.types import RepeatMode, StatusKind

if TYPE_CHECKING:
    from tc_progress.harness.result import RunParameters, TestResultLike


logger = logging.getLogger(__name__)

DEFAULT_SUITE_NAME = "jtreg"
DEFAULT_FAILED_OUTPUT_PLACEHOLDER = "Failed to load test results."

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def presentation_name(result: TestResultLike) -> str:
    """Display name of one execution: ``<name> run #<n>`` for repeats."""
    execution_number = get_property(result, "executionNumber")
    if execution_number is not None and execution_number != "0":
        return f"{result.test_name} run #{execution_number}"
    return result.test_name


def elapsed_duration(result: TestResultLike) -> str:
    """The ``elapsed`` property up to its first space, ``"0"`` when absent."""
    return get_property(result, "elapsed", "0").split(" ")[0]


def closes_repeat(result: TestResultLike, kind: StatusKind) -> bool:
    """Whether this execution is the last one of a repeated test."""
    mode = RepeatMode.parse(get_property(result, "repeatMode", "once"))
    if mode is RepeatMode.UNTIL_SUCCESS:
        return kind is StatusKind.PASSED
    if mode is RepeatMode.UNTIL_FAILURE:
        return kind is StatusKind.FAILED
    if mode is RepeatMode.N:
        max_repeat_count = get_int_property(result, "maxRepeatCount", -1)
        return get_int_property(result, "executionNumber", 0) == max_repeat_count
    return False


class TeamCityReporter:
    """Reporter emitting TeamCity service messages to a sink."""

    def __init__(
        self,
        sink: Sink | None = None,
        *,
        suite_name: str = DEFAULT_SUITE_NAME,
        failed_output_placeholder: str = DEFAULT_FAILED_OUTPUT_PLACEHOLDER,
    ) -> None:
        self.sink = sink if sink is not None else StreamSink()
        self.suite_name = suite_name
        self.failed_output_placeholder = failed_output_placeholder

    def starting_test_run(self, parameters: RunParameters) -> None:
        self._emit("testSuiteStarted", name=self.suite_name)

    def starting_test(self, result: TestResultLike) -> None:
        name = presentation_name(result)
        location = self._location_hint(result)

        mode = RepeatMode.parse(get_property(result, "repeatMode", "once"))
        execution_number = get_int_property(result, "executionNumber", 0)
        if mode.repeats and execution_number == 1:
            self._emit("testSuiteStarted", name=result.test_name)

        self._emit("testStarted", name=name, locationHint=location)

    def finished_test(self, result: TestResultLike) -> None:
        status = result.status
        kind = status.kind
        output_file = result.output_file
        name = presentation_name(result)

        if kind.is_failure:
            if output_file is not None:
                output = self._load_text(output_file)
                if output:
                    self._emit("testStdOut", name=name, out=output)
            self._emit("testFailed", name=name, message=status.reason)
        elif kind is StatusKind.NOT_RUN:
            self._emit("testIgnored", name=name)

        duration = elapsed_duration(result)
        # Failed output was already streamed through testStdOut
        attach_output = kind is not StatusKind.FAILED and output_file is not None
        output_path = self._absolute(output_file) if attach_output else None
        self._emit(
            "testFinished",
            name=name,
            duration=duration if duration != "0" else None,
            outputFile=output_path,
        )

        if closes_repeat(result, kind):
            self._emit("testSuiteFinished", name=result.test_name)

    def stopping_test_run(self) -> None:
        # finished_test_run always follows and closes the root suite
        pass

    def finished_test_run(self, all_ok: bool) -> None:
        self._emit("testSuiteFinished", name=self.suite_name)

    def error(self, message: str) -> None:
        self.sink.write_line(message)

    def _emit(self, event: str, **attrs: object) -> None:
        self.sink.write_line(format_message(event, **attrs))

    def _location_hint(self, result: TestResultLike) -> str | None:
        try:
            description = result.get_description()
        except ResultFault as exc:
            logger.debug("No description for %s, omitting location: %s", result.test_name, exc)
            return None
        try:
            path = Path(description.file).resolve()
        except (OSError, RuntimeError) as exc:
            logger.debug("Cannot resolve %s for %s: %s", description.file, result.test_name, exc)
            return None
        return f"file://{path}"

    def _absolute(self, path: Path) -> str | None:
        try:
            return str(path.absolute())
        except OSError as exc:
            logger.debug("Cannot make %s absolute, omitting outputFile: %s", path, exc)
            return None

    def _load_text(self, path: Path) -> str:
        """Failure output with normalised line breaks, ``""`` when there is no file."""
        try:
            if not path.is_file():
                return ""
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Failed to read test output %s: %s", path, exc)
            return self.failed_output_placeholder
        lines = _LINE_BREAK.split(text)
        if lines and lines[-1] == "":
            lines.pop()
        return "\n".join(lines)


__all__ = [
    "DEFAULT_FAILED_OUTPUT_PLACEHOLDER",
    "DEFAULT_SUITE_NAME",
    "TeamCityReporter",
    "closes_repeat",
    "elapsed_duration",
    "presentation_name",
]
