"""Recorded harness callback streams.

A recording is a JSON-lines file, one callback per line::

    {"event": "starting_test_run"}
    {"event": "starting_test", "result": {"test_name": "a/B.java", "status": {"kind": "passed"}}}
    {"event": "finished_test", "result": {...}}
    {"event": "finished_test_run", "all_ok": true}

Replaying a recording through a reporter reproduces the exact output the
reporter would have produced live.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from tc_progress.errors import RecordingError
from tc_progress.harness.result import RunParameters, TestResult

if TYPE_CHECKING:
    from tc_progress.reports.base import Reporter


logger = logging.getLogger(__name__)


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class StartingTestRun(_Event):
    event: Literal["starting_test_run"] = "starting_test_run"
    parameters: RunParameters = Field(default_factory=RunParameters)

    def dispatch(self, reporter: Reporter) -> None:
        reporter.starting_test_run(self.parameters)


class StartingTest(_Event):
    event: Literal["starting_test"] = "starting_test"
    result: TestResult

    def dispatch(self, reporter: Reporter) -> None:
        reporter.starting_test(self.result)


class FinishedTest(_Event):
    event: Literal["finished_test"] = "finished_test"
    result: TestResult

    def dispatch(self, reporter: Reporter) -> None:
        reporter.finished_test(self.result)


class StoppingTestRun(_Event):
    event: Literal["stopping_test_run"] = "stopping_test_run"

    def dispatch(self, reporter: Reporter) -> None:
        reporter.stopping_test_run()


class FinishedTestRun(_Event):
    event: Literal["finished_test_run"] = "finished_test_run"
    all_ok: bool = True

    def dispatch(self, reporter: Reporter) -> None:
        reporter.finished_test_run(self.all_ok)


class HarnessError(_Event):
    event: Literal["error"] = "error"
    message: str

    def dispatch(self, reporter: Reporter) -> None:
        reporter.error(self.message)


Event = Annotated[
    StartingTestRun | StartingTest | FinishedTest | StoppingTestRun | FinishedTestRun | HarnessError,
    Field(discriminator="event"),
]

_event_adapter: TypeAdapter[Event] = TypeAdapter(Event)


def parse_events(lines: Iterable[str], path: Path | None = None) -> Iterator[Event]:
    """Parse recording lines, skipping blank lines and ``#`` comments.

    Raises:
        RecordingError: On the first line that is not a valid event.
    """
    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        try:
            yield _event_adapter.validate_json(text)
        except ValidationError as exc:
            raise RecordingError(path, line_number, exc) from exc


def load_recording(path: Path) -> list[Event]:
    """Read and parse a whole recording file."""
    with path.open(encoding="utf-8") as fh:
        events = list(parse_events(fh, path))
    logger.debug("Loaded %d event(s) from %s", len(events), path)
    return events


def replay(events: Iterable[Event], reporter: Reporter) -> int:
    """Dispatch ``events`` to ``reporter`` in order. Returns the event count."""
    count = 0
    for event in events:
        event.dispatch(reporter)
        count += 1
    return count


__all__ = [
    "Event",
    "FinishedTest",
    "FinishedTestRun",
    "HarnessError",
    "StartingTest",
    "StartingTestRun",
    "StoppingTestRun",
    "load_recording",
    "parse_events",
    "replay",
]
