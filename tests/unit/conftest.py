"""Shared fixtures for unit tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from tc_progress.errors import ResultFault
from tc_progress.harness import Status, TestDescription, TestResult
from tc_progress.reports import TeamCityReporter
from tc_progress.sinks import BufferSink
from tc_progress.types import StatusKind


class FaultyResult:
    """Harness result whose lookups always fault."""

    def __init__(self, test_name: str = "faulty/Test.java", kind: StatusKind = StatusKind.PASSED):
        self.test_name = test_name
        self.status = Status(kind=kind, reason="boom")
        self.output_file = None

    def get_description(self) -> TestDescription:
        raise ResultFault("description unavailable")

    def get_property(self, name: str) -> str | None:
        raise ResultFault(f"cannot read {name}")


@pytest.fixture
def sink() -> BufferSink:
    return BufferSink()


@pytest.fixture
def teamcity(sink: BufferSink) -> TeamCityReporter:
    return TeamCityReporter(sink)


@pytest.fixture
def make_result(tmp_path: Path) -> Callable[..., TestResult]:
    """Build a TestResult with a real description file under tmp_path."""

    def factory(
        name: str = "java/lang/Foo.java",
        kind: StatusKind = StatusKind.PASSED,
        reason: str = "",
        output: str | None = None,
        with_description: bool = True,
        **properties: str,
    ) -> TestResult:
        description = None
        if with_description:
            source = tmp_path / "src" / name
            source.parent.mkdir(parents=True, exist_ok=True)
            source.touch()
            description = TestDescription(file=source)

        output_file = tmp_path / "work" / (name.replace("/", "_") + ".jtr")
        if output is not None:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(output, encoding="utf-8")

        return TestResult(
            test_name=name,
            status=Status(kind=kind, reason=reason),
            output_file=output_file,
            description=description,
            properties=properties,
        )

    return factory


@pytest.fixture
def faulty_result() -> type[FaultyResult]:
    return FaultyResult
