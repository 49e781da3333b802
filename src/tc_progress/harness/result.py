"""Read-only view of the harness objects handed to reporters.

The harness owns these objects. Reporters only read them:

- :class:`TestResultLike` is the structural surface a host adapter must offer.
- :class:`TestResult` is a concrete model satisfying it, used by recordings
  and tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tc_progress.errors import ResultFault
from tc_progress.types import StatusKind


class Status(BaseModel):
    """Final status of a test: a kind plus a free-text reason."""

    model_config = ConfigDict(frozen=True)

    kind: StatusKind
    reason: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def _kind_by_name(cls, value: Any) -> Any:
        # Recordings may spell the kind out ("failed", "NOT_RUN", "not run")
        if isinstance(value, str):
            key = value.strip().upper().replace(" ", "_")
            try:
                return StatusKind[key]
            except KeyError:
                msg = f"Unknown status kind: {value!r}"
                raise ValueError(msg) from None
        return value

    @classmethod
    def from_code(cls, code: int, reason: str = "") -> Status:
        """Build a status from the harness's numeric type code (0..3)."""
        return cls(kind=StatusKind(code), reason=reason)


class TestDescription(BaseModel):
    """Static description of a test: where it is defined."""

    __test__ = False
    model_config = ConfigDict(frozen=True)

    file: Path


class RunParameters(BaseModel):
    """Configuration of a whole test run. Opaque to reporters."""

    model_config = ConfigDict(frozen=True)

    values: dict[str, Any] = Field(default_factory=dict)


class TestResultLike(Protocol):
    """What a reporter needs from a harness test result."""

    @property
    def test_name(self) -> str: ...

    @property
    def status(self) -> Status: ...

    @property
    def output_file(self) -> Path | None: ...

    def get_description(self) -> TestDescription:
        """Return the test description or raise :class:`ResultFault`."""
        ...

    def get_property(self, name: str) -> str | None:
        """Return a result property, ``None`` when absent.

        May raise :class:`ResultFault`.
        """
        ...


class TestResult(BaseModel):
    """Concrete, immutable test result.

    Parameters
    ----------
    test_name:
        Harness-relative test name, e.g. ``java/lang/Foo.java``.
    status:
        Final status of this execution.
    output_file:
        Result file written by the harness (``.jtr``), if any.
    description:
        Test description; ``None`` when the harness could not provide one.
    properties:
        Free-form string properties such as ``repeatMode``,
        ``executionNumber``, ``maxRepeatCount`` and ``elapsed``.
    """

    __test__ = False
    model_config = ConfigDict(frozen=True)

    test_name: str
    status: Status
    output_file: Path | None = None
    description: TestDescription | None = None
    properties: dict[str, str] = Field(default_factory=dict)

    def get_description(self) -> TestDescription:
        if self.description is None:
            msg = f"No description for {self.test_name}"
            raise ResultFault(msg)
        return self.description

    def get_property(self, name: str) -> str | None:
        return self.properties.get(name)


__all__ = [
    "RunParameters",
    "Status",
    "TestDescription",
    "TestResult",
    "TestResultLike",
]
