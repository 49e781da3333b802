"""Error types for tc-progress."""

from pathlib import Path


class TcProgressError(Exception):
    """Base class for errors raised by tc-progress itself."""


class ResultFault(TcProgressError):
    """Raised by a harness result object when a value cannot be produced.

    Host adapters raise this from ``get_property`` or ``get_description``;
    reporters recover from it and never let it escape a callback.
    """


class MessageParseError(TcProgressError):
    """Raised when a ``##teamcity[...]`` line is malformed."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed service message ({reason}): {line!r}")


class RecordingError(TcProgressError):
    """Raised when a callback recording cannot be read."""

    def __init__(
        self,
        path: Path | None,
        line_number: int,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.line_number = line_number
        self.cause = cause

        where = f"{path}:{line_number}" if path else f"line {line_number}"
        message = f"Invalid recording event at {where}"
        if cause:
            message += f"\nCause: {cause}"

        super().__init__(message)


__all__ = ["MessageParseError", "RecordingError", "ResultFault", "TcProgressError"]
