"""tc-progress - TeamCity progress reporting for test harness runs."""

from .harness import RunParameters, Status, TestDescription, TestResult
from .messages import escape_value, format_message, parse_message
from .reports import ConsoleReporter, Reporter, TeamCityReporter, reporter, resolve_reporter
from .sinks import BufferSink, StreamSink
from .types import RepeatMode, StatusKind


__version__ = "0.1.0"

__all__ = [
    # Harness model
    "RunParameters",
    "Status",
    "StatusKind",
    "RepeatMode",
    "TestDescription",
    "TestResult",
    # Reporters
    "Reporter",
    "TeamCityReporter",
    "ConsoleReporter",
    "reporter",
    "resolve_reporter",
    # Output
    "BufferSink",
    "StreamSink",
    "escape_value",
    "format_message",
    "parse_message",
]
