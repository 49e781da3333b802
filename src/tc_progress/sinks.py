"""Line sinks that reporters write to.

Reporters never print directly. They write whole lines to a sink so the
output stream can be swapped (stdout, a file, an in-memory buffer in tests).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Protocol, TextIO


class Sink(Protocol):
    """Append-only destination for reporter output lines."""

    def write_line(self, line: str) -> None:
        """Write ``line`` followed by a newline."""
        ...


class StreamSink:
    """Writes lines to a text stream, flushing after each one.

    With no stream, ``sys.stdout`` is looked up on every write so that
    stream replacement (output capture) after construction is honoured.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, line: str) -> None:
        stream = self.stream
        stream.write(line + "\n")
        stream.flush()


@dataclass
class BufferSink:
    """Collects lines in memory."""

    lines: list[str] = field(default_factory=list)

    def write_line(self, line: str) -> None:
        self.lines.append(line)

    def getvalue(self) -> str:
        return "".join(line + "\n" for line in self.lines)

    def readlines(self) -> list[str]:
        """Return and clear collected lines."""
        lines = list(self.lines)
        self.lines.clear()
        return lines


__all__ = ["BufferSink", "Sink", "StreamSink"]
