"""Shared types for the tc-progress reporter."""

from __future__ import annotations

from enum import Enum


class StatusKind(Enum):
    """Outcome of a single test as reported by the harness."""

    PASSED = 0
    FAILED = 1
    ERROR = 2
    NOT_RUN = 3

    @property
    def is_failure(self) -> bool:
        return self in {StatusKind.FAILED, StatusKind.ERROR}


class RepeatMode(Enum):
    """How the harness re-executes a single test."""

    ONCE = "once"
    N = "n"
    UNTIL_FAILURE = "until_failure"
    UNTIL_SUCCESS = "until_success"
    # Any value the harness sends that is not one of the above
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> RepeatMode:
        """Parse a ``repeatMode`` property value, ignoring case.

        IDE display labels ("N Times", "Until Failure", ...) are accepted too.
        Missing or empty values mean ``ONCE``.
        """
        if not value:
            return cls.ONCE
        key = value.strip().lower()
        if key in _LABELS:
            return _LABELS[key]
        for member in cls:
            if member is not cls.OTHER and member.value == key:
                return member
        return cls.OTHER

    @property
    def repeats(self) -> bool:
        return self is not RepeatMode.ONCE


_LABELS: dict[str, RepeatMode] = {
    "n times": RepeatMode.N,
    "until failure": RepeatMode.UNTIL_FAILURE,
    "until success": RepeatMode.UNTIL_SUCCESS,
}


__all__ = ["RepeatMode", "StatusKind"]
