"""Harness-side data model seen by reporters."""

from .properties import get_int_property, get_property
from .result import RunParameters, Status, TestDescription, TestResult, TestResultLike


__all__ = [
    "RunParameters",
    "Status",
    "TestDescription",
    "TestResult",
    "TestResultLike",
    "get_int_property",
    "get_property",
]
