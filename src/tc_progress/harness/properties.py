"""Typed accessors for harness result properties.

Harness properties are free-form strings that may be missing, empty,
malformed, or whose lookup may fault. These accessors turn each of those
cases into an explicit caller-supplied default.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, TypeVar, overload

from tc_progress.errors import ResultFault

if TYPE_CHECKING:
    from tc_progress.harness.result import TestResultLike


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Faults a result object may raise from a property lookup
LOOKUP_FAULTS: tuple[type[Exception], ...] = (ResultFault, LookupError)

# Decimal integers as the harness writes them: optional sign, ASCII digits, 32-bit range
_INTEGER = re.compile(r"[-+]?[0-9]{1,10}")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


@overload
def get_property(result: TestResultLike, name: str, default: str) -> str: ...


@overload
def get_property(result: TestResultLike, name: str, default: None = None) -> str | None: ...


def get_property(result: TestResultLike, name: str, default: str | None = None) -> str | None:
    """Return property ``name``, or ``default`` when missing, empty or faulting."""
    try:
        value = result.get_property(name)
    except LOOKUP_FAULTS as exc:
        logger.debug("Property %r lookup faulted, using default: %s", name, exc)
        return default
    if value is None or value == "":
        return default
    return value


def get_int_property(result: TestResultLike, name: str, default: T) -> int | T:
    """Return property ``name`` as an int, or ``default`` when unusable."""
    value = get_property(result, name)
    if value is None:
        return default
    if _INTEGER.fullmatch(value) is None or not _INT_MIN <= int(value) <= _INT_MAX:
        logger.debug("Property %r is not an integer: %r", name, value)
        return default
    return int(value)


__all__ = ["LOOKUP_FAULTS", "get_int_property", "get_property"]
