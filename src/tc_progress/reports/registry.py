"""Reporter lookup by registry name or import string.

The CLI and ``[tool.tc-progress]`` name reporters either by the name they were
registered under (``TeamCityReporter``) or by an import string
(``myharness.reports:JUnitXmlReporter`` or ``myharness.reports.JUnitXmlReporter``).
Every class is checked for the six harness callbacks when it is registered
or imported.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from tc_progress.reports.base import HARNESS_CALLBACKS


if TYPE_CHECKING:
    from tc_progress.reports.base import Reporter


logger = logging.getLogger(__name__)

T = TypeVar("T")

_registered: dict[str, type[Reporter]] = {}
_builtin_names: set[str] = set()


def _require_callbacks(obj: object, label: str) -> type[Reporter]:
    """Return ``obj`` as a reporter class, or raise TypeError naming what it lacks."""
    if not isinstance(obj, type):
        msg = f"{label} does not implement the Reporter interface: not a class"
        raise TypeError(msg)
    missing = [cb for cb in HARNESS_CALLBACKS if not callable(getattr(obj, cb, None))]
    if missing:
        msg = f"{label} does not implement the Reporter interface: missing {', '.join(missing)}"
        raise TypeError(msg)
    return obj  # type: ignore[return-value]


def reporter(cls: type[T] | None = None, *, name: str | None = None) -> type[T] | Any:
    """Register a reporter class so it can be named in config or on the CLI.

    Works bare or with a registry name:

        @reporter
        class JUnitXmlReporter: ...

        @reporter(name="junit")
        class JUnitXmlReporter: ...

    Raises:
        TypeError: If the class lacks one of the harness callbacks.
    """

    def decorator(cls: type[T]) -> type[T]:
        registry_name = name or cls.__name__
        _registered[registry_name] = _require_callbacks(cls, cls.__qualname__)
        logger.debug("Registered reporter %s as %r", cls.__qualname__, registry_name)
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


def register_builtin(cls: type[T]) -> type[T]:
    """Register a shipped reporter; it survives :func:`clear_reporter_registry`."""
    reporter(cls)
    _builtin_names.add(cls.__name__)
    return cls


def get_reporter_registry() -> dict[str, type[Reporter]]:
    """Snapshot of registered reporters by name."""
    return dict(_registered)


def clear_reporter_registry() -> None:
    """Forget user-registered reporters; built-ins stay."""
    for registry_name in set(_registered) - _builtin_names:
        del _registered[registry_name]


def _import_reporter_class(import_path: str) -> type[Reporter]:
    module_path, colon, class_name = import_path.rpartition(":")
    if not colon:
        module_path, _, class_name = import_path.rpartition(".")

    try:
        module = importlib.import_module(module_path)
        obj = getattr(module, class_name)
    except (ImportError, AttributeError, ValueError) as exc:
        msg = f"Unknown reporter: {import_path} ({exc})"
        raise ValueError(msg) from exc

    return _require_callbacks(obj, import_path)


def find_reporter(name: str) -> type[Reporter]:
    """Return the reporter class for a registry name or import string.

    Raises:
        ValueError: If nothing is registered or importable under ``name``.
        TypeError: If the import string names something without the harness callbacks.
    """
    if name in _registered:
        return _registered[name]
    if ":" in name or "." in name:
        return _import_reporter_class(name)
    available = ", ".join(sorted(_registered))
    msg = f"Unknown reporter: {name}. Available: {available}"
    raise ValueError(msg)


def resolve_reporter(name: str, **kwargs: Any) -> Reporter:
    """Instantiate the reporter named ``name`` with constructor ``kwargs``."""
    cls = find_reporter(name)
    logger.debug("Resolved reporter %s -> %s", name, cls.__qualname__)
    return cls(**kwargs)


__all__ = [
    "clear_reporter_registry",
    "find_reporter",
    "get_reporter_registry",
    "register_builtin",
    "reporter",
    "resolve_reporter",
]
