"""Configuration loading for tc-progress.

Settings come from, lowest precedence first:

1. defaults on :class:`ProgressConfig`;
2. the ``[tool.tc-progress]`` table of the nearest ``pyproject.toml``;
3. ``TC_PROGRESS_*`` environment variables.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tc_progress.errors import TcProgressError
from tc_progress.reports.teamcity import (
    DEFAULT_FAILED_OUTPUT_PLACEHOLDER,
    DEFAULT_SUITE_NAME,
    TeamCityReporter,
)


logger = logging.getLogger(__name__)

TOOL_TABLE = "tc-progress"
ENV_PREFIX = "TC_PROGRESS_"


class ConfigError(TcProgressError):
    """Raised when configuration values are invalid."""


class ProgressConfig(BaseModel):
    """Resolved reporter configuration."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    suite_name: str = DEFAULT_SUITE_NAME
    reporters: list[str] = Field(default_factory=lambda: ["TeamCityReporter"])
    reporter_options: dict[str, dict[str, Any]] = Field(default_factory=dict)
    failed_output_placeholder: str = DEFAULT_FAILED_OUTPUT_PLACEHOLDER

    @field_validator("reporters", mode="before")
    @classmethod
    def _split_reporters(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @field_validator("suite_name")
    @classmethod
    def _non_empty_suite(cls, value: str) -> str:
        if not value.strip():
            msg = "suite_name must not be empty"
            raise ValueError(msg)
        return value

    def options_for(self, name: str, reporter_cls: type) -> dict[str, Any]:
        """Constructor options for the reporter configured as ``name``.

        Suite settings go to any :class:`TeamCityReporter`, however it was named;
        ``reporter_options[name]`` is merged on top.
        """
        options: dict[str, Any] = {}
        if issubclass(reporter_cls, TeamCityReporter):
            options["suite_name"] = self.suite_name
            options["failed_output_placeholder"] = self.failed_output_placeholder
        options.update(self.reporter_options.get(name, {}))
        return options


DEFAULT_CONFIG = ProgressConfig()


def find_pyproject(start: Path | None = None) -> Path | None:
    """Return the nearest ``pyproject.toml`` at or above ``start``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _read_tool_table(path: Path) -> dict[str, Any]:
    with path.open("rb") as fh:
        data = tomllib.load(fh)
    table = data.get("tool", {}).get(TOOL_TABLE, {})
    return {key.replace("-", "_"): value for key, value in table.items()}


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field_name in ("suite_name", "reporters", "failed_output_placeholder"):
        env_name = ENV_PREFIX + field_name.upper()
        if env_name in environ:
            values[field_name] = environ[env_name]
    return values


def load_config(
    start: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ProgressConfig:
    """Load configuration from ``pyproject.toml`` and the environment.

    Raises:
        ConfigError: If the pyproject table or environment hold invalid values.
    """
    values: dict[str, Any] = {}

    pyproject = find_pyproject(start)
    if pyproject is not None:
        try:
            values.update(_read_tool_table(pyproject))
        except tomllib.TOMLDecodeError as exc:
            msg = f"Cannot parse {pyproject}: {exc}"
            raise ConfigError(msg) from exc
        logger.debug("Loaded [tool.%s] from %s", TOOL_TABLE, pyproject)

    values.update(_read_env(os.environ if environ is None else environ))

    try:
        return ProgressConfig(**values)
    except ValidationError as exc:
        msg = f"Invalid tc-progress configuration: {exc}"
        raise ConfigError(msg) from exc


__all__ = ["DEFAULT_CONFIG", "ConfigError", "ProgressConfig", "find_pyproject", "load_config"]
