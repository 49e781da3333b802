"""Reporters translating harness callbacks into progress output."""

from tc_progress.reports.base import Reporter
from tc_progress.reports.console import ConsoleReporter
from tc_progress.reports.group import ReporterGroup
from tc_progress.reports.registry import (
    find_reporter,
    get_reporter_registry,
    register_builtin,
    reporter,
    resolve_reporter,
)
from tc_progress.reports.teamcity import TeamCityReporter


register_builtin(TeamCityReporter)
register_builtin(ConsoleReporter)

__all__ = [
    "ConsoleReporter",
    "Reporter",
    "ReporterGroup",
    "TeamCityReporter",
    "find_reporter",
    "get_reporter_registry",
    "reporter",
    "resolve_reporter",
]
