"""
TodoMVC conformance oracle.

A browser-independent model of how a TodoMVC application must react to
user actions, plus a runner that checks a live application against it
through a harness adapter.

Usage:
    from todo_conformance import Add, ConformanceRunner, Scenario, ToggleOne

    runner = ConformanceRunner(base_url, storage_key="react-todos")
    result = runner.run(Scenario("toggle", [Add("feed the cat"), ToggleOne(0)]), adapter)
    result.raise_for_status()
"""

from __future__ import annotations

import logging

from todo_conformance.actions import (
    Action,
    Add,
    CancelEdit,
    ClearCompleted,
    Destroy,
    Edit,
    EditWithBlurCommit,
    Reload,
    SetFilter,
    ToggleAll,
    ToggleOne,
)
from todo_conformance.exceptions import (
    AssertionMismatch,
    ConformanceError,
    DriverError,
    IndexOutOfRange,
    ScenarioFailed,
    ScenarioFileError,
    StabilizationTimeout,
)
from todo_conformance.harness import HarnessAdapter, Selector, Target
from todo_conformance.models import FilterState, TodoItem, TodoList
from todo_conformance.oracle import Oracle, OracleState, Projections, pluralize
from todo_conformance.runner import (
    ConformanceRunner,
    FailureKind,
    Scenario,
    ScenarioResult,
    ScenarioStatus,
)
from todo_conformance.scenarios import load_scenarios

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging the way the suite expects it."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


__all__ = [
    # Model
    "FilterState",
    "TodoItem",
    "TodoList",
    # Actions
    "Action",
    "Add",
    "CancelEdit",
    "ClearCompleted",
    "Destroy",
    "Edit",
    "EditWithBlurCommit",
    "Reload",
    "SetFilter",
    "ToggleAll",
    "ToggleOne",
    # Oracle
    "Oracle",
    "OracleState",
    "Projections",
    "pluralize",
    # Harness and runner
    "HarnessAdapter",
    "Selector",
    "Target",
    "ConformanceRunner",
    "FailureKind",
    "Scenario",
    "ScenarioResult",
    "ScenarioStatus",
    "load_scenarios",
    # Errors
    "AssertionMismatch",
    "ConformanceError",
    "DriverError",
    "IndexOutOfRange",
    "ScenarioFailed",
    "ScenarioFileError",
    "StabilizationTimeout",
    "configure_logging",
]
