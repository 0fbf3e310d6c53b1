"""
Declarative scenario files.

Scenarios can be written as YAML instead of Python so the same catalogue
can drive any harness. A file holds a ``scenarios`` list; each entry has
a ``name`` and a list of ``steps``. A step is either a bare action name
(``clear_completed``, ``reload``) or a one-key mapping::

    scenarios:
      - name: trims edited text
        steps:
          - add: buy some cheese
          - add: feed the cat
          - edit: {index: 1, text: "    buy some sausages    "}
          - filter: active
          - toggle_all: true
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

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
from todo_conformance.exceptions import ScenarioFileError
from todo_conformance.models import FilterState
from todo_conformance.runner import Scenario


def _index(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScenarioFileError(f"Expected a row index, got {value!r}")
    return value


def _text(value: Any) -> str:
    if value is None or isinstance(value, (bool, dict, list)):
        raise ScenarioFileError(f"Expected todo text, got {value!r}")
    return str(value)


def _edit_args(value: Any) -> tuple[int, str]:
    if not isinstance(value, dict) or "index" not in value or "text" not in value:
        raise ScenarioFileError(f"Expected {{index, text}}, got {value!r}")
    return _index(value["index"]), _text(value["text"])


def _filter(value: Any) -> FilterState:
    try:
        return FilterState(str(value).lower())
    except ValueError as exc:
        raise ScenarioFileError(f"Unknown filter {value!r}") from exc


def _toggle_all(value: Any) -> ToggleAll:
    if value is None:
        return ToggleAll()
    if not isinstance(value, bool):
        raise ScenarioFileError(f"toggle_all expects true/false, got {value!r}")
    return ToggleAll(value)


STEP_BUILDERS: dict[str, Callable[[Any], Action]] = {
    "add": lambda value: Add(_text(value)),
    "toggle": lambda value: ToggleOne(_index(value)),
    "toggle_all": _toggle_all,
    "edit": lambda value: Edit(*_edit_args(value)),
    "edit_blur": lambda value: EditWithBlurCommit(*_edit_args(value)),
    "cancel_edit": lambda value: CancelEdit(*_edit_args(value)),
    "clear_completed": lambda value: ClearCompleted(),
    "filter": lambda value: SetFilter(_filter(value)),
    "destroy": lambda value: Destroy(_index(value)),
    "reload": lambda value: Reload(),
}


def parse_step(step: Any) -> Action:
    """
    Convert one YAML step into an action.

    Raises:
        ScenarioFileError: If the step is not recognised.
    """
    if isinstance(step, str):
        name, value = step, None
    elif isinstance(step, dict) and len(step) == 1:
        name, value = next(iter(step.items()))
    else:
        raise ScenarioFileError(f"Malformed step: {step!r}")

    builder = STEP_BUILDERS.get(name)
    if builder is None:
        raise ScenarioFileError(f"Unknown step '{name}'")
    return builder(value)


def parse_scenarios(document: Any) -> list[Scenario]:
    """Build scenarios from an already-loaded YAML document."""
    if not isinstance(document, dict) or not isinstance(document.get("scenarios"), list):
        raise ScenarioFileError("Scenario document must contain a 'scenarios' list")

    scenarios = []
    for entry in document["scenarios"]:
        if not isinstance(entry, dict) or "name" not in entry:
            raise ScenarioFileError(f"Scenario entry needs a name: {entry!r}")
        steps = entry.get("steps") or []
        try:
            actions = [parse_step(step) for step in steps]
        except ScenarioFileError as exc:
            raise ScenarioFileError(f"Scenario '{entry['name']}': {exc}") from exc
        scenarios.append(Scenario(str(entry["name"]), actions))
    return scenarios


def load_scenarios(path: str | Path) -> list[Scenario]:
    """
    Load every scenario from a YAML file.

    Args:
        path: Path to the scenario file.

    Returns:
        Scenarios in file order.
    """
    with open(path, encoding="utf-8") as scenario_file:
        try:
            document = yaml.safe_load(scenario_file)
        except yaml.YAMLError as exc:
            raise ScenarioFileError(f"Invalid YAML in {path}: {exc}") from exc
    return parse_scenarios(document)
