"""
Expected-state engine.

The oracle folds a sequence of actions over the todo model and, after
every action, derives the projections a user can observe: the visible
rows, the counter text, whether the clear-completed button and the
toggle-all checkbox are shown/checked, which filter is highlighted and
what the app should have persisted.

Projections are always recomputed from the current model, never patched
from the previous step, so an expectation can never go stale.

Key Concepts Demonstrated:
- Test oracle as a pure state machine, independent of any browser
- Immutable snapshots per step for intermediate-state assertions
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

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
from todo_conformance.exceptions import IndexOutOfRange
from todo_conformance.models import FilterState, TodoItem, TodoList

logger = logging.getLogger(__name__)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """
    Render ``count`` with the matching noun form.

    Args:
        count: Number of things.
        singular: Noun used when ``count`` is exactly one.
        plural: Noun used otherwise; defaults to ``singular + "s"``.

    Returns:
        E.g. ``"1 item"`` or ``"3 items"``.
    """
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural or singular + 's'}"


def counter_text(active_count: int) -> str:
    """Return the footer counter text, e.g. ``"2 items left"``."""
    return f"{pluralize(active_count, 'item')} left"


@dataclass(frozen=True)
class OracleState:
    """Model plus filter: everything the expected UI is derived from."""

    todos: TodoList = field(default_factory=TodoList)
    filter: FilterState = FilterState.ALL

    def model_index(self, visible_index: int) -> int:
        """
        Map a row index in the filtered view to a position in the model.

        Raises:
            IndexOutOfRange: If no row is shown at ``visible_index``.
        """
        positions = self.todos.visible_positions(self.filter)
        if not 0 <= visible_index < len(positions):
            raise IndexOutOfRange(visible_index, len(positions))
        return positions[visible_index]


@dataclass(frozen=True)
class Projections:
    """
    Expected observable state after an action.

    Attributes:
        items: Full todo list.
        visible: Rows shown under the current filter.
        counter_text: Pluralised count of active items.
        clear_completed_visible: True iff any item is completed.
        toggle_all_checked: True iff the list is non-empty and all done.
        selected_filter: Filter link that should be highlighted.
        footer_visible: True iff the list is non-empty.
        persisted: ``[{title, completed}]`` records in list order.
    """

    items: tuple[TodoItem, ...]
    visible: tuple[TodoItem, ...]
    counter_text: str
    clear_completed_visible: bool
    toggle_all_checked: bool
    selected_filter: FilterState
    footer_visible: bool
    persisted: tuple[tuple[str, bool], ...]

    @property
    def visible_titles(self) -> list[str]:
        return [item.text for item in self.visible]

    @property
    def visible_completed(self) -> list[bool]:
        return [item.completed for item in self.visible]

    def persisted_records(self) -> list[dict[str, Any]]:
        return [{"title": title, "completed": done} for title, done in self.persisted]


def project(state: OracleState) -> Projections:
    """Derive every observable projection from ``state``."""
    todos = state.todos
    return Projections(
        items=todos.items,
        visible=tuple(todos.visible(state.filter)),
        counter_text=counter_text(todos.active_count),
        clear_completed_visible=todos.completed_count > 0,
        # An empty list is never "all completed".
        toggle_all_checked=len(todos) > 0 and todos.active_count == 0,
        selected_filter=state.filter,
        footer_visible=len(todos) > 0,
        persisted=tuple((item.text, item.completed) for item in todos),
    )


def apply_action(state: OracleState, action: Action) -> OracleState:
    """
    Compute the state that follows ``action``.

    Args:
        state: State before the action.
        action: The user intent to apply.

    Returns:
        The new state; ``state`` itself is never modified.

    Raises:
        IndexOutOfRange: If the action addresses a row that is not shown.
        TypeError: If ``action`` is not part of the vocabulary.
    """
    todos = state.todos
    if isinstance(action, Add):
        return OracleState(todos.add(action.text), state.filter)
    if isinstance(action, ToggleOne):
        return OracleState(todos.toggle(state.model_index(action.index)), state.filter)
    if isinstance(action, ToggleAll):
        return OracleState(todos.toggle_all(action.value), state.filter)
    if isinstance(action, (Edit, EditWithBlurCommit)):
        index = state.model_index(action.index)
        return OracleState(todos.edit(index, action.text), state.filter)
    if isinstance(action, CancelEdit):
        # The row must exist to be double-clicked; the model is untouched.
        state.model_index(action.index)
        return state
    if isinstance(action, ClearCompleted):
        return OracleState(todos.clear_completed(), state.filter)
    if isinstance(action, SetFilter):
        return OracleState(todos, FilterState(action.filter))
    if isinstance(action, Destroy):
        return OracleState(todos.destroy(state.model_index(action.index)), state.filter)
    if isinstance(action, Reload):
        return state
    raise TypeError(f"Unknown action: {action!r}")


@dataclass(frozen=True)
class OracleStep:
    """One step of an oracle run."""

    index: int
    action: Action
    before: OracleState
    after: OracleState
    expected: Projections


class Oracle:
    """
    Sequential left fold of actions over the todo model.

    Example:
        oracle = Oracle()
        steps = list(oracle.run([Add("feed the cat"), ToggleOne(0)]))
        assert steps[-1].expected.counter_text == "0 items left"
    """

    def __init__(self, initial: OracleState | None = None):
        self.initial = initial or OracleState()

    def baseline(self) -> Projections:
        """Projections expected before any action has been applied."""
        return project(self.initial)

    def run(self, actions: Iterable[Action]) -> Iterator[OracleStep]:
        """
        Yield an ``OracleStep`` per action, in order.

        The fold is lazy so a caller can interleave each expectation with
        driving the live application.
        """
        state = self.initial
        for index, action in enumerate(actions):
            after = apply_action(state, action)
            logger.debug("Oracle step %d: %r -> %d item(s)", index, action, len(after.todos))
            yield OracleStep(index, action, state, after, project(after))
            state = after

    def final(self, actions: Iterable[Action]) -> Projections:
        """Return only the projections after the last action."""
        expected = self.baseline()
        for step in self.run(actions):
            expected = step.expected
        return expected
