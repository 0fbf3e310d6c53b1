"""
Harness adapter interface.

A harness adapter is the only place that knows how a particular
automation technology locates elements and performs input. This module
defines:

- the stable element identifiers scenarios refer to (``Selector``),
- the capability surface every adapter provides (``HarnessAdapter``),
- ``perform``: how each action is spelled in terms of those capabilities,
- ``observe``: how observed DOM/storage state is read back into values
  comparable with the oracle's ``Projections``,
- ``diff``: the field-by-field comparison of the two.

Nothing here imports a browser library; the Playwright adapter lives with
the page objects and the unit tests use an in-memory fake.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

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
from todo_conformance.models import FilterState
from todo_conformance.oracle import OracleState, Projections

logger = logging.getLogger(__name__)


class Selector(str, Enum):
    """Stable identifiers for the elements the oracle cares about."""

    NEW_TODO = "new-todo"
    TODO_ITEM = "todo-item"
    TODO_TITLE = "todo-title"
    TODO_COUNT = "todo-count"
    TOGGLE_ALL = "toggle-all"
    CLEAR_COMPLETED = "clear-completed"
    FILTER_ALL = "filter-all"
    FILTER_ACTIVE = "filter-active"
    FILTER_COMPLETED = "filter-completed"
    ITEM_EDIT = "item-edit"
    ITEM_CHECKBOX = "item-checkbox"
    ITEM_DESTROY = "item-destroy"

    @classmethod
    def for_filter(cls, filter_state: FilterState) -> "Selector":
        return cls(f"filter-{FilterState(filter_state).value}")


@dataclass(frozen=True)
class Target:
    """
    An element to act on.

    Attributes:
        selector: Which element.
        index: Row index for per-item elements; None for singletons.
    """

    selector: Selector
    index: int | None = None

    def __str__(self) -> str:
        if self.index is None:
            return self.selector.value
        return f"{self.selector.value}[{self.index}]"


class HarnessAdapter(Protocol):
    """
    Capabilities the runner consumes from an automation driver.

    Implementations raise ``DriverError`` when the underlying driver call
    fails. Read methods on elements that are not rendered return a falsy
    value (``None``, ``0`` or ``False``) instead of raising.
    """

    def navigate(self, url: str) -> None: ...

    def reload(self) -> None: ...

    def fill_text(self, target: Target, text: str) -> None: ...

    def press_key(self, target: Target, key: str) -> None: ...

    def click(self, target: Target) -> None: ...

    def double_click(self, target: Target) -> None: ...

    def hover(self, target: Target) -> None: ...

    def dispatch_blur(self, target: Target) -> None: ...

    def read_visible_text(self, target: Target) -> str | None: ...

    def read_attribute(self, target: Target, name: str) -> str | None: ...

    def count_matches(self, target: Target) -> int: ...

    def is_visible(self, target: Target) -> bool: ...

    def is_checked(self, target: Target) -> bool: ...

    def wait_until(self, predicate: Callable[[], bool], timeout_ms: int) -> bool: ...

    def read_persisted_snapshot(self, key: str) -> list[dict[str, Any]]: ...


# -----------------------------------------------------------------------------
# Action translation
# -----------------------------------------------------------------------------


def _start_edit(adapter: HarnessAdapter, index: int, text: str) -> Target:
    adapter.double_click(Target(Selector.TODO_ITEM, index))
    edit_box = Target(Selector.ITEM_EDIT, index)
    adapter.fill_text(edit_box, text)
    return edit_box


def perform(adapter: HarnessAdapter, action: Action, before: OracleState, base_url: str) -> None:
    """
    Drive ``adapter`` through the UI gestures that make up ``action``.

    Args:
        adapter: Harness to drive.
        action: The intent to perform.
        before: Oracle state before the action; used where the gesture
            depends on what is on screen (e.g. the toggle-all control).
        base_url: Application URL, used to route when the footer with the
            filter links is not rendered.
    """
    logger.debug("Performing %r", action)
    todos = before.todos

    if isinstance(action, Add):
        new_todo = Target(Selector.NEW_TODO)
        adapter.fill_text(new_todo, action.text)
        adapter.press_key(new_todo, "Enter")

    elif isinstance(action, ToggleOne):
        adapter.click(Target(Selector.ITEM_CHECKBOX, action.index))

    elif isinstance(action, ToggleAll):
        toggle_all = Target(Selector.TOGGLE_ALL)
        all_done = len(todos) > 0 and todos.active_count == 0
        # The control flips between "all done" and "none done", so reaching
        # "none done" from a mixed list takes two clicks.
        if action.value and len(todos) and not all_done:
            adapter.click(toggle_all)
        elif not action.value and all_done:
            adapter.click(toggle_all)
        elif not action.value and todos.completed_count:
            adapter.click(toggle_all)
            adapter.click(toggle_all)

    elif isinstance(action, Edit):
        adapter.press_key(_start_edit(adapter, action.index, action.text), "Enter")

    elif isinstance(action, EditWithBlurCommit):
        adapter.dispatch_blur(_start_edit(adapter, action.index, action.text))

    elif isinstance(action, CancelEdit):
        adapter.press_key(_start_edit(adapter, action.index, action.text), "Escape")

    elif isinstance(action, ClearCompleted):
        if todos.completed_count:
            adapter.click(Target(Selector.CLEAR_COMPLETED))

    elif isinstance(action, SetFilter):
        filter_state = FilterState(action.filter)
        if len(todos):
            adapter.click(Target(Selector.for_filter(filter_state)))
        else:
            adapter.navigate(base_url.split("#", 1)[0] + filter_state.route)

    elif isinstance(action, Destroy):
        adapter.hover(Target(Selector.TODO_ITEM, action.index))
        adapter.click(Target(Selector.ITEM_DESTROY, action.index))

    elif isinstance(action, Reload):
        adapter.reload()

    else:
        raise TypeError(f"Unknown action: {action!r}")


# -----------------------------------------------------------------------------
# Observation
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Observation:
    """State read back from the live application."""

    visible_titles: tuple[str, ...]
    visible_completed: tuple[bool, ...]
    counter_text: str | None
    clear_completed_visible: bool
    toggle_all_checked: bool
    selected_filter: FilterState | None
    footer_visible: bool
    persisted: tuple[tuple[str, bool], ...]


def _has_class(value: str | None, name: str) -> bool:
    return name in (value or "").split()


def read_persisted(adapter: HarnessAdapter, storage_key: str) -> tuple[tuple[str, bool], ...]:
    """Read the persisted snapshot as ``(title, completed)`` pairs."""
    records = adapter.read_persisted_snapshot(storage_key)
    return tuple((str(r.get("title")), bool(r.get("completed"))) for r in records)


def observe(adapter: HarnessAdapter, storage_key: str) -> Observation:
    """
    Read every observable projection from the application.

    Args:
        adapter: Harness to read through.
        storage_key: ``localStorage`` key holding the persisted todos.

    Returns:
        An ``Observation`` mirroring the fields of ``Projections``.
    """
    rows = adapter.count_matches(Target(Selector.TODO_ITEM))
    titles = tuple(
        (adapter.read_visible_text(Target(Selector.TODO_TITLE, i)) or "").strip()
        for i in range(rows)
    )
    completed = tuple(
        _has_class(adapter.read_attribute(Target(Selector.TODO_ITEM, i), "class"), "completed")
        for i in range(rows)
    )

    footer_visible = adapter.is_visible(Target(Selector.TODO_COUNT))
    counter = None
    selected = None
    if footer_visible:
        counter = (adapter.read_visible_text(Target(Selector.TODO_COUNT)) or "").strip()
        for filter_state in FilterState:
            css = adapter.read_attribute(Target(Selector.for_filter(filter_state)), "class")
            if _has_class(css, "selected"):
                selected = filter_state
                break

    return Observation(
        visible_titles=titles,
        visible_completed=completed,
        counter_text=counter,
        clear_completed_visible=adapter.is_visible(Target(Selector.CLEAR_COMPLETED)),
        toggle_all_checked=adapter.is_checked(Target(Selector.TOGGLE_ALL)),
        selected_filter=selected,
        footer_visible=footer_visible,
        persisted=read_persisted(adapter, storage_key),
    )


# -----------------------------------------------------------------------------
# Comparison
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Mismatch:
    """One field where the observed state differs from the expectation."""

    field: str
    expected: Any
    observed: Any
    action_index: int

    def __str__(self) -> str:
        return (
            f"[action {self.action_index}] {self.field}: "
            f"expected {self.expected!r}, observed {self.observed!r}"
        )


def diff(
    expected: Projections,
    observed: Observation,
    action_index: int,
    include_persisted: bool = True,
) -> list[Mismatch]:
    """
    Compare expected projections with an observation.

    The counter and the highlighted filter live in the footer, which the
    app does not render for an empty list, so they are only compared
    when both sides agree the footer is shown.

    Returns:
        The mismatching fields; empty when the states agree.
    """
    pairs: list[tuple[str, Any, Any]] = [
        ("visible_titles", tuple(expected.visible_titles), observed.visible_titles),
        ("visible_completed", tuple(expected.visible_completed), observed.visible_completed),
        ("footer_visible", expected.footer_visible, observed.footer_visible),
        ("clear_completed_visible", expected.clear_completed_visible, observed.clear_completed_visible),
        ("toggle_all_checked", expected.toggle_all_checked, observed.toggle_all_checked),
    ]
    if expected.footer_visible and observed.footer_visible:
        pairs.append(("counter_text", expected.counter_text, observed.counter_text))
        pairs.append(("selected_filter", expected.selected_filter, observed.selected_filter))
    if include_persisted:
        pairs.append(("persisted", expected.persisted, observed.persisted))

    return [
        Mismatch(name, want, got, action_index)
        for name, want, got in pairs
        if want != got
    ]
