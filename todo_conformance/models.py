"""
Todo model for the conformance oracle.

This module defines the plain data the oracle reasons about: todo items,
the ordered todo list and the filter applied to it. Lists are immutable;
every operation returns a new list so expected states computed for earlier
actions can never be mutated by later ones.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from todo_conformance.exceptions import IndexOutOfRange


class FilterState(str, Enum):
    """Enumeration of the list filters, valued by their route names."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def route(self) -> str:
        """URL fragment the reference app uses for this filter."""
        return "#/" if self is FilterState.ALL else f"#/{self.value}"

    @property
    def label(self) -> str:
        """Link text shown in the footer."""
        return self.value.capitalize()

    def matches(self, item: "TodoItem") -> bool:
        """Return True when ``item`` is shown under this filter."""
        if self is FilterState.ACTIVE:
            return not item.completed
        if self is FilterState.COMPLETED:
            return item.completed
        return True


@dataclass(frozen=True)
class TodoItem:
    """
    A single todo entry.

    Attributes:
        text: Trimmed, non-empty title.
        completed: Whether the item is marked done.
    """

    text: str
    completed: bool = False

    def to_record(self) -> dict[str, Any]:
        """Return the ``{title, completed}`` shape the app persists."""
        return {"title": self.text, "completed": self.completed}


@dataclass(frozen=True)
class TodoList:
    """
    Ordered, position-addressed collection of todo items.

    Attributes:
        items: Items in insertion order.
    """

    items: tuple[TodoItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> TodoItem:
        return self.items[self._check_index(index)]

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self.items):
            raise IndexOutOfRange(index, len(self.items))
        return index

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def add(self, text: str) -> "TodoList":
        """
        Append a new active item.

        Args:
            text: Raw text typed by the user; it is trimmed first.

        Returns:
            The new list, or this list unchanged when the text is blank.
        """
        title = text.strip()
        if not title:
            return self
        return TodoList(self.items + (TodoItem(title),))

    def toggle(self, index: int) -> "TodoList":
        """Flip the completion flag of the item at ``index``."""
        self._check_index(index)
        item = self.items[index]
        return self._replace_at(index, replace(item, completed=not item.completed))

    def toggle_all(self, value: bool) -> "TodoList":
        """Set every item's completion flag to ``value``."""
        return TodoList(tuple(replace(item, completed=value) for item in self.items))

    def edit(self, index: int, text: str) -> "TodoList":
        """
        Commit an edit to the item at ``index``.

        Blank text (after trimming) deletes the item instead, shifting later
        items down by one. The completion flag is kept on a normal edit.
        """
        self._check_index(index)
        title = text.strip()
        if not title:
            return self.destroy(index)
        return self._replace_at(index, replace(self.items[index], text=title))

    def destroy(self, index: int) -> "TodoList":
        """Remove the item at ``index``."""
        self._check_index(index)
        return TodoList(self.items[:index] + self.items[index + 1:])

    def clear_completed(self) -> "TodoList":
        """Remove every completed item, keeping the order of the rest."""
        return TodoList(tuple(item for item in self.items if not item.completed))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def visible(self, filter_state: FilterState) -> list[TodoItem]:
        """Return the items shown under ``filter_state``, in order."""
        return [item for item in self.items if filter_state.matches(item)]

    def visible_positions(self, filter_state: FilterState) -> list[int]:
        """Return the model positions of the items shown under ``filter_state``."""
        return [i for i, item in enumerate(self.items) if filter_state.matches(item)]

    @property
    def active_count(self) -> int:
        return sum(1 for item in self.items if not item.completed)

    @property
    def completed_count(self) -> int:
        return len(self.items) - self.active_count

    def to_records(self) -> list[dict[str, Any]]:
        """Return the list in its persisted ``[{title, completed}]`` form."""
        return [item.to_record() for item in self.items]

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> "TodoList":
        """Build a list from persisted records, ignoring extra keys such as ``id``."""
        return cls(
            tuple(
                TodoItem(str(record["title"]), bool(record.get("completed", False)))
                for record in records
            )
        )

    def _replace_at(self, index: int, item: TodoItem) -> "TodoList":
        return TodoList(self.items[:index] + (item,) + self.items[index + 1:])
