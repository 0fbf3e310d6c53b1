"""
Action vocabulary.

The closed set of user intents a conformance scenario is written in.
Actions are plain immutable values: the oracle decides what each one does
to the model and the harness decides how each one is performed in a
browser. Row indices always address the list as the user currently sees
it, i.e. after the active filter is applied.
"""

from __future__ import annotations

from dataclasses import dataclass

from todo_conformance.models import FilterState


@dataclass(frozen=True)
class Add:
    """Type ``text`` into the new-todo input and press Enter."""

    text: str


@dataclass(frozen=True)
class ToggleOne:
    """Click the checkbox of the visible row at ``index``."""

    index: int


@dataclass(frozen=True)
class ToggleAll:
    """Drive the toggle-all control until every item's flag equals ``value``."""

    value: bool = True


@dataclass(frozen=True)
class Edit:
    """Double-click a row, replace its text and commit with Enter."""

    index: int
    text: str


@dataclass(frozen=True)
class EditWithBlurCommit:
    """Like ``Edit`` but commits by blurring the edit box."""

    index: int
    text: str


@dataclass(frozen=True)
class CancelEdit:
    """Start an edit, type ``text`` into the buffer, then press Escape."""

    index: int
    text: str


@dataclass(frozen=True)
class ClearCompleted:
    """Click the clear-completed button."""


@dataclass(frozen=True)
class SetFilter:
    """Switch the list to ``filter``."""

    filter: FilterState


@dataclass(frozen=True)
class Destroy:
    """Hover a row and click its delete button."""

    index: int


@dataclass(frozen=True)
class Reload:
    """Reload the page; state must come back from persisted storage."""


Action = (
    Add
    | ToggleOne
    | ToggleAll
    | Edit
    | EditWithBlurCommit
    | CancelEdit
    | ClearCompleted
    | SetFilter
    | Destroy
    | Reload
)
