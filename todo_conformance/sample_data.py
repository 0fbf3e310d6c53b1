"""
Test data helpers.

Canonical todo strings used throughout the suite plus small generators
for varied input. Random text comes from Faker so a failing run can be
reproduced by seeding it.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

from faker import Faker

TODO_ITEMS: tuple[str, ...] = (
    "buy some cheese",
    "feed the cat",
    "book a doctors appointment",
)

TODO_VERBS = ("Buy", "Book", "Call", "Send", "Read", "Write", "Clean")
TODO_NOUNS = ("groceries", "appointment", "friend", "email", "book", "report", "room")


def random_todo(fake: Faker | None = None) -> str:
    """
    Generate a short "<verb> <noun>" todo, e.g. ``"Call friend"``.

    Args:
        fake: Faker instance to draw from; a fresh one if omitted.
    """
    fake = fake or Faker()
    return f"{fake.random_element(TODO_VERBS)} {fake.random_element(TODO_NOUNS)}"


def random_todos(count: int, fake: Faker | None = None) -> list[str]:
    """Generate ``count`` random todos."""
    fake = fake or Faker()
    return [random_todo(fake) for _ in range(count)]


def scheduled_todo(days_offset: int = 0, today: date | None = None) -> str:
    """
    Build a todo mentioning a date relative to today.

    Args:
        days_offset: Days from today; negative for the past.
        today: Reference date, defaults to the current date.

    Returns:
        E.g. ``"Task scheduled for 2025-01-31"``.
    """
    day = (today or date.today()) + timedelta(days=days_offset)
    return f"Task scheduled for {day:%Y-%m-%d}"


def sanitize_text(text: str) -> str:
    """Trim and collapse runs of whitespace to single spaces."""
    return re.sub(r"\s+", " ", text.strip())
