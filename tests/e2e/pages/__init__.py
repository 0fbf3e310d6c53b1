"""
Page Object Model (POM) classes for the TodoMVC E2E suite.

This package contains page objects that encapsulate locators and
interactions. ``TodoPage`` doubles as the Playwright harness adapter for
the conformance runner.
"""

from tests.e2e.pages.base_page import BasePage
from tests.e2e.pages.todo_page import TodoPage

__all__ = ["BasePage", "TodoPage"]
