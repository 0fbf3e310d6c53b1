"""
Unit tests for the Playwright harness adapter.

The Playwright ``Page`` is replaced by a MagicMock so locator wiring,
error wrapping and storage decoding can be checked without a browser.

Key SDET Concepts Demonstrated:
- Mocking a third-party API (Playwright) with MagicMock
- Mocking side effects (driver exceptions)
- Verifying mock calls
"""

import json
from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError

from tests.e2e.pages.todo_page import TodoPage
from todo_conformance.exceptions import DriverError
from todo_conformance.harness import Selector, Target


pytestmark = pytest.mark.unit

BASE_URL = "http://todomvc.test/"


@pytest.fixture
def mock_page() -> MagicMock:
    return MagicMock()


@pytest.fixture
def todo_page(mock_page) -> TodoPage:
    return TodoPage(mock_page, BASE_URL, storage_key="react-todos", timeout_ms=1000)


class TestLocate:
    """Tests for mapping harness targets onto locators."""

    def test_row_checkbox_is_scoped_to_row(self, todo_page, mock_page):
        # Act
        locator = todo_page.locate(Target(Selector.ITEM_CHECKBOX, 1))

        # Assert
        rows = mock_page.get_by_test_id.return_value
        rows.nth.assert_called_with(1)
        rows.nth.return_value.get_by_role.assert_called_with("checkbox")
        assert locator is rows.nth.return_value.get_by_role.return_value

    def test_edit_box(self, todo_page, mock_page):
        todo_page.locate(Target(Selector.ITEM_EDIT, 0))

        row = mock_page.get_by_test_id.return_value.nth.return_value
        row.get_by_role.assert_called_with("textbox", name="Edit")

    def test_delete_button(self, todo_page, mock_page):
        todo_page.locate(Target(Selector.ITEM_DESTROY, 2))

        row = mock_page.get_by_test_id.return_value.nth.return_value
        row.get_by_role.assert_called_with("button", name="Delete")

    def test_per_row_target_needs_index(self, todo_page):
        with pytest.raises(ValueError, match="needs a row index"):
            todo_page.locate(Target(Selector.ITEM_CHECKBOX))

    def test_singletons(self, todo_page, mock_page):
        assert todo_page.locate(Target(Selector.NEW_TODO)) is mock_page.get_by_placeholder.return_value
        mock_page.get_by_placeholder.assert_called_with("What needs to be done?")

        todo_page.locate(Target(Selector.TOGGLE_ALL))
        mock_page.get_by_label.assert_called_with("Mark all as complete")

    def test_filter_links_match_exact_label(self, todo_page, mock_page):
        todo_page.locate(Target(Selector.FILTER_ACTIVE))

        mock_page.get_by_role.assert_any_call("link", name="Active", exact=True)

    def test_indexed_title(self, todo_page, mock_page):
        todo_page.locate(Target(Selector.TODO_TITLE, 3))

        mock_page.get_by_test_id.assert_any_call("todo-title")
        mock_page.get_by_test_id.return_value.nth.assert_called_with(3)


class TestCapabilities:
    """Tests for the harness capabilities on top of Playwright."""

    def test_navigate_to_joins_base_url(self, todo_page, mock_page):
        todo_page.navigate_to("#/active")

        mock_page.goto.assert_called_once_with(BASE_URL + "#/active")

    def test_driver_failures_become_driver_errors(self, todo_page, mock_page):
        # Arrange
        mock_page.get_by_placeholder.return_value.click.side_effect = PlaywrightError(
            "Timeout 5000ms exceeded"
        )

        # Act / Assert
        with pytest.raises(DriverError, match="click new-todo failed"):
            todo_page.click(Target(Selector.NEW_TODO))

    def test_blur_dispatches_event(self, todo_page, mock_page):
        todo_page.dispatch_blur(Target(Selector.ITEM_EDIT, 0))

        edit_box = mock_page.get_by_test_id.return_value.nth.return_value.get_by_role.return_value
        edit_box.dispatch_event.assert_called_once_with("blur")

    def test_reads_on_missing_elements_are_falsy(self, todo_page, mock_page):
        mock_page.get_by_test_id.return_value.count.return_value = 0
        row = mock_page.get_by_test_id.return_value.nth.return_value
        row.count.return_value = 0
        row.get_by_role.return_value.count.return_value = 0

        assert todo_page.read_visible_text(Target(Selector.TODO_COUNT)) is None
        assert todo_page.read_attribute(Target(Selector.TODO_ITEM, 0), "class") is None
        assert todo_page.is_checked(Target(Selector.ITEM_CHECKBOX, 0)) is False

    def test_read_visible_text(self, todo_page, mock_page):
        counter = mock_page.get_by_test_id.return_value
        counter.count.return_value = 1
        counter.inner_text.return_value = "2 items left"

        assert todo_page.read_visible_text(Target(Selector.TODO_COUNT)) == "2 items left"

    def test_wait_until_sleeps_through_the_page(self, todo_page, mock_page):
        answers = iter([False, True])

        assert todo_page.wait_until(lambda: next(answers)) is True
        mock_page.wait_for_timeout.assert_called_once_with(100)


class TestPersistedSnapshot:
    """Tests for reading todos from localStorage."""

    def test_unset_key_is_empty(self, todo_page, mock_page):
        mock_page.evaluate.return_value = None

        assert todo_page.read_persisted_snapshot("react-todos") == []

    def test_decodes_records(self, todo_page, mock_page):
        records = [{"id": "x", "title": "feed the cat", "completed": True}]
        mock_page.evaluate.return_value = json.dumps(records)

        assert todo_page.read_persisted_snapshot("react-todos") == records
        assert mock_page.evaluate.call_args.args[1] == "react-todos"

    @pytest.mark.parametrize("raw", ["not json", '{"title": "a"}'])
    def test_invalid_payload_raises(self, todo_page, mock_page, raw):
        mock_page.evaluate.return_value = raw

        with pytest.raises(DriverError):
            todo_page.read_persisted_snapshot("react-todos")
