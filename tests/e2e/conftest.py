"""Playwright fixtures for the TodoMVC E2E tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from playwright.sync_api import Browser, BrowserContext, Page
from playwright.sync_api import Error as PlaywrightError

from config import Config
from shared.live_app import wait_for_app_reachable
from tests.e2e.pages.todo_page import TodoPage
from todo_conformance.runner import ConformanceRunner


@pytest.fixture(scope="session")
def live_app(app_config: type[Config]) -> str:
    """
    Return the URL of a reachable TodoMVC app.

    Uses TODOMVC_BASE_URL when set, otherwise the public demo. Skips the
    E2E suite when the app cannot be reached.
    """
    try:
        wait_for_app_reachable(app_config.BASE_URL, timeout=app_config.REACHABILITY_TIMEOUT_S)
    except RuntimeError as exc:
        pytest.skip(f"{exc}; set TODOMVC_BASE_URL to run E2E tests")
    return app_config.BASE_URL


@pytest.fixture(scope="session")
def browser_context_args():
    return {
        "viewport": {"width": 1280, "height": 720},
        "ignore_https_errors": True,
    }


@pytest.fixture(scope="function")
def context(
    browser: Browser, browser_context_args: dict
) -> Generator[BrowserContext, None, None]:
    # A fresh context means fresh localStorage, i.e. an empty todo list.
    context = browser.new_context(**browser_context_args)
    yield context
    context.close()


@pytest.fixture(scope="function")
def page(context: BrowserContext) -> Generator[Page, None, None]:
    page = context.new_page()
    yield page
    page.close()


@pytest.fixture
def harness(page: Page, live_app: str, app_config: type[Config]) -> TodoPage:
    """TodoPage that has not navigated yet; the runner drives navigation."""
    return TodoPage(
        page,
        live_app,
        storage_key=app_config.STORAGE_KEY,
        timeout_ms=app_config.STABILIZATION_TIMEOUT_MS,
        poll_intervals_ms=app_config.POLL_INTERVALS_MS,
    )


@pytest.fixture
def todo_page(harness: TodoPage) -> TodoPage:
    """TodoPage opened on the app with an empty list."""
    return harness.goto()


@pytest.fixture
def runner(live_app: str, app_config: type[Config]) -> ConformanceRunner:
    return ConformanceRunner(
        base_url=live_app,
        storage_key=app_config.STORAGE_KEY,
        timeout_ms=app_config.STABILIZATION_TIMEOUT_MS,
        max_workers=app_config.MAX_WORKERS,
    )


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Save a screenshot of the TodoMVC page when a browser test fails."""
    outcome = yield
    report = outcome.get_result()
    if report.when != "call" or not report.failed:
        return

    todo_page = item.funcargs.get("harness") or item.funcargs.get("todo_page")
    if todo_page is None:
        return
    name = item.name.replace("/", "_").replace("::", "_")
    try:
        path = todo_page.take_screenshot(name, Config.SCREENSHOT_DIR)
    except PlaywrightError as exc:
        print(f"\nFailed to capture screenshot: {exc}")
    else:
        print(f"\nScreenshot saved: {path}")
