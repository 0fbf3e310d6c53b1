"""
Shared pytest fixtures for the TodoMVC conformance suite.

This module contains fixtures that are shared across all test modules:
configuration, logging, seeded test data and the in-memory fake app the
unit tests drive instead of a browser.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Test data factories
- Fakes instead of a real browser for fast oracle/runner tests
"""

import pytest
from faker import Faker

from config import Config, get_config
from tests.mocks.fake_todo_app import FakeTodoApp
from todo_conformance import configure_logging
from todo_conformance.runner import ConformanceRunner


# Initialize Faker for generating test data
fake = Faker()


def pytest_configure(config):
    configure_logging(Config.LOG_LEVEL)


# -----------------------------------------------------------------------------
# Configuration Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app_config() -> type[Config]:
    """
    Configuration class for the current environment.

    Selected by the TODOMVC_ENV environment variable (local, ci).
    """
    return get_config()


@pytest.fixture(scope="session")
def testing_config() -> type[Config]:
    """Configuration used for unit tests against the fake app."""
    return get_config("testing")


# -----------------------------------------------------------------------------
# Test Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def seeded_fake() -> Faker:
    """
    Faker instance with a fixed seed.

    Returns:
        Faker whose output is reproducible across runs.
    """
    seeded = Faker()
    seeded.seed_instance(1234)
    return seeded


@pytest.fixture
def todo_texts() -> list[str]:
    """Three random todo texts for tests that do not care about content."""
    return [fake.sentence(nb_words=3).rstrip(".") for _ in range(3)]


# -----------------------------------------------------------------------------
# Fake Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def fake_app(testing_config) -> FakeTodoApp:
    """
    Fresh in-memory TodoMVC app.

    The fake implements the full harness capability surface so the
    runner can be exercised without a browser.
    """
    return FakeTodoApp(base_url=testing_config.BASE_URL, storage_key=testing_config.STORAGE_KEY)


@pytest.fixture
def fake_runner(testing_config) -> ConformanceRunner:
    """Runner configured for the fake app."""
    return ConformanceRunner.from_config(testing_config)
