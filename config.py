"""
Suite configuration module.

This module defines configuration classes for the environments the
conformance suite runs in (local workstation, CI, unit testing).
Configuration values are loaded from environment variables with
sensible defaults.
"""

import os
from pathlib import Path

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Base configuration with default settings."""

    BASE_URL: str = os.environ.get(
        "TODOMVC_BASE_URL", "https://demo.playwright.dev/todomvc"
    )

    # localStorage key the reference React app serialises its todos under
    STORAGE_KEY: str = os.environ.get("TODOMVC_STORAGE_KEY", "react-todos")

    STABILIZATION_TIMEOUT_MS: int = int(
        os.environ.get("TODOMVC_STABILIZATION_TIMEOUT_MS", "5000")
    )
    # Fixed backoff; the last interval repeats until the timeout elapses.
    POLL_INTERVALS_MS: tuple[int, ...] = (100, 250, 500, 1000)

    MAX_WORKERS: int = int(os.environ.get("TODOMVC_MAX_WORKERS", "1"))
    LOG_LEVEL: str = os.environ.get("TODOMVC_LOG_LEVEL", "INFO")

    REACHABILITY_TIMEOUT_S: int = 15
    SCENARIO_DIR: Path = BASE_DIR / "scenarios"
    SCREENSHOT_DIR: str = "test-results/screenshots"


class LocalConfig(Config):
    """Local workstation configuration."""


class CIConfig(Config):
    """CI configuration with more patience for shared runners."""

    STABILIZATION_TIMEOUT_MS: int = int(
        os.environ.get("TODOMVC_STABILIZATION_TIMEOUT_MS", "10000")
    )
    REACHABILITY_TIMEOUT_S: int = 60


class TestingConfig(Config):
    """Configuration for unit tests run against the in-memory fake app."""

    BASE_URL: str = "http://todomvc.test/"
    STABILIZATION_TIMEOUT_MS: int = 2000


# Configuration mapping for easy access
config = {
    "local": LocalConfig,
    "ci": CIConfig,
    "testing": TestingConfig,
    "default": LocalConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (local, ci, testing).
             If None, uses TODOMVC_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("TODOMVC_ENV", "local")
    return config.get(env, config["default"])
