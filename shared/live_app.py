"""Live application helpers for the E2E suite."""

from __future__ import annotations

import time

import requests


def is_app_reachable(url: str, timeout: int = 5) -> bool:
    """Return True when the application URL answers with a non-error status."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException:
        return False
    return response.status_code < 400


def wait_for_app_reachable(url: str, timeout: int = 15, interval: int = 1) -> None:
    """Poll the application URL until it responds or timeout."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if is_app_reachable(url, timeout=min(5, timeout)):
            return
        time.sleep(interval)
    raise RuntimeError(f"TodoMVC app at {url} not reachable after {timeout}s")
