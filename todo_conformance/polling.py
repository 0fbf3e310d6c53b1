"""Bounded polling with a fixed backoff schedule."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

DEFAULT_INTERVALS_MS: tuple[int, ...] = (100, 250, 500, 1000)


def poll_until(
    predicate: Callable[[], bool],
    timeout_ms: int,
    intervals_ms: Sequence[int] = DEFAULT_INTERVALS_MS,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> bool:
    """
    Evaluate ``predicate`` until it returns True or ``timeout_ms`` elapses.

    The predicate is always evaluated at least once, and once more right
    at the deadline, so a zero timeout still performs a single check.
    Waits follow ``intervals_ms``; the last interval repeats.

    Args:
        predicate: Zero-argument check; exceptions propagate.
        timeout_ms: Total time budget in milliseconds.
        intervals_ms: Backoff schedule between checks.
        sleep: Function used to wait, in seconds.
        clock: Monotonic clock in seconds.

    Returns:
        True if the predicate succeeded within the budget, False otherwise.
    """
    deadline = clock() + timeout_ms / 1000
    attempt = 0
    while True:
        if predicate():
            return True
        remaining = deadline - clock()
        if remaining <= 0:
            return False
        interval = intervals_ms[min(attempt, len(intervals_ms) - 1)] / 1000
        sleep(min(interval, remaining))
        attempt += 1
