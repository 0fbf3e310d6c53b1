"""
Exception hierarchy for the conformance suite.

Every failure the oracle or runner can produce derives from
``ConformanceError`` so callers can catch the whole family at once.
Where a failure also has a natural built-in meaning (an index that does
not exist, a malformed scenario file, a failed assertion) the class also
inherits from that built-in.
"""

from __future__ import annotations

from typing import Any


class ConformanceError(Exception):
    """Base class for all conformance suite errors."""


class IndexOutOfRange(ConformanceError, IndexError):
    """An action referenced a todo row that does not exist."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Todo index {index} out of range for {size} item(s)")


class DriverError(ConformanceError):
    """The automation driver behind a harness adapter failed."""


class StabilizationTimeout(ConformanceError):
    """Observed state did not settle on the expected value in time."""

    def __init__(self, message: str, last_observed: Any = None):
        self.last_observed = last_observed
        super().__init__(message)


class AssertionMismatch(ConformanceError):
    """Observed state differed from the expected state after stabilizing."""

    def __init__(self, mismatches: list):
        self.mismatches = mismatches
        fields = ", ".join(m.field for m in mismatches)
        super().__init__(f"Observed state differs in: {fields}")


class ScenarioFileError(ConformanceError, ValueError):
    """A declarative scenario file could not be parsed."""


class ScenarioFailed(ConformanceError, AssertionError):
    """Raised by ``ScenarioResult.raise_for_status`` for failed scenarios."""

    def __init__(self, result: Any):
        self.result = result
        super().__init__(result.report())
