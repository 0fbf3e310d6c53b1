"""
Conformance runner.

Executes a scenario (a named list of actions) against a live TodoMVC
application through a harness adapter. For every action it asks the
oracle for the expected projections, performs the action, waits for the
application to persist the mutation and then compares what is on screen
with what should be there.

Per scenario the runner moves ``Idle -> Running -> Passed | Failed``.
Failures carry a ``FailureKind`` and, for value mismatches, the
field-level diff of the last observation.

Key Concepts Demonstrated:
- Oracle-driven conformance checking
- Two-phase stabilization (persisted storage first, then DOM)
- Thread-pool fan-out of independent scenarios
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from enum import Enum

from todo_conformance.actions import Action
from todo_conformance.exceptions import (
    AssertionMismatch,
    DriverError,
    IndexOutOfRange,
    ScenarioFailed,
    StabilizationTimeout,
)
from todo_conformance.harness import (
    HarnessAdapter,
    Mismatch,
    diff,
    observe,
    perform,
    read_persisted,
)
from todo_conformance.oracle import Oracle, Projections

logger = logging.getLogger(__name__)

BASELINE_INDEX = -1


class ScenarioStatus(str, Enum):
    """Lifecycle states of a scenario run."""

    IDLE = "idle"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Why a scenario failed."""

    INDEX_OUT_OF_RANGE = "index_out_of_range"
    STABILIZATION_TIMEOUT = "stabilization_timeout"
    ASSERTION_MISMATCH = "assertion_mismatch"
    DRIVER_ERROR = "driver_error"
    ABORTED = "aborted"


@dataclass(frozen=True)
class Scenario:
    """A named, ordered list of actions starting from an empty list."""

    name: str
    actions: tuple[Action, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", tuple(self.actions))


@dataclass(frozen=True)
class ScenarioFailure:
    """
    Structured description of a failed scenario.

    Attributes:
        kind: Failure category.
        action_index: Index of the failing action; -1 for the baseline.
        action: The failing action, if any.
        message: Human-readable summary.
        mismatches: Field-level diff for value mismatches and timeouts.
    """

    kind: FailureKind
    action_index: int
    action: Action | None
    message: str
    mismatches: tuple[Mismatch, ...] = ()


@dataclass
class StepRecord:
    """Outcome of a single verified action."""

    index: int
    action: Action | None
    expected: Projections
    duration_ms: float = 0


@dataclass
class ScenarioResult:
    """Result of running one scenario."""

    scenario: Scenario
    status: ScenarioStatus = ScenarioStatus.IDLE
    failure: ScenarioFailure | None = None
    steps: list[StepRecord] = field(default_factory=list)
    duration_ms: float = 0

    @property
    def passed(self) -> bool:
        return self.status is ScenarioStatus.PASSED

    def report(self) -> str:
        """Return a multi-line summary suitable for an assertion message."""
        header = f"Scenario '{self.scenario.name}' {self.status.value}"
        if self.failure is None:
            return header
        lines = [
            header,
            f"  {self.failure.kind.value} at action {self.failure.action_index}: "
            f"{self.failure.action!r}",
            f"  {self.failure.message}",
        ]
        lines.extend(f"    {mismatch}" for mismatch in self.failure.mismatches)
        return "\n".join(lines)

    def raise_for_status(self) -> None:
        """Raise ``ScenarioFailed`` unless the scenario passed."""
        if not self.passed:
            raise ScenarioFailed(self)


class ConformanceRunner:
    """
    Run scenarios against a live application through a harness adapter.

    Attributes:
        base_url: Application URL each scenario starts from.
        storage_key: ``localStorage`` key of the persisted todos.
        timeout_ms: Budget for each stabilization phase.
        max_workers: Default number of scenarios ``run_all`` runs at once.
    """

    def __init__(
        self,
        base_url: str,
        storage_key: str = "react-todos",
        timeout_ms: int = 5000,
        max_workers: int = 1,
    ):
        self.base_url = base_url
        self.storage_key = storage_key
        self.timeout_ms = timeout_ms
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config) -> "ConformanceRunner":
        """Build a runner from a configuration class (see ``config.py``)."""
        return cls(
            base_url=config.BASE_URL,
            storage_key=config.STORAGE_KEY,
            timeout_ms=config.STABILIZATION_TIMEOUT_MS,
            max_workers=config.MAX_WORKERS,
        )

    # -------------------------------------------------------------------------
    # Single scenario
    # -------------------------------------------------------------------------

    def run(
        self,
        scenario: Scenario,
        adapter: HarnessAdapter,
        cancel_event: threading.Event | None = None,
    ) -> ScenarioResult:
        """
        Execute ``scenario`` against a fresh page driven by ``adapter``.

        Args:
            scenario: The scenario to run.
            adapter: Harness owned by this scenario for its whole run.
            cancel_event: When set, the scenario aborts before its next step.

        Returns:
            The scenario result; never raises for conformance failures.
        """
        result = ScenarioResult(scenario=scenario, status=ScenarioStatus.RUNNING)
        started = time.monotonic()
        logger.info("Running scenario '%s' (%d actions)", scenario.name, len(scenario.actions))

        try:
            self._run_steps(scenario, adapter, result, cancel_event)
        except _StepFailed as exc:
            result.status = ScenarioStatus.FAILED
            result.failure = exc.failure
        else:
            result.status = ScenarioStatus.PASSED
        finally:
            result.duration_ms = (time.monotonic() - started) * 1000

        if result.passed:
            logger.info("Scenario '%s' passed in %.0f ms", scenario.name, result.duration_ms)
        else:
            logger.warning("%s", result.report())
        return result

    def _run_steps(
        self,
        scenario: Scenario,
        adapter: HarnessAdapter,
        result: ScenarioResult,
        cancel_event: threading.Event | None,
    ) -> None:
        oracle = Oracle()

        _check_cancelled(cancel_event, BASELINE_INDEX, None)
        self._guard(BASELINE_INDEX, None, lambda: adapter.navigate(self.base_url))
        baseline = oracle.baseline()
        self._verify(adapter, baseline, BASELINE_INDEX, None)
        result.steps.append(StepRecord(BASELINE_INDEX, None, baseline))

        steps = oracle.run(scenario.actions)
        for index, action in enumerate(scenario.actions):
            _check_cancelled(cancel_event, index, action)

            step_started = time.monotonic()
            try:
                step = next(steps)
            except IndexOutOfRange as exc:
                raise _StepFailed(
                    ScenarioFailure(FailureKind.INDEX_OUT_OF_RANGE, index, action, str(exc))
                ) from exc

            logger.debug("Action %d of '%s': %r", index, scenario.name, action)
            self._guard(
                index,
                action,
                lambda: perform(adapter, action, step.before, self.base_url),
            )
            self._verify(adapter, step.expected, index, action)
            result.steps.append(
                StepRecord(index, action, step.expected, (time.monotonic() - step_started) * 1000)
            )

    # -------------------------------------------------------------------------
    # Stabilization and comparison
    # -------------------------------------------------------------------------

    def _verify(
        self,
        adapter: HarnessAdapter,
        expected: Projections,
        index: int,
        action: Action | None,
    ) -> None:
        try:
            self._guard(index, action, lambda: self.stabilize(adapter, expected, index))
        except StabilizationTimeout as exc:
            raise _StepFailed(
                ScenarioFailure(
                    FailureKind.STABILIZATION_TIMEOUT,
                    index,
                    action,
                    str(exc),
                    tuple(exc.last_observed or ()),
                )
            ) from exc
        except AssertionMismatch as exc:
            raise _StepFailed(
                ScenarioFailure(
                    FailureKind.ASSERTION_MISMATCH,
                    index,
                    action,
                    str(exc),
                    tuple(exc.mismatches),
                )
            ) from exc

    def stabilize(self, adapter: HarnessAdapter, expected: Projections, index: int) -> None:
        """
        Wait for the application to settle on ``expected``.

        Phase one polls the persisted snapshot until it matches, which
        confirms the app committed the mutation. Phase two polls the DOM
        projections until they match.

        Raises:
            StabilizationTimeout: The persisted snapshot never matched.
            AssertionMismatch: Storage matched but the DOM did not.
        """
        last_persisted: list = [None]

        def persisted_matches() -> bool:
            last_persisted[0] = read_persisted(adapter, self.storage_key)
            return last_persisted[0] == expected.persisted

        if not adapter.wait_until(persisted_matches, self.timeout_ms):
            raise StabilizationTimeout(
                f"Persisted snapshot '{self.storage_key}' did not settle "
                f"within {self.timeout_ms} ms",
                [Mismatch("persisted", expected.persisted, last_persisted[0], index)],
            )

        last_diff: list[list[Mismatch]] = [[]]

        def dom_matches() -> bool:
            last_diff[0] = diff(expected, observe(adapter, self.storage_key), index)
            return not last_diff[0]

        if not adapter.wait_until(dom_matches, self.timeout_ms):
            raise AssertionMismatch(last_diff[0])

    @staticmethod
    def _guard(index: int, action: Action | None, call: Callable[[], None]) -> None:
        try:
            call()
        except DriverError as exc:
            raise _StepFailed(
                ScenarioFailure(FailureKind.DRIVER_ERROR, index, action, str(exc))
            ) from exc

    # -------------------------------------------------------------------------
    # Many scenarios
    # -------------------------------------------------------------------------

    def run_all(
        self,
        scenarios: Sequence[Scenario],
        harness_factory: Callable[[], AbstractContextManager[HarnessAdapter]],
        max_workers: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[ScenarioResult]:
        """
        Run independent scenarios, optionally in parallel.

        Each scenario gets its own adapter from ``harness_factory``, which
        must return a context manager; the adapter is released when the
        scenario finishes. Adapters are never shared between scenarios.

        Args:
            scenarios: Scenarios to run.
            harness_factory: Creates one adapter context per scenario. A
                ``DriverError`` while acquiring or releasing it fails only
                that scenario.
            max_workers: Number of scenarios to run at once; defaults to
                ``self.max_workers``.
            cancel_event: Shared abort signal, checked before the baseline and
                between actions.

        Returns:
            Results in the same order as ``scenarios``.
        """

        def run_one(scenario: Scenario) -> ScenarioResult:
            try:
                with harness_factory() as adapter:
                    return self.run(scenario, adapter, cancel_event)
            except DriverError as exc:
                failure = ScenarioFailure(
                    FailureKind.DRIVER_ERROR, BASELINE_INDEX, None, f"Harness unavailable: {exc}"
                )
                result = ScenarioResult(scenario, ScenarioStatus.FAILED, failure)
                logger.warning("%s", result.report())
                return result

        if max_workers is None:
            max_workers = self.max_workers
        if max_workers <= 1:
            return [run_one(scenario) for scenario in scenarios]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(run_one, scenarios))


class _StepFailed(Exception):
    """Internal signal carrying a ``ScenarioFailure`` out of the step loop."""

    def __init__(self, failure: ScenarioFailure):
        self.failure = failure
        super().__init__(failure.message)


def _check_cancelled(
    cancel_event: threading.Event | None, index: int, action: Action | None
) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise _StepFailed(ScenarioFailure(FailureKind.ABORTED, index, action, "Scenario cancelled"))
