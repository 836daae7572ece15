"""Execution health scoring for hooks.

Each invocation scores three phases once each. Points per outcome:

    config   loaded +20, missing +15, invalid +10
    gather   all ok +40, partial +20, all failed -10
    display  ok +20, degraded +10, failed 0

The total is clamped to [0, 100]. Health is self-diagnosis only; it is
written to the monitoring log and never shown inline.
"""

from __future__ import annotations

import threading
from enum import Enum

from pulse.diagnostics.models import ConfigOutcome, DisplayOutcome, GatherOutcome, Phase
from pulse.errors import HealthScoreError

CONFIG_POINTS: dict[ConfigOutcome, int] = {
    ConfigOutcome.LOADED: 20,
    ConfigOutcome.MISSING: 15,
    ConfigOutcome.INVALID: 10,
}

GATHER_POINTS: dict[GatherOutcome, int] = {
    GatherOutcome.ALL_OK: 40,
    GatherOutcome.PARTIAL: 20,
    GatherOutcome.ALL_FAILED: -10,
}

DISPLAY_POINTS: dict[DisplayOutcome, int] = {
    DisplayOutcome.OK: 20,
    DisplayOutcome.DEGRADED: 10,
    DisplayOutcome.FAILED: 0,
}

_POINTS: dict[Phase, dict] = {
    Phase.CONFIG: CONFIG_POINTS,
    Phase.GATHER: GATHER_POINTS,
    Phase.DISPLAY: DISPLAY_POINTS,
}

MIN_SCORE = 0
MAX_SCORE = 100


class HealthScore:
    """Per-invocation health accumulator.

    Each phase may be recorded exactly once; a second record for the same
    phase raises HealthScoreError and leaves the score unchanged.
    """

    def __init__(self) -> None:
        self._points: dict[Phase, int] = {}
        self._outcomes: dict[Phase, Enum] = {}
        self._lock = threading.Lock()

    def record(self, phase: Phase, outcome: Enum) -> HealthScore:
        """Record one phase outcome.

        Args:
            phase: Phase being scored
            outcome: Outcome enum matching the phase

        Returns:
            self, for chaining

        Raises:
            HealthScoreError: If the phase was already recorded or the
                outcome does not belong to the phase
        """
        table = _POINTS[phase]
        if outcome not in table:
            raise HealthScoreError(f"{outcome!r} is not an outcome of {phase.value}")
        with self._lock:
            if phase in self._points:
                raise HealthScoreError(f"Phase {phase.value} already recorded")
            self._points[phase] = table[outcome]
            self._outcomes[phase] = outcome
        return self

    def points(self, phase: Phase) -> int:
        """Points recorded for a phase (0 if not recorded)."""
        return self._points.get(phase, 0)

    def outcome(self, phase: Phase) -> Enum | None:
        return self._outcomes.get(phase)

    @property
    def config_points(self) -> int:
        return self.points(Phase.CONFIG)

    @property
    def probe_points(self) -> int:
        return self.points(Phase.GATHER)

    @property
    def display_points(self) -> int:
        return self.points(Phase.DISPLAY)

    def total(self) -> int:
        """Sum of all phases clamped to [0, 100]."""
        return max(MIN_SCORE, min(MAX_SCORE, sum(self._points.values())))

    def breakdown(self) -> dict[str, str]:
        """Phase outcomes and points as strings, for logging."""
        result = {
            phase.value: f"{outcome.value}:{self._points[phase]}"
            for phase, outcome in self._outcomes.items()
        }
        result["total"] = str(self.total())
        return result
