"""
Per-quantity recalculation state machine.

Each derived quantity moves stale -> recalculating -> fresh within a single
calculation pass. A quantity only becomes fresh once its calculator has
succeeded; a failed calculation returns it to stale.
"""

from __future__ import annotations

from collections.abc import Iterable

from knitcalc.schemas.result import DerivedState


class DerivedStateTracker:
    """Tracks the state of every applicable component during one pass."""

    def __init__(self, components: Iterable[str], stale: Iterable[str]) -> None:
        stale_set = set(stale)
        self._states: dict[str, DerivedState] = {
            name: DerivedState.STALE if name in stale_set else DerivedState.FRESH
            for name in components
        }

    def state(self, name: str) -> DerivedState:
        return self._states[name]

    def is_stale(self, name: str) -> bool:
        return self._states.get(name) == DerivedState.STALE

    def begin(self, name: str) -> None:
        """stale -> recalculating."""
        self._transition(name, DerivedState.STALE, DerivedState.RECALCULATING)

    def complete(self, name: str) -> None:
        """recalculating -> fresh."""
        self._transition(name, DerivedState.RECALCULATING, DerivedState.FRESH)

    def fail(self, name: str) -> None:
        """recalculating -> stale."""
        self._transition(name, DerivedState.RECALCULATING, DerivedState.STALE)

    def states(self) -> dict[str, DerivedState]:
        return dict(self._states)

    def _transition(self, name: str, expected: DerivedState, target: DerivedState) -> None:
        current = self._states.get(name)
        if current != expected:
            raise ValueError(
                f"Component {name!r} cannot move to {target.value}: "
                f"state is {current.value if current else 'unknown'}, expected {expected.value}"
            )
        self._states[name] = target
