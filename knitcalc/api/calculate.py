"""
Public pattern calculation API.

calculate_pattern() runs a snapshot through a shared PatternCalculationEngine
built over the module reference data. Callers that need alternate reference
tables or calculators should construct their own engine instead.
"""

from __future__ import annotations

from knitcalc.engine import CalculationOptions, PatternCalculationEngine
from knitcalc.schemas.result import CalculatedPatternDetails
from knitcalc.schemas.snapshot import PatternDefinitionSnapshot

_ENGINE: PatternCalculationEngine | None = None


def default_engine() -> PatternCalculationEngine:
    """Return the shared engine, creating it on first use."""
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = PatternCalculationEngine()
    return _ENGINE


def calculate_pattern(
    snapshot: PatternDefinitionSnapshot,
    options: CalculationOptions | None = None,
    previous: PatternDefinitionSnapshot | None = None,
) -> CalculatedPatternDetails:
    """
    Calculate stitch counts, row counts and shaping for a pattern definition.

    Parameters
    ----------
    snapshot:
        The current pattern definition.
    options:
        Output switches; defaults to CalculationOptions().
    previous:
        The snapshot of the previous calculation, to recalculate only what
        its changes invalidated.

    Returns
    -------
    CalculatedPatternDetails
        Never None. Input problems are reported in ``errors`` and
        ``warnings``.

    Raises
    ------
    ConfigurationError
        If the bundled reference tables are inconsistent.
    """
    return default_engine().calculate(snapshot, options or CalculationOptions(), previous)
