"""engine — Pattern Calculation Engine public API."""

from knitcalc.engine.engine import CalculationOptions, PatternCalculationEngine

__all__ = ["CalculationOptions", "PatternCalculationEngine"]
