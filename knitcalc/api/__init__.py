"""api — module-level entry points over a shared default engine."""

from knitcalc.api.calculate import calculate_pattern, default_engine
from knitcalc.api.validate import validate_pattern

__all__ = ["calculate_pattern", "default_engine", "validate_pattern"]
