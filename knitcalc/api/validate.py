"""Public snapshot validation API."""

from __future__ import annotations

from knitcalc.schemas.result import ValidationReport
from knitcalc.schemas.snapshot import PatternDefinitionSnapshot

from .calculate import default_engine


def validate_pattern(snapshot: PatternDefinitionSnapshot) -> ValidationReport:
    """
    Check a pattern definition for completeness and plausibility.

    Returns a ValidationReport without calculating anything; ``is_valid``
    tells whether calculate_pattern() would proceed past validation.
    """
    return default_engine().validate(snapshot)
