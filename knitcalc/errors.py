"""
Exception types shared across the calculation engine.

Input problems never raise: they are reported in ValidationReport and
CalculatedPatternDetails. Only broken reference configuration crosses the
engine boundary as an exception.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when reference tables are malformed or internally inconsistent.

    Examples are a cycle in the component dependency graph or a garment type
    with no entry in the compatibility tables. These are programming or
    deployment errors, not user input errors.
    """


class ShapingError(ValueError):
    """Raised by the shaping generator when a stitch change cannot be distributed."""
