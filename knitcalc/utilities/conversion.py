"""
Unit conversion between physical dimensions and stitch/row counts.

All physical dimensions are in centimetres unless otherwise noted.
All functions are pure: no side effects, no state.
"""

from __future__ import annotations

import math

from .types import Gauge

CM_PER_INCH: float = 2.54


def inch_to_cm(inches: float) -> float:
    """Convert inches to centimetres."""
    return inches * CM_PER_INCH


def cm_to_inch(cm: float) -> float:
    """Convert centimetres to inches."""
    return cm / CM_PER_INCH


def to_cm(value: float, unit: str) -> float:
    """Convert *value* expressed in *unit* ("cm" or "inch") to centimetres.

    Raises:
        ValueError: If the unit is not recognised.
    """
    match unit:
        case "cm":
            return float(value)
        case "inch":
            return inch_to_cm(value)
        case _:
            raise ValueError(f"Unknown length unit: {unit!r}")


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, resolving .5 away from zero.

    Python's built-in round() uses banker's rounding, which would turn
    104.5 stitches into 104. Stitch counts round 2.5 to 3 and -2.5 to -3.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def physical_to_stitch_count(dimension_cm: float, gauge: Gauge) -> float:
    """Convert a physical dimension (cm) to a raw (non-integer) stitch count."""
    return dimension_cm * gauge.stitches_per_cm


def physical_to_row_count(dimension_cm: float, gauge: Gauge) -> float:
    """Convert a physical dimension (cm) to a raw (non-integer) row count."""
    return dimension_cm * gauge.rows_per_cm


def stitch_count_to_physical(count: float, gauge: Gauge) -> float:
    """Convert a stitch count to a physical dimension in cm."""
    return count / gauge.stitches_per_cm


def row_count_to_physical(count: float, gauge: Gauge) -> float:
    """Convert a row count to a physical dimension in cm."""
    return count / gauge.rows_per_cm


def stitches_for(dimension_cm: float, gauge: Gauge) -> int:
    """Integer stitch count for a width, rounded half away from zero."""
    return round_half_away_from_zero(physical_to_stitch_count(dimension_cm, gauge))


def rows_for(dimension_cm: float, gauge: Gauge) -> int:
    """Integer row count for a depth, rounded half away from zero.

    This is the row-domain counterpart to stitches_for. Used wherever a
    calculator needs available_rows for the shaping generator.
    """
    return round_half_away_from_zero(physical_to_row_count(dimension_cm, gauge))


def round_to_multiple(count: int, multiple: int) -> int:
    """Round *count* to the nearest multiple of *multiple* (half away from zero).

    Raises:
        ValueError: If multiple < 1.
    """
    if multiple < 1:
        raise ValueError(f"multiple must be >= 1, got {multiple}")
    return round_half_away_from_zero(count / multiple) * multiple


def match_parity(count: int, reference: int) -> int:
    """Return *count* nudged up by one if its parity differs from *reference*.

    Symmetric shaping changes two stitches at a time, so the start and end
    counts of a shaped section must share parity.
    """
    return count if (count - reference) % 2 == 0 else count + 1
