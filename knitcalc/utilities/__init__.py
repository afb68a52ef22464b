"""
Shared utilities for the knitcalc calculation engine.

Provides deterministic tools used by every component calculator: unit
conversion, rounding, and shaping schedule distribution.
"""

from .conversion import (
    CM_PER_INCH,
    cm_to_inch,
    inch_to_cm,
    match_parity,
    physical_to_row_count,
    physical_to_stitch_count,
    round_half_away_from_zero,
    round_to_multiple,
    row_count_to_physical,
    rows_for,
    stitch_count_to_physical,
    stitches_for,
    to_cm,
)
from .shaping import (
    ShapingAction,
    ShapingEvent,
    ShapingInterval,
    ShapingSchedule,
    TieBreak,
    concatenate,
    distribute,
    summarize,
    work_even,
)
from .types import Gauge

__all__ = [
    # types
    "Gauge",
    "ShapingAction",
    "ShapingEvent",
    "ShapingInterval",
    "ShapingSchedule",
    "TieBreak",
    # conversion
    "CM_PER_INCH",
    "inch_to_cm",
    "cm_to_inch",
    "to_cm",
    "physical_to_stitch_count",
    "physical_to_row_count",
    "stitch_count_to_physical",
    "row_count_to_physical",
    "stitches_for",
    "rows_for",
    # rounding
    "round_half_away_from_zero",
    "round_to_multiple",
    "match_parity",
    # shaping
    "distribute",
    "concatenate",
    "work_even",
    "summarize",
]
