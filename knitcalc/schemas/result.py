"""
Output schemas: validation report, per-component results and the aggregate
CalculatedPatternDetails.

Components that could not be calculated are absent from
CalculatedPatternDetails.components; they are never present with zeroed
numbers.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from knitcalc.utilities.shaping import ShapingSchedule


class DerivedState(str, Enum):
    """Lifecycle of a derived quantity within one calculation pass."""

    STALE = "stale"
    RECALCULATING = "recalculating"
    FRESH = "fresh"


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating a snapshot.

    Attributes:
        is_valid: False when any blocking error or missing required field exists.
        errors: Blocking problems; calculation does not proceed.
        warnings: Advisory messages, including defaults that were applied.
        missing_data: Names of required measurements that were not supplied.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    missing_data: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComponentResult:
    """Numbers for one garment component.

    ``stitch_count`` is the component's target width in stitches (the bust
    for a body, the underarm for a sleeve). ``cast_on_count`` is where the
    shaping schedule starts and ``final_stitch_count`` where it ends.
    ``details`` holds component-specific integers such as bind-off counts or
    the row count of each shaping phase.
    """

    name: str
    stitch_count: int
    row_count: int
    cast_on_count: int
    final_stitch_count: int
    width_cm: float
    length_cm: float
    surface_area_m2: float = 0.0
    shaping: ShapingSchedule | None = None
    warnings: tuple[str, ...] = ()
    details: Mapping[str, int | float | str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    def without_shaping(self) -> ComponentResult:
        """Copy with the detailed shaping schedule dropped."""
        return dataclasses.replace(self, shaping=None)


@dataclass(frozen=True)
class YarnEstimate:
    """Yarn needed for the calculated components.

    ``length_m`` includes the safety buffer; ``raw_length_m`` does not.
    ``mass_g`` is None when the yarn weight category is unknown.
    """

    length_m: float
    raw_length_m: float
    surface_area_m2: float
    factor_m_per_m2: float
    buffer: float
    mass_g: float | None = None
    weight_category: str | None = None


@dataclass(frozen=True)
class CalculatedPatternDetails:
    """Complete output of PatternCalculationEngine.calculate()."""

    components: dict[str, ComponentResult] = field(default_factory=dict)
    yarn_estimate: YarnEstimate | None = None
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    recalculated: tuple[str, ...] = ()
    derived_state: dict[str, DerivedState] = field(default_factory=dict)
    armhole_requires_recalculation: bool = False
    trace: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors
