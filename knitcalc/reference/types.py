"""
Reference table entry types.

Every entry is a frozen dataclass built once by the ReferenceData loader and
never modified afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

from knitcalc.schemas.snapshot import BodyShape, ConstructionMethod, GarmentType, NecklineType


@dataclass(frozen=True)
class GarmentTypeEntry:
    """Measurement requirements and construction defaults for one garment type."""

    id: GarmentType
    required_measurements: tuple[str, ...]
    recommended_measurements: tuple[str, ...]
    construction_methods: tuple[ConstructionMethod, ...]
    default_construction_method: ConstructionMethod | None = None
    default_body_shape: BodyShape | None = None
    crown_decrease_points: int | None = None

    @property
    def has_construction(self) -> bool:
        return bool(self.construction_methods)


@dataclass(frozen=True)
class BodyShapeEntry:
    id: BodyShape
    construction_methods: tuple[ConstructionMethod, ...]


@dataclass(frozen=True)
class ComponentEntry:
    """A derived quantity and the components it reads from."""

    id: str
    depends_on: tuple[str, ...]


@dataclass(frozen=True)
class YarnWeightEntry:
    id: str
    factor_m_per_m2: float
    meters_per_100g: float


@dataclass(frozen=True)
class NecklineRatio:
    """Neckline width and depth as fractions of neck circumference."""

    id: NecklineType
    width: float
    depth: float
    shaped: bool


@dataclass(frozen=True)
class Limits:
    """Validator bounds. *_min/*_max are hard errors; typical_* are warnings."""

    ease_percent_min: float
    ease_percent_max: float
    ease_absolute_min_cm: float
    ease_absolute_max_cm: float
    typical_ease_absolute_cm: float
    typical_ease_percent_min: float
    typical_ease_percent_max: float
    gauge_stitches_min: float
    gauge_stitches_max: float
    gauge_rows_min: float
    gauge_rows_max: float
    measurement_max_cm: float
    minimum_finished_fraction: float
