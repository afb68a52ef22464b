"""
Unit & measurement normalizer: first stage of every calculation.

Converts every length in a snapshot to centimetres and the gauge to stitches
and rows per centimetre, and resolves construction defaults from reference
data. Downstream stages never see inches.

normalize() never raises for bad user input. Non-finite numbers and
non-positive gauge values come back as error strings in NormalizationResult,
which the Input Validator folds into its report.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from knitcalc.reference import ReferenceData, get_reference_data
from knitcalc.schemas.section import Set, value_of
from knitcalc.schemas.snapshot import (
    BodyShape,
    ConstructionMethod,
    EaseKind,
    EaseRegion,
    GarmentType,
    GaugeSpec,
    Measurement,
    NecklineType,
    PatternDefinitionSnapshot,
    SleeveLength,
    SleeveType,
    Unit,
)
from knitcalc.utilities.conversion import to_cm
from knitcalc.utilities.types import Gauge


@dataclass(frozen=True)
class NormalizedEase:
    """Ease for one region: centimetres when absolute, percent otherwise."""

    kind: EaseKind
    amount: float

    def applied_to(self, base_cm: float) -> float:
        """Return the ease in centimetres for a body measurement of base_cm."""
        match self.kind:
            case EaseKind.ABSOLUTE:
                return self.amount
            case EaseKind.PERCENT:
                return base_cm * self.amount / 100.0


@dataclass(frozen=True)
class NormalizedNeckline:
    neckline_type: NecklineType
    depth_cm: float | None = None
    width_cm: float | None = None


@dataclass(frozen=True)
class NormalizedSleeves:
    sleeve_type: SleeveType
    sleeve_length: SleeveLength
    custom_length_cm: float | None = None
    cuff_length_cm: float | None = None
    armhole_depth_cm: float | None = None


@dataclass(frozen=True)
class NormalizedInputs:
    """
    Snapshot contents in centimetres, ready for the component calculators.

    construction_method and body_shape carry the garment type's defaults when
    the user left them unset; both are None for garments without a
    construction choice (hats, scarves, shawls).
    """

    garment_type: GarmentType
    gauge: Gauge
    measurements: Mapping[str, float] = field(default_factory=dict)
    ease: Mapping[EaseRegion, NormalizedEase] = field(default_factory=dict)
    construction_method: ConstructionMethod | None = None
    body_shape: BodyShape | None = None
    neckline: NormalizedNeckline | None = None
    sleeves: NormalizedSleeves | None = None
    yarn_weight: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "measurements", MappingProxyType(dict(self.measurements)))
        object.__setattr__(self, "ease", MappingProxyType(dict(self.ease)))

    def measurement(self, key: str) -> float | None:
        return self.measurements.get(key)

    def ease_cm(self, region: EaseRegion, base_cm: float) -> float:
        """Ease for *region* in centimetres; zero when no ease was entered."""
        ease = self.ease.get(region)
        return ease.applied_to(base_cm) if ease is not None else 0.0

    def finished(self, key: str, region: EaseRegion) -> float | None:
        """Body measurement plus ease, or None if the measurement is absent."""
        base = self.measurement(key)
        if base is None:
            return None
        return base + self.ease_cm(region, base)


@dataclass(frozen=True)
class NormalizationResult:
    """Normalized inputs, or None when the garment type or gauge is unusable."""

    inputs: NormalizedInputs | None
    errors: tuple[str, ...] = ()


def gauge_per_cm(spec: GaugeSpec) -> Gauge:
    """Convert a swatch count to stitches and rows per centimetre.

    Raises:
        ValueError: If any count or swatch dimension is not positive.
    """
    width_cm = to_cm(spec.width, spec.unit.value)
    height_cm = to_cm(spec.height, spec.unit.value)
    if width_cm <= 0 or height_cm <= 0:
        raise ValueError(f"swatch size must be positive, got {spec.width} x {spec.height}")
    return Gauge(stitches_per_cm=spec.stitches / width_cm, rows_per_cm=spec.rows / height_cm)


def normalize(
    snapshot: PatternDefinitionSnapshot,
    reference: ReferenceData | None = None,
) -> NormalizationResult:
    """
    Normalize a snapshot to centimetres.

    Parameters
    ----------
    snapshot:
        The pattern definition to normalize.
    reference:
        Reference tables for construction defaults. Defaults to the module
        singleton.

    Returns
    -------
    NormalizationResult
        Always returned, never raises for user input. ``inputs`` is None when
        the garment type or gauge section is not set or not usable.
    """
    reference = reference or get_reference_data()
    errors: list[str] = []

    gauge = _normalize_gauge(snapshot, errors)
    measurements = _normalize_measurements(snapshot, errors)
    ease = _normalize_ease(snapshot, errors)
    neckline = _normalize_neckline(snapshot, errors)
    sleeves = _normalize_sleeves(snapshot, errors)

    garment_type = value_of(snapshot.garment_type)
    if garment_type is None or gauge is None:
        return NormalizationResult(inputs=None, errors=tuple(errors))

    entry = reference.garment(garment_type)
    construction = value_of(snapshot.construction_method)
    body_shape = value_of(snapshot.body_shape)
    if entry.has_construction:
        construction = construction or entry.default_construction_method
        body_shape = body_shape or entry.default_body_shape

    yarn = value_of(snapshot.yarn)
    inputs = NormalizedInputs(
        garment_type=garment_type,
        gauge=gauge,
        measurements=measurements,
        ease=ease,
        construction_method=construction,
        body_shape=body_shape,
        neckline=neckline,
        sleeves=sleeves,
        yarn_weight=yarn.weight_category if yarn is not None else None,
    )
    return NormalizationResult(inputs=inputs, errors=tuple(errors))


# ── Helpers ────────────────────────────────────────────────────────────────────


def _finite_cm(label: str, measurement: Measurement | None, errors: list[str]) -> float | None:
    if measurement is None:
        return None
    if not _is_finite(measurement.value):
        errors.append(f"{label}: value must be a finite number, got {measurement.value!r}")
        return None
    return to_cm(measurement.value, measurement.unit.value)


def _is_finite(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _normalize_gauge(snapshot: PatternDefinitionSnapshot, errors: list[str]) -> Gauge | None:
    match snapshot.gauge:
        case Set(value=spec):
            for name in ("stitches", "rows", "width", "height"):
                raw = getattr(spec, name)
                if not _is_finite(raw):
                    errors.append(f"gauge.{name}: value must be a finite number, got {raw!r}")
                    return None
            try:
                return gauge_per_cm(spec)
            except ValueError as exc:
                errors.append(f"gauge: {exc}")
                return None
        case _:
            return None


def _normalize_measurements(
    snapshot: PatternDefinitionSnapshot, errors: list[str]
) -> dict[str, float]:
    result: dict[str, float] = {}
    measurements = value_of(snapshot.measurements)
    if measurements is None:
        return result
    for key, measurement in measurements.values.items():
        cm = _finite_cm(f"measurements.{key}", measurement, errors)
        if cm is not None:
            result[key] = cm
    return result


def _normalize_ease(
    snapshot: PatternDefinitionSnapshot, errors: list[str]
) -> dict[EaseRegion, NormalizedEase]:
    result: dict[EaseRegion, NormalizedEase] = {}
    ease = value_of(snapshot.ease)
    if ease is None:
        return result
    for region, value in ease.values.items():
        if not _is_finite(value.amount):
            errors.append(
                f"ease.{region.value}: value must be a finite number, got {value.amount!r}"
            )
            continue
        match value.kind:
            case EaseKind.ABSOLUTE:
                amount = to_cm(value.amount, (value.unit or Unit.CM).value)
            case EaseKind.PERCENT:
                amount = float(value.amount)
        result[region] = NormalizedEase(kind=value.kind, amount=amount)
    return result


def _normalize_neckline(
    snapshot: PatternDefinitionSnapshot, errors: list[str]
) -> NormalizedNeckline | None:
    neckline = value_of(snapshot.neckline)
    if neckline is None:
        return None
    return NormalizedNeckline(
        neckline_type=neckline.neckline_type,
        depth_cm=_finite_cm("neckline.depth", neckline.depth, errors),
        width_cm=_finite_cm("neckline.width", neckline.width, errors),
    )


def _normalize_sleeves(
    snapshot: PatternDefinitionSnapshot, errors: list[str]
) -> NormalizedSleeves | None:
    sleeves = value_of(snapshot.sleeves)
    if sleeves is None:
        return None
    return NormalizedSleeves(
        sleeve_type=sleeves.sleeve_type,
        sleeve_length=sleeves.sleeve_length,
        custom_length_cm=_finite_cm("sleeves.custom_length", sleeves.custom_length, errors),
        cuff_length_cm=_finite_cm("sleeves.cuff_length", sleeves.cuff_length, errors),
        armhole_depth_cm=_finite_cm("sleeves.armhole_depth", sleeves.armhole_depth, errors),
    )
