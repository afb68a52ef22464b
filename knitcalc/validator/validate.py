"""
Input validator: completeness and plausibility checks on a snapshot.

validate() classifies every problem into one of three buckets:

  errors        — blocking; the engine returns no components
  warnings      — advisory; calculation proceeds (includes defaults applied)
  missing_data  — required measurements that were not supplied (each also
                  produces an error)

It returns a ValidationReport regardless of what it finds and only raises
ConfigurationError when the reference tables themselves are incomplete.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from knitcalc.errors import ConfigurationError
from knitcalc.normalizer import NormalizedInputs, normalize
from knitcalc.reference import GarmentTypeEntry, ReferenceData, get_reference_data
from knitcalc.schemas.result import ValidationReport
from knitcalc.schemas.section import Invalid, Set, Unset
from knitcalc.schemas.snapshot import (
    EaseKind,
    GarmentType,
    PatternDefinitionSnapshot,
    SleeveLength,
    SleeveType,
)

_GARMENTS_WITH_NECKLINE = (GarmentType.SWEATER, GarmentType.CARDIGAN, GarmentType.VEST)
_GARMENTS_WITH_SLEEVES = (GarmentType.SWEATER, GarmentType.CARDIGAN)


@dataclass
class _Findings:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    def report(self) -> ValidationReport:
        return ValidationReport(
            is_valid=not self.errors,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            missing_data=tuple(self.missing),
        )


def validate(
    snapshot: PatternDefinitionSnapshot,
    reference: ReferenceData | None = None,
) -> ValidationReport:
    """
    Validate a pattern definition snapshot.

    Parameters
    ----------
    snapshot:
        The pattern definition to check.
    reference:
        Reference tables (required sets, compatibility matrices, limits).
        Defaults to the module singleton.

    Returns
    -------
    ValidationReport
        Always returned for user input problems. ``is_valid`` is False when
        any error or missing required measurement was found.

    Raises
    ------
    ConfigurationError
        If the snapshot's garment type has no entry in the reference tables.
    """
    reference = reference or get_reference_data()
    findings = _Findings()

    normalized = normalize(snapshot, reference)
    findings.errors.extend(normalized.errors)

    match snapshot.garment_type:
        case Unset():
            findings.errors.append("garment_type: no garment type selected")
        case Invalid(reason=reason):
            findings.errors.append(f"garment_type: {reason}")
        case Set(value=garment_type):
            entry = reference.garment(garment_type)
            _check_measurements(snapshot, normalized.inputs, entry, reference, findings)
            _check_construction(snapshot, entry, reference, findings)
            _check_neckline(snapshot, garment_type, findings)
            _check_sleeves(snapshot, garment_type, normalized.inputs, reference, findings)

    _check_gauge(snapshot, normalized.inputs, reference, findings)
    _check_ease(snapshot, normalized.inputs, reference, findings)
    _check_yarn(snapshot, reference, findings)

    return findings.report()


# ── Section checks ─────────────────────────────────────────────────────────────


def _check_gauge(
    snapshot: PatternDefinitionSnapshot,
    inputs: NormalizedInputs | None,
    reference: ReferenceData,
    findings: _Findings,
) -> None:
    match snapshot.gauge:
        case Unset():
            findings.errors.append("gauge: no gauge entered")
            return
        case Invalid(reason=reason):
            findings.errors.append(f"gauge: {reason}")
            return
    if inputs is None:
        return

    limits = reference.limits
    stitches_per_10cm = inputs.gauge.stitches_per_cm * 10
    rows_per_10cm = inputs.gauge.rows_per_cm * 10
    if not limits.gauge_stitches_min <= stitches_per_10cm <= limits.gauge_stitches_max:
        findings.warnings.append(
            f"gauge: {stitches_per_10cm:.1f} stitches per 10 cm is outside the typical range "
            f"{limits.gauge_stitches_min:g}-{limits.gauge_stitches_max:g}"
        )
    if not limits.gauge_rows_min <= rows_per_10cm <= limits.gauge_rows_max:
        findings.warnings.append(
            f"gauge: {rows_per_10cm:.1f} rows per 10 cm is outside the typical range "
            f"{limits.gauge_rows_min:g}-{limits.gauge_rows_max:g}"
        )


def _check_measurements(
    snapshot: PatternDefinitionSnapshot,
    inputs: NormalizedInputs | None,
    entry: GarmentTypeEntry,
    reference: ReferenceData,
    findings: _Findings,
) -> None:
    match snapshot.measurements:
        case Invalid(reason=reason):
            findings.errors.append(f"measurements: {reason}")
            return
        case Unset():
            entered: set[str] = set()
        case Set(value=measurement_set):
            entered = set(measurement_set.values)

    values = inputs.measurements if inputs is not None else {}
    for key in entry.required_measurements:
        if key not in entered:
            findings.missing.append(key)
            findings.errors.append(
                f"measurements.{key}: required for a {entry.id.value} but not provided"
            )

    for key, value in values.items():
        if value <= 0:
            findings.errors.append(f"measurements.{key}: must be positive, got {value:g} cm")
        elif value > reference.limits.measurement_max_cm:
            findings.warnings.append(
                f"measurements.{key}: {value:g} cm is unusually large; please check"
            )

    for key in entry.recommended_measurements:
        if key not in entered:
            findings.warnings.append(
                f"measurements.{key}: not provided; a default proportion will be used"
            )


def _check_ease(
    snapshot: PatternDefinitionSnapshot,
    inputs: NormalizedInputs | None,
    reference: ReferenceData,
    findings: _Findings,
) -> None:
    match snapshot.ease:
        case Invalid(reason=reason):
            findings.errors.append(f"ease: {reason}")
            return
        case Unset():
            return
    if inputs is None:
        return

    limits = reference.limits
    for region, ease in inputs.ease.items():
        label = f"ease.{region.value}"
        match ease.kind:
            case EaseKind.PERCENT:
                if not limits.ease_percent_min <= ease.amount <= limits.ease_percent_max:
                    findings.errors.append(
                        f"{label}: {ease.amount:g}% is outside the allowed range "
                        f"[{limits.ease_percent_min:g}%, {limits.ease_percent_max:g}%]"
                    )
                elif not (
                    limits.typical_ease_percent_min
                    <= ease.amount
                    <= limits.typical_ease_percent_max
                ):
                    findings.warnings.append(f"{label}: {ease.amount:g}% is extreme ease")
            case EaseKind.ABSOLUTE:
                if not limits.ease_absolute_min_cm <= ease.amount <= limits.ease_absolute_max_cm:
                    findings.errors.append(
                        f"{label}: {ease.amount:g} cm is outside the allowed range "
                        f"[{limits.ease_absolute_min_cm:g} cm, {limits.ease_absolute_max_cm:g} cm]"
                    )
                elif abs(ease.amount) > limits.typical_ease_absolute_cm:
                    findings.warnings.append(f"{label}: {ease.amount:g} cm is extreme ease")


def _check_construction(
    snapshot: PatternDefinitionSnapshot,
    entry: GarmentTypeEntry,
    reference: ReferenceData,
    findings: _Findings,
) -> None:
    garment = entry.id.value
    method = None
    match snapshot.construction_method:
        case Invalid(reason=reason):
            findings.errors.append(f"construction_method: {reason}")
        case Unset():
            if entry.has_construction:
                method = entry.default_construction_method
                if method is None:
                    raise ConfigurationError(
                        f"Garment type {garment!r} has construction methods but no "
                        "default_construction_method"
                    )
                findings.warnings.append(
                    f"construction_method: not selected; using {method.value}"
                )
        case Set(value=selected):
            if reference.is_construction_compatible(entry.id, selected):
                method = selected
            else:
                findings.errors.append(
                    f"construction_method: {selected.value} is not compatible with a {garment}"
                )

    match snapshot.body_shape:
        case Invalid(reason=reason):
            findings.errors.append(f"body_shape: {reason}")
        case Unset():
            if entry.has_construction and entry.default_body_shape is not None:
                findings.warnings.append(
                    f"body_shape: not selected; using {entry.default_body_shape.value}"
                )
        case Set(value=shape):
            if not entry.has_construction:
                findings.warnings.append(f"body_shape: ignored for a {garment}")
            elif method is not None and not reference.is_body_shape_compatible(shape, method):
                findings.errors.append(
                    f"body_shape: {shape.value} is not compatible with {method.value} construction"
                )


def _check_neckline(
    snapshot: PatternDefinitionSnapshot,
    garment_type: GarmentType,
    findings: _Findings,
) -> None:
    match snapshot.neckline:
        case Invalid(reason=reason):
            findings.errors.append(f"neckline: {reason}")
        case Unset():
            if garment_type in _GARMENTS_WITH_NECKLINE:
                findings.warnings.append("neckline: not selected; neckline will not be calculated")
        case Set():
            if garment_type not in _GARMENTS_WITH_NECKLINE:
                findings.warnings.append(f"neckline: ignored for a {garment_type.value}")


def _check_sleeves(
    snapshot: PatternDefinitionSnapshot,
    garment_type: GarmentType,
    inputs: NormalizedInputs | None,
    reference: ReferenceData,
    findings: _Findings,
) -> None:
    match snapshot.sleeves:
        case Invalid(reason=reason):
            findings.errors.append(f"sleeves: {reason}")
            return
        case Unset():
            if garment_type in _GARMENTS_WITH_SLEEVES:
                findings.warnings.append(
                    "sleeves: not set; armhole and sleeves cannot be calculated"
                )
            return
        case Set(value=sleeves):
            pass

    if garment_type not in _GARMENTS_WITH_SLEEVES and garment_type != GarmentType.VEST:
        findings.warnings.append(f"sleeves: ignored for a {garment_type.value}")
        return
    if garment_type == GarmentType.VEST:
        if sleeves.sleeve_type != SleeveType.SLEEVELESS:
            findings.warnings.append(
                f"sleeves: a vest has no sleeves; {sleeves.sleeve_type.value} is ignored"
            )
        return
    if sleeves.sleeve_length == SleeveLength.CUSTOM and sleeves.custom_length is None:
        findings.errors.append("sleeves.custom_length: required when sleeve length is custom")

    method = inputs.construction_method if inputs is not None else None
    if method is not None and method not in reference.sleeve_constructions[sleeves.sleeve_type]:
        findings.warnings.append(
            f"sleeves: {sleeves.sleeve_type.value} sleeves are unusual with "
            f"{method.value} construction; armhole shaping follows the sleeve type"
        )


def _check_yarn(
    snapshot: PatternDefinitionSnapshot,
    reference: ReferenceData,
    findings: _Findings,
) -> None:
    match snapshot.yarn:
        case Invalid(reason=reason):
            findings.errors.append(f"yarn: {reason}")
        case Unset():
            findings.warnings.append(
                "yarn: no weight selected; yarn estimate uses the default consumption factor"
            )
        case Set(value=yarn):
            if reference.yarn_weight(yarn.weight_category) is None:
                findings.warnings.append(
                    f"yarn: unknown weight {yarn.weight_category!r}; "
                    "yarn estimate uses the default consumption factor"
                )
