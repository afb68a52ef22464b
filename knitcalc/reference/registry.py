"""
Reference data registry: loads every lookup table from YAML at startup,
validates cross-references, and exposes a read-only query API.

The registry is a module-level singleton; call get_reference_data() to obtain
it. All tables are loaded and validated once at import time. Nothing writes
to the registry after startup, so concurrent calculations can share it.

Tables:
  garment_types.yaml  — required/recommended measurements, construction sets
  body_shapes.yaml    — body shape ↔ construction method compatibility
  components.yaml     — component dependency graph and section invalidations
  yarn_weights.yaml   — consumption factors, yardage and safety buffer
  limits.yaml         — validator bounds and typical ranges
  proportions.yaml    — neckline and sleeve ratios, calculator defaults

The engine receives a ReferenceData instance at construction time. Tests
instantiate ReferenceData(data_dir) against a temporary directory to
exercise alternate tables.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

from knitcalc.errors import ConfigurationError
from knitcalc.schemas.snapshot import (
    BodyShape,
    ConstructionMethod,
    GarmentType,
    NecklineType,
    SleeveLength,
    SleeveType,
)

from .types import (
    BodyShapeEntry,
    ComponentEntry,
    GarmentTypeEntry,
    Limits,
    NecklineRatio,
    YarnWeightEntry,
)

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent / "data"

# Components every calculator set relies on; each must appear in components.yaml.
KNOWN_COMPONENTS: tuple[str, ...] = (
    "body",
    "armhole",
    "sleeve",
    "neckline",
    "yoke",
    "crown",
    "scarf",
    "shawl",
)

_REQUIRED_DEFAULTS: tuple[str, ...] = (
    "cuff_length_cm",
    "wrist_to_upper_arm_ratio",
    "armhole_depth_ease_cm",
    "shoulder_to_panel_ratio",
    "raglan_bind_off_ratio",
    "sleeve_cap_top_ratio",
    "neck_to_bust_ratio",
    "brim_length_cm",
    "hat_height_cm",
    "crown_height_fraction",
    "head_ease_percent",
    "head_ease_min_cm",
    "head_ease_max_cm",
    "shawl_start_stitches",
    "a_line_hem_ratio",
    "waist_shaping_threshold_cm",
    "armhole_depth_to_bust_ratio",
    "raglan_sleeve_top_ratio",
    "neck_center_bind_off_ratio",
)


class ReferenceData:
    """
    Read-only registry of all reference tables.

    All public dict attributes are wrapped in MappingProxyType after loading
    and are immutable for the lifetime of the instance.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_reference_data() for the module singleton.

    Raises:
        ConfigurationError: If a file is missing or malformed, or if any
            table references an undefined entry.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        # Type annotations only; actual assignment happens in _load_*
        self.garment_types: MappingProxyType[GarmentType, GarmentTypeEntry]
        self.body_shapes: MappingProxyType[BodyShape, BodyShapeEntry]
        self.components: MappingProxyType[str, ComponentEntry]
        self.invalidations: MappingProxyType[str, tuple[str, ...]]
        self.yarn_weights: MappingProxyType[str, YarnWeightEntry]
        self.default_yarn_factor: float
        self.yarn_buffer: float
        self.limits: Limits
        self.necklines: MappingProxyType[NecklineType, NecklineRatio]
        self.sleeve_lengths: MappingProxyType[SleeveLength, float]
        self.sleeve_constructions: MappingProxyType[SleeveType, tuple[ConstructionMethod, ...]]
        self.defaults: MappingProxyType[str, float]

        self._load_all()
        self._validate_cross_references()
        logger.debug(f"Loaded reference data from {data_dir}")

    # ── Queries ────────────────────────────────────────────────────────────────

    def garment(self, garment_type: GarmentType) -> GarmentTypeEntry:
        """Return the entry for *garment_type*.

        Raises:
            ConfigurationError: If the garment type has no entry.
        """
        try:
            return self.garment_types[garment_type]
        except KeyError:
            raise ConfigurationError(
                f"Garment type {garment_type.value!r} has no entry in garment_types"
            ) from None

    def is_construction_compatible(
        self, garment_type: GarmentType, method: ConstructionMethod
    ) -> bool:
        return method in self.garment(garment_type).construction_methods

    def is_body_shape_compatible(self, shape: BodyShape, method: ConstructionMethod) -> bool:
        try:
            entry = self.body_shapes[shape]
        except KeyError:
            raise ConfigurationError(
                f"Body shape {shape.value!r} has no entry in body_shapes"
            ) from None
        return method in entry.construction_methods

    def yarn_weight(self, category: str) -> YarnWeightEntry | None:
        """Return the entry for a yarn weight category, or None if unknown."""
        return self.yarn_weights.get(category)

    def default(self, key: str) -> float:
        return self.defaults[key]

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise ConfigurationError(f"Reference data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Failed to parse reference data file {path}: {exc}"
            ) from exc

    def _load_all(self) -> None:
        try:
            self._load_garment_types()
            self._load_body_shapes()
            self._load_components()
            self._load_yarn_weights()
            self._load_limits()
            self._load_proportions()
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Malformed reference data in {self._data_dir}: {exc!r}"
            ) from exc

    def _load_garment_types(self) -> None:
        data = self._load_yaml("garment_types.yaml")
        result: dict[GarmentType, GarmentTypeEntry] = {}
        for entry in data["entries"]:
            gt = GarmentType(entry["id"])
            default_method = entry.get("default_construction_method")
            default_shape = entry.get("default_body_shape")
            result[gt] = GarmentTypeEntry(
                id=gt,
                required_measurements=tuple(entry["required_measurements"]),
                recommended_measurements=tuple(entry.get("recommended_measurements", [])),
                construction_methods=tuple(
                    ConstructionMethod(m) for m in entry.get("construction_methods", [])
                ),
                default_construction_method=(
                    ConstructionMethod(default_method) if default_method else None
                ),
                default_body_shape=BodyShape(default_shape) if default_shape else None,
                crown_decrease_points=entry.get("crown_decrease_points"),
            )
        self.garment_types = MappingProxyType(result)

    def _load_body_shapes(self) -> None:
        data = self._load_yaml("body_shapes.yaml")
        result: dict[BodyShape, BodyShapeEntry] = {}
        for entry in data["entries"]:
            bs = BodyShape(entry["id"])
            result[bs] = BodyShapeEntry(
                id=bs,
                construction_methods=tuple(
                    ConstructionMethod(m) for m in entry["construction_methods"]
                ),
            )
        self.body_shapes = MappingProxyType(result)

    def _load_components(self) -> None:
        data = self._load_yaml("components.yaml")
        result: dict[str, ComponentEntry] = {}
        for entry in data["entries"]:
            result[entry["id"]] = ComponentEntry(
                id=entry["id"],
                depends_on=tuple(entry.get("depends_on", [])),
            )
        self.components = MappingProxyType(result)
        self.invalidations = MappingProxyType(
            {section: tuple(targets) for section, targets in data["invalidations"].items()}
        )

    def _load_yarn_weights(self) -> None:
        data = self._load_yaml("yarn_weights.yaml")
        result: dict[str, YarnWeightEntry] = {}
        for entry in data["entries"]:
            result[entry["id"]] = YarnWeightEntry(
                id=entry["id"],
                factor_m_per_m2=float(entry["factor_m_per_m2"]),
                meters_per_100g=float(entry["meters_per_100g"]),
            )
        self.yarn_weights = MappingProxyType(result)
        self.default_yarn_factor = float(data["default_factor_m_per_m2"])
        self.yarn_buffer = float(data["buffer"])

    def _load_limits(self) -> None:
        data = self._load_yaml("limits.yaml")
        ease = data["ease"]
        gauge = data["gauge"]
        self.limits = Limits(
            ease_percent_min=float(ease["percent_min"]),
            ease_percent_max=float(ease["percent_max"]),
            ease_absolute_min_cm=float(ease["absolute_min_cm"]),
            ease_absolute_max_cm=float(ease["absolute_max_cm"]),
            typical_ease_absolute_cm=float(ease["typical_absolute_cm"]),
            typical_ease_percent_min=float(ease["typical_percent_min"]),
            typical_ease_percent_max=float(ease["typical_percent_max"]),
            gauge_stitches_min=float(gauge["stitches_min"]),
            gauge_stitches_max=float(gauge["stitches_max"]),
            gauge_rows_min=float(gauge["rows_min"]),
            gauge_rows_max=float(gauge["rows_max"]),
            measurement_max_cm=float(data["measurement_max_cm"]),
            minimum_finished_fraction=float(data["minimum_finished_fraction"]),
        )

    def _load_proportions(self) -> None:
        data = self._load_yaml("proportions.yaml")
        necklines: dict[NecklineType, NecklineRatio] = {}
        for entry in data["necklines"]:
            nt = NecklineType(entry["id"])
            necklines[nt] = NecklineRatio(
                id=nt,
                width=float(entry["width"]),
                depth=float(entry["depth"]),
                shaped=bool(entry["shaped"]),
            )
        self.necklines = MappingProxyType(necklines)
        self.sleeve_lengths = MappingProxyType(
            {SleeveLength(k): float(v) for k, v in data["sleeve_lengths"].items()}
        )
        self.sleeve_constructions = MappingProxyType(
            {
                SleeveType(k): tuple(ConstructionMethod(m) for m in v)
                for k, v in data["sleeve_constructions"].items()
            }
        )
        self.defaults = MappingProxyType(
            {k: float(v) for k, v in data["defaults"].items()}
        )

    # ── Cross-reference validation ─────────────────────────────────────────────

    def _validate_cross_references(self) -> None:
        """
        Run at startup. Raises ConfigurationError listing all problems found
        if any table is incomplete or references an undefined entry.
        """
        errors: list[str] = []
        self._check_enum_completeness(errors)
        self._check_garment_defaults(errors)
        self._check_component_references(errors)
        self._check_defaults_present(errors)
        if errors:
            raise ConfigurationError(
                "Reference data cross-reference validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    def _check_enum_completeness(self, errors: list[str]) -> None:
        """Every member of a closed enum must have a table entry."""
        for gt in GarmentType:
            if gt not in self.garment_types:
                errors.append(f"garment type {gt.value!r}: no entry in garment_types")
        for bs in BodyShape:
            if bs not in self.body_shapes:
                errors.append(f"body shape {bs.value!r}: no entry in body_shapes")
        for nt in NecklineType:
            if nt not in self.necklines:
                errors.append(f"neckline {nt.value!r}: no entry in proportions.necklines")
        for sl in SleeveLength:
            if sl != SleeveLength.CUSTOM and sl not in self.sleeve_lengths:
                errors.append(
                    f"sleeve length {sl.value!r}: no entry in proportions.sleeve_lengths"
                )
        for st in SleeveType:
            if st not in self.sleeve_constructions:
                errors.append(
                    f"sleeve type {st.value!r}: no entry in proportions.sleeve_constructions"
                )

    def _check_garment_defaults(self, errors: list[str]) -> None:
        for gt, entry in self.garment_types.items():
            prefix = f"garment type {gt.value!r}"
            if not entry.required_measurements:
                errors.append(f"{prefix}: required_measurements is empty")
            if entry.has_construction:
                if entry.default_construction_method not in entry.construction_methods:
                    errors.append(
                        f"{prefix}: default_construction_method "
                        f"{entry.default_construction_method!r} is not in construction_methods"
                    )
                if entry.default_body_shape is None:
                    errors.append(f"{prefix}: default_body_shape is not set")
            if gt in (GarmentType.HAT, GarmentType.BEANIE) and not entry.crown_decrease_points:
                errors.append(f"{prefix}: crown_decrease_points is not set")

    def _check_component_references(self, errors: list[str]) -> None:
        for name in KNOWN_COMPONENTS:
            if name not in self.components:
                errors.append(f"component {name!r}: no entry in components")
        for name, entry in self.components.items():
            for upstream in entry.depends_on:
                if upstream not in self.components:
                    errors.append(
                        f"component {name!r}: depends_on {upstream!r} is not defined in components"
                    )
        for section, targets in self.invalidations.items():
            for target in targets:
                if target not in self.components:
                    errors.append(
                        f"invalidation {section!r}: target {target!r} is not defined in components"
                    )

    def _check_defaults_present(self, errors: list[str]) -> None:
        for key in _REQUIRED_DEFAULTS:
            if key not in self.defaults:
                errors.append(f"proportions.defaults: {key!r} is missing")


# ── Module-level singleton ─────────────────────────────────────────────────────

_REFERENCE: ReferenceData = ReferenceData()


def get_reference_data() -> ReferenceData:
    """Return the module-level reference data singleton."""
    return _REFERENCE
