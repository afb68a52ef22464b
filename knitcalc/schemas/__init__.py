"""Input and output schemas for the pattern calculation engine."""

from .result import (
    CalculatedPatternDetails,
    ComponentResult,
    DerivedState,
    ValidationReport,
    YarnEstimate,
)
from .section import UNSET, Invalid, Section, Set, Unset, value_of
from .snapshot import (
    SECTION_NAMES,
    BodyShape,
    ConstructionMethod,
    EaseKind,
    EaseRegion,
    EaseSpec,
    EaseValue,
    GarmentType,
    GaugeSpec,
    Measurement,
    MeasurementSet,
    NecklineSpec,
    NecklineType,
    PatternDefinitionSnapshot,
    SleeveLength,
    SleeveSpec,
    SleeveType,
    Unit,
    YarnSpec,
    YarnWeight,
)

__all__ = [
    # sections
    "UNSET",
    "Unset",
    "Invalid",
    "Set",
    "Section",
    "value_of",
    # snapshot
    "SECTION_NAMES",
    "PatternDefinitionSnapshot",
    "GarmentType",
    "ConstructionMethod",
    "BodyShape",
    "NecklineType",
    "SleeveType",
    "SleeveLength",
    "EaseRegion",
    "EaseKind",
    "EaseValue",
    "EaseSpec",
    "GaugeSpec",
    "Measurement",
    "MeasurementSet",
    "NecklineSpec",
    "SleeveSpec",
    "Unit",
    "YarnSpec",
    "YarnWeight",
    # results
    "ValidationReport",
    "ComponentResult",
    "YarnEstimate",
    "CalculatedPatternDetails",
    "DerivedState",
]
