"""Read-only reference tables loaded from YAML."""

from .registry import KNOWN_COMPONENTS, ReferenceData, get_reference_data
from .types import (
    BodyShapeEntry,
    ComponentEntry,
    GarmentTypeEntry,
    Limits,
    NecklineRatio,
    YarnWeightEntry,
)

__all__ = [
    "KNOWN_COMPONENTS",
    "ReferenceData",
    "get_reference_data",
    "BodyShapeEntry",
    "ComponentEntry",
    "GarmentTypeEntry",
    "Limits",
    "NecklineRatio",
    "YarnWeightEntry",
]
