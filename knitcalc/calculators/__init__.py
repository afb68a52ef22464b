"""calculators — Component Calculator public API."""

from __future__ import annotations

from knitcalc.reference import ReferenceData

from .accessories import CrownCalculator, ScarfCalculator, ShawlCalculator
from .armhole import ArmholeCalculator
from .base import BaseCalculator, ComponentCalculator, ComponentFailure, ComponentOutcome
from .body import BodyCalculator
from .neckline import NecklineCalculator
from .sleeve import SleeveCalculator
from .yoke import YokeCalculator

_CALCULATOR_TYPES: tuple[type[BaseCalculator], ...] = (
    BodyCalculator,
    ArmholeCalculator,
    SleeveCalculator,
    NecklineCalculator,
    YokeCalculator,
    CrownCalculator,
    ScarfCalculator,
    ShawlCalculator,
)


def default_calculators(reference: ReferenceData | None = None) -> dict[str, ComponentCalculator]:
    """One calculator per component name, sharing *reference*."""
    return {cls.name: cls(reference) for cls in _CALCULATOR_TYPES}


__all__ = [
    "ArmholeCalculator",
    "BaseCalculator",
    "BodyCalculator",
    "ComponentCalculator",
    "ComponentFailure",
    "ComponentOutcome",
    "CrownCalculator",
    "NecklineCalculator",
    "ScarfCalculator",
    "ShawlCalculator",
    "SleeveCalculator",
    "YokeCalculator",
    "default_calculators",
]
