"""
PatternDefinitionSnapshot schema: the engine's sole input.

A snapshot is an immutable view of everything the user has entered for one
pattern. Each section is a tagged variant (see schemas.section). Lengths carry
their own unit and are normalised to centimetres before any arithmetic.

Numeric plausibility (positive gauge, ease bounds, finite values) is not
checked here: the Input Validator reports those as user-facing errors. Only
structural mistakes raise at construction.

Key types:
  Measurement           — a single length with its unit
  MeasurementSet        — sparse body measurements keyed by name
  GaugeSpec             — swatch stitches/rows over a swatch size
  EaseValue / EaseSpec  — per-region ease, absolute or percentage
  NecklineSpec          — neckline style and optional dimensions
  SleeveSpec            — sleeve type, length style and optional lengths
  YarnSpec              — yarn weight category
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType

from .section import UNSET, Section


class Unit(str, Enum):
    """Length unit for a measurement."""

    CM = "cm"
    INCH = "inch"


class GarmentType(str, Enum):
    SWEATER = "sweater"
    CARDIGAN = "cardigan"
    VEST = "vest"
    HAT = "hat"
    BEANIE = "beanie"
    SCARF = "scarf"
    SHAWL = "shawl"


class ConstructionMethod(str, Enum):
    DROP_SHOULDER = "dropShoulder"
    SET_IN_SLEEVE = "setInSleeve"
    RAGLAN = "raglan"
    RAGLAN_TOP_DOWN = "raglanTopDown"
    DOLMAN = "dolman"


class BodyShape(str, Enum):
    STRAIGHT = "straight"
    A_LINE = "aLine"
    FITTED_SHAPED_WAIST = "fittedShapedWaist"
    OVERSIZED_BOXY = "oversizedBoxy"


class NecklineType(str, Enum):
    ROUND = "round"
    V_NECK = "vNeck"
    CREW = "crew"
    SCOOP = "scoop"
    BOAT = "boat"
    SQUARE = "square"
    TURTLENECK = "turtleneck"


class SleeveType(str, Enum):
    SET_IN = "setIn"
    RAGLAN = "raglan"
    DOLMAN = "dolman"
    DROP_SHOULDER = "dropShoulder"
    SLEEVELESS = "sleeveless"


class SleeveLength(str, Enum):
    CAP = "cap"
    SHORT = "short"
    THREE_QUARTER = "threeQuarter"
    LONG = "long"
    CUSTOM = "custom"


class EaseRegion(str, Enum):
    BUST = "bust"
    WAIST = "waist"
    HIP = "hip"
    SLEEVE = "sleeve"
    HEAD = "head"


class EaseKind(str, Enum):
    ABSOLUTE = "absolute"
    PERCENT = "percent"


class YarnWeight(str, Enum):
    """Standard yarn weight categories with known consumption factors."""

    LACE = "lace"
    FINGERING = "fingering"
    DK = "dk"
    WORSTED = "worsted"
    BULKY = "bulky"
    SUPER_BULKY = "superBulky"
    JUMBO = "jumbo"


@dataclass(frozen=True)
class Measurement:
    """A single length in the unit it was entered in."""

    value: float
    unit: Unit = Unit.CM


@dataclass(frozen=True)
class MeasurementSet:
    """
    Sparse body and piece measurements keyed by name.

    Known keys include bust, waist, hip, length, armLength,
    upperArmCircumference, wristCircumference, shoulderWidth,
    neckCircumference, armholeDepth, headCircumference, hatHeight and width.
    Unknown keys are carried through untouched.
    """

    values: Mapping[str, Measurement] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @classmethod
    def from_values(cls, values: Mapping[str, float], unit: Unit = Unit.CM) -> MeasurementSet:
        """Build a set where every value shares one unit."""
        return cls({key: Measurement(value, unit) for key, value in values.items()})

    def get(self, key: str) -> Measurement | None:
        return self.values.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.values


@dataclass(frozen=True)
class GaugeSpec:
    """Stitches and rows counted over a swatch of width x height."""

    stitches: float
    rows: float
    unit: Unit = Unit.CM
    width: float = 10.0
    height: float = 10.0


@dataclass(frozen=True)
class EaseValue:
    """
    Ease for one body region.

    Absolute ease is a length added to the body measurement and must carry a
    unit. Percentage ease scales the measurement and carries no unit.
    """

    amount: float
    kind: EaseKind = EaseKind.ABSOLUTE
    unit: Unit | None = Unit.CM

    def __post_init__(self) -> None:
        if self.kind == EaseKind.ABSOLUTE and self.unit is None:
            raise ValueError("absolute ease requires a unit")
        if self.kind == EaseKind.PERCENT and self.unit is not None:
            raise ValueError("percentage ease must not carry a unit")

    @classmethod
    def absolute(cls, amount: float, unit: Unit = Unit.CM) -> EaseValue:
        return cls(amount, EaseKind.ABSOLUTE, unit)

    @classmethod
    def percent(cls, amount: float) -> EaseValue:
        return cls(amount, EaseKind.PERCENT, None)


@dataclass(frozen=True)
class EaseSpec:
    """Ease per region. One value per region, so kinds never mix within a region."""

    values: Mapping[EaseRegion, EaseValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, region: EaseRegion) -> EaseValue | None:
        return self.values.get(region)


@dataclass(frozen=True)
class NecklineSpec:
    """Neckline style; depth and width default from neckCircumference when omitted."""

    neckline_type: NecklineType
    depth: Measurement | None = None
    width: Measurement | None = None


@dataclass(frozen=True)
class SleeveSpec:
    """Sleeve type plus optional length overrides."""

    sleeve_type: SleeveType
    sleeve_length: SleeveLength = SleeveLength.LONG
    custom_length: Measurement | None = None
    cuff_length: Measurement | None = None
    armhole_depth: Measurement | None = None


@dataclass(frozen=True)
class YarnSpec:
    """Yarn used for the estimate; the category is looked up in reference data."""

    weight_category: str

    def __post_init__(self) -> None:
        if isinstance(self.weight_category, Enum):
            object.__setattr__(self, "weight_category", self.weight_category.value)


@dataclass(frozen=True)
class PatternDefinitionSnapshot:
    """
    Immutable view of a pattern definition at the moment of calculation.

    ``armhole_requires_recalculation`` is a derived flag a caller may carry
    over from a previous calculation; the engine also derives it from the
    difference between a previous and the current snapshot.
    """

    garment_type: Section[GarmentType] = UNSET
    gauge: Section[GaugeSpec] = UNSET
    measurements: Section[MeasurementSet] = UNSET
    ease: Section[EaseSpec] = UNSET
    construction_method: Section[ConstructionMethod] = UNSET
    body_shape: Section[BodyShape] = UNSET
    neckline: Section[NecklineSpec] = UNSET
    sleeves: Section[SleeveSpec] = UNSET
    yarn: Section[YarnSpec] = UNSET
    armhole_requires_recalculation: bool = False


SECTION_NAMES: tuple[str, ...] = tuple(
    f.name for f in fields(PatternDefinitionSnapshot) if f.name != "armhole_requires_recalculation"
)
