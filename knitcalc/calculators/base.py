"""
Shared machinery for component calculators.

Each calculator turns NormalizedInputs plus the results of its upstream
components into a ComponentOutcome. Calculators never raise for user input:
a missing measurement or an impossible shaping distribution becomes a
component-local error, and the component is simply absent from the final
report.

Subclasses implement ``_calculate`` and raise ComponentFailure (or let the
shaping generator's ShapingError propagate); ``calculate`` converts both into
a failed outcome.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from knitcalc.errors import ShapingError
from knitcalc.normalizer import NormalizedInputs
from knitcalc.reference import ReferenceData, get_reference_data
from knitcalc.schemas.result import ComponentResult
from knitcalc.schemas.snapshot import EaseRegion
from knitcalc.utilities.conversion import round_half_away_from_zero, stitches_for
from knitcalc.utilities.shaping import (
    ShapingSchedule,
    TieBreak,
    concatenate,
    distribute,
    work_even,
)

# Four raglan lines, one decrease either side of each.
RAGLAN_LINE_STITCHES = 8
RAGLAN_BIND_OFF_MIN = 3
RAGLAN_BIND_OFF_MAX = 6


class ComponentFailure(Exception):
    """Raised inside a calculator when the component cannot be produced."""


@dataclass(frozen=True)
class ComponentOutcome:
    """Either a result or an error message for one component, never both."""

    name: str
    result: ComponentResult | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError("ComponentOutcome needs exactly one of result or error")

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class RaglanLine:
    """
    Stitch counts shared by the body panels, sleeves and yoke of a raglan.

    Every piece binds off ``bind_off`` at each underarm and then loses one
    stitch at each raglan edge on every one of the ``decreases`` shaping
    rows, so the stitches left at the top of the two panels and two sleeves
    always add up to the yoke's neck count.
    """

    panel_stitches: int
    sleeve_stitches: int
    bind_off: int
    decreases: int

    @property
    def joined(self) -> int:
        """Stitches on the needle once panels and sleeves are joined."""
        return 2 * self.panel_stitches + 2 * self.sleeve_stitches - 8 * self.bind_off

    @property
    def panel_top(self) -> int:
        return self.panel_stitches - 2 * self.bind_off - 2 * self.decreases

    @property
    def sleeve_top(self) -> int:
        return self.sleeve_stitches - 2 * self.bind_off - 2 * self.decreases

    @property
    def neck(self) -> int:
        return 2 * self.panel_top + 2 * self.sleeve_top


@runtime_checkable
class ComponentCalculator(Protocol):
    """Protocol that all component calculators must satisfy."""

    name: str

    def calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
    ) -> ComponentOutcome:
        """Calculate one component from normalized inputs and upstream results."""
        ...


class BaseCalculator:
    """Common failure handling and helpers for the deterministic calculators."""

    name: str = ""

    def __init__(self, reference: ReferenceData | None = None) -> None:
        self.reference = reference or get_reference_data()

    def calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
    ) -> ComponentOutcome:
        warnings: list[str] = []
        try:
            result = self._calculate(inputs, upstream, warnings)
        except (ComponentFailure, ShapingError) as exc:
            return ComponentOutcome(name=self.name, error=f"{self.name}: {exc}")
        return ComponentOutcome(name=self.name, result=result)

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        raise NotImplementedError

    # ── Helpers ────────────────────────────────────────────────────────────────

    def require_measurement(self, inputs: NormalizedInputs, key: str) -> float:
        value = inputs.measurement(key)
        if value is None:
            raise ComponentFailure(f"{key} measurement is required")
        return value

    def require_upstream(
        self, upstream: Mapping[str, ComponentResult], name: str
    ) -> ComponentResult:
        result = upstream.get(name)
        if result is None:
            raise ComponentFailure(f"upstream component {name!r} is unavailable")
        return result

    def finished(
        self,
        inputs: NormalizedInputs,
        key: str,
        region: EaseRegion,
        warnings: list[str],
    ) -> float:
        """Measurement plus ease, clamped to the minimum viable size."""
        base = self.require_measurement(inputs, key)
        return self.clamp_finished(key, base + inputs.ease_cm(region, base), base, warnings)

    def clamp_finished(
        self, label: str, finished_cm: float, base_cm: float, warnings: list[str]
    ) -> float:
        minimum = base_cm * self.reference.limits.minimum_finished_fraction
        if finished_cm < minimum:
            warnings.append(
                f"{self.name}: finished {label} of {finished_cm:.1f} cm is below the "
                f"minimum viable {minimum:.1f} cm; clamped"
            )
            return minimum
        return finished_cm

    def default(self, key: str) -> float:
        return self.reference.default(key)

    def shaped(
        self,
        label: str,
        total_delta: int,
        available_rows: int,
        warnings: list[str],
        tie_break: TieBreak = TieBreak.EVEN_SPREAD,
        stitches_per_event: int = 2,
    ) -> ShapingSchedule:
        """distribute() plus a warning when the result needs multi-stitch rows."""
        schedule = distribute(total_delta, available_rows, tie_break, stitches_per_event)
        if schedule.dense:
            warnings.append(
                f"{self.name}: {label} needs {abs(total_delta)} stitches over "
                f"{available_rows} rows; some rows carry multiple shaping steps"
            )
        return schedule

    def bind_off_pair(self, stitches_each_side: int) -> ShapingSchedule:
        """Bind off at the start of the next two rows (one per side)."""
        if stitches_each_side <= 0:
            return work_even(0)
        return distribute(-2 * stitches_each_side, 2, TieBreak.EVEN_SPREAD, stitches_each_side)

    def rounded_curve(
        self,
        label: str,
        rapid: int,
        gradual: int,
        available_rows: int,
        warnings: list[str],
    ) -> ShapingSchedule:
        """
        Symmetric decreases for a rounded edge.

        ``rapid`` pairs are worked every other row, then ``gradual`` pairs
        every fourth row. When that does not fit in available_rows both
        phases are compressed proportionally.
        """
        rapid_rows = 2 * rapid
        gradual_rows = 4 * gradual
        wanted = rapid_rows + gradual_rows
        if wanted > available_rows:
            rapid_rows = round_half_away_from_zero(available_rows * rapid_rows / wanted)
            gradual_rows = max(available_rows - rapid_rows, 0)
            warnings.append(
                f"{self.name}: {label} curve compressed from {wanted} to {available_rows} rows"
            )
        return concatenate(
            self.shaped(f"{label} rapid decreases", -2 * rapid, rapid_rows, warnings),
            self.shaped(f"{label} gradual decreases", -2 * gradual, gradual_rows, warnings),
        )

    def armhole_depth_cm(self, inputs: NormalizedInputs) -> float:
        """
        Vertical armhole depth, from the first source available:

        1. sleeves.armhole_depth
        2. the armholeDepth measurement
        3. half the finished upper arm plus the armhole ease default
        4. a fixed fraction of the finished bust
        """
        if inputs.sleeves is not None and inputs.sleeves.armhole_depth_cm is not None:
            return inputs.sleeves.armhole_depth_cm
        measured = inputs.measurement("armholeDepth")
        if measured is not None:
            return measured
        upper_arm = inputs.finished("upperArmCircumference", EaseRegion.SLEEVE)
        if upper_arm is not None:
            return upper_arm / 2 + self.default("armhole_depth_ease_cm")
        bust = inputs.finished("bust", EaseRegion.BUST)
        if bust is None:
            raise ComponentFailure("armhole depth cannot be derived without bust or upper arm")
        return bust * self.default("armhole_depth_to_bust_ratio")

    def underarm_stitches(self, inputs: NormalizedInputs, warnings: list[str]) -> int:
        """Sleeve width at the underarm: the finished upper arm in stitches."""
        upper_arm = self.finished(inputs, "upperArmCircumference", EaseRegion.SLEEVE, warnings)
        return stitches_for(upper_arm, inputs.gauge)

    def raglan_line(
        self, inputs: NormalizedInputs, panel: int, warnings: list[str]
    ) -> RaglanLine:
        """
        Shared raglan counts for a body panel of *panel* stitches.

        The number of decrease rows aims for the neck circumference (or the
        bust-derived default), capped so each sleeve keeps a narrow top and
        each panel at least two stitches. Armhole, sleeve cap and yoke all
        call this with the same inputs and get the same line.

        Raises:
            ComponentFailure: If the underarm bind-off leaves no stitches to
                decrease along the raglan line.
        """
        sleeve = self.underarm_stitches(inputs, [])
        bind_off = round_half_away_from_zero(panel * self.default("raglan_bind_off_ratio"))
        bind_off = min(max(bind_off, RAGLAN_BIND_OFF_MIN), RAGLAN_BIND_OFF_MAX)
        sleeve_top = max(
            2, round_half_away_from_zero(sleeve * self.default("raglan_sleeve_top_ratio"))
        )
        room = min(sleeve - 2 * bind_off - sleeve_top, panel - 2 * bind_off - 2) // 2
        if room < 0:
            raise ComponentFailure(
                f"raglan bind-off of {bind_off} each side leaves no stitches "
                "for the raglan line"
            )

        neck_cm = inputs.measurement("neckCircumference")
        if neck_cm is None:
            neck_cm = self.require_measurement(inputs, "bust") * self.default("neck_to_bust_ratio")
            warnings.append(
                f"{self.name}: neck circumference not provided; using {neck_cm:.1f} cm"
            )
        joined = 2 * panel + 2 * sleeve - 8 * bind_off
        wanted = round_half_away_from_zero(
            (joined - stitches_for(neck_cm, inputs.gauge)) / RAGLAN_LINE_STITCHES
        )
        return RaglanLine(
            panel_stitches=panel,
            sleeve_stitches=sleeve,
            bind_off=bind_off,
            decreases=min(max(wanted, 0), room),
        )
