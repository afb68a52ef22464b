"""
Neckline calculator: front neck width, depth and shaping.

Width and depth come from the neckline section when given, otherwise from
the neck circumference scaled by the style's ratios in reference data. The
width in stitches keeps the parity of the body panel so both shoulders get
the same count.

Curved styles (round, scoop) bind off the centre, then decrease each side
rapidly and then gradually. A V-neck splits at the centre and decreases
evenly over the full depth. Other styles (crew, boat, square, turtleneck)
get counts only.
"""

from __future__ import annotations

from collections.abc import Mapping

from knitcalc.normalizer import NormalizedInputs
from knitcalc.schemas.result import ComponentResult
from knitcalc.schemas.snapshot import NecklineType
from knitcalc.utilities.conversion import (
    match_parity,
    round_half_away_from_zero,
    rows_for,
    stitches_for,
)
from knitcalc.utilities.shaping import (
    ShapingSchedule,
    TieBreak,
    concatenate,
    distribute,
    work_even,
)

from .base import BaseCalculator, ComponentFailure


class NecklineCalculator(BaseCalculator):
    name = "neckline"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        body = self.require_upstream(upstream, "body")
        neckline = inputs.neckline
        if neckline is None:
            raise ComponentFailure("neckline section is required")
        ratio = self.reference.necklines[neckline.neckline_type]
        gauge = inputs.gauge

        width_cm = neckline.width_cm
        depth_cm = neckline.depth_cm
        if width_cm is None or depth_cm is None:
            neck = self._neck_circumference(inputs, warnings)
            width_cm = width_cm if width_cm is not None else neck * ratio.width
            depth_cm = depth_cm if depth_cm is not None else neck * ratio.depth

        panel = body.stitch_count // 2
        width = match_parity(stitches_for(width_cm, gauge), panel)
        depth_rows = rows_for(depth_cm, gauge)
        if width > panel:
            raise ComponentFailure(
                f"neck width ({width} sts) is wider than the body panel ({panel} sts)"
            )

        shaping: ShapingSchedule | None = None
        center = 0
        if ratio.shaped:
            if depth_rows < 2:
                raise ComponentFailure(f"neck depth of {depth_cm:.1f} cm is under two rows")
            match neckline.neckline_type:
                case NecklineType.V_NECK:
                    center, shaping = self._v_neck(width, depth_rows, warnings)
                case _:
                    center, shaping = self._curved(width, depth_rows, warnings)

        shoulder = (panel - width) // 2
        if shoulder < 1:
            warnings.append("neckline: neck leaves no shoulder stitches")
        return ComponentResult(
            name=self.name,
            stitch_count=width,
            row_count=depth_rows,
            cast_on_count=width,
            final_stitch_count=shaping.final_count(width) if shaping is not None else width,
            width_cm=width_cm,
            length_cm=depth_cm,
            shaping=shaping,
            warnings=tuple(warnings),
            details={
                "style": neckline.neckline_type.value,
                "center_bind_off": center,
                "shoulder_stitches": shoulder,
            },
        )

    def _neck_circumference(self, inputs: NormalizedInputs, warnings: list[str]) -> float:
        neck = inputs.measurement("neckCircumference")
        if neck is not None:
            return neck
        bust = self.require_measurement(inputs, "bust")
        neck = bust * self.default("neck_to_bust_ratio")
        warnings.append(f"neckline: neck circumference not provided; using {neck:.1f} cm")
        return neck

    def _curved(
        self, width: int, depth_rows: int, warnings: list[str]
    ) -> tuple[int, ShapingSchedule]:
        center = match_parity(
            round_half_away_from_zero(width * self.default("neck_center_bind_off_ratio")), width
        )
        center = min(center, width)
        per_side = (width - center) // 2
        rapid = round_half_away_from_zero(per_side / 2)
        schedule = concatenate(
            _center_bind_off(center),
            self.rounded_curve("neck", rapid, per_side - rapid, depth_rows - 1, warnings),
        )
        return center, self._pad(schedule, depth_rows)

    def _v_neck(
        self, width: int, depth_rows: int, warnings: list[str]
    ) -> tuple[int, ShapingSchedule]:
        # An odd width leaves one centre stitch to bind off at the split.
        center = width % 2
        per_side = (width - center) // 2
        slope = self.shaped("V-neck decreases", -2 * per_side, depth_rows - 1, warnings)
        return center, concatenate(_center_bind_off(center), slope)

    def _pad(self, schedule: ShapingSchedule, rows: int) -> ShapingSchedule:
        if schedule.available_rows >= rows:
            return schedule
        return concatenate(schedule, work_even(rows - schedule.available_rows))


def _center_bind_off(center: int) -> ShapingSchedule:
    """One row in which the centre stitches are bound off."""
    if center <= 0:
        return work_even(1)
    return distribute(-center, 1, TieBreak.EVEN_SPREAD, center)
