"""
Body calculator: circumference stitch count, length rows and side shaping.

The body is worked bottom-up from the hem to the underarm. Its principal
count is the finished bust:

    round_half_away_from_zero((bust + ease) * stitches_per_cm)

so a 96 cm bust with 8 cm ease at 2.0 sts/cm gives 208 stitches.

Side shaping depends on body shape and is worked below the armhole, at two
side seams with a decrease or increase either side of each seam (4 stitches
per shaping row):

  straight, oversizedBoxy  no shaping; cast on the bust count
  aLine                    cast on the hip/hem count, decrease to the bust
                           over the lower two thirds
  fittedShapedWaist        hip -> waist decreases, work even, waist -> bust
                           increases
"""

from __future__ import annotations

from collections.abc import Mapping

from knitcalc.normalizer import NormalizedInputs
from knitcalc.schemas.result import ComponentResult
from knitcalc.schemas.snapshot import BodyShape, EaseRegion
from knitcalc.utilities.conversion import (
    round_half_away_from_zero,
    round_to_multiple,
    rows_for,
    stitches_for,
)
from knitcalc.utilities.shaping import ShapingSchedule, concatenate, work_even

from .base import BaseCalculator, ComponentFailure

# Two side seams, one shaping stitch either side of each.
SIDE_SEAM_STITCHES = 4


class BodyCalculator(BaseCalculator):
    name = "body"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        finished_bust = self.finished(inputs, "bust", EaseRegion.BUST, warnings)
        length = self.require_measurement(inputs, "length")
        gauge = inputs.gauge

        bust_stitches = stitches_for(finished_bust, gauge)
        total_rows = rows_for(length, gauge)
        armhole_rows = rows_for(self.armhole_depth_cm(inputs), gauge)
        underarm_rows = total_rows - armhole_rows
        if underarm_rows <= 0:
            raise ComponentFailure(
                f"body length ({total_rows} rows) leaves no rows below the "
                f"armhole ({armhole_rows} rows)"
            )

        shape = inputs.body_shape or BodyShape.STRAIGHT
        match shape:
            case BodyShape.STRAIGHT | BodyShape.OVERSIZED_BOXY:
                cast_on = bust_stitches
                shaping = work_even(underarm_rows)
            case BodyShape.A_LINE:
                cast_on, shaping = self._a_line(
                    inputs, finished_bust, bust_stitches, underarm_rows, warnings
                )
            case BodyShape.FITTED_SHAPED_WAIST:
                cast_on, shaping = self._fitted(
                    inputs, finished_bust, bust_stitches, underarm_rows, warnings
                )

        return ComponentResult(
            name=self.name,
            stitch_count=bust_stitches,
            row_count=total_rows,
            cast_on_count=cast_on,
            final_stitch_count=shaping.final_count(cast_on),
            width_cm=finished_bust,
            length_cm=length,
            surface_area_m2=finished_bust * length / 10_000,
            shaping=shaping,
            warnings=tuple(warnings),
            details={
                "body_shape": shape.value,
                "panel_stitches": bust_stitches // 2,
                "underarm_rows": underarm_rows,
                "armhole_rows": armhole_rows,
            },
        )

    def _a_line(
        self,
        inputs: NormalizedInputs,
        finished_bust: float,
        bust_stitches: int,
        underarm_rows: int,
        warnings: list[str],
    ) -> tuple[int, ShapingSchedule]:
        hip = inputs.finished("hip", EaseRegion.HIP)
        hem_cm = max(
            hip if hip is not None else 0.0,
            finished_bust * self.default("a_line_hem_ratio"),
        )
        extra = round_to_multiple(
            stitches_for(hem_cm, inputs.gauge) - bust_stitches, SIDE_SEAM_STITCHES
        )
        cast_on = bust_stitches + max(extra, 0)
        shaping_rows = round_half_away_from_zero(underarm_rows * 2 / 3)
        schedule = concatenate(
            self.shaped(
                "A-line decreases",
                bust_stitches - cast_on,
                shaping_rows,
                warnings,
                stitches_per_event=SIDE_SEAM_STITCHES,
            ),
            work_even(underarm_rows - shaping_rows),
        )
        return cast_on, schedule

    def _fitted(
        self,
        inputs: NormalizedInputs,
        finished_bust: float,
        bust_stitches: int,
        underarm_rows: int,
        warnings: list[str],
    ) -> tuple[int, ShapingSchedule]:
        waist = inputs.measurement("waist")
        bust = self.require_measurement(inputs, "bust")
        if waist is None:
            warnings.append("body: waist not provided; worked without waist shaping")
            return bust_stitches, work_even(underarm_rows)
        if abs(bust - waist) <= self.default("waist_shaping_threshold_cm"):
            return bust_stitches, work_even(underarm_rows)

        finished_waist = self.clamp_finished(
            "waist", waist + inputs.ease_cm(EaseRegion.WAIST, waist), waist, warnings
        )
        hip = inputs.finished("hip", EaseRegion.HIP)
        finished_hip = hip if hip is not None else finished_bust

        gauge = inputs.gauge
        waist_stitches = bust_stitches - round_to_multiple(
            bust_stitches - stitches_for(finished_waist, gauge), SIDE_SEAM_STITCHES
        )
        hip_stitches = waist_stitches + round_to_multiple(
            stitches_for(finished_hip, gauge) - waist_stitches, SIDE_SEAM_STITCHES
        )

        decrease_rows = round_half_away_from_zero(underarm_rows * 0.35)
        even_rows = round_half_away_from_zero(underarm_rows * 0.15)
        increase_rows = round_half_away_from_zero(underarm_rows * 0.35)
        remaining = underarm_rows - decrease_rows - even_rows - increase_rows

        schedule = concatenate(
            self.shaped(
                "waist decreases",
                waist_stitches - hip_stitches,
                decrease_rows,
                warnings,
                stitches_per_event=SIDE_SEAM_STITCHES,
            ),
            work_even(even_rows),
            self.shaped(
                "bust increases",
                bust_stitches - waist_stitches,
                increase_rows,
                warnings,
                stitches_per_event=SIDE_SEAM_STITCHES,
            ),
            work_even(remaining),
        )
        return hip_stitches, schedule
