"""
Calculators for garments without a body: hats, scarves and shawls.

Crown (hat, beanie)
    Worked in the round from the brim up. The cast-on is the finished head
    circumference in stitches, rounded to a multiple of the garment's crown
    decrease points so every decrease round removes one stitch per point.
    The top third of the hat height closes the crown down to one stitch per
    point, which is drawn through.

Scarf
    A rectangle: width and length counts, no shaping.

Shawl
    A top-down triangle. Starts from a few stitches and increases two per
    shaping row until the wingspan is reached at the full depth.
"""

from __future__ import annotations

from collections.abc import Mapping

from knitcalc.normalizer import NormalizedInputs
from knitcalc.schemas.result import ComponentResult
from knitcalc.schemas.snapshot import EaseRegion
from knitcalc.utilities.conversion import (
    match_parity,
    round_half_away_from_zero,
    round_to_multiple,
    rows_for,
    stitches_for,
)
from knitcalc.utilities.shaping import concatenate, work_even

from .base import BaseCalculator, ComponentFailure

# Cast-on counts outside this range are unusual for an adult hat.
CROWN_CAST_ON_MIN = 60
CROWN_CAST_ON_MAX = 200


class CrownCalculator(BaseCalculator):
    name = "crown"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        head = self.require_measurement(inputs, "headCircumference")
        gauge = inputs.gauge
        points = self.reference.garment(inputs.garment_type).crown_decrease_points
        if not points:
            raise ComponentFailure(f"{inputs.garment_type.value} has no crown decrease points")

        ease = self._head_ease(inputs, head, warnings)
        finished = self.clamp_finished("head", head + ease, head, warnings)
        cast_on = round_to_multiple(stitches_for(finished, gauge), points)
        if cast_on < points:
            warnings.append(f"crown: cast-on raised to the {points} decrease points")
            cast_on = points
        if cast_on > CROWN_CAST_ON_MAX:
            warnings.append(f"crown: cast-on of {cast_on} stitches is unusually large")
        elif cast_on < CROWN_CAST_ON_MIN:
            warnings.append(f"crown: cast-on of {cast_on} stitches is unusually small")

        height_cm = inputs.measurement("hatHeight")
        if height_cm is None:
            height_cm = self.default("hat_height_cm")
            warnings.append(f"crown: hat height not provided; using {height_cm:.0f} cm")
        total_rows = rows_for(height_cm, gauge)
        brim_rows = rows_for(self.default("brim_length_cm"), gauge)
        crown_rows = round_half_away_from_zero(total_rows * self.default("crown_height_fraction"))
        body_rows = total_rows - brim_rows - crown_rows
        if body_rows < 0:
            raise ComponentFailure(
                f"hat height of {height_cm:.1f} cm is too short for the brim and crown"
            )

        shaping = concatenate(
            work_even(brim_rows),
            work_even(body_rows),
            self.shaped(
                "crown decreases",
                points - cast_on,
                crown_rows,
                warnings,
                stitches_per_event=points,
            ),
        )

        return ComponentResult(
            name=self.name,
            stitch_count=cast_on,
            row_count=total_rows,
            cast_on_count=cast_on,
            final_stitch_count=shaping.final_count(cast_on),
            width_cm=finished,
            length_cm=height_cm,
            surface_area_m2=finished * height_cm / 10_000,
            shaping=shaping,
            warnings=tuple(warnings),
            details={
                "decrease_points": points,
                "brim_rows": brim_rows,
                "body_rows": body_rows,
                "crown_rows": crown_rows,
            },
        )

    def _head_ease(self, inputs: NormalizedInputs, head: float, warnings: list[str]) -> float:
        """Entered head ease, or the default negative ease for a snug fit."""
        if EaseRegion.HEAD in inputs.ease:
            return inputs.ease_cm(EaseRegion.HEAD, head)
        negative = abs(head * self.default("head_ease_percent") / 100)
        negative = min(
            max(negative, self.default("head_ease_min_cm")), self.default("head_ease_max_cm")
        )
        warnings.append(f"crown: head ease not provided; using -{negative:.1f} cm")
        return -negative


class ScarfCalculator(BaseCalculator):
    name = "scarf"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        width = self.require_measurement(inputs, "width")
        length = self.require_measurement(inputs, "length")
        stitches = stitches_for(width, inputs.gauge)
        if stitches < 1:
            raise ComponentFailure(f"width of {width:.1f} cm is under one stitch")
        return ComponentResult(
            name=self.name,
            stitch_count=stitches,
            row_count=rows_for(length, inputs.gauge),
            cast_on_count=stitches,
            final_stitch_count=stitches,
            width_cm=width,
            length_cm=length,
            surface_area_m2=width * length / 10_000,
            warnings=tuple(warnings),
        )


class ShawlCalculator(BaseCalculator):
    name = "shawl"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        wingspan = self.require_measurement(inputs, "width")
        depth = self.require_measurement(inputs, "length")
        start = int(self.default("shawl_start_stitches"))

        final = match_parity(stitches_for(wingspan, inputs.gauge), start)
        rows = rows_for(depth, inputs.gauge)
        if final <= start:
            raise ComponentFailure(
                f"wingspan of {wingspan:.1f} cm is not wider than the {start}-stitch start"
            )
        shaping = self.shaped("wingspan increases", final - start, rows, warnings)

        return ComponentResult(
            name=self.name,
            stitch_count=final,
            row_count=rows,
            cast_on_count=start,
            final_stitch_count=shaping.final_count(start),
            width_cm=wingspan,
            length_cm=depth,
            surface_area_m2=wingspan * depth / 2 / 10_000,
            shaping=shaping,
            warnings=tuple(warnings),
            details={"start_stitches": start},
        )
