"""
Sleeve calculator: cuff, taper to the underarm, and the sleeve cap.

Worked bottom-up. The underarm count comes from the finished upper arm; the
cuff count from the finished wrist (or a fixed fraction of the upper arm
when the wrist is not measured). Sleeve length is a fraction of armLength
chosen by the sleeve length style, or a custom length.

The cap mirrors the armhole it is sewn into, using the armhole depth as the
rows available:

  setIn        same bind-off as the body, then decreases to a narrow cap top
  raglan       the raglan line shared with armhole and yoke: same bind-off,
               same number of decrease rows, so the tops meet the yoke neck
  dolman,      no cap; the sleeve ends at the underarm
  dropShoulder
"""

from __future__ import annotations

from collections.abc import Mapping

from knitcalc.normalizer import NormalizedInputs, NormalizedSleeves
from knitcalc.schemas.result import ComponentResult
from knitcalc.schemas.snapshot import EaseRegion, SleeveLength, SleeveType
from knitcalc.utilities.conversion import (
    match_parity,
    round_half_away_from_zero,
    row_count_to_physical,
    rows_for,
    stitches_for,
)
from knitcalc.utilities.shaping import ShapingSchedule, concatenate, work_even

from .base import BaseCalculator, ComponentFailure


class SleeveCalculator(BaseCalculator):
    name = "sleeve"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        armhole = self.require_upstream(upstream, "armhole")
        sleeves = inputs.sleeves
        if sleeves is None:
            raise ComponentFailure("sleeves section is required")
        gauge = inputs.gauge

        upper_arm = self.finished(inputs, "upperArmCircumference", EaseRegion.SLEEVE, warnings)
        wrist = inputs.measurement("wristCircumference")
        if wrist is None:
            upper_base = self.require_measurement(inputs, "upperArmCircumference")
            wrist = upper_base * self.default("wrist_to_upper_arm_ratio")
            warnings.append(f"sleeve: wrist not provided; using {wrist:.1f} cm")
        finished_wrist = wrist + inputs.ease_cm(EaseRegion.SLEEVE, wrist)

        underarm_stitches = stitches_for(upper_arm, gauge)
        wrist_stitches = match_parity(stitches_for(finished_wrist, gauge), underarm_stitches)
        if wrist_stitches > underarm_stitches:
            warnings.append("sleeve: wrist is wider than the upper arm; worked straight")
            wrist_stitches = underarm_stitches

        length_cm = self._length_cm(inputs, sleeves)
        cuff_cm = sleeves.cuff_length_cm
        if cuff_cm is None:
            cuff_cm = min(self.default("cuff_length_cm"), length_cm / 3)
        length_rows = rows_for(length_cm, gauge)
        cuff_rows = min(rows_for(cuff_cm, gauge), length_rows)
        taper_rows = length_rows - cuff_rows

        taper = self.shaped(
            "taper increases", underarm_stitches - wrist_stitches, taper_rows, warnings
        )

        cap, cap_top = self._cap(
            inputs, sleeves.sleeve_type, armhole, underarm_stitches, warnings
        )
        shaping = concatenate(work_even(cuff_rows), taper, cap)

        cap_cm = row_count_to_physical(cap.available_rows, gauge)
        average_width = (upper_arm + finished_wrist) / 2
        area_per_sleeve = average_width * length_cm + upper_arm * cap_cm * 0.6
        return ComponentResult(
            name=self.name,
            stitch_count=underarm_stitches,
            row_count=length_rows + cap.available_rows,
            cast_on_count=wrist_stitches,
            final_stitch_count=shaping.final_count(wrist_stitches),
            width_cm=upper_arm,
            length_cm=length_cm,
            surface_area_m2=2 * area_per_sleeve / 10_000,
            shaping=shaping,
            warnings=tuple(warnings),
            details={
                "length_style": sleeves.sleeve_length.value,
                "wrist_stitches": wrist_stitches,
                "underarm_stitches": underarm_stitches,
                "cuff_rows": cuff_rows,
                "taper_rows": taper_rows,
                "cap_rows": cap.available_rows,
                "cap_top_stitches": cap_top,
            },
        )

    def _length_cm(self, inputs: NormalizedInputs, sleeves: NormalizedSleeves) -> float:
        if sleeves.sleeve_length == SleeveLength.CUSTOM:
            if sleeves.custom_length_cm is None:
                raise ComponentFailure("custom sleeve length requires custom_length")
            return sleeves.custom_length_cm
        arm_length = self.require_measurement(inputs, "armLength")
        return arm_length * self.reference.sleeve_lengths[sleeves.sleeve_length]

    def _cap(
        self,
        inputs: NormalizedInputs,
        sleeve_type: SleeveType,
        armhole: ComponentResult,
        underarm_stitches: int,
        warnings: list[str],
    ) -> tuple[ShapingSchedule, int]:
        """Cap schedule and the stitch count left at its top."""
        match sleeve_type:
            case SleeveType.RAGLAN:
                line = self.raglan_line(inputs, armhole.stitch_count, [])
                cap = concatenate(
                    self.bind_off_pair(line.bind_off),
                    self.shaped(
                        "raglan decreases",
                        -2 * line.decreases,
                        armhole.row_count - 2,
                        warnings,
                    ),
                )
                return cap, line.sleeve_top
            case SleeveType.SET_IN:
                bind_off = int(armhole.details["bind_off"])
                after_bind_off = underarm_stitches - 2 * bind_off
                if after_bind_off <= 0:
                    raise ComponentFailure(
                        f"underarm bind-off of {bind_off} each side leaves no cap stitches"
                    )
                ratio = self.default("sleeve_cap_top_ratio")
                cap_top = match_parity(
                    round_half_away_from_zero(underarm_stitches * ratio), after_bind_off
                )
                cap_top = min(cap_top, after_bind_off)
                cap = concatenate(
                    self.bind_off_pair(bind_off),
                    self.shaped(
                        "cap decreases", cap_top - after_bind_off, armhole.row_count - 2, warnings
                    ),
                )
                return cap, cap_top
            case SleeveType.DOLMAN | SleeveType.DROP_SHOULDER | SleeveType.SLEEVELESS:
                return work_even(0), underarm_stitches
