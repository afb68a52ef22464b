"""
Armhole calculator: per-panel shaping from the underarm to the shoulder.

Works on one body panel (half the body circumference). The stitches removed
on each side are the difference between the panel and its target width at
the top of the armhole, and are taken off in phases that depend on the
sleeve type:

  setIn        rounded: 1/4 bound off, half the rest every 2nd row,
               the remainder every 4th row
  sleeveless   as setIn, but 1/3 bound off
  raglan       small bind-off, then an even decrease line to the neck; the
               counts come from the raglan line shared with sleeve and yoke
  dolman       no bind-off, gradual front-loaded decreases over the depth
  dropShoulder no shaping; the armhole is only a depth marker

A vest has no sleeves, so its shape comes from the construction method:
drop-shoulder vests are unshaped, every other vest is shaped as sleeveless.
Sweaters and cardigans take the sleeve type and cannot be calculated
without the sleeves section.
"""

from __future__ import annotations

from collections.abc import Mapping

from knitcalc.normalizer import NormalizedInputs
from knitcalc.schemas.result import ComponentResult
from knitcalc.schemas.snapshot import ConstructionMethod, GarmentType, SleeveType
from knitcalc.utilities.conversion import (
    round_half_away_from_zero,
    rows_for,
    stitch_count_to_physical,
    stitches_for,
)
from knitcalc.utilities.shaping import ShapingSchedule, TieBreak, concatenate, work_even

from .base import BaseCalculator, ComponentFailure


class ArmholeCalculator(BaseCalculator):
    name = "armhole"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        body = self.require_upstream(upstream, "body")
        sleeve_type = self._sleeve_type(inputs)
        gauge = inputs.gauge

        depth_cm = self.armhole_depth_cm(inputs)
        depth_rows = rows_for(depth_cm, gauge)
        if depth_rows < 2:
            raise ComponentFailure(f"armhole depth of {depth_cm:.1f} cm is under two rows")
        if depth_rows >= body.row_count:
            raise ComponentFailure(
                f"armhole depth ({depth_rows} rows) is not shorter than the body "
                f"({body.row_count} rows)"
            )

        panel = body.stitch_count // 2
        target = self._target_width(inputs, panel, sleeve_type)
        per_side = max((panel - target) // 2, 0)

        match sleeve_type:
            case SleeveType.SET_IN:
                bind_off = round_half_away_from_zero(per_side / 4)
                shaping = self._rounded(bind_off, per_side, depth_rows, warnings)
            case SleeveType.SLEEVELESS:
                bind_off = round_half_away_from_zero(per_side / 3)
                shaping = self._rounded(bind_off, per_side, depth_rows, warnings)
            case SleeveType.RAGLAN:
                line = self.raglan_line(inputs, panel, [])
                bind_off = line.bind_off
                shaping = concatenate(
                    self.bind_off_pair(bind_off),
                    self.shaped(
                        "raglan decreases", -2 * line.decreases, depth_rows - 2, warnings
                    ),
                )
            case SleeveType.DOLMAN:
                bind_off = 0
                shaping = self.shaped(
                    "dolman decreases",
                    -2 * per_side,
                    depth_rows,
                    warnings,
                    tie_break=TieBreak.FRONT_LOADED,
                )
            case SleeveType.DROP_SHOULDER:
                bind_off = 0
                shaping = work_even(depth_rows)

        used = shaping.available_rows
        if used < depth_rows:
            shaping = concatenate(shaping, work_even(depth_rows - used))

        final = shaping.final_count(panel)
        return ComponentResult(
            name=self.name,
            stitch_count=panel,
            row_count=depth_rows,
            cast_on_count=panel,
            final_stitch_count=final,
            width_cm=stitch_count_to_physical(panel, gauge),
            length_cm=depth_cm,
            shaping=shaping,
            warnings=tuple(warnings),
            details={
                "shape": sleeve_type.value,
                "bind_off": bind_off,
                "decreases_each_side": (panel - final) // 2,
                "shoulder_stitches": final,
                "depth_rows": depth_rows,
            },
        )

    def _sleeve_type(self, inputs: NormalizedInputs) -> SleeveType:
        if inputs.garment_type == GarmentType.VEST:
            if inputs.construction_method == ConstructionMethod.DROP_SHOULDER:
                return SleeveType.DROP_SHOULDER
            return SleeveType.SLEEVELESS
        if inputs.sleeves is not None:
            return inputs.sleeves.sleeve_type
        raise ComponentFailure("armhole depth and shape require the sleeves section")

    def _target_width(self, inputs: NormalizedInputs, panel: int, sleeve_type: SleeveType) -> int:
        """Panel width left at the top of the armhole."""
        if sleeve_type == SleeveType.DROP_SHOULDER:
            return panel
        shoulder = inputs.measurement("shoulderWidth")
        if shoulder is not None:
            return min(stitches_for(shoulder, inputs.gauge), panel)
        return round_half_away_from_zero(panel * self.default("shoulder_to_panel_ratio"))

    def _rounded(
        self, bind_off: int, per_side: int, depth_rows: int, warnings: list[str]
    ) -> ShapingSchedule:
        rest = per_side - bind_off
        rapid = round_half_away_from_zero(rest / 2)
        return concatenate(
            self.bind_off_pair(bind_off),
            self.rounded_curve("armhole", rapid, rest - rapid, depth_rows - 2, warnings),
        )
