"""
Yoke calculator: the raglan line joining body and sleeves up to the neck.

After the underarm bind-offs, body and both sleeves are joined on one needle
and shaped along four raglan lines, a decrease either side of each line
(8 stitches per shaping row). Bottom-up raglans decrease from the joined
count to the neck; top-down raglans cast on the neck and increase to the
joined count.

The counts come from the same raglan line the armhole and sleeve cap use,
so the neck is exactly what the two panel tops and two sleeve tops leave.
Any extra width at the front neck is taken out by the neckline.
"""

from __future__ import annotations

from collections.abc import Mapping

from knitcalc.normalizer import NormalizedInputs
from knitcalc.schemas.result import ComponentResult
from knitcalc.schemas.snapshot import ConstructionMethod

from .base import RAGLAN_LINE_STITCHES, BaseCalculator


class YokeCalculator(BaseCalculator):
    name = "yoke"

    def _calculate(
        self,
        inputs: NormalizedInputs,
        upstream: Mapping[str, ComponentResult],
        warnings: list[str],
    ) -> ComponentResult:
        body = self.require_upstream(upstream, "body")
        armhole = self.require_upstream(upstream, "armhole")
        self.require_upstream(upstream, "sleeve")

        line = self.raglan_line(inputs, armhole.stitch_count, warnings)
        joined = line.joined
        neck = line.neck

        raglan_rows = armhole.row_count - 2
        top_down = inputs.construction_method == ConstructionMethod.RAGLAN_TOP_DOWN
        start, end = (neck, joined) if top_down else (joined, neck)
        shaping = self.shaped(
            "raglan shaping",
            end - start,
            raglan_rows,
            warnings,
            stitches_per_event=RAGLAN_LINE_STITCHES,
        )

        return ComponentResult(
            name=self.name,
            stitch_count=joined,
            row_count=raglan_rows,
            cast_on_count=start,
            final_stitch_count=shaping.final_count(start),
            width_cm=body.width_cm,
            length_cm=armhole.length_cm,
            shaping=shaping,
            warnings=tuple(warnings),
            details={
                "direction": "topDown" if top_down else "bottomUp",
                "joined_stitches": joined,
                "neck_stitches": neck,
                "raglan_rows": raglan_rows,
                "raglan_decreases": line.decreases,
            },
        )
