"""Tests for the neckline calculator."""

from knitcalc.schemas import Measurement, NecklineSpec, NecklineType, Set


def _neckline(run_components, make_inputs, snapshot):
    return run_components(make_inputs(snapshot), "body", "neckline")["neckline"]


def _with_neckline(make_sweater, spec: NecklineSpec):
    return make_sweater(neckline=Set(spec))


class TestRoundNeck:
    def test_counts_from_default_neck(self, run_components, make_inputs, sweater):
        """Neck circumference defaults to 38% of the bust: 36.48 cm."""
        result = _neckline(run_components, make_inputs, sweater).result
        assert result.stitch_count == 22
        assert result.row_count == 15
        assert result.details["center_bind_off"] == 10
        assert result.details["shoulder_stitches"] == 41
        assert any("neck circumference not provided" in w for w in result.warnings)

    def test_shaping_closes_neck(self, run_components, make_inputs, sweater):
        result = _neckline(run_components, make_inputs, sweater).result
        assert result.shaping.events[0].stitch_delta == -10
        assert result.shaping.available_rows == 15
        assert result.final_stitch_count == 0

    def test_compressed_curve_warns(self, run_components, make_inputs, sweater):
        result = _neckline(run_components, make_inputs, sweater).result
        assert any("compressed" in w for w in result.warnings)

    def test_explicit_dimensions(self, run_components, make_inputs, make_sweater):
        spec = NecklineSpec(NecklineType.ROUND, depth=Measurement(8), width=Measurement(18))
        result = _neckline(run_components, make_inputs, _with_neckline(make_sweater, spec)).result
        assert result.stitch_count == 36
        assert result.row_count == 22
        assert result.details["center_bind_off"] == 14
        assert not any("neck circumference" in w for w in result.warnings)


class TestOtherStyles:
    def test_v_neck_linear(self, run_components, make_inputs, make_sweater):
        snapshot = _with_neckline(make_sweater, NecklineSpec(NecklineType.V_NECK))
        result = _neckline(run_components, make_inputs, snapshot).result
        assert result.stitch_count == 18
        assert result.row_count == 26
        assert result.details["center_bind_off"] == 0
        assert all(e.stitch_delta == -2 for e in result.shaping.events)
        assert result.final_stitch_count == 0

    def test_crew_counts_only(self, run_components, make_inputs, make_sweater):
        snapshot = _with_neckline(make_sweater, NecklineSpec(NecklineType.CREW))
        result = _neckline(run_components, make_inputs, snapshot).result
        assert result.shaping is None
        assert result.stitch_count == 20
        assert result.final_stitch_count == 20

    def test_width_keeps_panel_parity(self, run_components, make_inputs, make_sweater):
        spec = NecklineSpec(NecklineType.BOAT, width=Measurement(20.5), depth=Measurement(2))
        result = _neckline(run_components, make_inputs, _with_neckline(make_sweater, spec)).result
        assert result.stitch_count % 2 == 0

    def test_wider_than_panel(self, run_components, make_inputs, make_sweater):
        spec = NecklineSpec(NecklineType.ROUND, width=Measurement(60), depth=Measurement(8))
        outcome = _neckline(run_components, make_inputs, _with_neckline(make_sweater, spec))
        assert not outcome.ok
        assert "wider than the body panel" in outcome.error
