"""Tests for the raglan yoke calculator."""

import pytest

from knitcalc.schemas import (
    ConstructionMethod,
    MeasurementSet,
    Set,
    SleeveSpec,
    SleeveType,
)

_ORDER = ("body", "armhole", "sleeve", "yoke")


@pytest.fixture
def raglan(make_sweater):
    return make_sweater(
        construction_method=Set(ConstructionMethod.RAGLAN),
        sleeves=Set(SleeveSpec(SleeveType.RAGLAN)),
    )


class TestBottomUpYoke:
    def test_joined_count(self, run_components, make_inputs, raglan):
        """208 body + 2 x 60 sleeve - 8 x 3 underarm bind-off = 304."""
        result = run_components(make_inputs(raglan), *_ORDER)["yoke"].result
        assert result.stitch_count == 304
        assert result.cast_on_count == 304
        assert result.details["direction"] == "bottomUp"

    def test_decreases_to_neck(self, run_components, make_inputs, raglan):
        result = run_components(make_inputs(raglan), *_ORDER)["yoke"].result
        assert result.final_stitch_count == 112
        assert result.details["neck_stitches"] == 112
        assert result.details["raglan_decreases"] == 24
        assert all(e.stitch_delta == -8 for e in result.shaping.events)
        assert result.row_count == 47

    def test_neck_measurement_used(self, run_components, make_inputs, make_sweater):
        measurements = MeasurementSet.from_values(
            {
                "bust": 96,
                "length": 60,
                "armLength": 60,
                "upperArmCircumference": 40,
                "neckCircumference": 40,
            }
        )
        snapshot = make_sweater(
            construction_method=Set(ConstructionMethod.RAGLAN),
            sleeves=Set(SleeveSpec(SleeveType.RAGLAN)),
            measurements=Set(measurements),
        )
        result = run_components(make_inputs(snapshot), *_ORDER)["yoke"].result
        assert (result.stitch_count - result.final_stitch_count) % 8 == 0
        assert result.final_stitch_count == 80
        assert not any("neck circumference" in w for w in result.warnings)


class TestTopDownYoke:
    def test_increases_from_neck(self, run_components, make_inputs, make_sweater):
        snapshot = make_sweater(
            construction_method=Set(ConstructionMethod.RAGLAN_TOP_DOWN),
            sleeves=Set(SleeveSpec(SleeveType.RAGLAN)),
        )
        result = run_components(make_inputs(snapshot), *_ORDER)["yoke"].result
        assert result.cast_on_count == 112
        assert result.final_stitch_count == 304
        assert all(e.stitch_delta == 8 for e in result.shaping.events)
        assert result.details["direction"] == "topDown"


class TestYokeFailures:
    def test_sleeve_required(self, run_components, make_inputs, raglan):
        outcome = run_components(make_inputs(raglan), "body", "armhole", "yoke")["yoke"]
        assert outcome.error == "yoke: upstream component 'sleeve' is unavailable"


class TestRaglanLineAgreement:
    @pytest.mark.parametrize(
        "method", [ConstructionMethod.RAGLAN, ConstructionMethod.RAGLAN_TOP_DOWN]
    )
    def test_panels_and_sleeves_meet_at_neck(
        self, run_components, make_inputs, make_sweater, method
    ):
        snapshot = make_sweater(
            construction_method=Set(method),
            sleeves=Set(SleeveSpec(SleeveType.RAGLAN)),
        )
        outcomes = run_components(make_inputs(snapshot), *_ORDER)
        armhole = outcomes["armhole"].result
        sleeve = outcomes["sleeve"].result
        yoke = outcomes["yoke"].result
        assert (
            2 * armhole.final_stitch_count + 2 * sleeve.details["cap_top_stitches"]
            == yoke.details["neck_stitches"]
        )

    def test_sleeve_top_limits_neck(self, run_components, make_inputs, raglan):
        """Neck target is 73 sts but the sleeves run out of raglan room first."""
        outcomes = run_components(make_inputs(raglan), *_ORDER)
        assert outcomes["sleeve"].result.final_stitch_count == 6
        assert outcomes["yoke"].result.details["neck_stitches"] == 112
