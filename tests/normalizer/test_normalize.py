"""Tests for the unit & measurement normalizer."""

import math

import pytest

from knitcalc.normalizer import gauge_per_cm, normalize
from knitcalc.schemas import (
    UNSET,
    BodyShape,
    ConstructionMethod,
    EaseKind,
    EaseRegion,
    EaseSpec,
    EaseValue,
    GaugeSpec,
    Invalid,
    Measurement,
    MeasurementSet,
    Set,
    SleeveSpec,
    SleeveType,
    Unit,
)


class TestGaugePerCm:
    def test_per_ten_cm(self):
        gauge = gauge_per_cm(GaugeSpec(stitches=20, rows=28))
        assert gauge.stitches_per_cm == pytest.approx(2.0)
        assert gauge.rows_per_cm == pytest.approx(2.8)

    def test_per_four_inches(self):
        gauge = gauge_per_cm(GaugeSpec(stitches=20, rows=28, unit=Unit.INCH, width=4, height=4))
        assert gauge.stitches_per_cm == pytest.approx(20 / 10.16)
        assert gauge.rows_per_cm == pytest.approx(28 / 10.16)

    def test_rejects_zero_swatch(self):
        with pytest.raises(ValueError, match="swatch size must be positive"):
            gauge_per_cm(GaugeSpec(stitches=20, rows=28, width=0))


class TestNormalize:
    def test_measurements_in_cm(self, make_sweater):
        snapshot = make_sweater(
            measurements=Set(MeasurementSet.from_values({"bust": 38, "length": 24}, Unit.INCH))
        )
        inputs = normalize(snapshot).inputs
        assert inputs.measurement("bust") == pytest.approx(96.52)
        assert inputs.measurement("length") == pytest.approx(60.96)
        assert inputs.measurement("waist") is None

    def test_absolute_ease_in_cm(self, make_sweater):
        snapshot = make_sweater(
            ease=Set(EaseSpec({EaseRegion.BUST: EaseValue.absolute(2, Unit.INCH)}))
        )
        inputs = normalize(snapshot).inputs
        assert inputs.ease[EaseRegion.BUST].kind == EaseKind.ABSOLUTE
        assert inputs.ease_cm(EaseRegion.BUST, 96) == pytest.approx(5.08)

    def test_absolute_ease_defaults_to_cm(self, make_sweater):
        snapshot = make_sweater(ease=Set(EaseSpec({EaseRegion.BUST: EaseValue.absolute(8)})))
        inputs = normalize(snapshot).inputs
        assert inputs.ease_cm(EaseRegion.BUST, 96) == 8
        assert inputs.finished("bust", EaseRegion.BUST) == 104

    def test_percent_ease_scales(self, make_sweater):
        snapshot = make_sweater(ease=Set(EaseSpec({EaseRegion.BUST: EaseValue.percent(10)})))
        inputs = normalize(snapshot).inputs
        assert inputs.finished("bust", EaseRegion.BUST) == pytest.approx(105.6)

    def test_finished_without_ease(self, make_sweater):
        inputs = normalize(make_sweater(ease=UNSET)).inputs
        assert inputs.finished("bust", EaseRegion.BUST) == 96
        assert inputs.finished("hip", EaseRegion.HIP) is None

    def test_defaults_applied(self, sweater):
        inputs = normalize(sweater).inputs
        assert inputs.construction_method == ConstructionMethod.SET_IN_SLEEVE
        assert inputs.body_shape == BodyShape.STRAIGHT

    def test_no_construction_for_hat(self, hat):
        inputs = normalize(hat).inputs
        assert inputs.construction_method is None
        assert inputs.body_shape is None

    def test_sleeve_lengths_converted(self, make_sweater):
        sleeves = SleeveSpec(
            SleeveType.SET_IN,
            cuff_length=Measurement(2, Unit.INCH),
            armhole_depth=Measurement(18),
        )
        inputs = normalize(make_sweater(sleeves=Set(sleeves))).inputs
        assert inputs.sleeves.cuff_length_cm == pytest.approx(5.08)
        assert inputs.sleeves.armhole_depth_cm == 18

    def test_yarn_weight_carried(self, sweater):
        assert normalize(sweater).inputs.yarn_weight == "worsted"


class TestNormalizeErrors:
    def test_nan_measurement_reported(self, make_sweater):
        snapshot = make_sweater(
            measurements=Set(MeasurementSet.from_values({"bust": math.nan, "length": 60}))
        )
        result = normalize(snapshot)
        assert any("measurements.bust" in e for e in result.errors)
        assert result.inputs.measurement("bust") is None

    def test_infinite_gauge_reported(self, make_sweater):
        result = normalize(make_sweater(gauge=Set(GaugeSpec(stitches=math.inf, rows=28))))
        assert result.inputs is None
        assert any("gauge.stitches" in e for e in result.errors)

    def test_non_positive_gauge_reported(self, make_sweater):
        result = normalize(make_sweater(gauge=Set(GaugeSpec(stitches=0, rows=28))))
        assert result.inputs is None
        assert any(e.startswith("gauge:") for e in result.errors)

    def test_unset_garment_type(self, make_sweater):
        result = normalize(make_sweater(garment_type=UNSET))
        assert result.inputs is None
        assert result.errors == ()

    def test_invalid_gauge_section(self, make_sweater):
        assert normalize(make_sweater(gauge=Invalid("unreadable"))).inputs is None
