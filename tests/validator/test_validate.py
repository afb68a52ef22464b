"""Tests for the input validator."""

import dataclasses
from types import MappingProxyType

import pytest

from knitcalc.errors import ConfigurationError
from knitcalc.reference import ReferenceData
from knitcalc.schemas import (
    UNSET,
    BodyShape,
    ConstructionMethod,
    EaseRegion,
    EaseSpec,
    EaseValue,
    GarmentType,
    GaugeSpec,
    Invalid,
    MeasurementSet,
    Set,
    SleeveLength,
    SleeveSpec,
    SleeveType,
    Unit,
    YarnSpec,
)
from knitcalc.validator import validate


def _with_ease(make_sweater, value: EaseValue, region=EaseRegion.BUST):
    return validate(make_sweater(ease=Set(EaseSpec({region: value}))))


def _has(messages, fragment: str) -> bool:
    return any(fragment in m for m in messages)


class TestCompleteness:
    def test_sample_sweater_valid(self, sweater):
        report = validate(sweater)
        assert report.is_valid
        assert report.errors == ()
        assert report.missing_data == ()

    def test_hat_missing_head_circumference(self, make_hat):
        report = validate(make_hat(measurements=Set(MeasurementSet())))
        assert not report.is_valid
        assert report.missing_data == ("headCircumference",)
        assert _has(report.errors, "headCircumference")

    def test_hat_measurements_unset(self, make_hat):
        report = validate(make_hat(measurements=UNSET))
        assert report.missing_data == ("headCircumference",)

    def test_sweater_missing_arm_length(self, make_sweater):
        measurements = MeasurementSet.from_values(
            {"bust": 96, "length": 60, "upperArmCircumference": 30}
        )
        report = validate(make_sweater(measurements=Set(measurements)))
        assert not report.is_valid
        assert report.missing_data == ("armLength",)

    def test_recommended_missing_is_warning(self, sweater):
        report = validate(sweater)
        assert _has(report.warnings, "measurements.waist")
        assert _has(report.warnings, "measurements.shoulderWidth")

    def test_garment_type_unset(self, make_sweater):
        report = validate(make_sweater(garment_type=UNSET))
        assert not report.is_valid
        assert _has(report.errors, "no garment type selected")

    def test_gauge_unset(self, make_sweater):
        report = validate(make_sweater(gauge=UNSET))
        assert _has(report.errors, "gauge: no gauge entered")

    def test_invalid_section_carries_reason(self, make_sweater):
        report = validate(make_sweater(measurements=Invalid("bust is not a number")))
        assert not report.is_valid
        assert _has(report.errors, "bust is not a number")


class TestRanges:
    def test_zero_gauge(self, make_sweater):
        report = validate(make_sweater(gauge=Set(GaugeSpec(stitches=0, rows=28))))
        assert not report.is_valid

    def test_atypical_gauge_warns(self, make_sweater):
        report = validate(make_sweater(gauge=Set(GaugeSpec(stitches=60, rows=28))))
        assert report.is_valid
        assert _has(report.warnings, "stitches per 10 cm")

    def test_negative_measurement(self, make_sweater):
        values = {"bust": -96, "length": 60, "armLength": 60, "upperArmCircumference": 30}
        report = validate(make_sweater(measurements=Set(MeasurementSet.from_values(values))))
        assert _has(report.errors, "measurements.bust: must be positive")

    def test_huge_measurement_warns(self, make_sweater):
        values = {"bust": 320, "length": 60, "armLength": 60, "upperArmCircumference": 30}
        report = validate(make_sweater(measurements=Set(MeasurementSet.from_values(values))))
        assert report.is_valid
        assert _has(report.warnings, "unusually large")

    @pytest.mark.parametrize("amount", [-51, 101])
    def test_percent_ease_out_of_bounds(self, make_sweater, amount):
        report = _with_ease(make_sweater, EaseValue.percent(amount))
        assert not report.is_valid
        assert _has(report.errors, "ease.bust")

    @pytest.mark.parametrize("amount", [-50, 100])
    def test_percent_ease_bounds_inclusive(self, make_sweater, amount):
        assert _with_ease(make_sweater, EaseValue.percent(amount)).is_valid

    def test_extreme_percent_warns(self, make_sweater):
        report = _with_ease(make_sweater, EaseValue.percent(45))
        assert report.is_valid
        assert _has(report.warnings, "extreme ease")

    def test_absolute_ease_out_of_bounds(self, make_sweater):
        report = _with_ease(make_sweater, EaseValue.absolute(-60))
        assert not report.is_valid

    def test_extreme_absolute_warns(self, make_sweater):
        report = _with_ease(make_sweater, EaseValue.absolute(25))
        assert report.is_valid
        assert _has(report.warnings, "extreme ease")

    def test_absolute_ease_checked_in_cm(self, make_sweater):
        """45 inches is 114.3 cm, past the 100 cm bound."""
        report = _with_ease(make_sweater, EaseValue.absolute(45, Unit.INCH))
        assert not report.is_valid


class TestCrossField:
    def test_defaults_reported_as_warnings(self, sweater):
        report = validate(sweater)
        assert _has(report.warnings, "construction_method: not selected; using setInSleeve")
        assert _has(report.warnings, "body_shape: not selected; using straight")

    def test_incompatible_construction(self, make_sweater):
        snapshot = make_sweater(
            garment_type=Set(GarmentType.VEST),
            construction_method=Set(ConstructionMethod.DOLMAN),
        )
        report = validate(snapshot)
        assert not report.is_valid
        assert _has(report.errors, "dolman is not compatible with a vest")

    def test_incompatible_body_shape(self, make_sweater):
        snapshot = make_sweater(
            construction_method=Set(ConstructionMethod.DROP_SHOULDER),
            body_shape=Set(BodyShape.FITTED_SHAPED_WAIST),
            sleeves=Set(SleeveSpec(SleeveType.DROP_SHOULDER)),
        )
        report = validate(snapshot)
        assert not report.is_valid
        assert _has(report.errors, "fittedShapedWaist is not compatible with dropShoulder")

    def test_construction_on_hat(self, make_hat):
        report = validate(make_hat(construction_method=Set(ConstructionMethod.RAGLAN)))
        assert not report.is_valid

    def test_sleeve_type_mismatch_warns(self, make_sweater):
        report = validate(make_sweater(construction_method=Set(ConstructionMethod.RAGLAN)))
        assert report.is_valid
        assert _has(report.warnings, "setIn sleeves are unusual with raglan construction")

    def test_custom_length_required(self, make_sweater):
        sleeves = SleeveSpec(SleeveType.SET_IN, sleeve_length=SleeveLength.CUSTOM)
        report = validate(make_sweater(sleeves=Set(sleeves)))
        assert _has(report.errors, "sleeves.custom_length")

    def test_missing_sleeves_warns(self, make_sweater):
        report = validate(make_sweater(sleeves=UNSET))
        assert report.is_valid
        assert _has(report.warnings, "armhole and sleeves cannot be calculated")

    def test_vest_sleeves_ignored(self, make_sweater):
        values = {"bust": 96, "length": 60}
        snapshot = make_sweater(
            garment_type=Set(GarmentType.VEST),
            measurements=Set(MeasurementSet.from_values(values)),
        )
        report = validate(snapshot)
        assert report.is_valid
        assert _has(report.warnings, "a vest has no sleeves")

    def test_unknown_yarn_warns(self, make_sweater):
        report = validate(make_sweater(yarn=Set(YarnSpec("cobweb"))))
        assert report.is_valid
        assert _has(report.warnings, "unknown weight 'cobweb'")


class TestReferenceGaps:
    def test_missing_default_construction(self, make_sweater):
        reference = ReferenceData()
        entry = reference.garment(GarmentType.SWEATER)
        reference.garment_types = MappingProxyType(
            {
                **reference.garment_types,
                GarmentType.SWEATER: dataclasses.replace(
                    entry, default_construction_method=None
                ),
            }
        )
        with pytest.raises(ConfigurationError, match="no default_construction_method"):
            validate(make_sweater(), reference)
