"""Shared snapshots and fixtures for the knitcalc test suite."""

from __future__ import annotations

import dataclasses

import pytest

from knitcalc.calculators import default_calculators
from knitcalc.normalizer import NormalizedInputs, normalize
from knitcalc.reference import ReferenceData, get_reference_data
from knitcalc.schemas import (
    EaseRegion,
    EaseSpec,
    EaseValue,
    GarmentType,
    GaugeSpec,
    MeasurementSet,
    NecklineSpec,
    NecklineType,
    PatternDefinitionSnapshot,
    Set,
    SleeveSpec,
    SleeveType,
    YarnSpec,
)

# 20 sts and 28 rows over 10 cm: 2.0 sts/cm, 2.8 rows/cm.
GAUGE = GaugeSpec(stitches=20, rows=28)

SWEATER_MEASUREMENTS = {
    "bust": 96,
    "length": 60,
    "armLength": 60,
    "upperArmCircumference": 30,
    "wristCircumference": 18,
}


def sweater_snapshot(**overrides) -> PatternDefinitionSnapshot:
    """96 cm bust, +8 cm ease, set-in sleeves, round neck, worsted yarn."""
    snapshot = PatternDefinitionSnapshot(
        garment_type=Set(GarmentType.SWEATER),
        gauge=Set(GAUGE),
        measurements=Set(MeasurementSet.from_values(SWEATER_MEASUREMENTS)),
        ease=Set(EaseSpec({EaseRegion.BUST: EaseValue.absolute(8)})),
        neckline=Set(NecklineSpec(NecklineType.ROUND)),
        sleeves=Set(SleeveSpec(SleeveType.SET_IN)),
        yarn=Set(YarnSpec("worsted")),
    )
    return dataclasses.replace(snapshot, **overrides)


def hat_snapshot(**overrides) -> PatternDefinitionSnapshot:
    snapshot = PatternDefinitionSnapshot(
        garment_type=Set(GarmentType.HAT),
        gauge=Set(GAUGE),
        measurements=Set(MeasurementSet.from_values({"headCircumference": 56})),
    )
    return dataclasses.replace(snapshot, **overrides)


def inputs_for(snapshot: PatternDefinitionSnapshot) -> NormalizedInputs:
    result = normalize(snapshot)
    assert result.inputs is not None, result.errors
    return result.inputs


@pytest.fixture(scope="session")
def reference() -> ReferenceData:
    return get_reference_data()


@pytest.fixture
def sweater() -> PatternDefinitionSnapshot:
    return sweater_snapshot()


@pytest.fixture
def hat() -> PatternDefinitionSnapshot:
    return hat_snapshot()


@pytest.fixture
def make_sweater():
    """Factory for sweater snapshots with selected sections replaced."""
    return sweater_snapshot


@pytest.fixture
def make_hat():
    return hat_snapshot


@pytest.fixture
def make_inputs():
    """Factory turning a snapshot into NormalizedInputs."""
    return inputs_for


@pytest.fixture
def run_components(reference):
    """Run calculators in the given order, feeding each the results before it.

    Returns name -> ComponentOutcome.
    """
    calculators = default_calculators(reference)

    def run(inputs: NormalizedInputs, *names: str):
        results = {}
        outcomes = {}
        for name in names:
            outcome = calculators[name].calculate(inputs, results)
            outcomes[name] = outcome
            if outcome.ok:
                results[name] = outcome.result
        return outcomes

    return run
