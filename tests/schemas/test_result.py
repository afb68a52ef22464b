"""Tests for result types."""

import pytest

from knitcalc.schemas.result import CalculatedPatternDetails, ComponentResult, DerivedState
from knitcalc.utilities.shaping import distribute


def _result(**overrides) -> ComponentResult:
    fields = dict(
        name="body",
        stitch_count=208,
        row_count=168,
        cast_on_count=208,
        final_stitch_count=208,
        width_cm=104.0,
        length_cm=60.0,
    )
    fields.update(overrides)
    return ComponentResult(**fields)


class TestComponentResult:
    def test_details_read_only(self):
        result = _result(details={"panel_stitches": 104})
        with pytest.raises(TypeError):
            result.details["panel_stitches"] = 1  # type: ignore[index]

    def test_without_shaping(self):
        result = _result(shaping=distribute(-4, 4, stitches_per_event=2))
        stripped = result.without_shaping()
        assert stripped.shaping is None
        assert stripped.stitch_count == 208
        assert result.shaping is not None


class TestCalculatedPatternDetails:
    def test_ok_without_errors(self):
        assert CalculatedPatternDetails().ok

    def test_not_ok_with_errors(self):
        assert not CalculatedPatternDetails(errors=("armhole: failed",)).ok

    def test_derived_state_values(self):
        assert DerivedState.RECALCULATING.value == "recalculating"
