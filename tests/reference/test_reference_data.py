"""
Tests for the reference data registry.

Covers:
  - All YAML tables load and every closed enum has an entry
  - Garment requirements, compatibility queries and defaults
  - Corrupted data raises ConfigurationError at load time
"""

import shutil
from pathlib import Path

import pytest
import yaml

import knitcalc.reference
from knitcalc.errors import ConfigurationError
from knitcalc.reference import KNOWN_COMPONENTS, ReferenceData, get_reference_data
from knitcalc.schemas.snapshot import (
    BodyShape,
    ConstructionMethod,
    GarmentType,
    NecklineType,
    SleeveLength,
    SleeveType,
)

_DATA_DIR = Path(knitcalc.reference.__file__).parent / "data"


@pytest.fixture
def data_dir(tmp_path):
    """Writable copy of the bundled tables."""
    target = tmp_path / "data"
    shutil.copytree(_DATA_DIR, target)
    return target


def _edit_yaml(path: Path, edit) -> None:
    data = yaml.safe_load(path.read_text())
    edit(data)
    path.write_text(yaml.safe_dump(data, sort_keys=False))


# ── Registry loads ─────────────────────────────────────────────────────────────


class TestRegistryLoads:
    def test_singleton(self):
        assert get_reference_data() is get_reference_data()

    def test_all_garment_types_present(self, reference):
        for gt in GarmentType:
            assert gt in reference.garment_types

    def test_all_body_shapes_present(self, reference):
        for bs in BodyShape:
            assert bs in reference.body_shapes

    def test_all_necklines_present(self, reference):
        for nt in NecklineType:
            assert nt in reference.necklines

    def test_all_sleeve_types_present(self, reference):
        for st in SleeveType:
            assert st in reference.sleeve_constructions

    def test_known_components_present(self, reference):
        for name in KNOWN_COMPONENTS:
            assert name in reference.components

    def test_tables_read_only(self, reference):
        with pytest.raises(TypeError):
            reference.defaults["hat_height_cm"] = 30  # type: ignore[index]


# ── Queries ────────────────────────────────────────────────────────────────────


class TestGarmentRequirements:
    def test_sweater_required(self, reference):
        assert set(reference.garment(GarmentType.SWEATER).required_measurements) == {
            "bust",
            "length",
            "armLength",
            "upperArmCircumference",
        }

    def test_vest_required(self, reference):
        assert set(reference.garment(GarmentType.VEST).required_measurements) == {"bust", "length"}

    def test_hat_required(self, reference):
        assert reference.garment(GarmentType.HAT).required_measurements == ("headCircumference",)

    @pytest.mark.parametrize("gt", [GarmentType.SCARF, GarmentType.SHAWL])
    def test_flat_pieces_required(self, reference, gt):
        assert set(reference.garment(gt).required_measurements) == {"width", "length"}

    def test_crown_points(self, reference):
        assert reference.garment(GarmentType.HAT).crown_decrease_points == 6
        assert reference.garment(GarmentType.BEANIE).crown_decrease_points == 8

    def test_has_construction(self, reference):
        assert reference.garment(GarmentType.SWEATER).has_construction
        assert not reference.garment(GarmentType.HAT).has_construction


class TestCompatibility:
    def test_sweater_accepts_raglan(self, reference):
        assert reference.is_construction_compatible(GarmentType.SWEATER, ConstructionMethod.RAGLAN)

    def test_vest_rejects_dolman(self, reference):
        assert not reference.is_construction_compatible(
            GarmentType.VEST, ConstructionMethod.DOLMAN
        )

    def test_fitted_rejects_drop_shoulder(self, reference):
        assert not reference.is_body_shape_compatible(
            BodyShape.FITTED_SHAPED_WAIST, ConstructionMethod.DROP_SHOULDER
        )

    def test_straight_accepts_everything(self, reference):
        for method in ConstructionMethod:
            assert reference.is_body_shape_compatible(BodyShape.STRAIGHT, method)


class TestLookups:
    def test_yarn_factors(self, reference):
        factors = {k: v.factor_m_per_m2 for k, v in reference.yarn_weights.items()}
        assert factors == {
            "lace": 1400,
            "fingering": 1200,
            "dk": 1000,
            "worsted": 800,
            "bulky": 600,
            "superBulky": 400,
            "jumbo": 300,
        }
        assert reference.default_yarn_factor == 800
        assert reference.yarn_buffer == pytest.approx(0.15)

    def test_unknown_yarn_weight(self, reference):
        assert reference.yarn_weight("cobweb") is None

    def test_sleeve_length_ratios(self, reference):
        assert reference.sleeve_lengths[SleeveLength.CAP] == pytest.approx(0.15)
        assert reference.sleeve_lengths[SleeveLength.LONG] == pytest.approx(0.95)
        assert SleeveLength.CUSTOM not in reference.sleeve_lengths

    def test_limits(self, reference):
        assert reference.limits.ease_percent_min == -50
        assert reference.limits.ease_absolute_max_cm == 100
        assert reference.limits.minimum_finished_fraction == pytest.approx(0.5)

    def test_sleeve_type_invalidates_armhole(self, reference):
        assert reference.invalidations["sleeves.sleeveType"] == ("armhole",)


# ── Corrupted data ─────────────────────────────────────────────────────────────


class TestCorruptedData:
    def test_alternate_directory_loads(self, data_dir):
        ref = ReferenceData(data_dir)
        assert ref.garment(GarmentType.SCARF).required_measurements == ("width", "length")

    def test_missing_file(self, data_dir):
        (data_dir / "limits.yaml").unlink()
        with pytest.raises(ConfigurationError, match="not found"):
            ReferenceData(data_dir)

    def test_unparseable_yaml(self, data_dir):
        (data_dir / "body_shapes.yaml").write_text("entries: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Failed to parse"):
            ReferenceData(data_dir)

    def test_missing_garment_type(self, data_dir):
        _edit_yaml(
            data_dir / "garment_types.yaml",
            lambda d: d.update(entries=[e for e in d["entries"] if e["id"] != "shawl"]),
        )
        with pytest.raises(ConfigurationError, match="garment type 'shawl'"):
            ReferenceData(data_dir)

    def test_unknown_enum_value(self, data_dir):
        _edit_yaml(
            data_dir / "body_shapes.yaml",
            lambda d: d["entries"].append({"id": "hourglass", "construction_methods": []}),
        )
        with pytest.raises(ConfigurationError, match="Malformed reference data"):
            ReferenceData(data_dir)

    def test_undefined_dependency(self, data_dir):
        def edit(d):
            d["entries"][1]["depends_on"] = ["collar"]

        _edit_yaml(data_dir / "components.yaml", edit)
        with pytest.raises(ConfigurationError, match="'collar' is not defined"):
            ReferenceData(data_dir)

    def test_missing_default(self, data_dir):
        _edit_yaml(data_dir / "proportions.yaml", lambda d: d["defaults"].pop("hat_height_cm"))
        with pytest.raises(ConfigurationError, match="hat_height_cm"):
            ReferenceData(data_dir)

    def test_bad_default_construction(self, data_dir):
        def edit(d):
            d["entries"][2]["default_construction_method"] = "raglan"

        _edit_yaml(data_dir / "garment_types.yaml", edit)
        with pytest.raises(ConfigurationError, match="not in construction_methods"):
            ReferenceData(data_dir)

    def test_errors_listed_together(self, data_dir):
        def edit(d):
            d["entries"] = [e for e in d["entries"] if e["id"] not in ("hat", "scarf")]

        _edit_yaml(data_dir / "garment_types.yaml", edit)
        with pytest.raises(ConfigurationError) as excinfo:
            ReferenceData(data_dir)
        message = str(excinfo.value)
        assert "garment type 'hat'" in message
        assert "garment type 'scarf'" in message
