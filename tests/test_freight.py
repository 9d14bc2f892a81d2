import pytest

from freightrail.config import EngineSettings
from freightrail.freight import (
    calculate_center_of_gravity,
    calculate_optimal_placement,
    validate_placement,
)
from freightrail.inputs import FreightSpec, Placement


def test_valid_centred_load(freight, boxcar, centred):
    cg = calculate_center_of_gravity(freight, boxcar, centred)

    assert cg.validations.is_valid
    assert cg.validations.issues == []
    assert 4 < cg.combined_cg.z < 19
    assert cg.car_weight == 60_000
    assert cg.freight_weight == 50_000
    assert cg.total_weight == 110_000


def test_cg_components(freight, boxcar):
    cg = calculate_center_of_gravity(freight, boxcar, Placement(x=5, y=0.5))
    assert (cg.freight_cg.x, cg.freight_cg.y, cg.freight_cg.z) == (5, 0.5, 9)
    assert (cg.car_cg.x, cg.car_cg.y, cg.car_cg.z) == (0, 0, 11.5)
    assert cg.combined_cg.x == pytest.approx(5 * 50_000 / 110_000)
    assert cg.combined_cg.z == pytest.approx((11.5 * 60_000 + 9 * 50_000) / 110_000)


@pytest.mark.parametrize("weight", [1, 10_000, 50_000, 200_000, 1_000_000])
def test_combined_cg_is_between_car_and_freight(boxcar, weight):
    freight = FreightSpec(length=40, width=8, height=10, weight=weight)
    cg = calculate_center_of_gravity(freight, boxcar)
    low, high = sorted((cg.car_cg.z, cg.freight_cg.z))
    assert low < cg.combined_cg.z < high


def test_oversized_load_has_issues(boxcar, centred):
    freight = FreightSpec(length=100, width=12, height=20, weight=50_000)
    cg = calculate_center_of_gravity(freight, boxcar, centred)
    issues = cg.validations.issues

    assert not cg.validations.is_valid
    assert len(issues) >= 3
    assert any("length" in i for i in issues)
    assert any("width" in i for i in issues)
    assert any("height" in i for i in issues)


def test_offset_past_car_edge(freight, boxcar):
    # half-length slack is (60 - 40) / 2 = 10 ft
    ok = calculate_center_of_gravity(freight, boxcar, Placement(x=10, y=0))
    assert ok.validations.is_valid
    bad = calculate_center_of_gravity(freight, boxcar, Placement(x=10.5, y=0))
    assert "Freight extends beyond car length with current placement" in bad.validations.issues


def test_soft_warnings(boxcar):
    freight = FreightSpec(length=20, width=4, height=14, weight=200_000)
    cg = calculate_center_of_gravity(freight, boxcar, Placement(x=19, y=2.5))
    assert cg.validations.is_valid
    warnings = cg.validations.warnings
    assert any("longitudinally" in w for w in warnings)
    assert any("laterally" in w for w in warnings)


def test_overweight_is_an_issue(boxcar):
    freight = FreightSpec(length=40, width=8, height=10, weight=300_000)
    issues = calculate_center_of_gravity(freight, boxcar).validations.issues
    assert any("weight" in i for i in issues)


def test_car_weight_comes_from_settings(freight, boxcar):
    cg = calculate_center_of_gravity(freight, boxcar, settings=EngineSettings(car_empty_weight_lb=30_000))
    assert cg.car_weight == 30_000
    assert cg.total_weight == 80_000


def test_validate_placement_standalone_matches(freight, boxcar):
    placement = Placement(x=3, y=0.2)
    cg = calculate_center_of_gravity(freight, boxcar, placement)
    assert validate_placement(freight, boxcar, placement) == cg.validations
    assert validate_placement(freight, boxcar, placement, cg) == cg.validations


def test_to_dict(freight, boxcar):
    data = calculate_center_of_gravity(freight, boxcar).to_dict()
    assert set(data["combined_cg"]) == {"x", "y", "z"}
    assert data["validations"]["is_valid"] is True


def test_optimal_placement_is_centred(freight, boxcar):
    placement = calculate_optimal_placement(freight, boxcar)
    assert (placement.x_offset_ft, placement.y_offset_ft) == (0, 0)
