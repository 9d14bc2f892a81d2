from types import SimpleNamespace

import pytest

import freightrail.compliance as compliance
from freightrail.compliance import (
    ComplianceCategory,
    calculate_compliance_probability,
    operator_compliance,
    route_compliance,
)
from freightrail.freight import Point3, freight_center
from freightrail.inputs import FreightSpec, Placement
from freightrail.models import Operator
from freightrail.routing import build_route_details


@pytest.fixture
def chi_kc(network):
    return build_route_details(["CHI", "KC"], network)


def test_clean_load_scores_high(freight, boxcar, centred, chi_kc):
    result = calculate_compliance_probability(freight, boxcar, centred, chi_kc, "BNSF")
    assert [f.name for f in result.factors] == [
        "Dimension Compliance",
        "Weight Compliance",
        "Center of Gravity",
        "Operator Rules",
        "Route Compatibility",
    ]
    assert sum(f.weight for f in result.factors) == pytest.approx(1.0)
    # weight utilisation is under 30 %
    assert result.factor("Weight Compliance").score == 95
    assert result.probability == 99
    assert result.category is ComplianceCategory.HIGH
    assert result.color == "#10B981"
    assert result.critical_issues == []


def test_overweight_zeroes_weight_factor(boxcar, centred, chi_kc):
    freight = FreightSpec(length=40, width=8, height=10, weight=300_000)
    result = calculate_compliance_probability(freight, boxcar, centred, chi_kc, "BNSF")

    assert result.factor("Weight Compliance").score == 0
    assert len(result.critical_issues) == 1
    assert result.probability == 54
    assert result.category is ComplianceCategory.LOW
    assert result.recommendations[0].priority == "Critical"


@pytest.mark.parametrize("weight", [220_000, 220_001, 500_000])
def test_weight_past_car_max(boxcar, weight):
    freight = FreightSpec(length=40, width=8, height=10, weight=weight)
    result = calculate_compliance_probability(freight, boxcar)
    over = weight > boxcar.max_weight_lb
    assert (result.factor("Weight Compliance").score == 0) is over
    assert bool(result.critical_issues) is over


def test_dimension_failures_stack(boxcar):
    freight = FreightSpec(length=100, width=12, height=20, weight=50_000)
    result = calculate_compliance_probability(freight, boxcar)
    assert result.factor("Dimension Compliance").score == 0
    assert len(result.critical_issues) == 3
    assert result.probability == 0
    assert result.category is ComplianceCategory.VERY_LOW


def test_tight_length_penalty(boxcar):
    freight = FreightSpec(length=58, width=8, height=10, weight=100_000)
    assert calculate_compliance_probability(freight, boxcar).factor("Dimension Compliance").score == 95


def test_cg_fallback_when_calculation_fails(freight, boxcar, centred, monkeypatch, caplog):
    def boom(*args, **kwargs):
        raise ValueError("malformed car")

    monkeypatch.setattr(compliance, "calculate_center_of_gravity", boom)
    result = calculate_compliance_probability(freight, boxcar, centred)
    assert result.factor("Center of Gravity").score == 100
    assert "using fallback" in caplog.text


def test_mapping_placement_matches_model(freight, boxcar):
    as_dict = calculate_compliance_probability(freight, boxcar, {"x": 5, "y": 0})
    assert as_dict == calculate_compliance_probability(freight, boxcar, Placement(x=5))


def test_malformed_placement_falls_back(freight, boxcar, caplog):
    result = calculate_compliance_probability(freight, boxcar, {"x": "forward", "y": 0})
    assert "using fallback" in caplog.text
    assert result.factor("Center of Gravity").score == 100
    assert result.probability > 0


def test_car_without_deck_height_falls_back(freight, caplog):
    bare = SimpleNamespace(
        id="bare_flat", name="Bare flat", length_ft=60, width_ft=9.5, height_ft=15, max_weight_lb=220_000
    )
    result = calculate_compliance_probability(freight, bare, Placement())
    assert "using fallback" in caplog.text
    cg = result.factor("Center of Gravity")
    assert cg.score == 100
    assert "Vertical CG: 5.0ft (acceptable)" in cg.details


def test_freight_center_tolerates_loose_inputs(freight):
    bare = SimpleNamespace(length_ft=60, width_ft=9.5, height_ft=15)
    assert freight_center(freight, bare, {"x": 2, "y": -1}) == Point3(2.0, -1.0, 5.0)
    assert freight_center(freight, bare, None) == Point3(0.0, 0.0, 5.0)
    assert freight_center(freight, bare, {"x": None}) == Point3(0.0, 0.0, 5.0)


def test_off_centre_load_is_penalised_gradually(boxcar):
    freight = FreightSpec(length=20, width=4, height=8, weight=100_000)
    near = calculate_compliance_probability(freight, boxcar, Placement(x=12))
    far = calculate_compliance_probability(freight, boxcar, Placement(x=20))
    near_cg = near.factor("Center of Gravity").score
    far_cg = far.factor("Center of Gravity").score
    assert 70 <= far_cg < near_cg < 100
    assert near.warnings


def test_operator_rules_table(boxcar):
    freight = FreightSpec(length=40, width=8, height=16.5, weight=20_000)
    csx = operator_compliance(freight, boxcar, Operator.CSX)
    bnsf = operator_compliance(freight, boxcar, Operator.BNSF)
    # CSX caps height at 16 ft, weight under both preferred ranges
    assert csx.score == 80
    assert bnsf.score == 95


def test_unknown_operator_uses_bnsf_rules(freight, boxcar):
    heavy = freight.model_copy(update={"weight_lb": 210_000})
    assert operator_compliance(heavy, boxcar, "XYZ").score == operator_compliance(heavy, boxcar, "BNSF").score == 90


def test_route_factor(freight, chi_kc):
    assert route_compliance(freight, None, "BNSF").details == ["Route information not available"]
    assert route_compliance(freight, chi_kc, "BNSF").score == 100
    assert route_compliance(freight, chi_kc, "UP").score == 80


def test_recommendations_and_dict(boxcar):
    freight = FreightSpec(length=40, width=8, height=10, weight=300_000)
    result = calculate_compliance_probability(freight, boxcar, Placement(), None, "CSX")
    priorities = [r.priority for r in result.recommendations]
    assert priorities == ["Critical", "High", "Medium"]
    data = result.to_dict()
    assert data["category"] == result.category.value
    assert data["factors"][1]["score"] == 0


@pytest.mark.parametrize(
    "value,category",
    [(100, "High"), (85, "High"), (84.9, "Medium"), (70, "Medium"), (50, "Low"), (49.9, "Very Low"), (0, "Very Low")],
)
def test_category_thresholds(value, category):
    assert ComplianceCategory.for_probability(value).value == category


def test_compliance_is_idempotent(freight, boxcar, centred, chi_kc):
    a = calculate_compliance_probability(freight, boxcar, centred, chi_kc, "BNSF")
    b = calculate_compliance_probability(freight, boxcar, centred, chi_kc, "BNSF")
    assert a == b
