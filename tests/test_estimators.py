from datetime import date, datetime

import pytest

from freightrail.cost import compare_route_costs, estimate_route_cost, format_cost_estimate
from freightrail.models import Connection, Operator, Route, Season, Station
from freightrail.network import RailNetwork
from freightrail.routing import build_route_details
from freightrail.transit import (
    compare_transit_times,
    estimate_transit_time,
    format_transit_time,
    get_current_season,
)

EMPTY_ROUTE = Route(
    path=(), segments=(), total_distance=0, operators=(), transfer_points=(), states=(), total_cost=0.0
)


@pytest.fixture
def chi_kc(network):
    return build_route_details(["CHI", "KC"], network)


@pytest.fixture
def interline(diamond):
    return build_route_details(["A", "B", "D"], diamond)


# ── cost ─────────────────────────────────────────────────────────────────────
def test_empty_route_costs_nothing():
    estimate = estimate_route_cost(EMPTY_ROUTE, 1000)
    assert estimate.total_cost == 0
    assert estimate.breakdown == []


def test_single_operator_cost(chi_kc):
    estimate = estimate_route_cost(chi_kc, 100_000)
    assert estimate.weight_in_tons == 50
    assert estimate.base_cost == pytest.approx(1125.0)
    assert estimate.curve_penalty == pytest.approx(50.0)
    assert estimate.discount == pytest.approx(112.5)
    assert estimate.surcharge == 0
    assert estimate.total_cost == pytest.approx(1062.5)
    assert estimate.cost_per_ton == pytest.approx(21.25)
    assert len(estimate.breakdown) == 1


def test_interline_cost_includes_transfer_and_surcharge(interline):
    estimate = estimate_route_cost(interline, 20_000)
    assert estimate.transfer_points == 1
    assert estimate.transfer_cost == 500
    assert estimate.base_cost == pytest.approx(87.0)
    assert estimate.discount == pytest.approx(4.35)
    assert estimate.surcharge == pytest.approx(0.84)
    assert estimate.total_cost == pytest.approx(603.49)


def test_cost_does_not_mutate_route(chi_kc):
    before = chi_kc.to_dict()
    estimate_route_cost(chi_kc, 100_000)
    estimate_transit_time(chi_kc, Season.WINTER)
    assert chi_kc.to_dict() == before


def test_compare_route_costs(chi_kc, interline):
    pairs = compare_route_costs([chi_kc, interline], 20_000)
    totals = [est.total_cost for _, est in pairs]
    assert totals == sorted(totals)
    assert compare_route_costs([], 1000) == []


def test_format_cost_estimate(chi_kc):
    formatted = format_cost_estimate(estimate_route_cost(chi_kc, 100_000))
    assert formatted["total"] == "$1,062.50"
    assert formatted["discount"] == "-$112.50"


# ── transit ──────────────────────────────────────────────────────────────────
def test_empty_route_transit():
    estimate = estimate_transit_time(EMPTY_ROUTE)
    assert estimate.total_hours == 0
    assert estimate.estimated_arrival is None
    assert format_transit_time(estimate)["hours"] == "N/A"


def test_transit_summer_and_winter(chi_kc):
    summer = estimate_transit_time(chi_kc, Season.SUMMER)
    # 500 mi at 25 mph + 10 %, plus 5 curve points
    assert summer.total_hours == pytest.approx(20.7)
    assert summer.seasonal_delay == 0

    winter = estimate_transit_time(chi_kc, "winter")
    assert winter.total_hours == pytest.approx(23.8)
    assert winter.seasonal_delay == pytest.approx(3.1)


def test_season_names_are_lenient(chi_kc):
    assert estimate_transit_time(chi_kc, " Winter ").total_hours == pytest.approx(23.8)
    bogus = estimate_transit_time(chi_kc, "bogus")
    assert bogus.seasonal_delay == 0
    assert bogus.total_hours == pytest.approx(20.7)


def test_transfer_time(interline):
    estimate = estimate_transit_time(interline)
    assert estimate.transfer_time == 12
    assert estimate.curve_delay == 1


def test_business_days_skip_weekends():
    net = RailNetwork(
        [Station("X", "X", 40, -100, "XX", "BNSF"), Station("Y", "Y", 40, -80, "XX", "BNSF")],
        [Connection("X", "Y", 5000, Operator.BNSF, 1)],
    )
    route = build_route_details(["X", "Y"], net)
    with_weekends = estimate_transit_time(route, include_weekends=True)
    without = estimate_transit_time(route, include_weekends=False)
    assert with_weekends.total_days == pytest.approx(7.3)
    assert with_weekends.business_days == with_weekends.total_days
    assert without.business_days == pytest.approx(5.3)


def test_arrival_only_with_departure(chi_kc):
    assert estimate_transit_time(chi_kc).estimated_arrival is None
    departure = datetime(2024, 7, 1, 8, 0)
    arrival = estimate_transit_time(chi_kc, departure=departure).estimated_arrival
    assert departure < arrival < datetime(2024, 7, 2, 8, 0)
    assert format_transit_time(estimate_transit_time(chi_kc, departure=departure))["arrival"] != "N/A"


def test_compare_transit_times(chi_kc, interline):
    pairs = compare_transit_times([interline, chi_kc])
    hours = [est.total_hours for _, est in pairs]
    assert hours == sorted(hours)


@pytest.mark.parametrize(
    "month,season",
    [(1, Season.WINTER), (2, Season.WINTER), (3, Season.SPRING), (5, Season.SPRING),
     (6, Season.SUMMER), (8, Season.SUMMER), (9, Season.FALL), (11, Season.FALL), (12, Season.WINTER)],
)
def test_get_current_season(month, season):
    assert get_current_season(date(2024, month, 15)) is season
