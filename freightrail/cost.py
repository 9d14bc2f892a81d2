"""
cost.py – Linear shipping-cost model over a finalised Route.

    total = base + transfers * $500 + curve_score * $10
            - base * distance_discount + Σ operator_subtotal * surcharge

``base`` is Σ segment miles × operator rate ($/mile/ton) × tons.  The
discount bracket is picked by the route's total distance and applied to the
whole base cost.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .models import Operator, Route

logger = logging.getLogger("freightrail.cost")

# $ per mile per ton
OPERATOR_BASE_RATES: Dict[Operator, float] = {
    Operator.BNSF: 0.045,
    Operator.UP: 0.042,
    Operator.CSX: 0.040,
    Operator.NS: 0.041,
    Operator.CN: 0.043,
    Operator.CP: 0.044,
    Operator.KCS: 0.039,
    Operator.KCSM: 0.039,
}
DEFAULT_RATE = 0.040

OPERATOR_SURCHARGES: Dict[Operator, float] = {
    Operator.UP: 0.02,
    Operator.NS: 0.01,
    Operator.CN: 0.03,
    Operator.CP: 0.02,
}

TRANSFER_COST = 500.0
CURVE_COST = 10.0
POUNDS_PER_TON = 2000.0

# (minimum total miles, share) – highest matching bracket wins
DISTANCE_BRACKETS: Tuple[Tuple[int, float], ...] = ((1000, 0.15), (500, 0.10), (100, 0.05))


def distance_bracket(total_miles: float) -> float:
    """Discount (cost) or speed bonus (transit) share for a route length."""
    for threshold, share in DISTANCE_BRACKETS:
        if total_miles >= threshold:
            return share
    return 0.0


@dataclass(frozen=True)
class SegmentCost:
    segment: int
    operator: Operator
    distance: float
    rate: float
    cost: float


@dataclass(frozen=True)
class CostEstimate:
    total_cost: float = 0.0
    base_cost: float = 0.0
    transfer_cost: float = 0.0
    curve_penalty: float = 0.0
    discount: float = 0.0
    surcharge: float = 0.0
    cost_per_mile: float = 0.0
    cost_per_ton: float = 0.0
    weight_in_tons: float = 0.0
    total_distance: int = 0
    transfer_points: int = 0
    total_curves: float = 0.0
    breakdown: List[SegmentCost] = field(default_factory=list)

    def __str__(self):
        return (
            f"Base: ${self.base_cost:,.2f}, "
            f"Transfers: ${self.transfer_cost:,.2f}, "
            f"Curves: ${self.curve_penalty:,.2f}, "
            f"Discount: -${self.discount:,.2f}, "
            f"Surcharge: +${self.surcharge:,.2f}, "
            f"Total: ${self.total_cost:,.2f}"
        )


def estimate_route_cost(route: Route, weight_lb: float = 0.0) -> CostEstimate:
    """
    Cost of moving ``weight_lb`` pounds over ``route``.

    A route without segments gives an all-zero estimate.  The route is
    never modified.
    """
    if route is None or not route.segments:
        return CostEstimate()

    tons = weight_lb / POUNDS_PER_TON
    breakdown: List[SegmentCost] = []
    subtotals: Dict[Operator, float] = {}
    for idx, seg in enumerate(route.segments, start=1):
        rate = OPERATOR_BASE_RATES.get(seg.operator, DEFAULT_RATE)
        cost = seg.distance_miles * rate * tons
        breakdown.append(SegmentCost(idx, seg.operator, seg.distance_miles, rate, cost))
        subtotals[seg.operator] = subtotals.get(seg.operator, 0.0) + cost

    base = sum(b.cost for b in breakdown)
    transfers = len(route.transfer_points)
    transfer_cost = transfers * TRANSFER_COST
    curve_penalty = route.total_curve_score * CURVE_COST
    discount = base * distance_bracket(route.total_distance)
    surcharge = sum(sub * OPERATOR_SURCHARGES.get(op, 0.0) for op, sub in subtotals.items())

    total = base + transfer_cost + curve_penalty - discount + surcharge
    estimate = CostEstimate(
        total_cost=round(total, 2),
        base_cost=round(base, 2),
        transfer_cost=round(transfer_cost, 2),
        curve_penalty=round(curve_penalty, 2),
        discount=round(discount, 2),
        surcharge=round(surcharge, 2),
        cost_per_mile=round(total / route.total_distance, 2) if route.total_distance > 0 else 0.0,
        cost_per_ton=round(total / tons, 2) if tons > 0 else 0.0,
        weight_in_tons=round(tons, 2),
        total_distance=route.total_distance,
        transfer_points=transfers,
        total_curves=route.total_curve_score,
        breakdown=breakdown,
    )
    logger.debug("Cost %s: %s", "-".join(route.station_codes), estimate)
    return estimate


def compare_route_costs(routes: Iterable[Route], weight_lb: float = 0.0) -> List[Tuple[Route, CostEstimate]]:
    """(route, estimate) pairs, cheapest first."""
    pairs = [(r, estimate_route_cost(r, weight_lb)) for r in routes or ()]
    return sorted(pairs, key=lambda p: p[1].total_cost)


def format_cost_estimate(estimate: CostEstimate) -> Dict[str, str]:
    return {
        "total": f"${estimate.total_cost:,.2f}",
        "base": f"${estimate.base_cost:,.2f}",
        "transfer": f"${estimate.transfer_cost:,.2f}",
        "curve": f"${estimate.curve_penalty:,.2f}",
        "discount": f"-${estimate.discount:,.2f}",
        "surcharge": f"+${estimate.surcharge:,.2f}",
        "per_mile": f"${estimate.cost_per_mile:,.2f}",
        "per_ton": f"${estimate.cost_per_ton:,.2f}",
    }
