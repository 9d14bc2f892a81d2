"""
recommend.py – Rank rail cars for a piece of freight.

Cars the freight does not fit in (any dimension or the weight over the car
limit) are rejected outright.  Survivors are scored 0–100:

    score = 85 * dimension_fit + 15 * weight_fit

* ``dimension_fit`` is the mean of the three dimensional utilisations
  averaged with the smallest one, so one axis with a lot of slack drags the
  score down hard.
* ``weight_fit`` climbs linearly to 1.0 at 90 % of the car's max weight and
  falls back to 0 at 100 %.

A *perfect fit* has at most ``perfect_fit_slack`` (10 %) slack on every axis
and weight utilisation at or below ``perfect_fit_max_weight_utilization``
(90 %).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .car_types import get_car_types_for_operator
from .config import EngineSettings, get_default_settings
from .inputs import FreightSpec
from .models import CarType, Operator

logger = logging.getLogger("freightrail.recommend")

DIMENSION_WEIGHT = 85
WEIGHT_WEIGHT = 15


@dataclass(frozen=True)
class CarRecommendation:
    operator: Operator
    car: CarType
    score: float
    is_perfect_fit: bool


# ────────────────────────────────────────────────────────────────────────────
# scoring
# ────────────────────────────────────────────────────────────────────────────
def _utilisation(freight: FreightSpec, car: CarType) -> Tuple[Tuple[float, float, float], float]:
    dims = (
        freight.length_ft / car.length_ft,
        freight.width_ft / car.width_ft,
        freight.height_ft / car.height_ft,
    )
    return dims, freight.weight_lb / car.max_weight_lb


def fits(freight: FreightSpec, car: CarType) -> bool:
    """Hard constraint: every dimension and the weight within the car's limits."""
    return (
        freight.length_ft <= car.length_ft
        and freight.width_ft <= car.width_ft
        and freight.height_ft <= car.height_ft
        and freight.weight_lb <= car.max_weight_lb
    )


def score_car(freight: FreightSpec, car: CarType, settings: Optional[EngineSettings] = None) -> Tuple[float, bool]:
    """(score, is_perfect_fit) for a car the freight is known to fit in."""
    settings = settings or get_default_settings()
    dims, weight_util = _utilisation(freight, car)

    dim_fit = (sum(dims) / len(dims) + min(dims)) / 2
    limit = settings.perfect_fit_max_weight_utilization
    if weight_util <= limit:
        weight_fit = weight_util / limit
    else:
        weight_fit = max(0.0, 1 - (weight_util - limit) / (1 - limit))

    score = round(DIMENSION_WEIGHT * dim_fit + WEIGHT_WEIGHT * weight_fit, 2)
    perfect = min(dims) >= 1 - settings.perfect_fit_slack and weight_util <= limit
    return score, perfect


# ────────────────────────────────────────────────────────────────────────────
# public API
# ────────────────────────────────────────────────────────────────────────────
def get_recommended_car_types(
    freight: FreightSpec,
    operators: Iterable = (),
    catalog: Optional[Mapping[Operator, Sequence[CarType]]] = None,
    settings: Optional[EngineSettings] = None,
) -> List[CarRecommendation]:
    """
    Every (operator, car) pair the freight fits in, best first.

    Ties are broken by operator code then car id.  Incomplete freight (any
    dimension or the weight ≤ 0) gives ``[]``.
    """
    settings = settings or get_default_settings()
    freight = freight.to_imperial()
    if not freight.is_complete:
        return []

    unique_ops: List = []
    for op in operators:
        key = Operator.coerce(op) or str(op).strip().upper()
        if key not in unique_ops:
            unique_ops.append(key)

    results: List[CarRecommendation] = []
    for op in unique_ops:
        cars = get_car_types_for_operator(op, catalog, settings.default_catalog_operator)
        for car in cars:
            try:
                if not fits(freight, car):
                    continue
                score, perfect = score_car(freight, car, settings)
            except (TypeError, ValueError, ArithmeticError, AttributeError) as exc:
                logger.warning("Skipping car %r for %s: %s", getattr(car, "id", car), op, exc)
                continue
            results.append(CarRecommendation(op, car, score, perfect))

    results.sort(key=lambda r: (-r.score, str(r.operator), r.car.id))
    logger.debug("%d car(s) fit across %d operator(s)", len(results), len(unique_ops))
    return results


def get_best_car_type_for_freight(
    freight: FreightSpec,
    operators: Iterable = (),
    catalog: Optional[Mapping[Operator, Sequence[CarType]]] = None,
    settings: Optional[EngineSettings] = None,
) -> Optional[CarRecommendation]:
    ranked = get_recommended_car_types(freight, operators, catalog, settings)
    return ranked[0] if ranked else None
