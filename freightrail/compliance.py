"""
compliance.py – Approval-likelihood score for freight on a car over a route.

Five factors, each scored 0–100, combined with fixed weights:

    Dimension Compliance   0.40
    Weight Compliance      0.25
    Center of Gravity      0.20
    Operator Rules         0.10
    Route Compatibility    0.05

Each critical issue (dimension or weight hard failure) takes a further 20
points off the weighted sum, floored at 0.  Recommendations are derived
from the factors on every call.
"""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from .config import EngineSettings
from .freight import Point3, calculate_center_of_gravity, freight_center
from .inputs import FreightSpec, Placement
from .models import CarType, Operator, Route

logger = logging.getLogger("freightrail.compliance")

CRITICAL_ISSUE_PENALTY = 20
LOW_FACTOR_SCORE = 70

FACTOR_WEIGHTS = {
    "Dimension Compliance": 0.4,
    "Weight Compliance": 0.25,
    "Center of Gravity": 0.2,
    "Operator Rules": 0.1,
    "Route Compatibility": 0.05,
}


class OperatorRules(NamedTuple):
    max_height_ft: float
    preferred_weight_lb: tuple


OPERATOR_RULES: Dict[Operator, OperatorRules] = {
    Operator.BNSF: OperatorRules(17, (50_000, 200_000)),
    Operator.UP: OperatorRules(17, (40_000, 220_000)),
    Operator.CSX: OperatorRules(16, (30_000, 200_000)),
    Operator.NS: OperatorRules(16, (35_000, 210_000)),
    Operator.CN: OperatorRules(17, (40_000, 200_000)),
    Operator.CP: OperatorRules(17, (40_000, 200_000)),
}


class ComplianceCategory(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]

    @classmethod
    def for_probability(cls, probability: float) -> "ComplianceCategory":
        if probability >= 85:
            return cls.HIGH
        if probability >= 70:
            return cls.MEDIUM
        if probability >= 50:
            return cls.LOW
        return cls.VERY_LOW


_CATEGORY_COLORS = {
    ComplianceCategory.HIGH: "#10B981",
    ComplianceCategory.MEDIUM: "#F59E0B",
    ComplianceCategory.LOW: "#EF4444",
    ComplianceCategory.VERY_LOW: "#DC2626",
}


@dataclass(frozen=True)
class ComplianceFactor:
    name: str
    score: float
    weight: float
    details: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Recommendation:
    priority: str      # Critical | High | Medium
    action: str
    items: List[str]


@dataclass(frozen=True)
class ComplianceResult:
    """
    ``category`` is taken from the unrounded score, so 84.6 reports as
    ``probability=85`` with category Medium.
    """

    probability: int
    category: ComplianceCategory
    factors: List[ComplianceFactor]
    warnings: List[str]
    critical_issues: List[str]
    recommendations: List[Recommendation]

    @property
    def color(self) -> str:
        return self.category.color

    def factor(self, name: str) -> Optional[ComplianceFactor]:
        return next((f for f in self.factors if f.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        data["color"] = self.color
        return data


# factor scorers return (score, details, issues-or-warnings)
class _Scored(NamedTuple):
    score: float
    details: List[str]
    findings: List[str]


# ────────────────────────────────────────────────────────────────────────────
# factor scorers
# ────────────────────────────────────────────────────────────────────────────
def dimension_compliance(freight: FreightSpec, car: CarType) -> _Scored:
    score, details, issues = 100.0, [], []

    if freight.length_ft > car.length_ft:
        score -= 40
        issues.append(f"Freight length ({freight.length_ft}ft) exceeds car length ({car.length_ft}ft)")
        details.append(f"Length: {car.length_ft / freight.length_ft * 100:.1f}% fit")
    else:
        util = freight.length_ft / car.length_ft * 100
        details.append(f"Length: {util:.1f}% utilized")
        if util > 95:
            score -= 5

    if freight.width_ft > car.width_ft:
        score -= 30
        issues.append(f"Freight width ({freight.width_ft}ft) exceeds car width ({car.width_ft}ft)")
        details.append(f"Width: {car.width_ft / freight.width_ft * 100:.1f}% fit")
    else:
        details.append(f"Width: {freight.width_ft / car.width_ft * 100:.1f}% utilized")

    if freight.height_ft > car.height_ft:
        score -= 30
        issues.append(f"Freight height ({freight.height_ft}ft) exceeds available height ({car.height_ft}ft)")
        details.append("Height: Exceeds limit")
    else:
        details.append(f"Height: {freight.height_ft / car.height_ft * 100:.1f}% utilized")

    return _Scored(max(0.0, score), details, issues)


def weight_compliance(freight: FreightSpec, car: CarType) -> _Scored:
    if freight.weight_lb > car.max_weight_lb:
        return _Scored(
            0.0,
            ["Weight: Exceeds capacity"],
            [f"Freight weight ({freight.weight_lb:,.0f}lbs) exceeds car max ({car.max_weight_lb:,.0f}lbs)"],
        )
    util = freight.weight_lb / car.max_weight_lb * 100
    score = 100.0
    if util > 90:
        score -= 10
    elif util < 30:
        score -= 5
    return _Scored(score, [f"Weight: {util:.1f}% of capacity"], [])


def _graduated(offset: float, threshold: float, cap: float) -> float:
    if threshold <= 0:
        return cap
    return min(cap, cap * (offset - threshold) / threshold)


def cg_compliance(
    freight: FreightSpec,
    car: CarType,
    placement: Placement,
    settings: Optional[EngineSettings] = None,
) -> _Scored:
    try:
        combined = calculate_center_of_gravity(freight, car, placement, settings).combined_cg
    except (TypeError, ValueError, ArithmeticError, AttributeError) as exc:
        logger.warning("Could not calculate center of gravity, using fallback: %s", exc)
        combined = freight_center(freight, car, placement)

    return _score_cg(combined, car)


def _score_cg(combined: Point3, car: CarType) -> _Scored:
    score, details, warnings = 100.0, [], []

    long_off, long_max = abs(combined.x), car.length_ft * 0.1
    if long_off > long_max:
        score -= _graduated(long_off, long_max, 30)
        warnings.append(f"Longitudinal CG offset ({long_off:.1f}ft) may affect stability")
        details.append(f"Longitudinal CG: {long_off:.1f}ft offset")
    else:
        details.append(f"Longitudinal CG: {long_off:.1f}ft (within limits)")

    lat_off, lat_max = abs(combined.y), car.width_ft * 0.05
    if lat_off > lat_max:
        score -= _graduated(lat_off, lat_max, 20)
        warnings.append(f"Lateral CG offset ({lat_off:.1f}ft) may affect stability")
        details.append(f"Lateral CG: {lat_off:.1f}ft offset")
    else:
        details.append(f"Lateral CG: {lat_off:.1f}ft (within limits)")

    deck = getattr(car, "deck_height_ft", 0) or 0
    if combined.z > car.height_ft + deck - 2:
        score -= 15
        warnings.append(f"High center of gravity ({combined.z:.1f}ft) may affect stability")
        details.append(f"Vertical CG: {combined.z:.1f}ft (high)")
    else:
        details.append(f"Vertical CG: {combined.z:.1f}ft (acceptable)")

    return _Scored(max(0.0, score), details, warnings)


def operator_compliance(freight: FreightSpec, car: CarType, operator) -> _Scored:
    op = Operator.coerce(operator)
    rules = OPERATOR_RULES.get(op, OPERATOR_RULES[Operator.BNSF])
    name = str(op or operator)
    score, details, warnings = 100.0, [], []

    if freight.height_ft > rules.max_height_ft:
        score -= 15
        warnings.append(f"Freight height exceeds {name} maximum ({rules.max_height_ft}ft)")
        details.append(f"Height: Exceeds {name} limit")
    else:
        details.append(f"Height: Within {name} limits")

    low, high = rules.preferred_weight_lb
    if freight.weight_lb < low:
        score -= 5
        warnings.append(f"Freight weight below {name} preferred range")
        details.append("Weight: Below preferred range")
    elif freight.weight_lb > high:
        score -= 10
        warnings.append(f"Freight weight above {name} preferred range")
        details.append("Weight: Above preferred range")
    else:
        details.append(f"Weight: Within {name} preferred range")

    if car.name == "Flatcar" and freight.height_ft > 12:
        details.append("Car type: Suitable for tall freight")
    elif car.name == "Boxcar" and freight.height_ft < 10:
        details.append("Car type: Good fit for standard freight")

    return _Scored(max(0.0, score), details, warnings)


def route_compliance(freight: FreightSpec, route: Optional[Route], operator) -> _Scored:
    if route is None:
        return _Scored(100.0, ["Route information not available"], [])

    name = str(Operator.coerce(operator) or operator)
    score, details = 100.0, []
    if route.uses_operator(operator):
        details.append(f"Operator: {name} is part of route")
    else:
        score -= 20
        details.append(f"Operator: {name} not in selected route")

    if route.total_distance > 2000 and freight.weight_lb > 200_000:
        score -= 5
        details.append("Route: Long distance with heavy freight")

    return _Scored(max(0.0, score), details, [])


# ────────────────────────────────────────────────────────────────────────────
# aggregation
# ────────────────────────────────────────────────────────────────────────────
def generate_recommendations(
    factors: List[ComplianceFactor], critical_issues: List[str], warnings: List[str]
) -> List[Recommendation]:
    recs = []
    if critical_issues:
        recs.append(Recommendation(
            "Critical", "Fix dimension or weight issues before submission", list(critical_issues)
        ))
    low = [f for f in factors if f.score < LOW_FACTOR_SCORE]
    if low:
        recs.append(Recommendation(
            "High",
            "Consider adjusting these factors to improve compliance",
            [f"{f.name}: {f.score:g}%" for f in low],
        ))
    if warnings:
        recs.append(Recommendation("Medium", "Review these warnings", list(warnings)))
    return recs


def calculate_compliance_probability(
    freight: FreightSpec,
    car: CarType,
    placement: Optional[Placement] = None,
    route: Optional[Route] = None,
    operator=Operator.BNSF,
    settings: Optional[EngineSettings] = None,
) -> ComplianceResult:
    freight = freight.to_imperial()
    placement = placement or Placement()

    dims = dimension_compliance(freight, car)
    weight = weight_compliance(freight, car)
    cg = cg_compliance(freight, car, placement, settings)
    rules = operator_compliance(freight, car, operator)
    route_fit = route_compliance(freight, route, operator)

    scored = [
        ("Dimension Compliance", dims),
        ("Weight Compliance", weight),
        ("Center of Gravity", cg),
        ("Operator Rules", rules),
        ("Route Compatibility", route_fit),
    ]
    factors = [
        ComplianceFactor(name, s.score, FACTOR_WEIGHTS[name], s.details) for name, s in scored
    ]
    critical = dims.findings + weight.findings
    warnings = cg.findings + rules.findings

    weighted = sum(f.score * f.weight for f in factors)
    probability = max(0.0, weighted - CRITICAL_ISSUE_PENALTY * len(critical))
    category = ComplianceCategory.for_probability(probability)
    probability = int(math.floor(probability + 0.5))

    logger.debug(
        "Compliance %s on %s: %d%% (%s), %d critical, %d warning(s)",
        freight.description or "freight", car.id, probability, category.value, len(critical), len(warnings),
    )
    return ComplianceResult(
        probability=probability,
        category=category,
        factors=factors,
        warnings=warnings,
        critical_issues=critical,
        recommendations=generate_recommendations(factors, critical, warnings),
    )
