"""
freight.py – Center-of-gravity model for freight loaded on a rail car.

Coordinates are feet, origin at the car centre on the rail:
x along the car (+ forward), y across (+ right), z up from the rail.

Two passes over the same numbers:
    1. ``calculate_center_of_gravity`` derives freight, car and combined CG.
    2. ``validate_placement`` checks those values against the car; it never
       recomputes the CG.

The empty car weight is one constant for every car type
(``EngineSettings.car_empty_weight_lb``, 60 000 lb).  That is a modelling
assumption, not a measured value.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .config import EngineSettings, get_default_settings
from .inputs import FreightSpec, Placement
from .models import CarType

logger = logging.getLogger("freightrail.freight")

# soft limits for the combined CG
LONGITUDINAL_LIMIT = 0.10   # share of car length
LATERAL_LIMIT = 0.05        # share of car width
VERTICAL_MARGIN_FT = 2.0    # below car height + deck height


@dataclass(frozen=True)
class Point3:
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


@dataclass(frozen=True)
class PlacementValidation:
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues


@dataclass(frozen=True)
class CenterOfGravity:
    freight_cg: Point3
    car_cg: Point3
    combined_cg: Point3
    validations: PlacementValidation
    total_weight: float
    car_weight: float
    freight_weight: float

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["validations"]["is_valid"] = self.validations.is_valid
        return data


# ────────────────────────────────────────────────────────────────────────────
# pass 1 – CG
# ────────────────────────────────────────────────────────────────────────────
def _coerce_placement(placement: Any) -> Placement:
    if isinstance(placement, Mapping):
        return Placement.model_validate(placement)
    return placement or Placement()


def _offset(placement: Any, attr: str, key: str) -> float:
    value = getattr(placement, attr, None)
    if value is None and isinstance(placement, Mapping):
        value = placement.get(key, placement.get(attr))
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def freight_center(freight: FreightSpec, car: CarType, placement: Any = None) -> Point3:
    """
    Freight-only CG.  Accepts a Placement, a mapping with x/y keys or
    None; missing offsets and a missing deck height count as 0.
    """
    deck = getattr(car, "deck_height_ft", 0) or 0
    return Point3(
        _offset(placement, "x_offset_ft", "x"),
        _offset(placement, "y_offset_ft", "y"),
        float(deck) + freight.height_ft / 2,
    )


def combine(points: List[Point3], weights: List[float]) -> Point3:
    """Mass-weighted average of ``points``."""
    xyz = np.average(np.vstack([p.as_array() for p in points]), axis=0, weights=weights)
    return Point3(*(float(v) for v in xyz))


def calculate_center_of_gravity(
    freight: FreightSpec,
    car: CarType,
    placement: Optional[Placement] = None,
    settings: Optional[EngineSettings] = None,
) -> CenterOfGravity:
    settings = settings or get_default_settings()
    freight = freight.to_imperial()
    placement = _coerce_placement(placement)

    car_weight = float(settings.car_empty_weight_lb)
    freight_weight = float(freight.weight_lb)

    freight_cg = freight_center(freight, car, placement)
    car_cg = Point3(0.0, 0.0, car.deck_height_ft + car.height_ft / 2)
    combined_cg = combine([car_cg, freight_cg], [car_weight, freight_weight])

    cg = CenterOfGravity(
        freight_cg=freight_cg,
        car_cg=car_cg,
        combined_cg=combined_cg,
        validations=PlacementValidation(),
        total_weight=car_weight + freight_weight,
        car_weight=car_weight,
        freight_weight=freight_weight,
    )
    cg = _with_validations(cg, validate_placement(freight, car, placement, cg))
    logger.debug("Combined CG for %s: %s", car.id, combined_cg)
    return cg


def _with_validations(cg: CenterOfGravity, validations: PlacementValidation) -> CenterOfGravity:
    return CenterOfGravity(
        freight_cg=cg.freight_cg,
        car_cg=cg.car_cg,
        combined_cg=cg.combined_cg,
        validations=validations,
        total_weight=cg.total_weight,
        car_weight=cg.car_weight,
        freight_weight=cg.freight_weight,
    )


# ────────────────────────────────────────────────────────────────────────────
# pass 2 – validation
# ────────────────────────────────────────────────────────────────────────────
def validate_placement(
    freight: FreightSpec,
    car: CarType,
    placement: Optional[Placement] = None,
    cg: Optional[CenterOfGravity] = None,
) -> PlacementValidation:
    """
    Hard issues (freight does not fit or hangs over the car edge) and soft
    warnings (combined CG off-centre or too high).

    ``cg`` is the result of ``calculate_center_of_gravity``; when omitted it
    is computed once here.
    """
    freight = freight.to_imperial()
    placement = _coerce_placement(placement)
    if cg is None:
        return calculate_center_of_gravity(freight, car, placement).validations

    issues: List[str] = []
    warnings: List[str] = []

    if freight.length_ft > car.length_ft:
        issues.append(f"Freight length ({freight.length_ft} ft) exceeds car length ({car.length_ft} ft)")
    if freight.width_ft > car.width_ft:
        issues.append(f"Freight width ({freight.width_ft} ft) exceeds car width ({car.width_ft} ft)")
    if freight.height_ft > car.height_ft:
        issues.append(f"Freight height ({freight.height_ft} ft) exceeds car height ({car.height_ft} ft)")
    if freight.weight_lb > car.max_weight_lb:
        issues.append(
            f"Freight weight ({freight.weight_lb:,.0f} lbs) exceeds car maximum ({car.max_weight_lb:,.0f} lbs)"
        )

    max_x = car.length_ft / 2 - freight.length_ft / 2
    if abs(placement.x_offset_ft) > max_x:
        issues.append("Freight extends beyond car length with current placement")
    max_y = car.width_ft / 2 - freight.width_ft / 2
    if abs(placement.y_offset_ft) > max_y:
        issues.append("Freight extends beyond car width with current placement")

    combined = cg.combined_cg
    if abs(combined.x) > car.length_ft * LONGITUDINAL_LIMIT:
        warnings.append("Center of gravity is significantly off-center longitudinally")
    if abs(combined.y) > car.width_ft * LATERAL_LIMIT:
        warnings.append("Center of gravity is significantly off-center laterally")
    if combined.z > car.height_ft + car.deck_height_ft - VERTICAL_MARGIN_FT:
        warnings.append("Center of gravity is high, may affect stability")

    return PlacementValidation(issues=issues, warnings=warnings)


def calculate_optimal_placement(freight: FreightSpec, car: CarType) -> Placement:
    """Centred placement; a balanced load sits over the car centre."""
    return Placement(x=0.0, y=0.0)
