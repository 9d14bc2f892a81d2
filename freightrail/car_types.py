"""
car_types.py – Rail car catalogue per operator.

Operators without their own catalogue use the BNSF list (see
``get_car_types_for_operator``).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from .models import CarType, Operator

logger = logging.getLogger("freightrail.car_types")

DEFAULT_CATALOG_OPERATOR = Operator.BNSF


def _boxcar(prefix: str) -> CarType:
    return CarType(f"{prefix}_boxcar", "Boxcar", 60, 9.5, 15, 220_000, 4, "boxcar")


def _flatcar(prefix: str) -> CarType:
    return CarType(f"{prefix}_flatcar", "Flatcar", 89, 10, 2, 286_000, 4, "flatcar")


CAR_TYPES: Dict[Operator, List[CarType]] = {
    Operator.BNSF: [
        _boxcar("bnsf"),
        _flatcar("bnsf"),
        CarType("bnsf_hopper", "Hopper Car", 55, 10.5, 15, 263_000, 4, "hopper"),
        CarType("bnsf_tank", "Tank Car", 40, 10.5, 15, 198_000, 4, "tankcar"),
    ],
    Operator.UP: [
        _boxcar("up"),
        _flatcar("up"),
        CarType("up_auto", "Auto Rack", 89, 10.5, 20, 220_000, 4, "autorack"),
    ],
    Operator.CSX: [
        _boxcar("csx"),
        _flatcar("csx"),
        CarType("csx_covered_hopper", "Covered Hopper", 55, 10.5, 15, 263_000, 4, "coveredhopper"),
    ],
    Operator.NS: [
        _boxcar("ns"),
        _flatcar("ns"),
        CarType("ns_gondola", "Gondola", 55, 10.5, 5, 263_000, 4, "gondola"),
    ],
    Operator.CN: [_boxcar("cn"), _flatcar("cn")],
    Operator.CP: [_boxcar("cp"), _flatcar("cp")],
}


def get_car_types_for_operator(
    operator,
    catalog: Optional[Mapping[Operator, Sequence[CarType]]] = None,
    default_operator=DEFAULT_CATALOG_OPERATOR,
) -> List[CarType]:
    """Car types offered by ``operator``; unknown operators get the default catalogue."""
    catalog = CAR_TYPES if catalog is None else catalog
    op = Operator.coerce(operator)
    if op is not None and op in catalog:
        return list(catalog[op])
    logger.debug("No car catalogue for %s, using %s", operator, default_operator)
    return list(catalog.get(Operator.coerce(default_operator), []))


def get_all_car_types(catalog: Optional[Mapping[Operator, Sequence[CarType]]] = None) -> List[CarType]:
    """One car per distinct car name, first occurrence wins."""
    catalog = CAR_TYPES if catalog is None else catalog
    seen: Dict[str, CarType] = {}
    for cars in catalog.values():
        for car in cars:
            seen.setdefault(car.name, car)
    return list(seen.values())


def get_car_type(car_id: str, catalog: Optional[Mapping[Operator, Sequence[CarType]]] = None) -> Optional[CarType]:
    catalog = CAR_TYPES if catalog is None else catalog
    for cars in catalog.values():
        for car in cars:
            if car.id == car_id:
                return car
    return None
