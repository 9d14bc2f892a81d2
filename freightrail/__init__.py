"""
freightrail – route search and freight-to-car compliance engine for a
modelled North American freight rail network.

Top-level package.  Sets the package log level from FREIGHTRAIL_LOG_LEVEL
so every sub-module logger (``freightrail.*``) inherits it, and re-exports
the public entry points.
"""

from __future__ import annotations

import logging
import os

__version__ = "0.1.0"

# ---------- logging ----------
LOG_LEVEL = os.getenv("FREIGHTRAIL_LOG_LEVEL", "INFO").upper()

logger = logging.getLogger("freightrail")
logger.setLevel(LOG_LEVEL)
logger.debug("Logging initialised (level=%s)", LOG_LEVEL)

from .models import (  # noqa: E402
    CarType,
    Connection,
    FreightRailError,
    Operator,
    Route,
    Season,
    Segment,
    Station,
    TransferPoint,
    UnitSystem,
)
from .inputs import FreightSpec, Placement, Preferences  # noqa: E402
from .config import EngineSettings, get_default_settings  # noqa: E402
from .network import NetworkDataError, RailNetwork, UnknownStationError  # noqa: E402
from .routing import build_route_details, find_routes  # noqa: E402
from .recommend import (  # noqa: E402
    CarRecommendation,
    get_best_car_type_for_freight,
    get_recommended_car_types,
)
from .freight import (  # noqa: E402
    CenterOfGravity,
    calculate_center_of_gravity,
    calculate_optimal_placement,
    validate_placement,
)
from .compliance import ComplianceCategory, ComplianceResult, calculate_compliance_probability  # noqa: E402
from .cost import CostEstimate, estimate_route_cost  # noqa: E402
from .transit import TransitEstimate, estimate_transit_time, get_current_season  # noqa: E402

__all__ = [
    "logger",
    "CarType",
    "Connection",
    "FreightRailError",
    "Operator",
    "Route",
    "Season",
    "Segment",
    "Station",
    "TransferPoint",
    "UnitSystem",
    "FreightSpec",
    "Placement",
    "Preferences",
    "EngineSettings",
    "get_default_settings",
    "NetworkDataError",
    "RailNetwork",
    "UnknownStationError",
    "build_route_details",
    "find_routes",
    "CarRecommendation",
    "get_best_car_type_for_freight",
    "get_recommended_car_types",
    "CenterOfGravity",
    "calculate_center_of_gravity",
    "calculate_optimal_placement",
    "validate_placement",
    "ComplianceCategory",
    "ComplianceResult",
    "calculate_compliance_probability",
    "CostEstimate",
    "estimate_route_cost",
    "TransitEstimate",
    "estimate_transit_time",
    "get_current_season",
]
