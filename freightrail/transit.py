"""
transit.py – Transit-time model over a finalised Route.

    hours = Σ miles / (operator_speed × (1 + distance_bonus))
            + transfers × 12 h + curve_score × 0.5 h
    hours *= 1 + seasonal_delay

The distance bonus uses the same brackets as the cost discount.  Arrival
is only computed when the caller passes an explicit ``departure`` so the
estimator stays a pure function of its inputs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .cost import distance_bracket
from .models import Operator, Route, Season

logger = logging.getLogger("freightrail.transit")

# mph
OPERATOR_SPEEDS: Dict[Operator, float] = {
    Operator.BNSF: 25,
    Operator.UP: 24,
    Operator.CSX: 23,
    Operator.NS: 24,
    Operator.CN: 26,
    Operator.CP: 25,
    Operator.KCS: 23,
    Operator.KCSM: 23,
}
DEFAULT_SPEED = 24.0

TRANSFER_HOURS = 12.0
CURVE_DELAY_HOURS = 0.5

SEASONAL_DELAYS: Dict[Season, float] = {
    Season.WINTER: 0.15,
    Season.SPRING: 0.05,
    Season.SUMMER: 0.0,
    Season.FALL: 0.05,
}


@dataclass(frozen=True)
class SegmentTime:
    segment: int
    operator: Operator
    distance: float
    speed: float
    hours: float

    @property
    def days(self) -> float:
        return self.hours / 24


@dataclass(frozen=True)
class TransitEstimate:
    total_hours: float = 0.0
    total_days: float = 0.0
    business_days: float = 0.0
    transfer_time: float = 0.0
    curve_delay: float = 0.0
    seasonal_delay: float = 0.0
    season: Season = Season.SUMMER
    include_weekends: bool = True
    breakdown: List[SegmentTime] = field(default_factory=list)
    estimated_arrival: Optional[datetime] = None


def get_current_season(when: Optional[Union[date, datetime]] = None) -> Season:
    month = (when or date.today()).month
    if month == 12 or month <= 2:
        return Season.WINTER
    if month <= 5:
        return Season.SPRING
    if month <= 8:
        return Season.SUMMER
    return Season.FALL


def _coerce_season(season: Union[Season, str, None]) -> Season:
    if isinstance(season, Season):
        return season
    try:
        return Season(str(season).strip().lower())
    except ValueError:
        logger.debug("Unknown season %r, no seasonal delay applied", season)
        return Season.SUMMER


def estimate_transit_time(
    route: Route,
    season: Union[Season, str] = Season.SUMMER,
    include_weekends: bool = True,
    departure: Optional[datetime] = None,
) -> TransitEstimate:
    """
    Transit time for ``route``.  A route without segments gives an all-zero
    estimate; the route is never modified.
    Season names are case-insensitive; an unknown season adds no delay.
    """
    season = _coerce_season(season)
    if route is None or not route.segments:
        return TransitEstimate(season=season, include_weekends=include_weekends)

    bonus = distance_bracket(route.total_distance)
    breakdown: List[SegmentTime] = []
    for idx, seg in enumerate(route.segments, start=1):
        speed = OPERATOR_SPEEDS.get(seg.operator, DEFAULT_SPEED) * (1 + bonus)
        breakdown.append(SegmentTime(idx, seg.operator, seg.distance_miles, speed, seg.distance_miles / speed))

    transfer_time = len(route.transfer_points) * TRANSFER_HOURS
    curve_delay = route.total_curve_score * CURVE_DELAY_HOURS
    hours = sum(b.hours for b in breakdown) + transfer_time + curve_delay
    seasonal = hours * SEASONAL_DELAYS[season]
    hours += seasonal

    days = hours / 24
    business_days = days
    if not include_weekends and days > 0:
        business_days = days - (days // 7) * 2

    estimate = TransitEstimate(
        total_hours=round(hours, 1),
        total_days=round(days, 1),
        business_days=round(business_days, 1),
        transfer_time=round(transfer_time, 1),
        curve_delay=round(curve_delay, 1),
        seasonal_delay=round(seasonal, 1),
        season=season,
        include_weekends=include_weekends,
        breakdown=breakdown,
        estimated_arrival=departure + timedelta(hours=hours) if departure is not None else None,
    )
    logger.debug("Transit %s: %.1f h (%s)", "-".join(route.station_codes), estimate.total_hours, season)
    return estimate


def compare_transit_times(
    routes: Iterable[Route],
    season: Union[Season, str] = Season.SUMMER,
    include_weekends: bool = True,
    departure: Optional[datetime] = None,
) -> List[Tuple[Route, TransitEstimate]]:
    """(route, estimate) pairs, fastest first."""
    pairs = [(r, estimate_transit_time(r, season, include_weekends, departure)) for r in routes or ()]
    return sorted(pairs, key=lambda p: p[1].total_hours)


def format_transit_time(estimate: Optional[TransitEstimate]) -> Dict[str, str]:
    if estimate is None or estimate.total_hours == 0:
        return {"hours": "N/A", "days": "N/A", "business_days": "N/A", "arrival": "N/A"}

    def _hours(value: float) -> str:
        return f"{value:.1f} hours" if value > 0 else "0 hours"

    arrival = estimate.estimated_arrival
    return {
        "hours": f"{estimate.total_hours:.1f} hours",
        "days": f"{estimate.total_days:.1f} days",
        "business_days": f"{estimate.business_days:.1f} business days",
        "arrival": arrival.strftime("%a, %b %d, %Y %H:%M") if arrival else "N/A",
        "transfer_time": _hours(estimate.transfer_time),
        "curve_delay": _hours(estimate.curve_delay),
        "seasonal_delay": _hours(estimate.seasonal_delay),
    }
