"""
models.py – Core dataclasses: operator, station, connection, car type, route.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class FreightRailError(Exception):
    """Base class for every error raised by the package."""


class Operator(str, Enum):
    BNSF = "BNSF"
    UP = "UP"
    CSX = "CSX"
    NS = "NS"
    CN = "CN"
    CP = "CP"
    KCS = "KCS"
    KCSM = "KCSM"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value) -> Optional["Operator"]:
        """Return the matching operator, or None for codes outside the enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class UnitSystem(str, Enum):
    IMPERIAL = "imperial"
    METRIC = "metric"

    def __str__(self) -> str:
        return self.value


class Season(str, Enum):
    WINTER = "winter"
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"

    def __str__(self) -> str:
        return self.value


# ────────────────────────────────────────────────────────────────────────────
# Network
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Station:
    code: str
    name: str
    lat: float
    lng: float
    state: str
    primary_operator: str

    def __post_init__(self):
        if not self.code:
            raise ValueError("station code must not be empty")
        if not -90 <= self.lat <= 90:
            raise ValueError(f"latitude out of range for {self.code}")
        if not -180 <= self.lng <= 180:
            raise ValueError(f"longitude out of range for {self.code}")


@dataclass(frozen=True)
class Connection:
    from_code: str
    to_code: str
    distance_miles: float
    operator: Operator
    curve_score: float
    states: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.distance_miles <= 0:
            raise ValueError("distance_miles must be positive")
        if not 1 <= self.curve_score <= 10:
            raise ValueError("curve_score must lie in [1, 10]")
        if self.from_code == self.to_code:
            raise ValueError("a connection cannot loop back to its own station")

    def other_end(self, code: str) -> str:
        return self.to_code if code == self.from_code else self.from_code

    def joins(self, a: str, b: str) -> bool:
        return {self.from_code, self.to_code} == {a, b}


# ────────────────────────────────────────────────────────────────────────────
# Rolling stock
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class CarType:
    id: str
    name: str
    length_ft: float
    width_ft: float
    height_ft: float          # usable height above the deck
    max_weight_lb: float
    deck_height_ft: float
    image: str = ""

    def __post_init__(self):
        for name in ("length_ft", "width_ft", "height_ft", "max_weight_lb", "deck_height_ft"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative ({self.id})")


# ────────────────────────────────────────────────────────────────────────────
# Route (search output)
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Segment:
    from_station: Station
    to_station: Station
    distance_miles: float
    operator: Operator
    curve_score: float
    states: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TransferPoint:
    station: Station
    from_operator: Operator
    to_operator: Operator


@dataclass(frozen=True)
class Route:
    path: Tuple[Station, ...]
    segments: Tuple[Segment, ...]
    total_distance: int
    operators: Tuple[Operator, ...]
    transfer_points: Tuple[TransferPoint, ...]
    states: Tuple[str, ...]
    total_cost: float
    total_curve_score: float = 0.0

    @property
    def operator_count(self) -> int:
        return len(self.operators)

    @property
    def station_codes(self) -> Tuple[str, ...]:
        return tuple(s.code for s in self.path)

    def uses_operator(self, operator) -> bool:
        op = Operator.coerce(operator)
        return op is not None and op in self.operators

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable snapshot for persistence and export."""
        data = asdict(self)
        data["operator_count"] = self.operator_count
        return _plain(data)


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(v) for v in value]
    return value
