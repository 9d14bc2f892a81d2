"""
network.py – Static rail network model (stations + operator-tagged edges)

The network is an undirected multigraph: the same station pair may carry
several connections run by different operators.  Parallel edges keep the
order of the source table, which is what "first matching connection"
means everywhere in the engine.

Public symbols
--------------
RailNetwork            – read-only network with lookup helpers
UnknownStationError    – raised for station codes not in the network
NetworkDataError       – raised when a data table cannot be loaded
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import networkx as nx
import pandas as pd
from geopy.distance import great_circle
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import Connection, FreightRailError, Operator, Station

logger = logging.getLogger("freightrail.network")

DATA_DIR = Path(__file__).resolve().parent / "data"
STATIONS_CSV = DATA_DIR / "stations.csv"
CONNECTIONS_CSV = DATA_DIR / "connections.csv"

STATION_COLS = ["code", "name", "lat", "lng", "state", "primary_operator"]
CONNECTION_COLS = ["from_code", "to_code", "distance_miles", "operator", "curve_score", "states"]


# ────────────────────────────────────────────────────────────────────────────
# Exceptions
# ────────────────────────────────────────────────────────────────────────────
class UnknownStationError(FreightRailError, KeyError):
    """Raised when a station code is not part of the network."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class NetworkDataError(FreightRailError, ValueError):
    """Raised when a station or connection table is unusable."""


# ────────────────────────────────────────────────────────────────────────────
# CSV row models
# ────────────────────────────────────────────────────────────────────────────
class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _strip_strings(cls, v):
        return v.strip() if isinstance(v, str) else v


class StationRow(_Row):
    code: str = Field(..., min_length=1)
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    state: str
    primary_operator: str

    @field_validator("code", mode="after")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()

    def to_station(self) -> Station:
        return Station(**self.model_dump())


class ConnectionRow(_Row):
    from_code: str
    to_code: str
    distance_miles: float = Field(..., gt=0)
    operator: Operator
    curve_score: float = Field(..., ge=1, le=10)
    states: Tuple[str, ...] = ()

    @field_validator("from_code", "to_code", mode="after")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()

    @field_validator("operator", mode="before")
    @classmethod
    def _upper_operator(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("states", mode="before")
    @classmethod
    def _split_states(cls, v):
        if isinstance(v, str):
            return tuple(s.strip() for s in v.split(";") if s.strip())
        return v

    def to_connection(self) -> Connection:
        return Connection(**self.model_dump())


def _read_table(path: Path, required: List[str]) -> pd.DataFrame:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(path)
    # "NO" (New Orleans) must stay a station code, not a missing value
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise NetworkDataError(f"{path.name}: missing columns {missing}")
    return df


# ────────────────────────────────────────────────────────────────────────────
# Network
# ────────────────────────────────────────────────────────────────────────────
class RailNetwork:
    """Read-only station/connection graph backed by a networkx MultiGraph."""

    def __init__(self, stations: Iterable[Station], connections: Iterable[Connection]):
        self.stations: Dict[str, Station] = {s.code: s for s in stations}
        self.connections: Tuple[Connection, ...] = tuple(connections)

        self.graph = nx.MultiGraph()
        for code, station in self.stations.items():
            self.graph.add_node(code, station=station)
        for idx, conn in enumerate(self.connections):
            for code in (conn.from_code, conn.to_code):
                if code not in self.stations:
                    raise NetworkDataError(f"Connection #{idx} references unknown station {code!r}")
            self.graph.add_edge(conn.from_code, conn.to_code, key=idx, connection=conn)

        logger.debug(
            "Network built: %d stations, %d connections",
            self.graph.number_of_nodes(),
            self.graph.number_of_edges(),
        )

    # -- loading ------------------------------------------------------------
    @classmethod
    def from_csv(
        cls,
        stations_csv: Union[str, Path] = STATIONS_CSV,
        connections_csv: Union[str, Path] = CONNECTIONS_CSV,
    ) -> "RailNetwork":
        """
        Load stations and connections from CSV.

        * Invalid rows are skipped with a warning.
        * Connections whose endpoints are not loaded stations are skipped.
        * ``states`` is a ``;``-separated list.
        """
        stations: List[Station] = []
        for raw in _read_table(stations_csv, STATION_COLS).to_dict(orient="records"):
            try:
                stations.append(StationRow(**raw).to_station())
            except ValidationError as err:
                logger.warning("Skipping invalid station row %s: %s", raw.get("code"), err)
        if not stations:
            raise NetworkDataError("No valid station rows")

        codes = {s.code for s in stations}
        connections: List[Connection] = []
        for raw in _read_table(connections_csv, CONNECTION_COLS).to_dict(orient="records"):
            try:
                row = ConnectionRow(**raw)
            except ValidationError as err:
                logger.warning("Skipping invalid connection row %s-%s: %s",
                               raw.get("from_code"), raw.get("to_code"), err)
                continue
            if row.from_code not in codes or row.to_code not in codes:
                logger.warning("Skipping connection %s-%s: unknown station", row.from_code, row.to_code)
                continue
            connections.append(row.to_connection())

        logger.info("Loaded %d stations and %d connections", len(stations), len(connections))
        return cls(stations, connections)

    @classmethod
    def default(cls) -> "RailNetwork":
        """The bundled North American network (loaded once, shared read-only)."""
        return _default_network()

    # -- lookups ------------------------------------------------------------
    def has_station(self, code: str) -> bool:
        return code in self.stations

    def station(self, code: str) -> Station:
        try:
            return self.stations[code]
        except KeyError:
            raise UnknownStationError(f'Station "{code}" not found') from None

    def connections_for(self, code: str) -> List[Connection]:
        """Every connection touching ``code``, in data order."""
        if code not in self.graph:
            raise UnknownStationError(f'Station "{code}" not found')
        edges = sorted(self.graph.edges(code, keys=True, data="connection"), key=lambda e: e[2])
        return [conn for _, _, _, conn in edges]

    def get_connection(self, a: str, b: str, exclude_operators=()) -> Optional[Connection]:
        """First connection between ``a`` and ``b`` (either direction) not run by an excluded operator."""
        data = self.graph.get_edge_data(a, b)
        if not data:
            return None
        for key in sorted(data):
            conn = data[key]["connection"]
            if conn.operator not in exclude_operators:
                return conn
        return None

    def are_connected(self, a: str, b: str) -> bool:
        return self.graph.has_edge(a, b)

    def operators(self) -> List[Operator]:
        return sorted({c.operator for c in self.connections}, key=lambda o: o.value)

    def distance_between(self, a: str, b: str) -> float:
        """Great-circle distance in miles (not the rail distance)."""
        s1, s2 = self.station(a), self.station(b)
        return great_circle((s1.lat, s1.lng), (s2.lat, s2.lng)).miles

    def find_stations(self, query: str) -> List[Station]:
        """Stations whose code or name contains ``query`` (case-insensitive)."""
        q = query.strip().lower()
        if not q:
            return []
        hits = [s for s in self.stations.values() if q in s.code.lower() or q in s.name.lower()]
        return sorted(hits, key=lambda s: s.code)


@lru_cache(maxsize=1)
def _default_network() -> RailNetwork:
    return RailNetwork.from_csv(STATIONS_CSV, CONNECTIONS_CSV)
