"""
routing.py – top-K constrained route search over the rail multigraph

Best-first search over acyclic station sequences.  The frontier is a heap
ordered by (cost, insertion order), so equal-cost candidates are expanded
first-in first-out.  The cost of a candidate is recomputed from scratch
for the whole path because the operator penalty depends on the size of the
operator set, not on the number of edges:

    cost = distance * w_distance
         + max(0, |operators| - 1) * 100 * w_single_operator
         + curve_score * 10 * w_curves

Paths are deduplicated by their station sequence, not per station, so a
station may be reached again through a different prefix; this is what
gives the top-3 list some diversity.

Public symbols
--------------
find_routes(...)          – up to ``max_routes`` Route objects, best first
build_route_details(...)  – materialise a station sequence into a Route
"""
from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

from .config import EngineSettings, get_default_settings
from .inputs import Preferences
from .models import Connection, Operator, Route, Segment, TransferPoint
from .network import RailNetwork

log = logging.getLogger("freightrail.routing")

OPERATOR_PENALTY = 100
CURVE_PENALTY = 10


# ────────────────────────────────────────────────────────────────────────────
# internal helpers
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class _Candidate:
    path: Tuple[str, ...]
    cost: float = 0.0
    distance: float = 0.0
    operators: FrozenSet[Operator] = frozenset()
    curve_score: float = 0.0
    states: FrozenSet[str] = frozenset()

    def extend(self, station: str, conn: Connection, prefs: Preferences) -> "_Candidate":
        distance = self.distance + conn.distance_miles
        operators = self.operators | {conn.operator}
        curves = self.curve_score + conn.curve_score
        cost = (
            distance * prefs.weight_distance
            + max(0, len(operators) - 1) * OPERATOR_PENALTY * prefs.weight_single_operator
            + curves * CURVE_PENALTY * prefs.weight_curves
        )
        return _Candidate(
            path=self.path + (station,),
            cost=cost,
            distance=distance,
            operators=operators,
            curve_score=curves,
            states=self.states | set(conn.states),
        )


def _coerce_preferences(preferences: Union[Preferences, Mapping, None]) -> Preferences:
    if preferences is None:
        return Preferences()
    if isinstance(preferences, Preferences):
        return preferences
    return Preferences.model_validate(dict(preferences))


# ────────────────────────────────────────────────────────────────────────────
# public API
# ────────────────────────────────────────────────────────────────────────────
def find_routes(
    origin: str,
    destination: str,
    preferences: Union[Preferences, Mapping, None] = None,
    network: Optional[RailNetwork] = None,
    settings: Optional[EngineSettings] = None,
) -> List[Route]:
    """
    Return up to ``settings.max_routes`` routes from ``origin`` to
    ``destination``, cheapest search cost first.

    * Same origin and destination → ``[]``.
    * No path within ``max_transfers + 1`` stations → ``[]``.
    * Unknown station codes raise ``UnknownStationError``.
    * ``avoid_operators`` edges are never expanded; routes missing any of
      ``require_operators`` are dropped when they complete.
    """
    network = network or RailNetwork.default()
    settings = settings or get_default_settings()
    prefs = _coerce_preferences(preferences)
    origin, destination = origin.strip().upper(), destination.strip().upper()

    network.station(origin)
    network.station(destination)
    if origin == destination:
        return []

    max_stations = prefs.max_transfers + 1
    avoid = prefs.avoid_operators

    order = itertools.count()
    frontier: List[Tuple[float, int, _Candidate]] = [(0.0, next(order), _Candidate(path=(origin,)))]
    seen = set()
    routes: List[Route] = []
    completions = 0
    expansions = 0

    while frontier and len(routes) < settings.max_routes and completions < settings.max_completions:
        _, _, current = heapq.heappop(frontier)
        if current.path in seen:
            continue
        seen.add(current.path)

        station = current.path[-1]
        if station == destination:
            completions += 1
            route = build_route_details(
                current.path, network, total_cost=current.cost, exclude_operators=avoid
            )
            if route is None:
                continue
            if not prefs.require_operators <= set(route.operators):
                log.debug("Dropping %s: missing required operators", "-".join(current.path))
                continue
            routes.append(route)
            continue

        if len(current.path) >= max_stations:
            continue

        expansions += 1
        for conn in network.connections_for(station):
            if conn.operator in avoid:
                continue
            nxt = conn.other_end(station)
            if nxt in current.path:
                continue
            nxt_candidate = current.extend(nxt, conn, prefs)
            heapq.heappush(frontier, (nxt_candidate.cost, next(order), nxt_candidate))

    log.debug(
        "Search %s→%s: %d route(s), %d completion(s), %d expansion(s)",
        origin, destination, len(routes), completions, expansions,
    )
    routes.sort(key=lambda r: r.total_cost)
    return routes[: settings.max_routes]


def build_route_details(
    path: Sequence[str],
    network: Optional[RailNetwork] = None,
    total_cost: float = 0.0,
    exclude_operators=(),
) -> Optional[Route]:
    """
    Turn a station sequence into a Route.

    Each hop uses the first connection in data order between the two
    stations (skipping ``exclude_operators``).  A transfer point is emitted
    wherever a hop's operator differs from the previous hop's.  Returns
    None when the sequence has fewer than two stations, names an unknown
    station or contains a hop with no usable connection.
    """
    network = network or RailNetwork.default()
    if len(path) < 2:
        return None
    for code in path:
        if not network.has_station(code):
            log.warning("Invalid station code in path: %s", code)
            return None

    segments: List[Segment] = []
    transfers: List[TransferPoint] = []
    operators: List[Operator] = []
    states = set()

    for a, b in zip(path, path[1:]):
        conn = network.get_connection(a, b, exclude_operators)
        if conn is None:
            log.warning("No connection found between %s and %s", a, b)
            return None
        if segments and segments[-1].operator != conn.operator:
            transfers.append(
                TransferPoint(
                    station=network.station(a),
                    from_operator=segments[-1].operator,
                    to_operator=conn.operator,
                )
            )
        segments.append(
            Segment(
                from_station=network.station(a),
                to_station=network.station(b),
                distance_miles=conn.distance_miles,
                operator=conn.operator,
                curve_score=conn.curve_score,
                states=conn.states,
            )
        )
        if conn.operator not in operators:
            operators.append(conn.operator)
        states.update(conn.states)

    return Route(
        path=tuple(network.station(code) for code in path),
        segments=tuple(segments),
        total_distance=int(round(sum(s.distance_miles for s in segments))),
        operators=tuple(operators),
        transfer_points=tuple(transfers),
        states=tuple(sorted(states)),
        total_cost=total_cost,
        total_curve_score=sum(s.curve_score for s in segments),
    )
