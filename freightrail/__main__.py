# ── freightrail/__main__.py ──────────────────────────────────
"""
Command line front end:

    python -m freightrail routes CHI KC --preset FASTEST
    python -m freightrail cars --length 40 --width 8 --height 10 --weight 50000
    python -m freightrail comply CHI LAX --length 40 --width 8 --height 10 --weight 50000 --car-id bnsf_boxcar
    python -m freightrail estimate CHI KC --weight 100000 --season winter

Exit codes: 0 success, 1 invalid input / unknown station, 2 usage error.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

import yaml
from pydantic import ValidationError

from .car_types import get_car_type
from .compliance import calculate_compliance_probability
from .config import EngineSettings
from .cost import estimate_route_cost, format_cost_estimate
from .inputs import FreightSpec, Placement, Preferences
from .logging_config import configure
from .models import FreightRailError, Season, UnitSystem
from .presets import ROUTE_PRESETS, get_preset
from .recommend import get_recommended_car_types
from .routing import find_routes
from .transit import estimate_transit_time, format_transit_time, get_current_season

log = logging.getLogger("freightrail.cli")

DEFAULT_OPERATORS = ["BNSF", "UP", "CSX", "NS", "CN", "CP"]


# ---------- parser ---------- #
def _add_freight_args(p: argparse.ArgumentParser, weight_only: bool = False) -> None:
    if not weight_only:
        p.add_argument("--length", type=float, required=True, help="Freight length")
        p.add_argument("--width", type=float, required=True, help="Freight width")
        p.add_argument("--height", type=float, required=True, help="Freight height")
    p.add_argument("--weight", type=float, required=True, help="Freight weight")
    p.add_argument("--metric", action="store_true", help="Dimensions in m and weight in kg")


def _add_route_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("origin", help="Origin station code")
    p.add_argument("destination", help="Destination station code")
    p.add_argument("--preset", choices=sorted(ROUTE_PRESETS), default="BALANCED")
    p.add_argument("--max-transfers", type=int, help="Override the preset's max transfers")
    p.add_argument("--avoid", nargs="*", default=[], metavar="OP", help="Operators to avoid")
    p.add_argument("--require", nargs="*", default=[], metavar="OP", help="Operators every route must use")


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="freightrail",
        description="Freight rail route search, car selection and compliance scoring",
    )
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"], default="warning")
    parser.add_argument("--config", help="Settings file (.yaml/.yml/.json)")

    sub = parser.add_subparsers(dest="command", required=True)

    routes = sub.add_parser("routes", help="Top routes between two stations")
    _add_route_args(routes)

    cars = sub.add_parser("cars", help="Rank car types for a piece of freight")
    _add_freight_args(cars)
    cars.add_argument("--operators", nargs="*", default=DEFAULT_OPERATORS, metavar="OP")

    comply = sub.add_parser("comply", help="Compliance probability on the best route")
    _add_route_args(comply)
    _add_freight_args(comply)
    comply.add_argument("--car-id", required=True, help="Car type id, e.g. bnsf_boxcar")
    comply.add_argument("--operator", help="Operator to evaluate (default: first on the route)")
    comply.add_argument("--x", type=float, default=0.0, help="Longitudinal offset (ft)")
    comply.add_argument("--y", type=float, default=0.0, help="Lateral offset (ft)")

    estimate = sub.add_parser("estimate", help="Cost and transit time for the top routes")
    _add_route_args(estimate)
    _add_freight_args(estimate, weight_only=True)
    estimate.add_argument("--season", choices=[s.value for s in Season], help="Default: current season")
    estimate.add_argument("--no-weekends", action="store_true", help="Exclude weekends from business days")

    return parser


# ---------- helpers ---------- #
def _preferences(args: argparse.Namespace) -> Preferences:
    prefs = get_preset(args.preset).preferences or Preferences()
    update = {"avoid_operators": args.avoid, "require_operators": args.require}
    if args.max_transfers is not None:
        update["max_transfers"] = args.max_transfers
    return Preferences.model_validate({**prefs.model_dump(), **update})


def _freight(args: argparse.Namespace) -> FreightSpec:
    return FreightSpec(
        length_ft=getattr(args, "length", 0.0),
        width_ft=getattr(args, "width", 0.0),
        height_ft=getattr(args, "height", 0.0),
        weight_lb=args.weight,
        unit_system=UnitSystem.METRIC if args.metric else UnitSystem.IMPERIAL,
    )


def _print_route(rank: int, route) -> None:
    print(f"#{rank}  {' → '.join(route.station_codes)}")
    print(
        f"    {route.total_distance} mi, operators {', '.join(map(str, route.operators))}, "
        f"{len(route.transfer_points)} transfer(s), score {route.total_cost:.1f}"
    )
    for tp in route.transfer_points:
        print(f"    transfer at {tp.station.name}: {tp.from_operator} → {tp.to_operator}")


# ---------- commands ---------- #
def cmd_routes(args: argparse.Namespace, settings: EngineSettings) -> int:
    routes = find_routes(args.origin, args.destination, _preferences(args), settings=settings)
    if not routes:
        print("No routes found")
        return 0
    for i, route in enumerate(routes, start=1):
        _print_route(i, route)
    return 0


def cmd_cars(args: argparse.Namespace, settings: EngineSettings) -> int:
    ranked = get_recommended_car_types(_freight(args), args.operators, settings=settings)
    if not ranked:
        print("No car type fits this freight")
        return 0
    for rec in ranked:
        flag = "  perfect fit" if rec.is_perfect_fit else ""
        print(f"{rec.score:6.2f}  {rec.operator!s:<5} {rec.car.id:<22} {rec.car.name}{flag}")
    return 0


def cmd_comply(args: argparse.Namespace, settings: EngineSettings) -> int:
    car = get_car_type(args.car_id)
    if car is None:
        print(f"Error: unknown car type {args.car_id!r}", file=sys.stderr)
        return 1
    routes = find_routes(args.origin, args.destination, _preferences(args), settings=settings)
    route = routes[0] if routes else None
    operator = args.operator or (route.operators[0] if route else "BNSF")

    result = calculate_compliance_probability(
        _freight(args), car, Placement(x=args.x, y=args.y), route, operator, settings
    )
    print(f"Compliance probability: {result.probability}% ({result.category.value})")
    for factor in result.factors:
        print(f"  {factor.name:<22} {factor.score:6.1f}  x{factor.weight:.2f}  {'; '.join(factor.details)}")
    for rec in result.recommendations:
        print(f"[{rec.priority}] {rec.action}")
        for item in rec.items:
            print(f"    - {item}")
    return 0


def cmd_estimate(args: argparse.Namespace, settings: EngineSettings) -> int:
    routes = find_routes(args.origin, args.destination, _preferences(args), settings=settings)
    if not routes:
        print("No routes found")
        return 0
    weight = _freight(args).to_imperial().weight_lb
    season = Season(args.season) if args.season else get_current_season()
    for i, route in enumerate(routes, start=1):
        _print_route(i, route)
        cost = format_cost_estimate(estimate_route_cost(route, weight))
        transit = format_transit_time(estimate_transit_time(route, season, not args.no_weekends))
        print(f"    cost {cost['total']} ({cost['per_mile']}/mi), transit {transit['hours']} / {transit['days']}")
    return 0


COMMANDS = {
    "routes": cmd_routes,
    "cars": cmd_cars,
    "comply": cmd_comply,
    "estimate": cmd_estimate,
}


# ---------- main ---------- #
def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    configure(args.log_level)

    try:
        settings = EngineSettings.load_from_file(args.config) if args.config else EngineSettings()
        settings = settings.with_env()
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1
    issues: List[str] = settings.validate()
    if issues:
        for issue in issues:
            print(f"Error: {issue}", file=sys.stderr)
        return 1

    log.debug("Running %s with %s", args.command, settings)
    try:
        return COMMANDS[args.command](args, settings)
    except (FreightRailError, ValidationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
