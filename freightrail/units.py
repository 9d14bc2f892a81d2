"""
units.py – Imperial/metric conversion for freight dimensions and weights.
"""
from __future__ import annotations

from .models import UnitSystem

FEET_TO_METERS = 0.3048
METERS_TO_FEET = 3.28084
POUNDS_TO_KILOGRAMS = 0.453592
KILOGRAMS_TO_POUNDS = 2.20462


def convert_length(value: float, from_system: UnitSystem, to_system: UnitSystem) -> float:
    from_system, to_system = UnitSystem(from_system), UnitSystem(to_system)
    if from_system is to_system:
        return value
    if to_system is UnitSystem.METRIC:
        return value * FEET_TO_METERS
    return value * METERS_TO_FEET


def convert_weight(value: float, from_system: UnitSystem, to_system: UnitSystem) -> float:
    from_system, to_system = UnitSystem(from_system), UnitSystem(to_system)
    if from_system is to_system:
        return value
    if to_system is UnitSystem.METRIC:
        return value * POUNDS_TO_KILOGRAMS
    return value * KILOGRAMS_TO_POUNDS


def format_length(value: float, system: UnitSystem) -> str:
    return f"{value:.2f} m" if UnitSystem(system) is UnitSystem.METRIC else f"{value:.2f} ft"


def format_weight(value: float, system: UnitSystem) -> str:
    return f"{value:.2f} kg" if UnitSystem(system) is UnitSystem.METRIC else f"{value:.2f} lbs"


def length_unit_label(system: UnitSystem) -> str:
    return "meters" if UnitSystem(system) is UnitSystem.METRIC else "feet"


def weight_unit_label(system: UnitSystem) -> str:
    return "kilograms" if UnitSystem(system) is UnitSystem.METRIC else "pounds"
