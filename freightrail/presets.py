"""
presets.py – Named route-preference sets and common freight dimensions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .inputs import FreightSpec, Preferences

PRESET_TOLERANCE = 0.1


# ────────────────────────────────────────────────────────────────────────────
# Route presets
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class RoutePreset:
    key: str
    name: str
    description: str
    preferences: Optional[Preferences]   # None for CUSTOM


def _prefs(distance: float, single_operator: float, curves: float, max_transfers: int) -> Preferences:
    return Preferences(
        weight_distance=distance,
        weight_single_operator=single_operator,
        weight_curves=curves,
        max_transfers=max_transfers,
    )


ROUTE_PRESETS: Dict[str, RoutePreset] = {
    p.key: p
    for p in (
        RoutePreset("FASTEST", "Fastest Route",
                    "Prioritize shortest distance and fewest transfers", _prefs(2.0, 1.5, 0.5, 3)),
        RoutePreset("SIMPLEST", "Simplest Route",
                    "Prefer single operator with minimal transfers", _prefs(0.8, 2.0, 0.3, 2)),
        RoutePreset("STRAIGHTEST", "Straightest Route",
                    "Minimize curves and turns for stability", _prefs(1.0, 0.5, 2.0, 5)),
        RoutePreset("BALANCED", "Balanced", "Balance all factors equally", _prefs(1.0, 0.5, 0.3, 5)),
        RoutePreset("CUSTOM", "Custom", "Manually adjust preferences", None),
    )
}


def get_preset(name: str) -> RoutePreset:
    """Preset by key (case-insensitive); unknown names give BALANCED."""
    return ROUTE_PRESETS.get(str(name).strip().upper(), ROUTE_PRESETS["BALANCED"])


def find_matching_preset(preferences: Preferences) -> str:
    """Key of the first preset within tolerance of ``preferences``, else "CUSTOM"."""
    for key, preset in ROUTE_PRESETS.items():
        ref = preset.preferences
        if ref is None:
            continue
        if (
            abs(preferences.weight_distance - ref.weight_distance) < PRESET_TOLERANCE
            and abs(preferences.weight_single_operator - ref.weight_single_operator) < PRESET_TOLERANCE
            and abs(preferences.weight_curves - ref.weight_curves) < PRESET_TOLERANCE
            and preferences.max_transfers == ref.max_transfers
        ):
            return key
    return "CUSTOM"


# ────────────────────────────────────────────────────────────────────────────
# Freight presets
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class FreightPreset:
    key: str
    name: str
    description: str
    length_ft: float
    width_ft: float
    height_ft: float
    weight_lb: float
    category: str

    def to_spec(self) -> FreightSpec:
        return FreightSpec(
            description=self.name,
            length_ft=self.length_ft,
            width_ft=self.width_ft,
            height_ft=self.height_ft,
            weight_lb=self.weight_lb,
        )


FREIGHT_PRESETS: Dict[str, FreightPreset] = {
    p.key: p
    for p in (
        FreightPreset("20FT_CONTAINER", "20ft Shipping Container",
                      "Standard 20-foot ISO shipping container", 20, 8, 8.5, 5000, "Containers"),
        FreightPreset("40FT_CONTAINER", "40ft Shipping Container",
                      "Standard 40-foot ISO shipping container", 40, 8, 8.5, 8500, "Containers"),
        FreightPreset("PALLET_STANDARD", "Standard Pallet", 'Standard 48" x 40" pallet',
                      4, 3.33, 5, 1500, "Pallets"),
        FreightPreset("PALLET_EURO", "Euro Pallet", "Standard 1200mm x 800mm Euro pallet",
                      3.94, 2.62, 5, 1200, "Pallets"),
        FreightPreset("STEEL_COIL", "Steel Coil (Standard)", "Standard steel coil", 6, 6, 5, 40000, "Steel"),
        FreightPreset("MACHINERY_SMALL", "Small Machinery", "Small industrial machinery",
                      10, 6, 8, 15000, "Machinery"),
        FreightPreset("MACHINERY_LARGE", "Large Machinery", "Large industrial machinery",
                      20, 10, 12, 80000, "Machinery"),
        FreightPreset("AUTOMOTIVE", "Automotive Parts", "Standard automotive parts shipment",
                      12, 8, 6, 10000, "Automotive"),
        FreightPreset("LUMBER_STANDARD", "Standard Lumber Bundle", "Standard lumber bundle",
                      16, 4, 4, 20000, "Lumber"),
        FreightPreset("GRAIN_HOPPER", "Grain (Hopper)", "Grain shipment for hopper car",
                      10, 10, 8, 100000, "Bulk"),
    )
}


def get_freight_preset(key: str) -> Optional[FreightSpec]:
    preset = FREIGHT_PRESETS.get(str(key).strip().upper())
    return preset.to_spec() if preset else None


def freight_presets_by_category() -> Dict[str, List[FreightPreset]]:
    categories: Dict[str, List[FreightPreset]] = {}
    for preset in FREIGHT_PRESETS.values():
        categories.setdefault(preset.category, []).append(preset)
    return categories
