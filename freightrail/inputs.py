"""
inputs.py – Validated value objects handed to the engine on every call.

The UI collaborator sends plain structured data (preferences, freight
spec, placement).  These models are frozen: every engine entry point works
on its own copy, nothing is mutated in place.
"""
from __future__ import annotations

from typing import FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import Operator, UnitSystem
from .units import convert_length, convert_weight


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _strip_strings(cls, v):
        return v.strip() if isinstance(v, str) else v


class FreightSpec(_Frozen):
    """One piece of freight.  Dimensions in feet, weight in pounds (imperial)."""

    description: str = ""
    length_ft: float = Field(0.0, alias="length")
    width_ft: float = Field(0.0, alias="width")
    height_ft: float = Field(0.0, alias="height")
    weight_lb: float = Field(0.0, alias="weight")
    unit_system: UnitSystem = UnitSystem.IMPERIAL

    @property
    def is_complete(self) -> bool:
        """False when any dimension or the weight is zero/negative."""
        return min(self.length_ft, self.width_ft, self.height_ft, self.weight_lb) > 0

    def to_imperial(self) -> "FreightSpec":
        if self.unit_system is UnitSystem.IMPERIAL:
            return self
        src, dst = UnitSystem.METRIC, UnitSystem.IMPERIAL
        return self.model_copy(
            update={
                "length_ft": convert_length(self.length_ft, src, dst),
                "width_ft": convert_length(self.width_ft, src, dst),
                "height_ft": convert_length(self.height_ft, src, dst),
                "weight_lb": convert_weight(self.weight_lb, src, dst),
                "unit_system": dst,
            }
        )


class Placement(_Frozen):
    """Offset of the freight centre from the car centre, in feet."""

    x_offset_ft: float = Field(0.0, alias="x")   # + forward / - backward
    y_offset_ft: float = Field(0.0, alias="y")   # + right / - left


class Preferences(_Frozen):
    """Search configuration for ``find_routes``."""

    weight_distance: float = Field(1.0, ge=0)
    weight_single_operator: float = Field(0.5, ge=0)
    weight_curves: float = Field(0.3, ge=0)
    max_transfers: int = Field(5, ge=0)
    require_operators: FrozenSet[Operator] = frozenset()
    avoid_operators: FrozenSet[Operator] = frozenset()

    @field_validator("require_operators", "avoid_operators", mode="before")
    @classmethod
    def _upper_operators(cls, v):
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(o.strip().upper() if isinstance(o, str) else o for o in v)
