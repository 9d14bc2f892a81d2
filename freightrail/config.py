"""
config.py – Engine settings (search limits, physical constants, fit bands).

Settings can be loaded from YAML or JSON and overlaid with FREIGHTRAIL_*
environment variables.  Every engine entry point takes an optional
``settings=`` keyword and falls back to ``get_default_settings()``.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

logger = logging.getLogger("freightrail.config")

ENV_PREFIX = "FREIGHTRAIL_"


@dataclass
class EngineSettings:
    """Tunable constants of the search and scoring pipeline."""

    # route search
    max_routes: int = 3
    max_completions: int = 20

    # physical model
    car_empty_weight_lb: float = 60_000.0

    # car catalog / recommendation
    default_catalog_operator: str = "BNSF"
    perfect_fit_slack: float = 0.10
    perfect_fit_max_weight_utilization: float = 0.90

    log_level: str = "INFO"

    def validate(self) -> List[str]:
        """Return a list of human-readable problems (empty when valid)."""
        issues = []
        if self.max_routes < 1:
            issues.append(f"Invalid max_routes: {self.max_routes} (must be >= 1)")
        if self.max_completions < self.max_routes:
            issues.append(
                f"Invalid max_completions: {self.max_completions} (must be >= max_routes)"
            )
        if self.car_empty_weight_lb <= 0:
            issues.append(f"Invalid car_empty_weight_lb: {self.car_empty_weight_lb}")
        if not 0 < self.perfect_fit_slack < 1:
            issues.append(f"Invalid perfect_fit_slack: {self.perfect_fit_slack}")
        if not 0 < self.perfect_fit_max_weight_utilization <= 1:
            issues.append(
                f"Invalid perfect_fit_max_weight_utilization: {self.perfect_fit_max_weight_utilization}"
            )
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            issues.append(f"Invalid log_level: {self.log_level}")
        return issues

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "EngineSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(config_dict) - known
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
        return cls(**{k: v for k, v in config_dict.items() if k in known})

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Save settings to file (JSON or YAML, chosen by suffix)."""
        file_path = Path(file_path)
        if file_path.suffix.lower() in [".yaml", ".yml"]:
            with open(file_path, "w") as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2)
        else:
            with open(file_path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "EngineSettings":
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        if file_path.suffix.lower() in [".yaml", ".yml"]:
            with open(file_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        else:
            with open(file_path, "r") as f:
                config_data = json.load(f)

        logger.debug("Loaded settings from %s", file_path)
        return cls.from_dict(config_data)

    def with_env(self, environ=None) -> "EngineSettings":
        """Copy of these settings with FREIGHTRAIL_<FIELD> overrides applied."""
        environ = os.environ if environ is None else environ
        values = self.to_dict()
        for f in fields(self):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            kind = type(values[f.name])
            try:
                values[f.name] = kind(raw)
            except ValueError as exc:
                raise ValueError(f"Invalid {ENV_PREFIX}{f.name.upper()}={raw!r}") from exc
        return EngineSettings(**values)

    @classmethod
    def from_env(cls, environ=None) -> "EngineSettings":
        return cls().with_env(environ)


def get_default_settings() -> EngineSettings:
    """Fresh default settings; callers may mutate their copy freely."""
    return EngineSettings()
