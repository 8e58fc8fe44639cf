"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``RETAIL_SIM_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

CLI commands receive an ``AppConfig`` instance and pass the relevant values
to the forecast and reconciliation functions as plain arguments; library
code never reads configuration or environment variables itself.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from retail_sim.models.summary import ReconciliationMode

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for CLI output."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs"

    def output_path(self, path: str) -> Path:
        """Resolve an export path; relative paths land under ``output_dir``."""
        p = Path(path)
        return p if p.is_absolute() else Path(self.output_dir) / p


class ForecastConfig(BaseModel):
    """Demand forecast parameters."""

    model_config = ConfigDict(frozen=True)

    elasticity: float = -1.40
    reference_markup: float = 1.2
    print_lift: float = 0.03

    @field_validator("elasticity")
    @classmethod
    def validate_elasticity(cls, v: float) -> float:
        if v >= 0:
            raise ValueError(f"elasticity must be negative, got {v}.")
        return v

    @field_validator("reference_markup")
    @classmethod
    def validate_markup(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"reference_markup must be > 0, got {v}.")
        return v

    @field_validator("print_lift")
    @classmethod
    def validate_print_lift(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"print_lift must be >= 0, got {v}.")
        return v


class ReconciliationConfig(BaseModel):
    """Weekly reconciliation settings."""

    model_config = ConfigDict(frozen=True)

    season_weeks: int = 15
    strict_entry_types: bool = False
    default_mode: ReconciliationMode = ReconciliationMode.CONTRACT_MATCHED
    consistency_tolerance: float = 1.0

    @field_validator("season_weeks")
    @classmethod
    def validate_season_weeks(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"season_weeks must be >= 1, got {v}.")
        return v

    @field_validator("consistency_tolerance")
    @classmethod
    def validate_tolerance(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"consistency_tolerance must be >= 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()``, which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    forecast: ForecastConfig = ForecastConfig()
    reconciliation: ReconciliationConfig = ReconciliationConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent

_TRUTHY = ("1", "true", "yes", "on")


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            missing, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            raw = _read_toml(default_path)
        local_path = root / "config" / "local.toml"
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        raw = _read_toml(config_path)
        local_path = config_path.parent / "local.toml"

    if local_path.exists():
        raw = _deep_merge(raw, _read_toml(local_path))

    raw = _apply_env_overrides(raw)
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply RETAIL_SIM_* env vars to the raw config dict.

    Supported overrides:
      RETAIL_SIM_LOG_LEVEL      → raw["logging"]["level"]
      RETAIL_SIM_STRICT_LEDGER  → raw["reconciliation"]["strict_entry_types"]
      RETAIL_SIM_OUTPUT_DIR     → raw["data"]["output_dir"]
      RETAIL_SIM_DEBUG          → raw["debug"]
    """
    if log_level := os.environ.get("RETAIL_SIM_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if strict := os.environ.get("RETAIL_SIM_STRICT_LEDGER"):
        raw.setdefault("reconciliation", {})["strict_entry_types"] = strict.lower() in _TRUTHY

    if output_dir := os.environ.get("RETAIL_SIM_OUTPUT_DIR"):
        raw.setdefault("data", {})["output_dir"] = output_dir

    if debug := os.environ.get("RETAIL_SIM_DEBUG"):
        raw["debug"] = debug.lower() in _TRUTHY

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.get("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        forecast=ForecastConfig(**raw.get("forecast", {})),
        reconciliation=ReconciliationConfig(**raw.get("reconciliation", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
