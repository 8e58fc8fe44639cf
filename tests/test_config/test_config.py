"""
Tests for retail_sim/config.py.

What we test
------------
  - Built-in defaults validate.
  - An explicit TOML file is loaded and merged with a sibling local.toml.
  - RETAIL_SIM_* environment variables override file values.
  - Invalid values raise pydantic.ValidationError.
  - An explicit missing path raises FileNotFoundError.
  - Relative export paths resolve under data.output_dir.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from retail_sim.config import (
    AppConfig,
    DataConfig,
    ForecastConfig,
    ReconciliationConfig,
    load_config,
)
from retail_sim.models.summary import ReconciliationMode

_ENV_VARS = (
    "RETAIL_SIM_LOG_LEVEL", "RETAIL_SIM_STRICT_LEDGER", "RETAIL_SIM_OUTPUT_DIR", "RETAIL_SIM_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults() -> None:
    cfg = AppConfig()
    assert cfg.forecast.elasticity == -1.40
    assert cfg.forecast.reference_markup == 1.2
    assert cfg.reconciliation.season_weeks == 15
    assert cfg.reconciliation.default_mode == ReconciliationMode.CONTRACT_MATCHED
    assert cfg.logging.level == "INFO"


def test_load_explicit_file_and_local_override(tmp_path: Path) -> None:
    main = _write(tmp_path / "settings.toml", """
[forecast]
elasticity = -1.2

[reconciliation]
default_mode = "ledger_only"

[logging]
level = "debug"
""")
    _write(tmp_path / "local.toml", "[forecast]\nreference_markup = 1.5\n")

    cfg = load_config(main)
    assert cfg.forecast.elasticity == -1.2
    assert cfg.forecast.reference_markup == 1.5
    assert cfg.reconciliation.default_mode == ReconciliationMode.LEDGER_ONLY
    assert cfg.logging.level == "DEBUG"


def test_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    main = _write(tmp_path / "settings.toml", "[logging]\nlevel = \"INFO\"\n")
    monkeypatch.setenv("RETAIL_SIM_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("RETAIL_SIM_STRICT_LEDGER", "true")
    monkeypatch.setenv("RETAIL_SIM_OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("RETAIL_SIM_DEBUG", "1")

    cfg = load_config(main)
    assert cfg.logging.level == "WARNING"
    assert cfg.reconciliation.strict_entry_types is True
    assert cfg.data.output_dir == str(tmp_path / "out")
    assert cfg.debug is True


def test_project_debug_flag(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path / "settings.toml", "[project]\ndebug = true\n"))
    assert cfg.debug is True


def test_output_path_resolves_relative_under_output_dir(tmp_path: Path) -> None:
    cfg = DataConfig(output_dir=str(tmp_path / "exports"))
    assert cfg.output_path("week6/summary.json") == tmp_path / "exports" / "week6" / "summary.json"
    absolute = tmp_path / "elsewhere.csv"
    assert cfg.output_path(str(absolute)) == absolute


def test_missing_explicit_path(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml")


def test_default_file_loads() -> None:
    cfg = load_config()
    assert cfg.forecast.print_lift == 0.03


@pytest.mark.parametrize("kwargs", [{"elasticity": 0.5}, {"reference_markup": 0}, {"print_lift": -0.1}])
def test_invalid_forecast_config(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        ForecastConfig(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [{"season_weeks": 0}, {"consistency_tolerance": -1}, {"default_mode": "guesswork"}],
)
def test_invalid_reconciliation_config(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        ReconciliationConfig(**kwargs)


def test_invalid_log_level(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path / "settings.toml", "[logging]\nlevel = \"LOUD\"\n"))
