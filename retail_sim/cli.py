"""
Retail Sim — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate inputs (JSON files or options).
  4. Run the forecast or reconciliation core.
  5. Report result to stdout.

Install and run::

    pip install -e .
    retail-sim --help
    retail-sim validate-config
    retail-sim forecast --product jacket --rrp 96 --fabric selvedgeDenim --print
    retail-sim season-forecast --state data/week5.json
    retail-sim summarize --prev data/week5.json --next data/week6.json --ledger data/ledger6.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="retail-sim",
    help="Retail Sim — demand forecasts and weekly reconciliation reports.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from retail_sim.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config; debug mode forces DEBUG level."""
    from retail_sim.utils.logging import configure_logging

    log_cfg = config.logging
    if config.debug:
        log_cfg = log_cfg.model_copy(update={"level": "DEBUG"})
    configure_logging(log_cfg)


def _load_or_exit(loader, path: str, what: str):
    """Run a JSON loader, exiting with code 1 on a missing or malformed file."""
    file_path = Path(path)
    if not file_path.exists():
        typer.echo(f"[ERROR] {what} file not found: {file_path}", err=True)
        raise typer.Exit(code=1)
    try:
        return loader(file_path)
    except (OSError, ValueError) as exc:
        typer.echo(f"[ERROR] Could not load {what.lower()} from {file_path}:\n{exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Output dir:         {config.data.output_dir}")
    typer.echo(f"  Elasticity:         {config.forecast.elasticity}")
    typer.echo(f"  Reference markup:   {config.forecast.reference_markup}")
    typer.echo(f"  Season weeks:       {config.reconciliation.season_weeks}")
    typer.echo(f"  Default mode:       {config.reconciliation.default_mode.value}")
    typer.echo(f"  Strict entry types: {config.reconciliation.strict_entry_types}")
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Debug mode:         {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("forecast")
def forecast(
    product: str = typer.Option(..., "--product", "-p", help="Product id, e.g. jacket."),
    rrp: float = typer.Option(..., "--rrp", help="Recommended retail price."),
    fabric: Optional[str] = typer.Option(
        None, "--fabric", help="Fabric id, e.g. selvedgeDenim."
    ),
    has_print: bool = typer.Option(False, "--print", help="Design carries a print."),
    base_units: Optional[float] = typer.Option(
        None, "--base-units", help="Override the catalogue baseline units."
    ),
    reference_price: Optional[float] = typer.Option(
        None, "--reference-price", help="Override the catalogue reference price."
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Forecast demand for one product at a given RRP and design.

    Baseline units and reference price come from the product catalogue
    unless overridden. Products outside the catalogue need both overrides.
    """
    from retail_sim.forecast.demand import explain_forecast, reference_price_for
    from retail_sim.reporting.formatters import format_forecast
    from retail_sim.taxonomy.product_catalog import PRODUCT_CATALOG

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    ref = PRODUCT_CATALOG.get(product)
    units = base_units if base_units is not None else (ref.base_units if ref else None)
    if reference_price is not None:
        ref_price = reference_price
    elif ref is not None:
        ref_price = reference_price_for(ref.hm_price, config.forecast.reference_markup)
    else:
        ref_price = None

    if rrp <= 0:
        typer.echo(f"[ERROR] --rrp must be > 0, got {rrp}.", err=True)
        raise typer.Exit(code=1)

    result = explain_forecast(
        product_id=product,
        fabric=fabric,
        has_print=has_print,
        rrp=rrp,
        base_units=units,
        reference_price=ref_price,
        elasticity=config.forecast.elasticity,
        print_lift=config.forecast.print_lift,
    )
    typer.echo(format_forecast(product, result))

    if result is None:
        typer.echo("")
        typer.echo(
            f"[WARN] No forecast for '{product}': not in the catalogue. "
            "Pass --base-units and --reference-price."
        )


@app.command("season-forecast")
def season_forecast(
    state_file: str = typer.Option(
        ..., "--state", "-s", help="Snapshot JSON holding productData decisions."
    ),
    json_out: Optional[str] = typer.Option(
        None,
        "--json-out",
        help="Write the projection as JSON to this path (relative paths go under output_dir).",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Project season demand for every catalogue product from a snapshot."""
    from retail_sim.forecast.demand import project_season_demand
    from retail_sim.ingestion.loader import load_state
    from retail_sim.reporting.export import export_to_json
    from retail_sim.reporting.formatters import format_season_forecast

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    state = _load_or_exit(load_state, state_file, "Snapshot")
    season = project_season_demand(
        state.product_data,
        elasticity=config.forecast.elasticity,
        reference_markup=config.forecast.reference_markup,
        print_lift=config.forecast.print_lift,
    )
    typer.echo(f"Week {state.week_number} decisions")
    typer.echo(format_season_forecast(season))

    if json_out:
        path = export_to_json(
            {
                "week_number": state.week_number,
                "per_product": season.per_product,
                "total": season.total,
            },
            config.data.output_path(json_out),
        )
        typer.echo(f"\n  JSON written: {path}")


@app.command("summarize")
def summarize(
    prev_file: str = typer.Option(..., "--prev", help="Snapshot JSON for week N."),
    next_file: str = typer.Option(..., "--next", help="Snapshot JSON for week N+1."),
    ledger_file: str = typer.Option(
        ..., "--ledger", help="Ledger rows JSON for week N+1."
    ),
    history_file: Optional[str] = typer.Option(
        None, "--history", help="Optional JSON array of all snapshots so far."
    ),
    session_id: str = typer.Option(
        "local", "--session-id", help="Game session id copied onto the summary."
    ),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        help="Reconciliation mode: contract_matched or ledger_only (default from config).",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--lenient",
        help="Fail on unrecognised ledger entry types (default from config).",
    ),
    json_out: Optional[str] = typer.Option(
        None,
        "--json-out",
        help="Write the full summary as JSON to this path (relative paths go under output_dir).",
    ),
    csv_out: Optional[str] = typer.Option(
        None,
        "--csv-out",
        help="Write one flat row per line item as CSV to this path (relative to output_dir).",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Reconcile two consecutive snapshots and a week's ledger into a summary.

    \b
    Input files are JSON, camelCase or snake_case:
      --prev / --next  — one GameWeekState object each
      --ledger         — array of ledger rows for the new week
      --history        — array of GameWeekState objects (optional)

    Exits with code 1 on unreadable inputs, out-of-order snapshots, or (in
    strict mode) unrecognised ledger entry types.
    """
    from retail_sim.ingestion.loader import load_history, load_ledger, load_state
    from retail_sim.models.summary import ReconciliationMode
    from retail_sim.reconciliation.consistency import validate_ledger_rows
    from retail_sim.reconciliation.engine import compute_week_summary
    from retail_sim.reconciliation.errors import ReconciliationError
    from retail_sim.reporting.export import (
        SUMMARY_CSV_FIELDS,
        export_summary_json,
        export_to_csv,
        flatten_summary_for_export,
    )
    from retail_sim.reporting.formatters import format_week_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    rcfg = config.reconciliation

    try:
        recon_mode = ReconciliationMode(mode) if mode else rcfg.default_mode
    except ValueError:
        valid = ", ".join(m.value for m in ReconciliationMode)
        typer.echo(f"[ERROR] Unknown mode '{mode}'. Use one of: {valid}.", err=True)
        raise typer.Exit(code=1)
    strict_types = rcfg.strict_entry_types if strict is None else strict

    prev_state = _load_or_exit(load_state, prev_file, "Snapshot")
    next_state = _load_or_exit(load_state, next_file, "Snapshot")
    rows = _load_or_exit(load_ledger, ledger_file, "Ledger")
    history = _load_or_exit(load_history, history_file, "History") if history_file else None

    problems = validate_ledger_rows(rows, next_state.week_number)
    if problems:
        typer.echo(f"[WARN] {len(problems)} ledger row issue(s):", err=True)
        for msg in problems[:5]:
            typer.echo(f"  {msg}", err=True)
        if len(problems) > 5:
            typer.echo(f"  ... and {len(problems) - 5} more.", err=True)

    try:
        summary = compute_week_summary(
            session_id,
            prev_state,
            next_state,
            rows,
            history,
            mode=recon_mode,
            strict=strict_types,
            season_weeks=rcfg.season_weeks,
            consistency_tolerance=rcfg.consistency_tolerance,
        )
    except ReconciliationError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_week_summary(summary))

    if json_out:
        path = export_summary_json(summary, config.data.output_path(json_out))
        typer.echo(f"\n  JSON written: {path}")
    if csv_out:
        path = export_to_csv(
            flatten_summary_for_export(summary),
            config.data.output_path(csv_out),
            SUMMARY_CSV_FIELDS,
        )
        typer.echo(f"  CSV written:  {path}")

    typer.echo("")
    typer.echo(f"[OK] Week {summary.week_number} summarized.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
