"""
ASCII terminal formatters for CLI commands.

All formatters accept forecast results or a ``WeeklySummary`` and return
plain multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Empty sections print an explicit placeholder line ("none this week") rather
than being omitted, so a reader can tell "nothing happened" from "section
missing".
"""

from __future__ import annotations

from typing import Optional

from retail_sim.forecast.demand import DemandForecast, SeasonForecast
from retail_sim.models.summary import WeeklySummary


def _money(value: float) -> str:
    return f"£{value:,.2f}"


def _units(value: float) -> str:
    return f"{value:,.0f}"


# ── Forecasts ─────────────────────────────────────────────────────────────────


def format_forecast(product_id: str, forecast: Optional[DemandForecast]) -> str:
    """Format a single-product forecast with its component breakdown."""
    lines: list[str] = ["", f"=== Demand Forecast: {product_id} ==="]
    if forecast is None:
        lines.append("  Forecast:        -- (RRP not set or reference data unavailable)")
        return "\n".join(lines)

    lines.append(f"  RRP:             {_money(forecast.price)}")
    lines.append(f"  Reference price: {_money(forecast.reference_price)}")
    lines.append(f"  Baseline units:  {_units(forecast.base_units)}")
    lines.append(f"  Price effect:    {forecast.price_effect:.4f}")
    lines.append(f"  Position effect: {forecast.position_effect:.4f}")
    lines.append(f"  Design effect:   {forecast.design_effect:.4f}")
    lines.append(f"  Demand vs base:  {forecast.pct * 100:.1f}%")
    lines.append(f"  Forecast:        {_units(forecast.units)} units")
    return "\n".join(lines)


def format_season_forecast(season: SeasonForecast) -> str:
    """Format per-product season projections and their total."""
    lines: list[str] = ["", "=== Projected Season Demand ==="]
    lines.append(f"    {'Product':<12}  {'Units':>12}")
    lines.append("    " + "-" * 26)
    for product_id in sorted(season.per_product):
        lines.append(f"    {product_id:<12}  {_units(season.per_product[product_id]):>12}")
    lines.append("    " + "-" * 26)
    lines.append(f"    {'TOTAL':<12}  {_units(season.total):>12}")
    return "\n".join(lines)


# ── Weekly summary ────────────────────────────────────────────────────────────


def format_week_summary(summary: WeeklySummary) -> str:
    """Format a ``WeeklySummary`` as a multi-section text report."""
    cash = summary.cash
    out = cash.outflows
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Week {summary.week_number} Summary ===")
    lines.append(f"  Session:      {summary.game_session_id}")
    lines.append(f"  Generated at: {summary.generated_at}")
    lines.append(f"  Mode:         {summary.mode.value}")

    lines.append("")
    lines.append("  [CASH]")
    lines.append(
        f"    Opening cash {_money(cash.opening_cash)} | credit {_money(cash.opening_credit)}"
    )
    for label, value in (
        ("Marketing", out.marketing),
        ("Materials SPT", out.materials_spt),
        ("Materials GMC", out.materials_gmc),
        ("Production", out.production),
        ("Logistics", out.logistics),
        ("Holding", out.holding),
        ("Interest", cash.interest),
    ):
        lines.append(f"    {label:<14} {_money(value):>16}")
    lines.append(f"    {'Revenue':<14} {_money(cash.revenue):>16}")
    lines.append(
        f"    Closing cash {_money(cash.closing_cash)} | credit {_money(cash.closing_credit)}"
    )

    lines.append("")
    lines.append("  [ARRIVALS]")
    if not summary.procurement.arrivals:
        lines.append("    none this week")
    for a in summary.procurement.arrivals:
        defect = f" ({_units(a.defective_units)} defective)" if a.defective_units > 0 else ""
        lines.append(
            f"    {a.supplier} | {a.material} | +{_units(a.good_units)} u{defect}"
            f" @ {_money(a.unit_price)} = {_money(a.amount)}"
        )

    lines.append("")
    lines.append("  [SETTLEMENTS]")
    if not summary.procurement.settlements:
        lines.append("    none this week")
    for s in summary.procurement.settlements:
        lines.append(
            f"    {s.kind.value} | {s.supplier}:{s.material} | {_money(s.amount)}"
        )

    lines.append("")
    lines.append("  [RAW MATERIALS]")
    if not summary.inventory.raw_materials:
        lines.append("    no change")
    for d in summary.inventory.raw_materials:
        avg = "-" if d.avg_unit_cost_after is None else _money(d.avg_unit_cost_after)
        lines.append(
            f"    {d.material:<18} {d.delta_units:>+12,.0f} u {d.delta_value:>+14,.2f}"
            f" | on hand {_units(d.on_hand_after)} @ {avg}"
        )

    lines.append("")
    lines.append("  [PRODUCTION]")
    started = summary.production.started
    completed = summary.production.completed
    lots = summary.inventory.finished_goods_added
    lines.append(f"    Started:   {len(started)} batch(es)")
    for b in started:
        lines.append(
            f"      {b.product} | {b.method.value} | {_units(b.quantity)} u"
            f" | ends week {b.end_week} @ {_money(b.unit_production_cost)}/u"
        )
    lines.append(f"    Completed: {len(completed)} batch(es)")
    for b in completed:
        lines.append(f"      {b.product} | {_units(b.quantity)} u")
    lines.append(f"    FG lots added: {len(lots)}")
    for lot in lots:
        lines.append(f"      {lot.product} | +{_units(lot.quantity)} u @ {_money(lot.unit_cost_basis)}")

    m = summary.marketing
    lines.append("")
    lines.append("  [MARKETING]")
    lines.append(
        f"    Awareness {m.ai_delta.awareness_from:.1f} -> {m.ai_delta.awareness_to:.1f}"
        f" | Intent {m.ai_delta.intent_from:.1f} -> {m.ai_delta.intent_to:.1f}"
    )
    lines.append(f"    Charged: {_money(m.charged)} | channels: {len(m.plan_applied)}")

    diag = summary.diagnostics
    lines.append("")
    lines.append("  [DIAGNOSTICS]")
    flag = "OK" if diag.within_tolerance else "CHECK"
    lines.append(
        f"    [{flag}] materials variance {_money(diag.materials_variance)}"
        f" (arrivals {_money(diag.inventory_arrival_value)}"
        f" vs ledger {_money(diag.ledger_materials_outflow)})"
    )
    if diag.unknown_entry_types:
        lines.append(f"    Excluded entry types: {', '.join(diag.unknown_entry_types)}")
    if diag.dropped_rows:
        lines.append(f"    Rows from other weeks dropped: {diag.dropped_rows}")
    if not summary.demand_series.complete:
        lines.append("    Demand series partial (no week history supplied)")

    return "\n".join(lines)
