"""
Export helpers for spreadsheets and manual analysis.

All writers create parent directories and return the written ``Path``.

CSV exports are flat (no nested dicts) so they load directly in Excel or a
BI tool without pre-processing. ``flatten_summary_for_export()`` is the
adapter: it turns the nested ``WeeklySummary`` into one row per line item
(arrival, settlement, raw-material delta, batch, lot, cash line), each
tagged with its ``section``.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from retail_sim.models.summary import WeeklySummary

SUMMARY_CSV_FIELDS: list[str] = [
    "game_session_id", "week_number", "generated_at", "section", "label",
    "supplier", "material", "product", "units", "defective_units",
    "unit_price", "amount",
]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order. If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_summary_json(summary: WeeklySummary, path: Path) -> Path:
    """Write a ``WeeklySummary`` as JSON.

    Uses pydantic's serialiser so two identical summaries produce identical
    files.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(summary.model_dump_json(indent=2), encoding="utf-8")
    return path


def flatten_summary_for_export(summary: WeeklySummary) -> list[dict]:
    """Flatten a ``WeeklySummary`` into one row per line item.

    Sections: ``cash``, ``arrival``, ``settlement``, ``raw_material``,
    ``production_started``, ``production_completed``, ``fg_lot``.
    Columns not applicable to a section are empty strings.

    Returns:
        List of flat row dicts keyed by ``SUMMARY_CSV_FIELDS``.
    """
    base = {
        "game_session_id": summary.game_session_id,
        "week_number":     summary.week_number,
        "generated_at":    summary.generated_at,
    }

    def row(section: str, **values: object) -> dict:
        r = {name: "" for name in SUMMARY_CSV_FIELDS}
        r.update(base)
        r["section"] = section
        r.update(values)
        return r

    rows: list[dict] = []
    cash = summary.cash
    for label, amount in (
        ("opening_cash", cash.opening_cash),
        ("opening_credit", cash.opening_credit),
        ("marketing", cash.outflows.marketing),
        ("materials_spt", cash.outflows.materials_spt),
        ("materials_gmc", cash.outflows.materials_gmc),
        ("production", cash.outflows.production),
        ("logistics", cash.outflows.logistics),
        ("holding", cash.outflows.holding),
        ("interest", cash.interest),
        ("revenue", cash.revenue),
        ("closing_cash", cash.closing_cash),
        ("closing_credit", cash.closing_credit),
    ):
        rows.append(row("cash", label=label, amount=amount))

    for a in summary.procurement.arrivals:
        rows.append(row(
            "arrival", supplier=a.supplier, material=a.material, units=a.good_units,
            defective_units=a.defective_units, unit_price=a.unit_price, amount=a.amount,
        ))
    for s in summary.procurement.settlements:
        rows.append(row(
            "settlement", label=s.kind.value, supplier=s.supplier,
            material=s.material, amount=s.amount,
        ))
    for d in summary.inventory.raw_materials:
        rows.append(row(
            "raw_material", material=d.material, units=d.delta_units,
            unit_price="" if d.avg_unit_cost_after is None else d.avg_unit_cost_after,
            amount=d.delta_value,
        ))
    for b in summary.production.started:
        rows.append(row(
            "production_started", label=b.id, product=b.product, units=b.quantity,
            unit_price=b.unit_production_cost, amount=b.quantity * b.unit_production_cost,
        ))
    for b in summary.production.completed:
        rows.append(row("production_completed", label=b.id, product=b.product, units=b.quantity))
    for lot in summary.inventory.finished_goods_added:
        rows.append(row(
            "fg_lot", label=lot.id, product=lot.product, units=lot.quantity,
            unit_price=lot.unit_cost_basis,
        ))
    return rows
