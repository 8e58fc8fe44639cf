"""
Ledger validation and cross-source diagnostics.

Ledger validation
-----------------
``validate_ledger_rows()`` lists every problem with a batch of rows without
raising: rows tagged with another week, and rows whose entry type is not a
``LedgerEntryType``. The engine drops the former and excludes the latter
from all sums; in strict mode it raises ``UnknownLedgerEntryTypeError``
for the latter instead.

Materials cross-check
---------------------
Inventory value received (snapshot diff) and materials settlements (ledger)
are independent audit trails that should agree in aggregate::

    materials_variance = sum(arrival.amount) - (SPT + GMC ledger outflow)

The variance is reported, never enforced. Payment timing legitimately
differs from delivery timing (GMC instalments, deposits), so a non-zero
variance is a signal for review rather than an error.
"""

from __future__ import annotations

import logging

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.summary import ProcurementArrival, ReconciliationDiagnostics
from retail_sim.reconciliation.cash import sum_by_entry_type
from retail_sim.taxonomy.ledger_taxonomy import LedgerEntryType

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1.0


def partition_rows(
    rows: list[LedgerEntry],
    week: int,
) -> tuple[list[LedgerEntry], list[LedgerEntry]]:
    """Split ``rows`` into (rows of ``week``, rows of any other week)."""
    in_week: list[LedgerEntry] = []
    other: list[LedgerEntry] = []
    for row in rows:
        (in_week if row.week_number == week else other).append(row)
    return in_week, other


def unknown_entry_types(rows: list[LedgerEntry]) -> list[str]:
    """Distinct unrecognised entry types in ``rows``, sorted."""
    return sorted({r.entry_type for r in rows if not r.is_known_type})


def validate_ledger_rows(rows: list[LedgerEntry], week: int) -> list[str]:
    """Return human-readable issues for ``rows`` expected to belong to ``week``.

    An empty list means the rows are clean.
    """
    issues: list[str] = []
    for i, row in enumerate(rows):
        if row.week_number != week:
            issues.append(f"Row #{i}: week {row.week_number} != expected week {week}.")
        if not row.is_known_type:
            issues.append(f"Row #{i}: unknown entry type '{row.entry_type}'.")
    return issues


def build_diagnostics(
    rows: list[LedgerEntry],
    arrivals: list[ProcurementArrival],
    unknown_types: list[str],
    dropped_rows: int,
    tolerance: float = DEFAULT_TOLERANCE,
) -> ReconciliationDiagnostics:
    """Measure agreement between ledger materials outflow and inventory received."""
    ledger_materials = (
        sum_by_entry_type(rows, LedgerEntryType.MATERIALS_SPT)
        + sum_by_entry_type(rows, LedgerEntryType.MATERIALS_GMC)
    )
    arrival_value = float(sum(a.amount for a in arrivals))
    variance = arrival_value - ledger_materials
    within = abs(variance) <= tolerance

    if not within:
        logger.warning(
            "Materials variance %.2f exceeds tolerance %.2f "
            "(arrivals=%.2f, ledger=%.2f).",
            variance, tolerance, arrival_value, ledger_materials,
        )

    return ReconciliationDiagnostics(
        ledger_materials_outflow=ledger_materials,
        inventory_arrival_value=arrival_value,
        materials_variance=variance,
        within_tolerance=within,
        unknown_entry_types=unknown_types,
        dropped_rows=dropped_rows,
    )
