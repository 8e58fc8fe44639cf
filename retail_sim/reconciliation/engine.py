"""
Weekly reconciliation engine — the single canonical entry point.

``compute_week_summary()`` turns week N's snapshot, week N+1's snapshot and
week N+1's ledger rows into a ``WeeklySummary``. Steps, in order:

  1. Cash waterfall      — ledger sums per category; revenue from week N.
  2. Raw-material deltas — snapshot diff over the union of materials.
  3. Arrivals            — positive deltas, contract-matched for defects.
  4. Settlements         — SPT/GMC ledger rows with parsed supplier:material.
  5. Finished goods      — lots whose id is new in week N+1.
  6. Production started  — per-week tracker if present, else batch list.
  7. Production completed— week N batches ending in week N+1.
  8. Marketing           — awareness/intent movement and charge.
  9. Demand series       — weeks 1..15 from history, or the two snapshots.

Determinism
-----------
The function has no side effects beyond logging. The only wall-clock value,
``generated_at``, comes from the injected ``clock``; with a fixed clock two
calls on identical inputs produce byte-identical ``model_dump_json()``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.state import SEASON_WEEKS, GameWeekState
from retail_sim.models.summary import (
    InventorySection,
    ProcurementSection,
    ProductionSection,
    ReconciliationMode,
    WeeklySummary,
)
from retail_sim.reconciliation.cash import build_cash_waterfall
from retail_sim.reconciliation.consistency import (
    DEFAULT_TOLERANCE,
    build_diagnostics,
    partition_rows,
    unknown_entry_types,
)
from retail_sim.reconciliation.errors import SnapshotOrderError, UnknownLedgerEntryTypeError
from retail_sim.reconciliation.inventory import finished_goods_added, raw_material_deltas
from retail_sim.reconciliation.marketing import build_marketing_section
from retail_sim.reconciliation.procurement import build_arrivals, build_settlements
from retail_sim.reconciliation.production import production_completed, production_started
from retail_sim.reconciliation.series import build_demand_series
from retail_sim.taxonomy.production import ProductionMethod, ProductionTerms
from retail_sim.utils.time_utils import format_utc, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def compute_week_summary(
    game_session_id: str,
    prev_state: GameWeekState,
    next_state: GameWeekState,
    ledger_rows: list[LedgerEntry],
    all_weeks: Optional[Iterable[GameWeekState]] = None,
    *,
    clock: Clock = utcnow,
    mode: ReconciliationMode = ReconciliationMode.CONTRACT_MATCHED,
    strict: bool = False,
    season_weeks: int = SEASON_WEEKS,
    consistency_tolerance: float = DEFAULT_TOLERANCE,
    production_table: dict[tuple[str, ProductionMethod], ProductionTerms] | None = None,
) -> WeeklySummary:
    """Derive the end-of-week summary for the transition ``prev_state`` → ``next_state``.

    Args:
        game_session_id:       Session identifier copied onto the summary.
        prev_state:            Snapshot of week N.
        next_state:            Snapshot of week N+1.
        ledger_rows:           Ledger rows of week N+1. Rows tagged with
            another week are dropped (and counted in diagnostics).
        all_weeks:             Optional full snapshot history for the demand series.
        clock:                 Returns the current UTC time; inject a fixed
            clock for reproducible output.
        mode:                  Arrival reconciliation mode.
        strict:                Raise on unrecognised ledger entry types instead
            of excluding them.
        season_weeks:          Length of the demand series.
        consistency_tolerance: Allowed materials variance before flagging.
        production_table:      Override for the production terms lookup.

    Returns:
        Frozen ``WeeklySummary``.

    Raises:
        SnapshotOrderError: If ``next_state`` is not later than ``prev_state``.
        UnknownLedgerEntryTypeError: In strict mode, if any row's entry type
            is unrecognised.
    """
    week = next_state.week_number
    if week <= prev_state.week_number:
        raise SnapshotOrderError(prev_state.week_number, week)

    rows, dropped = partition_rows(list(ledger_rows), week)
    if dropped:
        logger.warning(
            "Dropped %d ledger row(s) not scoped to week %d (weeks seen: %s).",
            len(dropped), week, sorted({r.week_number for r in dropped}),
        )

    unknown = unknown_entry_types(rows)
    if unknown:
        if strict:
            raise UnknownLedgerEntryTypeError(unknown)
        logger.warning(
            "Excluding ledger rows with unrecognised entry type(s) from week %d: %s",
            week, ", ".join(unknown),
        )

    cash = build_cash_waterfall(prev_state, next_state, rows)
    deltas = raw_material_deltas(prev_state, next_state)
    arrivals = build_arrivals(deltas, next_state, rows, mode)
    settlements = build_settlements(rows)
    lots_added = finished_goods_added(prev_state, next_state)
    started = production_started(next_state, production_table)
    completed = production_completed(prev_state, week)
    marketing = build_marketing_section(prev_state, next_state, rows)
    series = build_demand_series(prev_state, next_state, all_weeks, season_weeks)
    diagnostics = build_diagnostics(
        rows, arrivals, unknown, len(dropped), consistency_tolerance
    )

    summary = WeeklySummary(
        game_session_id=game_session_id,
        week_number=week,
        generated_at=format_utc(clock()),
        mode=mode,
        cash=cash,
        procurement=ProcurementSection(arrivals=arrivals, settlements=settlements),
        inventory=InventorySection(raw_materials=deltas, finished_goods_added=lots_added),
        production=ProductionSection(started=started, completed=completed),
        marketing=marketing,
        ledger_rows=rows,
        demand_series=series,
        diagnostics=diagnostics,
    )

    logger.debug(
        "Week %d summary | session=%s | mode=%s | rows=%d | arrivals=%d | "
        "settlements=%d | started=%d | completed=%d",
        week, game_session_id, mode.value, len(rows), len(arrivals),
        len(settlements), len(started), len(completed),
    )
    return summary
