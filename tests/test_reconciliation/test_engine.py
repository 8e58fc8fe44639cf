"""
Tests for retail_sim/reconciliation/engine.py.

What we test
------------
compute_week_summary():
  - Assembles every section for the week 5 → week 6 fixture transition.
  - Same inputs + fixed clock → byte-identical JSON.
  - generated_at comes from the injected clock.
  - SnapshotOrderError when next.week_number <= prev.week_number.
  - Rows tagged with another week are dropped and counted.
  - Unknown entry types: excluded + reported, or raised in strict mode.
  - LEDGER_ONLY mode skips contract matching.
  - all_weeks history marks the demand series complete.
"""

from __future__ import annotations

import logging

import pytest

from retail_sim.models.summary import ReconciliationMode
from retail_sim.reconciliation.engine import compute_week_summary
from retail_sim.reconciliation.errors import (
    ReconciliationError,
    SnapshotOrderError,
    UnknownLedgerEntryTypeError,
)
from retail_sim.taxonomy.ledger_taxonomy import SettlementKind
from retail_sim.taxonomy.production import ProductionMethod


def _summarize(prev, nxt, rows, clock, **kwargs):
    return compute_week_summary("session-1", prev, nxt, rows, clock=clock, **kwargs)


# ── Full transition ───────────────────────────────────────────────────────────

class TestWeekFiveToSix:
    @pytest.fixture
    def summary(self, week5_state, week6_state, week6_ledger, frozen_clock):
        return _summarize(week5_state, week6_state, week6_ledger, frozen_clock)

    def test_header(self, summary) -> None:
        assert summary.game_session_id == "session-1"
        assert summary.week_number == 6
        assert summary.generated_at == "2026-03-02T09:00:00Z"
        assert summary.mode == ReconciliationMode.CONTRACT_MATCHED

    def test_cash(self, summary) -> None:
        cash = summary.cash
        assert cash.opening_cash == 238_000.0
        assert cash.opening_credit == 5_000.0
        assert cash.revenue == 41_000.0
        assert cash.interest == 25.0
        assert cash.outflows.marketing == 500.0
        assert cash.outflows.production == 1_200.0
        assert cash.outflows.materials_spt == 720.0
        assert cash.outflows.materials_gmc == 0.0
        assert cash.closing_cash == 238_000.0

    def test_procurement(self, summary) -> None:
        (arrival,) = summary.procurement.arrivals
        assert arrival.supplier == "supplier1"
        assert arrival.material == "selvedgeDenim"
        assert arrival.ordered_units == 100
        assert arrival.good_units == 90
        assert arrival.defective_units == 10
        assert arrival.unit_price == pytest.approx(8.0)
        assert arrival.amount == pytest.approx(720.0)

        (settlement,) = summary.procurement.settlements
        assert settlement.kind == SettlementKind.SPT
        assert settlement.supplier == "supplier1"
        assert settlement.due_week == 6

    def test_inventory(self, summary) -> None:
        assert [d.material for d in summary.inventory.raw_materials] == ["selvedgeDenim"]
        assert [lot.id for lot in summary.inventory.finished_goods_added] == ["lot-2"]

    def test_production(self, summary) -> None:
        (started,) = summary.production.started
        assert started.id == "wip-6-1"
        assert started.product == "pants"
        assert started.method == ProductionMethod.INHOUSE
        assert started.end_week == 8
        assert started.unit_production_cost == 12.0

        assert [b.id for b in summary.production.completed] == ["b-1"]

    def test_marketing(self, summary) -> None:
        m = summary.marketing
        assert m.charged == 500.0
        assert m.ai_delta.awareness_from == 30
        assert m.ai_delta.awareness_to == 34.5
        assert [c.name for c in m.plan_applied] == ["social"]

    def test_demand_series_partial_without_history(self, summary) -> None:
        series = summary.demand_series
        assert not series.complete
        assert len(series.points) == 15
        assert series.points[4].total_demand == 2_100
        assert series.points[5].total_demand == 2_050
        assert series.points[0].total_demand == 0

    def test_diagnostics(self, summary) -> None:
        diag = summary.diagnostics
        assert diag.within_tolerance
        assert diag.materials_variance == pytest.approx(0.0)
        assert diag.unknown_entry_types == []
        assert diag.dropped_rows == 0


# ── Determinism ───────────────────────────────────────────────────────────────

def test_identical_inputs_identical_json(week5_state, week6_state, week6_ledger, frozen_clock) -> None:
    first = _summarize(week5_state, week6_state, week6_ledger, frozen_clock)
    second = _summarize(week5_state, week6_state, week6_ledger, frozen_clock)
    assert first.model_dump_json() == second.model_dump_json()


def test_inputs_are_not_mutated(week5_state, week6_state, week6_ledger, frozen_clock) -> None:
    before = (week5_state.model_dump_json(), week6_state.model_dump_json())
    _summarize(week5_state, week6_state, week6_ledger, frozen_clock)
    assert (week5_state.model_dump_json(), week6_state.model_dump_json()) == before


# ── Ordering and scoping ──────────────────────────────────────────────────────

@pytest.mark.parametrize("next_week", [5, 4])
def test_out_of_order_snapshots_raise(make_state, frozen_clock, next_week: int) -> None:
    with pytest.raises(SnapshotOrderError) as exc_info:
        _summarize(make_state(5), make_state(next_week), [], frozen_clock)
    assert isinstance(exc_info.value, ReconciliationError)
    assert exc_info.value.next_week == next_week


def test_rows_from_other_weeks_dropped(make_state, make_row, frozen_clock, caplog) -> None:
    rows = [make_row("marketing", 500), make_row("marketing", 9_999, week_number=5)]
    with caplog.at_level(logging.WARNING):
        summary = _summarize(make_state(5), make_state(6), rows, frozen_clock)
    assert summary.cash.outflows.marketing == 500.0
    assert summary.diagnostics.dropped_rows == 1
    assert len(summary.ledger_rows) == 1
    assert "Dropped 1 ledger row" in caplog.text


# ── Unknown entry types ───────────────────────────────────────────────────────

def test_unknown_entry_type_excluded(make_state, make_row, frozen_clock, caplog) -> None:
    rows = [make_row("marketing", 500), make_row("marketting", 300)]
    with caplog.at_level(logging.WARNING):
        summary = _summarize(make_state(5), make_state(6), rows, frozen_clock)
    assert summary.cash.outflows.total == 500.0
    assert summary.diagnostics.unknown_entry_types == ["marketting"]
    assert "marketting" in caplog.text


def test_unknown_entry_type_strict_raises(make_state, make_row, frozen_clock) -> None:
    rows = [make_row("bonus", 10), make_row("marketting", 300)]
    with pytest.raises(UnknownLedgerEntryTypeError) as exc_info:
        _summarize(make_state(5), make_state(6), rows, frozen_clock, strict=True)
    assert exc_info.value.entry_types == ["bonus", "marketting"]


def test_empty_entry_type_excluded_and_listed(make_state, make_row, frozen_clock) -> None:
    rows = [make_row("holding", 40), make_row("", 999)]
    summary = _summarize(make_state(5), make_state(6), rows, frozen_clock)
    assert summary.cash.outflows.total == 40.0
    assert summary.cash.interest == 0.0
    assert summary.diagnostics.unknown_entry_types == [""]

    with pytest.raises(UnknownLedgerEntryTypeError) as exc_info:
        _summarize(make_state(5), make_state(6), rows, frozen_clock, strict=True)
    assert exc_info.value.entry_types == [""]


# ── Modes and history ─────────────────────────────────────────────────────────

def test_ledger_only_mode_skips_contract_match(
    week5_state, week6_state, week6_ledger, frozen_clock
) -> None:
    summary = _summarize(
        week5_state, week6_state, week6_ledger, frozen_clock,
        mode=ReconciliationMode.LEDGER_ONLY,
    )
    (arrival,) = summary.procurement.arrivals
    assert summary.mode == ReconciliationMode.LEDGER_ONLY
    assert arrival.defective_units == 0
    assert arrival.ordered_units == arrival.good_units == 90
    assert arrival.supplier == "supplier1"


def test_history_marks_series_complete(make_state, frozen_clock) -> None:
    history = [make_state(w, weekly_demand={"jacket": 100 * w}) for w in range(1, 7)]
    summary = _summarize(history[4], history[5], [], frozen_clock, all_weeks=history)
    assert summary.demand_series.complete
    assert [p.total_demand for p in summary.demand_series.points[:6]] == [
        100, 200, 300, 400, 500, 600,
    ]


def test_empty_transition_is_all_zero(make_state, frozen_clock) -> None:
    summary = _summarize(make_state(1), make_state(2), [], frozen_clock)
    assert summary.cash.outflows.total == 0.0
    assert summary.procurement.arrivals == []
    assert summary.inventory.raw_materials == []
    assert summary.production.started == []
    assert summary.diagnostics.within_tolerance
