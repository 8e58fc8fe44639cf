"""
Tests for retail_sim/reconciliation/procurement.py.

What we test
------------
build_arrivals():
  - Contract of 100 units for the week, stock delta 90 → 90 good, 10 defective.
  - Over-delivery never reports negative defects.
  - Only positive deltas become arrivals.
  - Supplier attribution: contract, then ledger ref, then "unknown".
  - Several contracts for one material sum their units and join suppliers.
  - LEDGER_ONLY skips the contract schedule.
  - GMC contracts without deliveries are scheduled from their orders at
    order week + supplier lead time; explicit deliveries take precedence.

build_settlements():
  - One settlement per SPT/GMC row, supplier:material parsed from ref_id.
  - Malformed ref_id falls back to "unknown".
"""

from __future__ import annotations

import pytest

from retail_sim.models.summary import InventoryDelta, ReconciliationMode
from retail_sim.reconciliation.procurement import (
    arrival_unit_price,
    build_arrivals,
    build_settlements,
    contract_deliveries,
    scheduled_deliveries,
)
from retail_sim.taxonomy.ledger_taxonomy import SettlementKind


def _delta(material: str, units: float, value: float) -> InventoryDelta:
    return InventoryDelta(
        material=material, delta_units=units, delta_value=value, on_hand_after=units,
    )


def _contract(material: str, week: int, units: float, supplier: str | None = "supplier1") -> dict:
    return {"supplier": supplier, "material": material, "deliveries": [{"week": week, "units": units}]}


def _contracts(*contracts: dict) -> dict:
    return {"contracts": list(contracts)}


# ── Arrivals ──────────────────────────────────────────────────────────────────

def test_short_delivery_reported_as_defects(make_state) -> None:
    state = make_state(5, procurement_contracts=_contracts(_contract("X", 5, 100)))
    (arrival,) = build_arrivals([_delta("X", 90, 900)], state, [])

    assert arrival.ordered_units == 100
    assert arrival.good_units == 90
    assert arrival.defective_units == 10
    assert arrival.unit_price == pytest.approx(10.0)
    assert arrival.amount == pytest.approx(900.0)
    assert arrival.supplier == "supplier1"


def test_over_delivery_has_no_defects(make_state) -> None:
    state = make_state(5, procurement_contracts=_contracts(_contract("X", 5, 80)))
    (arrival,) = build_arrivals([_delta("X", 90, 900)], state, [])
    assert arrival.defective_units == 0


def test_delivery_for_other_week_ignored(make_state) -> None:
    state = make_state(5, procurement_contracts=_contracts(_contract("X", 6, 100)))
    (arrival,) = build_arrivals([_delta("X", 90, 900)], state, [])
    assert arrival.defective_units == 0
    assert arrival.ordered_units == 90
    assert arrival.supplier == "unknown"


def test_only_positive_deltas_arrive(make_state) -> None:
    deltas = [_delta("A", -10, -50), _delta("B", 0, 20), _delta("C", 5, 25)]
    arrivals = build_arrivals(deltas, make_state(5), [])
    assert [a.material for a in arrivals] == ["C"]


def test_supplier_from_ledger_ref(make_state, make_row) -> None:
    rows = [
        make_row("marketing", 10, ref_id="ignored:X"),
        make_row("materials_gmc", 500, ref_id="supplier2:X", week_number=5),
    ]
    (arrival,) = build_arrivals([_delta("X", 50, 500)], make_state(5), rows)
    assert arrival.supplier == "supplier2"


def test_multiple_contracts_aggregate(make_state) -> None:
    state = make_state(
        5,
        procurement_contracts=_contracts(
            _contract("X", 5, 60, supplier="supplier2"),
            _contract("X", 5, 40, supplier="supplier1"),
        ),
    )
    (arrival,) = build_arrivals([_delta("X", 95, 950)], state, [])
    assert arrival.ordered_units == 100
    assert arrival.defective_units == 5
    assert arrival.supplier == "supplier1+supplier2"


def test_ledger_only_mode(make_state) -> None:
    state = make_state(5, procurement_contracts=_contracts(_contract("X", 5, 100)))
    (arrival,) = build_arrivals(
        [_delta("X", 90, 900)], state, [], ReconciliationMode.LEDGER_ONLY
    )
    assert arrival.defective_units == 0
    assert arrival.supplier == "unknown"


def test_scheduled_deliveries_without_supplier(make_state) -> None:
    state = make_state(5, procurement_contracts=_contracts(_contract("X", 5, 10, supplier=None)))
    schedule = scheduled_deliveries(state, 5)
    assert schedule["X"].ordered_units == 10
    assert schedule["X"].supplier_label is None


def _gmc_contract(material: str, orders: list[dict], supplier: str | None = "supplier2") -> dict:
    return {"supplier": supplier, "material": material, "type": "GMC", "gmcOrders": orders}


def test_gmc_orders_scheduled_after_lead_time(make_state) -> None:
    contract = _gmc_contract("X", [
        {"orderId": "o-1", "week": 3, "units": 100, "unitPrice": 10},
        {"orderId": "o-2", "week": 4, "units": 50},
    ])
    state = make_state(5, procurement_contracts=_contracts(contract))
    (arrival,) = build_arrivals([_delta("X", 95, 950)], state, [])

    assert arrival.ordered_units == 100
    assert arrival.defective_units == 5
    assert arrival.supplier == "supplier2"
    assert scheduled_deliveries(state, 6)["X"].ordered_units == 50


def test_explicit_deliveries_win_over_gmc_orders(make_state) -> None:
    contract = _gmc_contract("X", [{"week": 3, "units": 500}])
    contract["deliveries"] = [{"week": 5, "units": 80}]
    state = make_state(5, procurement_contracts=_contracts(contract))
    (delivery,) = contract_deliveries(state.procurement_contracts.contracts[0])
    assert (delivery.week, delivery.units) == (5, 80)
    assert scheduled_deliveries(state, 5)["X"].ordered_units == 80


def test_gmc_lead_time_table_override(make_state) -> None:
    contract = _gmc_contract("X", [{"week": 3, "units": 40, "unitPrice": 7}])
    state = make_state(5, procurement_contracts=_contracts(contract))
    (delivery,) = contract_deliveries(
        state.procurement_contracts.contracts[0], lead_weeks={"supplier2": 1}
    )
    assert (delivery.week, delivery.units, delivery.unit_price) == (4, 40, 7)
    assert scheduled_deliveries(state, 5, lead_weeks={"supplier2": 1}) == {}


def test_arrival_unit_price_zero_units() -> None:
    assert arrival_unit_price(_delta("X", 0, 100)) == 0.0


# ── Settlements ───────────────────────────────────────────────────────────────

def test_settlements_from_materials_rows(make_row) -> None:
    rows = [
        make_row("materials_spt", 720, ref_id="supplier1:selvedgeDenim"),
        make_row("marketing", 500),
        make_row("materials_gmc", 300, ref_id="supplier3:egyptianCotton"),
    ]
    settlements = build_settlements(rows)
    assert [(s.kind, s.supplier, s.material, s.amount) for s in settlements] == [
        (SettlementKind.SPT, "supplier1", "selvedgeDenim", 720),
        (SettlementKind.GMC, "supplier3", "egyptianCotton", 300),
    ]
    assert all(s.due_week == 6 for s in settlements)
    assert all(s.good_units is None and s.unit_price is None for s in settlements)


@pytest.mark.parametrize(
    "ref_id,expected",
    [(None, ("unknown", "unknown")), ("supplier1", ("supplier1", "unknown")), (":denim", ("unknown", "denim"))],
)
def test_malformed_ref_id(make_row, ref_id, expected) -> None:
    (settlement,) = build_settlements([make_row("materials_spt", 1, ref_id=ref_id)])
    assert (settlement.supplier, settlement.material) == expected
