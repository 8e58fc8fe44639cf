"""
Shared pytest fixtures for the Retail Sim test suite.

Provides:
  - ``make_state``: factory for ``GameWeekState`` snapshots with defaults.
  - ``make_row``: factory for ``LedgerEntry`` rows.
  - ``week5_state`` / ``week6_state`` / ``week6_ledger``: a realistic
    transition used across reconciliation, reporting and CLI tests.
  - ``frozen_clock``: a clock pinned to 2026-03-02 09:00:00 UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.state import GameWeekState
from retail_sim.utils.time_utils import fixed_clock

FROZEN_AT = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


# ── Factories ─────────────────────────────────────────────────────────────────

@pytest.fixture
def make_state() -> Callable[..., GameWeekState]:
    """Return a factory building a ``GameWeekState`` from keyword overrides."""

    def _make(week_number: int = 1, **fields: Any) -> GameWeekState:
        return GameWeekState(week_number=week_number, **fields)

    return _make


@pytest.fixture
def make_row() -> Callable[..., LedgerEntry]:
    """Return a factory building a ``LedgerEntry``."""

    def _make(
        entry_type: str,
        amount: float,
        week_number: int = 6,
        ref_id: str | None = None,
    ) -> LedgerEntry:
        return LedgerEntry(
            week_number=week_number, entry_type=entry_type, ref_id=ref_id, amount=amount
        )

    return _make


@pytest.fixture
def frozen_clock() -> Callable[[], datetime]:
    return fixed_clock(FROZEN_AT)


# ── Week 5 → week 6 transition ────────────────────────────────────────────────

@pytest.fixture
def week5_payload() -> dict:
    """Week 5 snapshot as the backend exports it (camelCase, string decimals)."""
    return {
        "weekNumber": 5,
        "cashOnHand": "250000.00",
        "creditUsed": "0",
        "weeklyRevenue": "41000.00",
        "awareness": 30,
        "intent": 12,
        "rawMaterials": {
            "selvedgeDenim": {"onHand": 200, "onHandValue": "1600.00"},
            "egyptianCotton": {"onHand": 50, "onHandValue": "300.00"},
        },
        "finishedGoods": {
            "lots": [
                {"id": "lot-1", "product": "jacket", "quantity": 400, "unitCostBasis": 31},
            ]
        },
        "workInProcess": {
            "batches": [
                {
                    "id": "b-1", "product": "jacket", "method": "inhouse",
                    "quantity": 500, "startWeek": 3, "endWeek": 6,
                    "productionUnitCost": 15,
                },
                {
                    "id": "b-2", "product": "dress", "method": "outsourced",
                    "quantity": 300, "startWeek": 5, "endWeek": 7,
                    "productionUnitCost": 14,
                },
            ]
        },
        "procurementContracts": {"contracts": []},
        "marketingPlan": {"channels": [{"name": "social", "spend": 400}]},
        "productData": {
            "jacket": {"rrp": 96, "fabric": "selvedgeDenim", "hasPrint": True},
        },
        "weeklyDemand": {"jacket": 900, "dress": 1200},
        "someFieldTheEngineIgnores": {"nested": True},
    }


@pytest.fixture
def week6_payload() -> dict:
    return {
        "weekNumber": 6,
        "cashOnHand": "238000.00",
        "creditUsed": "5000.00",
        "weeklyRevenue": "39000.00",
        "awareness": 34.5,
        "intent": 13,
        "rawMaterials": {
            "selvedgeDenim": {"onHand": 290, "onHandValue": "2320.00"},
            "egyptianCotton": {"onHand": 50, "onHandValue": "300.00"},
            "polyesterBlend": {"onHand": 0, "onHandValue": "0"},
        },
        "finishedGoods": {
            "lots": [
                {"id": "lot-1", "product": "jacket", "quantity": 150, "unitCostBasis": 31},
                {"id": "lot-2", "product": "jacket", "quantity": 500, "unitCostBasis": 29},
            ]
        },
        "workInProcess": {
            "batches": [
                {
                    "id": "b-2", "product": "dress", "method": "outsourced",
                    "quantity": 300, "startWeek": 5, "endWeek": 7,
                    "productionUnitCost": 14,
                },
            ]
        },
        "wipByWeek": {
            "6": [{"product": "pants", "method": "inhouse", "quantity": 100}],
        },
        "procurementContracts": {
            "contracts": [
                {
                    "supplier": "supplier1",
                    "material": "selvedgeDenim",
                    "type": "SPT",
                    "deliveries": [
                        {"week": 6, "units": 100, "unitPrice": 8},
                        {"week": 8, "units": 100, "unitPrice": 8},
                    ],
                },
            ]
        },
        "marketingPlan": {"channels": [{"name": "social", "spend": 500}]},
        "productData": {
            "jacket": {"rrp": 96, "fabric": "selvedgeDenim", "hasPrint": True},
        },
        "weeklyDemand": {"jacket": 950, "dress": 1100},
    }


@pytest.fixture
def week6_ledger_payload() -> list[dict]:
    return [
        {"weekNumber": 6, "entryType": "marketing", "amount": "500.00"},
        {"weekNumber": 6, "entryType": "production", "amount": "1200.00"},
        {
            "weekNumber": 6, "entryType": "materials_spt",
            "refId": "supplier1:selvedgeDenim", "amount": "720.00",
        },
        {"weekNumber": 6, "entryType": "interest", "amount": "25.00"},
    ]


@pytest.fixture
def week5_state(week5_payload: dict) -> GameWeekState:
    return GameWeekState.model_validate(week5_payload)


@pytest.fixture
def week6_state(week6_payload: dict) -> GameWeekState:
    return GameWeekState.model_validate(week6_payload)


@pytest.fixture
def week6_ledger(week6_ledger_payload: list[dict]) -> list[LedgerEntry]:
    return [LedgerEntry.model_validate(r) for r in week6_ledger_payload]
