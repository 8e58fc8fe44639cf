"""
Cash waterfall for one week-transition.

Outflow categories and interest are summed from ledger rows of the new
week. Revenue for week N is recognised one transition later, so it is read
from the *previous* snapshot. Opening and closing balances are read off the
new snapshot.

Rows whose ``entry_type`` is not a ``LedgerEntryType`` never match any
bucket and so contribute to no sum.
"""

from __future__ import annotations

from typing import Iterable

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.state import GameWeekState
from retail_sim.models.summary import CashOutflows, CashWaterfall
from retail_sim.taxonomy.ledger_taxonomy import OUTFLOW_ENTRY_TYPES, LedgerEntryType


def sum_by_entry_type(rows: Iterable[LedgerEntry], entry_type: LedgerEntryType) -> float:
    """Sum ``amount`` over rows whose ``entry_type`` equals ``entry_type``."""
    return float(sum(r.amount for r in rows if r.entry_type == entry_type.value))


def build_cash_waterfall(
    prev: GameWeekState,
    next_state: GameWeekState,
    rows: list[LedgerEntry],
) -> CashWaterfall:
    """Build the cash waterfall for the transition ``prev`` → ``next_state``."""
    outflows = CashOutflows(
        **{t.value: sum_by_entry_type(rows, t) for t in OUTFLOW_ENTRY_TYPES}
    )
    return CashWaterfall(
        opening_cash=next_state.cash_on_hand,
        opening_credit=next_state.credit_used,
        interest=sum_by_entry_type(rows, LedgerEntryType.INTEREST),
        outflows=outflows,
        revenue=prev.weekly_revenue,
        auto_paydown=0.0,
        closing_cash=next_state.cash_on_hand,
        closing_credit=next_state.credit_used,
    )
