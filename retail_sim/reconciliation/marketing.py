"""Marketing effect of a week-transition."""

from __future__ import annotations

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.state import GameWeekState
from retail_sim.models.summary import AwarenessIntentDelta, MarketingSection
from retail_sim.reconciliation.cash import sum_by_entry_type
from retail_sim.taxonomy.ledger_taxonomy import LedgerEntryType


def build_marketing_section(
    prev: GameWeekState,
    next_state: GameWeekState,
    rows: list[LedgerEntry],
) -> MarketingSection:
    """Awareness/intent movement, marketing charge and the plan that drove it.

    The applied plan is read from ``next_state``: it is the plan that
    produced this week's effect.
    """
    return MarketingSection(
        charged=sum_by_entry_type(rows, LedgerEntryType.MARKETING),
        ai_delta=AwarenessIntentDelta(
            awareness_from=prev.awareness,
            awareness_to=next_state.awareness,
            intent_from=prev.intent,
            intent_to=next_state.intent,
        ),
        plan_applied=list(next_state.marketing_plan.channels),
    )
