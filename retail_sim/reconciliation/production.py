"""
Production batches started and completed in a week.

Two sources track batch starts. The newer per-week tracker
(``wip_by_week[week]``) records only product, method and quantity; end week
and unit cost are derived from ``PRODUCTION_TERMS``. The legacy
``work_in_process.batches`` list records full batches. When the tracker has
entries for the week it is used exclusively; the two are never merged.

Completions are the previous snapshot's batches whose ``end_week`` is the
new week.
"""

from __future__ import annotations

from retail_sim.models.state import GameWeekState
from retail_sim.models.summary import ProductionCompleted, ProductionStarted
from retail_sim.taxonomy.production import (
    PRODUCTION_TERMS,
    ProductionMethod,
    ProductionTerms,
    production_terms,
)


def production_started(
    next_state: GameWeekState,
    table: dict[tuple[str, ProductionMethod], ProductionTerms] | None = None,
) -> list[ProductionStarted]:
    """Batches started in ``next_state.week_number``."""
    week = next_state.week_number
    tracked = next_state.wip_by_week.get(week) or []

    if tracked:
        terms_table = PRODUCTION_TERMS if table is None else table
        started: list[ProductionStarted] = []
        for index, start in enumerate(tracked):
            terms = production_terms(start.product, start.method, terms_table)
            started.append(
                ProductionStarted(
                    id=start.id or f"wip-{week}-{index + 1}",
                    product=start.product,
                    method=start.method,
                    quantity=start.quantity,
                    start_week=week,
                    end_week=week + terms.duration_weeks,
                    unit_production_cost=terms.unit_cost,
                )
            )
        return started

    return [
        ProductionStarted(
            id=b.id,
            product=b.product,
            method=b.method,
            quantity=b.quantity,
            start_week=b.start_week,
            end_week=b.end_week,
            unit_production_cost=b.production_unit_cost,
        )
        for b in next_state.work_in_process.batches
        if b.start_week == week
    ]


def production_completed(prev: GameWeekState, week: int) -> list[ProductionCompleted]:
    """Batches of ``prev`` finishing in ``week``; shipments are not tracked here."""
    return [
        ProductionCompleted(
            id=b.id,
            product=b.product,
            quantity=b.quantity,
            end_week=b.end_week,
        )
        for b in prev.work_in_process.batches
        if b.end_week == week
    ]
