"""
Procurement arrivals and settlements.

Arrivals
--------
Every raw-material delta with ``delta_units > 0`` is an arrival. Its unit
price is recovered from the snapshot diff::

    unit_price = |delta_value| / |delta_units|     (0 when delta_units == 0)

In ``CONTRACT_MATCHED`` mode the arrival is cross-referenced with every
contract delivery of that material scheduled for the new week. GMC contracts
that record only batch orders are scheduled at order week plus the supplier
lead time. When more units were ordered than reached inventory, the
shortfall is reported as ``defective_units``; suppliers reject or lose units
in transit and only good units are booked into stock. The backend never
records defects, so this quantity is always inferred.

Supplier attribution, first match wins:
  1. supplier(s) of the matching contracts (joined with ``+`` when several),
  2. supplier of a materials ledger row whose ``ref_id`` ends ``:<material>``,
  3. ``"unknown"``.

In ``LEDGER_ONLY`` mode steps 1 and the defect inference are skipped.

Settlements
-----------
Every ``materials_spt`` / ``materials_gmc`` ledger row becomes a settlement
with supplier and material parsed from ``ref_id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.state import Delivery, GameWeekState, ProcurementContract
from retail_sim.models.summary import (
    InventoryDelta,
    ProcurementArrival,
    ProcurementSettlement,
    ReconciliationMode,
)
from retail_sim.taxonomy.ledger_taxonomy import MATERIALS_ENTRY_TYPES, UNKNOWN_REF
from retail_sim.taxonomy.suppliers import supplier_lead_weeks


@dataclass
class ScheduledDelivery:
    """Units of one material scheduled to arrive in a given week."""

    material: str
    ordered_units: float = 0.0
    suppliers: list[str] = field(default_factory=list)

    @property
    def supplier_label(self) -> str | None:
        if not self.suppliers:
            return None
        return "+".join(sorted(set(self.suppliers)))


def _is_materials_row(row: LedgerEntry) -> bool:
    return row.known_type in MATERIALS_ENTRY_TYPES


def contract_deliveries(
    contract: ProcurementContract,
    lead_weeks: Mapping[str, int] | None = None,
) -> list[Delivery]:
    """Delivery schedule of ``contract``.

    A contract without explicit deliveries falls back to its GMC orders,
    each due ``supplier_lead_weeks(contract.supplier)`` after it was placed.
    """
    if contract.deliveries or not contract.gmc_orders:
        return list(contract.deliveries)
    lead = supplier_lead_weeks(contract.supplier, lead_weeks)
    return [
        Delivery(week=order.week + lead, units=order.units, unit_price=order.unit_price)
        for order in contract.gmc_orders
    ]


def scheduled_deliveries(
    state: GameWeekState,
    week: int,
    lead_weeks: Mapping[str, int] | None = None,
) -> dict[str, ScheduledDelivery]:
    """Aggregate contract deliveries scheduled for ``week`` by material."""
    schedule: dict[str, ScheduledDelivery] = {}
    for contract in state.procurement_contracts.contracts:
        for delivery in contract_deliveries(contract, lead_weeks):
            if delivery.week != week:
                continue
            entry = schedule.setdefault(contract.material, ScheduledDelivery(contract.material))
            entry.ordered_units += delivery.units
            if contract.supplier:
                entry.suppliers.append(contract.supplier)
    return schedule


def ledger_supplier_for(material: str, rows: list[LedgerEntry]) -> str | None:
    """Supplier of the first materials row whose ``ref_id`` ends ``:<material>``."""
    suffix = f":{material}"
    for row in rows:
        if _is_materials_row(row) and row.ref_id and row.ref_id.endswith(suffix):
            supplier, _ = row.supplier_and_material()
            return supplier
    return None


def arrival_unit_price(delta: InventoryDelta) -> float:
    """Unit price implied by a delta; 0 when no units moved."""
    if delta.delta_units == 0:
        return 0.0
    return abs(delta.delta_value) / abs(delta.delta_units)


def build_arrivals(
    deltas: list[InventoryDelta],
    next_state: GameWeekState,
    rows: list[LedgerEntry],
    mode: ReconciliationMode = ReconciliationMode.CONTRACT_MATCHED,
) -> list[ProcurementArrival]:
    """Build arrival records for every material whose stock increased.

    Args:
        deltas:     Raw-material deltas for the transition.
        next_state: New snapshot; its contracts carry the delivery schedule.
        rows:       Ledger rows of the new week.
        mode:       Reconciliation mode.

    Returns:
        One ``ProcurementArrival`` per positive delta, in delta order.
    """
    schedule = (
        scheduled_deliveries(next_state, next_state.week_number)
        if mode == ReconciliationMode.CONTRACT_MATCHED
        else {}
    )

    arrivals: list[ProcurementArrival] = []
    for delta in deltas:
        if delta.delta_units <= 0:
            continue
        unit_price = arrival_unit_price(delta)
        good_units = delta.delta_units
        scheduled = schedule.get(delta.material)

        ordered_units = good_units
        defective_units = 0.0
        supplier = None
        if scheduled is not None:
            supplier = scheduled.supplier_label
            ordered_units = scheduled.ordered_units
            if ordered_units > good_units:
                defective_units = ordered_units - good_units

        if supplier is None:
            supplier = ledger_supplier_for(delta.material, rows) or UNKNOWN_REF

        arrivals.append(
            ProcurementArrival(
                supplier=supplier,
                material=delta.material,
                ordered_units=ordered_units,
                good_units=good_units,
                defective_units=defective_units,
                unit_price=unit_price,
                amount=unit_price * good_units,
            )
        )
    return arrivals


def build_settlements(rows: list[LedgerEntry]) -> list[ProcurementSettlement]:
    """One settlement per SPT/GMC ledger row, in ledger order."""
    settlements: list[ProcurementSettlement] = []
    for row in rows:
        if not _is_materials_row(row):
            continue
        supplier, material = row.supplier_and_material()
        settlements.append(
            ProcurementSettlement(
                kind=MATERIALS_ENTRY_TYPES[row.known_type],
                supplier=supplier,
                material=material,
                amount=row.amount,
                due_week=row.week_number,
            )
        )
    return settlements
