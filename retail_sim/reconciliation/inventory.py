"""
Inventory deltas between two snapshots.

Raw-material deltas are computed strictly by diffing the two snapshots,
never by summing ledger rows. Materials are taken from the union of both
snapshots' keys and emitted in sorted order; a material whose units and
value are both unchanged is omitted.

Finished-goods lots added in the week are the lots of the new snapshot
whose ``id`` does not appear in the previous one.
"""

from __future__ import annotations

from retail_sim.models.state import FinishedGoodsLot, GameWeekState, RawMaterialPosition
from retail_sim.models.summary import InventoryDelta

_EMPTY_POSITION = RawMaterialPosition()


def average_unit_cost(position: RawMaterialPosition) -> float | None:
    """``on_hand_value / on_hand`` when stock is on hand, else ``None``."""
    if position.on_hand > 0:
        return position.on_hand_value / position.on_hand
    return None


def raw_material_deltas(prev: GameWeekState, next_state: GameWeekState) -> list[InventoryDelta]:
    """Per-material unit and value change from ``prev`` to ``next_state``."""
    materials = sorted(set(prev.raw_materials) | set(next_state.raw_materials))
    deltas: list[InventoryDelta] = []
    for material in materials:
        before = prev.raw_materials.get(material, _EMPTY_POSITION)
        after = next_state.raw_materials.get(material, _EMPTY_POSITION)
        delta_units = after.on_hand - before.on_hand
        delta_value = after.on_hand_value - before.on_hand_value
        if delta_units == 0 and delta_value == 0:
            continue
        deltas.append(
            InventoryDelta(
                material=material,
                delta_units=delta_units,
                delta_value=delta_value,
                on_hand_after=after.on_hand,
                avg_unit_cost_after=average_unit_cost(after),
            )
        )
    return deltas


def finished_goods_added(prev: GameWeekState, next_state: GameWeekState) -> list[FinishedGoodsLot]:
    """Lots present in ``next_state`` but not in ``prev``, in ``next_state`` order."""
    prev_ids = {lot.id for lot in prev.finished_goods.lots}
    return [lot for lot in next_state.finished_goods.lots if lot.id not in prev_ids]
