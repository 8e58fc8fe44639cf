"""
Weekly summary output models.

``WeeklySummary`` is the reconciliation engine's result for one
week-transition (week N → week N+1). Every field is derived from the two
snapshots and the ledger rows of week N+1; nothing here is persisted by
this package.

All models are frozen — once a summary is built it is a value, and two
summaries built from identical inputs with the same clock serialise to
identical JSON.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.state import FinishedGoodsLot, MarketingChannel
from retail_sim.taxonomy.ledger_taxonomy import SettlementKind
from retail_sim.taxonomy.production import ProductionMethod

_FROZEN = ConfigDict(frozen=True)


class ReconciliationMode(StrEnum):
    """How procurement arrivals are reconciled.

    ``CONTRACT_MATCHED`` is the canonical mode: arrivals are matched against
    the contract delivery schedule and short deliveries are reported as
    defective units.

    ``LEDGER_ONLY`` is a reduced-fidelity mode for snapshots without
    contract schedules: suppliers are attributed from ledger rows only and
    defects are never inferred.
    """

    CONTRACT_MATCHED = "contract_matched"
    LEDGER_ONLY = "ledger_only"


# ── Cash ──────────────────────────────────────────────────────────────────────


class CashOutflows(BaseModel):
    model_config = _FROZEN

    marketing: float = 0.0
    materials_spt: float = 0.0
    materials_gmc: float = 0.0
    production: float = 0.0
    logistics: float = 0.0
    holding: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.marketing + self.materials_spt + self.materials_gmc
            + self.production + self.logistics + self.holding
        )


class CashWaterfall(BaseModel):
    """Cash movement for the week.

    Opening and closing balances are both read from the new snapshot; the
    backend does not expose a pre-transition balance separately.
    ``auto_paydown`` is reserved for automatic credit repayment and is
    always 0 at present.
    """

    model_config = _FROZEN

    opening_cash: float
    opening_credit: float
    interest: float
    outflows: CashOutflows
    revenue: float
    auto_paydown: float = 0.0
    closing_cash: float
    closing_credit: float


# ── Procurement ───────────────────────────────────────────────────────────────


class ProcurementArrival(BaseModel):
    """Material received in the week.

    ``defective_units`` is inferred: ordered units scheduled for the week
    minus the good units that actually reached inventory.
    """

    model_config = _FROZEN

    supplier: str
    material: str
    ordered_units: float
    good_units: float
    defective_units: float = 0.0
    unit_price: float
    amount: float


class ProcurementSettlement(BaseModel):
    """A materials payment charged in the week."""

    model_config = _FROZEN

    kind: SettlementKind
    supplier: str
    material: str
    amount: float
    due_week: int
    good_units: Optional[float] = None
    unit_price: Optional[float] = None


class ProcurementSection(BaseModel):
    model_config = _FROZEN

    arrivals: list[ProcurementArrival] = Field(default_factory=list)
    settlements: list[ProcurementSettlement] = Field(default_factory=list)


# ── Inventory ─────────────────────────────────────────────────────────────────


class InventoryDelta(BaseModel):
    """Change in one raw material between the two snapshots."""

    model_config = _FROZEN

    material: str
    delta_units: float
    delta_value: float
    on_hand_after: float
    avg_unit_cost_after: Optional[float] = None


class InventorySection(BaseModel):
    model_config = _FROZEN

    raw_materials: list[InventoryDelta] = Field(default_factory=list)
    finished_goods_added: list[FinishedGoodsLot] = Field(default_factory=list)


# ── Production ────────────────────────────────────────────────────────────────


class ProductionStarted(BaseModel):
    model_config = _FROZEN

    id: str
    product: str
    method: ProductionMethod
    quantity: float
    start_week: int
    end_week: int
    unit_production_cost: float


class Shipment(BaseModel):
    model_config = _FROZEN

    method: str
    arrival_week: int
    quantity: float
    unit_shipping_cost: float


class ProductionCompleted(BaseModel):
    model_config = _FROZEN

    id: str
    product: str
    quantity: float
    end_week: int
    shipments: list[Shipment] = Field(default_factory=list)


class ProductionSection(BaseModel):
    model_config = _FROZEN

    started: list[ProductionStarted] = Field(default_factory=list)
    completed: list[ProductionCompleted] = Field(default_factory=list)


# ── Marketing ─────────────────────────────────────────────────────────────────


class AwarenessIntentDelta(BaseModel):
    model_config = _FROZEN

    awareness_from: float
    awareness_to: float
    intent_from: float
    intent_to: float

    @property
    def awareness_change(self) -> float:
        return self.awareness_to - self.awareness_from

    @property
    def intent_change(self) -> float:
        return self.intent_to - self.intent_from


class MarketingSection(BaseModel):
    """Marketing effect of the week.

    ``plan_applied`` is the plan recorded on the new snapshot — the plan
    that produced this week's awareness/intent movement, not the plan for
    the following week.
    """

    model_config = _FROZEN

    charged: float
    ai_delta: AwarenessIntentDelta
    plan_applied: list[MarketingChannel] = Field(default_factory=list)


# ── Series and diagnostics ────────────────────────────────────────────────────


class DemandSeriesPoint(BaseModel):
    model_config = _FROZEN

    week: int
    awareness: float = 0.0
    intent: float = 0.0
    total_demand: float = 0.0


class DemandSeries(BaseModel):
    """Season-long awareness/intent/demand series.

    ``complete`` is ``False`` when the series was built from the two
    snapshots only; weeks outside them are zero-filled.
    """

    model_config = _FROZEN

    points: list[DemandSeriesPoint] = Field(default_factory=list)
    complete: bool = False


class ReconciliationDiagnostics(BaseModel):
    """Cross-source checks reported alongside the summary.

    Attributes:
        ledger_materials_outflow: Sum of SPT + GMC ledger rows.
        inventory_arrival_value: Sum of ``amount`` over arrivals.
        materials_variance: ``inventory_arrival_value - ledger_materials_outflow``.
        within_tolerance: ``True`` if ``|materials_variance|`` is within tolerance.
        unknown_entry_types: Distinct entry types excluded from all sums.
        dropped_rows: Rows discarded because they belong to another week.
    """

    model_config = _FROZEN

    ledger_materials_outflow: float = 0.0
    inventory_arrival_value: float = 0.0
    materials_variance: float = 0.0
    within_tolerance: bool = True
    unknown_entry_types: list[str] = Field(default_factory=list)
    dropped_rows: int = 0


# ── Summary ───────────────────────────────────────────────────────────────────


class WeeklySummary(BaseModel):
    """Complete, auditable end-of-week summary.

    Attributes:
        game_session_id: Session the snapshots belong to.
        week_number: The new week (N+1).
        generated_at: ISO-8601 UTC timestamp from the injected clock.
        mode: Reconciliation mode used for procurement.
        cash: Cash waterfall.
        procurement: Arrivals and settlements.
        inventory: Raw-material deltas and finished-goods lots added.
        production: Batches started and completed.
        marketing: Marketing charge and awareness/intent movement.
        ledger_rows: Ledger rows the summary was built from.
        demand_series: Season series of awareness, intent and demand.
        diagnostics: Cross-source consistency checks.
    """

    model_config = _FROZEN

    game_session_id: str
    week_number: int
    generated_at: str
    mode: ReconciliationMode = ReconciliationMode.CONTRACT_MATCHED
    cash: CashWaterfall
    procurement: ProcurementSection
    inventory: InventorySection
    production: ProductionSection
    marketing: MarketingSection
    ledger_rows: list[LedgerEntry] = Field(default_factory=list)
    demand_series: DemandSeries = Field(default_factory=DemandSeries)
    diagnostics: ReconciliationDiagnostics = Field(default_factory=ReconciliationDiagnostics)
