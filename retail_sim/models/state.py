"""
Weekly game-state snapshot models.

One ``GameWeekState`` is produced by the simulation backend for every
committed week and is immutable afterwards. The backend serialises
snapshots with camelCase keys and decimal columns as strings; every model
here therefore:

  - accepts camelCase aliases as well as snake_case field names,
  - coerces numeric strings (``"1000000.00"``) to numbers,
  - ignores keys it does not model,
  - declares an explicit default (0, empty list, empty mapping) for every
    optional field, so a missing value is a documented default and not an
    implicit fallback inside the reconciliation engine.

All models are frozen. Nested collections are plain lists/dicts but are
never mutated by library code.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from retail_sim.taxonomy.production import ProductionMethod

SEASON_WEEKS = 15

SNAPSHOT_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    coerce_numbers_to_str=True,
)


def _none_as_zero(v: object) -> object:
    return 0 if v is None else v


class RawMaterialPosition(BaseModel):
    """On-hand quantity and carrying value of one raw material."""

    model_config = SNAPSHOT_MODEL_CONFIG

    on_hand: float = 0.0
    on_hand_value: float = 0.0

    @field_validator("on_hand", "on_hand_value", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)


class FinishedGoodsLot(BaseModel):
    """A quantity of finished goods sharing one unit cost basis.

    ``id`` is stable across weeks, which is what makes "lots added this
    week" a set difference of ids.
    """

    model_config = SNAPSHOT_MODEL_CONFIG

    id: str
    product: str
    quantity: float = 0.0
    unit_cost_basis: float = 0.0

    @field_validator("quantity", "unit_cost_basis", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)


class FinishedGoods(BaseModel):
    model_config = SNAPSHOT_MODEL_CONFIG

    lots: list[FinishedGoodsLot] = Field(default_factory=list)


class WipBatch(BaseModel):
    """A scheduled or running production batch.

    Attributes:
        id: Stable batch identifier.
        product: Product key, e.g. ``"jacket"``.
        method: ``inhouse`` or ``outsourced``.
        quantity: Units in the batch.
        start_week: Week the batch starts (materials consumed, cost charged).
        end_week: Week the batch completes.
        production_unit_cost: Manufacturing cost per unit.
    """

    model_config = SNAPSHOT_MODEL_CONFIG

    id: str
    product: str
    method: ProductionMethod
    quantity: float = 0.0
    start_week: int = 0
    end_week: int = 0
    production_unit_cost: float = 0.0

    @field_validator("quantity", "start_week", "end_week", "production_unit_cost", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)


class WorkInProcess(BaseModel):
    model_config = SNAPSHOT_MODEL_CONFIG

    batches: list[WipBatch] = Field(default_factory=list)


class WipStart(BaseModel):
    """A batch-start record from the per-week WIP tracker.

    Newer snapshots record starts as ``wipByWeek[week] -> [WipStart]``
    without end week or unit cost; those are derived from
    ``retail_sim.taxonomy.production.PRODUCTION_TERMS``.
    """

    model_config = SNAPSHOT_MODEL_CONFIG

    id: Optional[str] = None
    product: str
    method: ProductionMethod
    quantity: float = 0.0

    @field_validator("quantity", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)


class Delivery(BaseModel):
    """One scheduled delivery of a procurement contract."""

    model_config = SNAPSHOT_MODEL_CONFIG

    week: int
    units: float = 0.0
    unit_price: Optional[float] = None

    @field_validator("units", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)


class GmcOrder(BaseModel):
    """A batch call-off placed against a GMC contract in ``week``."""

    model_config = SNAPSHOT_MODEL_CONFIG

    order_id: Optional[str] = None
    week: int
    units: float = 0.0
    unit_price: Optional[float] = None

    @field_validator("units", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)


class ProcurementContract(BaseModel):
    """A materials contract with its delivery schedule.

    ``type`` is ``"SPT"`` or ``"GMC"`` where the backend records it.
    GMC contracts may carry ``gmc_orders`` instead of ``deliveries``; the
    reconciliation engine then derives the schedule from the order weeks and
    the supplier lead time.
    """

    model_config = SNAPSHOT_MODEL_CONFIG

    supplier: Optional[str] = None
    material: str
    type: Optional[str] = None
    deliveries: list[Delivery] = Field(default_factory=list)
    gmc_orders: list[GmcOrder] = Field(default_factory=list)


class ProcurementContracts(BaseModel):
    model_config = SNAPSHOT_MODEL_CONFIG

    contracts: list[ProcurementContract] = Field(default_factory=list)


class MarketingChannel(BaseModel):
    """Spend allocated to one marketing channel."""

    model_config = SNAPSHOT_MODEL_CONFIG

    name: str
    spend: float = 0.0

    @field_validator("spend", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)


class MarketingPlan(BaseModel):
    model_config = SNAPSHOT_MODEL_CONFIG

    channels: list[MarketingChannel] = Field(default_factory=list)


class ProductDecision(BaseModel):
    """Design and pricing decisions for one product.

    ``rrp`` stays ``None`` until the player sets it; forecasts treat that
    as "not yet computable".
    """

    model_config = SNAPSHOT_MODEL_CONFIG

    rrp: Optional[float] = None
    fabric: Optional[str] = None
    has_print: bool = False
    confirmed_material_cost: Optional[float] = None

    @field_validator("has_print", mode="before")
    @classmethod
    def validate_has_print(cls, v: object) -> object:
        return False if v is None else v


class GameWeekState(BaseModel):
    """Full simulation snapshot for one committed week.

    Attributes:
        week_number: Season week, 1..15.
        cash_on_hand: Cash balance after the week's transactions.
        credit_used: Drawn balance on the credit line.
        weekly_revenue: Revenue recognised for the week. Revenue becomes
            visible one state-transition later, so the engine reads it from
            the *previous* snapshot.
        awareness: Marketing awareness metric.
        intent: Purchase-intent metric.
        raw_materials: Material id → on-hand position.
        finished_goods: Finished goods lots.
        work_in_process: Production batches (legacy start tracking).
        wip_by_week: Week → batch starts (newer start tracking; supersedes
            ``work_in_process`` when present for the week).
        procurement_contracts: Materials contracts and delivery schedules.
        marketing_plan: Channel spend that produced this week's effect.
        product_data: Product id → design/pricing decision.
        weekly_demand: Product id → units demanded in the week.
    """

    model_config = SNAPSHOT_MODEL_CONFIG

    week_number: int
    cash_on_hand: float = 0.0
    credit_used: float = 0.0
    weekly_revenue: float = 0.0
    awareness: float = 0.0
    intent: float = 0.0
    raw_materials: dict[str, RawMaterialPosition] = Field(default_factory=dict)
    finished_goods: FinishedGoods = Field(default_factory=FinishedGoods)
    work_in_process: WorkInProcess = Field(default_factory=WorkInProcess)
    wip_by_week: dict[int, list[WipStart]] = Field(default_factory=dict)
    procurement_contracts: ProcurementContracts = Field(default_factory=ProcurementContracts)
    marketing_plan: MarketingPlan = Field(default_factory=MarketingPlan)
    product_data: dict[str, ProductDecision] = Field(default_factory=dict)
    weekly_demand: dict[str, float] = Field(default_factory=dict)

    @field_validator("cash_on_hand", "credit_used", "weekly_revenue", "awareness", "intent", mode="before")
    @classmethod
    def validate_zero_defaults(cls, v: object) -> object:
        return _none_as_zero(v)

    @field_validator(
        "raw_materials", "wip_by_week", "product_data", "weekly_demand",
        mode="before",
    )
    @classmethod
    def validate_mapping_defaults(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator(
        "finished_goods", "work_in_process", "procurement_contracts", "marketing_plan",
        mode="before",
    )
    @classmethod
    def validate_section_defaults(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator("weekly_demand", mode="after")
    @classmethod
    def validate_demand_non_negative(cls, v: dict[str, float]) -> dict[str, float]:
        for product, units in v.items():
            if units < 0:
                raise ValueError(f"weekly_demand[{product!r}] must be non-negative, got {units}.")
        return v

    @field_validator("week_number")
    @classmethod
    def validate_week_range(cls, v: int) -> int:
        if not 1 <= v <= SEASON_WEEKS:
            raise ValueError(f"week_number must be in [1, {SEASON_WEEKS}], got {v}.")
        return v

    def total_demand(self) -> float:
        """Sum of per-product demand for the week."""
        return float(sum(self.weekly_demand.values()))
