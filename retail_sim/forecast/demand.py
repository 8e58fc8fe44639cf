"""
Single-product demand forecast.

Projected demand for one product is its category baseline scaled by three
independent multipliers::

    price_effect    = (price / reference_price) ** ELASTICITY
    position_effect = positioning.position_effect(price, reference_price)
    design_effect   = 1 + FABRIC_LIFT[fabric] + (PRINT_LIFT if has_print else 0)

    units = base_units * price_effect * position_effect * design_effect
    pct   = clamp(units / base_units, 0, 2)
    forecast = round(base_units * pct)

One unified elasticity (-1.40) is applied to every product; the per-product
elasticities in the catalogue are shown to players for guidance only.

"No forecast"
-------------
``forecast_demand()`` returns ``None`` when the RRP has not been set, or
when reference data (reference price, baseline units) is unavailable. That
is a valid "not yet computable" answer, not an error, and callers display
it as a dash.

Season projection
-----------------
``project_season_demand()`` sums the forecast over the catalogue. A product
without an RRP is assumed priced at its reference price so the projection
is not under-counted while the player is still deciding.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional

from retail_sim.forecast.positioning import clamp, position_effect
from retail_sim.models.state import ProductDecision
from retail_sim.taxonomy.product_catalog import (
    FABRIC_LIFT,
    PRINT_LIFT,
    PRODUCT_CATALOG,
    REFERENCE_MARKUP,
    ProductReference,
)

logger = logging.getLogger(__name__)

UNIFIED_ELASTICITY = -1.40
PCT_MIN = 0.0
PCT_MAX = 2.0


@dataclass(frozen=True)
class DemandForecast:
    """All components of one product's demand forecast.

    Attributes:
        product_id:      Product the forecast is for.
        price:           RRP evaluated.
        reference_price: Reference price the RRP is positioned against.
        base_units:      Category baseline demand.
        price_effect:    ``(price / reference_price) ** elasticity``.
        position_effect: Positioning multiplier in ``[0, 2]``.
        design_effect:   Fabric and print multiplier.
        raw_units:       Unclamped product of baseline and effects.
        pct:             ``raw_units / base_units`` clamped to ``[0, 2]``.
        units:           Rounded forecast, ``round(base_units * pct)``.
    """

    product_id:      str
    price:           float
    reference_price: float
    base_units:      float
    price_effect:    float
    position_effect: float
    design_effect:   float
    raw_units:       float
    pct:             float
    units:           int


@dataclass(frozen=True)
class SeasonForecast:
    """Per-product and total projected demand across the catalogue."""

    per_product: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.per_product.values())


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative values."""
    return int(math.floor(value + 0.5))


def reference_price_for(hm_price: float, markup: float = REFERENCE_MARKUP) -> float:
    """Return the reference price: competitor price marked up by ``markup``."""
    return hm_price * markup


def price_effect(
    price: float,
    reference_price: float,
    elasticity: float = UNIFIED_ELASTICITY,
) -> float:
    """Constant-elasticity price multiplier.

    Strictly decreasing in ``price`` for a negative ``elasticity``; exactly
    1 at ``price == reference_price``.

    Raises:
        ValueError: If either price is not strictly positive.
    """
    if price <= 0 or reference_price <= 0:
        raise ValueError(
            f"price and reference_price must be > 0, got {price} and {reference_price}."
        )
    return (price / reference_price) ** elasticity


def design_effect(
    fabric: Optional[str],
    has_print: bool,
    fabric_lift: Mapping[str, float] | None = None,
    print_lift: float = PRINT_LIFT,
) -> float:
    """Design appeal multiplier from the fabric choice and print flag.

    Unknown or missing fabrics contribute no lift.
    """
    lifts = FABRIC_LIFT if fabric_lift is None else fabric_lift
    lift = lifts.get(fabric, 0.0) if fabric else 0.0
    return 1.0 + lift + (print_lift if has_print else 0.0)


def explain_forecast(
    product_id: str,
    fabric: Optional[str],
    has_print: bool,
    rrp: Optional[float],
    base_units: Optional[float],
    reference_price: Optional[float],
    elasticity: float = UNIFIED_ELASTICITY,
    print_lift: float = PRINT_LIFT,
    fabric_lift: Mapping[str, float] | None = None,
) -> Optional[DemandForecast]:
    """Compute the forecast with its full component breakdown.

    Returns:
        ``DemandForecast``, or ``None`` when ``rrp`` is unset/non-positive or
        ``reference_price``/``base_units`` is unavailable.
    """
    if rrp is None or rrp <= 0:
        logger.debug("No forecast for %s: RRP not set.", product_id)
        return None
    if reference_price is None or reference_price <= 0 or base_units is None or base_units <= 0:
        logger.debug("No forecast for %s: reference data unavailable.", product_id)
        return None

    p_effect = price_effect(rrp, reference_price, elasticity)
    pos_effect = position_effect(rrp, reference_price)
    d_effect = design_effect(fabric, has_print, fabric_lift, print_lift)

    raw_units = base_units * p_effect * pos_effect * d_effect
    pct = clamp(raw_units / base_units, PCT_MIN, PCT_MAX)

    return DemandForecast(
        product_id=product_id,
        price=rrp,
        reference_price=reference_price,
        base_units=base_units,
        price_effect=p_effect,
        position_effect=pos_effect,
        design_effect=d_effect,
        raw_units=raw_units,
        pct=pct,
        units=round_half_up(base_units * pct),
    )


def forecast_demand(
    product_id: str,
    fabric: Optional[str],
    has_print: bool,
    rrp: Optional[float],
    base_units: Optional[float],
    reference_price: Optional[float],
    elasticity: float = UNIFIED_ELASTICITY,
) -> Optional[int]:
    """Projected unit demand for one product, or ``None`` if not yet computable.

    Args:
        product_id:      Product key, e.g. ``"jacket"`` (used for logging only).
        fabric:          Chosen fabric id, or ``None``.
        has_print:       Whether the design carries a print.
        rrp:             Committed RRP, or ``None`` while unset.
        base_units:      Category baseline demand.
        reference_price: Reference price (competitor price × 1.2).
        elasticity:      Price elasticity exponent.

    Returns:
        Rounded units in ``[0, 2 * base_units]``, or ``None``.

    Example::

        forecast_demand("jacket", None, False, 96.0, 100_000, 96.0)  # 100000
    """
    result = explain_forecast(
        product_id, fabric, has_print, rrp, base_units, reference_price, elasticity
    )
    return None if result is None else result.units


def forecast_product(
    product_id: str,
    decision: ProductDecision,
    catalog: Mapping[str, ProductReference] | None = None,
    elasticity: float = UNIFIED_ELASTICITY,
    reference_markup: float = REFERENCE_MARKUP,
    print_lift: float = PRINT_LIFT,
) -> Optional[DemandForecast]:
    """Forecast one catalogue product from the player's design decision.

    Returns ``None`` for products missing from the catalogue or without RRP.
    """
    products = PRODUCT_CATALOG if catalog is None else catalog
    ref = products.get(product_id)
    if ref is None:
        logger.debug("No forecast for %s: not in catalogue.", product_id)
        return None
    return explain_forecast(
        product_id=product_id,
        fabric=decision.fabric,
        has_print=decision.has_print,
        rrp=decision.rrp,
        base_units=ref.base_units,
        reference_price=reference_price_for(ref.hm_price, reference_markup),
        elasticity=elasticity,
        print_lift=print_lift,
    )


def project_season_demand(
    product_data: Mapping[str, ProductDecision],
    catalog: Mapping[str, ProductReference] | None = None,
    elasticity: float = UNIFIED_ELASTICITY,
    reference_markup: float = REFERENCE_MARKUP,
    print_lift: float = PRINT_LIFT,
) -> SeasonForecast:
    """Project season demand for every catalogue product.

    Products without a decision, or without an RRP, are evaluated at their
    reference price with no design lift beyond what the decision declares.

    Args:
        product_data: Product id → decision, as found on ``GameWeekState``.
        catalog:      Product catalogue; defaults to ``PRODUCT_CATALOG``.

    Returns:
        ``SeasonForecast`` keyed by catalogue product id.
    """
    products = PRODUCT_CATALOG if catalog is None else catalog
    per_product: dict[str, int] = {}
    for product_id, ref in products.items():
        decision = product_data.get(product_id) or ProductDecision()
        reference_price = reference_price_for(ref.hm_price, reference_markup)
        rrp = decision.rrp if decision.rrp is not None and decision.rrp > 0 else reference_price
        result = explain_forecast(
            product_id=str(product_id),
            fabric=decision.fabric,
            has_print=decision.has_print,
            rrp=rrp,
            base_units=ref.base_units,
            reference_price=reference_price,
            elasticity=elasticity,
            print_lift=print_lift,
        )
        per_product[str(product_id)] = 0 if result is None else result.units

    season = SeasonForecast(per_product=per_product)
    logger.debug("Season demand projected: total=%d %s", season.total, per_product)
    return season
