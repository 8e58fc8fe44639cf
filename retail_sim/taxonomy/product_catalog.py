"""
Product catalogue and fabric design lifts.

Hierarchy: ``ProductKey`` (what is sold) → ``ProductReference`` (category
baseline and competitor anchor) and ``Fabric`` (design choice) →
``FABRIC_LIFT`` (demand lift from fabric appeal).

The reference price a product is positioned against is the high-street
competitor price (``hm_price``) marked up by ``REFERENCE_MARKUP``. The
per-product ``elasticity`` is the category figure shown to players; the
forecast model itself applies one unified elasticity across products.

This module has NO imports from any other ``retail_sim`` package.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

REFERENCE_MARKUP = 1.2


class ProductKey(StrEnum):
    """The three products of the season."""

    JACKET = "jacket"
    DRESS = "dress"
    PANTS = "pants"


class Fabric(StrEnum):
    """Fabric options offered by suppliers."""

    SELVEDGE_DENIM = "selvedgeDenim"
    STANDARD_DENIM = "standardDenim"
    EGYPTIAN_COTTON = "egyptianCotton"
    POLYESTER_BLEND = "polyesterBlend"
    FINE_WALE_CORDUROY = "fineWaleCorduroy"
    WIDE_WALE_CORDUROY = "wideWaleCorduroy"


@dataclass(frozen=True)
class ProductReference:
    """Static market data for one product.

    Attributes:
        name:        Display name.
        base_units:  Category baseline demand for the season (units).
        hm_price:    High-street competitor price (currency).
        elasticity:  Category price elasticity shown for guidance.
    """

    name: str
    base_units: int
    hm_price: float
    elasticity: float


PRODUCT_CATALOG: dict[str, ProductReference] = {
    ProductKey.JACKET: ProductReference(
        name="Vintage Denim Jacket", base_units=100_000, hm_price=80.0, elasticity=-1.40,
    ),
    ProductKey.DRESS: ProductReference(
        name="Floral Print Dress", base_units=150_000, hm_price=50.0, elasticity=-1.20,
    ),
    ProductKey.PANTS: ProductReference(
        name="Corduroy Pants", base_units=120_000, hm_price=60.0, elasticity=-1.55,
    ),
}

# Demand lift by fabric; unknown fabrics lift 0.
FABRIC_LIFT: dict[str, float] = {
    Fabric.SELVEDGE_DENIM:     0.06,
    Fabric.STANDARD_DENIM:     0.00,
    Fabric.EGYPTIAN_COTTON:    0.05,
    Fabric.POLYESTER_BLEND:   -0.02,
    Fabric.FINE_WALE_CORDUROY: 0.04,
    Fabric.WIDE_WALE_CORDUROY: 0.00,
}

PRINT_LIFT = 0.03
