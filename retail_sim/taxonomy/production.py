"""
Production lead times and unit costs by product and method.

The simulation manufactures three products either in-house (capacity-bound,
slower, cheaper) or outsourced (uncapped, one-week turnaround, dearer).
``PRODUCTION_TERMS`` is the canonical lookup used when a batch start record
carries only ``(product, method, quantity)`` and the end week and unit cost
have to be derived.

Products missing from the table fall back to ``DEFAULT_TERMS``.

This module has NO imports from any other ``retail_sim`` package.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ProductionMethod(StrEnum):
    """How a batch is manufactured.

    Input aliases (``"in-house"``, ``"outsource"``) are accepted and
    normalised, since both spellings appear in recorded snapshots.
    """

    INHOUSE = "inhouse"
    OUTSOURCED = "outsourced"

    @classmethod
    def _missing_(cls, value: object) -> "ProductionMethod | None":
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "").replace("_", "")
            if key == "inhouse":
                return cls.INHOUSE
            if key in ("outsource", "outsourced"):
                return cls.OUTSOURCED
        return None


@dataclass(frozen=True)
class ProductionTerms:
    """Lead time and per-unit cost for one (product, method) pair.

    Attributes:
        duration_weeks: Weeks from start to completion.
        unit_cost:      Manufacturing cost per unit (currency).
    """

    duration_weeks: int
    unit_cost: float


PRODUCTION_TERMS: dict[tuple[str, ProductionMethod], ProductionTerms] = {
    ("jacket", ProductionMethod.INHOUSE):    ProductionTerms(duration_weeks=3, unit_cost=15.0),
    ("jacket", ProductionMethod.OUTSOURCED): ProductionTerms(duration_weeks=1, unit_cost=25.0),
    ("dress",  ProductionMethod.INHOUSE):    ProductionTerms(duration_weeks=2, unit_cost=8.0),
    ("dress",  ProductionMethod.OUTSOURCED): ProductionTerms(duration_weeks=1, unit_cost=14.0),
    ("pants",  ProductionMethod.INHOUSE):    ProductionTerms(duration_weeks=2, unit_cost=12.0),
    ("pants",  ProductionMethod.OUTSOURCED): ProductionTerms(duration_weeks=1, unit_cost=18.0),
}

DEFAULT_TERMS: dict[ProductionMethod, ProductionTerms] = {
    ProductionMethod.INHOUSE:    ProductionTerms(duration_weeks=2, unit_cost=10.0),
    ProductionMethod.OUTSOURCED: ProductionTerms(duration_weeks=1, unit_cost=15.0),
}


def production_terms(
    product: str,
    method: ProductionMethod,
    table: dict[tuple[str, ProductionMethod], ProductionTerms] | None = None,
) -> ProductionTerms:
    """Look up the terms for ``(product, method)``, falling back to the method default."""
    terms_table = PRODUCTION_TERMS if table is None else table
    terms = terms_table.get((product, method))
    if terms is None:
        return DEFAULT_TERMS[method]
    return terms
