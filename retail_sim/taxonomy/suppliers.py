"""
Supplier delivery lead times.

A GMC contract records batch call-offs (``gmcOrders``) rather than a fixed
delivery schedule. Each order lands ``lead_weeks`` after the week it was
placed, so the expected arrival week is ``order.week + supplier_lead_weeks``.

Suppliers missing from the table fall back to ``DEFAULT_LEAD_WEEKS``.

This module has NO imports from any other ``retail_sim`` package.
"""

from __future__ import annotations

from typing import Mapping

DEFAULT_LEAD_WEEKS = 2

SUPPLIER_LEAD_WEEKS: dict[str, int] = {
    "supplier1": 2,
    "supplier2": 2,
}


def supplier_lead_weeks(
    supplier: str | None,
    table: Mapping[str, int] | None = None,
) -> int:
    """Weeks between placing an order with ``supplier`` and its delivery."""
    lead_table = SUPPLIER_LEAD_WEEKS if table is None else table
    if supplier is None:
        return DEFAULT_LEAD_WEEKS
    return lead_table.get(supplier, DEFAULT_LEAD_WEEKS)
