"""
Ledger row model.

A ``LedgerEntry`` records one financial event of a week-transition. Rows
are append-only and scoped to exactly one week. ``entry_type`` is kept as
the raw string the backend sent rather than coerced to
``LedgerEntryType``, so that a misspelled or newly introduced type survives
parsing and can be reported by the reconciliation engine instead of being
rejected at the edge or silently dropped.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from retail_sim.taxonomy.ledger_taxonomy import (
    LedgerEntryType,
    is_known_entry_type,
    parse_ref_id,
)


class LedgerEntry(BaseModel):
    """One financial event recorded during a week-transition.

    Attributes:
        week_number: Week the event belongs to.
        entry_type: Raw category string; see ``LedgerEntryType``.
        ref_id: ``"supplier:material"`` reference for materials rows, or ``None``.
        amount: Signed currency amount (outflows are positive).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    week_number: int
    entry_type: str
    ref_id: Optional[str] = None
    amount: float = 0.0

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount_default(cls, v: object) -> object:
        return 0 if v is None else v

    @field_validator("entry_type")
    @classmethod
    def validate_entry_type_strip(cls, v: str) -> str:
        return v.strip()

    @property
    def is_known_type(self) -> bool:
        return is_known_entry_type(self.entry_type)

    @property
    def known_type(self) -> Optional[LedgerEntryType]:
        """The entry type as a ``LedgerEntryType``, or ``None`` if unrecognised."""
        return LedgerEntryType(self.entry_type) if self.is_known_type else None

    def supplier_and_material(self) -> tuple[str, str]:
        """``(supplier, material)`` parsed from ``ref_id`` with ``"unknown"`` fallback."""
        return parse_ref_id(self.ref_id)


def rows_for_week(rows: list[LedgerEntry], week_number: int) -> list[LedgerEntry]:
    """Return the rows scoped to ``week_number``, preserving order."""
    return [r for r in rows if r.week_number == week_number]
