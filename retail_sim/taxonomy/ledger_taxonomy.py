"""
Ledger and procurement taxonomy.

Every financial event the simulation records for a week-transition carries
one ``LedgerEntryType``. The set is closed: the reconciliation engine sums
each member into exactly one cash-waterfall bucket and treats anything else
as unknown.

``SettlementKind`` names the two materials-payment terms:

  - ``SPT`` — spot purchase terms, paid per delivery.
  - ``GMC`` — guaranteed minimum commitment, paid against a standing contract.

This module has NO imports from any other ``retail_sim`` package.
"""

from enum import StrEnum


class LedgerEntryType(StrEnum):
    """Category of a single ledger row."""

    MARKETING = "marketing"
    """Media spend charged for the week's marketing plan."""

    MATERIALS_SPT = "materials_spt"
    """Raw-material settlement under spot purchase terms."""

    MATERIALS_GMC = "materials_gmc"
    """Raw-material settlement under a guaranteed minimum commitment."""

    PRODUCTION = "production"
    """In-house or outsourced manufacturing cost for batches started."""

    LOGISTICS = "logistics"
    """Shipping cost for finished goods moving to stores."""

    HOLDING = "holding"
    """Inventory holding cost on stock carried over the week."""

    INTEREST = "interest"
    """Interest charged on the revolving credit line."""


class SettlementKind(StrEnum):
    """Supplier settlement terms for a materials payment."""

    SPT = "SPT"
    GMC = "GMC"


# Outflow categories shown in the cash waterfall (interest is reported apart).
OUTFLOW_ENTRY_TYPES: tuple[LedgerEntryType, ...] = (
    LedgerEntryType.MARKETING,
    LedgerEntryType.MATERIALS_SPT,
    LedgerEntryType.MATERIALS_GMC,
    LedgerEntryType.PRODUCTION,
    LedgerEntryType.LOGISTICS,
    LedgerEntryType.HOLDING,
)

MATERIALS_ENTRY_TYPES: dict[LedgerEntryType, SettlementKind] = {
    LedgerEntryType.MATERIALS_SPT: SettlementKind.SPT,
    LedgerEntryType.MATERIALS_GMC: SettlementKind.GMC,
}

KNOWN_ENTRY_TYPES: frozenset[str] = frozenset(t.value for t in LedgerEntryType)

UNKNOWN_REF = "unknown"
"""Sentinel used for a supplier or material that cannot be parsed from ``ref_id``."""


def is_known_entry_type(entry_type: str) -> bool:
    """Return ``True`` if ``entry_type`` is a member of ``LedgerEntryType``."""
    return entry_type in KNOWN_ENTRY_TYPES


def parse_ref_id(ref_id: str | None) -> tuple[str, str]:
    """Split a ``"supplier:material"`` reference into its two parts.

    Either part falls back to ``UNKNOWN_REF`` when absent or empty, so a
    malformed reference never raises::

        parse_ref_id("supplier2:egyptianCotton")  # ("supplier2", "egyptianCotton")
        parse_ref_id("supplier2")                 # ("supplier2", "unknown")
        parse_ref_id(":denim")                    # ("unknown", "denim")
        parse_ref_id(None)                        # ("unknown", "unknown")
    """
    if not ref_id:
        return UNKNOWN_REF, UNKNOWN_REF
    parts = ref_id.split(":")
    supplier = parts[0].strip() or UNKNOWN_REF
    material = parts[1].strip() if len(parts) > 1 else ""
    return supplier, material or UNKNOWN_REF
