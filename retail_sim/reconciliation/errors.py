"""Exceptions raised by the reconciliation engine."""

from __future__ import annotations


class ReconciliationError(Exception):
    """Base class for reconciliation failures."""


class UnknownLedgerEntryTypeError(ReconciliationError):
    """A ledger row carries an entry type outside ``LedgerEntryType``.

    Only raised in strict mode; otherwise such rows are excluded from all
    sums and reported in the summary diagnostics.
    """

    def __init__(self, entry_types: list[str]) -> None:
        self.entry_types = sorted(set(entry_types))
        super().__init__(
            f"Unrecognised ledger entry type(s): {', '.join(self.entry_types)}."
        )


class SnapshotOrderError(ReconciliationError):
    """The 'next' snapshot is not later than the 'previous' one."""

    def __init__(self, prev_week: int, next_week: int) -> None:
        self.prev_week = prev_week
        self.next_week = next_week
        super().__init__(
            f"next snapshot week ({next_week}) must be after previous week ({prev_week})."
        )
