"""Ledger view derivation and balance helpers.

Everything here is a pure function of the records passed in, recomputed on
every read; nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..domain.records import ZERO, TransactionKind, TransactionRecord


@dataclass(frozen=True)
class FilterState:
    """Month/year window plus free-text search applied to the ledger."""

    month: int
    year: int
    search_text: str = ""

    def __post_init__(self) -> None:
        if not 1 <= int(self.month) <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")
        if int(self.year) < 1:
            raise ValueError(f"year must be positive, got {self.year}")

    @classmethod
    def current(cls, today: Optional[date] = None) -> "FilterState":
        today = today or date.today()
        return cls(month=today.month, year=today.year)

    def with_period(self, month: int, year: int) -> "FilterState":
        return replace(self, month=month, year=year)

    def with_search(self, text: Optional[str]) -> "FilterState":
        return replace(self, search_text=text or "")


def matches_period(record: TransactionRecord, month: int, year: int) -> bool:
    return record.date.month == month and record.date.year == year


def matches_search(record: TransactionRecord, search_text: str) -> bool:
    needle = search_text.strip().casefold()
    if not needle:
        return True
    return needle in (record.description or "").casefold()


def month_view(
    records: Iterable[TransactionRecord], month: int, year: int
) -> list[TransactionRecord]:
    """Records dated in the given month, search text ignored."""

    return [r for r in records if matches_period(r, month, year)]


def filtered_view(
    records: Iterable[TransactionRecord], filters: FilterState
) -> list[TransactionRecord]:
    """The visible list: period match and, when set, a description match.

    Input order is preserved, so a canonically ordered store yields a
    canonically ordered view.
    """

    return [
        r
        for r in month_view(records, filters.month, filters.year)
        if matches_search(r, filters.search_text)
    ]


def signed_sum(records: Iterable[TransactionRecord]) -> Decimal:
    return sum((r.signed_amount for r in records), ZERO)


def scoped_sum(records: Iterable[TransactionRecord], month: int, year: int) -> Decimal:
    """Balance of the month/year window."""

    return signed_sum(month_view(records, month, year))


def global_sum(records: Iterable[TransactionRecord]) -> Decimal:
    """Balance of every record, unfiltered."""

    return signed_sum(records)


def compute_summary(transactions: Iterable[TransactionRecord]) -> dict[str, Decimal]:
    """Compute income, expenses, and net totals from the provided transactions."""

    items = list(transactions)
    income = sum((t.amount for t in items if t.kind is TransactionKind.INFLOW), ZERO)
    expenses = sum((t.amount for t in items if t.kind is TransactionKind.OUTFLOW), ZERO)
    return {"income": income, "expenses": expenses, "net": income - expenses}
