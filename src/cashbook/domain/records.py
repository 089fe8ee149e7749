"""Value types for ledger transactions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

RecordId = int

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


class TransactionKind(str, Enum):
    """Direction of a transaction; decides the sign used in balances."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"

    @property
    def sign(self) -> int:
        return 1 if self is TransactionKind.INFLOW else -1

    @classmethod
    def parse(cls, value: "TransactionKind | str") -> "TransactionKind":
        """Accept an enum member or its (case-insensitive) value."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown transaction kind: {value!r}") from exc


def normalize_amount(raw: Any) -> Decimal:
    """Return a non-negative two-place magnitude; unparsable input becomes 0."""

    if raw is None:
        return ZERO
    if isinstance(raw, bool):
        return ZERO
    try:
        value = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
        if not value.is_finite():
            return ZERO
        # Quantizing past the context precision (e.g. 1e30) is invalid too.
        return abs(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return ZERO


def as_calendar_date(value: date | datetime | str) -> date:
    """Reduce datetimes and ISO strings to a plain calendar date."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"Invalid date {value!r}; use YYYY-MM-DD") from exc


@dataclass(frozen=True)
class TransactionRecord:
    """A committed ledger entry as cached client-side."""

    id: RecordId
    description: str
    amount: Decimal
    kind: TransactionKind
    date: date

    @property
    def signed_amount(self) -> Decimal:
        return self.amount * self.kind.sign

    def merged(self, patch: "TransactionPatch") -> "TransactionRecord":
        """Return a copy with the patch's present fields applied."""

        return replace(self, **patch.changes())


@dataclass(frozen=True)
class NewTransaction:
    """Fields for an entry that has not been assigned an id yet."""

    description: str
    amount: Decimal
    kind: TransactionKind
    date: date

    @classmethod
    def build(
        cls,
        *,
        description: str,
        amount: Any,
        kind: TransactionKind | str,
        occurred_on: date | datetime | str,
    ) -> "NewTransaction":
        return cls(
            description=description or "",
            amount=normalize_amount(amount),
            kind=TransactionKind.parse(kind),
            date=as_calendar_date(occurred_on),
        )


@dataclass(frozen=True)
class TransactionPatch:
    """Partial update; ``None`` fields are left untouched."""

    description: Optional[str] = None
    amount: Optional[Decimal] = None
    kind: Optional[TransactionKind] = None
    date: Optional[date] = None

    def changes(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in (
                ("description", self.description),
                ("amount", self.amount),
                ("kind", self.kind),
                ("date", self.date),
            )
            if value is not None
        }


def canonical_key(record: TransactionRecord) -> tuple[date, RecordId]:
    """Sort key for canonical order when used with ``reverse=True``."""

    return (record.date, record.id)


def sort_canonical(records) -> list[TransactionRecord]:
    """Date descending, then id descending."""

    return sorted(records, key=canonical_key, reverse=True)
