"""SQLModel definition for the ``transactions`` table."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..domain.records import TransactionKind, TransactionRecord, normalize_amount


class LedgerRow(SQLModel, table=True):
    """A persisted income or expense entry scoped to one user."""

    __tablename__: ClassVar[str] = "transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, index=True, max_length=128)
    description: str = Field(default="", max_length=255)
    amount: Decimal = Field(
        default=Decimal("0.00"),
        max_digits=12,
        decimal_places=2,
        nullable=False,
        description="Non-negative magnitude; the sign comes from kind",
    )
    kind: str = Field(default=TransactionKind.OUTFLOW.value, nullable=False, max_length=8)
    occurred_on: date = Field(nullable=False, index=True, sa_column_kwargs={"name": "date"})

    def to_record(self) -> TransactionRecord:
        if self.id is None:
            raise ValueError("LedgerRow has not been persisted yet")
        return TransactionRecord(
            id=self.id,
            description=self.description or "",
            amount=normalize_amount(self.amount),
            kind=TransactionKind.parse(self.kind),
            date=self.occurred_on,
        )
