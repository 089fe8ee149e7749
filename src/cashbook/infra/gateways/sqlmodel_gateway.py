"""SQLModel implementation of the remote ledger gateway."""

from __future__ import annotations

import asyncio
from typing import Callable, Iterable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...domain.records import NewTransaction, RecordId, TransactionPatch, TransactionRecord
from ...errors import OperationFailed
from ...logging_config import get_logger
from ...models.transaction import LedgerRow

logger = get_logger(__name__)

T = TypeVar("T")


class SQLModelLedgerGateway:
    """Gateway over the ``transactions`` table, scoped to a single user.

    Session work is blocking, so each call is pushed to a worker thread and
    awaited; one call maps to one database transaction.
    """

    def __init__(self, session_factory: Callable[[], Session], *, user_id: str):
        if not user_id:
            raise ValueError("user_id is required to scope ledger queries")
        self.session_factory = session_factory
        self.user_id = user_id

    async def _call(self, operation: str, work: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(work)
        except SQLAlchemyError as exc:
            logger.warning(
                "Gateway call failed",
                extra={"operation": operation, "user_id": self.user_id, "error": str(exc)},
            )
            raise OperationFailed(f"Could not {operation}: {exc.__class__.__name__}") from exc

    async def fetch_all(self) -> list[TransactionRecord]:
        def work() -> list[TransactionRecord]:
            with self.session_factory() as session:
                statement = (
                    select(LedgerRow)
                    .where(LedgerRow.user_id == self.user_id)
                    .order_by(LedgerRow.occurred_on.desc(), LedgerRow.id.desc())  # type: ignore
                )
                records = []
                for row in session.exec(statement).all():
                    try:
                        records.append(row.to_record())
                    except ValueError as exc:
                        logger.warning(
                            "Stored transaction is unreadable",
                            extra={"record_id": row.id, "user_id": self.user_id, "error": str(exc)},
                        )
                        raise OperationFailed(
                            f"Could not load transactions: row {row.id} is invalid"
                        ) from exc
                return records

        return await self._call("load transactions", work)

    async def insert(self, entry: NewTransaction) -> RecordId:
        def work() -> RecordId:
            with self.session_factory() as session:
                row = LedgerRow(
                    user_id=self.user_id,
                    description=entry.description,
                    amount=entry.amount,
                    kind=entry.kind.value,
                    occurred_on=entry.date,
                )
                session.add(row)
                session.flush()
                if row.id is None:
                    raise OperationFailed("Could not save transaction: no id assigned")
                return row.id

        return await self._call("save transaction", work)

    async def update(self, record_id: RecordId, patch: TransactionPatch) -> None:
        def work() -> bool:
            with self.session_factory() as session:
                row = session.exec(
                    select(LedgerRow)
                    .where(LedgerRow.id == record_id)
                    .where(LedgerRow.user_id == self.user_id)
                ).first()
                if row is None:
                    return False
                changes = patch.changes()
                if "description" in changes:
                    row.description = changes["description"]
                if "amount" in changes:
                    row.amount = changes["amount"]
                if "kind" in changes:
                    row.kind = changes["kind"].value
                if "date" in changes:
                    row.occurred_on = changes["date"]
                session.add(row)
                return True

        found = await self._call("update transaction", work)
        if not found:
            raise OperationFailed(f"Could not update transaction: id {record_id} not found")

    async def delete_one(self, record_id: RecordId) -> None:
        await self.delete_many([record_id])

    async def delete_many(self, record_ids: Iterable[RecordId]) -> None:
        ids = list(record_ids)
        if not ids:
            return

        def work() -> None:
            with self.session_factory() as session:
                rows = session.exec(
                    select(LedgerRow)
                    .where(LedgerRow.user_id == self.user_id)
                    .where(LedgerRow.id.in_(ids))  # type: ignore[union-attr]
                ).all()
                for row in rows:
                    session.delete(row)

        await self._call("delete transactions", work)
