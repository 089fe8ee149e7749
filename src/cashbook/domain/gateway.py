"""Remote ledger gateway protocol."""

from __future__ import annotations

from typing import Iterable, Protocol

from .records import NewTransaction, RecordId, TransactionPatch, TransactionRecord


class RemoteLedgerGateway(Protocol):
    """Backend calls consumed by the ledger engine.

    Every call is a single async attempt. Implementations raise
    ``OperationFailed`` on rejection and must not leave partial writes behind.
    """

    async def fetch_all(self) -> list[TransactionRecord]:
        """Return every record in scope, ordered date desc then id desc."""
        ...

    async def insert(self, entry: NewTransaction) -> RecordId:
        """Insert one record and return the backend-assigned id."""
        ...

    async def update(self, record_id: RecordId, patch: TransactionPatch) -> None:
        """Apply a partial update to one record."""
        ...

    async def delete_one(self, record_id: RecordId) -> None:
        """Delete a single record."""
        ...

    async def delete_many(self, record_ids: Iterable[RecordId]) -> None:
        """Delete every record in the id list."""
        ...
