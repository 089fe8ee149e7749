"""Pytest configuration and shared fixtures for Cashbook tests.

Provides an isolated configuration per test, an in-memory gateway fake that
stands in for the remote datastore, and record factories.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Awaitable, Callable, Iterable

import pytest

from cashbook.config import BaseConfig
from cashbook.domain.records import (
    NewTransaction,
    TransactionKind,
    TransactionPatch,
    TransactionRecord,
    sort_canonical,
)
from cashbook.errors import OperationFailed
from cashbook.services.ledger_engine import LedgerEngine
from cashbook.services.ledger_service import FilterState


# =============================================================================
# Configuration / logging isolation
# =============================================================================


@pytest.fixture
def config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> BaseConfig:
    """Config rooted in the test's temp dir with a throwaway SQLite file."""

    data_dir = tmp_path / "instance"
    monkeypatch.setenv("CASHBOOK_DATA_DIR", str(data_dir))
    monkeypatch.setenv("CASHBOOK_DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.setenv("CASHBOOK_USER_ID", "tester")
    monkeypatch.delenv("CASHBOOK_EXPORT_DIR", raising=False)
    monkeypatch.delenv("CASHBOOK_ENTITLEMENT_ACTIVE", raising=False)
    monkeypatch.delenv("CASHBOOK_REPORT_ROWS_PER_PAGE", raising=False)
    return BaseConfig()


@pytest.fixture(autouse=True)
def _reset_cashbook_logger():
    """Drop handlers installed by setup_logging so streams don't leak across tests."""

    yield
    root = logging.getLogger("cashbook")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


# =============================================================================
# Gateway fake
# =============================================================================


class FakeLedgerGateway:
    """In-memory stand-in for the remote datastore.

    ``fail(op)`` makes every call of that operation raise ``OperationFailed``
    until ``recover()``. ``fetch_hooks`` are awaited (one per call) after the
    fetch snapshot is taken, which lets tests reorder overlapping reloads.
    """

    def __init__(self, records: Iterable[TransactionRecord] = ()):
        self.rows: dict[int, TransactionRecord] = {r.id: r for r in records}
        self.next_id = max(self.rows, default=0) + 1
        self.calls: list[tuple[str, tuple]] = []
        self.failures: dict[str, str] = {}
        self.fetch_hooks: list[Callable[[], Awaitable[None]]] = []

    def fail(self, operation: str, message: str = "backend unavailable") -> None:
        self.failures[operation] = message

    def recover(self) -> None:
        self.failures.clear()

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, args))
        if operation in self.failures:
            raise OperationFailed(self.failures[operation])

    async def fetch_all(self) -> list[TransactionRecord]:
        self._enter("fetch_all")
        snapshot = sort_canonical(self.rows.values())
        if self.fetch_hooks:
            await self.fetch_hooks.pop(0)()
        return snapshot

    async def insert(self, entry: NewTransaction) -> int:
        self._enter("insert", entry)
        new_id = self.next_id
        self.next_id += 1
        self.rows[new_id] = TransactionRecord(
            id=new_id,
            description=entry.description,
            amount=entry.amount,
            kind=entry.kind,
            date=entry.date,
        )
        return new_id

    async def update(self, record_id: int, patch: TransactionPatch) -> None:
        self._enter("update", record_id, patch)
        if record_id not in self.rows:
            raise OperationFailed(f"id {record_id} not found")
        self.rows[record_id] = self.rows[record_id].merged(patch)

    async def delete_one(self, record_id: int) -> None:
        self._enter("delete_one", record_id)
        self.rows.pop(record_id, None)

    async def delete_many(self, record_ids) -> None:
        ids = list(record_ids)
        self._enter("delete_many", ids)
        for record_id in ids:
            self.rows.pop(record_id, None)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def record_factory():
    """Factory for TransactionRecord values with sensible defaults."""

    def _create(
        record_id: int,
        on: date | str = "2025-01-01",
        kind: TransactionKind | str = TransactionKind.OUTFLOW,
        amount: str | int | Decimal = "10.00",
        description: str = "Test transaction",
    ) -> TransactionRecord:
        return TransactionRecord(
            id=record_id,
            description=description,
            amount=Decimal(str(amount)).quantize(Decimal("0.01")),
            kind=TransactionKind.parse(kind),
            date=on if isinstance(on, date) else date.fromisoformat(on),
        )

    return _create


@pytest.fixture
def example_records(record_factory) -> dict[str, TransactionRecord]:
    """A(2025-01-05, outflow, 40), B(2025-01-10, inflow, 100), C(2025-02-01, inflow, 50)."""

    return {
        "A": record_factory(1, "2025-01-05", "outflow", 40, "Groceries"),
        "B": record_factory(2, "2025-01-10", "inflow", 100, "Salary"),
        "C": record_factory(3, "2025-02-01", "inflow", 50, "Refund"),
    }


@pytest.fixture
def gateway(example_records) -> FakeLedgerGateway:
    return FakeLedgerGateway(example_records.values())


@pytest.fixture
def ledger_engine(gateway, config) -> LedgerEngine:
    """Engine over the fake gateway, filtered to January 2025 (not yet loaded)."""

    return LedgerEngine(gateway, config=config, filters=FilterState(month=1, year=2025))
