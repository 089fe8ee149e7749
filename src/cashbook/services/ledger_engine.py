"""Ledger engine: the state a statement screen binds to.

Composes the store, selection, edit session and exporter around an injected
gateway. Public coroutines never raise ``OperationFailed``: the message is
logged, written to ``error`` and the call returns ``False`` with core state
unchanged (a failed commit keeps its draft).
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator, Optional

from ..config import BaseConfig
from ..domain.gateway import RemoteLedgerGateway
from ..domain.records import NewTransaction, RecordId, TransactionKind, TransactionRecord
from ..errors import OperationFailed
from ..logging_config import get_logger
from . import ledger_service
from .edit_session import Draft, EditSession, EditState
from .ledger_service import FilterState
from .ledger_store import LedgerStore
from .reports import ReportExporter
from .selection import SelectionManager, SelectionSet

logger = get_logger(__name__)


class LedgerEngine:
    """Single-user ledger state with reconcile, selection, edit and export."""

    def __init__(
        self,
        gateway: RemoteLedgerGateway,
        *,
        config: Optional[BaseConfig] = None,
        filters: Optional[FilterState] = None,
    ):
        self.config = config or BaseConfig()
        self.gateway = gateway
        self.store = LedgerStore()
        self.selection = SelectionManager(gateway, self.store)
        self.edit = EditSession(gateway, self.store)
        self.exporter = ReportExporter(self.config)
        self.filters = filters or FilterState.current()
        self.error: Optional[str] = None
        self._pending = 0
        self._reload_token = 0

    # -- busy flag / error slot -------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._pending > 0

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    def _fail(self, operation: str, exc: Exception) -> bool:
        self.error = str(getattr(exc, "message", exc))
        logger.warning(
            "Ledger operation failed",
            extra={"operation": operation, "error": self.error},
        )
        return False

    def _succeed(self) -> bool:
        self.error = None
        return True

    # -- derived views ----------------------------------------------------------

    def visible(self) -> list[TransactionRecord]:
        return ledger_service.filtered_view(self.store.records, self.filters)

    def scoped_sum(self) -> Decimal:
        return ledger_service.scoped_sum(self.store.records, self.filters.month, self.filters.year)

    def global_sum(self) -> Decimal:
        return ledger_service.global_sum(self.store.records)

    def summary(self) -> dict[str, Decimal]:
        """Income/expense/net for the month window (search ignored)."""

        return ledger_service.compute_summary(
            ledger_service.month_view(self.store.records, self.filters.month, self.filters.year)
        )

    def set_period(self, month: int, year: int) -> None:
        self.filters = self.filters.with_period(month, year)

    def set_search(self, text: Optional[str]) -> None:
        self.filters = self.filters.with_search(text)

    # -- reconcile ---------------------------------------------------------------

    async def reload(self) -> bool:
        """Fetch everything and replace the store.

        Each call takes a new request token; a response or failure that
        arrives after a newer reload was issued is discarded.
        """

        self._reload_token += 1
        token = self._reload_token
        with self._busy():
            try:
                records = await self.gateway.fetch_all()
            except OperationFailed as exc:
                if token != self._reload_token:
                    logger.info("Discarding stale reload failure", extra={"token": token})
                    return False
                return self._fail("reload", exc)
        if token != self._reload_token:
            logger.info(
                "Discarding stale reload response",
                extra={"token": token, "latest": self._reload_token},
            )
            return False
        self.store.replace_all(records)
        logger.info("Ledger reloaded", extra={"count": len(self.store)})
        return self._succeed()

    async def add_entry(
        self,
        *,
        description: str,
        amount: Any,
        kind: TransactionKind | str,
        occurred_on: date | datetime | str,
    ) -> bool:
        """Insert a new entry, then reload to pick up its backend-assigned id."""

        entry = NewTransaction.build(
            description=description, amount=amount, kind=kind, occurred_on=occurred_on
        )
        try:
            new_id = await self.gateway.insert(entry)
        except OperationFailed as exc:
            return self._fail("insert", exc)
        logger.info("Transaction inserted", extra={"record_id": new_id})
        self._succeed()
        if self.store.apply_insert_result():
            await self.reload()
        return True

    async def delete_entry(self, record_id: RecordId) -> bool:
        with self._busy():
            try:
                await self.gateway.delete_one(record_id)
            except OperationFailed as exc:
                return self._fail("delete", exc)
        self.store.apply_delete(record_id)
        self._drop_edit_for([record_id])
        return self._succeed()

    # -- selection ---------------------------------------------------------------

    def toggle_selection(self, record_id: RecordId) -> SelectionSet:
        return self.selection.toggle(record_id)

    def clear_selection(self) -> None:
        self.selection.clear()

    async def bulk_delete(self) -> bool:
        ids = list(self.selection.selected)
        with self._busy():
            try:
                await self.selection.bulk_delete()
            except OperationFailed as exc:
                return self._fail("bulk_delete", exc)
        self._drop_edit_for(ids)
        return self._succeed()

    # -- inline edit -------------------------------------------------------------

    @property
    def edit_state(self) -> EditState:
        return self.edit.state

    def start_edit(self, record_id: RecordId) -> Draft:
        return self.edit.start(record_id)

    def cancel_edit(self) -> None:
        self.edit.cancel()

    def update_draft(self, field: str, value: Any) -> Draft:
        return self.edit.mutate_draft(field, value)

    async def commit_edit(self, record_id: RecordId) -> bool:
        with self._busy():
            try:
                in_order = await self.edit.commit(record_id)
            except OperationFailed as exc:
                return self._fail("commit", exc)
        self._succeed()
        if not in_order:
            await self.reload()
        return True

    def _drop_edit_for(self, record_ids: list[RecordId]) -> None:
        editing = self.edit.editing_id()
        if editing is not None and editing in record_ids:
            self.edit.cancel()

    # -- exports -----------------------------------------------------------------

    def export_csv(self, output_dir: Path | None = None) -> Optional[Path]:
        try:
            return self.exporter.export_csv(self.visible(), self.filters, output_dir)
        except OSError as exc:
            self._fail("export_csv", exc)
            return None

    def export_pdf(self, output_dir: Path | None = None) -> Optional[Path]:
        try:
            return self.exporter.export_pdf(self.visible(), self.filters, output_dir)
        except OSError as exc:
            self._fail("export_pdf", exc)
            return None
