"""Multi-selection of ledger records for bulk actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, Iterable, Iterator

from ..domain.records import RecordId
from ..logging_config import get_logger

if TYPE_CHECKING:
    from ..domain.gateway import RemoteLedgerGateway
    from .ledger_store import LedgerStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class SelectionSet:
    """Immutable set of selected record ids; every change returns a new value."""

    ids: FrozenSet[RecordId] = field(default_factory=frozenset)

    @classmethod
    def of(cls, ids: Iterable[RecordId] = ()) -> "SelectionSet":
        return cls(frozenset(ids))

    def toggle(self, record_id: RecordId) -> "SelectionSet":
        if record_id in self.ids:
            return SelectionSet(self.ids - {record_id})
        return SelectionSet(self.ids | {record_id})

    def without(self, record_ids: Iterable[RecordId]) -> "SelectionSet":
        removed = self.ids - frozenset(record_ids)
        return self if removed == self.ids else SelectionSet(removed)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.ids

    def __iter__(self) -> Iterator[RecordId]:
        return iter(sorted(self.ids, reverse=True))

    def __len__(self) -> int:
        return len(self.ids)

    def __bool__(self) -> bool:
        return bool(self.ids)


EMPTY_SELECTION = SelectionSet()


class SelectionManager:
    """Toggle, clear and bulk-delete over the store's selection value."""

    def __init__(self, gateway: RemoteLedgerGateway, store: LedgerStore):
        self.gateway = gateway
        self.store = store

    @property
    def selected(self) -> SelectionSet:
        return self.store.selection

    def toggle(self, record_id: RecordId) -> SelectionSet:
        self.store.replace_selection(self.store.selection.toggle(record_id))
        return self.store.selection

    def clear(self) -> None:
        self.store.replace_selection(EMPTY_SELECTION)

    async def bulk_delete(self) -> int:
        """Delete every selected record; returns how many ids were sent.

        An empty selection returns 0 without touching the gateway. When the
        gateway raises, the store and selection are left as they were.
        """

        ids = list(self.store.selection)
        if not ids:
            return 0
        await self.gateway.delete_many(ids)
        self.store.apply_delete_many(ids)
        self.clear()
        logger.info("Bulk delete completed", extra={"count": len(ids)})
        return len(ids)
