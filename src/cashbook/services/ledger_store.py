"""Canonical in-memory cache of the user's transaction records."""

from __future__ import annotations

from typing import Iterable, Iterator

from ..domain.records import RecordId, TransactionPatch, TransactionRecord, sort_canonical
from ..errors import RecordNotFound
from ..logging_config import get_logger
from .selection import EMPTY_SELECTION, SelectionSet

logger = get_logger(__name__)


class LedgerStore:
    """Holds records in canonical order (date desc, id desc) and the selection.

    This is the only writer of record state; views and sums are derived from
    ``records`` on every read.
    """

    def __init__(self, records: Iterable[TransactionRecord] = ()) -> None:
        self._records: list[TransactionRecord] = []
        self.selection: SelectionSet = EMPTY_SELECTION
        if records:
            self.replace_all(records)

    @property
    def records(self) -> tuple[TransactionRecord, ...]:
        return tuple(self._records)

    @property
    def ids(self) -> list[RecordId]:
        return [record.id for record in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(tuple(self._records))

    def __contains__(self, record_id: object) -> bool:
        return any(record.id == record_id for record in self._records)

    def get(self, record_id: RecordId) -> TransactionRecord:
        for record in self._records:
            if record.id == record_id:
                return record
        raise RecordNotFound(record_id)

    def replace_all(self, records: Iterable[TransactionRecord]) -> None:
        """Swap in a fresh fetch result and clear the selection."""

        unique: dict[RecordId, TransactionRecord] = {}
        for record in records:
            if record.id in unique:
                logger.warning("Duplicate id in fetch result", extra={"record_id": record.id})
            unique[record.id] = record
        self._records = sort_canonical(unique.values())
        self.selection = EMPTY_SELECTION

    def apply_insert_result(self) -> bool:
        """Inserted ids are backend-assigned, so the caller must reload.

        Always returns ``True`` (reload required); nothing is spliced locally.
        """

        return True

    def apply_update(self, record_id: RecordId, patch: TransactionPatch) -> bool:
        """Merge ``patch`` into the record in place.

        Returns ``False`` when the date changed, meaning canonical order may be
        stale until the next reload.
        """

        for index, record in enumerate(self._records):
            if record.id == record_id:
                merged = record.merged(patch)
                self._records[index] = merged
                return merged.date == record.date
        raise RecordNotFound(record_id)

    def apply_delete(self, record_id: RecordId) -> None:
        self.apply_delete_many([record_id])

    def apply_delete_many(self, record_ids: Iterable[RecordId]) -> None:
        doomed = set(record_ids)
        self._records = [record for record in self._records if record.id not in doomed]
        self.selection = self.selection.without(doomed)

    def replace_selection(self, selection: SelectionSet) -> None:
        self.selection = selection
