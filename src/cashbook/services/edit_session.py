"""Inline edit state machine: ``Idle`` or ``Editing(id, draft)``."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import TYPE_CHECKING, Any, Union

from ..domain.records import (
    RecordId,
    TransactionKind,
    TransactionPatch,
    TransactionRecord,
    as_calendar_date,
    normalize_amount,
)
from ..errors import InvalidEditState
from ..logging_config import get_logger

if TYPE_CHECKING:
    from ..domain.gateway import RemoteLedgerGateway
    from .ledger_store import LedgerStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Draft:
    """Working copy of a record's editable fields."""

    description: str
    amount: str
    kind: TransactionKind
    date: date

    FIELDS = ("description", "amount", "kind", "date")

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "Draft":
        return cls(
            description=record.description,
            amount=str(record.amount),
            kind=record.kind,
            date=as_calendar_date(record.date),
        )

    def with_field(self, field: str, value: Any) -> "Draft":
        if field == "description":
            return replace(self, description="" if value is None else str(value))
        if field == "amount":
            return replace(self, amount="" if value is None else str(value))
        if field == "kind":
            return replace(self, kind=TransactionKind.parse(value))
        if field == "date":
            return replace(self, date=as_calendar_date(value))
        raise InvalidEditState(f"Unknown draft field {field!r}; expected one of {self.FIELDS}")

    def to_patch(self) -> TransactionPatch:
        # Unparsable amounts persist as 0 instead of rejecting the commit.
        return TransactionPatch(
            description=self.description,
            amount=normalize_amount(self.amount),
            kind=self.kind,
            date=self.date,
        )


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Editing:
    record_id: RecordId
    draft: Draft


EditState = Union[Idle, Editing]

IDLE = Idle()


class EditSession:
    """At most one edit in progress; starting another discards the old draft."""

    def __init__(self, gateway: RemoteLedgerGateway, store: LedgerStore):
        self.gateway = gateway
        self.store = store
        self.state: EditState = IDLE

    @property
    def is_editing(self) -> bool:
        return isinstance(self.state, Editing)

    def editing_id(self) -> RecordId | None:
        return self.state.record_id if isinstance(self.state, Editing) else None

    def start(self, record_id: RecordId) -> Draft:
        record = self.store.get(record_id)
        if isinstance(self.state, Editing) and self.state.record_id != record_id:
            logger.info(
                "Discarding draft for a new edit",
                extra={"discarded_id": self.state.record_id, "record_id": record_id},
            )
        draft = Draft.from_record(record)
        self.state = Editing(record_id, draft)
        return draft

    def cancel(self) -> None:
        self.state = IDLE

    def mutate_draft(self, field: str, value: Any) -> Draft:
        state = self._require_editing()
        draft = state.draft.with_field(field, value)
        self.state = Editing(state.record_id, draft)
        return draft

    async def commit(self, record_id: RecordId) -> bool:
        """Send the draft to the gateway and merge it into the store.

        Returns whether the record kept its canonical position. On gateway
        failure ``OperationFailed`` propagates and the draft is kept, so the
        commit can simply be retried.
        """

        state = self._require_editing()
        if state.record_id != record_id:
            raise InvalidEditState(
                f"Cannot commit {record_id!r}: the active edit is {state.record_id!r}"
            )
        patch = state.draft.to_patch()
        await self.gateway.update(record_id, patch)
        # The record may have been deleted while the update was pending.
        in_order = record_id in self.store and self.store.apply_update(record_id, patch)
        # Only return to Idle if no newer edit replaced this one while awaiting.
        if self.state is state:
            self.state = IDLE
        return in_order

    def _require_editing(self) -> Editing:
        if not isinstance(self.state, Editing):
            raise InvalidEditState("No edit in progress")
        return self.state
