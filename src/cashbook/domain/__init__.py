"""Domain value types and protocol definitions."""

from .collaborators import EntitlementProvider, SessionProvider
from .gateway import RemoteLedgerGateway
from .records import (
    NewTransaction,
    RecordId,
    TransactionKind,
    TransactionPatch,
    TransactionRecord,
    as_calendar_date,
    normalize_amount,
    sort_canonical,
)

__all__ = [
    "EntitlementProvider",
    "NewTransaction",
    "RecordId",
    "RemoteLedgerGateway",
    "SessionProvider",
    "TransactionKind",
    "TransactionPatch",
    "TransactionRecord",
    "as_calendar_date",
    "normalize_amount",
    "sort_canonical",
]
