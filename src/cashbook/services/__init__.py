"""Service module exports."""

from . import (
    edit_session,
    export_csv,
    formatting,
    ledger_engine,
    ledger_service,
    ledger_store,
    reports,
    selection,
)

__all__ = [
    "edit_session",
    "export_csv",
    "formatting",
    "ledger_engine",
    "ledger_service",
    "ledger_store",
    "reports",
    "selection",
]
