"""Exceptions raised by the ledger engine and its collaborators."""

from __future__ import annotations


class OperationFailed(Exception):
    """A gateway call was rejected; carries a human-readable message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EntitlementRequired(OperationFailed):
    """Raised when a mutating command runs without an active subscription."""


class InvalidEditState(RuntimeError):
    """Raised when an edit operation is invoked from the wrong state."""


class RecordNotFound(KeyError):
    """Raised when a record id is not present in the ledger store."""

    def __str__(self) -> str:
        return f"No transaction with id {self.args[0]!r}" if self.args else "Record not found"
