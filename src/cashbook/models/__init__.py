"""SQLModel table exports."""

from .transaction import LedgerRow

__all__ = ["LedgerRow"]
