"""Concrete gateway implementations."""

from .sqlmodel_gateway import SQLModelLedgerGateway

__all__ = ["SQLModelLedgerGateway"]
