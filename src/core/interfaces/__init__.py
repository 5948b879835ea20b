"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.ledger_store import ILedgerStore

__all__ = [
    "ILedgerStore",
]
