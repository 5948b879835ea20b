"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_read_transaction,
    get_transaction,
)
from src.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore

LedgerStore = SQLiteLedgerStore

# Singleton instance
_ledger_store: SQLiteLedgerStore | None = None


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_read_transaction",
    # Store
    "SQLiteLedgerStore",
    "LedgerStore",
    "get_ledger_store",
]
