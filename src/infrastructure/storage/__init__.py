"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteLedgerStore,
    close_pool,
    get_connection,
    get_ledger_store,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite store
    "SQLiteLedgerStore",
    "get_ledger_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
