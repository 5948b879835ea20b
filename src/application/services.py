"""
Service factory functions for dependency injection.

This module wires settings into the core services. Use cases should import
from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.config import get_logger, get_settings
from src.core.services import (
    BalanceAggregator,
    FifoResolver,
    NameMatcher,
    QuotaAllocator,
)

logger = get_logger(__name__)


class LotLockRegistry:
    """
    One asyncio.Lock per key (lot barcode, delivery id or supplier).

    Serializes read-validate-write sequences on the same lot while letting
    different lots proceed concurrently. A key's lock is dropped once no
    task holds or waits on it, so the registry only tracks keys in use.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self.lock_for(key)
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                if not lock.locked() and self._locks.get(key) is lock:
                    del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


# Singleton service instances
_name_matcher: NameMatcher | None = None
_quota_allocator: QuotaAllocator | None = None
_fifo_resolver: FifoResolver | None = None
_balance_aggregator: BalanceAggregator | None = None
_lot_locks: LotLockRegistry | None = None


def get_name_matcher() -> NameMatcher:
    """Matcher configured from LEDGER_SUBSTRING_MATCHING."""
    global _name_matcher
    if _name_matcher is None:
        _name_matcher = NameMatcher(allow_substring=get_settings().ledger.substring_matching)
    return _name_matcher


def get_quota_allocator() -> QuotaAllocator:
    """Allocator over the configured monthly period plan."""
    global _quota_allocator
    if _quota_allocator is None:
        ledger = get_settings().ledger
        _quota_allocator = QuotaAllocator.monthly(
            ledger.quota_start_year,
            ledger.quota_start_month,
            ledger.quota_periods,
        )
        logger.debug(
            "quota_allocator_created",
            start=f"{ledger.quota_start_year:04d}-{ledger.quota_start_month:02d}",
            periods=ledger.quota_periods,
        )
    return _quota_allocator


def get_fifo_resolver() -> FifoResolver:
    global _fifo_resolver
    if _fifo_resolver is None:
        _fifo_resolver = FifoResolver(get_name_matcher())
    return _fifo_resolver


def get_balance_aggregator() -> BalanceAggregator:
    global _balance_aggregator
    if _balance_aggregator is None:
        _balance_aggregator = BalanceAggregator(get_name_matcher())
    return _balance_aggregator


def get_lot_locks() -> LotLockRegistry:
    """Process-wide lock registry shared by every use case."""
    global _lot_locks
    if _lot_locks is None:
        _lot_locks = LotLockRegistry()
    return _lot_locks


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _name_matcher
    global _quota_allocator
    global _fifo_resolver
    global _balance_aggregator
    global _lot_locks

    _name_matcher = None
    _quota_allocator = None
    _fifo_resolver = None
    _balance_aggregator = None
    _lot_locks = None


__all__ = [
    "LotLockRegistry",
    # Factory functions
    "get_name_matcher",
    "get_quota_allocator",
    "get_fifo_resolver",
    "get_balance_aggregator",
    "get_lot_locks",
    # Reset
    "reset_services",
]
