"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.balance_aggregator import BalanceAggregator
from src.core.services.fifo_resolver import FifoResolver, lot_reference
from src.core.services.name_normalizer import (
    NameMatcher,
    keys_match,
    names_match,
    normalize_name,
)
from src.core.services.quota_allocator import QuotaAllocator, QuotaPeriod, monthly_periods

__all__ = [
    # Name Normalizer
    "NameMatcher",
    "normalize_name",
    "names_match",
    "keys_match",
    # Quota Allocator
    "QuotaAllocator",
    "QuotaPeriod",
    "monthly_periods",
    # FIFO Resolver
    "FifoResolver",
    "lot_reference",
    # Balance Aggregator
    "BalanceAggregator",
]
