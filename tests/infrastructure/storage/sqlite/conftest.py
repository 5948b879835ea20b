"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.core.entities import ContractItem, Delivery, Lot, Supplier
from src.infrastructure.storage.sqlite import SQLiteLedgerStore, close_pool
from src.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def ledger_db(temp_db_path: Path) -> Path:
    """Temporary database migrated to the latest schema."""
    await initialize_database(temp_db_path, create_backup_before=False)
    return temp_db_path


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 1
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def store(ledger_db: Path, mock_settings) -> AsyncGenerator[SQLiteLedgerStore, None]:
    """Ledger store bound to the migrated temp database."""
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield SQLiteLedgerStore()
        finally:
            await close_pool()


@pytest.fixture
def sample_supplier() -> Supplier:
    return Supplier(
        id="12345678000199",
        name="Cooperativa Alfa",
        allowed_weeks=[1, 3],
        contract_items=[
            ContractItem(name="Arroz", total_quantity=100, unit="kg-1", unit_price=6.0),
            ContractItem(name="Leite", total_quantity=40, unit="caixa-12", unit_price=48.0),
        ],
    )


@pytest.fixture
async def fulfilled_delivery(store: SQLiteLedgerStore, sample_supplier: Supplier) -> Delivery:
    """Supplier stored with one fulfilled rice delivery of 30 kg."""
    await store.create_supplier(sample_supplier)
    return await store.add_delivery(
        Delivery(
            supplier_id=sample_supplier.id,
            date=date(2026, 1, 10),
            item_name="Arroz",
            quantity=30,
            value=180,
            invoice_number="NF-1",
            remaining_quantity=30,
        )
    )


@pytest.fixture
async def stored_lot(store: SQLiteLedgerStore, fulfilled_delivery: Delivery) -> Lot:
    return await store.add_lot(
        Lot(
            delivery_id=fulfilled_delivery.id,
            lot_code="A-10",
            initial_quantity=20,
            expiration_date=date(2026, 7, 1),
        )
    )
