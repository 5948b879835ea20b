"""Pytest configuration and shared fixtures."""

import itertools
from datetime import date

import pytest

from src.application.services import reset_services
from src.config import reset_settings
from src.core.entities import ContractItem, Delivery, Lot, Supplier

_ids = itertools.count(1000)


def _make_lot(
    lot_code: str,
    initial_quantity: float,
    remaining_quantity: float | None = None,
    lot_id: int | None = None,
    barcode: str = "",
    expiration_date: date | None = None,
) -> Lot:
    return Lot(
        id=lot_id or next(_ids),
        lot_code=lot_code,
        barcode=barcode,
        initial_quantity=initial_quantity,
        remaining_quantity=remaining_quantity,
        expiration_date=expiration_date,
    )


def _make_delivery(
    supplier_id: str,
    day: date,
    item_name: str | None,
    quantity: float,
    lots: tuple[Lot, ...] | list[Lot] = (),
    invoice_number: str | None = "NF-1",
    value: float = 0.0,
    delivery_id: int | None = None,
) -> Delivery:
    delivery_id = delivery_id or next(_ids)
    delivery = Delivery(
        id=delivery_id,
        supplier_id=supplier_id,
        date=day,
        item_name=item_name,
        quantity=quantity,
        value=value,
        invoice_number=invoice_number,
    )
    for lot in lots:
        lot.delivery_id = delivery_id
        delivery.lots.append(lot)
    delivery.recompute_remaining()
    return delivery


def _make_supplier(
    supplier_id: str,
    name: str,
    items: tuple | list = (),
    deliveries: tuple | list = (),
) -> Supplier:
    """items are (name, total_quantity, unit, unit_price) tuples."""
    return Supplier(
        id=supplier_id,
        name=name,
        contract_items=[
            ContractItem(
                name=item_name,
                total_quantity=total,
                unit=unit,
                unit_price=price,
                position=position,
            )
            for position, (item_name, total, unit, price) in enumerate(items)
        ],
        deliveries=list(deliveries),
    )


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Fresh settings and service singletons per test, data dir under tmp."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def make_lot():
    return _make_lot


@pytest.fixture
def make_delivery():
    return _make_delivery


@pytest.fixture
def make_supplier():
    return _make_supplier


@pytest.fixture
def arroz_suppliers() -> list[Supplier]:
    """
    Three suppliers holding rice delivered on 2026-01-10, 01-05 and 01-15.

    Listed in registration order; the oldest stock belongs to the second.
    """
    alfa = _make_supplier(
        "11111111000111",
        "Cooperativa Alfa",
        items=[("ARROZ", 100, "kg-1", 6.0)],
        deliveries=[
            _make_delivery(
                "11111111000111",
                date(2026, 1, 10),
                "ARROZ",
                20,
                lots=[_make_lot("A-10", 20, lot_id=10)],
                delivery_id=110,
            )
        ],
    )
    beta = _make_supplier(
        "22222222000122",
        "Sitio Beta",
        items=[("Arroz", 50, "kg-1", 5.5)],
        deliveries=[
            _make_delivery(
                "22222222000122",
                date(2026, 1, 5),
                "Arroz",
                15,
                lots=[_make_lot("B-05", 15, lot_id=5)],
                delivery_id=105,
            )
        ],
    )
    gama = _make_supplier(
        "33333333000133",
        "Fazenda Gama",
        items=[("ARROZ TIPO 1", 80, "kg-1", 6.5)],
        deliveries=[
            _make_delivery(
                "33333333000133",
                date(2026, 1, 15),
                "ARROZ TIPO 1",
                30,
                lots=[_make_lot("C-15", 30, lot_id=15)],
                delivery_id=115,
            )
        ],
    )
    return [alfa, beta, gama]
