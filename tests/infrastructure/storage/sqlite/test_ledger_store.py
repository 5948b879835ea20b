"""Tests for SQLiteLedgerStore."""

from datetime import date

import aiosqlite
import pytest

from src.core.entities import Delivery, Lot, MovementType, WarehouseMovement
from src.core.exceptions import (
    DeliveryNotFoundError,
    DuplicateBarcodeError,
    InsufficientStockError,
    LotNotFoundError,
    ValidationError,
)


def _movement(lot: Lot, kind: MovementType = MovementType.EXIT, quantity: float = 5) -> WarehouseMovement:
    return WarehouseMovement(
        movement_type=kind,
        lot_id=lot.id,
        lot_code=lot.lot_code,
        barcode=lot.barcode,
        item_name="Arroz",
        supplier_id="12345678000199",
        supplier_name="Cooperativa Alfa",
        delivery_id=lot.delivery_id,
        outbound_reference="REQ-1" if kind == MovementType.EXIT else None,
        inbound_invoice="NF-1",
        quantity=quantity,
    )


class TestSuppliers:
    async def test_create_and_get(self, store, sample_supplier):
        await store.create_supplier(sample_supplier)

        loaded = await store.get_supplier(sample_supplier.id)
        assert loaded.name == "Cooperativa Alfa"
        assert loaded.allowed_weeks == [1, 3]
        assert [i.name for i in loaded.contract_items] == ["Arroz", "Leite"]
        assert [i.position for i in loaded.contract_items] == [0, 1]
        assert loaded.contract_items[1].unit == "caixa-12"

    async def test_duplicate_id_rejected(self, store, sample_supplier):
        await store.create_supplier(sample_supplier)
        renamed = sample_supplier.model_copy(update={"name": "Outra Cooperativa"})

        with pytest.raises(ValidationError) as exc_info:
            await store.create_supplier(renamed)
        assert exc_info.value.code == "VALIDATION_ERROR"

        [loaded] = await store.list_suppliers()
        assert loaded.name == "Cooperativa Alfa"
        assert len(loaded.contract_items) == 2

    async def test_get_missing(self, store):
        assert await store.get_supplier("nope") is None

    async def test_list_in_registration_order(self, store, sample_supplier):
        second = sample_supplier.model_copy(update={"id": "2", "name": "Beta", "contract_items": []})
        await store.create_supplier(sample_supplier)
        await store.create_supplier(second)

        assert [s.id for s in await store.list_suppliers()] == [sample_supplier.id, "2"]


class TestDeliveries:
    async def test_add_and_get_with_lots(self, store, fulfilled_delivery, stored_lot):
        loaded = await store.get_delivery(fulfilled_delivery.id)
        assert loaded.item_name == "Arroz"
        assert loaded.invoice_number == "NF-1"
        assert [lot.barcode for lot in loaded.lots] == ["A-10"]

    async def test_reserved_slot_round_trips_as_pending(self, store, sample_supplier):
        await store.create_supplier(sample_supplier)
        slot = await store.add_delivery(Delivery(supplier_id=sample_supplier.id, date=date(2026, 2, 3)))

        loaded = await store.get_delivery(slot.id)
        assert loaded.is_pending
        assert loaded.item_name is None

    async def test_replace_is_scoped_to_supplier(self, store, fulfilled_delivery):
        with pytest.raises(DeliveryNotFoundError):
            await store.replace_deliveries("someone-else", [fulfilled_delivery.id], [])
        assert await store.get_delivery(fulfilled_delivery.id) is not None

    async def test_replace_swaps_deliveries(self, store, sample_supplier):
        await store.create_supplier(sample_supplier)
        slot = await store.add_delivery(Delivery(supplier_id=sample_supplier.id, date=date(2026, 2, 3)))

        [new] = await store.replace_deliveries(
            sample_supplier.id,
            [slot.id],
            [
                Delivery(
                    supplier_id=sample_supplier.id,
                    date=slot.date,
                    item_name="Arroz",
                    quantity=12,
                    invoice_number="NF-2",
                )
            ],
        )

        supplier = await store.get_supplier(sample_supplier.id)
        assert [d.id for d in supplier.deliveries] == [new.id]
        assert new.id != slot.id

    async def test_replace_with_taken_slot_writes_nothing(self, store, sample_supplier):
        await store.create_supplier(sample_supplier)
        slot = await store.add_delivery(Delivery(supplier_id=sample_supplier.id, date=date(2026, 2, 3)))
        other = await store.add_delivery(Delivery(supplier_id=sample_supplier.id, date=date(2026, 2, 10)))
        invoiced = Delivery(
            supplier_id=sample_supplier.id,
            date=slot.date,
            item_name="Arroz",
            quantity=20,
            invoice_number="NF-1",
        )
        await store.replace_deliveries(sample_supplier.id, [slot.id], [invoiced])

        with pytest.raises(DeliveryNotFoundError):
            await store.replace_deliveries(
                sample_supplier.id,
                [other.id, slot.id],
                [invoiced.model_copy(update={"id": None, "invoice_number": "NF-2"})],
            )

        supplier = await store.get_supplier(sample_supplier.id)
        assert other.id in {d.id for d in supplier.deliveries}
        assert [d.invoice_number for d in supplier.deliveries if not d.is_pending] == ["NF-1"]

    async def test_delete_cascades_to_lots(self, store, fulfilled_delivery, stored_lot):
        assert await store.delete_deliveries([fulfilled_delivery.id]) == 1
        assert await store.get_lot_by_barcode(stored_lot.barcode) is None


class TestLots:
    async def test_add_lot_defaults(self, store, stored_lot):
        assert stored_lot.id is not None
        loaded = await store.get_lot_by_barcode("A-10")
        assert loaded.remaining_quantity == 20
        assert loaded.expiration_date == date(2026, 7, 1)

    async def test_duplicate_barcode(self, store, fulfilled_delivery, stored_lot):
        with pytest.raises(DuplicateBarcodeError) as exc_info:
            await store.add_lot(
                Lot(delivery_id=fulfilled_delivery.id, lot_code="X", barcode="A-10", initial_quantity=1)
            )
        assert exc_info.value.details["existing_lot_id"] == stored_lot.id

    async def test_lots_loaded_with_supplier(self, store, sample_supplier, stored_lot):
        supplier = await store.get_supplier(sample_supplier.id)
        assert supplier.deliveries[0].lots[0].id == stored_lot.id


class TestWithdrawal:
    async def test_apply_withdrawal(self, store, fulfilled_delivery, stored_lot):
        lot, delivery, movement = await store.apply_withdrawal(
            stored_lot.id, 5, _movement(stored_lot)
        )

        assert lot.remaining_quantity == 15
        assert delivery.remaining_quantity == 25
        assert movement.id is not None
        [logged] = await store.list_movements()
        assert logged.outbound_reference == "REQ-1"

    async def test_insufficient_stock_changes_nothing(self, store, stored_lot):
        with pytest.raises(InsufficientStockError) as exc_info:
            await store.apply_withdrawal(stored_lot.id, 25, _movement(stored_lot, quantity=25))

        assert exc_info.value.details["available"] == 20
        assert (await store.get_lot_by_barcode("A-10")).remaining_quantity == 20
        assert await store.list_movements() == []

    async def test_exact_remaining_exhausts_lot(self, store, stored_lot):
        lot, _, _ = await store.apply_withdrawal(stored_lot.id, 20, _movement(stored_lot, quantity=20))
        assert lot.remaining_quantity == 0
        assert lot.is_exhausted

    async def test_missing_lot(self, store, stored_lot):
        with pytest.raises(LotNotFoundError):
            await store.apply_withdrawal(9999, 1, _movement(stored_lot, quantity=1))


class TestMovements:
    async def test_list_newest_first_and_filter(self, store, stored_lot):
        await store.append_movement(_movement(stored_lot, MovementType.ENTRY, 20))
        await store.apply_withdrawal(stored_lot.id, 2, _movement(stored_lot, quantity=2))

        movements = await store.list_movements()
        assert [m.movement_type for m in movements] == [MovementType.EXIT, MovementType.ENTRY]

        entries = await store.list_movements(movement_type=MovementType.ENTRY)
        assert [m.quantity for m in entries] == [20]
        assert await store.list_movements(lot_id=stored_lot.id, limit=1, offset=1) == entries

    async def test_unbounded_listing(self, store, stored_lot):
        for _ in range(3):
            await store.append_movement(_movement(stored_lot, MovementType.ENTRY, 1))
        assert len(await store.list_movements(limit=None)) == 3
        assert len(await store.list_movements(limit=2)) == 2

    async def test_movements_are_append_only(self, store, ledger_db, stored_lot):
        await store.append_movement(_movement(stored_lot, MovementType.ENTRY, 20))

        async with aiosqlite.connect(ledger_db) as conn:
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute("UPDATE warehouse_movements SET quantity = 0")
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute("DELETE FROM warehouse_movements")

    async def test_movements_survive_delivery_delete(self, store, fulfilled_delivery, stored_lot):
        await store.append_movement(_movement(stored_lot, MovementType.ENTRY, 20))
        await store.delete_deliveries([fulfilled_delivery.id])

        [movement] = await store.list_movements()
        assert movement.barcode == "A-10"
        assert movement.supplier_name == "Cooperativa Alfa"


class TestSnapshot:
    async def test_snapshot_contains_everything(self, store, sample_supplier, stored_lot):
        await store.append_movement(_movement(stored_lot, MovementType.ENTRY, 20))

        snapshot = await store.snapshot()
        assert [s.id for s in snapshot.suppliers] == [sample_supplier.id]
        assert snapshot.suppliers[0].deliveries[0].lots[0].barcode == "A-10"
        assert len(snapshot.movements) == 1
