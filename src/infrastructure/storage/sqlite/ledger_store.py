"""SQLite implementation of ledger storage."""

import json
from datetime import UTC, date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.delivery import Delivery, Lot
from src.core.entities.ledger import LedgerSnapshot
from src.core.entities.movement import MovementType, WarehouseMovement
from src.core.entities.supplier import ContractItem, Supplier
from src.core.exceptions import (
    DatabaseError,
    DeliveryNotFoundError,
    DuplicateBarcodeError,
    InsufficientStockError,
    LotNotFoundError,
    ValidationError,
)
from src.core.interfaces.ledger_store import ILedgerStore
from src.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_read_transaction,
    get_transaction,
)

logger = get_logger(__name__)


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def _parse_datetime(value: str | None) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return datetime.now(UTC)


class SQLiteLedgerStore(ILedgerStore):
    """SQLite storage for suppliers, deliveries, lots and the movement ledger."""

    # Suppliers

    async def create_supplier(self, supplier: Supplier) -> Supplier:
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    "INSERT INTO suppliers (id, name, allowed_weeks, created_at) VALUES (?, ?, ?, ?)",
                    (
                        supplier.id,
                        supplier.name,
                        json.dumps(supplier.allowed_weeks),
                        supplier.created_at.isoformat(),
                    ),
                )
                for position, item in enumerate(supplier.contract_items):
                    item.position = position
                    await conn.execute(
                        """
                        INSERT INTO contract_items (
                            supplier_id, name, total_quantity, unit, unit_price,
                            position, category, siafem_code, compras_code
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            supplier.id,
                            item.name,
                            item.total_quantity,
                            item.unit,
                            item.unit_price,
                            item.position,
                            item.category,
                            item.siafem_code,
                            item.compras_code,
                        ),
                    )
        except aiosqlite.IntegrityError as e:
            if await self.get_supplier(supplier.id) is not None:
                raise ValidationError("id", "supplier already registered", supplier.id) from e
            raise DatabaseError("create_supplier", str(e)) from e

        logger.info(
            "supplier_created",
            supplier_id=supplier.id,
            items=len(supplier.contract_items),
        )
        return supplier

    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        async with get_read_transaction() as conn:
            suppliers = await self._load_suppliers(conn, supplier_id)
        return suppliers[0] if suppliers else None

    async def list_suppliers(self) -> list[Supplier]:
        async with get_read_transaction() as conn:
            return await self._load_suppliers(conn)

    # Deliveries

    async def add_delivery(self, delivery: Delivery) -> Delivery:
        async with get_transaction() as conn:
            await self._insert_delivery(conn, delivery)

        logger.info(
            "delivery_added",
            delivery_id=delivery.id,
            supplier_id=delivery.supplier_id,
            pending=delivery.is_pending,
        )
        return delivery

    async def get_delivery(self, delivery_id: int) -> Delivery | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM deliveries WHERE id = ?", (delivery_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            delivery = self._row_to_delivery(row)

            cursor = await conn.execute(
                "SELECT * FROM lots WHERE delivery_id = ? ORDER BY id", (delivery_id,)
            )
            delivery.lots = [self._row_to_lot(r) for r in await cursor.fetchall()]
            return delivery

    async def replace_deliveries(
        self,
        supplier_id: str,
        remove_ids: list[int],
        new_deliveries: list[Delivery],
    ) -> list[Delivery]:
        removed = 0
        async with get_transaction() as conn:
            # A slot already taken by a concurrent replace aborts the whole swap
            for delivery_id in dict.fromkeys(remove_ids):
                if await self._delete_deliveries(conn, [delivery_id], supplier_id) == 0:
                    raise DeliveryNotFoundError(delivery_id)
                removed += 1
            for delivery in new_deliveries:
                await self._insert_delivery(conn, delivery)

        logger.info(
            "deliveries_replaced",
            supplier_id=supplier_id,
            removed=removed,
            added=len(new_deliveries),
        )
        return new_deliveries

    async def delete_deliveries(self, delivery_ids: list[int]) -> int:
        async with get_transaction() as conn:
            removed = await self._delete_deliveries(conn, delivery_ids)

        logger.info("deliveries_deleted", delivery_ids=delivery_ids, removed=removed)
        return removed

    # Lots

    async def add_lot(self, lot: Lot) -> Lot:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO lots (
                        delivery_id, lot_code, barcode, initial_quantity,
                        remaining_quantity, expiration_date, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        lot.delivery_id,
                        lot.lot_code,
                        lot.barcode,
                        lot.initial_quantity,
                        lot.remaining,
                        lot.expiration_date.isoformat() if lot.expiration_date else None,
                        lot.created_at.isoformat(),
                    ),
                )
                lot.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            existing = await self.get_lot_by_barcode(lot.barcode)
            if existing is not None:
                raise DuplicateBarcodeError(lot.barcode, existing.id) from e
            raise DatabaseError("add_lot", str(e)) from e

        logger.info(
            "lot_stored",
            lot_id=lot.id,
            delivery_id=lot.delivery_id,
            barcode=lot.barcode,
            qty=lot.initial_quantity,
        )
        return lot

    async def get_lot_by_barcode(self, barcode: str) -> Lot | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM lots WHERE barcode = ?", (barcode,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_lot(row)

    # Movement ledger

    async def append_movement(self, movement: WarehouseMovement) -> WarehouseMovement:
        async with get_transaction() as conn:
            movement = await self._insert_movement(conn, movement)

        logger.info(
            "movement_appended",
            movement_id=movement.id,
            type=movement.movement_type.value,
            barcode=movement.barcode,
            qty=movement.quantity,
        )
        return movement

    async def apply_withdrawal(
        self,
        lot_id: int,
        quantity: float,
        movement: WarehouseMovement,
    ) -> tuple[Lot, Delivery, WarehouseMovement]:
        async with get_transaction() as conn:
            # Guarded decrement: matches no row when the lot cannot cover the quantity
            cursor = await conn.execute(
                """
                UPDATE lots
                SET remaining_quantity = MAX(0, remaining_quantity - ?)
                WHERE id = ? AND remaining_quantity >= ?
                """,
                (quantity, lot_id, quantity),
            )
            if cursor.rowcount == 0:
                cursor = await conn.execute(
                    "SELECT remaining_quantity FROM lots WHERE id = ?", (lot_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise LotNotFoundError(movement.barcode)
                raise InsufficientStockError(
                    movement.barcode,
                    movement.item_name,
                    quantity,
                    float(row["remaining_quantity"]),
                )

            cursor = await conn.execute("SELECT * FROM lots WHERE id = ?", (lot_id,))
            lot = self._row_to_lot(await cursor.fetchone())

            await conn.execute(
                """
                UPDATE deliveries
                SET remaining_quantity = quantity - (
                    SELECT COALESCE(SUM(initial_quantity - remaining_quantity), 0)
                    FROM lots WHERE delivery_id = ?
                )
                WHERE id = ?
                """,
                (lot.delivery_id, lot.delivery_id),
            )
            cursor = await conn.execute("SELECT * FROM deliveries WHERE id = ?", (lot.delivery_id,))
            delivery = self._row_to_delivery(await cursor.fetchone())

            movement = await self._insert_movement(conn, movement)

        logger.info(
            "withdrawal_applied",
            lot_id=lot_id,
            qty=quantity,
            lot_remaining=lot.remaining,
            delivery_remaining=delivery.remaining_quantity,
        )
        return lot, delivery, movement

    async def list_movements(
        self,
        movement_type: MovementType | None = None,
        lot_id: int | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[WarehouseMovement]:
        clauses = []
        params: list = []
        if movement_type is not None:
            clauses.append("movement_type = ?")
            params.append(movement_type.value)
        if lot_id is not None:
            clauses.append("lot_id = ?")
            params.append(lot_id)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.extend([limit if limit is not None else -1, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM warehouse_movements
                {where}
                ORDER BY timestamp DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    # Read model

    async def snapshot(self) -> LedgerSnapshot:
        async with get_read_transaction() as conn:
            suppliers = await self._load_suppliers(conn)
            cursor = await conn.execute("SELECT * FROM warehouse_movements ORDER BY id")
            movements = [self._row_to_movement(row) for row in await cursor.fetchall()]

        return LedgerSnapshot(suppliers=suppliers, movements=movements)

    # Helpers

    async def _insert_delivery(self, conn: aiosqlite.Connection, delivery: Delivery) -> None:
        cursor = await conn.execute(
            """
            INSERT INTO deliveries (
                supplier_id, date, time, item_name, quantity, value,
                invoice_number, invoice_uploaded, remaining_quantity, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                delivery.supplier_id,
                delivery.date.isoformat(),
                delivery.time,
                delivery.item_name,
                delivery.quantity,
                delivery.value,
                delivery.invoice_number,
                int(delivery.invoice_uploaded),
                delivery.remaining_quantity,
                delivery.created_at.isoformat(),
            ),
        )
        delivery.id = cursor.lastrowid

    async def _delete_deliveries(
        self,
        conn: aiosqlite.Connection,
        delivery_ids: list[int],
        supplier_id: str | None = None,
    ) -> int:
        if not delivery_ids:
            return 0
        placeholders = ", ".join("?" for _ in delivery_ids)
        sql = f"DELETE FROM deliveries WHERE id IN ({placeholders})"
        params: list = list(delivery_ids)
        if supplier_id is not None:
            sql += " AND supplier_id = ?"
            params.append(supplier_id)
        cursor = await conn.execute(sql, params)
        return cursor.rowcount

    async def _insert_movement(
        self,
        conn: aiosqlite.Connection,
        movement: WarehouseMovement,
    ) -> WarehouseMovement:
        cursor = await conn.execute(
            """
            INSERT INTO warehouse_movements (
                movement_type, timestamp, movement_date, lot_id, lot_code, barcode,
                item_name, supplier_id, supplier_name, delivery_id,
                inbound_invoice, outbound_reference, quantity, expiration_date
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.movement_type.value,
                movement.timestamp.isoformat(),
                movement.movement_date.isoformat(),
                movement.lot_id,
                movement.lot_code,
                movement.barcode,
                movement.item_name,
                movement.supplier_id,
                movement.supplier_name,
                movement.delivery_id,
                movement.inbound_invoice,
                movement.outbound_reference,
                movement.quantity,
                movement.expiration_date.isoformat() if movement.expiration_date else None,
            ),
        )
        return movement.model_copy(update={"id": cursor.lastrowid})

    async def _load_suppliers(
        self,
        conn: aiosqlite.Connection,
        supplier_id: str | None = None,
    ) -> list[Supplier]:
        """Load suppliers with items, deliveries and lots in insertion order."""
        where = "WHERE supplier_id = ?" if supplier_id else ""
        params = (supplier_id,) if supplier_id else ()

        cursor = await conn.execute(
            f"SELECT * FROM suppliers {'WHERE id = ?' if supplier_id else ''} ORDER BY rowid",
            params,
        )
        suppliers = {row["id"]: self._row_to_supplier(row) for row in await cursor.fetchall()}
        if not suppliers:
            return []

        cursor = await conn.execute(
            f"SELECT * FROM contract_items {where} ORDER BY supplier_id, position, id",
            params,
        )
        for row in await cursor.fetchall():
            suppliers[row["supplier_id"]].contract_items.append(self._row_to_contract_item(row))

        cursor = await conn.execute(f"SELECT * FROM deliveries {where} ORDER BY id", params)
        deliveries: dict[int, Delivery] = {}
        for row in await cursor.fetchall():
            delivery = self._row_to_delivery(row)
            deliveries[delivery.id] = delivery  # type: ignore[index]
            suppliers[delivery.supplier_id].deliveries.append(delivery)

        if deliveries:
            if supplier_id:
                cursor = await conn.execute(
                    """
                    SELECT lots.* FROM lots
                    JOIN deliveries ON deliveries.id = lots.delivery_id
                    WHERE deliveries.supplier_id = ?
                    ORDER BY lots.id
                    """,
                    params,
                )
            else:
                cursor = await conn.execute("SELECT * FROM lots ORDER BY id")
            for row in await cursor.fetchall():
                lot = self._row_to_lot(row)
                deliveries[lot.delivery_id].lots.append(lot)  # type: ignore[index]

        return list(suppliers.values())

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            name=row["name"],
            allowed_weeks=json.loads(row["allowed_weeks"] or "[]"),
            created_at=_parse_datetime(row["created_at"]),
        )

    @staticmethod
    def _row_to_contract_item(row: aiosqlite.Row) -> ContractItem:
        return ContractItem(
            name=row["name"],
            total_quantity=float(row["total_quantity"]),
            unit=row["unit"],
            unit_price=float(row["unit_price"]),
            position=row["position"],
            category=row["category"],
            siafem_code=row["siafem_code"],
            compras_code=row["compras_code"],
        )

    @staticmethod
    def _row_to_delivery(row: aiosqlite.Row) -> Delivery:
        remaining = row["remaining_quantity"]
        return Delivery(
            id=row["id"],
            supplier_id=row["supplier_id"],
            date=date.fromisoformat(row["date"]),
            time=row["time"],
            item_name=row["item_name"],
            quantity=float(row["quantity"]),
            value=float(row["value"]),
            invoice_number=row["invoice_number"],
            invoice_uploaded=bool(row["invoice_uploaded"]),
            remaining_quantity=float(remaining) if remaining is not None else None,
            created_at=_parse_datetime(row["created_at"]),
        )

    @staticmethod
    def _row_to_lot(row: aiosqlite.Row) -> Lot:
        return Lot(
            id=row["id"],
            delivery_id=row["delivery_id"],
            lot_code=row["lot_code"],
            barcode=row["barcode"],
            initial_quantity=float(row["initial_quantity"]),
            remaining_quantity=float(row["remaining_quantity"]),
            expiration_date=_parse_date(row["expiration_date"]),
            created_at=_parse_datetime(row["created_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> WarehouseMovement:
        return WarehouseMovement(
            id=row["id"],
            movement_type=MovementType(row["movement_type"]),
            timestamp=_parse_datetime(row["timestamp"]),
            movement_date=_parse_date(row["movement_date"]) or date.today(),
            lot_id=row["lot_id"],
            lot_code=row["lot_code"],
            barcode=row["barcode"],
            item_name=row["item_name"],
            supplier_id=row["supplier_id"],
            supplier_name=row["supplier_name"],
            delivery_id=row["delivery_id"],
            inbound_invoice=row["inbound_invoice"],
            outbound_reference=row["outbound_reference"],
            quantity=float(row["quantity"]),
            expiration_date=_parse_date(row["expiration_date"]),
        )
