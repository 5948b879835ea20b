"""Abstract interface for ledger storage."""

from abc import ABC, abstractmethod

from src.core.entities.delivery import Delivery, Lot
from src.core.entities.ledger import LedgerSnapshot
from src.core.entities.movement import MovementType, WarehouseMovement
from src.core.entities.supplier import Supplier


class ILedgerStore(ABC):
    """
    Interface for suppliers, deliveries, lots and the movement ledger.

    Movements are insert-only: there is no update or delete for them.
    """

    # Suppliers

    @abstractmethod
    async def create_supplier(self, supplier: Supplier) -> Supplier:
        """Create a supplier together with its contract items.

        Raises ValidationError when the id is already registered.
        """
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        """Get a supplier with contract items, deliveries and lots."""
        pass

    @abstractmethod
    async def list_suppliers(self) -> list[Supplier]:
        """List every supplier, fully loaded, in registration order."""
        pass

    # Deliveries

    @abstractmethod
    async def add_delivery(self, delivery: Delivery) -> Delivery:
        """Append a delivery (reserved slot or fulfilled)."""
        pass

    @abstractmethod
    async def get_delivery(self, delivery_id: int) -> Delivery | None:
        """Get a delivery with its lots."""
        pass

    @abstractmethod
    async def replace_deliveries(
        self,
        supplier_id: str,
        remove_ids: list[int],
        new_deliveries: list[Delivery],
    ) -> list[Delivery]:
        """
        Atomically drop some deliveries of a supplier and append new ones.

        Raises DeliveryNotFoundError, with nothing written, when any id is no
        longer a delivery of that supplier.
        """
        pass

    @abstractmethod
    async def delete_deliveries(self, delivery_ids: list[int]) -> int:
        """Delete deliveries and their lots. Returns the number removed."""
        pass

    # Lots

    @abstractmethod
    async def add_lot(self, lot: Lot) -> Lot:
        """Append a lot to its delivery."""
        pass

    @abstractmethod
    async def get_lot_by_barcode(self, barcode: str) -> Lot | None:
        """Resolve a scanned barcode to its lot."""
        pass

    # Movement ledger

    @abstractmethod
    async def append_movement(self, movement: WarehouseMovement) -> WarehouseMovement:
        """Append an immutable movement record."""
        pass

    @abstractmethod
    async def apply_withdrawal(
        self,
        lot_id: int,
        quantity: float,
        movement: WarehouseMovement,
    ) -> tuple[Lot, Delivery, WarehouseMovement]:
        """
        Decrement a lot, recompute its delivery and append the exit movement.

        All three effects happen in one transaction or not at all. Raises
        InsufficientStockError when the lot no longer holds ``quantity``.
        """
        pass

    @abstractmethod
    async def list_movements(
        self,
        movement_type: MovementType | None = None,
        lot_id: int | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[WarehouseMovement]:
        """List movements, newest first. A limit of None returns every match."""
        pass

    # Read model

    @abstractmethod
    async def snapshot(self) -> LedgerSnapshot:
        """Read every supplier and the whole ledger from a single connection."""
        pass
