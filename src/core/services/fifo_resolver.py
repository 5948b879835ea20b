"""
FIFO (PEPS) resolver.

Finds the globally oldest lot of an item, across every supplier, and flags
withdrawals that bypass it. Age is the originating delivery date; lots
sharing a date are ordered by supplier, delivery and lot insertion order.

The check is advisory only: a withdrawal from a younger lot is never
blocked, it needs an acknowledged override.
"""

from collections.abc import Iterable

from src.config import get_logger
from src.core.entities.delivery import Delivery, Lot
from src.core.entities.ledger import FifoAdvisory, LotReference
from src.core.entities.supplier import Supplier
from src.core.services.name_normalizer import NameMatcher

logger = get_logger(__name__)


def lot_reference(supplier: Supplier, delivery: Delivery, lot: Lot) -> LotReference:
    """Build a by-value reference to a lot."""
    return LotReference(
        lot_id=lot.id,  # type: ignore[arg-type]
        lot_code=lot.lot_code,
        barcode=lot.barcode,
        delivery_id=delivery.id,  # type: ignore[arg-type]
        delivery_date=delivery.date,
        supplier_id=supplier.id,
        supplier_name=supplier.name,
        item_name=delivery.item_name or "",
        remaining_quantity=lot.remaining,
        expiration_date=lot.expiration_date,
    )


class FifoResolver:
    """Oldest-stock-first lookup over a snapshot of suppliers."""

    def __init__(self, matcher: NameMatcher | None = None) -> None:
        self._matcher = matcher or NameMatcher()

    def candidates(self, suppliers: Iterable[Supplier], item_name: str) -> list[LotReference]:
        """Every lot of the item still holding stock, oldest first."""
        key = self._matcher.key(item_name)
        ranked: list[tuple[tuple, LotReference]] = []

        for s_idx, supplier in enumerate(suppliers):
            for d_idx, delivery in enumerate(supplier.deliveries):
                if delivery.is_pending or not self._matcher.matches_key(key, delivery.item_name):
                    continue
                for l_idx, lot in enumerate(delivery.lots):
                    if lot.is_exhausted:
                        continue
                    order = (delivery.date, s_idx, d_idx, l_idx)
                    ranked.append((order, lot_reference(supplier, delivery, lot)))

        ranked.sort(key=lambda pair: pair[0])
        return [ref for _, ref in ranked]

    def oldest_lot(self, suppliers: Iterable[Supplier], item_name: str) -> LotReference | None:
        """The lot that should leave first, or None when the item is exhausted everywhere."""
        candidates = self.candidates(suppliers, item_name)
        return candidates[0] if candidates else None

    def check_withdrawal(
        self,
        suppliers: Iterable[Supplier],
        requested: LotReference,
    ) -> FifoAdvisory | None:
        """
        Advisory when the requested lot is not the one that should leave first.

        Lots sharing a delivery date are not interchangeable: the tie-break
        order picks a single oldest lot and every other lot needs an override.
        """
        oldest = self.oldest_lot(suppliers, requested.item_name)
        if oldest is None or oldest.lot_id == requested.lot_id:
            return None

        logger.info(
            "fifo_advisory_raised",
            item=requested.item_name,
            requested_barcode=requested.barcode,
            oldest_barcode=oldest.barcode,
            oldest_date=oldest.delivery_date.isoformat(),
        )
        return FifoAdvisory(item_name=requested.item_name, requested=requested, oldest=oldest)
