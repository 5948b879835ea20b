"""Entity to response DTO conversions shared by several use cases."""

from src.application.dto.responses import (
    ContractItemResponse,
    DeliveryResponse,
    FifoAdvisoryResponse,
    LotReferenceResponse,
    LotResponse,
    MovementResponse,
    SupplierResponse,
)
from src.config import get_settings
from src.core.entities import (
    ContractItem,
    Delivery,
    FifoAdvisory,
    Lot,
    LotReference,
    Supplier,
    WarehouseMovement,
)


def contract_item_to_response(item: ContractItem) -> ContractItemResponse:
    return ContractItemResponse(
        name=item.name,
        total_quantity=item.total_quantity,
        unit=item.unit,
        measure_unit=item.unit_descriptor.measure_label,
        unit_price=item.unit_price,
        total_value=item.total_value,
        position=item.position,
        category=item.category,
        siafem_code=item.siafem_code,
        compras_code=item.compras_code,
    )


def lot_to_response(lot: Lot) -> LotResponse:
    return LotResponse(
        id=lot.id,  # type: ignore[arg-type]
        delivery_id=lot.delivery_id,  # type: ignore[arg-type]
        lot_code=lot.lot_code,
        barcode=lot.barcode,
        initial_quantity=lot.initial_quantity,
        remaining_quantity=lot.remaining,
        expiration_date=lot.expiration_date,
        created_at=lot.created_at,
    )


def delivery_to_response(delivery: Delivery) -> DeliveryResponse:
    """Reserved slots are labelled with the pending sentinel."""
    pending_label = get_settings().ledger.pending_item_label
    return DeliveryResponse(
        id=delivery.id,  # type: ignore[arg-type]
        supplier_id=delivery.supplier_id,
        date=delivery.date,
        time=delivery.time,
        item_name=delivery.item_name or pending_label,
        pending=delivery.is_pending,
        quantity=delivery.quantity,
        value=delivery.value,
        invoice_number=delivery.invoice_number,
        invoice_uploaded=delivery.invoice_uploaded,
        remaining_quantity=delivery.current_remaining,
        allocated_quantity=delivery.allocated_quantity,
        lots=[lot_to_response(lot) for lot in delivery.lots],
    )


def supplier_to_response(supplier: Supplier) -> SupplierResponse:
    return SupplierResponse(
        id=supplier.id,
        name=supplier.name,
        allowed_weeks=supplier.allowed_weeks,
        contract_items=[
            contract_item_to_response(item)
            for item in sorted(supplier.contract_items, key=lambda i: i.position)
        ],
        deliveries=[delivery_to_response(d) for d in supplier.deliveries],
        contracted_value=supplier.contracted_value,
        delivered_value=supplier.delivered_value,
        created_at=supplier.created_at,
    )


def movement_to_response(movement: WarehouseMovement) -> MovementResponse:
    return MovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        movement_type=movement.movement_type.value,
        timestamp=movement.timestamp,
        movement_date=movement.movement_date,
        lot_id=movement.lot_id,
        lot_code=movement.lot_code,
        barcode=movement.barcode,
        item_name=movement.item_name,
        supplier_id=movement.supplier_id,
        supplier_name=movement.supplier_name,
        delivery_id=movement.delivery_id,
        inbound_invoice=movement.inbound_invoice,
        outbound_reference=movement.outbound_reference,
        quantity=movement.quantity,
        expiration_date=movement.expiration_date,
    )


def lot_reference_to_response(ref: LotReference) -> LotReferenceResponse:
    return LotReferenceResponse(**ref.model_dump())


def advisory_to_response(advisory: FifoAdvisory) -> FifoAdvisoryResponse:
    return FifoAdvisoryResponse(
        item_name=advisory.item_name,
        message=advisory.message,
        requested=lot_reference_to_response(advisory.requested),
        oldest=lot_reference_to_response(advisory.oldest),
    )
