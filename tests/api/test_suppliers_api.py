"""API tests for supplier, delivery and quota endpoints."""

from datetime import date
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import (
    get_delete_delivery_use_case,
    get_fulfill_delivery_use_case,
    get_register_lot_use_case,
    get_register_supplier_use_case,
    get_reopen_invoice_use_case,
    get_schedule_delivery_use_case,
    get_supplier_quotas_use_case,
    get_supplier_use_case,
)
from src.api.main import app
from src.application.services import LotLockRegistry
from src.application.use_cases import (
    DeleteDeliveryUseCase,
    FulfillDeliveryUseCase,
    GetSupplierQuotasUseCase,
    GetSupplierUseCase,
    RegisterLotUseCase,
    RegisterSupplierUseCase,
    ReopenInvoiceUseCase,
    ScheduleDeliveryUseCase,
)
from src.core.services import QuotaAllocator

SUPPLIER_ID = "12345678000199"


@pytest.fixture
def supplier(make_supplier, make_delivery, make_lot):
    return make_supplier(
        SUPPLIER_ID,
        "Cooperativa Alfa",
        items=[("Arroz", 100, "kg-1", 6.0)],
        deliveries=[
            make_delivery(SUPPLIER_ID, date(2026, 2, 3), None, 0, invoice_number=None, delivery_id=1),
            make_delivery(
                SUPPLIER_ID,
                date(2026, 1, 10),
                "Arroz",
                30,
                lots=[make_lot("A-10", 20, lot_id=10)],
                delivery_id=2,
            ),
        ],
    )


@pytest.fixture
def mock_ledger_store(supplier):
    store = AsyncMock()
    store.get_supplier.side_effect = lambda supplier_id: supplier if supplier_id == SUPPLIER_ID else None
    store.list_suppliers.return_value = [supplier]
    store.create_supplier.side_effect = lambda s: s
    store.add_delivery.side_effect = lambda d: d.model_copy(update={"id": 3})
    store.replace_deliveries.side_effect = lambda supplier_id, remove, new: [
        d.model_copy(update={"id": 10 + i}) for i, d in enumerate(new)
    ]
    store.get_delivery.side_effect = lambda delivery_id: next(
        (d for d in supplier.deliveries if d.id == delivery_id), None
    )
    store.get_lot_by_barcode.return_value = None
    store.add_lot.side_effect = lambda lot: lot.model_copy(update={"id": 11})
    store.delete_deliveries.return_value = 1
    return store


@pytest.fixture
async def client(mock_ledger_store):
    overrides = {
        get_register_supplier_use_case: lambda: RegisterSupplierUseCase(ledger_store=mock_ledger_store),
        get_supplier_use_case: lambda: GetSupplierUseCase(ledger_store=mock_ledger_store),
        get_supplier_quotas_use_case: lambda: GetSupplierQuotasUseCase(
            ledger_store=mock_ledger_store, allocator=QuotaAllocator.monthly(2026, 1, 4)
        ),
        get_schedule_delivery_use_case: lambda: ScheduleDeliveryUseCase(ledger_store=mock_ledger_store),
        get_fulfill_delivery_use_case: lambda: FulfillDeliveryUseCase(ledger_store=mock_ledger_store),
        get_reopen_invoice_use_case: lambda: ReopenInvoiceUseCase(ledger_store=mock_ledger_store),
        get_delete_delivery_use_case: lambda: DeleteDeliveryUseCase(ledger_store=mock_ledger_store),
        get_register_lot_use_case: lambda: RegisterLotUseCase(
            ledger_store=mock_ledger_store, locks=LotLockRegistry(), tolerance=0.0
        ),
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)


class TestSupplierEndpoints:
    async def test_register(self, client, mock_ledger_store):
        mock_ledger_store.get_supplier.side_effect = None
        mock_ledger_store.get_supplier.return_value = None

        response = await client.post(
            "/api/suppliers",
            json={
                "id": "99",
                "name": "Sitio Beta",
                "contract_items": [{"name": "Ovos", "total_quantity": 30, "unit": "dz-1", "unit_price": 7}],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["contract_items"][0]["measure_unit"] == "Dz"
        assert data["contracted_value"] == 210

    async def test_register_missing_name_is_422(self, client):
        response = await client.post("/api/suppliers", json={"id": "99"})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_register_duplicate_is_400(self, client):
        response = await client.post("/api/suppliers", json={"id": SUPPLIER_ID, "name": "Again"})
        assert response.status_code == 400

    async def test_list(self, client):
        response = await client.get("/api/suppliers")
        assert response.status_code == 200
        assert response.json()["total"] == 1

    async def test_get_shows_pending_label(self, client):
        response = await client.get(f"/api/suppliers/{SUPPLIER_ID}")
        assert response.status_code == 200
        deliveries = response.json()["deliveries"]
        assert deliveries[0]["item_name"] == "AGENDAMENTO PENDENTE"
        assert deliveries[0]["pending"] is True
        assert deliveries[1]["allocated_quantity"] == 20

    async def test_get_unknown_is_404(self, client):
        response = await client.get("/api/suppliers/nope")
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "SUPPLIER_NOT_FOUND"
        assert data["hint"]

    async def test_quotas(self, client):
        response = await client.get(f"/api/suppliers/{SUPPLIER_ID}/quotas")
        assert response.status_code == 200
        [quota] = response.json()["quotas"]
        assert [p["label"] for p in quota["periods"]] == ["2026-01", "2026-02", "2026-03", "2026-04"]
        assert quota["periods"][0]["remaining"] == 0
        assert quota["periods"][1]["adjusted_target"] == 25


class TestDeliveryEndpoints:
    async def test_schedule(self, client):
        response = await client.post(
            f"/api/suppliers/{SUPPLIER_ID}/deliveries",
            json={"date": "2026-03-02", "time": "09:00"},
        )
        assert response.status_code == 201
        assert response.json()["pending"] is True

    async def test_schedule_without_date_is_422(self, client):
        response = await client.post(f"/api/suppliers/{SUPPLIER_ID}/deliveries", json={"time": "09:00"})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_schedule_bad_time_is_400(self, client):
        response = await client.post(
            f"/api/suppliers/{SUPPLIER_ID}/deliveries",
            json={"date": "2026-03-02", "time": "9h"},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_fulfill(self, client):
        response = await client.post(
            f"/api/suppliers/{SUPPLIER_ID}/fulfill",
            json={
                "slot_ids": [1],
                "invoice_number": "NF-55",
                "items": [{"name": "ARROZ", "quantity": 10}],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_value"] == 60
        assert data["deliveries"][0]["item_name"] == "Arroz"

    async def test_fulfill_item_not_under_contract(self, client):
        response = await client.post(
            f"/api/suppliers/{SUPPLIER_ID}/fulfill",
            json={"slot_ids": [1], "invoice_number": "NF-55", "items": [{"name": "Milho", "quantity": 1}]},
        )
        assert response.status_code == 400

    async def test_reopen_unknown_invoice_is_404(self, client):
        response = await client.post(f"/api/suppliers/{SUPPLIER_ID}/invoices/NF-404/reopen")
        assert response.status_code == 404
        assert response.json()["error_code"] == "INVOICE_NOT_FOUND"

    async def test_register_lot(self, client):
        response = await client.post(
            "/api/deliveries/2/lots", json={"lot_code": "A-11", "initial_quantity": 10}
        )
        assert response.status_code == 201
        assert response.json()["barcode"] == "A-11"

    async def test_register_lot_over_allocation_is_409(self, client, mock_ledger_store):
        response = await client.post(
            "/api/deliveries/2/lots", json={"lot_code": "A-11", "initial_quantity": 11}
        )
        assert response.status_code == 409
        data = response.json()
        assert data["error_code"] == "OVER_ALLOCATION"
        assert '"allocated": 20.0' in data["detail"]
        mock_ledger_store.add_lot.assert_not_awaited()

    async def test_delete(self, client):
        response = await client.delete("/api/deliveries/2")
        assert response.status_code == 200
        assert response.json() == {"delivery_id": 2, "removed": True}
