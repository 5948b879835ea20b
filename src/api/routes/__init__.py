"""API route modules."""

from src.api.routes.balances import router as balances_router
from src.api.routes.deliveries import router as deliveries_router
from src.api.routes.health import router as health_router
from src.api.routes.suppliers import router as suppliers_router
from src.api.routes.warehouse import router as warehouse_router

__all__ = [
    "health_router",
    "suppliers_router",
    "deliveries_router",
    "warehouse_router",
    "balances_router",
]
