from .admin_orders import router as admin_orders_router
from .estimate import router as estimate_router
from .handshake import router as handshake_router
from .orders import router as orders_router

__all__ = [
    "admin_orders_router",
    "estimate_router",
    "handshake_router",
    "orders_router",
]
