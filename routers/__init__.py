# routers/__init__.py
from .leases import router as leases_router
from .payments import router as payments_router

__all__ = [
     "leases_router",
     "payments_router",
]
