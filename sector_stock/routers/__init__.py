"""
Routers for Sector Stock
"""

from .auth import router as auth_router
from .inventory import router as inventory_router
from .admin import router as admin_router

__all__ = ["auth_router", "inventory_router", "admin_router"]
