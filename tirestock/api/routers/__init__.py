"""
tirestock/api/routers package marker.
"""

from tirestock.api.routers.products import router as products_router

__all__ = ["products_router"]
