"""
Routers package for Reports module

Exports the report router instances for easy importing.
"""

from .sales import router as sales_router

__all__ = [
    "sales_router"
]
