"""API v1 Router."""
from fastapi import APIRouter

from smartshop.api.v1 import products, sales, reports, backup, scan, dashboard

api_router = APIRouter(prefix="/api/v1")

# Include all route modules
api_router.include_router(products.router)
api_router.include_router(sales.router)
api_router.include_router(reports.router)
api_router.include_router(backup.router)
api_router.include_router(scan.router)
api_router.include_router(dashboard.router)

__all__ = ["api_router"]
