"""
Dashboard API endpoints for summary statistics and sync status.
"""
from datetime import datetime
from fastapi import APIRouter, Depends

from smartshop.api.v1.deps import get_context
from smartshop.context import AppContext
from smartshop.reports import inventory_stats
from smartshop.schemas.dashboard import HealthCheck, InventoryStats, SyncStatus

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=InventoryStats)
async def get_stats(ctx: AppContext = Depends(get_context)):
    """
    Catalog overview.

    Product count, units in stock, purchase value of stock and data size.
    """
    products = await ctx.catalog.get_all()
    sales = await ctx.ledger.get_all()
    return inventory_stats(products, sales)


@router.get("/sync", response_model=SyncStatus)
async def get_sync_status(ctx: AppContext = Depends(get_context)):
    """Remote mirror jobs still waiting to be pushed, and tables awaiting a full re-push."""
    return SyncStatus(
        running=ctx.sync.running,
        pending_count=ctx.sync.pending_count,
        pending_by_table=ctx.sync.pending_by_table(),
        dirty_tables=ctx.sync.dirty_tables()
    )


@router.get("/health", response_model=HealthCheck)
async def health_check(ctx: AppContext = Depends(get_context)):
    """
    Health check endpoint for monitoring.

    Unhealthy only when the local store is unreachable.
    """
    db_healthy = await ctx.local.check()

    return HealthCheck(
        status="healthy" if db_healthy else "unhealthy",
        version=ctx.settings.app_version,
        database=db_healthy,
        pending_sync=ctx.sync.pending_count,
        timestamp=datetime.utcnow()
    )
