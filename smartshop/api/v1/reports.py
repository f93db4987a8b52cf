"""
Sales report API endpoints.
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query

from smartshop.api.v1.deps import get_context
from smartshop.context import AppContext
from smartshop.reports import build_report, daily_breakdown, filter_sales, sold_products
from smartshop.schemas.report import DailyReportRow, ReportFilter, ReportResult, SoldProduct

router = APIRouter(prefix="/reports", tags=["Reports"])


def report_filter(
    date_from: Optional[date] = Query(None, alias="from", description="First day (default: first of this month)"),
    date_to: Optional[date] = Query(None, alias="to", description="Last day, inclusive (default: today)"),
    customer: Optional[str] = Query(None, description="Customer name or ID card, accents ignored"),
    product_id: Optional[str] = Query(None, alias="productId"),
) -> ReportFilter:
    today = date.today()
    return ReportFilter(
        date_from=date_from or today.replace(day=1),
        date_to=date_to or today,
        customer_query=customer,
        product_id=product_id
    )


@router.get("", response_model=ReportResult)
async def get_report(
    flt: ReportFilter = Depends(report_filter),
    ctx: AppContext = Depends(get_context)
):
    """
    Revenue, cost, profit and margin over a date range.

    Filtered sales are returned newest first.
    """
    sales = await ctx.ledger.get_all()
    return build_report(sales, flt)


@router.get("/daily", response_model=List[DailyReportRow])
async def get_daily_report(
    flt: ReportFilter = Depends(report_filter),
    ctx: AppContext = Depends(get_context)
):
    """Per-day revenue, profit and order count for the same filters."""
    sales = await ctx.ledger.get_all()
    return daily_breakdown(filter_sales(sales, flt))


@router.get("/products", response_model=List[SoldProduct])
async def get_sold_products(ctx: AppContext = Depends(get_context)):
    """Products that appear in the ledger, for the report product filter."""
    sales = await ctx.ledger.get_all()
    return sold_products(sales)
