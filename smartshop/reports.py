# smartshop/reports.py
"""Report aggregation over the sales ledger and catalog stats. Pure functions."""
import json
from typing import Iterable

import pandas as pd

from smartshop.schemas.dashboard import InventoryStats, StorageSize
from smartshop.schemas.product import Product
from smartshop.schemas.report import DailyReportRow, ReportFilter, ReportResult, SoldProduct
from smartshop.schemas.sale import Sale
from smartshop.utils import (
    contains_normalized, end_of_day_millis, millis_to_local_date, start_of_day_millis
)


def filter_sales(sales: Iterable[Sale], flt: ReportFilter) -> list[Sale]:
    start = start_of_day_millis(flt.date_from)
    end = end_of_day_millis(flt.date_to)
    filtered = [s for s in sales if start <= s.timestamp <= end]

    query = (flt.customer_query or "").strip()
    if query:
        filtered = [
            s for s in filtered
            if s.customer is not None and (
                (s.customer.full_name and contains_normalized(s.customer.full_name, query))
                or (s.customer.id_card and contains_normalized(s.customer.id_card, query))
            )
        ]

    if flt.product_id:
        filtered = [s for s in filtered if s.product_id == flt.product_id]

    return filtered


def build_report(sales: Iterable[Sale], flt: ReportFilter) -> ReportResult:
    """
    Revenue, cost, profit and margin over the sales matching `flt`.

    Margin is a percentage of revenue and is 0 when revenue is 0.
    """
    filtered = filter_sales(sales, flt)

    revenue = sum(s.total_amount for s in filtered)
    cost = sum(s.cost for s in filtered)
    profit = revenue - cost
    margin = (profit / revenue * 100) if revenue else 0

    filtered.sort(key=lambda s: s.timestamp, reverse=True)

    return ReportResult(
        filtered_sales=filtered,
        revenue=revenue,
        cost=cost,
        profit=profit,
        margin=margin,
        orders_count=len(filtered)
    )


def daily_breakdown(sales: Iterable[Sale]) -> list[DailyReportRow]:
    """Per local calendar day totals, oldest day first."""
    rows = [
        {"day": millis_to_local_date(s.timestamp).isoformat(), "revenue": s.total_amount, "cost": s.cost}
        for s in sales
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)

    grp = df.groupby("day").agg(
        revenue=("revenue", "sum"),
        cost=("cost", "sum"),
        orders_count=("revenue", "count"),
    ).reset_index().sort_values("day")

    return [
        DailyReportRow(
            date=r["day"],
            revenue=float(r["revenue"]),
            profit=float(r["revenue"] - r["cost"]),
            orders_count=int(r["orders_count"])
        )
        for _, r in grp.iterrows()
    ]


def sold_products(sales: Iterable[Sale]) -> list[SoldProduct]:
    """Distinct products present in the ledger, first occurrence wins the name."""
    seen: dict[str, str] = {}
    for s in sales:
        if s.product_id not in seen:
            seen[s.product_id] = s.product_name
    return [SoldProduct(id=pid, name=name) for pid, name in seen.items()]


def calculate_storage_size(data) -> StorageSize:
    size = len(json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8"))
    if size < 1024:
        text = f"{size} B"
    elif size < 1024 * 1024:
        text = f"{size / 1024:.2f} KB"
    else:
        text = f"{size / (1024 * 1024):.2f} MB"
    return StorageSize(text=text, bytes=size)


def inventory_stats(products: list[Product], sales: list[Sale]) -> InventoryStats:
    return InventoryStats(
        count=len(products),
        total_items=sum(p.stock for p in products),
        investment=sum(p.stock_value for p in products),
        storage=calculate_storage_size({
            "products": [p.to_document() for p in products],
            "sales": [s.to_document() for s in sales],
        })
    )

