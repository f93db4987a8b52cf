"""Tests for report aggregation."""
import pytest
from datetime import date, datetime

from smartshop.reports import (
    build_report,
    calculate_storage_size,
    daily_breakdown,
    filter_sales,
    inventory_stats,
    sold_products,
)
from smartshop.schemas.report import ReportFilter
from smartshop.schemas.sale import CustomerInfo


class TestReportWindow:
    """Tests for inclusive calendar-day windows."""

    def test_inclusive_window_excludes_later_sale(self, make_sale):
        t1 = make_sale(datetime(2024, 3, 1, 9, 0), id="t1")
        t2 = make_sale(datetime(2024, 3, 2, 18, 0), id="t2")
        t3 = make_sale(datetime(2024, 3, 3, 8, 0), id="t3")

        flt = ReportFilter(date_from=date(2024, 3, 1), date_to=date(2024, 3, 2))
        result = build_report([t1, t2, t3], flt)

        assert {s.id for s in result.filtered_sales} == {"t1", "t2"}

    def test_sale_at_last_millisecond_included(self, make_sale):
        late = make_sale(datetime(2024, 3, 2, 23, 59, 59, 999000), id="late")
        early_next = make_sale(datetime(2024, 3, 3, 0, 0, 0), id="next")

        flt = ReportFilter(date_from=date(2024, 3, 2), date_to=date(2024, 3, 2))
        result = build_report([late, early_next], flt)

        assert [s.id for s in result.filtered_sales] == ["late"]

    def test_sale_at_midnight_included(self, make_sale):
        midnight = make_sale(datetime(2024, 3, 2, 0, 0, 0), id="midnight")
        flt = ReportFilter(date_from=date(2024, 3, 2), date_to=date(2024, 3, 2))
        assert build_report([midnight], flt).orders_count == 1

    def test_january_report(self, make_sale):
        """Sales on Jan 5 ($50) and Feb 10 ($80); January report sees only the first."""
        sales = [
            make_sale(datetime(2024, 1, 5, 10, 0), amount=50, id="jan"),
            make_sale(datetime(2024, 2, 10, 10, 0), amount=80, id="feb"),
        ]
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))

        result = build_report(sales, flt)

        assert result.revenue == 50
        assert result.orders_count == 1


class TestReportTotals:

    def test_revenue_cost_profit_margin(self, make_sale):
        sales = [
            make_sale(datetime(2024, 1, 5, 10), id="a", quantity=2, selling_price=100,
                      purchase_price=60, total_amount=200),
            make_sale(datetime(2024, 1, 6, 10), id="b", quantity=1, selling_price=50,
                      purchase_price=40, total_amount=50),
        ]
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))

        result = build_report(sales, flt)

        assert result.revenue == 250
        assert result.cost == 160
        assert result.profit == 90
        assert result.margin == pytest.approx(36.0)

    def test_margin_zero_when_no_revenue(self):
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))
        result = build_report([], flt)

        assert result.revenue == 0
        assert result.margin == 0
        assert result.orders_count == 0

    def test_margin_zero_for_free_items(self, make_sale):
        free = make_sale(datetime(2024, 1, 5), id="free", selling_price=0,
                         purchase_price=10, total_amount=0)
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))

        result = build_report([free], flt)

        assert result.margin == 0
        assert result.profit == -10

    def test_sorted_newest_first(self, make_sale):
        sales = [
            make_sale(datetime(2024, 1, 5), id="old"),
            make_sale(datetime(2024, 1, 20), id="new"),
            make_sale(datetime(2024, 1, 10), id="mid"),
        ]
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))

        result = build_report(sales, flt)

        assert [s.id for s in result.filtered_sales] == ["new", "mid", "old"]

    def test_uses_price_snapshots_not_current_prices(self, make_sale):
        sale = make_sale(datetime(2024, 1, 5), id="s", selling_price=100,
                         purchase_price=70, total_amount=100)
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))

        result = build_report([sale], flt)

        assert result.profit == 30


class TestReportFilters:

    @pytest.fixture
    def sales(self, make_sale):
        return [
            make_sale(datetime(2024, 1, 5), id="nguyen",
                      customer=CustomerInfo(full_name="Nguyễn Văn A", id_card="046099000123")),
            make_sale(datetime(2024, 1, 6), id="tran", product_id="B", product_name="Bánh mì",
                      customer=CustomerInfo(full_name="Trần Thị B", id_card="079188000456")),
            make_sale(datetime(2024, 1, 7), id="walkin"),
        ]

    def test_customer_name_without_diacritics(self, sales):
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31), customer_query="nguyen")
        assert [s.id for s in filter_sales(sales, flt)] == ["nguyen"]

    def test_customer_id_card(self, sales):
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31), customer_query="079188")
        assert [s.id for s in filter_sales(sales, flt)] == ["tran"]

    def test_blank_customer_query_keeps_walk_ins(self, sales):
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31), customer_query="  ")
        assert len(filter_sales(sales, flt)) == 3

    def test_product_filter(self, sales):
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31), product_id="B")
        assert [s.id for s in filter_sales(sales, flt)] == ["tran"]

    def test_combined_filters(self, sales):
        flt = ReportFilter(date_from=date(2024, 1, 1), date_to=date(2024, 1, 31),
                           customer_query="nguyen", product_id="B")
        assert filter_sales(sales, flt) == []


class TestDailyBreakdown:

    def test_groups_by_day(self, make_sale):
        sales = [
            make_sale(datetime(2024, 1, 5, 9), id="a", amount=50),
            make_sale(datetime(2024, 1, 5, 17), id="b", amount=30),
            make_sale(datetime(2024, 1, 7, 12), id="c", amount=80),
        ]

        rows = daily_breakdown(sales)

        assert [r.date for r in rows] == ["2024-01-05", "2024-01-07"]
        assert rows[0].revenue == 80
        assert rows[0].orders_count == 2
        assert rows[0].profit == pytest.approx(32)
        assert rows[1].orders_count == 1

    def test_empty(self):
        assert daily_breakdown([]) == []


class TestSoldProducts:

    def test_distinct_in_first_seen_order(self, make_sale):
        sales = [
            make_sale(datetime(2024, 1, 5), id="1", product_id="B", product_name="Bánh mì"),
            make_sale(datetime(2024, 1, 6), id="2", product_id="A", product_name="Sữa"),
            make_sale(datetime(2024, 1, 7), id="3", product_id="B", product_name="Bánh mì (mới)"),
        ]

        result = sold_products(sales)

        assert [(p.id, p.name) for p in result] == [("B", "Bánh mì"), ("A", "Sữa")]


class TestInventoryStats:

    def test_totals(self, make_product):
        products = [
            make_product(id="A", stock=10, purchase_price=60),
            make_product(id="B", stock=5, purchase_price=20),
        ]

        stats = inventory_stats(products, [])

        assert stats.count == 2
        assert stats.total_items == 15
        assert stats.investment == 700
        assert stats.storage.bytes > 0

    def test_storage_size_units(self):
        assert calculate_storage_size("x").text == "3 B"
        assert calculate_storage_size("x" * 2048).text.endswith(" KB")
        assert calculate_storage_size("x" * (2 * 1024 * 1024)).text.endswith(" MB")
