"""
Unit Tests - Product Report
"""
from datetime import date

import pytest
import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.reports.product_report import (
    PRODUCT_REPORT_COLUMNS,
    build_product_report,
)


@pytest.fixture
def report(tables, as_of) -> pl.DataFrame:
    return build_product_report(tables, as_of)


def _row(report: pl.DataFrame, key: int) -> dict:
    return report.filter(pl.col("product_key") == key).to_dicts()[0]


class TestProductReport:
    """Tests for the product report on the sample warehouse"""

    def test_columns_in_order(self, report):
        assert report.columns == PRODUCT_REPORT_COLUMNS

    def test_unsold_product_absent(self, report):
        assert report["product_key"].to_list() == [10, 20]

    def test_bike(self, report):
        row = _row(report, 10)

        assert row["product_name"] == "Road-150 Red- 62"
        assert row["category"] == "Bikes"
        assert row["subcategory"] == "Road Bikes"
        assert row["cost"] == 2171.0
        assert row["total_orders"] == 2
        assert row["total_customers"] == 1
        assert row["total_sales"] == 7000.0
        assert row["total_quantity"] == 2
        assert row["last_sale_date"] == date(2021, 3, 5)
        assert row["lifespan_months"] == 14
        assert row["recency_in_months"] == 22
        assert row["product_segment"] == "Low-Performer"
        assert row["avg_selling_price"] == 3500.0
        assert row["avg_order_revenue"] == 3500.0
        assert row["avg_monthly_revenue"] == 500.0

    def test_undated_line_excluded(self, report):
        row = _row(report, 20)

        # SO4 has no order date
        assert row["total_orders"] == 3
        assert row["total_sales"] == 140.0
        assert row["total_quantity"] == 4
        assert row["total_customers"] == 3
        assert row["lifespan_months"] == 30
        assert row["recency_in_months"] == 6
        assert row["avg_selling_price"] == 35.0
        assert row["avg_order_revenue"] == pytest.approx(46.6667, abs=1e-4)
        assert row["avg_monthly_revenue"] == pytest.approx(4.6667, abs=1e-4)


class TestProductReportEdgeCases:
    """Edge cases built from minimal frames"""

    def _tables(self, sales: dict) -> WarehouseTables:
        customers = pl.DataFrame({"customer_key": [1], "customer_number": ["C1"], "first_name": ["Ann"], "last_name": ["Lee"], "birthdate": [date(1970, 1, 1)]})
        products = pl.DataFrame({"product_key": [5], "product_name": ["Frame"], "category": ["Components"], "subcategory": ["Frames"], "cost": [400.0]})
        return WarehouseTables.from_frames(customers, products, pl.DataFrame(sales))

    def test_zero_quantity_excluded_from_selling_price(self):
        tables = self._tables({
            "order_number": ["A", "B"],
            "product_key": [5, 5],
            "customer_key": [1, 1],
            "order_date": [date(2022, 1, 1), date(2022, 2, 1)],
            "sales_amount": [900.0, 0.0],
            "quantity": [2, 0],
        })

        row = build_product_report(tables, date(2023, 1, 1)).to_dicts()[0]

        assert row["avg_selling_price"] == 450.0
        assert row["total_orders"] == 2

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (50000.01, "High-Performer"),
            (50000.0, "Mid-Range"),
            (10000.0, "Mid-Range"),
            (9999.99, "Low-Performer"),
        ],
    )
    def test_segment_thresholds(self, amount, expected):
        tables = self._tables({
            "order_number": ["A"],
            "product_key": [5],
            "customer_key": [1],
            "order_date": [date(2022, 1, 1)],
            "sales_amount": [amount],
            "quantity": [1],
        })

        row = build_product_report(tables, date(2023, 1, 1)).to_dicts()[0]

        assert row["product_segment"] == expected

    def test_unknown_product_keeps_sales(self):
        tables = self._tables({
            "order_number": ["A"],
            "product_key": [777],
            "customer_key": [1],
            "order_date": [date(2022, 1, 1)],
            "sales_amount": [25.0],
            "quantity": [1],
        })

        row = build_product_report(tables, date(2023, 1, 1)).to_dicts()[0]

        assert row["product_key"] == 777
        assert row["product_name"] is None
        assert row["cost"] is None
        assert row["total_sales"] == 25.0
