"""
Unit Tests - Synthetic Data Generator
"""
import polars as pl
import pytest

from warehouse_analytics.data.generators import CATEGORIES, WarehouseDataGenerator
from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.quality.validators import ValidationStatus, validate_warehouse
from warehouse_analytics.reports.pipeline import ReportPipeline


@pytest.fixture(scope="module")
def generated() -> WarehouseTables:
    return WarehouseDataGenerator(seed=7).generate(n_customers=80, n_products=20, n_orders=400)


class TestWarehouseDataGenerator:
    """Tests for WarehouseDataGenerator"""

    def test_sizes(self, generated):
        assert generated.customers.height == 80
        assert generated.products.height == 20
        assert generated.sales.height >= 400

    def test_same_seed_same_data(self, generated):
        again = WarehouseDataGenerator(seed=7).generate(n_customers=80, n_products=20, n_orders=400)

        assert again.sales.equals(generated.sales)
        assert again.customers.equals(generated.customers)

    def test_keys_reference_dimensions(self, generated):
        customer_keys = generated.customers["customer_key"]
        product_keys = generated.products["product_key"]

        assert generated.sales["customer_key"].is_in(customer_keys).all()
        assert generated.sales["product_key"].is_in(product_keys).all()

    def test_amount_is_price_times_quantity(self, generated):
        sales = generated.sales

        assert (sales["sales_amount"] == sales["price"] * sales["quantity"]).all()
        assert (sales["quantity"] > 0).all()

    def test_every_category_present(self, generated):
        assert set(generated.products["category"].to_list()) == set(CATEGORIES)

    def test_undated_share(self):
        tables = WarehouseDataGenerator(seed=1, undated_share=0.5).generate(
            n_customers=20, n_products=8, n_orders=200
        )

        undated = tables.sales["order_date"].null_count()
        assert 0 < undated < tables.sales.height

    def test_passes_error_checks(self, generated):
        results = validate_warehouse(generated)

        assert all(r.status != ValidationStatus.FAILED for r in results.values())

    def test_write_csv_roundtrip(self, tmp_path):
        generator = WarehouseDataGenerator(seed=3)
        generator.generate(n_customers=30, n_products=10, n_orders=100)

        paths = generator.write_csv(tmp_path)

        assert sorted(p.name for p in paths.values()) == [
            "gold.dim_customers.csv",
            "gold.dim_products.csv",
            "gold.fact_sales.csv",
        ]
        tables = WarehouseTables.from_csv_dir(tmp_path)
        assert tables.row_counts["customers"] == 30
        assert tables.sales.schema["order_date"] == pl.Date

    def test_reports_build(self, generated, tmp_path):
        result = ReportPipeline(output_path=str(tmp_path)).run(generated, generated.sales["order_date"].max())

        assert result.customers.height > 0
        assert result.products.height > 0
        assert result.customers["total_orders"].min() >= 1
