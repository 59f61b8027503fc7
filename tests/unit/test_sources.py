"""
Unit Tests - Input Sources and Schemas
"""
from datetime import date

import pytest
import polars as pl
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from warehouse_analytics.ingestion.batch_loader import BatchLoader
from warehouse_analytics.ingestion.schemas import (
    InputSchemaError,
    MissingInputError,
    SALES,
    SALES_SCHEMA,
    coerce_frame,
)
from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.reports.customer_report import build_customer_report
from warehouse_analytics.reports.product_report import build_product_report


class TestCoerceFrame:
    """Tests for schema coercion"""

    def test_string_dates_parsed(self):
        df = pl.DataFrame({
            "order_number": ["SO1"],
            "product_key": [1],
            "customer_key": [1],
            "order_date": ["2020-01-10"],
            "sales_amount": [10],
            "quantity": [1],
        })

        result = coerce_frame(df, SALES)

        assert result.columns == list(SALES_SCHEMA)
        assert result.schema["order_date"] == pl.Date
        assert result.schema["sales_amount"] == pl.Float64
        assert result["order_date"].to_list() == [date(2020, 1, 10)]
        assert result["sales_amount"].to_list() == [10.0]

    def test_optional_columns_added_and_extras_dropped(self):
        df = pl.DataFrame({
            "order_number": ["SO1"],
            "product_key": [1],
            "customer_key": [1],
            "order_date": [date(2020, 1, 10)],
            "sales_amount": [10.0],
            "quantity": [1],
            "channel": ["web"],
        })

        result = coerce_frame(df, SALES)

        assert "channel" not in result.columns
        assert result["price"].null_count() == 1
        assert list(result.columns) == list(SALES_SCHEMA)

    def test_missing_required_column(self):
        df = pl.DataFrame({"order_number": ["SO1"], "product_key": [1]})

        with pytest.raises(InputSchemaError) as exc_info:
            coerce_frame(df, SALES)

        assert exc_info.value.relation == SALES
        assert "customer_key" in str(exc_info.value)

    def test_unparseable_date(self):
        df = pl.DataFrame({
            "order_number": ["SO1", "SO2"],
            "product_key": [1, 1],
            "customer_key": [1, 1],
            "order_date": ["2020-01-10", "not a date"],
            "sales_amount": [10.0, 10.0],
            "quantity": [1, 1],
        })

        with pytest.raises(InputSchemaError):
            coerce_frame(df, SALES)

    def test_schema_error_is_value_error(self):
        assert issubclass(InputSchemaError, ValueError)
        assert issubclass(MissingInputError, LookupError)


class TestWarehouseTables:
    """Tests for the three input sources"""

    def test_missing_frame(self, customers_df, products_df):
        with pytest.raises(MissingInputError) as exc_info:
            WarehouseTables.from_frames(customers_df, products_df, None)

        assert exc_info.value.relations == ["sales"]

    def test_missing_csv_files(self, tmp_path):
        with pytest.raises(MissingInputError) as exc_info:
            WarehouseTables.from_csv_dir(tmp_path)

        assert exc_info.value.relations == ["customers", "products", "sales"]

    def test_from_csv_dir(self, warehouse_csv_dir):
        tables = WarehouseTables.from_csv_dir(warehouse_csv_dir)

        assert tables.row_counts == {"customers": 4, "products": 3, "sales": 6}
        assert tables.sales.schema["order_date"] == pl.Date
        assert tables.sales["order_date"].null_count() == 1
        assert tables.customers["last_name"].null_count() == 1

    def test_ragged_csv_row(self, warehouse_csv_dir):
        sales_path = warehouse_csv_dir / "gold.fact_sales.csv"
        with sales_path.open("a") as f:
            f.write("SO9,10,1,2023-01-01,,,10,1,10,EXTRA,MORE\n")

        with pytest.raises(InputSchemaError) as exc_info:
            WarehouseTables.from_csv_dir(warehouse_csv_dir)

        assert exc_info.value.relation == "sales"

    def test_undecodable_csv(self, warehouse_csv_dir):
        (warehouse_csv_dir / "gold.dim_customers.csv").write_bytes(b"\xff\xfe")

        with pytest.raises(InputSchemaError) as exc_info:
            WarehouseTables.from_csv_dir(warehouse_csv_dir)

        assert exc_info.value.relation == "customers"

    def test_csv_reports_match_in_memory(self, warehouse_csv_dir, tables, as_of):
        from_csv = WarehouseTables.from_csv_dir(warehouse_csv_dir)

        assert build_customer_report(from_csv, as_of).equals(build_customer_report(tables, as_of))
        assert build_product_report(from_csv, as_of).equals(build_product_report(tables, as_of))

    def test_database_without_tables(self):
        engine = create_engine("sqlite://", poolclass=StaticPool)

        with pytest.raises(MissingInputError) as exc_info:
            WarehouseTables.from_database(engine)

        assert exc_info.value.relations == ["customers", "products", "sales"]
        engine.dispose()

    def test_from_database(self, test_engine, warehouse_csv_dir, tables, as_of):
        BatchLoader(test_engine).load_warehouse(warehouse_csv_dir)

        from_db = WarehouseTables.from_database(test_engine)

        assert from_db.row_counts == tables.row_counts
        assert build_customer_report(from_db, as_of).equals(build_customer_report(tables, as_of))
        assert build_product_report(from_db, as_of).equals(build_product_report(tables, as_of))

    def test_empty_database_tables(self, test_engine, as_of):
        tables = WarehouseTables.from_database(test_engine)

        assert tables.row_counts == {"customers": 0, "products": 0, "sales": 0}
        assert build_customer_report(tables, as_of).is_empty()
