"""
Unit Tests - Batch Loader
"""
import polars as pl
from sqlalchemy import func, select

from warehouse_analytics.database.models import DimCustomer, FactSale
from warehouse_analytics.ingestion.batch_loader import BatchFileConfig, BatchLoader, LoadStatus


class TestBatchLoader:
    """Tests for BatchLoader"""

    def test_load_warehouse(self, test_engine, warehouse_csv_dir):
        results = BatchLoader(test_engine).load_warehouse(warehouse_csv_dir)

        assert {r.status for r in results.values()} == {LoadStatus.COMPLETED}
        assert results["customers"].rows_loaded == 4
        assert results["products"].rows_loaded == 3
        assert results["sales"].rows_loaded == 6
        assert results["sales"].target_table == "fact_sales"
        assert len(results["sales"].file_hash) == 32

    def test_reload_replaces_rows(self, test_engine, warehouse_csv_dir):
        loader = BatchLoader(test_engine, chunk_size=2)

        loader.load_warehouse(warehouse_csv_dir)
        loader.load_warehouse(warehouse_csv_dir)

        with test_engine.connect() as conn:
            assert conn.execute(select(func.count()).select_from(FactSale)).scalar() == 6
            assert conn.execute(select(func.count()).select_from(DimCustomer)).scalar() == 4

    def test_missing_file_captured(self, test_engine, tmp_path):
        result = BatchLoader(test_engine).load(
            BatchFileConfig(file_path=tmp_path / "gold.fact_sales.csv", relation="sales")
        )

        assert result.status == LoadStatus.FAILED
        assert "File not found" in result.error_message
        assert result.completed_at is not None

    def test_strips_strings_and_drops_blank_rows(self, test_engine, tmp_path):
        path = tmp_path / "customers.csv"
        path.write_text(
            "customer_key,customer_number,first_name,last_name,birthdate\n"
            "1,AW1,  Jon ,Yang,1980-05-15\n"
            ",,,,\n"
        )

        result = BatchLoader(test_engine).load(BatchFileConfig(file_path=path, relation="customers"))

        assert result.status == LoadStatus.COMPLETED
        assert result.rows_read == 2
        assert result.rows_loaded == 1
        with test_engine.connect() as conn:
            assert conn.execute(select(DimCustomer.first_name)).scalar() == "Jon"

    def test_schema_error_captured(self, test_engine, tmp_path):
        path = tmp_path / "sales.csv"
        pl.DataFrame({"order_number": ["SO1"]}).write_csv(path)

        result = BatchLoader(test_engine).load(BatchFileConfig(file_path=path, relation="sales"))

        assert result.status == LoadStatus.FAILED
        assert "missing required columns" in result.error_message
