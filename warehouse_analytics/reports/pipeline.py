"""
Report Pipeline

Builds the customer and product reports from the warehouse relations in one
synchronous pass, then optionally writes them to files or materializes them
into the report tables. Both reports are recomputed from scratch on every run.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Optional

import polars as pl
import structlog
from sqlalchemy import Engine, delete, insert

from warehouse_analytics.config import get_settings
from warehouse_analytics.database.models import REPORT_TABLES
from warehouse_analytics.ingestion.sources import WarehouseTables
from .customer_report import build_customer_report
from .product_report import build_product_report

logger = structlog.get_logger(__name__)


@dataclass(eq=False)
class ReportResult:
    """Outcome of one pipeline run"""
    customers: pl.DataFrame
    products: pl.DataFrame
    as_of: date
    started_at: datetime
    completed_at: datetime
    output_paths: Dict[str, str] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def row_counts(self) -> Dict[str, int]:
        return {"customers": self.customers.height, "products": self.products.height}


class ReportPipeline:
    """
    Customer and product report pipeline.

    Example:
        pipeline = ReportPipeline()
        result = pipeline.run(WarehouseTables.from_csv_dir("data/csv-files"), date(2024, 1, 31))
        pipeline.write(result)
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        output_format: Optional[str] = None,
    ):
        data_lake = get_settings().data_lake
        self.output_path = Path(output_path or data_lake.output_path)
        self.output_format = (output_format or data_lake.output_format).lower()
        if self.output_format not in ("parquet", "csv"):
            raise ValueError(f"Unsupported output format: {self.output_format}")

    def run(self, tables: WarehouseTables, as_of: date) -> ReportResult:
        """
        Build both reports.

        Args:
            tables: Warehouse input relations
            as_of: Reference date for age and recency columns
        """
        started_at = datetime.utcnow()
        logger.info("Starting report pipeline", as_of=as_of.isoformat(), **tables.row_counts)

        customers = build_customer_report(tables, as_of)
        products = build_product_report(tables, as_of)

        result = ReportResult(
            customers=customers,
            products=products,
            as_of=as_of,
            started_at=started_at,
            completed_at=datetime.utcnow(),
        )

        logger.info(
            "Report pipeline complete",
            duration_seconds=round(result.duration_seconds, 3),
            **result.row_counts,
        )
        return result

    def _write_output(self, df: pl.DataFrame, name: str, as_of: date) -> str:
        """Write one report, overwriting an earlier run for the same date"""
        self.output_path.mkdir(parents=True, exist_ok=True)
        output_file = self.output_path / f"{name}_{as_of:%Y%m%d}.{self.output_format}"

        if self.output_format == "parquet":
            df.write_parquet(output_file)
        else:
            df.write_csv(output_file)

        logger.info(f"Written {len(df)} rows to {output_file}")
        return str(output_file)

    def write(self, result: ReportResult) -> Dict[str, str]:
        """Write both reports to the output directory"""
        result.output_paths = {
            "customers": self._write_output(result.customers, "report_customers", result.as_of),
            "products": self._write_output(result.products, "report_products", result.as_of),
        }
        return result.output_paths

    def materialize(self, result: ReportResult, engine: Engine) -> Dict[str, int]:
        """
        Replace the contents of the report tables with this run's rows.

        Both tables are replaced in a single transaction.
        """
        frames = {"customers": result.customers, "products": result.products}
        counts = {}

        with engine.begin() as conn:
            for name, frame in frames.items():
                table = REPORT_TABLES[name]
                table.create(conn, checkfirst=True)
                conn.execute(delete(table))
                rows = frame.to_dicts()
                if rows:
                    conn.execute(insert(table), rows)
                counts[name] = len(rows)

        logger.info("Reports materialized", **counts)
        return counts
