"""
Batch Data Loader

Bulk loading of the warehouse CSV exports into the database.
Each load replaces the contents of its target table:
- Header row skipped, comma separated values
- Coercion to the relation schema before insert
- Truncate then chunked INSERT inside one transaction
- Audit result per file
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union
import hashlib

import polars as pl
import structlog
from pydantic import BaseModel
from sqlalchemy import Engine, delete, insert

from warehouse_analytics.config import get_settings
from warehouse_analytics.database.models import WAREHOUSE_TABLES
from .schemas import RELATIONS, coerce_frame
from .sources import csv_paths, read_csv

logger = structlog.get_logger(__name__)


class LoadStatus(str, Enum):
    """Batch load status"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class BatchFileConfig:
    """Configuration for loading one CSV file"""
    file_path: Union[str, Path]
    relation: str
    null_values: Optional[List[str]] = None


class LoadResult(BaseModel):
    """Result of a batch load operation"""
    file_path: str
    target_table: str
    status: LoadStatus
    rows_read: int = 0
    rows_loaded: int = 0
    error_message: Optional[str] = None
    load_duration_seconds: float = 0
    started_at: datetime
    completed_at: Optional[datetime] = None
    file_hash: Optional[str] = None


class BatchLoader:
    """
    Loads warehouse CSV exports into their database tables.

    Example:
        loader = BatchLoader(engine)
        result = loader.load(BatchFileConfig("gold.fact_sales.csv", "sales"))
    """

    def __init__(self, engine: Engine, chunk_size: Optional[int] = None):
        self.engine = engine
        self.chunk_size = chunk_size or get_settings().database.insert_chunk_size

    def _compute_file_hash(self, file_path: Path) -> str:
        """Compute MD5 hash of file for audit"""
        hash_md5 = hashlib.md5()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(4096), b""):
                hash_md5.update(chunk)
        return hash_md5.hexdigest()

    def _clean_data(self, df: pl.DataFrame) -> pl.DataFrame:
        """Trim string cells and drop rows that are entirely null"""
        string_cols = [col for col, dtype in df.schema.items() if dtype == pl.Utf8]
        if string_cols:
            df = df.with_columns(pl.col(string_cols).str.strip_chars())
        return df.filter(~pl.all_horizontal(pl.all().is_null()))

    def _replace_table(self, df: pl.DataFrame, relation: str) -> int:
        """Truncate the relation's table and insert the frame in chunks"""
        table = WAREHOUSE_TABLES[relation]
        total_inserted = 0

        with self.engine.begin() as conn:
            conn.execute(delete(table))
            for chunk in df.iter_slices(n_rows=self.chunk_size):
                rows = chunk.to_dicts()
                if rows:
                    conn.execute(insert(table), rows)
                total_inserted += len(rows)

        return total_inserted

    def load(self, config: BatchFileConfig) -> LoadResult:
        """
        Load one CSV file into its warehouse table.

        Failures are captured in the returned result rather than raised.
        """
        file_path = Path(config.file_path)
        started_at = datetime.utcnow()
        table_name = WAREHOUSE_TABLES[config.relation].name

        result = LoadResult(
            file_path=str(file_path),
            target_table=table_name,
            status=LoadStatus.RUNNING,
            started_at=started_at,
        )

        logger.info("Starting batch load", file=str(file_path), target_table=table_name)

        try:
            if not file_path.exists():
                raise FileNotFoundError(f"File not found: {file_path}")

            result.file_hash = self._compute_file_hash(file_path)

            df = read_csv(file_path, null_values=config.null_values)
            result.rows_read = len(df)

            df = coerce_frame(self._clean_data(df), config.relation)
            result.rows_loaded = self._replace_table(df, config.relation)
            result.status = LoadStatus.COMPLETED

        except Exception as e:
            result.status = LoadStatus.FAILED
            result.error_message = str(e)
            logger.error("Batch load failed", error=str(e), file=str(file_path))

        result.completed_at = datetime.utcnow()
        result.load_duration_seconds = (result.completed_at - started_at).total_seconds()

        if result.status == LoadStatus.COMPLETED:
            logger.info(
                "Batch load completed",
                target_table=table_name,
                rows_loaded=result.rows_loaded,
                duration_seconds=result.load_duration_seconds,
            )

        return result

    def load_warehouse(self, directory: Union[str, Path]) -> Dict[str, LoadResult]:
        """
        Load the customers, products and sales exports from a directory.

        Returns:
            LoadResult per relation
        """
        paths = csv_paths(directory)
        results = {
            relation: self.load(BatchFileConfig(file_path=paths[relation], relation=relation))
            for relation in RELATIONS
        }

        successful = sum(1 for r in results.values() if r.status == LoadStatus.COMPLETED)
        logger.info(
            f"Warehouse load finished: {successful}/{len(results)} tables loaded",
            directory=str(directory),
        )
        return results
