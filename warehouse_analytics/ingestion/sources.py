"""
Warehouse Input Sources

The report pipeline and the analyses consume three read-only relations:
customers, products and sales. ``WarehouseTables`` bundles them after
coercion to the warehouse schema, whichever source they come from:

- in-memory polars frames
- a directory of CSV exports
- the warehouse database
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

import polars as pl
import structlog
from sqlalchemy import Engine, inspect, select

from warehouse_analytics.config import get_settings
from warehouse_analytics.database.models import WAREHOUSE_TABLES
from .schemas import (
    CUSTOMERS,
    PRODUCTS,
    SALES,
    RELATIONS,
    SCHEMAS,
    InputSchemaError,
    MissingInputError,
    coerce_frame,
)

logger = structlog.get_logger(__name__)


def read_csv(path: Union[str, Path], null_values: Optional[list] = None) -> pl.DataFrame:
    """Read a warehouse CSV export (header row, comma separated)"""
    if null_values is None:
        null_values = get_settings().data_lake.null_values
    return pl.read_csv(
        path,
        separator=",",
        null_values=null_values,
        try_parse_dates=True,
        infer_schema_length=10000,
    )


def csv_paths(directory: Union[str, Path]) -> Dict[str, Path]:
    """Expected CSV file path per relation inside a directory"""
    data_lake = get_settings().data_lake
    directory = Path(directory)
    return {
        CUSTOMERS: directory / data_lake.customers_file,
        PRODUCTS: directory / data_lake.products_file,
        SALES: directory / data_lake.sales_file,
    }


@dataclass(frozen=True, eq=False)
class WarehouseTables:
    """The three warehouse relations, conformed to their schemas"""
    customers: pl.DataFrame
    products: pl.DataFrame
    sales: pl.DataFrame

    @classmethod
    def from_frames(
        cls,
        customers: Optional[pl.DataFrame],
        products: Optional[pl.DataFrame],
        sales: Optional[pl.DataFrame],
    ) -> "WarehouseTables":
        """
        Build from in-memory frames.

        Raises:
            MissingInputError: if any relation is None
            InputSchemaError: if a frame does not fit its schema
        """
        frames = {CUSTOMERS: customers, PRODUCTS: products, SALES: sales}
        missing = [name for name, frame in frames.items() if frame is None]
        if missing:
            raise MissingInputError(missing, source="frames")

        return cls(
            customers=coerce_frame(customers, CUSTOMERS),
            products=coerce_frame(products, PRODUCTS),
            sales=coerce_frame(sales, SALES),
        )

    @classmethod
    def from_csv_dir(cls, directory: Optional[Union[str, Path]] = None) -> "WarehouseTables":
        """
        Build from the CSV exports in a directory.

        Raises:
            MissingInputError: if any of the three files is absent
            InputSchemaError: if a file cannot be parsed as CSV
        """
        directory = Path(directory or get_settings().data_lake.source_path)
        paths = csv_paths(directory)

        missing = [name for name, path in paths.items() if not path.is_file()]
        if missing:
            raise MissingInputError(missing, source=str(directory))

        frames = {}
        for name, path in paths.items():
            try:
                frames[name] = read_csv(path)
            except pl.exceptions.PolarsError as e:
                raise InputSchemaError(name, f"cannot read {path}: {e}") from e

        logger.info(
            "Read warehouse CSV files",
            directory=str(directory),
            **{f"{name}_rows": len(frame) for name, frame in frames.items()},
        )
        return cls.from_frames(**frames)

    @classmethod
    def from_database(cls, engine: Engine) -> "WarehouseTables":
        """
        Build from the warehouse tables of a database.

        Raises:
            MissingInputError: if any warehouse table does not exist
        """
        inspector = inspect(engine)
        missing = [
            name for name, table in WAREHOUSE_TABLES.items()
            if not inspector.has_table(table.name)
        ]
        if missing:
            raise MissingInputError(missing, source=f"database {engine.url.get_backend_name()}")

        frames = {}
        with engine.connect() as conn:
            for name in RELATIONS:
                table = WAREHOUSE_TABLES[name]
                schema = SCHEMAS[name]
                columns = [table.c[column] for column in schema]
                rows = conn.execute(select(*columns)).fetchall()
                frames[name] = pl.DataFrame(
                    [dict(r._mapping) for r in rows],
                    schema=schema,
                )

        logger.info(
            "Read warehouse tables",
            **{f"{name}_rows": len(frame) for name, frame in frames.items()},
        )
        return cls.from_frames(**frames)

    @property
    def row_counts(self) -> Dict[str, int]:
        return {
            CUSTOMERS: self.customers.height,
            PRODUCTS: self.products.height,
            SALES: self.sales.height,
        }
