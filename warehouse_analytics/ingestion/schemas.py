"""
Warehouse Relation Schemas

Polars schemas of the three warehouse relations and the coercion that brings
any incoming frame (CSV read, database rows, in-memory data) onto them.
"""

from typing import Dict, List, Sequence

import polars as pl
import structlog

logger = structlog.get_logger(__name__)


CUSTOMERS = "customers"
PRODUCTS = "products"
SALES = "sales"

RELATIONS = (CUSTOMERS, PRODUCTS, SALES)


CUSTOMER_SCHEMA: Dict[str, pl.DataType] = {
    "customer_key": pl.Int64,
    "customer_id": pl.Int64,
    "customer_number": pl.Utf8,
    "first_name": pl.Utf8,
    "last_name": pl.Utf8,
    "country": pl.Utf8,
    "marital_status": pl.Utf8,
    "gender": pl.Utf8,
    "birthdate": pl.Date,
    "create_date": pl.Date,
}

PRODUCT_SCHEMA: Dict[str, pl.DataType] = {
    "product_key": pl.Int64,
    "product_id": pl.Int64,
    "product_number": pl.Utf8,
    "product_name": pl.Utf8,
    "category_id": pl.Utf8,
    "category": pl.Utf8,
    "subcategory": pl.Utf8,
    "maintenance": pl.Utf8,
    "cost": pl.Float64,
    "product_line": pl.Utf8,
    "start_date": pl.Date,
}

SALES_SCHEMA: Dict[str, pl.DataType] = {
    "order_number": pl.Utf8,
    "product_key": pl.Int64,
    "customer_key": pl.Int64,
    "order_date": pl.Date,
    "shipping_date": pl.Date,
    "due_date": pl.Date,
    "sales_amount": pl.Float64,
    "quantity": pl.Int64,
    "price": pl.Float64,
}

SCHEMAS: Dict[str, Dict[str, pl.DataType]] = {
    CUSTOMERS: CUSTOMER_SCHEMA,
    PRODUCTS: PRODUCT_SCHEMA,
    SALES: SALES_SCHEMA,
}

# Columns the report builders cannot do without
REQUIRED_COLUMNS: Dict[str, List[str]] = {
    CUSTOMERS: ["customer_key", "customer_number", "first_name", "last_name", "birthdate"],
    PRODUCTS: ["product_key", "product_name", "category", "subcategory", "cost"],
    SALES: ["order_number", "product_key", "customer_key", "order_date", "sales_amount", "quantity"],
}


class MissingInputError(LookupError):
    """One or more of the three input relations is not available"""

    def __init__(self, relations: Sequence[str], source: str = "input"):
        self.relations = list(relations)
        self.source = source
        super().__init__(
            f"Missing input relation(s) in {source}: {', '.join(self.relations)}"
        )


class InputSchemaError(ValueError):
    """An input relation lacks required columns or holds uncoercible values"""

    def __init__(self, relation: str, message: str):
        self.relation = relation
        super().__init__(f"Relation '{relation}': {message}")


def _coerce_column(column: str, source: pl.DataType, target: pl.DataType) -> pl.Expr:
    if target == pl.Date and source == pl.Utf8:
        return pl.col(column).str.to_date(strict=True)
    return pl.col(column).cast(target)


def coerce_frame(df: pl.DataFrame, relation: str) -> pl.DataFrame:
    """
    Conform a frame to the schema of a warehouse relation.

    Columns are cast to their declared types, optional columns that are
    absent are added as nulls and columns outside the schema are dropped.

    Raises:
        InputSchemaError: on missing required columns or failed casts
    """
    schema = SCHEMAS[relation]

    missing = [c for c in REQUIRED_COLUMNS[relation] if c not in df.columns]
    if missing:
        raise InputSchemaError(relation, f"missing required columns {missing}")

    exprs = []
    for column, dtype in schema.items():
        if column in df.columns:
            exprs.append(_coerce_column(column, df.schema[column], dtype).alias(column))
        else:
            exprs.append(pl.lit(None, dtype=dtype).alias(column))

    try:
        coerced = df.select(exprs)
    except pl.exceptions.PolarsError as e:
        raise InputSchemaError(relation, f"cannot coerce to schema: {e}") from e

    dropped = [c for c in df.columns if c not in schema]
    if dropped:
        logger.debug("Ignoring columns outside schema", relation=relation, columns=dropped)

    return coerced
