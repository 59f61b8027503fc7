"""
Customer Report

Consolidates customer purchasing behaviour into one row per customer:
- demographic fields and age group
- order, sales, quantity and product totals
- lifespan and recency in months
- VIP / Regular / New segment
- average order value and average monthly spend
"""

from datetime import date

import polars as pl
import structlog

from warehouse_analytics.ingestion.sources import WarehouseTables
from .metrics import (
    average_per_month,
    average_per_order,
    months_between,
    months_until,
    whole_years_until,
)
from .rules import AGE_GROUP_RULES, CUSTOMER_SEGMENT_RULES

logger = structlog.get_logger(__name__)


CUSTOMER_REPORT_COLUMNS = [
    "customer_key",
    "customer_number",
    "customer_name",
    "age",
    "age_group",
    "customer_segment",
    "last_order_date",
    "recency_months",
    "total_orders",
    "total_sales",
    "total_quantity",
    "total_products",
    "lifespan_months",
    "avg_order_value",
    "avg_monthly_spend",
]


def _full_name() -> pl.Expr:
    first, last = pl.col("first_name"), pl.col("last_name")
    return (
        pl.when(first.is_null() & last.is_null())
        .then(pl.lit(None, dtype=pl.Utf8))
        .otherwise(pl.concat_str([first, last], separator=" ", ignore_nulls=True))
        .alias("customer_name")
    )


def customer_base(tables: WarehouseTables, as_of: date) -> pl.DataFrame:
    """
    Dated sales lines joined to their customer.

    Lines without an order date or customer key are left out. Lines whose
    customer is unknown keep null demographic fields.
    """
    sales = tables.sales.filter(
        pl.col("order_date").is_not_null() & pl.col("customer_key").is_not_null()
    ).select(
        "order_number", "product_key", "customer_key", "order_date",
        "sales_amount", "quantity",
    )
    customers = tables.customers.select(
        "customer_key", "customer_number", "first_name", "last_name", "birthdate",
    )

    return sales.join(customers, on="customer_key", how="left").with_columns(
        _full_name(),
        whole_years_until("birthdate", as_of).alias("age"),
    )


def build_customer_report(tables: WarehouseTables, as_of: date) -> pl.DataFrame:
    """
    Build the customer report.

    Args:
        tables: Warehouse input relations
        as_of: Reference date for age and recency

    Returns:
        One row per customer key with at least one dated sale, ordered by key
    """
    base = customer_base(tables, as_of)

    aggregated = base.group_by(
        ["customer_key", "customer_number", "customer_name", "age"]
    ).agg([
        pl.col("order_number").drop_nulls().n_unique().alias("total_orders"),
        pl.col("sales_amount").sum().alias("total_sales"),
        pl.col("quantity").sum().alias("total_quantity"),
        pl.col("product_key").drop_nulls().n_unique().alias("total_products"),
        pl.col("order_date").max().alias("last_order_date"),
        months_between(pl.col("order_date").min(), pl.col("order_date").max())
        .alias("lifespan_months"),
    ])

    report = aggregated.with_columns(
        AGE_GROUP_RULES.expression(),
        CUSTOMER_SEGMENT_RULES.expression(),
        months_until("last_order_date", as_of).alias("recency_months"),
        average_per_order("total_sales", "total_orders").alias("avg_order_value"),
        average_per_month("total_sales", "lifespan_months").alias("avg_monthly_spend"),
    )

    report = report.select(CUSTOMER_REPORT_COLUMNS).sort("customer_key")

    logger.info(
        "Customer report built",
        rows=report.height,
        sales_lines=base.height,
        as_of=as_of.isoformat(),
    )
    return report
