"""
Segmentation Analysis

Distribution of products over cost ranges and of customers over spending
segments, largest group first.
"""

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.reports.metrics import months_between
from warehouse_analytics.reports.rules import COST_RANGE_RULES, CUSTOMER_SEGMENT_RULES
from .base import dated_sales


def product_cost_ranges(tables: WarehouseTables) -> pl.DataFrame:
    """Number of products per cost range"""
    return (
        tables.products
        .with_columns(COST_RANGE_RULES.expression())
        .group_by("cost_range")
        .agg(pl.col("product_key").count().alias("total_products"))
        .sort(["total_products", "cost_range"], descending=[True, False])
    )


def customer_segment_counts(tables: WarehouseTables) -> pl.DataFrame:
    """
    Number of customers per VIP / Regular / New segment.

    Only dated sales lines count, so a customer is classified exactly as in
    the customer report and customers with undated lines only are left out.
    """
    spending = (
        dated_sales(tables)
        .filter(pl.col("customer_key").is_not_null())
        .group_by("customer_key")
        .agg([
            pl.col("sales_amount").sum().alias("total_sales"),
            months_between(pl.col("order_date").min(), pl.col("order_date").max())
            .alias("lifespan_months"),
        ])
    )
    return (
        spending
        .with_columns(CUSTOMER_SEGMENT_RULES.expression())
        .group_by("customer_segment")
        .agg(pl.col("customer_key").count().alias("total_customers"))
        .sort(["total_customers", "customer_segment"], descending=[True, False])
    )
