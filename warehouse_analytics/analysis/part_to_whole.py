"""
Part-to-Whole Analysis

Contribution of each product category to overall sales.
"""

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from .base import sales_with_products


def category_contribution(tables: WarehouseTables) -> pl.DataFrame:
    """
    Category sales with their share of overall sales in percent, rounded to
    two decimals, largest first.
    """
    category_sales = sales_with_products(tables).group_by("category").agg(
        pl.col("sales_amount").sum().alias("total_sales")
    )

    overall = pl.col("total_sales").sum()
    return (
        category_sales.with_columns(overall.alias("overall_sales"))
        .with_columns(
            pl.when(pl.col("overall_sales") == 0)
            .then(pl.lit(0.0))
            .otherwise(pl.col("total_sales") / pl.col("overall_sales") * 100)
            .round(2)
            .alias("percentage_of_total")
        )
        .sort(["total_sales", "category"], descending=[True, False], nulls_last=True)
    )
