"""
Ranking Analysis

Top and bottom performers among products and customers.
"""

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from .base import sales_with_customers, sales_with_products
from .magnitude import revenue_by_customer


def product_revenue(tables: WarehouseTables) -> pl.DataFrame:
    """Sales amount per product name"""
    return sales_with_products(tables).group_by("product_name").agg(
        pl.col("sales_amount").sum().alias("total_revenue")
    )


def top_products(tables: WarehouseTables, n: int = 5, bottom: bool = False) -> pl.DataFrame:
    """
    Products ranked by revenue.

    Ties share a rank and the next rank is skipped, so more than ``n`` rows
    come back when products tie at the cut-off.

    Args:
        n: Highest rank to keep
        bottom: Rank lowest revenue first
    """
    ranked = product_revenue(tables).with_columns(
        pl.col("total_revenue")
        .rank(method="min", descending=not bottom)
        .cast(pl.Int64)
        .alias("rank_products")
    )
    return (
        ranked.filter(pl.col("rank_products") <= n)
        .sort(["rank_products", "product_name"], nulls_last=True)
    )


def top_customers(tables: WarehouseTables, n: int = 10) -> pl.DataFrame:
    """The ``n`` customers with the highest revenue"""
    return revenue_by_customer(tables).head(n)


def customers_with_fewest_orders(tables: WarehouseTables, n: int = 3) -> pl.DataFrame:
    """The ``n`` customers with the fewest distinct orders"""
    orders = sales_with_customers(tables).group_by(
        ["customer_key", "first_name", "last_name"]
    ).agg(
        pl.col("order_number").drop_nulls().n_unique().alias("total_orders")
    )
    return orders.sort(["total_orders", "customer_key"], nulls_last=True).head(n)
