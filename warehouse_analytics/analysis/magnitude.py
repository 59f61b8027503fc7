"""
Magnitude Analysis

Totals compared across dimension attributes, largest first.
"""

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from .base import sales_with_customers, sales_with_products

CUSTOMER_ATTRIBUTES = ("country", "gender", "marital_status")


def _largest_first(df: pl.DataFrame, measure: str, key: str) -> pl.DataFrame:
    return df.sort([measure, key], descending=[True, False], nulls_last=True)


def customers_by(tables: WarehouseTables, column: str) -> pl.DataFrame:
    """Number of customers per value of a customer attribute"""
    if column not in CUSTOMER_ATTRIBUTES:
        raise ValueError(f"Unsupported customer attribute: {column}. Use one of {CUSTOMER_ATTRIBUTES}")

    counts = tables.customers.group_by(column).agg(
        pl.col("customer_key").count().alias("total_customers")
    )
    return _largest_first(counts, "total_customers", column)


def products_by_category(tables: WarehouseTables) -> pl.DataFrame:
    """Number of products per category"""
    counts = tables.products.group_by("category").agg(
        pl.col("product_key").count().alias("total_products")
    )
    return _largest_first(counts, "total_products", "category")


def average_cost_by_category(tables: WarehouseTables) -> pl.DataFrame:
    """Mean product cost per category"""
    costs = tables.products.group_by("category").agg(
        pl.col("cost").mean().alias("avg_cost")
    )
    return _largest_first(costs, "avg_cost", "category")


def revenue_by_category(tables: WarehouseTables) -> pl.DataFrame:
    """Sales amount per product category"""
    revenue = sales_with_products(tables).group_by("category").agg(
        pl.col("sales_amount").sum().alias("total_revenue")
    )
    return _largest_first(revenue, "total_revenue", "category")


def revenue_by_customer(tables: WarehouseTables) -> pl.DataFrame:
    """Sales amount per customer"""
    revenue = sales_with_customers(tables).group_by(
        ["customer_key", "first_name", "last_name"]
    ).agg(
        pl.col("sales_amount").sum().alias("total_revenue")
    )
    return _largest_first(revenue, "total_revenue", "customer_key")


def sold_items_by_country(tables: WarehouseTables) -> pl.DataFrame:
    """Quantity sold per customer country"""
    items = sales_with_customers(tables).group_by("country").agg(
        pl.col("quantity").sum().alias("total_sold_items")
    )
    return _largest_first(items, "total_sold_items", "country")
