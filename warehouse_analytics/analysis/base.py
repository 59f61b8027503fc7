"""
Shared joins for the warehouse analyses.
"""

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables


def dated_sales(tables: WarehouseTables) -> pl.DataFrame:
    """Sales lines that carry an order date"""
    return tables.sales.filter(pl.col("order_date").is_not_null())


def sales_with_products(tables: WarehouseTables, dated_only: bool = False) -> pl.DataFrame:
    """Sales lines left-joined to their product attributes"""
    sales = dated_sales(tables) if dated_only else tables.sales
    products = tables.products.select(
        "product_key", "product_name", "category", "subcategory", "cost",
    )
    return sales.join(products, on="product_key", how="left")


def sales_with_customers(tables: WarehouseTables, dated_only: bool = False) -> pl.DataFrame:
    """Sales lines left-joined to their customer attributes"""
    sales = dated_sales(tables) if dated_only else tables.sales
    customers = tables.customers.select(
        "customer_key", "first_name", "last_name", "country", "gender",
    )
    return sales.join(customers, on="customer_key", how="left")
