"""
Warehouse Exploration

Distinct dimension values, temporal boundaries and the headline measures
of the warehouse.
"""

from datetime import date

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.reports.metrics import months_between, whole_years_until


def distinct_countries(tables: WarehouseTables) -> pl.DataFrame:
    """Unique customer countries"""
    return (
        tables.customers.select("country")
        .unique()
        .sort("country", nulls_last=False)
    )


def product_hierarchy(tables: WarehouseTables) -> pl.DataFrame:
    """Unique category / subcategory / product name combinations"""
    columns = ["category", "subcategory", "product_name"]
    return (
        tables.products.select(columns)
        .unique()
        .sort(columns, nulls_last=False)
    )


def date_range(tables: WarehouseTables, as_of: date) -> pl.DataFrame:
    """
    First and last order date with the span in months, and the oldest and
    youngest customer birthdates with their ages on ``as_of``.

    Returns:
        Single-row DataFrame
    """
    orders = tables.sales.select(
        pl.col("order_date").min().alias("first_order_date"),
        pl.col("order_date").max().alias("last_order_date"),
        months_between(pl.col("order_date").min(), pl.col("order_date").max())
        .alias("order_range_months"),
    )
    births = tables.customers.select(
        pl.col("birthdate").min().alias("oldest_birthdate"),
        whole_years_until(pl.col("birthdate").min(), as_of).alias("oldest_age"),
        pl.col("birthdate").max().alias("youngest_birthdate"),
        whole_years_until(pl.col("birthdate").max(), as_of).alias("youngest_age"),
    )
    return pl.concat([orders, births], how="horizontal")


def _non_null_count(series: pl.Series) -> int:
    return len(series) - series.null_count()


def key_measures(tables: WarehouseTables) -> pl.DataFrame:
    """
    Headline business metrics as (measure_name, measure_value) rows.
    """
    sales, products, customers = tables.sales, tables.products, tables.customers

    measures = [
        ("Total Sales", sales["sales_amount"].sum()),
        ("Total Quantity", sales["quantity"].sum()),
        ("Average Price", sales["price"].mean()),
        ("Total Orders", sales["order_number"].drop_nulls().n_unique()),
        ("Total Products", products["product_name"].drop_nulls().n_unique()),
        ("Total Customers", _non_null_count(customers["customer_key"])),
        ("Total Customers With Orders", sales["customer_key"].drop_nulls().n_unique()),
    ]

    return pl.DataFrame(
        {
            "measure_name": [name for name, _ in measures],
            "measure_value": [None if value is None else float(value) for _, value in measures],
        },
        schema={"measure_name": pl.Utf8, "measure_value": pl.Float64},
    )
