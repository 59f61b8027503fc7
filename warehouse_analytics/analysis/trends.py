"""
Change Over Time Analysis

Sales trends by period, running totals and year-over-year product
performance. Only sales lines with an order date take part.
"""

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from .base import dated_sales, sales_with_products

GRANULARITIES = {
    "year": ("1y", "%Y"),
    "month": ("1mo", "%Y-%b"),
}


def _period(granularity: str) -> tuple:
    try:
        return GRANULARITIES[granularity]
    except KeyError:
        raise ValueError(
            f"Unsupported granularity: {granularity}. Use one of {sorted(GRANULARITIES)}"
        ) from None


def sales_over_time(tables: WarehouseTables, granularity: str = "month") -> pl.DataFrame:
    """
    Sales, distinct customers and quantity per period.

    Returns:
        order_period (period start), period_label, total_sales,
        total_customers, total_quantity in chronological order
    """
    every, label_format = _period(granularity)

    trend = (
        dated_sales(tables)
        .group_by(pl.col("order_date").dt.truncate(every).alias("order_period"))
        .agg([
            pl.col("sales_amount").sum().alias("total_sales"),
            pl.col("customer_key").drop_nulls().n_unique().alias("total_customers"),
            pl.col("quantity").sum().alias("total_quantity"),
        ])
        .sort("order_period")
    )
    return trend.with_columns(
        pl.col("order_period").dt.strftime(label_format).alias("period_label")
    ).select(
        "order_period", "period_label", "total_sales", "total_customers", "total_quantity",
    )


def cumulative_sales(tables: WarehouseTables, granularity: str = "year") -> pl.DataFrame:
    """
    Running total of sales and running average of the per-period average
    price, in chronological order.
    """
    every, _ = _period(granularity)

    periods = (
        dated_sales(tables)
        .group_by(pl.col("order_date").dt.truncate(every).alias("order_period"))
        .agg([
            pl.col("sales_amount").sum().alias("total_sales"),
            pl.col("price").mean().alias("avg_price"),
        ])
        .sort("order_period")
    )
    return periods.with_columns(
        pl.col("total_sales").cum_sum().alias("running_total_sales"),
        (pl.col("avg_price").cum_sum() / pl.col("avg_price").cum_count())
        .alias("moving_average_price"),
    )


def _compare(current: pl.Expr, reference: pl.Expr, above: str, below: str, same: str) -> pl.Expr:
    return (
        pl.when(current > reference).then(pl.lit(above))
        .when(current < reference).then(pl.lit(below))
        .otherwise(pl.lit(same))
    )


def yearly_product_performance(tables: WarehouseTables) -> pl.DataFrame:
    """
    Yearly sales per product compared with the product's average year and
    with its previous year.
    """
    yearly = (
        sales_with_products(tables, dated_only=True)
        .group_by([
            pl.col("order_date").dt.year().alias("order_year"),
            "product_name",
        ])
        .agg(pl.col("sales_amount").sum().alias("current_sales"))
        .sort(["product_name", "order_year"], nulls_last=True)
    )

    current = pl.col("current_sales")
    performance = yearly.with_columns(
        current.mean().over("product_name").alias("avg_sales"),
        current.shift(1).over("product_name").alias("py_sales"),
    )
    return performance.with_columns(
        (current - pl.col("avg_sales")).alias("diff_avg"),
        _compare(current, pl.col("avg_sales"), "Above Avg", "Below Avg", "Avg").alias("avg_change"),
        (current - pl.col("py_sales")).alias("diff_py"),
        _compare(current, pl.col("py_sales"), "Increase", "Decrease", "No Change").alias("py_change"),
    ).select(
        "order_year", "product_name", "current_sales",
        "avg_sales", "diff_avg", "avg_change",
        "py_sales", "diff_py", "py_change",
    )
