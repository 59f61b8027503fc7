"""
Product Report

Consolidates product sales performance into one row per product:
- product, category and cost details
- order, customer, sales and quantity totals
- lifespan and recency in months
- High-Performer / Mid-Range / Low-Performer segment
- average selling price, average order revenue, average monthly revenue
"""

from datetime import date

import polars as pl
import structlog

from warehouse_analytics.ingestion.sources import WarehouseTables
from .metrics import (
    average_per_month,
    average_per_order,
    average_unit_price,
    months_between,
    months_until,
)
from .rules import PRODUCT_SEGMENT_RULES

logger = structlog.get_logger(__name__)


PRODUCT_REPORT_COLUMNS = [
    "product_key",
    "product_name",
    "category",
    "subcategory",
    "cost",
    "last_sale_date",
    "recency_in_months",
    "product_segment",
    "lifespan_months",
    "total_orders",
    "total_sales",
    "total_quantity",
    "total_customers",
    "avg_selling_price",
    "avg_order_revenue",
    "avg_monthly_revenue",
]


def product_base(tables: WarehouseTables) -> pl.DataFrame:
    """Dated sales lines with a product key, joined to their product"""
    sales = tables.sales.filter(
        pl.col("order_date").is_not_null() & pl.col("product_key").is_not_null()
    ).select(
        "order_number", "product_key", "customer_key", "order_date",
        "sales_amount", "quantity",
    )
    products = tables.products.select(
        "product_key", "product_name", "category", "subcategory", "cost",
    )
    return sales.join(products, on="product_key", how="left")


def build_product_report(tables: WarehouseTables, as_of: date) -> pl.DataFrame:
    """
    Build the product report.

    Args:
        tables: Warehouse input relations
        as_of: Reference date for recency

    Returns:
        One row per product key with at least one dated sale, ordered by key
    """
    base = product_base(tables)

    aggregated = base.group_by(
        ["product_key", "product_name", "category", "subcategory", "cost"]
    ).agg([
        months_between(pl.col("order_date").min(), pl.col("order_date").max())
        .alias("lifespan_months"),
        pl.col("order_date").max().alias("last_sale_date"),
        pl.col("order_number").drop_nulls().n_unique().alias("total_orders"),
        pl.col("customer_key").drop_nulls().n_unique().alias("total_customers"),
        pl.col("sales_amount").sum().alias("total_sales"),
        pl.col("quantity").sum().alias("total_quantity"),
        average_unit_price("sales_amount", "quantity").alias("avg_selling_price"),
    ])

    report = aggregated.with_columns(
        months_until("last_sale_date", as_of).alias("recency_in_months"),
        PRODUCT_SEGMENT_RULES.expression(),
        average_per_order("total_sales", "total_orders").alias("avg_order_revenue"),
        average_per_month("total_sales", "lifespan_months").alias("avg_monthly_revenue"),
    )

    report = report.select(PRODUCT_REPORT_COLUMNS).sort("product_key")

    logger.info(
        "Product report built",
        rows=report.height,
        sales_lines=base.height,
        as_of=as_of.isoformat(),
    )
    return report
