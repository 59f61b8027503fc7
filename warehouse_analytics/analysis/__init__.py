"""
Warehouse Analysis Module

Exploratory, magnitude, ranking, time-series, segmentation and
part-to-whole analyses over the warehouse relations.
"""
from datetime import date
from typing import Callable, Dict

import polars as pl

from warehouse_analytics.ingestion.sources import WarehouseTables
from .exploration import date_range, distinct_countries, key_measures, product_hierarchy
from .magnitude import (
    average_cost_by_category,
    customers_by,
    products_by_category,
    revenue_by_category,
    revenue_by_customer,
    sold_items_by_country,
)
from .part_to_whole import category_contribution
from .ranking import customers_with_fewest_orders, top_customers, top_products
from .segmentation import customer_segment_counts, product_cost_ranges
from .trends import cumulative_sales, sales_over_time, yearly_product_performance

Analysis = Callable[[WarehouseTables, date], pl.DataFrame]

# Named analyses exposed by the CLI
ANALYSES: Dict[str, Analysis] = {
    "countries": lambda t, as_of: distinct_countries(t),
    "product-hierarchy": lambda t, as_of: product_hierarchy(t),
    "date-range": date_range,
    "measures": lambda t, as_of: key_measures(t),
    "customers-by-country": lambda t, as_of: customers_by(t, "country"),
    "customers-by-gender": lambda t, as_of: customers_by(t, "gender"),
    "products-by-category": lambda t, as_of: products_by_category(t),
    "cost-by-category": lambda t, as_of: average_cost_by_category(t),
    "revenue-by-category": lambda t, as_of: revenue_by_category(t),
    "revenue-by-customer": lambda t, as_of: revenue_by_customer(t),
    "items-by-country": lambda t, as_of: sold_items_by_country(t),
    "top-products": lambda t, as_of: top_products(t, n=5),
    "bottom-products": lambda t, as_of: top_products(t, n=5, bottom=True),
    "top-customers": lambda t, as_of: top_customers(t, n=10),
    "fewest-orders": lambda t, as_of: customers_with_fewest_orders(t, n=3),
    "sales-by-month": lambda t, as_of: sales_over_time(t, "month"),
    "cumulative-sales": lambda t, as_of: cumulative_sales(t, "year"),
    "product-performance": lambda t, as_of: yearly_product_performance(t),
    "cost-ranges": lambda t, as_of: product_cost_ranges(t),
    "customer-segments": lambda t, as_of: customer_segment_counts(t),
    "category-contribution": lambda t, as_of: category_contribution(t),
}

__all__ = [
    "ANALYSES",
    "average_cost_by_category",
    "category_contribution",
    "cumulative_sales",
    "customer_segment_counts",
    "customers_by",
    "customers_with_fewest_orders",
    "date_range",
    "distinct_countries",
    "key_measures",
    "product_cost_ranges",
    "product_hierarchy",
    "products_by_category",
    "revenue_by_category",
    "revenue_by_customer",
    "sales_over_time",
    "sold_items_by_country",
    "top_customers",
    "top_products",
    "yearly_product_performance",
]
