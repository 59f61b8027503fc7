"""
Report API Endpoints

Customer and product reports computed on request from the warehouse tables.
"""

from datetime import date
from typing import List, Optional

import polars as pl
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.reports import (
    CUSTOMER_SEGMENT_RULES,
    PRODUCT_SEGMENT_RULES,
    RuleSet,
    build_customer_report,
    build_product_report,
)
from warehouse_analytics.serving.api.dependencies import get_tables, resolve_as_of

router = APIRouter()
logger = structlog.get_logger(__name__)


class CustomerReportRow(BaseModel):
    """One customer report row"""
    customer_key: int
    customer_number: Optional[str]
    customer_name: Optional[str]
    age: Optional[int]
    age_group: Optional[str]
    customer_segment: str
    last_order_date: date
    recency_months: int
    total_orders: int
    total_sales: float
    total_quantity: int
    total_products: int
    lifespan_months: int
    avg_order_value: float
    avg_monthly_spend: float


class ProductReportRow(BaseModel):
    """One product report row"""
    product_key: int
    product_name: Optional[str]
    category: Optional[str]
    subcategory: Optional[str]
    cost: Optional[float]
    last_sale_date: date
    recency_in_months: int
    product_segment: str
    lifespan_months: int
    total_orders: int
    total_sales: float
    total_quantity: int
    total_customers: int
    avg_selling_price: Optional[float]
    avg_order_revenue: float
    avg_monthly_revenue: float


class CustomerReportResponse(BaseModel):
    """Customer report, optionally filtered by segment"""
    as_of: date
    total: int
    items: List[CustomerReportRow]


class ProductReportResponse(BaseModel):
    """Product report, optionally filtered by segment"""
    as_of: date
    total: int
    items: List[ProductReportRow]


def _filter_segment(report: pl.DataFrame, rules: RuleSet, segment: Optional[str]) -> pl.DataFrame:
    if segment is None:
        return report
    if segment not in rules.labels:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown {rules.name}: {segment}. Use one of {rules.labels}",
        )
    return report.filter(pl.col(rules.name) == segment)


@router.get("/customers", response_model=CustomerReportResponse)
def customer_report(
    as_of: date = Depends(resolve_as_of),
    segment: Optional[str] = None,
    limit: int = Query(100, ge=1, le=10000),
    tables: WarehouseTables = Depends(get_tables),
) -> CustomerReportResponse:
    """Customer report as of a date, ordered by customer key."""
    report = _filter_segment(build_customer_report(tables, as_of), CUSTOMER_SEGMENT_RULES, segment)
    logger.info("Customer report served", as_of=as_of.isoformat(), segment=segment, rows=report.height)

    return CustomerReportResponse(
        as_of=as_of,
        total=report.height,
        items=[CustomerReportRow(**row) for row in report.head(limit).to_dicts()],
    )


@router.get("/products", response_model=ProductReportResponse)
def product_report(
    as_of: date = Depends(resolve_as_of),
    segment: Optional[str] = None,
    limit: int = Query(100, ge=1, le=10000),
    tables: WarehouseTables = Depends(get_tables),
) -> ProductReportResponse:
    """Product report as of a date, ordered by product key."""
    report = _filter_segment(build_product_report(tables, as_of), PRODUCT_SEGMENT_RULES, segment)
    logger.info("Product report served", as_of=as_of.isoformat(), segment=segment, rows=report.height)

    return ProductReportResponse(
        as_of=as_of,
        total=report.height,
        items=[ProductReportRow(**row) for row in report.head(limit).to_dicts()],
    )
