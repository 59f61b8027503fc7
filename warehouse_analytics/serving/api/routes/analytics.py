"""
Analytics API Endpoints

Headline measures, rankings, contribution and trend analyses for dashboards.
"""

from datetime import date
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from warehouse_analytics.analysis import (
    category_contribution,
    key_measures,
    sales_over_time,
    top_products,
)
from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.serving.api.dependencies import get_tables

router = APIRouter()
logger = structlog.get_logger(__name__)


class Measure(BaseModel):
    """Named business measure"""
    measure_name: str
    measure_value: Optional[float]


class RankedProduct(BaseModel):
    """Product revenue with its rank"""
    product_name: Optional[str]
    total_revenue: float
    rank_products: int


class CategoryShare(BaseModel):
    """Category sales and share of overall sales"""
    category: Optional[str]
    total_sales: float
    overall_sales: float
    percentage_of_total: float


class PeriodSales(BaseModel):
    """Sales for one period"""
    order_period: date
    period_label: str
    total_sales: float
    total_customers: int
    total_quantity: int


@router.get("/measures", response_model=List[Measure])
def get_measures(tables: WarehouseTables = Depends(get_tables)) -> List[Measure]:
    """Total sales, quantity, average price, orders, products and customers."""
    return [Measure(**row) for row in key_measures(tables).to_dicts()]


@router.get("/top-products", response_model=List[RankedProduct])
def get_top_products(
    n: int = Query(5, ge=1, le=100),
    bottom: bool = False,
    tables: WarehouseTables = Depends(get_tables),
) -> List[RankedProduct]:
    """
    Best (or worst) selling products by revenue.

    Tied products share a rank.
    """
    ranked = top_products(tables, n=n, bottom=bottom)
    logger.debug("Top products ranked", n=n, bottom=bottom, rows=ranked.height)
    return [RankedProduct(**row) for row in ranked.to_dicts()]


@router.get("/category-contribution", response_model=List[CategoryShare])
def get_category_contribution(tables: WarehouseTables = Depends(get_tables)) -> List[CategoryShare]:
    """Share of each category in overall sales, largest first."""
    return [CategoryShare(**row) for row in category_contribution(tables).to_dicts()]


@router.get("/sales-over-time", response_model=List[PeriodSales])
def get_sales_over_time(
    granularity: str = Query("month"),
    tables: WarehouseTables = Depends(get_tables),
) -> List[PeriodSales]:
    """Sales, customers and quantity per month or year."""
    try:
        trend = sales_over_time(tables, granularity)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [PeriodSales(**row) for row in trend.to_dicts()]
