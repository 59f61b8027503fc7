"""
Database Models - Star Schema Design

Relational layout of the sales warehouse. The schema consists of:

Fact Tables:
- FactSale: Sales order lines (one row per order number and product)

Dimension Tables:
- DimCustomer: Customer demographics
- DimProduct: Product catalog and categories

Report Tables:
- ReportCustomer: Materialized customer report
- ReportProduct: Materialized product report

Fact keys carry no foreign key constraints: orphan sales are loaded as-is and
tolerated by the reports through outer joins.
"""

from datetime import date
from typing import Optional

from sqlalchemy import (
    Date,
    Float,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# DIMENSION TABLES
# =============================================================================

class DimCustomer(Base):
    """Customer Dimension Table"""
    __tablename__ = "dim_customers"

    customer_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_id: Mapped[Optional[int]] = mapped_column(Integer)
    customer_number: Mapped[Optional[str]] = mapped_column(String(50))

    first_name: Mapped[Optional[str]] = mapped_column(String(50))
    last_name: Mapped[Optional[str]] = mapped_column(String(50))
    country: Mapped[Optional[str]] = mapped_column(String(50))
    marital_status: Mapped[Optional[str]] = mapped_column(String(50))
    gender: Mapped[Optional[str]] = mapped_column(String(50))
    birthdate: Mapped[Optional[date]] = mapped_column(Date)
    create_date: Mapped[Optional[date]] = mapped_column(Date)

    __table_args__ = (
        Index("ix_dim_customers_country", "country"),
    )


class DimProduct(Base):
    """Product Dimension Table"""
    __tablename__ = "dim_products"

    product_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    product_id: Mapped[Optional[int]] = mapped_column(Integer)
    product_number: Mapped[Optional[str]] = mapped_column(String(50))
    product_name: Mapped[Optional[str]] = mapped_column(String(50))

    category_id: Mapped[Optional[str]] = mapped_column(String(50))
    category: Mapped[Optional[str]] = mapped_column(String(50))
    subcategory: Mapped[Optional[str]] = mapped_column(String(50))
    maintenance: Mapped[Optional[str]] = mapped_column(String(50))

    cost: Mapped[Optional[float]] = mapped_column(Float)
    product_line: Mapped[Optional[str]] = mapped_column(String(50))
    start_date: Mapped[Optional[date]] = mapped_column(Date)

    __table_args__ = (
        Index("ix_dim_products_category", "category"),
    )


# =============================================================================
# FACT TABLES
# =============================================================================

class FactSale(Base):
    """
    Sales Fact Table

    Transactional grain: one row per product within an order.
    """
    __tablename__ = "fact_sales"

    sale_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_number: Mapped[Optional[str]] = mapped_column(String(50))
    product_key: Mapped[Optional[int]] = mapped_column(Integer)
    customer_key: Mapped[Optional[int]] = mapped_column(Integer)

    order_date: Mapped[Optional[date]] = mapped_column(Date)
    shipping_date: Mapped[Optional[date]] = mapped_column(Date)
    due_date: Mapped[Optional[date]] = mapped_column(Date)

    sales_amount: Mapped[Optional[float]] = mapped_column(Float)
    quantity: Mapped[Optional[int]] = mapped_column(Integer)
    price: Mapped[Optional[float]] = mapped_column(Float)

    __table_args__ = (
        Index("ix_fact_sales_customer", "customer_key"),
        Index("ix_fact_sales_product", "product_key"),
        Index("ix_fact_sales_order_date", "order_date"),
    )


# =============================================================================
# REPORT TABLES
# =============================================================================

class ReportCustomer(Base):
    """Materialized customer report, replaced on every pipeline run"""
    __tablename__ = "report_customers"

    customer_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_number: Mapped[Optional[str]] = mapped_column(String(50))
    customer_name: Mapped[Optional[str]] = mapped_column(String(101))
    age: Mapped[Optional[int]] = mapped_column(Integer)
    age_group: Mapped[Optional[str]] = mapped_column(String(20))
    customer_segment: Mapped[str] = mapped_column(String(20))
    last_order_date: Mapped[date] = mapped_column(Date)
    recency_months: Mapped[int] = mapped_column(Integer)
    total_orders: Mapped[int] = mapped_column(Integer)
    total_sales: Mapped[float] = mapped_column(Float)
    total_quantity: Mapped[Optional[int]] = mapped_column(Integer)
    total_products: Mapped[int] = mapped_column(Integer)
    lifespan_months: Mapped[int] = mapped_column(Integer)
    avg_order_value: Mapped[float] = mapped_column(Float)
    avg_monthly_spend: Mapped[float] = mapped_column(Float)

    __table_args__ = (
        Index("ix_report_customers_segment", "customer_segment"),
    )


class ReportProduct(Base):
    """Materialized product report, replaced on every pipeline run"""
    __tablename__ = "report_products"

    product_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    product_name: Mapped[Optional[str]] = mapped_column(String(50))
    category: Mapped[Optional[str]] = mapped_column(String(50))
    subcategory: Mapped[Optional[str]] = mapped_column(String(50))
    cost: Mapped[Optional[float]] = mapped_column(Float)
    last_sale_date: Mapped[date] = mapped_column(Date)
    recency_in_months: Mapped[int] = mapped_column(Integer)
    product_segment: Mapped[str] = mapped_column(String(20))
    lifespan_months: Mapped[int] = mapped_column(Integer)
    total_orders: Mapped[int] = mapped_column(Integer)
    total_sales: Mapped[float] = mapped_column(Float)
    total_quantity: Mapped[Optional[int]] = mapped_column(Integer)
    total_customers: Mapped[int] = mapped_column(Integer)
    avg_selling_price: Mapped[Optional[float]] = mapped_column(Float)
    avg_order_revenue: Mapped[float] = mapped_column(Float)
    avg_monthly_revenue: Mapped[float] = mapped_column(Float)

    __table_args__ = (
        Index("ix_report_products_segment", "product_segment"),
    )


# Table names the ingestion and report layers address by relation
WAREHOUSE_TABLES = {
    "customers": DimCustomer.__table__,
    "products": DimProduct.__table__,
    "sales": FactSale.__table__,
}

REPORT_TABLES = {
    "customers": ReportCustomer.__table__,
    "products": ReportProduct.__table__,
}
