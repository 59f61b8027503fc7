"""
Report Metric Helpers

Calendar arithmetic and guarded ratios shared by the customer and product
reports. Every helper returns a polars expression.

Zero-denominator policy:
- average_per_order: 0 when there are no orders
- average_per_month: the total itself when the lifespan is 0 months
- average_unit_price: lines with a quantity of 0 are left out entirely
"""

from datetime import date
from typing import Union

import polars as pl

IntoExpr = Union[str, pl.Expr]


def _expr(value: IntoExpr) -> pl.Expr:
    return pl.col(value) if isinstance(value, str) else value


def month_index(value: IntoExpr) -> pl.Expr:
    """Months since year 0 of a date expression"""
    expr = _expr(value)
    return expr.dt.year().cast(pl.Int32) * 12 + expr.dt.month().cast(pl.Int32)


def months_between(start: IntoExpr, end: IntoExpr) -> pl.Expr:
    """
    Calendar months from start to end.

    Counts month boundaries crossed, so 2023-01-31 to 2023-02-01 is one month
    and any two days of the same month are zero months apart.
    """
    return month_index(end) - month_index(start)


def months_until(start: IntoExpr, as_of: date) -> pl.Expr:
    """Calendar months from a date expression to a fixed reference date"""
    return pl.lit(as_of.year * 12 + as_of.month, dtype=pl.Int32) - month_index(start)


def whole_years_until(birthdate: IntoExpr, as_of: date) -> pl.Expr:
    """Completed years from a date expression to a fixed reference date"""
    # Birthday-aware, unlike months_between which counts calendar boundaries
    expr = _expr(birthdate)
    years = pl.lit(as_of.year, dtype=pl.Int32) - expr.dt.year().cast(pl.Int32)
    before_anniversary = (expr.dt.month() > as_of.month) | (
        (expr.dt.month() == as_of.month) & (expr.dt.day() > as_of.day)
    )
    return years - before_anniversary.cast(pl.Int32)


def average_per_order(total: IntoExpr, orders: IntoExpr) -> pl.Expr:
    """total / orders, 0.0 when orders is 0"""
    orders = _expr(orders)
    return (
        pl.when(orders == 0)
        .then(pl.lit(0.0))
        .otherwise(_expr(total) / orders)
    )


def average_per_month(total: IntoExpr, months: IntoExpr) -> pl.Expr:
    """total / months, the total itself when months is 0"""
    months = _expr(months)
    total = _expr(total)
    return (
        pl.when(months == 0)
        .then(total.cast(pl.Float64))
        .otherwise(total / months)
    )


def average_unit_price(amount: IntoExpr, quantity: IntoExpr, decimals: int = 1) -> pl.Expr:
    """
    Aggregation: mean of amount / quantity over lines with a positive quantity,
    rounded. Null when no line qualifies.
    """
    quantity = _expr(quantity)
    unit_price = pl.when(quantity > 0).then(_expr(amount) / quantity)
    return unit_price.mean().round(decimals)
