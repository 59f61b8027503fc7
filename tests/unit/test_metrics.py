"""
Unit Tests - Report Metrics
"""
from datetime import date

import pytest
import polars as pl

from warehouse_analytics.reports.metrics import (
    average_per_month,
    average_per_order,
    average_unit_price,
    months_between,
    months_until,
    whole_years_until,
)
from warehouse_analytics.reports.rules import AGE_GROUP_RULES


class TestCalendarMonths:
    """Month differences count calendar boundaries"""

    @pytest.mark.parametrize(
        "start, end, expected",
        [
            (date(2023, 1, 1), date(2023, 4, 1), 3),
            (date(2023, 1, 31), date(2023, 2, 1), 1),
            (date(2023, 3, 1), date(2023, 3, 31), 0),
            (date(2020, 11, 15), date(2022, 2, 1), 15),
        ],
    )
    def test_months_between(self, start, end, expected):
        df = pl.DataFrame({"start": [start], "end": [end]})

        assert df.select(months_between("start", "end")).item() == expected

    def test_months_until_reference_date(self):
        df = pl.DataFrame({"last": [date(2021, 3, 5), date(2022, 12, 31)]})

        result = df.select(months_until("last", date(2023, 1, 1)).alias("m"))

        assert result["m"].to_list() == [22, 1]


class TestWholeYears:
    """Age is the number of completed years"""

    @pytest.mark.parametrize(
        "birthdate, expected",
        [
            (date(1980, 5, 15), 42),
            (date(1990, 1, 1), 33),
            (date(1990, 1, 2), 32),
            (date(2000, 12, 31), 22),
        ],
    )
    def test_birthday_aware(self, birthdate, expected):
        df = pl.DataFrame({"birthdate": [birthdate]})

        assert df.select(whole_years_until("birthdate", date(2023, 1, 1))).item() == expected

    def test_null_birthdate(self):
        df = pl.DataFrame({"birthdate": [None]}, schema={"birthdate": pl.Date})

        assert df.select(whole_years_until("birthdate", date(2023, 1, 1))).item() is None

    def test_birthday_not_yet_reached_keeps_younger_group(self):
        df = pl.DataFrame({"birthdate": [date(2004, 12, 1)]})

        age = df.select(whole_years_until("birthdate", date(2024, 6, 15))).item()

        assert age == 19
        assert AGE_GROUP_RULES.classify(age=age) == "Under 20"


class TestGuardedRatios:
    """Zero denominators never raise"""

    def test_average_per_order(self):
        df = pl.DataFrame({"total": [100.0, 90.0], "orders": [0, 3]})

        result = df.select(average_per_order("total", "orders").alias("v"))

        assert result["v"].to_list() == [0.0, 30.0]

    def test_average_per_month_falls_back_to_total(self):
        df = pl.DataFrame({"total": [6000.0, 6000.0], "months": [0, 3]})

        result = df.select(average_per_month("total", "months").alias("v"))

        assert result["v"].to_list() == [6000.0, 2000.0]

    def test_average_unit_price_skips_zero_quantity(self):
        df = pl.DataFrame({"amount": [30.0, 0.0, 50.0], "quantity": [2, 0, 1]})

        result = df.select(average_unit_price("amount", "quantity"))

        assert result.item() == 32.5

    def test_average_unit_price_rounds_to_one_decimal(self):
        df = pl.DataFrame({"amount": [10.0, 20.0], "quantity": [3, 3]})

        assert df.select(average_unit_price("amount", "quantity")).item() == 5.0

    def test_average_unit_price_without_quantity_is_null(self):
        df = pl.DataFrame({"amount": [0.0], "quantity": [0]})

        assert df.select(average_unit_price("amount", "quantity")).item() is None
