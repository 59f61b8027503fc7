"""
Unit Tests - Segmentation Rules
"""
import pytest
import polars as pl

from warehouse_analytics.reports.rules import (
    AGE_GROUP_RULES,
    COST_RANGE_RULES,
    CUSTOMER_SEGMENT_RULES,
    PRODUCT_SEGMENT_RULES,
    RuleSet,
    SegmentRule,
)


class TestCustomerSegmentRules:
    """Tests for VIP / Regular / New"""

    @pytest.mark.parametrize(
        "lifespan, total_sales, expected",
        [
            (12, 5000.01, "VIP"),
            (12, 5000.0, "Regular"),
            (30, 120.0, "Regular"),
            (11, 99999.0, "New"),
            (0, 0.0, "New"),
        ],
    )
    def test_boundaries(self, lifespan, total_sales, expected):
        assert CUSTOMER_SEGMENT_RULES.classify(
            lifespan_months=lifespan, total_sales=total_sales
        ) == expected

    def test_expression_labels_every_row(self):
        df = pl.DataFrame({
            "lifespan_months": [3, 14, 14],
            "total_sales": [6000.0, 6000.0, 100.0],
        })

        result = df.with_columns(CUSTOMER_SEGMENT_RULES.expression())

        assert result["customer_segment"].to_list() == ["New", "VIP", "Regular"]


class TestProductSegmentRules:
    """Tests for High-Performer / Mid-Range / Low-Performer"""

    @pytest.mark.parametrize(
        "total_sales, expected",
        [
            (50000.01, "High-Performer"),
            (50000.0, "Mid-Range"),
            (10000.0, "Mid-Range"),
            (9999.99, "Low-Performer"),
            (0.0, "Low-Performer"),
        ],
    )
    def test_boundaries(self, total_sales, expected):
        assert PRODUCT_SEGMENT_RULES.classify(total_sales=total_sales) == expected


class TestAgeGroupRules:
    """Tests for age buckets"""

    @pytest.mark.parametrize(
        "age, expected",
        [
            (19, "Under 20"),
            (20, "20-29"),
            (29, "20-29"),
            (30, "30-39"),
            (40, "40-49"),
            (49, "40-49"),
            (50, "50 and above"),
            (87, "50 and above"),
        ],
    )
    def test_buckets(self, age, expected):
        assert AGE_GROUP_RULES.classify(age=age) == expected

    def test_null_age_has_no_group(self):
        df = pl.DataFrame({"age": [None, 35]}, schema={"age": pl.Int32})

        result = df.with_columns(AGE_GROUP_RULES.expression())

        assert result["age_group"].to_list() == [None, "30-39"]


class TestCostRangeRules:
    """Tests for product cost ranges"""

    @pytest.mark.parametrize(
        "cost, expected",
        [
            (99.0, "Below 100"),
            (100.0, "100-500"),
            (500.0, "100-500"),
            (500.5, "500-1000"),
            (1000.0, "500-1000"),
            (1000.5, "Above 1000"),
        ],
    )
    def test_ranges(self, cost, expected):
        assert COST_RANGE_RULES.classify(cost=cost) == expected


class TestRuleSet:
    """Tests for the rule set mechanics"""

    def test_first_matching_rule_wins(self):
        rules = RuleSet(
            name="size",
            rules=(
                SegmentRule("small", pl.col("n") < 10),
                SegmentRule("medium", pl.col("n") < 100),
            ),
            default="large",
        )

        assert rules.classify(n=5) == "small"
        assert rules.classify(n=50) == "medium"
        assert rules.classify(n=500) == "large"

    def test_labels_include_default(self):
        assert CUSTOMER_SEGMENT_RULES.labels == ["VIP", "Regular", "New"]
        assert AGE_GROUP_RULES.labels == ["Under 20", "20-29", "30-39", "40-49", "50 and above"]

    def test_empty_rule_set_rejected(self):
        with pytest.raises(ValueError):
            RuleSet(name="empty", rules=())
