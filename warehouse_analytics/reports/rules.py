"""
Segmentation Rules

Fixed-threshold bucketing expressed as ordered (predicate, label) rules.
Rules are evaluated top to bottom and the first match wins; rows matching
no rule get the rule set's default label.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import polars as pl


@dataclass(frozen=True, eq=False)
class SegmentRule:
    """A single labelled predicate"""
    label: str
    predicate: pl.Expr


@dataclass(frozen=True, eq=False)
class RuleSet:
    """
    Ordered segmentation rules producing one label column.

    Example:
        frame.with_columns(CUSTOMER_SEGMENT_RULES.expression())
        CUSTOMER_SEGMENT_RULES.classify(lifespan_months=12, total_sales=5000.0)
    """
    name: str
    rules: Sequence[SegmentRule] = field(default_factory=tuple)
    default: Optional[str] = None

    def __post_init__(self):
        if not self.rules:
            raise ValueError(f"Rule set '{self.name}' needs at least one rule")

    @property
    def labels(self) -> list:
        labels = [rule.label for rule in self.rules]
        if self.default is not None and self.default not in labels:
            labels.append(self.default)
        return labels

    def expression(self) -> pl.Expr:
        """The rule chain as a single when/then expression named after the set"""
        first, *rest = self.rules
        chain = pl.when(first.predicate).then(pl.lit(first.label))
        for rule in rest:
            chain = chain.when(rule.predicate).then(pl.lit(rule.label))
        return chain.otherwise(pl.lit(self.default, dtype=pl.Utf8)).alias(self.name)

    def classify(self, **values: Any) -> Optional[str]:
        """Label a single record given its column values"""
        frame = pl.DataFrame({column: [value] for column, value in values.items()})
        return frame.select(self.expression()).item()


AGE_GROUP_RULES = RuleSet(
    name="age_group",
    rules=(
        SegmentRule("Under 20", pl.col("age") < 20),
        SegmentRule("20-29", pl.col("age").is_between(20, 29)),
        SegmentRule("30-39", pl.col("age").is_between(30, 39)),
        SegmentRule("40-49", pl.col("age").is_between(40, 49)),
        SegmentRule("50 and above", pl.col("age") >= 50),
    ),
)

CUSTOMER_SEGMENT_RULES = RuleSet(
    name="customer_segment",
    rules=(
        SegmentRule("VIP", (pl.col("lifespan_months") >= 12) & (pl.col("total_sales") > 5000)),
        SegmentRule("Regular", (pl.col("lifespan_months") >= 12) & (pl.col("total_sales") <= 5000)),
    ),
    default="New",
)

PRODUCT_SEGMENT_RULES = RuleSet(
    name="product_segment",
    rules=(
        SegmentRule("High-Performer", pl.col("total_sales") > 50000),
        SegmentRule("Mid-Range", pl.col("total_sales").is_between(10000, 50000)),
    ),
    default="Low-Performer",
)

# Overlapping bounds at 500 resolve to the lower bucket by rule order
COST_RANGE_RULES = RuleSet(
    name="cost_range",
    rules=(
        SegmentRule("Below 100", pl.col("cost") < 100),
        SegmentRule("100-500", pl.col("cost").is_between(100, 500)),
        SegmentRule("500-1000", pl.col("cost").is_between(500, 1000)),
    ),
    default="Above 1000",
)
