"""
Reporting Module
"""
from .customer_report import CUSTOMER_REPORT_COLUMNS, build_customer_report
from .product_report import PRODUCT_REPORT_COLUMNS, build_product_report
from .pipeline import ReportPipeline, ReportResult
from .rules import (
    AGE_GROUP_RULES,
    COST_RANGE_RULES,
    CUSTOMER_SEGMENT_RULES,
    PRODUCT_SEGMENT_RULES,
    RuleSet,
    SegmentRule,
)

__all__ = [
    "CUSTOMER_REPORT_COLUMNS",
    "PRODUCT_REPORT_COLUMNS",
    "build_customer_report",
    "build_product_report",
    "ReportPipeline",
    "ReportResult",
    "AGE_GROUP_RULES",
    "COST_RANGE_RULES",
    "CUSTOMER_SEGMENT_RULES",
    "PRODUCT_SEGMENT_RULES",
    "RuleSet",
    "SegmentRule",
]
