"""
API Module
"""
from .dependencies import get_tables
from .middleware import RequestLoggingMiddleware

__all__ = [
    "get_tables",
    "RequestLoggingMiddleware",
]
