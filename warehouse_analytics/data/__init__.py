"""
Synthetic Data Module
"""
from .generators import WarehouseDataGenerator

__all__ = ["WarehouseDataGenerator"]
