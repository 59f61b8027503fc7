"""
Data Ingestion Module
"""
from .schemas import InputSchemaError, MissingInputError, coerce_frame
from .sources import WarehouseTables
from .batch_loader import BatchLoader, BatchFileConfig, LoadResult, LoadStatus

__all__ = [
    "InputSchemaError",
    "MissingInputError",
    "coerce_frame",
    "WarehouseTables",
    "BatchLoader",
    "BatchFileConfig",
    "LoadResult",
    "LoadStatus",
]
