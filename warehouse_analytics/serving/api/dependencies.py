"""
API Dependencies

Loads the warehouse relations from the configured database per request.
"""

from datetime import date
from typing import Optional

import structlog
from fastapi import HTTPException

from warehouse_analytics.database.connection import get_engine
from warehouse_analytics.ingestion.schemas import InputSchemaError, MissingInputError
from warehouse_analytics.ingestion.sources import WarehouseTables

logger = structlog.get_logger(__name__)


def get_tables() -> WarehouseTables:
    """
    FastAPI dependency for the warehouse relations.

    Raises:
        HTTPException: 503 when the database or one of its tables is unavailable
            or does not fit its schema
    """
    try:
        return WarehouseTables.from_database(get_engine())
    except MissingInputError as e:
        logger.warning("Warehouse tables unavailable", relations=e.relations)
        raise HTTPException(status_code=503, detail=str(e))
    except InputSchemaError as e:
        logger.error("Warehouse tables unreadable", relation=e.relation, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))
    except RuntimeError as e:
        logger.error("Database unavailable", error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


def resolve_as_of(as_of: Optional[date] = None) -> date:
    """Reference date of a request, today when not given"""
    return as_of or date.today()
