import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.exceptions import StorageWriteError, TrafficDeskError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str):
    """
    Commit everything written inside the block, or nothing.

    Domain errors raised inside the block roll back and propagate unchanged;
    storage errors roll back and surface as ``StorageWriteError``.
    """
    try:
        yield
        await db.commit()
    except TrafficDeskError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Storage write failed during %s", operation)
        raise StorageWriteError(f"Failed to {operation}") from exc
