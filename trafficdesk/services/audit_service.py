import logging
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.constants import AuditAction
from trafficdesk.core.exceptions import AuditWriteError
from trafficdesk.models.audit_log import AuditLog
from trafficdesk.models.base import utcnow

logger = logging.getLogger(__name__)


async def record(
    db: AsyncSession,
    user_id: int,
    action: AuditAction,
    details: Dict[str, Any],
    ip_address: Optional[str] = None,
) -> AuditLog:
    """
    Append an audit entry to the caller's transaction.

    The entry is flushed immediately so a failed write aborts the business
    operation that triggered it instead of being lost at commit time.
    """
    entry = AuditLog(
        user_id=user_id,
        action=action,
        details=jsonable_encoder(details),
        timestamp=utcnow(),
        ip_address=ip_address,
    )
    db.add(entry)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        logger.error("Audit log write failed for %s by user %s", action.value, user_id, exc_info=True)
        raise AuditWriteError(action.value) from exc
    return entry


async def list_entries(
    db: AsyncSession,
    action: Optional[AuditAction] = None,
    user_id: Optional[int] = None,
) -> List[AuditLog]:
    query = select(AuditLog)
    if action is not None:
        query = query.where(AuditLog.action == action)
    if user_id is not None:
        query = query.where(AuditLog.user_id == user_id)
    query = query.order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    result = await db.execute(query)
    return list(result.scalars().all())
