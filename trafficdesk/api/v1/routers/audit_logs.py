from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.api.v1.serializers import audit_entry_response
from trafficdesk.core.constants import AuditAction
from trafficdesk.core.database import aget_db
from trafficdesk.core.permissions import Action, require
from trafficdesk.models.user import User
from trafficdesk.schemas.audit_log import AuditLogEntryResponse
from trafficdesk.services import audit_service

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=List[AuditLogEntryResponse])
async def get_audit_logs(
    action: Optional[AuditAction] = None,
    userId: Optional[int] = None,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.VIEW_AUDIT_LOG))
):
    """Audit trail, newest first"""
    entries = await audit_service.list_entries(db, action=action, user_id=userId)
    return [audit_entry_response(entry) for entry in entries]
