from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.api.v1.deps import client_ip
from trafficdesk.api.v1.serializers import deletion_request_detail, deletion_request_response
from trafficdesk.core.constants import DeletionRequestStatus
from trafficdesk.core.database import aget_db
from trafficdesk.core.permissions import Action, require
from trafficdesk.models.user import User
from trafficdesk.schemas.deletion_request import (
    DeletionRequestCreate,
    DeletionRequestDecision,
    DeletionRequestDetail,
    DeletionRequestResponse,
)
from trafficdesk.services import deletion_service

router = APIRouter(prefix="/deletion-requests", tags=["deletion-requests"])


@router.get("", response_model=List[DeletionRequestDetail])
async def get_deletion_requests(
    status: Optional[DeletionRequestStatus] = None,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.VIEW_DELETION_QUEUE))
):
    """Review queue, newest first"""
    rows = await deletion_service.list_deletion_requests(db, user, status)
    return [deletion_request_detail(deletion_request, offense) for deletion_request, offense in rows]


@router.post("", response_model=DeletionRequestResponse, status_code=201)
async def create_deletion_request(
    payload: DeletionRequestCreate,
    request: Request,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.REQUEST_DELETION))
):
    deletion_request = await deletion_service.submit_deletion_request(
        db, user, payload.offenseId, payload.reason, client_ip(request)
    )
    return deletion_request_response(deletion_request)


@router.get("/{request_id}", response_model=DeletionRequestDetail)
async def get_deletion_request(
    request_id: int,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.VIEW_DELETION_QUEUE))
):
    deletion_request, offense = await deletion_service.get_deletion_request(db, user, request_id)
    return deletion_request_detail(deletion_request, offense)


@router.patch("/{request_id}", response_model=DeletionRequestResponse)
async def resolve_deletion_request(
    request_id: int,
    decision: DeletionRequestDecision,
    request: Request,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.RESOLVE_DELETION))
):
    """Approve (offense is removed) or reject (offense is kept) a pending request"""
    deletion_request = await deletion_service.resolve_deletion_request(
        db, user, request_id, decision.status, client_ip(request)
    )
    return deletion_request_response(deletion_request)
