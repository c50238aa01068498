from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.api.v1.deps import client_ip
from trafficdesk.api.v1.serializers import deletion_request_response, offense_response
from trafficdesk.core.constants import OffenseStatus
from trafficdesk.core.database import aget_db
from trafficdesk.core.permissions import Action, require
from trafficdesk.core.security import get_current_user
from trafficdesk.models.user import User
from trafficdesk.schemas.deletion_request import DeletionRequestResponse
from trafficdesk.schemas.offense import (
    OffenseCreate,
    OffenseDeletionIntent,
    OffenseResponse,
    OffenseStatsResponse,
    OffenseStatusUpdate,
    OffenseUpdate,
)
from trafficdesk.services import deletion_service, offense_service

router = APIRouter(prefix="/offenses", tags=["offenses"])


@router.get("", response_model=List[OffenseResponse])
async def get_offenses(
    status: Optional[OffenseStatus] = None,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(get_current_user)
):
    """Drivers see their own offenses; staff see all of them"""
    offenses = await offense_service.list_offenses(db, user, status)
    return [offense_response(offense) for offense in offenses]


@router.post("", response_model=OffenseResponse, status_code=201)
async def create_offense(
    payload: OffenseCreate,
    request: Request,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.CREATE_OFFENSE))
):
    offense = await offense_service.create_offense(db, user, payload, client_ip(request))
    return offense_response(offense)


@router.get("/stats", response_model=OffenseStatsResponse)
async def get_offense_stats(
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(get_current_user)
):
    return await offense_service.offense_stats(db, user)


@router.get("/recent", response_model=List[OffenseResponse])
async def get_recent_offenses(
    driverEmail: Optional[str] = None,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(get_current_user)
):
    """Five most recent offenses. driverEmail only narrows the list for staff."""
    offenses = await offense_service.recent_offenses(db, user, driverEmail)
    return [offense_response(offense) for offense in offenses]


@router.get("/{offense_id}", response_model=OffenseResponse)
async def get_offense(
    offense_id: int,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(get_current_user)
):
    offense = await offense_service.get_offense(db, user, offense_id)
    return offense_response(offense)


@router.put("/{offense_id}", response_model=OffenseResponse)
async def update_offense(
    offense_id: int,
    payload: OffenseUpdate,
    request: Request,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.EDIT_OFFENSE))
):
    offense = await offense_service.update_offense(db, user, offense_id, payload, client_ip(request))
    return offense_response(offense)


@router.patch("/{offense_id}/status", response_model=OffenseResponse)
async def update_offense_status(
    offense_id: int,
    payload: OffenseStatusUpdate,
    request: Request,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.UPDATE_OFFENSE_STATUS))
):
    offense = await offense_service.update_offense_status(
        db, user, offense_id, payload.status, client_ip(request)
    )
    return offense_response(offense)


@router.post("/{offense_id}", response_model=DeletionRequestResponse, status_code=201)
@router.delete("/{offense_id}", response_model=DeletionRequestResponse, status_code=201)
async def request_offense_deletion(
    offense_id: int,
    payload: OffenseDeletionIntent,
    request: Request,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.REQUEST_DELETION))
):
    """Offenses are never deleted directly; this files a request for superadmin review"""
    deletion_request = await deletion_service.submit_deletion_request(
        db, user, offense_id, payload.reason, client_ip(request)
    )
    return deletion_request_response(deletion_request)
