from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.api.v1.serializers import payment_response
from trafficdesk.core.database import aget_db
from trafficdesk.core.permissions import Action, require
from trafficdesk.core.security import get_current_user
from trafficdesk.models.user import User
from trafficdesk.schemas.payment import PaymentCreate, PaymentResponse, PaymentStatsResponse
from trafficdesk.services import payment_service

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("", response_model=List[PaymentResponse])
async def get_payments(
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(get_current_user)
):
    """Payment history, newest first. Drivers only see their own."""
    payments = await payment_service.list_payments(db, user)
    return [payment_response(payment) for payment in payments]


@router.post("", response_model=PaymentResponse, status_code=201)
async def create_payment(
    payload: PaymentCreate,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.RECORD_PAYMENT))
):
    payment = await payment_service.record_payment(db, user, payload)
    return payment_response(payment)


@router.get("/stats", response_model=PaymentStatsResponse)
async def get_payment_stats(
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(get_current_user)
):
    return await payment_service.payment_stats(db, user)
