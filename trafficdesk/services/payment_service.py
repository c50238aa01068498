import logging
from datetime import datetime, time
from typing import Any, Dict, List

from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.constants import OffenseStatus, PaymentMethod, PaymentStatus, UserRole
from trafficdesk.core.exceptions import (
    ForbiddenError,
    OffenseAlreadyPaidError,
    OffenseNotFoundError,
    ValidationError,
)
from trafficdesk.core.permissions import Action, ensure_access
from trafficdesk.models.base import utcnow
from trafficdesk.models.offenses import TrafficOffense
from trafficdesk.models.payment import Payment
from trafficdesk.models.user import User
from trafficdesk.schemas.payment import PaymentCreate
from trafficdesk.services import offense_store
from trafficdesk.services.offense_service import visible_email
from trafficdesk.services.transaction import atomic

logger = logging.getLogger(__name__)


def check_payment_method(actor: User, payload: PaymentCreate) -> None:
    """Staff take cash at the desk; drivers pay electronically."""
    method = payload.paymentMethod
    if actor.role is UserRole.DRIVER and method is PaymentMethod.CASH:
        raise ForbiddenError("Drivers can only use Mobile Money or Card payments")
    if actor.role is not UserRole.DRIVER and method is not PaymentMethod.CASH:
        raise ForbiddenError("Officers and administrators can only process cash payments")

    if method is PaymentMethod.MOBILE_MONEY:
        details = payload.mobileDetails
        if not details or not details.provider or not details.number:
            raise ValidationError(
                "Mobile money payments require provider and phone number",
                field="mobileDetails",
            )


def _scoped(query, driver_email):
    if driver_email is not None:
        query = query.where(func.lower(Payment.driver_email) == driver_email.lower())
    return query


async def record_payment(db: AsyncSession, actor: User, payload: PaymentCreate) -> Payment:
    offense = await offense_store.find_by_id(db, payload.offenseId)
    if not offense:
        raise OffenseNotFoundError(payload.offenseId)

    ensure_access(actor, Action.RECORD_PAYMENT, offense.driver_email)
    check_payment_method(actor, payload)

    if offense.status is OffenseStatus.PAID:
        raise OffenseAlreadyPaidError(offense.id)

    async with atomic(db, "create payment"):
        payment = Payment(
            offense_id=offense.id,
            driver_name=offense.driver_name,
            driver_email=offense.driver_email,
            vehicle_number=offense.vehicle_number,
            amount=payload.amount if payload.amount is not None else offense.fine,
            payment_method=payload.paymentMethod,
            mobile_provider=payload.mobileDetails.provider if payload.mobileDetails else None,
            mobile_number=payload.mobileDetails.number if payload.mobileDetails else None,
            status=PaymentStatus.COMPLETED,
            date=utcnow(),
            recorded_by=actor.id,
        )
        db.add(payment)
        await offense_store.set_status(db, offense, OffenseStatus.PAID)

    logger.info("Payment %s recorded for offense %s by user %s", payment.id, offense.id, actor.id)
    return payment


async def list_payments(db: AsyncSession, actor: User) -> List[Payment]:
    query = _scoped(select(Payment), visible_email(actor))
    query = query.order_by(desc(Payment.date), desc(Payment.id))
    result = await db.execute(query)
    return list(result.scalars().all())


async def payment_stats(db: AsyncSession, actor: User) -> Dict[str, Any]:
    driver_email = visible_email(actor)
    start_of_day = datetime.combine(utcnow().date(), time.min)

    collected = await db.execute(
        _scoped(
            select(func.coalesce(func.sum(Payment.amount), 0.0))
            .where(Payment.status == PaymentStatus.COMPLETED),
            driver_email,
        )
    )
    todays = await db.execute(
        _scoped(
            select(func.count(Payment.id)).where(
                and_(Payment.status == PaymentStatus.COMPLETED, Payment.date >= start_of_day)
            ),
            driver_email,
        )
    )
    pending = await db.execute(
        _scoped(select(func.count(Payment.id)).where(Payment.status == PaymentStatus.PENDING), driver_email)
    )

    unpaid_query = select(func.count(TrafficOffense.id)).where(TrafficOffense.status == OffenseStatus.UNPAID)
    if driver_email is not None:
        unpaid_query = unpaid_query.where(func.lower(TrafficOffense.driver_email) == driver_email.lower())
    unpaid = await db.execute(unpaid_query)

    return {
        "totalCollections": float(collected.scalar() or 0.0),
        "todaysPayments": todays.scalar() or 0,
        "pendingPayments": pending.scalar() or 0,
        "unpaidOffenses": unpaid.scalar() or 0,
    }
