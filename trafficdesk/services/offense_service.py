import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.constants import AuditAction, OffenseStatus, PaymentStatus
from trafficdesk.core.exceptions import DriverNotFoundError, OffenseNotFoundError, ValidationError
from trafficdesk.core.permissions import Action, can_view_all, ensure_access, ensure_capability
from trafficdesk.models.base import utcnow
from trafficdesk.models.driver import Driver
from trafficdesk.models.offenses import TrafficOffense
from trafficdesk.models.payment import Payment
from trafficdesk.models.user import User
from trafficdesk.schemas.offense import OffenseCreate, OffenseUpdate
from trafficdesk.services import audit_service, offense_store
from trafficdesk.services.transaction import atomic

logger = logging.getLogger(__name__)

# Request field -> model column for officer edits
EDITABLE_FIELDS = {
    "driverName": "driver_name",
    "vehicleNumber": "vehicle_number",
    "offenceType": "offence_type",
    "location": "location",
    "fine": "fine",
    "date": "date",
}


def visible_email(actor: User) -> Optional[str]:
    """Email to scope queries by, or None when the actor sees every record."""
    return None if can_view_all(actor) else actor.email


def _editable_values(offense: TrafficOffense) -> Dict[str, Any]:
    return {field: getattr(offense, column) for field, column in EDITABLE_FIELDS.items()}


async def get_offense(db: AsyncSession, actor: User, offense_id: int) -> TrafficOffense:
    offense = await offense_store.find_by_id(db, offense_id)
    if not offense:
        raise OffenseNotFoundError(offense_id)
    ensure_access(actor, Action.VIEW_RECORDS, offense.driver_email)
    return offense


async def list_offenses(
    db: AsyncSession,
    actor: User,
    status: Optional[OffenseStatus] = None,
) -> List[TrafficOffense]:
    return await offense_store.list_offenses(db, driver_email=visible_email(actor), status=status)


async def recent_offenses(
    db: AsyncSession,
    actor: User,
    driver_email: Optional[str] = None,
    limit: int = 5,
) -> List[TrafficOffense]:
    """Latest offenses; staff may narrow to one driver, drivers always see their own."""
    scope = visible_email(actor) or driver_email
    return await offense_store.list_offenses(db, driver_email=scope, limit=limit)


async def create_offense(
    db: AsyncSession,
    actor: User,
    payload: OffenseCreate,
    ip_address: Optional[str] = None,
) -> TrafficOffense:
    ensure_capability(actor, Action.CREATE_OFFENSE)

    result = await db.execute(select(Driver).where(Driver.vehicle_number == payload.vehicleNumber))
    driver = result.scalar_one_or_none()
    if not driver:
        raise DriverNotFoundError(payload.vehicleNumber)

    async with atomic(db, "create offense"):
        offense = TrafficOffense(
            driver_id=driver.id,
            officer_id=actor.id,
            driver_name=driver.name,
            driver_email=driver.email,
            vehicle_number=payload.vehicleNumber,
            offence_type=payload.offenceType,
            location=payload.location,
            date=payload.date or utcnow(),
            fine=payload.fine,
            status=OffenseStatus.UNPAID,
            deletion_requested=False,
        )
        db.add(offense)
        driver.offence_count = (driver.offence_count or 0) + 1
        await db.flush()

        await audit_service.record(
            db,
            actor.id,
            AuditAction.OFFENSE_CREATED,
            {
                "offenseId": offense.id,
                "offenseType": offense.offence_type.value,
                "driverEmail": offense.driver_email,
                "location": offense.location,
                "fine": offense.fine,
                "createdBy": actor.email,
            },
            ip_address,
        )

    logger.info("Offense %s recorded by user %s", offense.id, actor.id)
    return offense


async def update_offense(
    db: AsyncSession,
    actor: User,
    offense_id: int,
    payload: OffenseUpdate,
    ip_address: Optional[str] = None,
) -> TrafficOffense:
    ensure_capability(actor, Action.EDIT_OFFENSE)

    offense = await offense_store.find_by_id(db, offense_id)
    if not offense:
        raise OffenseNotFoundError(offense_id)

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")
    for field, value in changes.items():
        if value is None:
            raise ValidationError(f"{field} cannot be empty", field=field)

    async with atomic(db, "update offense"):
        original = _editable_values(offense)
        for field, value in changes.items():
            setattr(offense, EDITABLE_FIELDS[field], value)
        await db.flush()

        await audit_service.record(
            db,
            actor.id,
            AuditAction.OFFENSE_UPDATED,
            {
                "offenseId": offense.id,
                "originalData": original,
                "newData": changes,
            },
            ip_address,
        )

    return offense


async def update_offense_status(
    db: AsyncSession,
    actor: User,
    offense_id: int,
    status: OffenseStatus,
    ip_address: Optional[str] = None,
) -> TrafficOffense:
    ensure_capability(actor, Action.UPDATE_OFFENSE_STATUS)

    offense = await offense_store.find_by_id(db, offense_id)
    if not offense:
        raise OffenseNotFoundError(offense_id)

    async with atomic(db, "update offense status"):
        previous = await offense_store.set_status(db, offense, status)

        # Keep the ledger in step with a manual status change
        await db.execute(
            update(Payment)
            .where(Payment.offense_id == offense.id)
            .values(status=PaymentStatus.COMPLETED if status is OffenseStatus.PAID else PaymentStatus.PENDING)
            .execution_options(synchronize_session=False)
        )

        await audit_service.record(
            db,
            actor.id,
            AuditAction.OFFENSE_STATUS_UPDATED,
            {
                "offenseId": offense.id,
                "originalStatus": previous.value,
                "newStatus": status.value,
            },
            ip_address,
        )

    logger.info("Offense %s status %s -> %s by user %s", offense.id, previous.value, status.value, actor.id)
    return offense


async def offense_stats(db: AsyncSession, actor: User) -> Dict[str, Any]:
    driver_email = visible_email(actor)
    by_status = await offense_store.count_by_status(db, driver_email)
    by_type = await offense_store.count_by_type(db, driver_email)

    fines_query = select(func.coalesce(func.sum(TrafficOffense.fine), 0.0))
    outstanding_query = fines_query.where(TrafficOffense.status == OffenseStatus.UNPAID)
    if driver_email is not None:
        owner = func.lower(TrafficOffense.driver_email) == driver_email.lower()
        fines_query = fines_query.where(owner)
        outstanding_query = outstanding_query.where(owner)

    total_fines = (await db.execute(fines_query)).scalar() or 0.0
    outstanding = (await db.execute(outstanding_query)).scalar() or 0.0

    return {
        "totalOffenses": sum(by_status.values()),
        "byStatus": by_status,
        "byType": by_type,
        "totalFines": float(total_fines),
        "outstandingFines": float(outstanding),
    }
