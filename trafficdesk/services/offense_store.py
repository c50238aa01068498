"""Lookup and mutation primitives for offense records."""
from typing import Dict, List, Optional

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.constants import OffenseStatus, OffenseType
from trafficdesk.models.offenses import TrafficOffense


def _owned_by(query, driver_email: Optional[str]):
    if driver_email is not None:
        query = query.where(func.lower(TrafficOffense.driver_email) == driver_email.strip().lower())
    return query


async def find_by_id(db: AsyncSession, offense_id: int) -> Optional[TrafficOffense]:
    # populate_existing: conditional UPDATEs below bypass the identity map
    query = (
        select(TrafficOffense)
        .where(TrafficOffense.id == offense_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def find_by_driver_email(db: AsyncSession, driver_email: str) -> List[TrafficOffense]:
    return await list_offenses(db, driver_email=driver_email)


async def list_offenses(
    db: AsyncSession,
    driver_email: Optional[str] = None,
    status: Optional[OffenseStatus] = None,
    limit: Optional[int] = None,
) -> List[TrafficOffense]:
    query = _owned_by(select(TrafficOffense), driver_email)
    if status is not None:
        query = query.where(TrafficOffense.status == status)
    query = (
        query.order_by(desc(TrafficOffense.date), desc(TrafficOffense.id))
        .execution_options(populate_existing=True)
    )
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())


async def count_by_status(db: AsyncSession, driver_email: Optional[str] = None) -> Dict[str, int]:
    query = _owned_by(
        select(TrafficOffense.status, func.count(TrafficOffense.id)),
        driver_email,
    ).group_by(TrafficOffense.status)
    result = await db.execute(query)

    counts = {status.value: 0 for status in OffenseStatus}
    for status, count in result.all():
        counts[status.value] = count
    return counts


async def count_by_type(db: AsyncSession, driver_email: Optional[str] = None) -> Dict[str, int]:
    query = _owned_by(
        select(TrafficOffense.offence_type, func.count(TrafficOffense.id)),
        driver_email,
    ).group_by(TrafficOffense.offence_type)
    result = await db.execute(query)

    counts = {offence_type.value: 0 for offence_type in OffenseType}
    for offence_type, count in result.all():
        counts[offence_type.value] = count
    return counts


async def set_status(db: AsyncSession, offense: TrafficOffense, status: OffenseStatus) -> OffenseStatus:
    """Set the status and return the one it replaced."""
    previous = offense.status
    offense.status = status
    await db.flush()
    return previous


async def remove(db: AsyncSession, offense_id: int) -> bool:
    """Permanently delete the offense. Payments referencing it are kept."""
    result = await db.execute(
        delete(TrafficOffense)
        .where(TrafficOffense.id == offense_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def mark_deletion_requested(db: AsyncSession, offense_id: int, user_id: int, reason: str) -> bool:
    """Set the deletion flag only if it is currently clear."""
    result = await db.execute(
        update(TrafficOffense)
        .where(
            TrafficOffense.id == offense_id,
            TrafficOffense.deletion_requested.is_(False),
        )
        .values(
            deletion_requested=True,
            deletion_requested_by=user_id,
            deletion_request_reason=reason,
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def clear_deletion_request(db: AsyncSession, offense_id: int) -> bool:
    result = await db.execute(
        update(TrafficOffense)
        .where(TrafficOffense.id == offense_id)
        .values(
            deletion_requested=False,
            deletion_requested_by=None,
            deletion_request_reason=None,
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
