"""Aggregations behind the staff dashboard and the reports pages."""
from datetime import timedelta
from typing import Any, Dict, List

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.constants import DriverStatus, PaymentStatus
from trafficdesk.models.base import utcnow
from trafficdesk.models.driver import Driver
from trafficdesk.models.offenses import TrafficOffense
from trafficdesk.models.payment import Payment
from trafficdesk.services import offense_store

# Months shown on the monthly charts, most recent first
MONTHS_SHOWN = 6
RECENT_DAYS = 7


def month_label(year, month) -> str:
    return f"{int(year)}-{int(month)}"


async def _monthly(db: AsyncSession, date_column, value, criteria=()) -> List[Any]:
    year = func.extract("year", date_column).label("year")
    month = func.extract("month", date_column).label("month")
    query = (
        select(year, month, value.label("value"))
        .where(*criteria)
        .group_by(year, month)
        .order_by(desc(year), desc(month))
        .limit(MONTHS_SHOWN)
    )
    result = await db.execute(query)
    return result.all()


async def violation_stats(db: AsyncSession) -> Dict[str, Any]:
    total = (await db.execute(select(func.count(TrafficOffense.id)))).scalar() or 0
    rows = await _monthly(db, TrafficOffense.date, func.count(TrafficOffense.id))
    by_type = await offense_store.count_by_type(db)

    return {
        "total": total,
        "monthly": [{"month": month_label(row.year, row.month), "count": row.value} for row in rows],
        "byType": [{"type": offence_type, "count": count} for offence_type, count in by_type.items() if count],
    }


async def revenue_stats(db: AsyncSession) -> Dict[str, Any]:
    completed = Payment.status == PaymentStatus.COMPLETED
    total = (await db.execute(
        select(func.coalesce(func.sum(Payment.amount), 0.0)).where(completed)
    )).scalar()
    rows = await _monthly(db, Payment.date, func.sum(Payment.amount), (completed,))

    return {
        "total": float(total or 0.0),
        "monthly": [{"month": month_label(row.year, row.month), "amount": float(row.value)} for row in rows],
    }


async def dashboard_stats(db: AsyncSession) -> Dict[str, Any]:
    since = utcnow() - timedelta(days=RECENT_DAYS)

    total_offences = (await db.execute(select(func.count(TrafficOffense.id)))).scalar() or 0
    recent_offences = (await db.execute(
        select(func.count(TrafficOffense.id)).where(TrafficOffense.date >= since)
    )).scalar() or 0
    active_drivers = (await db.execute(
        select(func.count(Driver.id)).where(Driver.status == DriverStatus.ACTIVE)
    )).scalar() or 0
    drivers_with_offences = (await db.execute(
        select(func.count(Driver.id)).where(Driver.offence_count > 0)
    )).scalar() or 0
    total_fines = (await db.execute(
        select(func.coalesce(func.sum(TrafficOffense.fine), 0.0))
    )).scalar() or 0.0
    paid_fines = (await db.execute(
        select(func.coalesce(func.sum(Payment.amount), 0.0)).where(Payment.status == PaymentStatus.COMPLETED)
    )).scalar() or 0.0

    return {
        "totalOffences": total_offences,
        "recentOffences": recent_offences,
        "activeDrivers": active_drivers,
        "driversWithOffences": drivers_with_offences,
        "totalFines": float(total_fines),
        "paidFines": float(paid_fines),
        "unpaidFines": float(total_fines) - float(paid_fines),
    }
