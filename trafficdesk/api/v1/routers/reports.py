from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.database import aget_db
from trafficdesk.core.permissions import Action, require
from trafficdesk.models.user import User
from trafficdesk.schemas.report import DashboardStatsResponse, RevenueStatsResponse, ViolationStatsResponse
from trafficdesk.services import report_service

router = APIRouter(tags=["reports"])


@router.get("/reports/violations/stats", response_model=ViolationStatsResponse)
async def get_violation_stats(
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.VIEW_REPORTS))
):
    """Offense totals, the last six months and a breakdown by type"""
    return await report_service.violation_stats(db)


@router.get("/reports/revenue/stats", response_model=RevenueStatsResponse)
async def get_revenue_stats(
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.VIEW_REPORTS))
):
    return await report_service.revenue_stats(db)


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.VIEW_REPORTS))
):
    return await report_service.dashboard_stats(db)
