from typing import List

from pydantic import BaseModel


class MonthlyCount(BaseModel):
    month: str
    count: int


class TypeCount(BaseModel):
    type: str
    count: int


class ViolationStatsResponse(BaseModel):
    total: int
    monthly: List[MonthlyCount]
    byType: List[TypeCount]


class MonthlyAmount(BaseModel):
    month: str
    amount: float


class RevenueStatsResponse(BaseModel):
    total: float
    monthly: List[MonthlyAmount]


class DashboardStatsResponse(BaseModel):
    totalOffences: int
    recentOffences: int
    activeDrivers: int
    driversWithOffences: int
    totalFines: float
    paidFines: float
    unpaidFines: float
