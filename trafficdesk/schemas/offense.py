from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from trafficdesk.core.constants import OffenseStatus, OffenseType


class OffenseCreate(BaseModel):
    vehicleNumber: str = Field(..., min_length=1)
    offenceType: OffenseType
    location: str = Field(..., min_length=1)
    fine: float = Field(..., gt=0)
    date: Optional[datetime] = None


class OffenseUpdate(BaseModel):
    driverName: Optional[str] = Field(None, min_length=1)
    vehicleNumber: Optional[str] = Field(None, min_length=1)
    offenceType: Optional[OffenseType] = None
    location: Optional[str] = Field(None, min_length=1)
    fine: Optional[float] = Field(None, gt=0)
    date: Optional[datetime] = None


class OffenseStatusUpdate(BaseModel):
    status: OffenseStatus


class OffenseDeletionIntent(BaseModel):
    reason: str = Field(..., min_length=1)


class OffenseResponse(BaseModel):
    id: int
    driverId: int
    officerId: Optional[int] = None
    driverName: str
    driverEmail: str
    vehicleNumber: str
    offenceType: str
    location: str
    date: datetime
    fine: float
    status: str
    deletionRequested: bool
    deletionRequestedBy: Optional[int] = None
    deletionRequestReason: Optional[str] = None
    createdAt: datetime


class OffenseStatsResponse(BaseModel):
    totalOffenses: int
    byStatus: Dict[str, int]
    byType: Dict[str, int]
    totalFines: float
    outstandingFines: float
