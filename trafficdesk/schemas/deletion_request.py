from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from trafficdesk.schemas.offense import OffenseResponse


class DeletionRequestCreate(BaseModel):
    offenseId: int
    reason: str = Field(..., min_length=1)


class DeletionRequestDecision(BaseModel):
    status: Literal["approved", "rejected"]


class OffenseSnapshot(BaseModel):
    driverName: str
    vehicleNumber: str
    offenceType: str
    location: str
    date: Optional[str] = None
    fine: float


class RequesterSummary(BaseModel):
    id: int
    name: str
    email: str


class DeletionRequestResponse(BaseModel):
    id: int
    offenseId: int
    requestedBy: int
    reason: str
    status: str
    timestamp: datetime
    resolvedBy: Optional[int] = None
    resolvedAt: Optional[datetime] = None
    originalOffense: OffenseSnapshot


class DeletionRequestDetail(DeletionRequestResponse):
    requester: Optional[RequesterSummary] = None
    # None once the offense has been removed; the snapshot remains
    offense: Optional[OffenseResponse] = None
