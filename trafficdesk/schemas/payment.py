from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from trafficdesk.core.constants import PaymentMethod


class MobileMoneyDetails(BaseModel):
    provider: str
    number: str


class PaymentCreate(BaseModel):
    offenseId: int
    paymentMethod: PaymentMethod = PaymentMethod.CASH
    amount: Optional[float] = Field(None, gt=0)
    mobileDetails: Optional[MobileMoneyDetails] = None


class PaymentResponse(BaseModel):
    id: int
    offenseId: int
    driverName: str
    driverEmail: str
    vehicleNumber: str
    amount: float
    paymentMethod: str
    status: str
    date: datetime
    recordedBy: int


class PaymentStatsResponse(BaseModel):
    totalCollections: float
    todaysPayments: int
    pendingPayments: int
    unpaidOffenses: int
