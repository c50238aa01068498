from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String

from trafficdesk.core.constants import PaymentMethod, PaymentStatus
from trafficdesk.models.base import Base, TimestampMixin, utcnow


class Payment(Base, TimestampMixin):
    __tablename__ = 'payments'

    id = Column(Integer, primary_key=True)

    # Plain reference: payments are financial records and outlive the offense
    offense_id = Column(Integer, nullable=False, index=True)

    driver_name = Column(String(255), nullable=False)
    driver_email = Column(String(255), nullable=False, index=True)
    vehicle_number = Column(String(20), nullable=False)

    # Payment Details
    amount = Column(Float, nullable=False)
    payment_method = Column(Enum(PaymentMethod), nullable=False, default=PaymentMethod.CASH)
    mobile_provider = Column(String(50))
    mobile_number = Column(String(20))
    status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    date = Column(DateTime, nullable=False, default=utcnow)

    recorded_by = Column(Integer, ForeignKey('users.id'), nullable=False)

    def __repr__(self):
        return f"<Payment {self.amount} for offense {self.offense_id} ({self.status.value})>"
