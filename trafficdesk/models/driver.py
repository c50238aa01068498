from sqlalchemy import Column, Enum, Integer, String

from trafficdesk.core.constants import DriverStatus
from trafficdesk.models.base import Base, TimestampMixin


class Driver(Base, TimestampMixin):
    __tablename__ = 'drivers'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    license_number = Column(String(50), nullable=False)
    vehicle_number = Column(String(20), unique=True, nullable=False)
    phone_number = Column(String(20), nullable=False)
    address = Column(String(255), nullable=False)

    offence_count = Column(Integer, default=0, nullable=False)
    status = Column(Enum(DriverStatus), default=DriverStatus.ACTIVE, nullable=False)

    def __repr__(self):
        return f"<Driver {self.name} ({self.vehicle_number})>"
