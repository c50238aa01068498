from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from trafficdesk.core.constants import OffenseStatus, OffenseType
from trafficdesk.models.base import Base, TimestampMixin, utcnow


class TrafficOffense(Base, TimestampMixin):
    __tablename__ = 'traffic_offenses'

    id = Column(Integer, primary_key=True)
    driver_id = Column(Integer, ForeignKey('drivers.id'), nullable=False)
    officer_id = Column(Integer, ForeignKey('users.id'))

    # Offense Details (copied from the driver registry at creation)
    driver_name = Column(String(255), nullable=False)
    driver_email = Column(String(255), nullable=False, index=True)
    vehicle_number = Column(String(20), nullable=False)
    offence_type = Column(Enum(OffenseType), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False, default=utcnow)

    # Fine & Status
    fine = Column(Float, nullable=False)
    status = Column(Enum(OffenseStatus), nullable=False, default=OffenseStatus.UNPAID)

    # Deletion workflow; set only while a request is pending
    deletion_requested = Column(Boolean, nullable=False, default=False)
    deletion_requested_by = Column(Integer, ForeignKey('users.id'))
    deletion_request_reason = Column(Text)

    driver = relationship("Driver")

    def snapshot(self) -> dict:
        """Fields preserved on a deletion request so history outlives the row."""
        return {
            "driverName": self.driver_name,
            "vehicleNumber": self.vehicle_number,
            "offenceType": self.offence_type.value,
            "location": self.location,
            "date": self.date.isoformat() if self.date else None,
            "fine": self.fine,
        }

    def __repr__(self):
        return f"<TrafficOffense {self.id} - {self.offence_type.value}>"
