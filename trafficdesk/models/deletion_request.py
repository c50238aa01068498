from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import relationship

from trafficdesk.core.constants import DeletionRequestStatus
from trafficdesk.models.base import Base, utcnow


class DeletionRequest(Base):
    __tablename__ = 'deletion_requests'

    id = Column(Integer, primary_key=True)

    # Not a foreign key: the request must survive removal of the offense
    offense_id = Column(Integer, nullable=False, index=True)
    requested_by = Column(Integer, ForeignKey('users.id'), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(Enum(DeletionRequestStatus), nullable=False, default=DeletionRequestStatus.PENDING)
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)

    resolved_by = Column(Integer, ForeignKey('users.id'))
    resolved_at = Column(DateTime)

    original_offense = Column(JSON, nullable=False)

    requester = relationship("User", foreign_keys=[requested_by], lazy="joined")

    __table_args__ = (
        # At most one open request per offense. Enum columns store member names.
        Index(
            'uq_deletion_requests_open_offense',
            'offense_id',
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
    )

    def __repr__(self):
        return f"<DeletionRequest {self.id} offense={self.offense_id} ({self.status.value})>"
