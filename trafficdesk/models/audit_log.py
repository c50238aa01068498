from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Index, Integer, String

from trafficdesk.core.constants import AuditAction
from trafficdesk.models.base import Base, utcnow


class AuditLog(Base):
    """Append-only; rows are never updated or deleted by the application."""

    __tablename__ = 'audit_logs'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    action = Column(Enum(AuditAction), nullable=False)
    details = Column(JSON, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow)
    ip_address = Column(String(45))

    __table_args__ = (
        Index('ix_audit_logs_user_timestamp', 'user_id', 'timestamp'),
        Index('ix_audit_logs_action_timestamp', 'action', 'timestamp'),
    )

    def __repr__(self):
        return f"<AuditLog {self.action.value} by {self.user_id}>"
