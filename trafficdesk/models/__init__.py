from trafficdesk.models.base import Base
from trafficdesk.models.user import User
from trafficdesk.models.driver import Driver
from trafficdesk.models.offenses import TrafficOffense
from trafficdesk.models.payment import Payment
from trafficdesk.models.deletion_request import DeletionRequest
from trafficdesk.models.audit_log import AuditLog

__all__ = [
    "Base",
    "User",
    "Driver",
    "TrafficOffense",
    "Payment",
    "DeletionRequest",
    "AuditLog",
]
