import enum


class UserRole(enum.Enum):
    DRIVER = "driver"
    OFFICER = "officer"
    SUPERADMIN = "superadmin"


class OffenseType(enum.Enum):
    SPEEDING = "Speeding"
    PARKING = "Parking"
    NO_LICENSE = "No License"
    RED_LIGHT = "Red Light"
    DRUNK_DRIVING = "Drunk Driving"
    OTHER = "Other"


class OffenseStatus(enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"
    UNPAID = "Unpaid"


class PaymentStatus(enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


class PaymentMethod(enum.Enum):
    CASH = "Cash"
    CARD = "Card"
    MOBILE_MONEY = "Mobile Money"


class DeletionRequestStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Statuses a superadmin may move a pending request into
DELETION_DECISIONS = (DeletionRequestStatus.APPROVED, DeletionRequestStatus.REJECTED)


class AuditAction(enum.Enum):
    OFFENSE_CREATED = "OFFENSE_CREATED"
    OFFENSE_UPDATED = "OFFENSE_UPDATED"
    OFFENSE_STATUS_UPDATED = "OFFENSE_STATUS_UPDATED"
    DELETION_REQUESTED = "DELETION_REQUESTED"
    OFFENSE_DELETED = "OFFENSE_DELETED"
    APPROVED_DELETION_REQUEST = "APPROVED_DELETION_REQUEST"
    REJECTED_DELETION_REQUEST = "REJECTED_DELETION_REQUEST"


DECISION_AUDIT_ACTIONS = {
    DeletionRequestStatus.APPROVED: AuditAction.APPROVED_DELETION_REQUEST,
    DeletionRequestStatus.REJECTED: AuditAction.REJECTED_DELETION_REQUEST,
}


class DriverStatus(enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
