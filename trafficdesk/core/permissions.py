"""
Role policy and the access gate.

Each role is an independent capability set; nothing is inherited. A capability
is one of:

    NONE  the role may not perform the action at all
    OWN   only on records whose stored ``driver_email`` matches the caller
    ALL   on any record

Checks never read or write business data themselves. Ownership is always
compared against a value loaded from storage by the caller.
"""
import enum
import logging
from typing import Dict, Optional

from fastapi import Depends

from trafficdesk.core.constants import UserRole
from trafficdesk.core.exceptions import ForbiddenError
from trafficdesk.core.security import get_current_user
from trafficdesk.models.user import User

logger = logging.getLogger(__name__)


class Action(enum.Enum):
    VIEW_RECORDS = "view_records"
    CREATE_OFFENSE = "create_offense"
    EDIT_OFFENSE = "edit_offense"
    UPDATE_OFFENSE_STATUS = "update_offense_status"
    REQUEST_DELETION = "request_deletion"
    RESOLVE_DELETION = "resolve_deletion"
    VIEW_DELETION_QUEUE = "view_deletion_queue"
    RECORD_PAYMENT = "record_payment"
    MANAGE_DRIVERS = "manage_drivers"
    VIEW_REPORTS = "view_reports"
    VIEW_AUDIT_LOG = "view_audit_log"


class Capability(enum.Enum):
    NONE = "none"
    OWN = "own"
    ALL = "all"


POLICY: Dict[Action, Dict[UserRole, Capability]] = {
    Action.VIEW_RECORDS: {
        UserRole.DRIVER: Capability.OWN,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.CREATE_OFFENSE: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.EDIT_OFFENSE: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.NONE,
    },
    Action.UPDATE_OFFENSE_STATUS: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.REQUEST_DELETION: {
        UserRole.DRIVER: Capability.OWN,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.RESOLVE_DELETION: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.NONE,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.VIEW_DELETION_QUEUE: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.NONE,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.RECORD_PAYMENT: {
        UserRole.DRIVER: Capability.OWN,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.MANAGE_DRIVERS: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.VIEW_REPORTS: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.ALL,
        UserRole.SUPERADMIN: Capability.ALL,
    },
    Action.VIEW_AUDIT_LOG: {
        UserRole.DRIVER: Capability.NONE,
        UserRole.OFFICER: Capability.NONE,
        UserRole.SUPERADMIN: Capability.ALL,
    },
}


def capability_for(role: UserRole, action: Action) -> Capability:
    if not isinstance(role, UserRole):
        raise ValueError(f"Unknown role: {role!r}")
    return POLICY[action][role]


def emails_match(left: Optional[str], right: Optional[str]) -> bool:
    if not left or not right:
        return False
    return left.strip().lower() == right.strip().lower()


def ensure_capability(user: User, action: Action) -> Capability:
    """Route-level check: the role must hold the action in some scope."""
    capability = capability_for(user.role, action)
    if capability is Capability.NONE:
        logger.warning("Denied %s to user %s (%s)", action.value, user.id, user.role.value)
        raise ForbiddenError()
    return capability


def ensure_access(user: User, action: Action, owner_email: Optional[str]) -> None:
    """Record-level check against the owner email stored on the record."""
    capability = ensure_capability(user, action)
    if capability is Capability.OWN and not emails_match(owner_email, user.email):
        logger.warning("Denied %s on foreign record to user %s", action.value, user.id)
        raise ForbiddenError("Not authorized to access this resource")


def can_view_all(user: User) -> bool:
    return capability_for(user.role, Action.VIEW_RECORDS) is Capability.ALL


def require(action: Action):
    """FastAPI dependency factory gating a route on ``action``."""

    async def dependency(user: User = Depends(get_current_user)) -> User:
        ensure_capability(user, action)
        return user

    return dependency
