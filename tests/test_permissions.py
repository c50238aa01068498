import pytest

from trafficdesk.core.constants import UserRole
from trafficdesk.core.exceptions import ForbiddenError
from trafficdesk.core.permissions import (
    POLICY,
    Action,
    Capability,
    can_view_all,
    capability_for,
    emails_match,
    ensure_access,
    ensure_capability,
)
from trafficdesk.models.user import User


def _user(role: UserRole, email: str = "a@x.com") -> User:
    return User(id=1, name="Test", email=email, password_hash="x", role=role)


def test_every_action_covers_every_role():
    for action in Action:
        assert set(POLICY[action]) == set(UserRole)


@pytest.mark.parametrize("action,expected", [
    (Action.VIEW_RECORDS, (Capability.OWN, Capability.ALL, Capability.ALL)),
    (Action.CREATE_OFFENSE, (Capability.NONE, Capability.ALL, Capability.ALL)),
    (Action.EDIT_OFFENSE, (Capability.NONE, Capability.ALL, Capability.NONE)),
    (Action.UPDATE_OFFENSE_STATUS, (Capability.NONE, Capability.ALL, Capability.ALL)),
    (Action.REQUEST_DELETION, (Capability.OWN, Capability.ALL, Capability.ALL)),
    (Action.RESOLVE_DELETION, (Capability.NONE, Capability.NONE, Capability.ALL)),
    (Action.VIEW_DELETION_QUEUE, (Capability.NONE, Capability.NONE, Capability.ALL)),
    (Action.VIEW_REPORTS, (Capability.NONE, Capability.ALL, Capability.ALL)),
    (Action.VIEW_AUDIT_LOG, (Capability.NONE, Capability.NONE, Capability.ALL)),
])
def test_policy_table(action, expected):
    roles = (UserRole.DRIVER, UserRole.OFFICER, UserRole.SUPERADMIN)
    assert tuple(capability_for(role, action) for role in roles) == expected


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        capability_for("admin", Action.VIEW_RECORDS)
    with pytest.raises(ValueError):
        UserRole("admin")


def test_ensure_capability_denies_none():
    with pytest.raises(ForbiddenError):
        ensure_capability(_user(UserRole.OFFICER), Action.RESOLVE_DELETION)
    assert ensure_capability(_user(UserRole.SUPERADMIN), Action.RESOLVE_DELETION) is Capability.ALL


def test_driver_ownership_uses_stored_email():
    driver = _user(UserRole.DRIVER, email="A@X.com")
    ensure_access(driver, Action.REQUEST_DELETION, "a@x.com")
    with pytest.raises(ForbiddenError):
        ensure_access(driver, Action.REQUEST_DELETION, "b@x.com")
    with pytest.raises(ForbiddenError):
        ensure_access(driver, Action.REQUEST_DELETION, None)


def test_staff_access_any_record():
    ensure_access(_user(UserRole.OFFICER), Action.REQUEST_DELETION, "someone@else.com")
    ensure_access(_user(UserRole.SUPERADMIN), Action.VIEW_RECORDS, "someone@else.com")


def test_can_view_all():
    assert not can_view_all(_user(UserRole.DRIVER))
    assert can_view_all(_user(UserRole.OFFICER))
    assert can_view_all(_user(UserRole.SUPERADMIN))


def test_emails_match():
    assert emails_match(" a@x.com", "A@X.COM")
    assert not emails_match("", "")
    assert not emails_match("a@x.com", None)
