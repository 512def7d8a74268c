import dataclasses

import pytest

from shop_manager.constants import CAPABILITIES
from shop_manager.database.repositories.users_repo import User
from shop_manager.errors import DomainError, PermissionDeniedError
from shop_manager.utils.permissions import Session, require, requires


def test_session_from_user_copies_flags():
    user = User(3, "sam", "$2b$04$x", can_manage_sales=True, can_view_reports=True)
    s = Session.for_user(user)
    assert (s.user_id, s.username) == (3, "sam")
    assert s.capabilities() == ["can_manage_sales", "can_view_reports"]
    assert s.has("can_manage_sales")
    assert not s.has("can_manage_users")


def test_session_is_immutable(admin_session):
    with pytest.raises(dataclasses.FrozenInstanceError):
        admin_session.can_manage_users = False


def test_unknown_capability_is_a_programming_error(admin_session):
    with pytest.raises(ValueError):
        admin_session.has("can_do_anything")


def test_require_message(clerk_session):
    with pytest.raises(PermissionDeniedError) as exc:
        require(clerk_session, "can_view_reports")
    assert str(exc.value) == "Permission denied: you don't have permission to view reports."
    assert isinstance(exc.value, DomainError)


def test_requires_decorator_checks_before_calling(admin_session, clerk_session):
    calls = []

    class Thing:
        @requires("can_manage_users")
        def act(self, session, value):
            calls.append(value)
            return value * 2

    t = Thing()
    with pytest.raises(PermissionDeniedError):
        t.act(clerk_session, 1)
    assert calls == []
    assert t.act(admin_session, 2) == 4
    assert calls == [2]
    assert Thing.act.__name__ == "act"


def test_every_capability_has_a_label():
    from shop_manager.utils.permissions import CAPABILITY_LABELS
    assert set(CAPABILITY_LABELS) == set(CAPABILITIES)
