import pytest

from shop_manager.constants import CAPABILITIES
from shop_manager.errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from shop_manager.modules.login import LoginController
from shop_manager.modules.users import UsersController
from shop_manager.utils import auth
from shop_manager.utils.permissions import Session


@pytest.fixture()
def login(repos):
    ctl = LoginController(repos)
    ctl.ensure_default_user()
    return ctl


@pytest.fixture()
def admin(login):
    return login.authenticate("admin", "admin")


# ---------- login ----------

def test_default_admin_created_once(repos):
    ctl = LoginController(repos)
    assert ctl.ensure_default_user() is True
    assert ctl.ensure_default_user() is False
    (u,) = repos.users.list_users()
    assert u.username == "admin"
    assert all(u.flags().values())
    assert u.is_active
    assert u.password_hash.startswith("$2")


def test_authenticate_returns_session(admin):
    assert isinstance(admin, Session)
    assert admin.username == "admin"
    assert admin.capabilities() == list(CAPABILITIES)


@pytest.mark.parametrize(
    "username, password, code",
    [
        ("admin", "wrong", "wrong_password"),
        ("nobody", "admin", "user_not_found"),
        ("", "admin", "empty_fields"),
        ("admin", "", "empty_fields"),
    ],
)
def test_failed_login_has_one_generic_message(login, username, password, code):
    with pytest.raises(AuthenticationError) as exc:
        login.authenticate(username, password)
    assert str(exc.value) == "Invalid username or password, or account is inactive."
    assert login.last_error_code == code


def test_inactive_user_cannot_login(repos, login, admin):
    users = UsersController(repos)
    u = users.add_user(admin, "clerk", "secret", {"can_manage_sales": True})
    users.deactivate_user(admin, u.id)
    with pytest.raises(AuthenticationError):
        login.authenticate("clerk", "secret")
    assert login.last_error_code == "user_inactive"


def test_username_match_is_exact(repos, login):
    with pytest.raises(AuthenticationError):
        login.authenticate("ADMIN", "admin")


def test_weak_hash_is_upgraded_on_login(repos, login, monkeypatch):
    admin = repos.users.get_by_username("admin")
    repos.users.set_password_hash(admin.id, auth.hash_password("admin", scheme="pbkdf2"))
    assert auth.needs_rehash(repos.users.get(admin.id).password_hash)

    login.authenticate("admin", "admin")
    upgraded = repos.users.get(admin.id).password_hash
    assert upgraded.startswith("$2")
    assert not auth.needs_rehash(upgraded)


def test_long_pbkdf2_password_still_logs_in(repos, login):
    long_pw = "z" * 90
    admin = repos.users.get_by_username("admin")
    stored = auth.hash_password(long_pw, scheme="pbkdf2")
    repos.users.set_password_hash(admin.id, stored)

    assert login.authenticate("admin", long_pw).username == "admin"
    assert repos.users.get(admin.id).password_hash == stored


def test_change_password(repos, login, admin):
    with pytest.raises(ValidationError, match="incorrect"):
        login.change_password(admin, "nope", "newpass")
    with pytest.raises(ValidationError, match="at least 4"):
        login.change_password(admin, "admin", "abc")

    login.change_password(admin, "admin", "s3cret")
    assert login.authenticate("admin", "s3cret").user_id == admin.user_id
    with pytest.raises(AuthenticationError):
        login.authenticate("admin", "admin")


# ---------- user administration ----------

def test_add_user_checks(repos, admin):
    users = UsersController(repos)
    with pytest.raises(ValidationError, match="at least 4"):
        users.add_user(admin, "bob", "abc")
    with pytest.raises(ValidationError, match="already exists"):
        users.add_user(admin, "admin", "whatever")
    with pytest.raises(ValidationError, match="Unknown capability"):
        users.add_user(admin, "bob", "secret", {"can_fly": True})

    bob = users.add_user(admin, "bob", "secret", {"can_view_reports": True})
    assert bob.id == 2
    assert bob.can_view_reports and not bob.can_manage_users
    assert auth.verify_password("secret", repos.users.get(2).password_hash)


def test_password_longer_than_72_bytes_is_rejected(repos, admin, login):
    users = UsersController(repos)
    with pytest.raises(ValidationError, match="at most 72 bytes"):
        users.add_user(admin, "bob", "x" * 80)
    with pytest.raises(ValidationError, match="at most 72 bytes"):
        users.add_user(admin, "bob", "\u00e9" * 40)
    with pytest.raises(ValidationError, match="at most 72 bytes"):
        login.change_password(admin, "admin", "y" * 73)
    assert users.add_user(admin, "bob", "x" * 72).id == 2


def test_edit_permissions_replaces_given_flags(repos, admin):
    users = UsersController(repos)
    bob = users.add_user(admin, "bob", "secret", {"can_view_reports": True})
    edited = users.edit_permissions(admin, bob.id, {"can_manage_products": True, "can_view_reports": False})
    assert edited.can_manage_products
    assert not edited.can_view_reports
    assert repos.users.get(bob.id).flags() == edited.flags()

    with pytest.raises(NotFoundError):
        users.edit_permissions(admin, 99, {"can_manage_products": True})


def test_delete_user_flow(repos, admin, data_dir):
    users = UsersController(repos)
    bob = users.add_user(admin, "bob", "secret")
    path = data_dir / "users.csv"

    before = path.read_bytes()
    assert users.delete_user(admin, bob.id, confirm=lambda u: False) is False
    assert path.read_bytes() == before

    seen = []
    assert users.delete_user(admin, bob.id, confirm=lambda u: seen.append(u.username) or True) is True
    assert seen == ["bob"]
    assert [u.username for u in repos.users.list_users()] == ["admin"]

    with pytest.raises(NotFoundError):
        users.delete_user(admin, bob.id, confirm=lambda u: True)


def test_self_deletion_rejected_without_touching_files(repos, admin, data_dir, monkeypatch):
    users = UsersController(repos)
    path = data_dir / "users.csv"
    before = path.read_bytes()

    def no_io(*args, **kwargs):
        raise AssertionError("storage must not be touched")

    monkeypatch.setattr(repos.users.store, "scan", no_io)
    monkeypatch.setattr(repos.users.store, "mutate_all", no_io)
    with pytest.raises(ValidationError, match="own account"):
        users.delete_user(admin, admin.user_id, confirm=lambda u: True)
    assert path.read_bytes() == before


def test_user_admin_needs_capability(repos, admin):
    users = UsersController(repos)
    users.add_user(admin, "clerk", "secret", {"can_manage_sales": True})
    clerk = LoginController(repos).authenticate("clerk", "secret")
    for call in (
        lambda: users.list_users(clerk),
        lambda: users.add_user(clerk, "eve", "secret"),
        lambda: users.deactivate_user(clerk, 1),
        lambda: users.delete_user(clerk, 1, confirm=lambda u: True),
    ):
        with pytest.raises(PermissionDeniedError):
            call()
