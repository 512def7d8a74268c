# shop_manager/modules/login/controller.py
from __future__ import annotations

from typing import Optional

from ..base_module import BaseModule
from ..users.controller import check_password_policy
from ...constants import CAPABILITIES, DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME, MAX_PASSWORD_BYTES
from ...errors import AuthenticationError, NotFoundError, StorageError, ValidationError
from ...utils.auth import hash_password, needs_rehash, verify_password
from ...utils.permissions import Session


class LoginController(BaseModule):
    """
    Login flow using UsersRepo for all file I/O.

    Public attrs (set after each authenticate()):
      - last_error_code: str | None
      - last_username: str | None

    The exception raised to the caller always carries the same generic
    message; last_error_code keeps the real reason for logging and tests.
    """

    def __init__(self, repos) -> None:
        super().__init__(repos)
        self.last_error_code: Optional[str] = None
        self.last_username: Optional[str] = None

    @property
    def repo(self):
        return self.repos.users

    # ----------------------------- Public API -----------------------------

    def ensure_default_user(self) -> bool:
        """
        Create the default administrator (every capability) when no user
        exists yet. Returns True if it was created.

        A StorageError here is fatal for the caller: nobody could log in.
        """
        if self.repo.has_users():
            return False
        self.repo.create(
            DEFAULT_ADMIN_USERNAME,
            hash_password(DEFAULT_ADMIN_PASSWORD),
            {cap: True for cap in CAPABILITIES},
        )
        self.log.warning(
            "Created default user '%s'. Change its password with `shop passwd`.",
            DEFAULT_ADMIN_USERNAME,
        )
        return True

    def authenticate(self, username: str, password: str) -> Session:
        """
        Verify the credentials and return a Session for the user.
        Raises AuthenticationError on any failure.
        """
        self._reset_last_error()
        self.last_username = (username or "").strip()

        if not self.last_username or not password:
            self._fail("empty_fields")

        u = self.repo.get_by_username(self.last_username)
        if u is None:
            self._fail("user_not_found")
        if not verify_password(password, u.password_hash):
            self._fail("wrong_password")
        if not u.is_active:
            self._fail("user_inactive")

        # bcrypt rejects passwords over MAX_PASSWORD_BYTES
        if needs_rehash(u.password_hash) and len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES:
            self._upgrade_hash(u.id, password)

        self.log.info("login ok: %s", u.username)
        return Session.for_user(u)

    def change_password(self, session: Session, old_password: str, new_password: str) -> None:
        """Replace the session user's password after checking the current one."""
        u = self.repo.get(session.user_id)
        if u is None:
            raise NotFoundError(f"User ID {session.user_id} not found.")
        if not verify_password(old_password, u.password_hash):
            raise ValidationError("Current password is incorrect.")
        check_password_policy(new_password)
        self.repo.set_password_hash(u.id, hash_password(new_password))
        self.log.info("%s changed their password", u.username)

    # ----------------------------- Internals -----------------------------

    def _reset_last_error(self) -> None:
        self.last_error_code = None
        self.last_username = None

    def _fail(self, code: str) -> None:
        self.last_error_code = code
        self.log.info("login failed for %r: %s", self.last_username, code)
        raise AuthenticationError()

    def _upgrade_hash(self, user_id: int, password: str) -> None:
        # Login already succeeded; a failed upgrade is retried next time.
        try:
            self.repo.set_password_hash(user_id, hash_password(password))
        except StorageError as exc:
            self.log.warning("could not upgrade password hash for user #%d: %s", user_id, exc)
