from __future__ import annotations

from typing import Callable, Mapping, Optional

from ..base_module import BaseModule
from ...constants import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH
from ...database.repositories.users_repo import User
from ...errors import NotFoundError, ValidationError
from ...utils.auth import hash_password
from ...utils.permissions import Session, requires

ConfirmFn = Callable[[User], bool]


def check_password_policy(password: str) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.")
    return password


class UsersController(BaseModule):
    """
    User administration. Every operation needs can_manage_users.

    Passwords are hashed here; the repository only ever sees the hash.
    """

    @property
    def repo(self):
        return self.repos.users

    @requires("can_manage_users")
    def add_user(
        self,
        session: Session,
        username: str,
        password: str,
        flags: Optional[Mapping[str, bool]] = None,
    ) -> User:
        pw = check_password_policy(password)
        user = self.repo.create(username, hash_password(pw), flags)
        self.log.info("%s created user #%d (%s)", session.username, user.id, user.username)
        return user

    @requires("can_manage_users")
    def list_users(self, session: Session) -> list[User]:
        return self.repo.list_users()

    @requires("can_manage_users")
    def edit_permissions(
        self,
        session: Session,
        user_id: int,
        flags: Mapping[str, bool],
        *,
        is_active: Optional[bool] = None,
    ) -> User:
        user = self.repo.edit_permissions(int(user_id), flags, is_active=is_active)
        self.log.info("%s updated permissions of user #%d", session.username, user.id)
        return user

    @requires("can_manage_users")
    def deactivate_user(self, session: Session, user_id: int) -> User:
        user = self.repo.deactivate(int(user_id))
        self.log.info("%s deactivated user #%d", session.username, user.id)
        return user

    @requires("can_manage_users")
    def delete_user(self, session: Session, user_id: int, confirm: ConfirmFn) -> bool:
        """
        Remove a user after `confirm(user)` agrees.

        Returns False (and changes nothing) when the confirmation is declined.
        Deleting your own account is refused before any file is read.
        """
        uid = int(user_id)
        if uid == session.user_id:
            raise ValidationError("You cannot delete your own account.")
        user = self.repo.get(uid)
        if user is None:
            raise NotFoundError(f"User ID {uid} not found.")
        if not confirm(user):
            return False
        self.repo.delete(uid)
        self.log.info("%s deleted user #%d (%s)", session.username, uid, user.username)
        return True
