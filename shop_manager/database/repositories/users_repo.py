# shop_manager/database/repositories/users_repo.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, List, Mapping, Optional, Sequence

from ...constants import CAPABILITIES
from ...utils.validators import require_text
from ...errors import DomainError, NotFoundError, ValidationError
from ..ids import next_id
from ..record_store import RecordStore
from .fields import as_flag, flag, pad, record_id


@dataclass
class User:
    id: int
    username: str
    password_hash: str
    can_manage_products: bool = False
    can_manage_customers: bool = False
    can_manage_sales: bool = False
    can_view_reports: bool = False
    can_manage_users: bool = False
    is_active: bool = True

    FIELDS: ClassVar[tuple] = ("id", "username", "password_hash", *CAPABILITIES, "is_active")

    def to_fields(self) -> List[str]:
        return [
            str(self.id),
            self.username,
            self.password_hash,
            *(flag(getattr(self, cap)) for cap in CAPABILITIES),
            flag(self.is_active),
        ]

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "User":
        f = pad(fields, len(cls.FIELDS))
        return cls(
            id=record_id(f[0]),
            username=f[1],
            password_hash=f[2],
            can_manage_products=as_flag(f[3]),
            can_manage_customers=as_flag(f[4]),
            can_manage_sales=as_flag(f[5]),
            can_view_reports=as_flag(f[6]),
            can_manage_users=as_flag(f[7]),
            is_active=as_flag(f[8]),
        )

    def flags(self) -> dict[str, bool]:
        return {cap: bool(getattr(self, cap)) for cap in CAPABILITIES}


def _check_flags(flags: Mapping[str, bool]) -> dict[str, bool]:
    unknown = set(flags) - set(CAPABILITIES)
    if unknown:
        raise ValidationError(f"Unknown capability: {', '.join(sorted(unknown))}.")
    return {cap: bool(v) for cap, v in flags.items()}


class UsersRepo:
    """
    Data-access layer for user accounts.

    Notes:
      - This repo does NOT hash or verify passwords. Callers pass an already
        hashed value (see utils/auth.py).
      - Username uniqueness is checked on create() only. Permission edits
        cannot change a username, so they never re-check it.
    """

    def __init__(self, store: RecordStore[User]) -> None:
        self.store = store

    # ------------------------------ helpers ------------------------------

    @staticmethod
    def _norm_username(username: str) -> str:
        return (username or "").strip()

    def _rewrite(self, user_id: int, change) -> User:
        updated: list[User] = []

        def apply(u: User) -> User:
            new = change(u)
            updated.append(new)
            return new

        if self.store.mutate_all(lambda u: u.id == user_id, apply) == 0:
            raise NotFoundError(f"User ID {user_id} not found.")
        return updated[0]

    # ------------------------------- reads -------------------------------

    def list_users(self) -> list[User]:
        return list(self.store.scan())

    def has_users(self) -> bool:
        return next(iter(self.store.scan_ids()), None) is not None

    def get(self, user_id: int) -> Optional[User]:
        return self.store.find_by_id(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        """Exact (case-sensitive) match on the trimmed username."""
        uname = self._norm_username(username)
        return self.store.find_first(lambda u: u.username == uname)

    # ------------------------------ writes -------------------------------

    def create(
        self,
        username: str,
        password_hash: str,
        flags: Mapping[str, bool] | None = None,
        *,
        is_active: bool = True,
    ) -> User:
        uname = require_text(username, "Username")
        if self.get_by_username(uname) is not None:
            raise ValidationError("Username already exists.")
        user = User(
            id=next_id(self.store),
            username=uname,
            password_hash=require_text(password_hash, "Password hash"),
            is_active=is_active,
            **_check_flags(flags or {}),
        )
        self.store.append(user)
        return user

    def edit_permissions(
        self,
        user_id: int,
        flags: Mapping[str, bool],
        *,
        is_active: bool | None = None,
    ) -> User:
        """Replace the given capability flags (and optionally is_active) in place."""
        changes = _check_flags(flags)
        if is_active is not None:
            changes["is_active"] = bool(is_active)
        return self._rewrite(int(user_id), lambda u: replace(u, **changes))

    def deactivate(self, user_id: int) -> User:
        return self._rewrite(int(user_id), lambda u: replace(u, is_active=False))

    def set_password_hash(self, user_id: int, password_hash: str) -> User:
        new_hash = require_text(password_hash, "Password hash")
        return self._rewrite(int(user_id), lambda u: replace(u, password_hash=new_hash))

    def delete(self, user_id: int) -> None:
        """Remove the user's row entirely."""
        if self.store.remove_where(lambda u: u.id == int(user_id)) == 0:
            raise NotFoundError(f"User ID {user_id} not found.")


__all__ = ["User", "UsersRepo", "DomainError"]
