# shop_manager/utils/permissions.py
"""
Session value and capability checks.

A Session is produced by the login flow and passed explicitly to every
controller call; nothing here is process-global. Controllers declare the
capability they need with @requires(...), which is checked before any
storage is touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from ..constants import CAPABILITIES
from ..errors import PermissionDeniedError

CAPABILITY_LABELS = {
    "can_manage_products": "manage products",
    "can_manage_customers": "manage customers",
    "can_manage_sales": "manage sales",
    "can_view_reports": "view reports",
    "can_manage_users": "manage users",
}


@dataclass(frozen=True)
class Session:
    user_id: int
    username: str
    can_manage_products: bool = False
    can_manage_customers: bool = False
    can_manage_sales: bool = False
    can_view_reports: bool = False
    can_manage_users: bool = False

    @classmethod
    def for_user(cls, user) -> "Session":
        """Build a session from a stored User record."""
        return cls(
            user_id=user.id,
            username=user.username,
            **{cap: bool(getattr(user, cap)) for cap in CAPABILITIES},
        )

    def has(self, capability: str) -> bool:
        if capability not in CAPABILITIES:
            raise ValueError(f"Unknown capability: {capability}")
        return bool(getattr(self, capability))

    def capabilities(self) -> list[str]:
        return [cap for cap in CAPABILITIES if getattr(self, cap)]


def require(session: Session, capability: str) -> None:
    """Raise PermissionDeniedError unless the session holds `capability`."""
    if not session.has(capability):
        label = CAPABILITY_LABELS.get(capability, capability)
        raise PermissionDeniedError(
            capability,
            f"Permission denied: you don't have permission to {label}.",
        )


def requires(capability: str):
    """
    Decorator for controller methods shaped `method(self, session, ...)`.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(self, session: Session, *args, **kwargs):
            require(session, capability)
            return fn(self, session, *args, **kwargs)
        return wrapper
    return decorator
