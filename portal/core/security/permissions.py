"""
Role and approval-scope resolution for portal staff.

A principal's role comes from ``USER_ROLES`` (email -> role) with
``DEFAULT_USER_ROLE`` as the fallback. Roles listed in ``APPROVER_SCOPES``
may only act on submissions whose ministry is in their scope.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from portal.config.settings import Settings
from portal.core.logging import get_logger

logger = get_logger(__name__)


class Role(str, Enum):
    """Staff roles recognised by the portal"""
    ADMIN = "admin"
    APPROVER = "approver"


class Permission(str, Enum):
    """Actions gated by role"""
    REVIEW_APPROVALS = "review_approvals"
    MANAGE_MINISTRIES = "manage_ministries"


ROLE_PERMISSIONS = {
    Role.ADMIN: frozenset({Permission.REVIEW_APPROVALS, Permission.MANAGE_MINISTRIES}),
    Role.APPROVER: frozenset({Permission.REVIEW_APPROVALS}),
}


def normalise_ministry(name: Optional[str]) -> str:
    """Case- and whitespace-insensitive key for ministry names."""
    return " ".join((name or "").split()).lower()


@dataclass(frozen=True)
class Principal:
    """The authenticated staff member acting on a request."""

    email: str
    role: Role
    # None means unrestricted
    approval_scope: Optional[FrozenSet[str]] = field(default=None)

    def has_permission(self, permission: Permission) -> bool:
        return permission in ROLE_PERMISSIONS.get(self.role, frozenset())

    @property
    def is_scoped(self) -> bool:
        return self.approval_scope is not None

    def can_review(self, ministry: Optional[str]) -> bool:
        """Whether this principal may approve or reject a submission for ``ministry``."""
        if not self.has_permission(Permission.REVIEW_APPROVALS):
            return False
        if self.approval_scope is None:
            return True
        return normalise_ministry(ministry) in self.approval_scope


def _scope_for(role: Role, config: Settings) -> Optional[FrozenSet[str]]:
    ministries: Optional[Iterable[str]] = config.APPROVER_SCOPES.get(role.value)
    if ministries is None:
        return None
    return frozenset(normalise_ministry(name) for name in ministries)


def resolve_principal(email: str, config: Settings) -> Principal:
    """
    Build a Principal for a signed-in email.

    Args:
        email: Verified email address from the bearer token
        config: Application settings holding role assignments

    Returns:
        Principal with role and approval scope resolved
    """
    email = email.strip().lower()
    role_name = config.USER_ROLES.get(email, config.DEFAULT_USER_ROLE)
    try:
        role = Role(role_name)
    except ValueError:
        logger.warning(
            f"Unknown role '{role_name}' configured for {email}; "
            f"using {config.DEFAULT_USER_ROLE}"
        )
        role = Role(config.DEFAULT_USER_ROLE)

    return Principal(email=email, role=role, approval_scope=_scope_for(role, config))
