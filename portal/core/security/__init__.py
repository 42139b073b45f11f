"""
Security package: token handling and staff permissions.
"""

from portal.core.security.jwt_handler import JWTManager
from portal.core.security.permissions import (
    Permission,
    Principal,
    Role,
    normalise_ministry,
    resolve_principal,
)

__all__ = [
    "JWTManager",
    "Permission",
    "Principal",
    "Role",
    "normalise_ministry",
    "resolve_principal",
]
