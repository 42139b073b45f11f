"""
Base models package.

Provides the declarative base and abstract model classes.
"""

from portal.models.base.base_model import Base, BaseModel, TimestampModel, utcnow

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "utcnow",
]
