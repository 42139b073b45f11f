"""SQLAlchemy Base class for all models."""
from portal.models.base import Base


def import_models():
    """Import all models so they are registered on ``Base.metadata``."""
    from portal.models import announcement, approval_history, ministry  # noqa: F401


import_models()
