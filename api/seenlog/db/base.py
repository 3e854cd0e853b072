"""Import all models here for Alembic autogenerate."""

from seenlog.db.base_class import Base
from seenlog.models import (  # noqa: F401
    collection,
    media,
    review,
    seen,
    summary,
    user,
)

__all__ = ["Base"]
