"""SQLAlchemy declarative base shared by every model."""

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSONB on Postgres, plain JSON on SQLite test databases.
JSON_COMPATIBLE = JSON().with_variant(JSONB, "postgresql")


class Base(DeclarativeBase):
    """Declarative base; every model names its own table."""
    type_annotation_map = {dict: JSON_COMPATIBLE}
