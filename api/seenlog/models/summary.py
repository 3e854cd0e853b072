"""Materialized per-user consumption statistics."""

from __future__ import annotations

import typing
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seenlog.db.base_class import JSON_COMPATIBLE, Base
from seenlog.utils.datetime import utc_now

if typing.TYPE_CHECKING:  # pragma: no cover
    from seenlog.models.user import User


class Summary(Base):
    """Snapshot of a user's statistics; replaced wholesale on recompute."""
    __tablename__ = "summaries"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    data: Mapped[dict] = mapped_column(JSON_COMPATIBLE, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, index=True)

    user: Mapped["User"] = relationship(back_populates="summaries")
