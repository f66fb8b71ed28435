"""ORM model for capability grants on a room or folder subtree."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base

# Room-wide grants use this scope key so the unique constraint covers them too.
ROOM_SCOPE_KEY = "*"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid4())


class GrantRecord(Base):
    __tablename__ = "grants"
    __table_args__ = (
        UniqueConstraint("principal_id", "room_id", "scope_key", name="uq_grants_principal_room_scope"),
    )

    id: Mapped[str] = mapped_column(String(128), primary_key=True, default=_uuid)
    principal_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)
    room_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("data_rooms.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    folder_id: Mapped[str | None] = mapped_column(
        String(128),
        ForeignKey("folders.id", ondelete="CASCADE"),
        nullable=True,
    )
    scope_key: Mapped[str] = mapped_column(String(128), nullable=False, default=ROOM_SCOPE_KEY)
    capabilities_json: Mapped[str] = mapped_column("capabilities", Text, nullable=False)
    granted_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    granted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )
