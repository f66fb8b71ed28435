"""ORM model for access requests."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base
from .grant import ROOM_SCOPE_KEY


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid4())


class AccessRequestRecord(Base):
    __tablename__ = "access_requests"
    __table_args__ = (
        # At most one PENDING request per (requester, room, scope).
        Index(
            "uq_access_requests_pending",
            "requester_id",
            "room_id",
            "scope_key",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
        Index("ix_access_requests_room_status", "room_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(128), primary_key=True, default=_uuid)
    requester_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)
    room_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("data_rooms.id", ondelete="CASCADE"),
        nullable=False,
    )
    folder_id: Mapped[str | None] = mapped_column(
        String(128),
        ForeignKey("folders.id", ondelete="CASCADE"),
        nullable=True,
    )
    scope_key: Mapped[str] = mapped_column(String(128), nullable=False, default=ROOM_SCOPE_KEY)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="PENDING")
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    resolution_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    granted_capabilities_json: Mapped[str | None] = mapped_column("granted_capabilities", Text, nullable=True)
