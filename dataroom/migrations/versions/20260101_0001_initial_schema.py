"""Initial data room schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20260101_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "principals",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )

    op.create_table(
        "data_rooms",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.String(length=128), sa.ForeignKey("principals.id"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("archived_by", sa.String(length=128), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_data_rooms_owner_id", "data_rooms", ["owner_id"])

    op.create_table(
        "folders",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column(
            "room_id",
            sa.String(length=128),
            sa.ForeignKey("data_rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "parent_id",
            sa.String(length=128),
            sa.ForeignKey("folders.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_folders_room_parent", "folders", ["room_id", "parent_id"])

    op.create_table(
        "grants",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("principal_id", sa.String(length=128), nullable=False),
        sa.Column(
            "room_id",
            sa.String(length=128),
            sa.ForeignKey("data_rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "folder_id",
            sa.String(length=128),
            sa.ForeignKey("folders.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("scope_key", sa.String(length=128), nullable=False, server_default="*"),
        sa.Column("capabilities", sa.Text(), nullable=False),
        sa.Column("granted_by", sa.String(length=128), nullable=True),
        sa.Column(
            "granted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint("principal_id", "room_id", "scope_key", name="uq_grants_principal_room_scope"),
    )
    op.create_index("ix_grants_principal_id", "grants", ["principal_id"])
    op.create_index("ix_grants_room_id", "grants", ["room_id"])

    op.create_table(
        "access_requests",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("requester_id", sa.String(length=128), nullable=False),
        sa.Column(
            "room_id",
            sa.String(length=128),
            sa.ForeignKey("data_rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "folder_id",
            sa.String(length=128),
            sa.ForeignKey("folders.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("scope_key", sa.String(length=128), nullable=False, server_default="*"),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="PENDING"),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_by", sa.String(length=128), nullable=True),
        sa.Column("resolution_note", sa.Text(), nullable=True),
        sa.Column("granted_capabilities", sa.Text(), nullable=True),
    )
    op.create_index("ix_access_requests_requester_id", "access_requests", ["requester_id"])
    op.create_index("ix_access_requests_room_status", "access_requests", ["room_id", "status"])
    op.create_index(
        "uq_access_requests_pending",
        "access_requests",
        ["requester_id", "room_id", "scope_key"],
        unique=True,
        sqlite_where=sa.text("status = 'PENDING'"),
        postgresql_where=sa.text("status = 'PENDING'"),
    )

    op.create_table(
        "activity_records",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("actor_id", sa.String(length=128), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("resource_kind", sa.String(length=64), nullable=False),
        sa.Column("resource_id", sa.String(length=128), nullable=True),
        sa.Column("room_id", sa.String(length=128), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_activity_room_created", "activity_records", ["room_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_activity_room_created", table_name="activity_records")
    op.drop_table("activity_records")
    op.drop_index("uq_access_requests_pending", table_name="access_requests")
    op.drop_index("ix_access_requests_room_status", table_name="access_requests")
    op.drop_index("ix_access_requests_requester_id", table_name="access_requests")
    op.drop_table("access_requests")
    op.drop_index("ix_grants_room_id", table_name="grants")
    op.drop_index("ix_grants_principal_id", table_name="grants")
    op.drop_table("grants")
    op.drop_index("ix_folders_room_parent", table_name="folders")
    op.drop_table("folders")
    op.drop_index("ix_data_rooms_owner_id", table_name="data_rooms")
    op.drop_table("data_rooms")
    op.drop_table("principals")
