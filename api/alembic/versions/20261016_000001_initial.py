"""initial schema

Revision ID: 20261016_000001
Revises: 
Create Date: 2026-10-16 00:00:01.000000
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261016_000001"
down_revision = None
branch_labels = None
depends_on = None


media_lot_enum = postgresql.ENUM(
    "audio_book",
    "book",
    "movie",
    "show",
    "podcast",
    "video_game",
    "anime",
    "manga",
    name="media_lot",
    create_type=False,
)
visibility_enum = postgresql.ENUM("public", "private", name="visibility", create_type=False)


def upgrade() -> None:
    """Create initial schema and enum types."""
    media_lot_enum.create(op.get_bind(), checkfirst=True)
    visibility_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "media_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("lot", media_lot_enum, nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("publish_year", sa.Integer(), nullable=True),
        sa.Column("specifics", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    )
    op.create_index("ix_media_items_lot", "media_items", ["lot"])
    op.create_index("ix_media_items_title", "media_items", ["title"])

    op.create_table(
        "seen_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "media_item_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("media_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_on", sa.Date(), nullable=True),
        sa.Column("finished_on", sa.Date(), nullable=True),
        sa.Column("dropped", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_updated_on", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("identifier", sa.String(length=255), nullable=False),
        sa.Column("extra_information", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.UniqueConstraint("user_id", "identifier", name="uq_seen_user_identifier"),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_seen_progress_range"),
    )
    op.create_index("ix_seen_records_user_id", "seen_records", ["user_id"])
    op.create_index("ix_seen_records_media_item_id", "seen_records", ["media_item_id"])
    op.create_index("ix_seen_records_last_updated_on", "seen_records", ["last_updated_on"])

    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "media_item_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("media_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("text", sa.String(length=5000), nullable=True),
        sa.Column("spoiler", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("visibility", visibility_enum, nullable=False, server_default="private"),
        sa.Column("posted_on", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("identifier", sa.String(length=255), nullable=False),
        sa.Column("extra_information", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.UniqueConstraint("user_id", "identifier", name="uq_review_user_identifier"),
        sa.CheckConstraint("rating >= 0 AND rating <= 100", name="ck_review_rating_range"),
    )
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_media_item_id", "reviews", ["media_item_id"])

    op.create_table(
        "summaries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_summaries_user_id", "summaries", ["user_id"])
    op.create_index("ix_summaries_created_at", "summaries", ["created_at"])

    op.create_table(
        "collections",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=2000), nullable=True),
        sa.Column("visibility", visibility_enum, nullable=False, server_default="private"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "name", name="uq_collection_user_name"),
    )
    op.create_index("ix_collections_user_id", "collections", ["user_id"])

    op.create_table(
        "collection_memberships",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "collection_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("collections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "media_item_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("media_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("added_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("collection_id", "media_item_id", name="uq_collection_media"),
    )
    op.create_index("ix_collection_memberships_collection_id", "collection_memberships", ["collection_id"])
    op.create_index("ix_collection_memberships_media_item_id", "collection_memberships", ["media_item_id"])


def downgrade() -> None:
    """Drop all tables and enum types created by the initial schema."""
    op.drop_table("collection_memberships")
    op.drop_table("collections")
    op.drop_table("summaries")
    op.drop_table("reviews")
    op.drop_table("seen_records")
    op.drop_table("media_items")
    op.drop_table("users")
    visibility_enum.drop(op.get_bind(), checkfirst=True)
    media_lot_enum.drop(op.get_bind(), checkfirst=True)
