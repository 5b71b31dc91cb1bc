"""comment moderation tables

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-16 09:12:41.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the comment and author reputation tables."""
    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_email", sa.String(length=254), nullable=False),
        sa.Column("author_display_name", sa.String(length=100), nullable=False),
        sa.Column("author_is_registered", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("auto_moderated", sa.Boolean(), nullable=False),
        sa.Column("moderation_score", sa.Integer(), nullable=False),
        sa.Column("flags", sa.JSON(), nullable=False),
        sa.Column("rejection_reason", sa.String(length=500), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comment_author_email", "comment", ["author_email"])
    op.create_index("ix_comment_status", "comment", ["status"])
    op.create_index("ix_comment_created_at", "comment", ["created_at"])

    op.create_table(
        "author_reputation",
        sa.Column("author_email", sa.String(length=254), nullable=False),
        sa.Column("total_comments", sa.Integer(), nullable=False),
        sa.Column("approved_comments", sa.Integer(), nullable=False),
        sa.Column("rejected_comments", sa.Integer(), nullable=False),
        sa.Column("spam_comments", sa.Integer(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("author_email"),
    )


def downgrade() -> None:
    """Drop the moderation tables."""
    op.drop_table("author_reputation")
    op.drop_index("ix_comment_created_at", table_name="comment")
    op.drop_index("ix_comment_status", table_name="comment")
    op.drop_index("ix_comment_author_email", table_name="comment")
    op.drop_table("comment")
