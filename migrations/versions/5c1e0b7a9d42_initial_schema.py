"""initial schema

Revision ID: 5c1e0b7a9d42
Revises:
Create Date: 2026-10-18 09:12:40.218311

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e0b7a9d42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profile, swipe, match and message tables."""
    op.create_table(
        "profile",
        sa.Column("identity", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "swipe_record",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("from_identity", sa.Text(), nullable=False),
        sa.Column("to_identity", sa.Text(), nullable=False),
        sa.Column("direction", sa.String(length=5), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("direction IN ('left', 'right')", name="ck_swipe_record_direction"),
        sa.CheckConstraint("from_identity <> to_identity", name="ck_swipe_record_not_self"),
    )
    op.create_index("ix_swipe_record_pair", "swipe_record", ["from_identity", "to_identity"])
    op.create_index("ix_swipe_record_inbound", "swipe_record", ["to_identity", "direction"])

    op.create_table(
        "match_record",
        sa.Column("pair_key", sa.Text(), primary_key=True),
        sa.Column("user_a", sa.Text(), nullable=False),
        sa.Column("user_b", sa.Text(), nullable=False),
        sa.Column("salt", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("user_a < user_b", name="ck_match_record_sorted"),
    )
    op.create_index("ix_match_record_user_a", "match_record", ["user_a"])
    op.create_index("ix_match_record_user_b", "match_record", ["user_b"])

    op.create_table(
        "conversation_message",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "pair_key",
            sa.Text(),
            sa.ForeignKey("match_record.pair_key", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_encrypted", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_conversation_message_thread",
        "conversation_message",
        ["pair_key", "created_at"],
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_conversation_message_thread", table_name="conversation_message")
    op.drop_table("conversation_message")
    op.drop_index("ix_match_record_user_b", table_name="match_record")
    op.drop_index("ix_match_record_user_a", table_name="match_record")
    op.drop_table("match_record")
    op.drop_index("ix_swipe_record_inbound", table_name="swipe_record")
    op.drop_index("ix_swipe_record_pair", table_name="swipe_record")
    op.drop_table("swipe_record")
    op.drop_table("profile")
