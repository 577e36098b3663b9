"""Create players, matches and signups tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# Revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("primary_position", sa.String(length=20), nullable=True),
        sa.Column("secondary_position", sa.String(length=20), nullable=True),
        sa.Column("speed", sa.Integer(), nullable=True),
        sa.Column("control", sa.Integer(), nullable=True),
        sa.Column("physical_condition", sa.Integer(), nullable=True),
        sa.Column("attitude", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("group_name", sa.String(length=255), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("location_name", sa.String(length=255), nullable=False),
        sa.Column("player_limit", sa.Integer(), nullable=False),
        sa.Column("roster_version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("player_limit >= 1", name="ck_player_limit_positive"),
    )
    op.create_index("idx_matches_scheduled_at", "matches", ["scheduled_at"], unique=False)

    op.create_table(
        "signups",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("player_name", sa.String(length=255), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=True),
        sa.Column("is_guest", sa.Boolean(), nullable=False),
        sa.Column("is_waiting", sa.Boolean(), nullable=False),
        sa.Column("meal_only", sa.Boolean(), nullable=False),
        sa.Column("has_meal", sa.Boolean(), nullable=False),
        sa.Column(
            "positions",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("order_rank", sa.Integer(), nullable=False),
        sa.Column("signup_time", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("match_id", "player_id", name="uq_signup_match_player"),
        sa.CheckConstraint("NOT (meal_only AND is_waiting)", name="ck_meal_only_not_waiting"),
    )
    op.create_index(
        "idx_signups_partition",
        "signups",
        ["match_id", "is_waiting", "meal_only", "order_rank"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_signups_partition", table_name="signups")
    op.drop_table("signups")
    op.drop_index("idx_matches_scheduled_at", table_name="matches")
    op.drop_table("matches")
    op.drop_table("players")
