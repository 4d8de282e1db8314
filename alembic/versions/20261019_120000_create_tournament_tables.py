"""Create tournaments, tournament_participants and matches tables

Revision ID: 4f1a2b3c5d6e
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers, used by Alembic.
revision: str = "4f1a2b3c5d6e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tournaments",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("format", sa.String(length=30), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("winner_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('open', 'closed', 'in_progress', 'completed')",
            name="ck_tournaments_status",
        ),
        sa.CheckConstraint(
            "format IN ('single_elimination', 'round_robin')",
            name="ck_tournaments_format",
        ),
    )

    op.create_table(
        "tournament_participants",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tournament_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("seed", sa.Integer(), nullable=True),
        sa.Column("joined_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id", "user_id", name="uq_participant_tournament_user"),
    )

    op.create_table(
        "matches",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tournament_id", sa.String(length=36), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("match_number", sa.Integer(), nullable=False),
        sa.Column("player1_id", sa.String(length=36), nullable=True),
        sa.Column("player2_id", sa.String(length=36), nullable=True),
        sa.Column("winner_id", sa.String(length=36), nullable=True),
        sa.Column("player1_score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("player2_score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("is_bye", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "tournament_id", "round", "match_number", name="uq_match_tournament_round_number"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')",
            name="ck_matches_status",
        ),
    )
    op.create_index("idx_matches_tournament", "matches", ["tournament_id"], unique=False)
    op.create_index("idx_matches_status", "matches", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_matches_status", table_name="matches")
    op.drop_index("idx_matches_tournament", table_name="matches")
    op.drop_table("matches")
    op.drop_table("tournament_participants")
    op.drop_table("tournaments")
