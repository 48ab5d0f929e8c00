"""initial single recipe schema

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-09-02 19:12:40.118203

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "pancake_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, index=True),
        sa.Column("temperature", sa.Integer(), nullable=False, index=True),
        sa.Column("first_side_time", sa.Integer(), nullable=False),
        sa.Column("second_side_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating", sa.String(10), nullable=False, index=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            nullable=False,
            index=True,
            server_default=sa.func.now(),
        ),
    )

    # One global row per temperature, shared by every batter
    op.create_table(
        "cooking_recommendations",
        sa.Column("temperature", sa.Integer(), primary_key=True),
        sa.Column("first_side_time", sa.Integer(), nullable=False),
        sa.Column("second_side_time", sa.Integer(), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False, server_default="0"),
        sa.Column("data_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column(
            "last_updated",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "preferences",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("preferences")
    op.drop_table("cooking_recommendations")
    op.drop_table("pancake_history")
