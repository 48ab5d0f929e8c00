"""scope history and recommendations by recipe

Revision ID: 8c4e2b6d1a95
Revises: 3f1a9c2d7b10
Create Date: 2026-09-14 21:03:55.402917

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op
from pancake_assistant.services.legacy_migration import upgrade_legacy_schema

# revision identifiers, used by Alembic.
revision: str = "8c4e2b6d1a95"
down_revision: str | None = "3f1a9c2d7b10"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("batter_thickness", sa.String(20), nullable=False, server_default="regular"),
        sa.Column("default_base_time", sa.Integer(), nullable=True),
        sa.Column("temp_scale_factor", sa.Float(), nullable=True),
        sa.Column("second_side_ratio", sa.Float(), nullable=True),
        sa.Column("min_cook_time", sa.Integer(), nullable=True),
        sa.Column("max_cook_time", sa.Integer(), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_data", sa.Boolean(), nullable=False, server_default=sa.false()),
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
    op.create_index(
        "uq_recipes_single_default",
        "recipes",
        ["is_default"],
        unique=True,
        sqlite_where=sa.text("is_default"),
        postgresql_where=sa.text("is_default"),
    )

    op.create_table(
        "recommendations",
        sa.Column("recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), primary_key=True),
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

    with op.batch_alter_table("pancake_history") as batch_op:
        batch_op.add_column(sa.Column("recipe_id", sa.Integer(), nullable=True))
        batch_op.create_index("ix_pancake_history_recipe_id", ["recipe_id"])
        batch_op.create_foreign_key(
            "fk_pancake_history_recipe_id", "recipes", ["recipe_id"], ["id"]
        )

    # Moves global recommendations and orphaned history onto the default recipe
    upgrade_legacy_schema(op.get_bind())

    with op.batch_alter_table("pancake_history") as batch_op:
        batch_op.alter_column("recipe_id", existing_type=sa.Integer(), nullable=False)


def downgrade() -> None:
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
    # Only the default recipe's learning survives in the global layout
    op.execute(
        "INSERT INTO cooking_recommendations "
        "(temperature, first_side_time, second_side_time, confidence, data_points, last_updated) "
        "SELECT r.temperature, r.first_side_time, r.second_side_time, r.confidence, "
        "r.data_points, r.last_updated "
        "FROM recommendations r JOIN recipes ON recipes.id = r.recipe_id "
        "WHERE recipes.is_default"
    )

    with op.batch_alter_table("pancake_history") as batch_op:
        batch_op.drop_constraint("fk_pancake_history_recipe_id", type_="foreignkey")
        batch_op.drop_index("ix_pancake_history_recipe_id")
        batch_op.drop_column("recipe_id")

    op.execute("DELETE FROM preferences WHERE key = 'currentRecipeId'")
    op.drop_table("recommendations")
    op.drop_index("uq_recipes_single_default", table_name="recipes")
    op.drop_table("recipes")
