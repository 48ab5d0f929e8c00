"""Upgrade of single-recipe databases to the recipe-scoped layout.

Older databases kept one global ``cooking_recommendations`` table keyed by
temperature and history rows without a recipe. The upgrade moves both onto a
default recipe. It runs from the Alembic revision and from ``init_db`` and is
safe to run any number of times.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import MetaData, Table, inspect, select, text
from sqlalchemy.engine import Connection

from pancake_assistant.models.enums import BatterThickness
from pancake_assistant.models.preference import Preference
from pancake_assistant.models.recipe import Recipe
from pancake_assistant.models.recommendation import Recommendation
from pancake_assistant.services.recipe_service import (
    DEFAULT_RECIPE_DESCRIPTION,
    DEFAULT_RECIPE_NAME,
    new_recipe_fields,
)
from pancake_assistant.services.store import CURRENT_RECIPE_KEY

logger = logging.getLogger(__name__)

LEGACY_RECOMMENDATIONS_TABLE = "cooking_recommendations"
HISTORY_TABLE = "pancake_history"


def _default_recipe_id(connection: Connection) -> int:
    recipes = Recipe.__table__
    recipe_id = connection.execute(
        select(recipes.c.id).where(recipes.c.is_default.is_(True))
    ).scalar()
    if recipe_id is not None:
        return recipe_id

    result = connection.execute(
        recipes.insert().values(
            name=DEFAULT_RECIPE_NAME,
            description=DEFAULT_RECIPE_DESCRIPTION,
            is_default=True,
            has_data=False,
            **new_recipe_fields(BatterThickness.REGULAR),
        )
    )
    recipe_id = result.inserted_primary_key[0]
    logger.info(f"Created default recipe {recipe_id} for legacy data")
    return recipe_id


def _drop_legacy_table(connection: Connection) -> None:
    Table(LEGACY_RECOMMENDATIONS_TABLE, MetaData(), autoload_with=connection).drop(connection)


def _copy_legacy_recommendations(connection: Connection, recipe_id: int) -> int:
    legacy = Table(LEGACY_RECOMMENDATIONS_TABLE, MetaData(), autoload_with=connection)
    recommendations = Recommendation.__table__
    existing = set(
        connection.execute(
            select(recommendations.c.temperature).where(recommendations.c.recipe_id == recipe_id)
        ).scalars()
    )

    copied = 0
    for row in connection.execute(select(legacy)).mappings():
        if row["temperature"] in existing:
            continue
        connection.execute(
            recommendations.insert().values(
                recipe_id=recipe_id,
                temperature=row["temperature"],
                first_side_time=row["first_side_time"],
                second_side_time=row["second_side_time"],
                confidence=row.get("confidence") or 0.0,
                data_points=row.get("data_points") or 0.0,
                last_updated=row.get("last_updated") or datetime.now(UTC),
            )
        )
        copied += 1

    legacy.drop(connection)
    return copied


def upgrade_legacy_schema(connection: Connection) -> bool:
    """Move legacy global data onto the default recipe.

    Returns True when anything was migrated. A fresh database, or one that
    is already recipe-scoped, gets no recipe and no data changes; an empty
    legacy table is only dropped.
    """
    tables = set(inspect(connection).get_table_names())
    has_legacy = LEGACY_RECOMMENDATIONS_TABLE in tables
    if HISTORY_TABLE not in tables and not has_legacy:
        return False

    for table in (Recipe.__table__, Recommendation.__table__, Preference.__table__):
        table.create(connection, checkfirst=True)

    orphans = 0
    if HISTORY_TABLE in tables:
        columns = {column["name"] for column in inspect(connection).get_columns(HISTORY_TABLE)}
        if "recipe_id" not in columns:
            connection.execute(
                text(
                    f"ALTER TABLE {HISTORY_TABLE} "
                    "ADD COLUMN recipe_id INTEGER REFERENCES recipes(id)"
                )
            )
            logger.info(f"Added recipe_id to {HISTORY_TABLE}")
        orphans = connection.execute(
            text(f"SELECT COUNT(*) FROM {HISTORY_TABLE} WHERE recipe_id IS NULL")
        ).scalar()

    legacy_rows = 0
    if has_legacy:
        legacy_rows = connection.execute(
            text(f"SELECT COUNT(*) FROM {LEGACY_RECOMMENDATIONS_TABLE}")
        ).scalar()

    if not orphans and not legacy_rows:
        if has_legacy:
            _drop_legacy_table(connection)
            logger.info(f"Dropped empty {LEGACY_RECOMMENDATIONS_TABLE} table")
        return False

    recipe_id = _default_recipe_id(connection)

    copied = 0
    if has_legacy:
        copied = _copy_legacy_recommendations(connection, recipe_id)
        logger.info(f"Moved {copied} legacy recommendations to recipe {recipe_id}")

    if orphans:
        connection.execute(
            text(f"UPDATE {HISTORY_TABLE} SET recipe_id = :recipe_id WHERE recipe_id IS NULL"),
            {"recipe_id": recipe_id},
        )
        logger.info(f"Assigned {orphans} history records to recipe {recipe_id}")

    if copied or orphans:
        recipes = Recipe.__table__
        connection.execute(
            recipes.update().where(recipes.c.id == recipe_id).values(has_data=True)
        )

    preferences = Preference.__table__
    current = connection.execute(
        select(preferences.c.value).where(preferences.c.key == CURRENT_RECIPE_KEY)
    ).first()
    if current is None or current[0] is None:
        connection.execute(preferences.delete().where(preferences.c.key == CURRENT_RECIPE_KEY))
        connection.execute(preferences.insert().values(key=CURRENT_RECIPE_KEY, value=recipe_id))

    return True
