#!/usr/bin/env python3
"""Seed demo data for trying out the assistant.

Creates a few recipes and a couple of weeks of rated pancakes so the
recommendations, history and statistics endpoints have something to show.

Usage:
    # From project root:
    python scripts/seed_demo_data.py

    # Or against another database:
    DATABASE_URL=sqlite:///./demo.db python scripts/seed_demo_data.py
"""

import os
import random
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pancake_assistant.database import SessionLocal, init_db
from pancake_assistant.models.enums import Rating
from pancake_assistant.services.recipe_service import RecipeService
from pancake_assistant.services.recommendation_engine import RecommendationEngine

DEMO_SEED = 42

# name, description, thickness, temperature the demo cook favours
DEMO_RECIPES = [
    ("Buttermilk Stack", "Fluffy buttermilk pancakes", "thick", 4),
    ("Sunday Crepes", "Thin crepes with lemon and sugar", "thin", 6),
]

PANCAKES_PER_RECIPE = 12


def _simulated_cook(rng: random.Random, recommended_first: int, recommended_second: int):
    """Side times near the recommendation and a rating that depends on how close they were."""
    first = max(1, recommended_first + rng.randint(-20, 20))
    second = max(1, recommended_second + rng.randint(-15, 15))
    miss = abs(first - recommended_first)
    if miss <= 8:
        rating = Rating.GOOD
    elif miss <= 15:
        rating = Rating.MID
    else:
        rating = Rating.BAD
    return first, second, rating


def seed_demo_data():
    """Seed the database with representative recipes and history."""
    init_db()
    session = SessionLocal()
    rng = random.Random(DEMO_SEED)

    try:
        engine = RecommendationEngine(session, rng=random.Random(DEMO_SEED))
        service = RecipeService(session, engine)
        default_recipe = service.ensure_default_recipe()

        existing = {recipe.name: recipe for recipe in service.list_recipes()}
        plan = [(default_recipe, 5)]
        for name, description, thickness, temperature in DEMO_RECIPES:
            if name in existing:
                print(f"Recipe '{name}' already exists. Clearing its history and re-seeding...")
                recipe = existing[name]
                service.clear_history(recipe.id)
            else:
                print(f"Creating recipe '{name}'...")
                recipe = service.create_recipe(name, description, thickness)
            plan.append((recipe, temperature))

        for recipe, favourite in plan:
            print(f"Cooking {PANCAKES_PER_RECIPE} pancakes with '{recipe.name}'...")
            for _ in range(PANCAKES_PER_RECIPE):
                temperature = min(9, max(1, favourite + rng.choice([-1, 0, 0, 0, 1])))
                current = engine.get_recommendation(recipe.id, temperature)
                first, second, rating = _simulated_cook(
                    rng, current.first_side_time, current.second_side_time
                )
                service.record_rating(recipe.id, temperature, first, second, rating)

        service.set_current_recipe(default_recipe.id)
        print("Demo data seeded successfully!")

    except Exception as e:
        session.rollback()
        print(f"Error seeding demo data: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_demo_data()
