#!/usr/bin/env python
"""
Recipe table seeding script.

Copies the recipe corpus into the ``recipes`` table so the API can run with
RECIPE_SOURCE=database. It will:

1. Create the tables if they don't exist
2. Check if recipes already exist (skip if already seeded)
3. Load recipes from a JSON export or the published spreadsheet
4. Upsert them by id

Run with: python scripts/seed_recipes.py

Environment Variables:
    SEED_FROM: "file" (RECIPES_FILE) or "sheet" (RECIPES_CSV_URL), default: sheet
    SEED_SKIP_IF_EXISTS: Skip seeding if recipes exist (default: true)
    DATABASE_URL: PostgreSQL connection string
"""

import asyncio
import os
import sys

from sqlalchemy import func, select

from mealmatch.config import get_settings
from mealmatch.database import AsyncSessionLocal, Base, async_engine
from mealmatch.logging_config import configure_logging, get_logger
from mealmatch.models import RecipeRow
from mealmatch.repository import InMemoryRecipeRepository, RecipeRepository, SheetRecipeRepository
from mealmatch.schemas import Recipe

configure_logging(log_level=os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

SEED_FROM = os.getenv("SEED_FROM", "sheet").lower()
SEED_SKIP_IF_EXISTS = os.getenv("SEED_SKIP_IF_EXISTS", "true").lower() == "true"


def source_repository() -> RecipeRepository:
    """Recipe source to copy from."""
    if SEED_FROM == "file":
        return InMemoryRecipeRepository.from_json_file(get_settings().recipes_file)
    return SheetRecipeRepository()


def to_row(recipe: Recipe) -> RecipeRow:
    return RecipeRow(**recipe.model_dump())


async def seed_recipes() -> dict:
    """
    Main seeding function.

    Returns:
        Dictionary with seeding results.
    """
    results = {"status": "unknown", "recipes_loaded": 0, "recipes_stored": 0, "skipped": False}

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")

    async with AsyncSessionLocal() as session:
        existing = (await session.execute(select(func.count(RecipeRow.id)))).scalar() or 0
        logger.info(f"Found {existing} existing recipes")

        if SEED_SKIP_IF_EXISTS and existing > 0:
            logger.info("Recipes table already seeded, skipping")
            results.update(status="skipped", skipped=True, existing_recipes=existing)
            return results

        repository = source_repository()
        try:
            recipes = await repository.list_all()
        finally:
            if isinstance(repository, SheetRecipeRepository):
                await repository.close()
        results["recipes_loaded"] = len(recipes)

        if not recipes:
            logger.warning("No recipes loaded!")
            results["status"] = "warning"
            return results

        for recipe in recipes:
            await session.merge(to_row(recipe))
        await session.commit()
        results["recipes_stored"] = len(recipes)

    await async_engine.dispose()
    results["status"] = "completed"
    logger.info(f"Seeding completed: {results}")
    return results


def main():
    """Entry point for the seed script."""
    logger.info(f"Seeding recipes from {SEED_FROM} (skip if exists: {SEED_SKIP_IF_EXISTS})")

    try:
        results = asyncio.run(seed_recipes())
        sys.exit(0 if results["status"] in ("completed", "skipped") else 1)
    except KeyboardInterrupt:
        logger.info("Seeding interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Seeding failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
