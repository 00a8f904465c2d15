"""Recipe sources: in-memory corpus, SQL database and published spreadsheet."""

import csv
import io
import json
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable, Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mealmatch.config import get_settings
from mealmatch.database import AsyncSessionLocal
from mealmatch.logging_config import get_logger
from mealmatch.models import RecipeRow
from mealmatch.schemas import Recipe

logger = get_logger(__name__)


class RepositoryError(Exception):
    """Raised when a recipe source cannot be read."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class RecipeRepository(ABC):
    """Abstract recipe source."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return source name for logging and identification."""
        pass

    @abstractmethod
    async def list_all(self) -> list[Recipe]:
        """Fetch every recipe. No ordering is guaranteed."""
        pass

    async def get_many(self, recipe_ids: Sequence[str]) -> list[Recipe]:
        """
        Fetch recipes by id, in the requested order.

        Unknown ids are skipped; callers compare lengths to detect them.
        """
        by_id = {recipe.id: recipe for recipe in await self.list_all()}
        return [by_id[recipe_id] for recipe_id in recipe_ids if recipe_id in by_id]


# =============================================================================
# In-Memory
# =============================================================================


class InMemoryRecipeRepository(RecipeRepository):
    """Recipes held in memory, optionally loaded from a JSON export."""

    def __init__(self, recipes: Iterable[Recipe] = ()):
        self._recipes = list(recipes)

    @property
    def name(self) -> str:
        return "memory"

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryRecipeRepository":
        """
        Load a JSON array of recipe rows (French or English field names).

        Raises:
            RepositoryError: If the file cannot be read or holds invalid rows.
        """
        try:
            rows = json.loads(Path(path).read_text(encoding="utf-8"))
            recipes = [Recipe.from_source_row(row) for row in rows]
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise RepositoryError(f"Cannot load recipes from {path}: {e}", source="memory") from e

        logger.info(f"Loaded {len(recipes)} recipes from {path}")
        return cls(recipes)

    async def list_all(self) -> list[Recipe]:
        return list(self._recipes)


# =============================================================================
# SQL Database
# =============================================================================


def _row_to_recipe(row: RecipeRow) -> Recipe:
    return Recipe.from_source_row(
        {column: getattr(row, column) for column in Recipe.model_fields if hasattr(row, column)}
    )


class SqlRecipeRepository(RecipeRepository):
    """Recipes read from the ``recipes`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def name(self) -> str:
        return "database"

    async def list_all(self) -> list[Recipe]:
        return await self._fetch(select(RecipeRow).order_by(RecipeRow.name))

    async def get_many(self, recipe_ids: Sequence[str]) -> list[Recipe]:
        if not recipe_ids:
            return []
        found = await self._fetch(select(RecipeRow).where(RecipeRow.id.in_(list(recipe_ids))))
        by_id = {recipe.id: recipe for recipe in found}
        return [by_id[recipe_id] for recipe_id in recipe_ids if recipe_id in by_id]

    async def _fetch(self, stmt: Any) -> list[Recipe]:
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database query failed: {e}", source=self.name) from e

        recipes = [_row_to_recipe(row) for row in result.scalars().all()]
        logger.debug(f"Fetched {len(recipes)} recipes from database")
        return recipes


# =============================================================================
# Published Spreadsheet
# =============================================================================

# Column headers of the recipe spreadsheet, mapped to source-row keys
SHEET_COLUMNS = {
    "ID": "id",
    "Nom de la recette": "nom",
    "Type (sucré/salé)": "type",
    "Difficulté (Facile/Moyen/Difficile)": "difficulte",
    "Temps de préparation (min)": "temps_preparation_min",
    "Nombre de personnes": "nb_personnes",
    "Description courte": "description_courte",
    "Ingrédients + quantités (séparés par ;)": "ingredients",
    "Instructions (étapes séparées par ;)": "instructions",
    "Équipements nécessaires (séparés par ;)": "equipements",
    "Calories": "calories",
    "Image": "image_url",
}


def parse_sheet_csv(csv_text: str) -> list[Recipe]:
    """
    Parse the CSV export of the recipe spreadsheet.

    Rows without a recipe name are skipped.
    """
    reader = csv.DictReader(io.StringIO(csv_text.lstrip("\ufeff")))
    recipes = []

    for line_number, raw in enumerate(reader, start=2):
        row = {
            SHEET_COLUMNS[header.strip()]: (value or "").strip()
            for header, value in raw.items()
            if header and header.strip() in SHEET_COLUMNS and isinstance(value, str)
        }
        if not row.get("nom"):
            continue
        if not row.get("id"):
            row["id"] = f"row-{line_number}"

        try:
            recipes.append(Recipe.from_source_row(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid spreadsheet row {line_number}: {e}")

    return recipes


class SheetRecipeRepository(RecipeRepository):
    """Recipes downloaded from a spreadsheet published as CSV."""

    def __init__(
        self,
        csv_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self.csv_url = csv_url or settings.recipes_csv_url
        self.timeout = timeout or settings.http_timeout
        self.max_retries = max_retries or settings.http_max_retries
        self._client = client

    @property
    def name(self) -> str:
        return "sheet"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={"Accept": "text/csv", "User-Agent": "Mealmatch/1.0"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _download(self) -> str:
        client = await self._get_client()
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        ):
            with attempt:
                response = await client.get(self.csv_url)
                response.raise_for_status()
                return response.text
        raise RepositoryError("Spreadsheet download gave no response", source=self.name)

    async def list_all(self) -> list[Recipe]:
        if not self.csv_url:
            raise RepositoryError("RECIPES_CSV_URL is not configured", source=self.name)

        try:
            csv_text = await self._download()
        except httpx.HTTPStatusError as e:
            raise RepositoryError(
                f"Spreadsheet download failed with status {e.response.status_code}",
                source=self.name,
            ) from e
        except httpx.HTTPError as e:
            raise RepositoryError(f"Spreadsheet download failed: {e}", source=self.name) from e

        recipes = parse_sheet_csv(csv_text)
        logger.info(f"Fetched {len(recipes)} recipes from spreadsheet")
        return recipes


# =============================================================================
# FastAPI Dependency
# =============================================================================


@lru_cache
def _memory_repository() -> InMemoryRecipeRepository:
    settings = get_settings()
    if settings.recipes_file:
        return InMemoryRecipeRepository.from_json_file(settings.recipes_file)
    logger.warning("No RECIPES_FILE configured, serving an empty corpus")
    return InMemoryRecipeRepository()


async def get_recipe_repository() -> AsyncIterator[RecipeRepository]:
    """Dependency yielding the configured recipe source."""
    settings = get_settings()

    if settings.recipe_source == "database":
        async with AsyncSessionLocal() as session:
            yield SqlRecipeRepository(session)
    elif settings.recipe_source == "sheet":
        repository = SheetRecipeRepository()
        try:
            yield repository
        finally:
            await repository.close()
    else:
        yield _memory_repository()
