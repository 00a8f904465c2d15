"""Tests for the recipe sources."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from sqlalchemy.exc import SQLAlchemyError

from mealmatch.models import RecipeRow
from mealmatch.repository import (
    InMemoryRecipeRepository,
    RepositoryError,
    SheetRecipeRepository,
    SqlRecipeRepository,
    parse_sheet_csv,
)

SHEET_CSV = (
    "ID,Nom de la recette,Type (sucré/salé),Difficulté (Facile/Moyen/Difficile),"
    "Temps de préparation (min),Nombre de personnes,Description courte,"
    "Ingrédients + quantités (séparés par ;),Instructions (étapes séparées par ;),"
    "Équipements nécessaires (séparés par ;)\n"
    '1,Salade de tomates,salé,Facile,10,2,Fraîche,"2 tomates;sel;huile d\'olive",'
    "Couper;Assaisonner,Saladier\n"
    ",,,,,,,,,\n"
    '2,Riz au lait,sucré,Moyen,45,4,Douceur,"100 g riz;1 l de lait",Cuire,Casserole\n'
)


def mock_client(handler) -> httpx.AsyncClient:
    """HTTP client answering every request with ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# =============================================================================
# In-Memory Repository Tests
# =============================================================================


class TestInMemoryRecipeRepository:
    """Tests for InMemoryRecipeRepository."""

    @pytest.mark.asyncio
    async def test_list_all(self, corpus):
        """Test every recipe is returned."""
        repository = InMemoryRecipeRepository(corpus)
        assert await repository.list_all() == corpus

    @pytest.mark.asyncio
    async def test_get_many(self, corpus):
        """Test recipes come back in requested order, unknown ids skipped."""
        repository = InMemoryRecipeRepository(corpus)
        found = await repository.get_many(["poulet", "inconnu", "salade"])
        assert [r.id for r in found] == ["poulet", "salade"]

    @pytest.mark.asyncio
    async def test_from_json_file(self, tmp_path):
        """Test loading a JSON export with French field names."""
        path = tmp_path / "recipes.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "1", "nom": "Soupe", "ingredients": "2 poireaux;sel"},
                    {"id": "2", "name": "Tarte", "ingredients_text": "200 g farine"},
                ]
            ),
            encoding="utf-8",
        )
        recipes = await InMemoryRecipeRepository.from_json_file(path).list_all()
        assert [r.name for r in recipes] == ["Soupe", "Tarte"]
        assert recipes[0].ingredients_text == "2 poireaux;sel"

    def test_from_invalid_file(self, tmp_path):
        """Test unreadable files raise RepositoryError."""
        with pytest.raises(RepositoryError):
            InMemoryRecipeRepository.from_json_file(tmp_path / "missing.json")

        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RepositoryError) as exc_info:
            InMemoryRecipeRepository.from_json_file(path)
        assert exc_info.value.source == "memory"
        assert exc_info.value.__cause__ is not None


# =============================================================================
# SQL Repository Tests
# =============================================================================


class TestSqlRecipeRepository:
    """Tests for SqlRecipeRepository with a mocked session."""

    @staticmethod
    def session_returning(rows):
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        session = AsyncMock()
        session.execute = AsyncMock(return_value=result)
        return session

    @pytest.mark.asyncio
    async def test_rows_become_recipes(self):
        """Test ORM rows are mapped to recipes."""
        row = RecipeRow(
            id="r1",
            name="Soupe de poireaux",
            ingredients_text="2 poireaux;1 l eau",
            type="salé",
            prep_time_minutes=30,
            servings=4,
        )
        repository = SqlRecipeRepository(self.session_returning([row]))

        [recipe] = await repository.list_all()
        assert recipe.id == "r1"
        assert recipe.name == "Soupe de poireaux"
        assert recipe.ingredients_text == "2 poireaux;1 l eau"
        assert recipe.prep_time_minutes == 30
        assert recipe.calories is None

    @pytest.mark.asyncio
    async def test_get_many_keeps_requested_order(self):
        """Test fetched rows are reordered like the requested ids."""
        rows = [RecipeRow(id="a", name="A"), RecipeRow(id="b", name="B")]
        repository = SqlRecipeRepository(self.session_returning(rows))

        found = await repository.get_many(["b", "a", "c"])
        assert [r.id for r in found] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_get_many_empty(self):
        """Test no query is made for an empty id list."""
        session = self.session_returning([])
        assert await SqlRecipeRepository(session).get_many([]) == []
        session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_error(self):
        """Test database errors surface as RepositoryError."""
        session = AsyncMock()
        session.execute = AsyncMock(side_effect=SQLAlchemyError("connection refused"))

        with pytest.raises(RepositoryError) as exc_info:
            await SqlRecipeRepository(session).list_all()
        assert exc_info.value.source == "database"
        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)


# =============================================================================
# Spreadsheet Repository Tests
# =============================================================================


class TestParseSheetCsv:
    """Tests for parse_sheet_csv function."""

    def test_parse_rows(self):
        """Test French headers are mapped and blank rows skipped."""
        recipes = parse_sheet_csv(SHEET_CSV)
        assert [r.id for r in recipes] == ["1", "2"]

        salade = recipes[0]
        assert salade.name == "Salade de tomates"
        assert salade.type == "salé"
        assert salade.difficulty == "Facile"
        assert salade.prep_time_minutes == 10
        assert salade.servings == 2
        assert salade.ingredients_text == "2 tomates;sel;huile d'olive"
        assert salade.instructions == "Couper;Assaisonner"
        assert salade.equipment == "Saladier"

    def test_byte_order_mark(self):
        """Test a leading BOM does not hide the first header."""
        recipes = parse_sheet_csv("\ufeff" + SHEET_CSV)
        assert [r.id for r in recipes] == ["1", "2"]

    def test_missing_id(self):
        """Test rows without an id get one from their line number."""
        csv_text = "Nom de la recette,Ingrédients + quantités (séparés par ;)\nSoupe,sel\n"
        [recipe] = parse_sheet_csv(csv_text)
        assert recipe.id == "row-2"


class TestSheetRecipeRepository:
    """Tests for SheetRecipeRepository with a mocked transport."""

    @pytest.mark.asyncio
    async def test_list_all(self):
        """Test recipes are downloaded and parsed."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "https://sheets.example.com/recipes.csv"
            return httpx.Response(200, text=SHEET_CSV)

        repository = SheetRecipeRepository(
            "https://sheets.example.com/recipes.csv", client=mock_client(handler)
        )
        recipes = await repository.list_all()
        await repository.close()

        assert [r.name for r in recipes] == ["Salade de tomates", "Riz au lait"]

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Test error statuses surface as RepositoryError."""
        repository = SheetRecipeRepository(
            "https://sheets.example.com/recipes.csv",
            client=mock_client(lambda request: httpx.Response(500)),
        )

        with pytest.raises(RepositoryError) as exc_info:
            await repository.list_all()
        assert "500" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_retries_network_errors(self):
        """Test transient network errors are retried."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection reset", request=request)
            return httpx.Response(200, text=SHEET_CSV)

        repository = SheetRecipeRepository(
            "https://sheets.example.com/recipes.csv", max_retries=2, client=mock_client(handler)
        )
        recipes = await repository.list_all()

        assert len(calls) == 2
        assert len(recipes) == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self):
        """Test the last network error is reported once retries run out."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        repository = SheetRecipeRepository(
            "https://sheets.example.com/recipes.csv", max_retries=1, client=mock_client(handler)
        )
        with pytest.raises(RepositoryError) as exc_info:
            await repository.list_all()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_missing_url(self):
        """Test an unconfigured URL is reported without a request."""
        repository = SheetRecipeRepository(client=mock_client(lambda request: httpx.Response(200)))
        repository.csv_url = ""

        with pytest.raises(RepositoryError, match="not configured"):
            await repository.list_all()
