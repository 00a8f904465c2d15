"""API routes for building and exporting shopping lists."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from mealmatch.logging_config import LoggingContext, get_logger
from mealmatch.normalize.text import normalize_text
from mealmatch.plan import ShoppingListItem, aggregate, export_text, format_item
from mealmatch.repository import RecipeRepository, RepositoryError, get_recipe_repository
from mealmatch.schemas import Recipe

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["shopping-list"])

EXPORT_FILENAME = "liste-de-courses.txt"


class ShoppingListRequest(BaseModel):
    """Recipes to shop for."""

    recipe_ids: list[str] = Field(..., min_length=1)
    owned: list[str] = Field(
        default_factory=list, description="Ingredient names already at home"
    )
    plan_id: str | None = None


class ExportRequest(ShoppingListRequest):
    """Export options."""

    only_missing: bool = False


class ShoppingListItemResponse(BaseModel):
    """A shopping list line."""

    name: str
    quantity: float | None
    unit: str | None
    has_at_home: bool
    line: str
    recipe_sources: list[str]

    @classmethod
    def from_item(cls, item: ShoppingListItem) -> "ShoppingListItemResponse":
        return cls(
            name=item.name,
            quantity=item.quantity,
            unit=item.unit,
            has_at_home=item.has_at_home,
            line=format_item(item),
            recipe_sources=item.recipe_sources,
        )


class ShoppingListResponse(BaseModel):
    """Aggregated shopping list."""

    items: list[ShoppingListItemResponse]
    total: int
    recipe_ids: list[str]


async def _load_recipes(repository: RecipeRepository, recipe_ids: list[str]) -> list[Recipe]:
    try:
        recipes = await repository.get_many(recipe_ids)
    except RepositoryError as e:
        logger.error(f"Failed to fetch recipes {recipe_ids}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Recipe source unavailable",
        )

    found = {recipe.id for recipe in recipes}
    missing = [recipe_id for recipe_id in recipe_ids if recipe_id not in found]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipes not found: {', '.join(missing)}",
        )
    return recipes


async def _build_list(
    request: ShoppingListRequest,
    repository: RecipeRepository,
) -> list[ShoppingListItem]:
    with LoggingContext(plan_id=request.plan_id):
        recipes = await _load_recipes(repository, request.recipe_ids)
        items = aggregate(recipes)

    owned = {normalize_text(name) for name in request.owned}
    for item in items:
        item.has_at_home = item.normalized_name in owned
    return items


@router.post("/shopping-list", response_model=ShoppingListResponse)
async def create_shopping_list(
    request: ShoppingListRequest,
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> ShoppingListResponse:
    """Aggregate the ingredients of the selected recipes into one list."""
    logger.info(f"Building shopping list for {len(request.recipe_ids)} recipes")
    items = await _build_list(request, repository)
    return ShoppingListResponse(
        items=[ShoppingListItemResponse.from_item(item) for item in items],
        total=len(items),
        recipe_ids=request.recipe_ids,
    )


@router.post("/shopping-list/export", response_class=PlainTextResponse)
async def export_shopping_list(
    request: ExportRequest,
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> PlainTextResponse:
    """Download the shopping list as plain text, one item per line."""
    items = await _build_list(request, repository)
    return PlainTextResponse(
        export_text(items, only_missing=request.only_missing),
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
