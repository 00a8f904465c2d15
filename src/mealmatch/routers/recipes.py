"""API routes for browsing and searching recipes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from mealmatch.config import get_settings
from mealmatch.logging_config import get_logger
from mealmatch.repository import RecipeRepository, RepositoryError, get_recipe_repository
from mealmatch.schemas import Recipe, RecipeType
from mealmatch.search import (
    DietaryFilter,
    DietaryProfile,
    EquipmentFilter,
    RecipeSearchScorer,
    ScoredRecipe,
    SeasonalFilter,
    detect_dietary_badges,
    parse_query,
    pick_featured,
    suggest_terms,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["recipes"])


# Request/Response schemas
class RecipeListResponse(BaseModel):
    """List of recipes."""

    recipes: list[Recipe]
    total: int


class SearchRequest(BaseModel):
    """Ingredient search with optional pre-filters."""

    terms: list[str] = Field(default_factory=list, description="Ingredient terms")
    query: str | None = Field(
        default=None, description="Raw query, split on commas, semicolons and newlines"
    )
    type: RecipeType | None = None
    see_all: bool = False
    seasonal: bool = False
    dietary_profiles: list[DietaryProfile] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    equipment: list[str] = Field(
        default_factory=list, description="Kitchen equipment available; empty means no restriction"
    )

    def all_terms(self) -> list[str]:
        return [*self.terms, *parse_query(self.query or "")]


class ScoredRecipeResponse(BaseModel):
    """A search hit."""

    recipe: Recipe
    score: float
    matched_terms: list[str]
    badges: list[DietaryProfile]

    @classmethod
    def from_scored(cls, scored: ScoredRecipe) -> "ScoredRecipeResponse":
        return cls(
            recipe=scored.recipe,
            score=scored.score,
            matched_terms=scored.matched_terms,
            badges=detect_dietary_badges(scored.recipe),
        )


class SearchResponse(BaseModel):
    """Ranked search results, with suggestions when nothing matched."""

    results: list[ScoredRecipeResponse]
    total: int
    message: str | None = None
    suggestions: dict[str, list[str]] = Field(default_factory=dict)


async def load_corpus(repository: RecipeRepository) -> list[Recipe]:
    """Fetch the corpus, mapping source failures to 502."""
    try:
        return await repository.list_all()
    except RepositoryError as e:
        logger.error(f"Recipe source {repository.name} unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Recipe source unavailable",
        )


# =============================================================================
# Recipe Endpoints
# =============================================================================


@router.get("/recipes", response_model=RecipeListResponse)
async def list_recipes(
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeListResponse:
    """List every recipe of the configured source."""
    recipes = await load_corpus(repository)
    return RecipeListResponse(recipes=recipes, total=len(recipes))


@router.post("/recipes/search", response_model=SearchResponse)
async def search_recipes(
    request: SearchRequest,
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> SearchResponse:
    """
    Search recipes by ingredients.

    Dietary, equipment and seasonal filters narrow the corpus before scoring. With no
    terms, a recipe type is required and a random selection of that type is
    returned.
    """
    settings = get_settings()
    terms = request.all_terms()
    if not any(t.strip() for t in terms) and request.type is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide at least one ingredient or a recipe type",
        )

    logger.info(f"Searching recipes: terms={terms}, type={request.type}, see_all={request.see_all}")
    corpus = await load_corpus(repository)

    try:
        if request.dietary_profiles or request.allergies:
            corpus = DietaryFilter(request.dietary_profiles, request.allergies).filter(corpus)
        if request.equipment:
            corpus = EquipmentFilter(request.equipment).filter(corpus)
        if request.seasonal:
            corpus = SeasonalFilter().filter(corpus)

        scorer = RecipeSearchScorer(limit=settings.search_result_limit)
        results = scorer.search(terms, corpus, request.type, see_all=request.see_all)

        response = SearchResponse(
            results=[ScoredRecipeResponse.from_scored(r) for r in results],
            total=len(results),
        )
        if not results and terms:
            response.message = f"No recipe found with: {', '.join(t.strip() for t in terms)}"
            response.suggestions = {
                term.strip(): suggest_terms(
                    term,
                    corpus,
                    limit=settings.suggestion_limit,
                    min_score=settings.suggestion_min_score,
                )
                for term in terms
                if term.strip()
            }
        return response
    except Exception as e:
        logger.error(f"Failed to search recipes: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search recipes",
        )


@router.get("/recipes/featured", response_model=RecipeListResponse)
async def featured_recipes(
    count: Annotated[int | None, Query(ge=1, le=20, description="Recipes to feature")] = None,
    seasonal: Annotated[bool, Query(description="Prefer recipes in season")] = True,
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeListResponse:
    """Random selection of recipes for the home page, seasonal when possible."""
    corpus = await load_corpus(repository)
    recipes = pick_featured(
        corpus,
        count=count or get_settings().featured_count,
        seasonal_filter=SeasonalFilter() if seasonal else None,
    )
    return RecipeListResponse(recipes=recipes, total=len(recipes))


@router.get("/recipes/{recipe_id}", response_model=Recipe)
async def get_recipe(
    recipe_id: str,
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> Recipe:
    """Get a specific recipe."""
    try:
        found = await repository.get_many([recipe_id])
    except RepositoryError as e:
        logger.error(f"Failed to fetch recipe {recipe_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Recipe source unavailable",
        )

    if not found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe {recipe_id} not found",
        )
    return found[0]
