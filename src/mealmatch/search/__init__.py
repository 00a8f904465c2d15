"""Recipe search: scoring, pre-filters, featured picks and suggestions."""

from mealmatch.search.featured import pick_featured
from mealmatch.search.filters import (
    DietaryFilter,
    DietaryProfile,
    EquipmentFilter,
    RecipeFilter,
    Season,
    SeasonalFilter,
    detect_dietary_badges,
    filter_by_type,
)
from mealmatch.search.scorer import (
    RecipeSearchScorer,
    ScoredRecipe,
    TermMatcher,
    compute_score,
    parse_query,
    search,
)
from mealmatch.search.suggest import suggest_terms

__all__ = [
    "DietaryFilter",
    "DietaryProfile",
    "EquipmentFilter",
    "RecipeFilter",
    "RecipeSearchScorer",
    "ScoredRecipe",
    "Season",
    "SeasonalFilter",
    "TermMatcher",
    "compute_score",
    "detect_dietary_badges",
    "filter_by_type",
    "parse_query",
    "pick_featured",
    "search",
    "suggest_terms",
]
