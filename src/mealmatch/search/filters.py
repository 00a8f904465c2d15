"""Corpus pre-filters: recipe type, season, dietary profile and equipment."""

import re
from collections.abc import Iterable, Sequence
from datetime import date
from enum import Enum
from typing import Protocol

from mealmatch.logging_config import get_logger
from mealmatch.normalize.text import normalize_text
from mealmatch.schemas import Recipe, RecipeType, type_matches

logger = get_logger(__name__)


class RecipeFilter(Protocol):
    """Pre-filter applied by callers before searching."""

    def filter(self, recipes: Sequence[Recipe]) -> list[Recipe]: ...


def filter_by_type(recipes: Iterable[Recipe], recipe_type: RecipeType | str) -> list[Recipe]:
    """Keep recipes whose free-text type belongs to ``recipe_type``."""
    return [r for r in recipes if type_matches(r.type, recipe_type)]


def _contains_word(text: str, word: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(word)}(?:s|x)?(?!\w)", text) is not None


# =============================================================================
# Seasons
# =============================================================================


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


SEASONAL_INGREDIENTS: dict[Season, list[str]] = {
    Season.SPRING: [
        "asperge",
        "petits pois",
        "radis",
        "artichaut",
        "épinard",
        "fraise",
        "rhubarbe",
        "menthe",
        "ciboulette",
        "pois",
    ],
    Season.SUMMER: [
        "tomate",
        "courgette",
        "aubergine",
        "poivron",
        "concombre",
        "salade",
        "basilic",
        "melon",
        "pastèque",
        "pêche",
        "abricot",
        "cerise",
        "framboise",
        "myrtille",
        "courge",
        "haricots verts",
    ],
    Season.AUTUMN: [
        "champignon",
        "potiron",
        "courge",
        "patate douce",
        "chou",
        "chou-fleur",
        "brocoli",
        "noix",
        "noisette",
        "raisin",
        "poire",
        "pomme",
        "prune",
        "figue",
    ],
    Season.WINTER: [
        "chou",
        "chou-fleur",
        "brocoli",
        "endive",
        "mâche",
        "carotte",
        "pomme de terre",
        "navet",
        "poireau",
        "orange",
        "clémentine",
        "mandarine",
        "kiwi",
        "châtaigne",
    ],
}


def season_for(day: date) -> Season:
    """Meteorological season (northern hemisphere) of a date."""
    if 3 <= day.month <= 5:
        return Season.SPRING
    if 6 <= day.month <= 8:
        return Season.SUMMER
    if 9 <= day.month <= 11:
        return Season.AUTUMN
    return Season.WINTER


class SeasonalFilter:
    """
    Keeps recipes using at least one ingredient in season.

    Falls back to the whole corpus when nothing is in season, so the filter
    never empties a result page on its own.
    """

    def __init__(self, season: Season | None = None, today: date | None = None):
        self.season = season or season_for(today or date.today())
        self._ingredients = [normalize_text(i) for i in SEASONAL_INGREDIENTS[self.season]]

    def is_seasonal(self, recipe: Recipe) -> bool:
        text = normalize_text(recipe.ingredients_text)
        return any(ingredient in text for ingredient in self._ingredients)

    def filter(self, recipes: Sequence[Recipe]) -> list[Recipe]:
        seasonal = [r for r in recipes if self.is_seasonal(r)]
        logger.debug(f"{len(seasonal)} of {len(recipes)} recipes in season ({self.season.value})")
        return seasonal if seasonal else list(recipes)


# =============================================================================
# Dietary Profiles
# =============================================================================


class DietaryProfile(str, Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    PESCATARIAN = "pescatarian"
    PORK_FREE = "pork_free"
    LACTOSE_FREE = "lactose_free"
    GLUTEN_FREE = "gluten_free"


_MEAT = ["viande", "porc", "bœuf", "boeuf", "poulet", "agneau", "jambon", "bacon", "lardons"]
_MEAT += ["saucisse", "chorizo", "dinde", "veau", "canard"]
_FISH = ["poisson", "thon", "saumon", "cabillaud", "crevette", "moule", "anchois", "sardine"]
_DAIRY = ["lait", "yaourt", "fromage", "beurre", "crème", "mozzarella", "parmesan", "emmental"]
_DAIRY += ["comté", "gruyère", "brie", "camembert", "feta", "chèvre", "mascarpone", "ricotta"]

DIETARY_EXCLUSIONS: dict[DietaryProfile, list[str]] = {
    DietaryProfile.VEGETARIAN: _MEAT + _FISH,
    DietaryProfile.VEGAN: _MEAT + _FISH + _DAIRY + ["œuf", "oeuf", "miel"],
    DietaryProfile.PESCATARIAN: _MEAT,
    DietaryProfile.PORK_FREE: ["porc", "jambon", "bacon", "lardons", "saucisse", "chorizo"],
    DietaryProfile.LACTOSE_FREE: _DAIRY,
    DietaryProfile.GLUTEN_FREE: [
        "blé",
        "farine",
        "pâtes",
        "pâte",
        "pain",
        "semoule",
        "boulgour",
        "orge",
        "seigle",
        "avoine",
        "épeautre",
        "biscotte",
        "chapelure",
        "gnocchi",
        "ravioli",
        "lasagne",
        "spaghetti",
        "tagliatelle",
        "penne",
        "couscous",
        "biscuit",
        "brioche",
        "croissant",
        "baguette",
    ],
}


class DietaryFilter:
    """
    Excludes recipes containing ingredients ruled out by dietary profiles
    or by free-text allergies. Exclusions are matched as whole words on
    normalized ingredient text, plural forms included.
    """

    def __init__(
        self,
        profiles: Iterable[DietaryProfile | str] = (),
        allergies: Iterable[str] = (),
    ):
        self.profiles = [DietaryProfile(p) for p in profiles]
        exclusions: list[str] = []
        for profile in self.profiles:
            exclusions.extend(DIETARY_EXCLUSIONS[profile])
        exclusions.extend(allergies)

        self.exclusions = sorted({e for e in map(normalize_text, exclusions) if e})

    def allows(self, recipe: Recipe) -> bool:
        text = normalize_text(recipe.ingredients_text)
        return not any(_contains_word(text, exclusion) for exclusion in self.exclusions)

    def filter(self, recipes: Sequence[Recipe]) -> list[Recipe]:
        if not self.exclusions:
            return list(recipes)
        kept = [r for r in recipes if self.allows(r)]
        logger.debug(f"Dietary filter kept {len(kept)} of {len(recipes)} recipes")
        return kept


def detect_dietary_badges(recipe: Recipe) -> list[DietaryProfile]:
    """Profiles a recipe is compatible with, judged from its ingredients."""
    if not recipe.ingredients_text.strip():
        return []
    return [profile for profile in DietaryProfile if DietaryFilter([profile]).allows(recipe)]


# =============================================================================
# Kitchen Equipment
# =============================================================================

EQUIPMENT_DELIMITER = ";"


def _equipment_key(name: str) -> str:
    # "Micro-ondes" and "Microondes" are the same appliance
    return normalize_text(name).replace(" ", "")


class EquipmentFilter:
    """
    Excludes recipes needing equipment the user does not have.

    A required item is available when its name and an available one contain
    each other ("four" and "four traditionnel"). Recipes listing no equipment
    always pass, and an empty equipment list disables the filter.
    """

    def __init__(self, available: Iterable[str] = ()):
        self.available = [key for key in map(_equipment_key, available) if key]

    def required(self, recipe: Recipe) -> list[str]:
        return [
            key
            for key in map(_equipment_key, recipe.equipment.split(EQUIPMENT_DELIMITER))
            if key
        ]

    def allows(self, recipe: Recipe) -> bool:
        return all(
            any(have in need or need in have for have in self.available)
            for need in self.required(recipe)
        )

    def filter(self, recipes: Sequence[Recipe]) -> list[Recipe]:
        if not self.available:
            return list(recipes)
        kept = [r for r in recipes if self.allows(r)]
        logger.debug(f"Equipment filter kept {len(kept)} of {len(recipes)} recipes")
        return kept
