"""Common data schemas for recipes."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mealmatch.normalize.ingredients import split_clauses
from mealmatch.normalize.text import normalize_text


class RecipeType(str, Enum):
    """Broad recipe category used by the type filter."""

    SWEET = "sweet"
    SAVORY = "savory"
    OTHER = "other"


# Free-text type labels are matched on normalized substrings:
# "sucré", "Sucrée", "sucree" are all sweet; "salé", "Salée" are savory.
TYPE_VOCABULARY: dict[RecipeType, tuple[str, ...]] = {
    RecipeType.SWEET: ("sucr", "sweet", "dessert"),
    RecipeType.SAVORY: ("sal", "savo"),
}


def type_matches(type_label: str | None, wanted: RecipeType | str) -> bool:
    """Check whether a free-text type label belongs to the wanted category."""
    wanted = RecipeType(wanted)
    if wanted is RecipeType.OTHER:
        return not any(type_matches(type_label, t) for t in TYPE_VOCABULARY)
    label = normalize_text(type_label)
    return any(fragment in label for fragment in TYPE_VOCABULARY[wanted])


def _as_int(value: Any, default: int | None) -> int | None:
    """Lenient integer conversion for spreadsheet cells ("30", "30.0", "")."""
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


class Recipe(BaseModel):
    """Recipe as stored in the recipe source; read-only once fetched."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str
    ingredients_text: str = Field("", description="Ingredient clauses joined by ';'")
    type: str = ""
    difficulty: str = ""
    prep_time_minutes: int = 0
    servings: int = 1
    calories: int | None = None
    image_ref: str | None = None
    short_description: str = ""
    instructions: str = ""
    equipment: str = ""

    @property
    def kind(self) -> RecipeType:
        """Sweet, savory or other, derived from the free-text type."""
        for recipe_type in TYPE_VOCABULARY:
            if type_matches(self.type, recipe_type):
                return recipe_type
        return RecipeType.OTHER

    def clauses(self) -> list[str]:
        """Raw ingredient clauses."""
        return split_clauses(self.ingredients_text)

    @classmethod
    def from_source_row(cls, row: dict[str, Any]) -> "Recipe":
        """
        Build a recipe from a row of the recipes table or its JSON export.

        Rows use the French column names of the original data set
        (``nom``, ``ingredients``, ``temps_preparation_min``...); English
        field names are accepted as well.
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                value = row.get(key)
                if value not in (None, ""):
                    return value
            return default

        calories = _as_int(pick("calories"), None)
        return cls(
            id=str(pick("id", default="")),
            name=pick("nom", "name", default=""),
            ingredients_text=pick("ingredients", "ingredients_text", default=""),
            type=pick("type", default=""),
            difficulty=pick("difficulte", "difficulty", default=""),
            prep_time_minutes=_as_int(pick("temps_preparation_min", "prep_time_minutes"), 0),
            servings=_as_int(pick("nb_personnes", "servings"), 1),
            calories=calories,
            image_ref=pick("image_url", "image_ref"),
            short_description=pick("description_courte", "short_description", default=""),
            instructions=pick("instructions", default=""),
            equipment=pick("equipements", "equipment", default=""),
        )
