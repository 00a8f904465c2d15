"""Shopping list aggregation from the recipes of a meal plan."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from mealmatch.logging_config import get_logger
from mealmatch.normalize.ingredients import ParsedIngredient, parse_ingredient, split_clauses
from mealmatch.normalize.text import collation_key, normalize_text
from mealmatch.normalize.units import COUNT, round_half_up, tidy_quantity, units_compatible
from mealmatch.schemas import Recipe

logger = get_logger(__name__)


@dataclass
class ShoppingListItem:
    """A single item in the shopping list."""

    name: str
    quantity: float | None = None
    unit: str | None = None
    has_at_home: bool = False

    # Recipes the item was collected from
    recipe_sources: list[str] = field(default_factory=list, compare=False)

    @property
    def normalized_name(self) -> str:
        return normalize_text(self.name)

    def merge(self, ingredient: ParsedIngredient) -> None:
        """
        Fold another mention of the same ingredient into this item.

        Any mention without a quantity reduces the item to a bare name.
        Quantities in incompatible units are not summed; the first one is kept.
        """
        if self.quantity is None or ingredient.quantity is None:
            self.quantity = None
            self.unit = None
            return

        if not units_compatible(self.unit, ingredient.unit):
            logger.warning(
                f"Cannot add {ingredient.unit} to {self.unit} for {self.name!r}, keeping first"
            )
            return

        self.quantity = tidy_quantity(self.quantity + ingredient.quantity)
        self.unit = self.unit or ingredient.unit


class ShoppingListAggregator:
    """
    Collapses the ingredient lists of several recipes into one list.

    Ingredients are grouped by normalized name; quantities are summed when
    their units are compatible. No unit conversion is performed.
    """

    def aggregate(self, recipes: Iterable[Recipe]) -> list[ShoppingListItem]:
        items: dict[str, ShoppingListItem] = {}
        recipe_count = 0

        for recipe in recipes:
            recipe_count += 1
            for clause in split_clauses(recipe.ingredients_text):
                ingredient = parse_ingredient(clause)
                key = normalize_text(ingredient.name)
                if not key:
                    continue

                item = items.get(key)
                if item is None:
                    items[key] = ShoppingListItem(
                        name=ingredient.name,
                        quantity=ingredient.quantity,
                        unit=ingredient.unit,
                        recipe_sources=[recipe.id],
                    )
                    continue

                item.merge(ingredient)
                if recipe.id not in item.recipe_sources:
                    item.recipe_sources.append(recipe.id)

        result = sorted(items.values(), key=lambda i: collation_key(i.name))
        logger.info(f"Aggregated {recipe_count} recipes into {len(result)} shopping items")
        return result


def aggregate(recipes: Iterable[Recipe]) -> list[ShoppingListItem]:
    """Aggregate the ingredients of ``recipes`` into a sorted shopping list."""
    return ShoppingListAggregator().aggregate(recipes)


# =============================================================================
# Formatting & Export
# =============================================================================


def format_quantity(quantity: float) -> str:
    """At most one decimal, trailing '.0' stripped: 2.0 -> '2', 0.25 -> '0.3'."""
    text = str(round_half_up(quantity, 1))
    return text[:-2] if text.endswith(".0") else text


def format_item(item: ShoppingListItem) -> str:
    """
    Render an item as one shopping-list line.

    Examples:
        (œufs, 4, count) -> "4 œufs"
        (œuf, 1, count) -> "œuf"
        (farine, 200, g) -> "200 g farine"
        (sel, None, None) -> "sel"
    """
    if item.quantity is None:
        return item.name

    quantity = format_quantity(item.quantity)
    if item.unit == COUNT:
        return item.name if quantity == "1" else f"{quantity} {item.name}"
    if not item.unit:
        return f"{quantity} {item.name}"
    return f"{quantity} {item.unit} {item.name}"


def missing_items(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    """Items the user does not already have at home."""
    return [item for item in items if not item.has_at_home]


def export_text(items: Sequence[ShoppingListItem], only_missing: bool = False) -> str:
    """Serialize a shopping list as newline-delimited formatted lines."""
    if only_missing:
        items = missing_items(items)
    return "\n".join(format_item(item) for item in items)
