"""Meal planning: shopping list aggregation and export."""

from mealmatch.plan.shopping_list import (
    ShoppingListAggregator,
    ShoppingListItem,
    aggregate,
    export_text,
    format_item,
    missing_items,
)

__all__ = [
    "ShoppingListAggregator",
    "ShoppingListItem",
    "aggregate",
    "export_text",
    "format_item",
    "missing_items",
]
