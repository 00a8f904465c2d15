"""Normalize and parse recipe ingredient text."""

from mealmatch.normalize.ingredients import (
    NO_QUANTITY_INGREDIENTS,
    ParsedIngredient,
    parse_ingredient,
    split_clauses,
    strip_quantity,
)
from mealmatch.normalize.text import collation_key, normalize_text
from mealmatch.normalize.units import (
    canonical_unit,
    parse_quantity,
    round_half_up,
    tidy_quantity,
    units_compatible,
)

__all__ = [
    "NO_QUANTITY_INGREDIENTS",
    "ParsedIngredient",
    "canonical_unit",
    "collation_key",
    "normalize_text",
    "parse_ingredient",
    "parse_quantity",
    "round_half_up",
    "split_clauses",
    "strip_quantity",
    "tidy_quantity",
    "units_compatible",
]
