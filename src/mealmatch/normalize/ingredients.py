"""Parse free-text ingredient clauses into name, quantity and unit."""

import re
from collections.abc import Callable
from dataclasses import dataclass

from mealmatch.logging_config import get_logger
from mealmatch.normalize.text import normalize_text
from mealmatch.normalize.units import (
    COUNT,
    NUMBER_PATTERN,
    UNIT_WORD_PATTERN,
    canonical_unit,
    parse_quantity,
    tidy_quantity,
)

logger = get_logger(__name__)

CLAUSE_DELIMITER = ";"

# Ingredients listed without a quantity, even when the recipe gives one:
# "3 sel" is not a useful shopping-list entry.
NO_QUANTITY_INGREDIENTS = [
    "sel",
    "poivre",
    "huile d'olive",
    "huile",
    "vinaigre",
    "citron",
    "citron vert",
    "herbes de provence",
    "basilic",
    "persil",
    "ciboulette",
    "coriandre",
    "menthe",
    "thym",
    "romarin",
    "origan",
    "curry",
    "cumin",
    "paprika",
    "curcuma",
    "gingembre",
    "cannelle",
    "vanille",
    "levure",
    "levure chimique",
    "levure de boulanger",
    "bicarbonate",
    "bicarbonate de soude",
    "extrait de vanille",
    "essence de vanille",
    "laurier",
    "clou de girofle",
    "muscade",
    "cardamome",
    "anis",
    "fenouil",
    "piment",
    "piment de cayenne",
    "cayenne",
    "harissa",
    "sauce soja",
    "sauce worcestershire",
    "moutarde",
    "ketchup",
    "mayonnaise",
    "cornichons",
    "câpres",
]

_NORMALIZED_STAPLES = [normalize_text(s) for s in NO_QUANTITY_INGREDIENTS]

# "de farine", "d'huile", "du beurre", "des oignons"
_PARTITIVE = r"(?:(?:de|du|des)\s+|d['’]\s*)?"

_QTY_UNIT_NAME = re.compile(
    rf"^({NUMBER_PATTERN})\s*({UNIT_WORD_PATTERN})\s+{_PARTITIVE}(.+)$",
    re.IGNORECASE,
)
_QTY_NAME = re.compile(
    rf"^({NUMBER_PATTERN})\s+(?:de\s+|d['’]\s*)?(.+)$",
    re.IGNORECASE,
)
_INT_NAME = re.compile(r"^(\d+)\s+(.+)$")


@dataclass(frozen=True)
class ParsedIngredient:
    """One ingredient clause broken into name, quantity and unit."""

    name: str
    quantity: float | None = None
    unit: str | None = None

    @property
    def has_quantity(self) -> bool:
        return self.quantity is not None


def split_clauses(ingredients_text: str | None) -> list[str]:
    """Split ``;``-delimited ingredient text into trimmed, non-empty clauses."""
    if not ingredients_text:
        return []
    return [c.strip() for c in ingredients_text.split(CLAUSE_DELIMITER) if c.strip()]


def is_staple(normalized_clause: str) -> bool:
    """Check a normalized clause against the no-quantity staples, both directions."""
    return any(
        staple in normalized_clause or normalized_clause in staple
        for staple in _NORMALIZED_STAPLES
    )


# =============================================================================
# Extraction Rules
# =============================================================================
#
# Each rule returns a ParsedIngredient or None to fall through to the next.


def _with_quantity(
    clause: str,
    quantity_text: str,
    unit_word: str | None,
    name: str,
) -> ParsedIngredient | None:
    quantity = parse_quantity(quantity_text)
    if quantity is None:
        return None

    unit = canonical_unit(unit_word)
    if unit is None and quantity == int(quantity):
        unit = COUNT

    return ParsedIngredient(
        name=name.strip() or clause,
        quantity=tidy_quantity(quantity),
        unit=unit,
    )


def _quantity_unit_name(clause: str) -> ParsedIngredient | None:
    """'200 g farine', '2 cuillères à soupe de sucre', '1/2 tasse de lait'."""
    match = _QTY_UNIT_NAME.match(clause)
    if not match:
        return None
    return _with_quantity(clause, match.group(1), match.group(2), match.group(3))


def _quantity_name(clause: str) -> ParsedIngredient | None:
    """'3 de pommes', '0,5 oignon', '2 tomates'."""
    match = _QTY_NAME.match(clause)
    if not match:
        return None
    return _with_quantity(clause, match.group(1), None, match.group(2))


def _integer_name(clause: str) -> ParsedIngredient | None:
    """'4 œufs'."""
    match = _INT_NAME.match(clause)
    if not match:
        return None
    return _with_quantity(clause, match.group(1), None, match.group(2))


EXTRACTION_RULES: tuple[Callable[[str], ParsedIngredient | None], ...] = (
    _quantity_unit_name,
    _quantity_name,
    _integer_name,
)


def _apply_rules(clause: str) -> ParsedIngredient | None:
    for rule in EXTRACTION_RULES:
        parsed = rule(clause)
        if parsed is not None:
            return parsed
    return None


def strip_quantity(clause: str) -> str:
    """Remove a leading quantity/unit run: '200 g de farine' -> 'farine'."""
    clause = clause.strip()
    parsed = _apply_rules(clause)
    return parsed.name if parsed else clause


def parse_ingredient(clause: str | None) -> ParsedIngredient:
    """
    Parse one ingredient clause.

    Never raises: anything unparseable degrades to a name-only ingredient.
    Empty input yields an empty name, which callers discard.

    Examples:
        "200 g farine" -> ParsedIngredient("farine", 200, "g")
        "4 œufs" -> ParsedIngredient("œufs", 4, "count")
        "sel" -> ParsedIngredient("sel", None, None)
        "2 c.à.s de sel" -> ParsedIngredient("sel", None, None)
    """
    trimmed = (clause or "").strip()
    if not trimmed:
        return ParsedIngredient(name="")

    if is_staple(normalize_text(trimmed)):
        return ParsedIngredient(name=strip_quantity(trimmed))

    parsed = _apply_rules(trimmed)
    if parsed is None:
        logger.debug(f"No quantity pattern matched: {trimmed!r}")
        return ParsedIngredient(name=trimmed)

    return parsed
