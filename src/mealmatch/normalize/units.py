"""Unit vocabulary, quantity parsing and unit compatibility."""

import re
from decimal import ROUND_HALF_UP, Decimal

# =============================================================================
# Unit Vocabulary
# =============================================================================

# Canonical unit names
TABLESPOON = "tablespoon"
TEASPOON = "teaspoon"
CUP = "cup"
COUNT = "count"

MASS_UNITS = ("kg", "g")
VOLUME_UNITS = ("ml", "cl", "dl", "l")

# Spelled-out mass and volume words
UNIT_ALIASES: dict[str, str] = {
    "grammes": "g",
    "gramme": "g",
    "grams": "g",
    "gram": "g",
    "kilos": "kg",
    "kilo": "kg",
    "litres": "l",
    "litre": "l",
    "liters": "l",
    "liter": "l",
}

# Regex alternatives for unit words, longest forms first so that alternation
# does not stop at a shorter prefix ("cuillère" before "cuillère à soupe").
_TEASPOON_WORDS = [
    r"cuill[eè]res?\s+[aà]\s+(?:caf[eé]|th[eé])",
    r"c\.?\s?[aà]\s+(?:caf[eé]|th[eé])",
    r"c\.?\s?[aà]\.?\s?c\.?",
    r"cac",
    r"cc",
    r"teaspoons?",
    r"tsp",
]
_TABLESPOON_WORDS = [
    r"cuill[eè]res?\s+[aà]\s+soupe",
    r"c\.?\s?[aà]\s+soupe",
    r"cuill[eè]res?",
    r"c\.?\s?[aà]\.?\s?s\.?",
    r"cas",
    r"cs",
    r"tablespoons?",
    r"tbsp",
]
_CUP_WORDS = [r"tasses?", r"cups?", r"verres?"]
_COUNT_WORDS = [
    r"pi[eè]ces?",
    r"tranches?",
    r"gousses?",
    r"branches?",
    r"feuilles?",
    r"bottes?",
    r"t[eê]tes?",
    r"bouquets?",
    r"pinc[eé]es?",
    r"slices?",
    r"cloves?",
    r"branch(?:es)?",
    r"lea(?:f|ves)",
    r"bunch(?:es)?",
    r"heads?",
    r"sprigs?",
]

_UNIT_GROUPS: list[tuple[str, list[str]]] = [
    (TEASPOON, _TEASPOON_WORDS),
    (TABLESPOON, _TABLESPOON_WORDS),
    (CUP, _CUP_WORDS),
    (COUNT, _COUNT_WORDS),
]

_CANONICAL_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    (canonical, re.compile(rf"^(?:{'|'.join(words)})$", re.IGNORECASE))
    for canonical, words in _UNIT_GROUPS
]

# Every unit word, as one alternation usable inside a larger pattern
UNIT_WORD_PATTERN = "|".join(
    [w for _, words in _UNIT_GROUPS for w in words]
    + list(UNIT_ALIASES)
    + list(MASS_UNITS)
    + list(VOLUME_UNITS)
)

# =============================================================================
# Quantities
# =============================================================================

VULGAR_FRACTIONS: dict[str, float] = {
    "½": 0.5,
    "¼": 0.25,
    "¾": 0.75,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "⅛": 0.125,
}

# A single quantity token
NUMBER_PATTERN = (
    r"\d+\s+\d+\s*/\s*\d+"  # mixed number
    r"|\d+\s*/\s*\d+"
    r"|\d+(?:[.,]\d+)?"  # decimal comma accepted
    r"|[" + "".join(VULGAR_FRACTIONS) + r"]"
)


def parse_quantity(token: str) -> float | None:
    """
    Parse a quantity token into a number.

    Handles formats like:
    - "2"
    - "1.5" / "1,5"
    - "1/2"
    - "1 1/2" (one and a half)
    - "½"

    Returns None for anything unparseable, including a zero denominator.
    """
    token = token.strip()
    if not token:
        return None

    if token in VULGAR_FRACTIONS:
        return VULGAR_FRACTIONS[token]

    mixed_match = re.fullmatch(r"(\d+)\s+(\d+)\s*/\s*(\d+)", token)
    if mixed_match:
        denom = int(mixed_match.group(3))
        if denom == 0:
            return None
        return int(mixed_match.group(1)) + int(mixed_match.group(2)) / denom

    frac_match = re.fullmatch(r"(\d+)\s*/\s*(\d+)", token)
    if frac_match:
        denom = int(frac_match.group(2))
        if denom == 0:
            return None
        return int(frac_match.group(1)) / denom

    if re.fullmatch(r"\d+(?:[.,]\d+)?", token):
        return float(token.replace(",", "."))

    return None


def round_half_up(value: float, digits: int = 2) -> Decimal:
    """Round to ``digits`` decimals with halves going up: 0.125 -> 0.13, 0.25 -> 0.3."""
    return Decimal(str(value)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def tidy_quantity(value: float, digits: int = 2) -> float:
    """Round to ``digits`` decimals, halves up; whole numbers come back as ``int``."""
    rounded = round_half_up(value, digits)
    if rounded == rounded.to_integral_value():
        return int(rounded)
    return float(rounded)


def canonical_unit(unit_word: str | None) -> str | None:
    """
    Map a unit word to its canonical name.

    Spoons collapse to "tablespoon"/"teaspoon", cups and glasses to "cup",
    pieces/slices/cloves/etc. to "count"; mass and volume units are kept
    as written (lower-cased).
    """
    if not unit_word:
        return None

    word = " ".join(unit_word.split()).lower()
    for canonical, pattern in _CANONICAL_PATTERNS:
        if pattern.match(word):
            return canonical

    return UNIT_ALIASES.get(word, word)


def units_compatible(unit1: str | None, unit2: str | None) -> bool:
    """
    Check if two quantities can be summed.

    Units are compatible when equal (both None included) or when one unit
    string contains the other. No conversion is attempted, so "g" and "kg"
    are compatible here while "g" and "ml" are not.
    """
    if unit1 == unit2:
        return True
    if not unit1 or not unit2:
        return False
    return unit1 in unit2 or unit2 in unit1
