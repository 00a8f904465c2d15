"""Text normalization shared by parsing, matching and aggregation."""

import re
import unicodedata

_NON_WORD = re.compile(r"[\W_]+")
_WHITESPACE = re.compile(r"\s+")

# Ligatures NFD leaves intact, spelled out so "œufs" sorts with "oeufs"
_LIGATURES = str.maketrans({"œ": "oe", "æ": "ae", "ß": "ss"})


def normalize_text(text: str | None) -> str:
    """
    Normalize free text for comparison.

    Lower-cases, strips diacritics, turns every character that is not a
    letter, digit or whitespace into a space and collapses whitespace.
    Idempotent, and total: ``None`` normalizes to ``""``.

    Examples:
        "Épinards" -> "epinards"
        "huile d'olive" -> "huile d olive"
    """
    if not text:
        return ""

    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    spaced = _NON_WORD.sub(" ", stripped)
    return _WHITESPACE.sub(" ", spaced).strip()


def collation_key(text: str) -> tuple[str, str]:
    """Sort key ordering names alphabetically, ignoring case, accents and ligatures."""
    return normalize_text(text.lower().translate(_LIGATURES)), text.casefold()
