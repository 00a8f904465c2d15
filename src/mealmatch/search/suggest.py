"""Suggest known ingredient names for a search term that matched nothing."""

from collections.abc import Sequence

from rapidfuzz import fuzz, process

from mealmatch.normalize.ingredients import parse_ingredient, split_clauses
from mealmatch.normalize.text import normalize_text
from mealmatch.schemas import Recipe

DEFAULT_SUGGESTION_LIMIT = 5
DEFAULT_MIN_SCORE = 70.0


def ingredient_vocabulary(corpus: Sequence[Recipe]) -> list[str]:
    """Distinct normalized ingredient names of a corpus, in first-seen order."""
    names: dict[str, None] = {}
    for recipe in corpus:
        for clause in split_clauses(recipe.ingredients_text):
            name = normalize_text(parse_ingredient(clause).name)
            if name:
                names.setdefault(name, None)
    return list(names)


def suggest_terms(
    term: str,
    corpus: Sequence[Recipe],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[str]:
    """
    Fuzzy-match a term against the ingredient names of the corpus.

    Returns the closest names, best first, excluding the term itself.
    """
    normalized = normalize_text(term)
    if not normalized or limit <= 0:
        return []

    candidates = [name for name in ingredient_vocabulary(corpus) if name != normalized]
    matches = process.extract(
        normalized,
        candidates,
        scorer=fuzz.token_sort_ratio,
        limit=limit,
        score_cutoff=min_score,
    )
    return [name for name, _score, _ in matches]
