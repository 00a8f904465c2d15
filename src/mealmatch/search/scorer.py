"""Rank recipes by how many of the searched ingredients they contain."""

import random
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from mealmatch.logging_config import get_logger
from mealmatch.normalize.ingredients import split_clauses, strip_quantity
from mealmatch.normalize.text import collation_key, normalize_text
from mealmatch.schemas import Recipe, RecipeType
from mealmatch.search.filters import filter_by_type

logger = get_logger(__name__)

DEFAULT_RESULT_LIMIT = 8

# Plural endings tolerated on a searched word: tomate -> tomates, chou -> choux
PLURAL_SUFFIX = r"(?:s|x|aux)?"

# Connecting words inside compound names ("pommes de terre"), never matched
# on their own.
CONNECTORS = {"a", "au", "aux", "d", "de", "des", "du", "en", "et", "l", "la", "le", "les"}

# Compound names whose plural head alone names another ingredient: "pomme"
# must not find "pommes de terre", though "oignon" finds "oignons du jardin".
COMPOUND_NAMES = (
    "pomme de terre",
    "fruit de mer",
    "chou de bruxelles",
    "cuisse de grenouille",
)
_COMPOUND_TAILS: dict[str, list[str]] = {
    head: [name.split(" ", 1)[1] for name in COMPOUND_NAMES if name.split(" ", 1)[0] == head]
    for head in {name.split(" ", 1)[0] for name in COMPOUND_NAMES}
}

MIN_FALLBACK_WORD_LENGTH = 3

# Hyphenated compounds are one word for matching: "pear-shaped-squash", "chou-fleur"
_HYPHEN_IN_WORD = re.compile(r"(?<=\w)[-\u2010\u2011](?=\w)")

# Scoring
MULTI_MATCH_BONUS = 0.5  # per matched term, when more than one term matched
ALL_TERMS_BONUS = 5.0  # every searched term matched (queries of 2+ terms)


@dataclass
class ScoredRecipe:
    """A recipe with its relevance score for a query."""

    recipe: Recipe
    score: float
    matched_terms: list[str] = field(default_factory=list)


def parse_query(raw_query: str) -> list[str]:
    """Split a typed query on commas, semicolons or newlines into terms."""
    return [part for part in re.split(r"[,;\n]+", raw_query or "") if part.strip()]


def matching_view(text: str | None) -> str:
    """Normalized text with hyphenated compounds fused into single words."""
    return normalize_text(_HYPHEN_IN_WORD.sub("", text or ""))


def normalize_terms(query_terms: Iterable[str]) -> list[str]:
    """Normalize terms, dropping empties and duplicates (first occurrence kept)."""
    terms: list[str] = []
    for raw in query_terms:
        term = matching_view(raw)
        if term and term not in terms:
            terms.append(term)
    return terms


def compute_score(matched: int, total: int) -> float:
    """
    Score a recipe from matched and total term counts.

    One point per matched term, half a point more per term once two or more
    match, and a flat bonus when every term of a multi-term query matched.
    """
    if matched == 0:
        return 0.0
    score = float(matched)
    if matched > 1:
        score += MULTI_MATCH_BONUS * matched
    if matched == total and total > 1:
        score += ALL_TERMS_BONUS
    return score


def _compound_tail(word: str) -> str:
    tails = _COMPOUND_TAILS.get(word)
    if not tails:
        return ""
    alternatives = "|".join(
        r"\s+".join(rf"{re.escape(w)}{PLURAL_SUFFIX}" for w in tail.split()) for tail in tails
    )
    return rf"(?!\s+(?:{alternatives})(?!\w))"


def _word_pattern(word: str) -> str:
    return rf"(?<!\w){re.escape(word)}{PLURAL_SUFFIX}(?!\w){_compound_tail(word)}"


class TermMatcher:
    """
    Whole-word matcher for one normalized search term.

    A term matches a text when it appears as whole words, either exactly or
    with a plural ending on each word. A single word found only in plural
    form at the head of a known compound name does not count, so "pomme" does not
    match "pommes de terre" while "pommes" and "pomme de terre" do.
    """

    def __init__(self, term: str):
        self.term = term
        self.words = term.split()
        self._exact = re.compile(rf"(?<!\w){re.escape(term)}(?!\w)")

        if len(self.words) == 1:
            self._inflected = re.compile(_word_pattern(term))
        else:
            phrase = r"\s+".join(rf"{re.escape(w)}{PLURAL_SUFFIX}" for w in self.words)
            fused = _word_pattern("".join(self.words))  # "chou fleur" typed, "chou-fleur" listed
            self._inflected = re.compile(rf"(?<!\w){phrase}(?!\w)|{fused}")

        content_words = [
            w for w in self.words if len(w) >= MIN_FALLBACK_WORD_LENGTH and w not in CONNECTORS
        ]
        self._fallback = (
            [re.compile(_word_pattern(w)) for w in content_words] if len(self.words) > 1 else []
        )

    def matches_exactly(self, text: str) -> bool:
        return bool(self._exact.search(text))

    def matches_phrase(self, text: str) -> bool:
        return self.matches_exactly(text) or bool(self._inflected.search(text))

    def matches_any_word(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self._fallback)


@dataclass
class _IndexedRecipe:
    """Normalized views of a recipe's ingredient text, built once per search."""

    full_text: str
    clauses: list[tuple[str, str]]  # (core name, whole clause), both normalized

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "_IndexedRecipe":
        clauses = [
            (matching_view(strip_quantity(clause)), matching_view(clause))
            for clause in split_clauses(recipe.ingredients_text)
        ]
        return cls(full_text=matching_view(recipe.ingredients_text), clauses=clauses)

    def contains(self, matcher: TermMatcher) -> bool:
        if matcher.matches_exactly(self.full_text):
            return True

        for core_name, clause_text in self.clauses:
            if matcher.matches_phrase(core_name) or matcher.matches_phrase(clause_text):
                return True

        for core_name, clause_text in self.clauses:
            if matcher.matches_any_word(core_name) or matcher.matches_any_word(clause_text):
                return True

        return False


def _ranking_key(scored: ScoredRecipe) -> tuple:
    return (
        -scored.score,
        -len(scored.matched_terms),
        collation_key(scored.recipe.name),
        scored.recipe.id,
    )


class RecipeSearchScorer:
    """
    Scores a recipe corpus against ingredient search terms.

    Stateless apart from its configuration; the corpus is passed to every
    call. The random source is only used by the type-only browse path and can
    be injected for reproducible results.
    """

    def __init__(
        self,
        limit: int | None = DEFAULT_RESULT_LIMIT,
        rng: random.Random | None = None,
    ):
        self.limit = limit
        self.rng = rng or random.Random()

    def search(
        self,
        query_terms: Sequence[str],
        corpus: Sequence[Recipe],
        type_filter: RecipeType | str | None = None,
        *,
        see_all: bool = False,
    ) -> list[ScoredRecipe]:
        """
        Rank recipes containing the searched ingredients.

        Args:
            query_terms: Raw ingredient terms as typed; normalized here.
            corpus: Recipes to search.
            type_filter: Optional "sweet"/"savory" restriction.
            see_all: Return every match instead of the first ``limit``.

        Returns:
            Recipes with a positive score, best first. With no terms but a
            type filter, a random sample of that type with score 1.
        """
        limit = None if see_all else self.limit
        terms = normalize_terms(query_terms)
        candidates = filter_by_type(corpus, type_filter) if type_filter else list(corpus)

        if not terms:
            if not type_filter:
                logger.warning("Search called without terms or type filter")
                return []
            return self._browse_by_type(candidates, limit)

        matchers = [TermMatcher(term) for term in terms]
        results = []
        for recipe in candidates:
            scored = self.score_recipe(recipe, matchers)
            if scored is not None:
                results.append(scored)

        results.sort(key=_ranking_key)
        logger.info(f"Search {terms}: {len(results)} of {len(candidates)} recipes matched")

        return results if limit is None else results[:limit]

    def score_recipe(
        self,
        recipe: Recipe,
        matchers: Sequence[TermMatcher],
    ) -> ScoredRecipe | None:
        """Score one recipe; None when no term matched."""
        indexed = _IndexedRecipe.from_recipe(recipe)
        matched = [m.term for m in matchers if indexed.contains(m)]

        score = compute_score(len(matched), len(matchers))
        if score <= 0:
            return None

        logger.debug(f"{recipe.name!r} score={score} terms={matched}")
        return ScoredRecipe(recipe=recipe, score=score, matched_terms=matched)

    def _browse_by_type(
        self,
        candidates: list[Recipe],
        limit: int | None,
    ) -> list[ScoredRecipe]:
        shuffled = list(candidates)
        self.rng.shuffle(shuffled)
        if limit is not None:
            shuffled = shuffled[:limit]
        logger.info(f"Type-only browse: {len(shuffled)} of {len(candidates)} recipes")
        return [ScoredRecipe(recipe=r, score=1.0) for r in shuffled]


def search(
    query_terms: Sequence[str],
    corpus: Sequence[Recipe],
    type_filter: RecipeType | str | None = None,
    *,
    limit: int | None = DEFAULT_RESULT_LIMIT,
    rng: random.Random | None = None,
) -> list[ScoredRecipe]:
    """
    Convenience wrapper around :class:`RecipeSearchScorer`.

    Pass ``limit=None`` for the unbounded "see all" variant.
    """
    return RecipeSearchScorer(limit=limit, rng=rng).search(query_terms, corpus, type_filter)
