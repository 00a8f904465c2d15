"""Pick a handful of random recipes to feature on the home page."""

import random
from collections.abc import Sequence

from mealmatch.logging_config import get_logger
from mealmatch.schemas import Recipe
from mealmatch.search.filters import SeasonalFilter

logger = get_logger(__name__)

DEFAULT_FEATURED_COUNT = 4


def pick_featured(
    corpus: Sequence[Recipe],
    count: int = DEFAULT_FEATURED_COUNT,
    rng: random.Random | None = None,
    seasonal_filter: SeasonalFilter | None = None,
) -> list[Recipe]:
    """
    Pick ``count`` random recipes, preferring recipes in season.

    Args:
        corpus: Recipes to pick from.
        count: Number of recipes wanted.
        rng: Random source; inject a seeded one for reproducible picks.
        seasonal_filter: Restricts the pool to seasonal recipes when it holds
            at least ``count`` of them.

    Returns:
        Up to ``count`` distinct recipes.
    """
    if count <= 0 or not corpus:
        return []

    pool = list(corpus)
    if seasonal_filter is not None:
        seasonal = [r for r in pool if seasonal_filter.is_seasonal(r)]
        if len(seasonal) >= count:
            pool = seasonal
        else:
            logger.debug(
                f"Only {len(seasonal)} seasonal recipes for {count} slots, using whole corpus"
            )

    (rng or random.Random()).shuffle(pool)
    return pool[:count]
