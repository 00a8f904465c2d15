"""Pytest configuration and shared fixtures."""

import pytest

from mealmatch.schemas import Recipe

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )


# =============================================================================
# Recipe Fixtures
# =============================================================================


def _recipe(
    recipe_id: str,
    name: str,
    ingredients: str,
    recipe_type: str = "salé",
    equipment: str = "",
) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=name,
        ingredients_text=ingredients,
        type=recipe_type,
        equipment=equipment,
    )


@pytest.fixture
def make_recipe():
    """Factory building a recipe with only the fields the core looks at."""
    return _recipe


@pytest.fixture
def salade_tomates():
    """Tomato salad."""
    return _recipe("salade", "Salade de tomates", "2 tomates;sel;huile d'olive")


@pytest.fixture
def poulet_roti():
    """Roast chicken with potatoes."""
    return _recipe("poulet", "Poulet rôti", "1 poulet;2 pommes de terre;sel")


@pytest.fixture
def corpus(salade_tomates, poulet_roti):
    """Two-recipe corpus used by end-to-end tests."""
    return [salade_tomates, poulet_roti]


@pytest.fixture
def sweet_recipes():
    """Ten desserts, for browse and limit tests."""
    return [
        _recipe(f"dessert-{i}", f"Gâteau {i}", "200 g farine;100 g sucre;3 œufs", "Sucré")
        for i in range(10)
    ]


@pytest.fixture
def mixed_corpus(corpus):
    """Savory and sweet recipes with a range of ingredients."""
    return corpus + [
        _recipe("riz-poulet", "Riz au poulet", "200 g riz;1 poulet;1 oignon"),
        _recipe("riz-lait", "Riz au lait", "100 g riz;1 l de lait;50 g sucre", "sucré"),
        _recipe(
            "crepes", "Crêpes", "250 g farine;4 œufs;50 cl de lait;1 pincée de sel", "Sucré"
        ),
        _recipe(
            "gratin",
            "Gratin de chou-fleur",
            "1 chou-fleur;50 g beurre;100 g gruyère",
            equipment="Four;Plat à gratin",
        ),
        _recipe("soupe", "Soupe d'épinards", "300 g d'épinards;2 pommes de terre;sel"),
    ]
