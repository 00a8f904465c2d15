"""Unit tests for ingredient clause parsing."""

import pytest

from mealmatch.normalize.ingredients import (
    ParsedIngredient,
    is_staple,
    parse_ingredient,
    split_clauses,
    strip_quantity,
)


class TestSplitClauses:
    """Tests for split_clauses function."""

    def test_split_and_trim(self):
        """Test clauses are split on ';' and trimmed."""
        assert split_clauses(" 2 tomates ;sel;  huile d'olive ") == [
            "2 tomates",
            "sel",
            "huile d'olive",
        ]

    def test_empty_clauses_dropped(self):
        """Test empty clauses and empty text are dropped."""
        assert split_clauses("sel;;  ;poivre;") == ["sel", "poivre"]
        assert split_clauses("") == []
        assert split_clauses(None) == []


class TestParseIngredient:
    """Tests for parse_ingredient function."""

    def test_quantity_unit_name(self):
        """Test '<number> <unit> <name>'."""
        assert parse_ingredient("200 g farine") == ParsedIngredient("farine", 200, "g")

    def test_integer_without_unit_is_count(self):
        """Test an integer with no unit word gets the count unit."""
        assert parse_ingredient("4 œufs") == ParsedIngredient("œufs", 4, "count")
        assert parse_ingredient("2 pommes de terre") == ParsedIngredient(
            "pommes de terre", 2, "count"
        )

    def test_staple_has_no_quantity(self):
        """Test seasoning staples are never given a quantity."""
        assert parse_ingredient("sel") == ParsedIngredient("sel", None, None)
        assert parse_ingredient("huile d'olive") == ParsedIngredient("huile d'olive")
        assert parse_ingredient("200 g sel") == ParsedIngredient("sel")
        assert parse_ingredient("1 pincée de sel") == ParsedIngredient("sel")

    @pytest.mark.parametrize(
        ("clause", "expected"),
        [
            ("1/2 tasse de sucre", ParsedIngredient("sucre", 0.5, "cup")),
            ("1 1/2 tasse de lait", ParsedIngredient("lait", 1.5, "cup")),
            ("3 gousses d'ail", ParsedIngredient("ail", 3, "count")),
            ("1,5 kg de pommes", ParsedIngredient("pommes", 1.5, "kg")),
            ("2 cuillères à soupe de sucre", ParsedIngredient("sucre", 2, "tablespoon")),
            ("2 c.à.s de sucre", ParsedIngredient("sucre", 2, "tablespoon")),
            ("3 c à soupe de sucre", ParsedIngredient("sucre", 3, "tablespoon")),
            ("1 c. à café de miel", ParsedIngredient("miel", 1, "teaspoon")),
            ("500 grammes de farine", ParsedIngredient("farine", 500, "g")),
            ("10 cl de lait", ParsedIngredient("lait", 10, "cl")),
            ("1/3 tasse de sucre", ParsedIngredient("sucre", 0.33, "cup")),
            ("1/8 l de lait", ParsedIngredient("lait", 0.13, "l")),
        ],
    )
    def test_unit_vocabulary(self, clause, expected):
        """Test fractions, decimal commas and French unit words."""
        assert parse_ingredient(clause) == expected

    def test_quantity_without_unit(self):
        """Test '<number> [de] <name>' with a fractional quantity keeps no unit."""
        assert parse_ingredient("0,5 oignon") == ParsedIngredient("oignon", 0.5, None)
        assert parse_ingredient("½ oignon") == ParsedIngredient("oignon", 0.5, None)
        assert parse_ingredient("3 de pommes") == ParsedIngredient("pommes", 3, "count")

    def test_no_quantity(self):
        """Test clauses without a leading number keep their text as name."""
        assert parse_ingredient("Crème fraîche") == ParsedIngredient("Crème fraîche")

    def test_unparseable_degrades_to_name(self):
        """Test malformed quantities never raise."""
        assert parse_ingredient("0/0 oignon") == ParsedIngredient("0/0 oignon")

    def test_empty_input(self):
        """Test empty clauses give an empty name."""
        assert parse_ingredient("") == ParsedIngredient("")
        assert parse_ingredient("   ") == ParsedIngredient("")
        assert parse_ingredient(None) == ParsedIngredient("")

    def test_clause_is_trimmed(self):
        """Test surrounding whitespace is ignored."""
        assert parse_ingredient("  200 g farine  ") == ParsedIngredient("farine", 200, "g")

    def test_has_quantity(self):
        """Test the has_quantity property."""
        assert parse_ingredient("4 œufs").has_quantity
        assert not parse_ingredient("sel").has_quantity


class TestHelpers:
    """Tests for staple detection and quantity stripping."""

    def test_is_staple(self):
        """Test staples match on normalized substrings."""
        assert is_staple("sel")
        assert is_staple("huile d olive")
        assert is_staple("2 c a s de sauce soja")
        assert not is_staple("tomates")

    def test_strip_quantity(self):
        """Test the leading quantity/unit run is removed."""
        assert strip_quantity("200 g de farine") == "farine"
        assert strip_quantity("2 pommes de terre") == "pommes de terre"
        assert strip_quantity("sel") == "sel"
