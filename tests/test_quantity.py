import pytest

from recipe_extractor.app.services.url_parsing.quantity import (
    ParsedQuantity,
    canonical_unit,
    format_quantity,
    merge_key,
    merge_quantities,
    parse,
    split_ingredient,
)


def test_parse_fraction_glyph():
    assert parse("¾ cup") == ParsedQuantity(amount=0.75, unit="cups")
    assert format_quantity(ParsedQuantity(amount=0.75, unit="cups")) == "¾ cups"


@pytest.mark.parametrize(
    "text,amount,unit",
    [
        ("1 ½ cups", 1.5, "cups"),
        ("1½ cups", 1.5, "cups"),
        ("half a cup", 0.5, "cups"),
        ("2 tbsp", 2.0, "tablespoons"),
        ("1 1/2 tsp", 1.5, "teaspoons"),
        ("3", 3.0, ""),
        ("0.5 lb", 0.5, "pounds"),
    ],
)
def test_parse_valid(text, amount, unit):
    parsed = parse(text)
    assert parsed is not None
    assert parsed.amount == pytest.approx(amount)
    assert parsed.unit == unit


def test_parse_invalid():
    assert parse("") is None
    assert parse("a handful") is None
    assert parse("2 bunches") is None
    assert parse("1/0 cup") is None


def test_canonical_unit():
    assert canonical_unit("Tbsp.") == "tablespoons"
    assert canonical_unit("lbs") == "pounds"
    assert canonical_unit("bunch") is None


def test_merge_same_unit_sums():
    assert merge_quantities("1 tablespoon", "1 tablespoon") == "2 tablespoons"
    assert merge_quantities("½ cup", "¼ cup") == "¾ cups"
    assert merge_quantities("2", "3") == "5"


def test_merge_is_commutative_for_matching_units():
    pairs = [("1 cup", "½ cup"), ("2 tbsp", "1 tablespoon"), ("1 1/2 lb", "1 lb")]
    for a, b in pairs:
        assert parse(merge_quantities(a, b)) == parse(merge_quantities(b, a))


def test_merge_incompatible_units_keeps_both():
    assert merge_quantities("1 cup", "2 tbsp") == "1 cup + 2 tbsp"
    assert merge_quantities("a pinch", "1 tsp") == "a pinch + 1 tsp"


def test_merge_with_empty_side():
    assert merge_quantities("", "2 cups") == "2 cups"
    assert merge_quantities("2 cups", "") == "2 cups"


def test_merge_key_normalizes_names():
    assert merge_key("Butter") == "butter"
    assert merge_key("2 cups Flour") == "flour"
    assert merge_key("Eggs (2)") == "eggs"


def test_split_ingredient():
    assert split_ingredient("1 tablespoon butter") == ("1 tablespoon", "butter")
    assert split_ingredient("2 eggs") == ("2", "eggs")
    assert split_ingredient("1 ½ cups of milk") == ("1 ½ cups", "milk")
    assert split_ingredient("salt to taste") == ("", "salt to taste")


def test_sums_of_thirds_snap_to_glyphs():
    assert merge_quantities("⅓ cup", "⅓ cup") == "⅔ cups"
    assert merge_quantities(merge_quantities("⅓ cup", "⅓ cup"), "⅓ cup") == "1 cups"
    assert merge_quantities("1 ⅓ cups", "⅓ cup") == "1.667 cups"
