from recipe_extractor.app.schemas.recipe import MarkdownSource, RecipeMethod, StructuredRecipeFields
from recipe_extractor.app.services.url_parsing.markdown import (
    clean_markdown,
    normalize_recipe_markdown,
    parse_markdown,
    parse_markdown_sections,
    render_markdown,
    subsection_label,
)
from recipe_extractor.app.services.url_parsing.recipe_builder import (
    recipe_from_fields,
    recipe_from_markdown,
)

SPAGHETTI = """# Spaghetti
## Ingredients
- 1 cup flour
- 2 eggs
## Instructions
1. Mix ingredients.
2. Boil water.
"""

LASAGNA = """# Lasagna

A weeknight classic.
Prep Time: 20 mins
Servings: 6

## Ingredients
MEAT SAUCE:
- 1 lb ground beef
- 1 jar marinara
CHEESE FILLING:
- 2 cups ricotta
- 1 egg

## Instructions
1. Brown the beef.
2. Layer and bake.

## Tips
- Freeze leftovers for up to 3 months.
"""


def test_parse_simple_recipe():
    parsed = parse_markdown(SPAGHETTI)
    assert parsed.title == "Spaghetti"
    assert parsed.ingredients == ["1 cup flour", "2 eggs"]
    assert parsed.instructions == ["Mix ingredients.", "Boil water."]
    assert parsed.ingredient_categories is None
    assert parsed.description is None


def test_parse_subsection_categories():
    parsed = parse_markdown(LASAGNA)
    assert parsed.ingredient_categories == {
        "MEAT SAUCE": ["1 lb ground beef", "1 jar marinara"],
        "CHEESE FILLING": ["2 cups ricotta", "1 egg"],
    }
    assert parsed.ingredients == ["1 lb ground beef", "1 jar marinara", "2 cups ricotta", "1 egg"]
    assert parsed.tips == ["Freeze leftovers for up to 3 months."]
    assert parsed.description == "A weeknight classic."
    assert parsed.prep_time == "20 mins"
    assert parsed.servings == "6"
    assert parsed.cooking_time == "20 mins"


def test_serves_prose_stays_in_description():
    parsed = parse_markdown("# Chili\n\nServes a crowd at any potluck.\n\n" + SPAGHETTI.split("\n", 1)[1])
    assert parsed.description == "Serves a crowd at any potluck."
    assert parsed.servings is None


def test_serves_with_count_is_servings():
    parsed = parse_markdown("# Chili\n**Serves** 4\n\n" + SPAGHETTI.split("\n", 1)[1])
    assert parsed.servings == "4"
    assert parsed.description is None


def test_parse_missing_sections_yield_empty_lists():
    parsed = parse_markdown("Just some text", default_title="Fallback")
    assert parsed.title == "Fallback"
    assert parsed.ingredients == []
    assert parsed.instructions == []


def test_clean_markdown_strips_fences():
    fenced = "```markdown\n" + SPAGHETTI + "```"
    assert clean_markdown(fenced).startswith("# Spaghetti")
    assert parse_markdown(fenced).ingredients == ["1 cup flour", "2 eggs"]
    assert "'''" not in clean_markdown("'''# Title'''")


def test_instructions_fall_back_to_bullets():
    parsed = parse_markdown("# Toast\n## Ingredients\n- bread\n## Directions\n- Toast the bread.\n- Butter it.")
    assert parsed.instructions == ["Toast the bread.", "Butter it."]


def test_subsection_label_variants():
    assert subsection_label("### Sauce") == "Sauce"
    assert subsection_label("- For the dressing:") == "For the dressing"
    assert subsection_label("**Topping:**") == "Topping"
    assert subsection_label("CHEESE FILLING:") == "CHEESE FILLING"
    assert subsection_label("- 2 cups flour") is None


def test_parse_markdown_sections():
    sections = parse_markdown_sections(SPAGHETTI)
    assert [section.heading for section in sections] == ["Ingredients", "Instructions"]
    assert sections[0].body == "- 1 cup flour\n- 2 eggs"


def test_render_then_parse_round_trip():
    fields = StructuredRecipeFields(
        title="Lasagna",
        ingredients=["Sauce:", "1 lb beef", "1 jar marinara", "Filling:", "2 cups ricotta"],
        instructions=["Brown the beef.", "Layer and bake."],
        prep_time="20 mins",
        servings="6",
    )
    recipe = recipe_from_fields(fields, RecipeMethod.SIMPLE, url="https://example.com/lasagna")
    parsed = parse_markdown(recipe.markdown)
    assert parsed.title == recipe.title
    assert parsed.ingredients == recipe.ingredients
    assert parsed.instructions == recipe.instructions
    assert parsed.ingredient_categories == recipe.ingredient_categories
    assert recipe.ingredient_categories == {"Sauce": ["1 lb beef", "1 jar marinara"], "Filling": ["2 cups ricotta"]}


def test_render_numbers_steps_and_adds_tips():
    markdown = render_markdown("Soup", ["water"], ["Boil.", "Serve."], tips=["Salt well."])
    assert "1. Boil.\n2. Serve." in markdown
    assert markdown.rstrip().endswith("## Tips\n- Salt well.")


def test_recipe_from_markdown_uses_markdown_source():
    recipe = recipe_from_markdown(SPAGHETTI, RecipeMethod.DEEPSEEK)
    assert isinstance(recipe.source, MarkdownSource)
    assert recipe.title == "Spaghetti"
    assert recipe.method == RecipeMethod.DEEPSEEK
    assert not recipe.is_degraded


def test_normalize_recipe_markdown_promotes_list_headings():
    markdown = "# Pie\n## Ingredients\n- Crust:\n- 1 cup flour\n## Instructions\n- Crust: roll it out.\n"
    normalized = normalize_recipe_markdown(markdown)
    assert "### Crust\n- 1 cup flour" in normalized
    assert "- Crust: roll it out." in normalized
