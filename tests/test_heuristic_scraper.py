import json

import pytest

from recipe_extractor.app.schemas.recipe import RecipeMethod, StructuredSource
from recipe_extractor.app.services.errors import ParseError
from recipe_extractor.app.services.url_parsing.extractors.heuristic import HtmlRecipeScraper
from recipe_extractor.app.services.url_parsing.extractors.schema_org import extract_recipe_from_schema_org

URL = "https://example.com/recipe"


def _jsonld_page(payload) -> str:
    return f"""
    <html><head><title>Site</title>
    <script type="application/ld+json">{json.dumps(payload)}</script>
    </head><body><h1>Ignored</h1></body></html>
    """


def test_schema_org_recipe_in_graph():
    payload = {
        "@context": "https://schema.org",
        "@graph": [
            {"@type": "WebPage", "name": "Page"},
            {
                "@type": ["Recipe"],
                "name": "Pancakes",
                "recipeIngredient": ["1 cup flour", "1 egg"],
                "recipeInstructions": [
                    {"@type": "HowToSection", "itemListElement": [{"@type": "HowToStep", "text": "Whisk."}]},
                    {"@type": "HowToStep", "text": "Fry."},
                ],
                "prepTime": "PT10M",
                "totalTime": "PT1H30M",
                "recipeYield": ["4", "4 pancakes"],
            },
        ],
    }
    fields = extract_recipe_from_schema_org(_jsonld_page(payload), URL)
    assert fields is not None
    assert fields.title == "Pancakes"
    assert fields.ingredients == ["1 cup flour", "1 egg"]
    assert fields.instructions == ["Whisk.", "Fry."]
    assert fields.prep_time == "10 mins"
    assert fields.total_time == "1 hr 30 mins"
    assert fields.servings == "4"


def test_schema_org_skips_incomplete_recipe():
    payload = {"@type": "Recipe", "name": "No steps", "recipeIngredient": ["1 egg"]}
    assert extract_recipe_from_schema_org(_jsonld_page(payload), URL) is None


def test_schema_org_language_tagged_values():
    payload = {
        "@type": "Recipe",
        "name": {"@value": "Chili", "@language": "en"},
        "description": [{"@value": "Hearty and smoky.", "@language": "en"}],
        "recipeIngredient": ["1 lb beef", {"quantity": 2, "unit": "cans", "name": {"@value": "beans"}}],
        "recipeInstructions": [{"@type": "HowToStep", "text": {"@value": "Simmer for an hour."}}],
        "recipeYield": {"@value": "6 bowls"},
    }
    fields = extract_recipe_from_schema_org(_jsonld_page(payload), URL)
    assert fields is not None
    assert fields.title == "Chili"
    assert fields.description == "Hearty and smoky."
    assert fields.ingredients == ["1 lb beef", "2 cans beans"]
    assert fields.instructions == ["Simmer for an hour."]
    assert fields.servings == "6"


def test_scraper_prefers_json_ld():
    payload = {
        "@type": "Recipe",
        "name": "Pancakes",
        "recipeIngredient": ["1 cup flour"],
        "recipeInstructions": ["Mix and fry."],
    }
    recipe = HtmlRecipeScraper().scrape(_jsonld_page(payload), URL)
    assert recipe.title == "Pancakes"
    assert recipe.method == RecipeMethod.SIMPLE
    assert isinstance(recipe.source, StructuredSource)
    assert recipe.url == URL


def test_scraper_uses_structured_selectors_and_drops_chrome():
    html = """
    <html><body>
      <nav><ul><li>Home</li><li>Recipes</li></ul></nav>
      <article>
        <h1>Garlic Butter Shrimp</h1>
        <div class="newsletter-signup"><p>Subscribe to our newsletter</p></div>
        <ul class="recipe-ingredients">
          <li>1 lb shrimp</li>
          <li>2 tbsp butter</li>
          <li>Jump to Recipe</li>
        </ul>
        <ol class="recipe-instructions">
          <li>Melt the butter in a large skillet over medium heat.</li>
          <li>Add the shrimp and cook until pink, about 3 minutes.</li>
        </ol>
        <p>Serves 4</p>
      </article>
      <footer>Copyright</footer>
    </body></html>
    """
    recipe = HtmlRecipeScraper().scrape(html, URL)
    assert recipe.title == "Garlic Butter Shrimp"
    assert recipe.ingredients == ["1 lb shrimp", "2 tbsp butter"]
    assert recipe.instructions == [
        "Melt the butter in a large skillet over medium heat.",
        "Add the shrimp and cook until pink, about 3 minutes.",
    ]
    assert recipe.servings == "4"


def test_scraper_finds_lists_after_headings():
    html = """
    <html><body><main>
      <h1>Tomato Soup</h1>
      <h2>Ingredients</h2>
      <ul><li>4 tomatoes</li><li>1 onion</li></ul>
      <h2>Directions</h2>
      <ol><li>Simmer everything for 20 minutes.</li><li>Blend until smooth and serve hot.</li></ol>
    </main></body></html>
    """
    recipe = HtmlRecipeScraper().scrape(html, URL)
    assert recipe.ingredients == ["4 tomatoes", "1 onion"]
    assert recipe.instructions[0] == "Simmer everything for 20 minutes."


def test_scraper_scores_unlabelled_lists():
    html = """
    <html><body><div class="post">
      <h1>Rice Bowl</h1>
      <ul><li>About us</li><li>Contact</li></ul>
      <ul><li>1 cup rice</li><li>2 cups water</li><li>1 tsp salt</li></ul>
      <ol><li>Bring the water to a boil in a pot.</li><li>Stir in the rice and simmer for 15 minutes.</li></ol>
    </div></body></html>
    """
    recipe = HtmlRecipeScraper().scrape(html, URL)
    assert recipe.ingredients == ["1 cup rice", "2 cups water", "1 tsp salt"]
    assert len(recipe.instructions) == 2


def test_scraper_raises_parse_error_without_recipe_content():
    with pytest.raises(ParseError):
        HtmlRecipeScraper().scrape("<html><body><p>Hello</p></body></html>", URL)
