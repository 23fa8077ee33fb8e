import json

import pytest

from recipe_extractor.app.schemas.recipe import MarkdownSource, RecipeMethod, StructuredSource
from recipe_extractor.app.services.errors import ParseError
from recipe_extractor.app.services.url_parsing.extractors.llm import build_page_content, parse_llm_response

URL = "https://example.com/recipe"

PAGE = """
<html><head><title>Best Chili | Example</title></head><body>
<nav>Home Recipes About</nav>
<article>
  <h1>Best Chili</h1>
  <ul><li>1 lb ground beef</li><li>1 can beans</li><li>2 tbsp chili powder</li></ul>
  <ol><li>Brown the beef in a large pot over medium heat.</li><li>Add everything else and simmer for 1 hour.</li></ol>
</article>
</body></html>
"""


def test_build_page_content_condenses_candidates():
    page = build_page_content(PAGE, max_chars=5000)
    assert page.condensed
    assert page.title == "Best Chili"
    assert page.content.startswith("Ingredients:\n1 lb ground beef")
    assert "Instructions:\nBrown the beef" in page.content
    assert "Home Recipes" not in page.content


def test_build_page_content_falls_back_to_page_text():
    html = "<html><body><main><h1>Notes</h1><p>Nothing to see here.</p></main></body></html>"
    page = build_page_content(html, max_chars=12)
    assert not page.condensed
    assert len(page.content) <= 12


def test_build_page_content_rejects_binary_garbage():
    with pytest.raises(ParseError):
        build_page_content("\x00\x01\x02\x03" * 100, max_chars=1000)


def test_parse_markdown_response():
    raw = "```markdown\n# Chili\n## Ingredients\n- 1 lb beef\n## Instructions\n1. Cook it.\n```"
    recipe = parse_llm_response(raw, RecipeMethod.DEEPSEEK, url=URL)
    assert isinstance(recipe.source, MarkdownSource)
    assert recipe.title == "Chili"
    assert recipe.ingredients == ["1 lb beef"]
    assert recipe.instructions == ["Cook it."]
    assert recipe.method == RecipeMethod.DEEPSEEK


def test_parse_json_response():
    raw = json.dumps(
        {
            "recipe": {
                "name": "Chili",
                "ingredients": [{"quantity": "1", "unit": "lb", "name": "beef"}, "1 onion"],
                "steps": ["Cook it.", "Serve."],
                "tips": ["Better the next day."],
            }
        }
    )
    recipe = parse_llm_response(raw, RecipeMethod.DEEPSEEK_MOBILE, url=URL)
    assert isinstance(recipe.source, StructuredSource)
    assert recipe.ingredients == ["1 lb beef", "1 onion"]
    assert recipe.instructions == ["Cook it.", "Serve."]
    assert recipe.tips == ["Better the next day."]
    assert "## Tips" in recipe.markdown


def test_parse_json_response_with_non_string_values():
    raw = json.dumps(
        {
            "name": ["Chili", "Chili con carne"],
            "ingredients": [{"text": {"@value": "1 onion"}}, {"quantity": 1.5, "unit": "cups", "name": "stock"}],
            "steps": [{"text": ["Cook it."]}],
            "servings": 4,
        }
    )
    recipe = parse_llm_response(raw, RecipeMethod.DEEPSEEK, url=URL)
    assert recipe.title == "Chili"
    assert recipe.ingredients == ["1 onion", "1.5 cups stock"]
    assert recipe.instructions == ["Cook it."]


def test_parse_unstructured_text_becomes_single_instruction():
    recipe = parse_llm_response("Sorry, I could not find a recipe.", RecipeMethod.DEEPSEEK, default_title="Best Chili")
    assert recipe.title == "Best Chili"
    assert recipe.ingredients == []
    assert recipe.instructions == ["Sorry, I could not find a recipe."]


def test_parse_broken_json_falls_through():
    recipe = parse_llm_response("{not json}", RecipeMethod.DEEPSEEK)
    assert recipe.instructions == ["{not json}"]
