from recipe_extractor.app.core.config import Settings
from recipe_extractor.app.schemas.recipe import DeviceVariant, RecipeMethod, StructuredRecipeFields
from recipe_extractor.app.services.url_parsing.prompts import build_user_prompt, get_device_profile
from recipe_extractor.app.services.url_parsing.recipe_builder import (
    build_degraded_recipe,
    recipe_from_fields,
    split_category_headers,
)

URL = "https://example.com/recipe"


def test_degraded_recipe_explains_failure():
    recipe = build_degraded_recipe(URL, "Failed to fetch: 503 Service Unavailable", timed_out=False)
    assert recipe.method == RecipeMethod.ERROR_FALLBACK
    assert recipe.is_degraded
    assert recipe.title == "Recipe Extraction Failed"
    assert "503 Service Unavailable" in recipe.instructions[0]
    assert recipe.instructions[1].endswith(URL)
    assert recipe.markdown.startswith("# Recipe Extraction Failed")


def test_degraded_recipe_after_timeout():
    recipe = build_degraded_recipe(URL, "timed out", timed_out=True)
    assert recipe.method == RecipeMethod.TIMEOUT_FALLBACK


def test_split_category_headers():
    ingredients, categories = split_category_headers(["Dough:", "2 cups flour", "", "Topping:", "1 cup cheese"])
    assert ingredients == ["2 cups flour", "1 cup cheese"]
    assert categories == {"Dough": ["2 cups flour"], "Topping": ["1 cup cheese"]}
    assert split_category_headers(["1 egg"]) == (["1 egg"], None)


def test_recipe_from_fields_prefers_total_time():
    fields = StructuredRecipeFields(
        name="Stew", ingredients=["1 lb beef"], steps=["Simmer."], cookTime="1 hr", totalTime="1 hr 20 mins"
    )
    recipe = recipe_from_fields(fields, RecipeMethod.SIMPLE)
    assert recipe.title == "Stew"
    assert recipe.cooking_time == "1 hr 20 mins"
    assert "Total Time: 1 hr 20 mins" in recipe.markdown


def test_device_profiles_differ_only_in_budget():
    settings = Settings(_env_file=None)
    desktop = get_device_profile(settings, DeviceVariant.DESKTOP)
    mobile = get_device_profile(settings, DeviceVariant.MOBILE)
    assert mobile.max_tokens < desktop.max_tokens
    assert mobile.llm_timeout_seconds < desktop.llm_timeout_seconds
    assert "Subscribe" in desktop.system_prompt
    assert desktop.method_for(condensed=True) == RecipeMethod.DEEPSEEK_OPTIMIZED
    assert desktop.method_for(condensed=False) == RecipeMethod.DEEPSEEK
    assert mobile.method_for(condensed=True) == RecipeMethod.DEEPSEEK_MOBILE


def test_build_user_prompt():
    prompt = build_user_prompt(URL, "content", condensed=False, title="Soup")
    assert URL in prompt
    assert prompt.endswith("Page title: Soup\ncontent")
