"""Construction of Recipe values from markdown, structured fields or raw text."""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from recipe_extractor.app.schemas.recipe import (
    MarkdownSource,
    Recipe,
    RecipeMethod,
    StructuredRecipeFields,
    StructuredSource,
)
from recipe_extractor.app.services.url_parsing.markdown import (
    clean_markdown,
    parse_markdown,
    render_markdown,
)
from recipe_extractor.app.services.url_parsing.parsing_utils import clean_text

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Recipe"
DEGRADED_TITLE = "Recipe Extraction Failed"


def recipe_from_markdown(
    markdown: str,
    method: RecipeMethod,
    url: Optional[str] = None,
    default_title: str = DEFAULT_TITLE,
) -> Recipe:
    """Build a Recipe whose fields are parsed from the given markdown."""
    cleaned = clean_markdown(markdown)
    parsed = parse_markdown(cleaned, default_title=default_title)
    return Recipe(
        source=MarkdownSource(markdown=cleaned),
        title=parsed.title,
        description=parsed.description,
        ingredients=parsed.ingredients,
        ingredient_categories=parsed.ingredient_categories,
        instructions=parsed.instructions,
        tips=parsed.tips,
        markdown=cleaned,
        method=method,
        url=url,
        cooking_time=parsed.cooking_time,
        servings=parsed.servings,
    )


def split_category_headers(lines: Sequence[str]) -> Tuple[List[str], Optional[Dict[str, List[str]]]]:
    """Treat lines ending with ':' as category headers for the lines that follow."""
    ingredients: List[str] = []
    categories: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for raw in lines:
        line = clean_text(raw)
        if not line:
            continue
        if line.endswith(":"):
            current = line.rstrip(":").strip() or None
            if current:
                categories.setdefault(current, [])
            continue
        ingredients.append(line)
        if current:
            categories[current].append(line)
    categories = {name: items for name, items in categories.items() if items}
    return ingredients, categories or None


def recipe_from_fields(
    fields: StructuredRecipeFields,
    method: RecipeMethod,
    url: Optional[str] = None,
    default_title: str = DEFAULT_TITLE,
    tips: Sequence[str] = (),
) -> Recipe:
    """Build a Recipe from structured fields, rendering its canonical markdown."""
    title = clean_text(fields.title or "") or default_title
    ingredients, categories = split_category_headers(fields.ingredients)
    instructions = [step for step in (clean_text(s) for s in fields.instructions) if step]
    tip_lines = [tip for tip in (clean_text(t) for t in tips) if tip]
    description = clean_text(fields.description or "") or None
    markdown = render_markdown(
        title,
        ingredients,
        instructions,
        description=description,
        ingredient_categories=categories,
        tips=tip_lines,
        prep_time=fields.prep_time,
        cook_time=fields.cook_time,
        total_time=fields.total_time,
        servings=fields.servings,
    )
    return Recipe(
        source=StructuredSource(fields=fields),
        title=title,
        description=description,
        ingredients=ingredients,
        ingredient_categories=categories,
        instructions=instructions,
        tips=tip_lines,
        markdown=markdown,
        method=method,
        url=url,
        cooking_time=fields.total_time or fields.cook_time or fields.prep_time,
        servings=fields.servings,
    )


def recipe_from_raw_text(
    text: str,
    method: RecipeMethod,
    url: Optional[str] = None,
    default_title: str = DEFAULT_TITLE,
) -> Recipe:
    """Wrap unparseable completion text as a single-instruction Recipe."""
    body = clean_text(text) or "No recipe content was returned."
    logger.warning("Wrapping unparseable response (%d chars) as a single instruction", len(body))
    fields = StructuredRecipeFields(title=default_title, instructions=[body])
    return recipe_from_fields(fields, method, url=url, default_title=default_title)


def build_degraded_recipe(url: str, reason: str, timed_out: bool) -> Recipe:
    """Synthetic Recipe explaining why extraction failed; always renderable."""
    method = RecipeMethod.TIMEOUT_FALLBACK if timed_out else RecipeMethod.ERROR_FALLBACK
    headline = (
        "The recipe site or extraction service took too long to respond."
        if timed_out
        else "We couldn't extract the recipe automatically."
    )
    fields = StructuredRecipeFields(
        title=DEGRADED_TITLE,
        description=headline,
        instructions=[
            f"{headline} Reason: {clean_text(reason) or 'unknown error'}.",
            f"Please try again later, or view the original recipe here: {url}",
        ],
    )
    return recipe_from_fields(fields, method, url=url)
