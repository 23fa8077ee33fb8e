"""Schema.org JSON-LD recipe extraction."""

import json
import logging
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup

from recipe_extractor.app.schemas.recipe import StructuredRecipeFields
from recipe_extractor.app.services.url_parsing.parsing_utils import (
    clean_text,
    extract_ingredient_text,
    extract_instruction_text,
    format_duration,
    parse_servings,
)

logger = logging.getLogger(__name__)


def _candidates(data) -> List[dict]:
    candidates: List[dict] = []
    if isinstance(data, dict) and "@graph" in data:
        graph = data.get("@graph") or []
        if isinstance(graph, list):
            candidates.extend(graph)
            logger.debug("Found @graph with %d items", len(graph))
    if isinstance(data, list):
        candidates.extend(data)
    elif isinstance(data, dict):
        candidates.append(data)
    return [c for c in candidates if isinstance(c, dict)]


def _is_recipe(obj: dict) -> bool:
    obj_type = obj.get("@type")
    if not obj_type:
        return False
    types: Iterable = [obj_type] if isinstance(obj_type, str) else obj_type
    return any(str(t).lower() == "recipe" for t in types)


def extract_recipe_from_soup(soup: BeautifulSoup, url: str) -> Optional[StructuredRecipeFields]:
    """Return the first complete JSON-LD Recipe (title, ingredients and steps) in the page."""
    scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
    logger.debug("Found %d JSON-LD script blocks for %s", len(scripts), url)

    for idx, script in enumerate(scripts):
        raw_json = script.string or script.get_text()
        if not raw_json:
            continue
        try:
            data = json.loads(raw_json)
        except json.JSONDecodeError as exc:
            logger.warning(
                "JSON-LD block %d failed to parse: %s (first 200 chars: %s)",
                idx,
                exc,
                raw_json[:200],
            )
            continue

        for obj in _candidates(data):
            if not _is_recipe(obj):
                continue
            title = clean_text(obj.get("name") or "")
            ingredients = extract_ingredient_text(obj.get("recipeIngredient") or obj.get("ingredients") or [])
            steps = extract_instruction_text(obj.get("recipeInstructions") or [])
            if not title or not ingredients or not steps:
                logger.warning(
                    "JSON-LD Recipe incomplete: title=%s, ingredients=%d, steps=%d",
                    title[:50] if title else "None",
                    len(ingredients),
                    len(steps),
                )
                continue

            servings = parse_servings(obj.get("recipeYield"))
            logger.info(
                "JSON-LD Recipe found for %s: ingredients=%d, steps=%d", url, len(ingredients), len(steps)
            )
            return StructuredRecipeFields(
                title=title,
                description=clean_text(obj.get("description") or "") or None,
                ingredients=ingredients,
                instructions=steps,
                prep_time=format_duration(obj.get("prepTime")),
                cook_time=format_duration(obj.get("cookTime")),
                total_time=format_duration(obj.get("totalTime")),
                servings=str(servings) if servings is not None else None,
            )
    return None


def extract_recipe_from_schema_org(html: str, url: str) -> Optional[StructuredRecipeFields]:
    """Extract recipe from schema.org JSON-LD data embedded in HTML."""
    return extract_recipe_from_soup(BeautifulSoup(html, "lxml"), url)
