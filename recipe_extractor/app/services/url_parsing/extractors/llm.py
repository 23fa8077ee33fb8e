"""LLM-based recipe extraction: page condensing and response parsing."""

import json
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ValidationError

from recipe_extractor.app.schemas.recipe import Recipe, RecipeMethod, StructuredRecipeFields
from recipe_extractor.app.services.errors import ParseError
from recipe_extractor.app.services.url_parsing.extractors.heuristic import (
    clean_soup_for_content,
    find_ingredient_candidates,
    find_instruction_candidates,
    find_main_node,
)
from recipe_extractor.app.services.url_parsing.markdown import clean_markdown
from recipe_extractor.app.services.url_parsing.parsing_utils import (
    clean_text,
    extract_instruction_text,
)
from recipe_extractor.app.services.url_parsing.recipe_builder import (
    DEFAULT_TITLE,
    recipe_from_fields,
    recipe_from_markdown,
    recipe_from_raw_text,
)

logger = logging.getLogger(__name__)


class PageContent(BaseModel):
    title: Optional[str] = None
    content: str
    # True when content was built from pre-extracted ingredient/step candidates
    condensed: bool = False


def _check_not_corrupted(html: str) -> None:
    if not html or len(html) <= 100:
        return
    sample = html[:2000]
    printable_count = sum(1 for c in sample if (32 <= ord(c) <= 126) or c.isspace())
    printable_ratio = printable_count / len(sample)
    control_chars = sum(1 for c in sample if ord(c) < 32 and c not in "\n\r\t")
    control_ratio = control_chars / len(sample)
    if printable_ratio < 0.5 or control_ratio > 0.15:
        logger.warning(
            "Detected corrupted HTML: printable_ratio=%.2f, control_ratio=%.2f",
            printable_ratio,
            control_ratio,
        )
        raise ParseError("HTML content appears corrupted - encoding error detected")


def build_page_content(html: str, max_chars: int) -> PageContent:
    """Condense a page into prompt-sized text, preferring pre-extracted recipe candidates."""
    _check_not_corrupted(html)
    soup = BeautifulSoup(html or "", "lxml")
    title_tag = soup.find("h1") or soup.title
    title = clean_text(title_tag.get_text()) if title_tag else None

    # Capture JSON-LD scripts before cleaning
    script_texts: List[str] = []
    for script in soup.find_all("script", type="application/ld+json"):
        text = script.get_text(strip=True)
        if text:
            script_texts.append(text[:2000])

    clean_soup_for_content(soup)
    main_node = find_main_node(soup)
    if main_node is None:
        return PageContent(title=title, content="\n".join(script_texts)[:max_chars])

    ingredients = find_ingredient_candidates(main_node)
    instructions = find_instruction_candidates(main_node, exclude=ingredients)
    if ingredients and instructions:
        content = "Ingredients:\n" + "\n".join(ingredients) + "\n\nInstructions:\n" + "\n".join(instructions)
        return PageContent(title=title, content=content[:max_chars], condensed=True)

    text = main_node.get_text("\n", strip=True)
    text = re.sub(r"\n{2,}", "\n", text)
    parts = script_texts + ["\n".join(text.splitlines()[:400])]
    content = "\n\n".join(part for part in parts if part)
    return PageContent(title=title, content=content[:max_chars], condensed=False)


def _json_payload(text: str) -> Optional[dict]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("LLM response looked like JSON but did not parse (first 200 chars: %s)", text[:200])
        return None
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("recipe"), dict):
        data = data["recipe"]
    return data


def parse_llm_response(
    raw: str,
    method: RecipeMethod,
    url: Optional[str] = None,
    default_title: Optional[str] = None,
) -> Recipe:
    """
    Turn completion text into a Recipe.

    JSON objects are tried first, then the markdown contract; anything else
    is wrapped as a single-instruction Recipe.
    """
    title = default_title or DEFAULT_TITLE
    text = clean_markdown(raw)
    if text.startswith("{") and text.endswith("}"):
        data = _json_payload(text)
        if data is not None:
            try:
                fields = StructuredRecipeFields.model_validate(data)
            except ValidationError as exc:
                logger.warning("LLM JSON did not match recipe fields: %s", exc)
                fields = None
            if fields is not None and (fields.ingredients or fields.instructions):
                tips = extract_instruction_text(data.get("tips") or data.get("notes") or [])
                return recipe_from_fields(fields, method, url=url, default_title=title, tips=tips)

    recipe = recipe_from_markdown(text, method, url=url, default_title=title)
    if recipe.ingredients or recipe.instructions:
        return recipe
    return recipe_from_raw_text(raw, method, url=url, default_title=title)
