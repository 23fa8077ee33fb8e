"""Heuristic recipe extraction from HTML structure."""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from recipe_extractor.app.schemas.recipe import Recipe, RecipeMethod, StructuredRecipeFields
from recipe_extractor.app.services.errors import ParseError
from recipe_extractor.app.services.url_parsing.classifier import (
    is_navigation_noise,
    looks_like_ingredient,
    looks_like_instruction,
)
from recipe_extractor.app.services.url_parsing.extractors.schema_org import extract_recipe_from_soup
from recipe_extractor.app.services.url_parsing.parsing_utils import (
    clean_text,
    parse_servings_from_text,
)
from recipe_extractor.app.services.url_parsing.recipe_builder import recipe_from_fields

logger = logging.getLogger(__name__)

NOISE_CLASS_RE = re.compile(
    r"comment|share|social|newsletter|subscribe|related|sidebar|advert|promo|breadcrumb", re.I
)
INGREDIENT_ITEMPROP_RE = re.compile(r"^(recipeIngredient|ingredients)$", re.I)
INGREDIENT_CLASS_RE = re.compile(r"ingredient", re.I)
INSTRUCTION_CLASS_RE = re.compile(r"instruction|direction", re.I)
INGREDIENT_HEADING_RE = re.compile(r"^ingredients?\s*:?$", re.I)
INSTRUCTION_HEADING_RE = re.compile(
    r"^(how\s+to\s+make.*|instructions?|directions?|method|steps?|preparation)\s*:?$", re.I
)
HEADING_TAGS = ["h2", "h3", "h4", "h5", "strong", "b", "p"]


def clean_soup_for_content(soup: BeautifulSoup) -> None:
    """Remove obvious boilerplate nodes before extracting candidate content."""
    for noisy in soup.find_all(["header", "footer", "nav", "aside", "form"]):
        noisy.decompose()
    for tag in soup.find_all(["script", "style", "noscript", "link", "meta", "iframe", "svg"]):
        tag.decompose()
    for tag in soup.find_all(["div", "section", "ul", "ol", "span", "p"], class_=NOISE_CLASS_RE):
        if not tag.decomposed:
            tag.decompose()


def find_main_node(soup: BeautifulSoup):
    """Find the main content node in the soup."""
    return (
        soup.find(attrs={"itemtype": re.compile("Recipe", re.I)})
        or soup.find("article")
        or soup.find("main")
        or soup.find(class_=re.compile("recipe|post|content", re.I))
        or soup.body
    )


def _texts(elements) -> List[str]:
    texts = [clean_text(el.get_text(" ", strip=True)) for el in elements]
    return [text for text in texts if text]


def _without_noise(items: List[str]) -> List[str]:
    return [item for item in items if not is_navigation_noise(item)]


def _structured_ingredients(container) -> List[str]:
    items = container.find_all(attrs={"itemprop": INGREDIENT_ITEMPROP_RE})
    if not items:
        items = container.find_all("li", class_=INGREDIENT_CLASS_RE)
    if not items:
        wrapper = container.find(["ul", "ol", "div", "section"], class_=INGREDIENT_CLASS_RE)
        items = wrapper.find_all("li") if wrapper else []
    return _without_noise(_texts(items))


def _structured_instructions(container) -> List[str]:
    steps: List[str] = []
    for element in container.find_all(attrs={"itemprop": "recipeInstructions"}):
        nested = element.find_all("li") or element.find_all("p")
        steps.extend(_texts(nested) if nested else _texts([element]))
    if not steps:
        steps = _texts(container.find_all("li", class_=INSTRUCTION_CLASS_RE))
    if not steps:
        wrapper = container.find(["ol", "ul", "div", "section"], class_=INSTRUCTION_CLASS_RE)
        if wrapper:
            nested = wrapper.find_all("li") or wrapper.find_all("p")
            steps = _texts(nested)
    return _without_noise(steps)


def _list_after_heading(container, heading_re) -> List[str]:
    for heading in container.find_all(HEADING_TAGS):
        if not heading_re.match(clean_text(heading.get_text(" ", strip=True))):
            continue
        following = heading.find_next(["ul", "ol"])
        if following:
            return _without_noise(_texts(following.find_all("li")))
    return []


def find_ingredient_candidates(container) -> List[str]:
    """Score lists by how many items look like ingredients and return the best one."""
    best_items: List[str] = []
    best_score = 0
    for lst in container.find_all(["ul", "ol"]):
        items = _without_noise(_texts(lst.find_all("li")))
        if len(items) < 2:
            continue
        matches = [item for item in items if looks_like_ingredient(item)]
        if len(matches) < max(2, len(items) // 2):
            continue
        score = len(matches) * 2 + len(items)
        if score > best_score:
            best_score = score
            best_items = matches
    return best_items


def find_instruction_candidates(container, exclude: Optional[List[str]] = None) -> List[str]:
    """Score lists by how many items look like steps; paragraphs as a last resort."""
    excluded = set(exclude or [])
    best_items: List[str] = []
    best_score = 0
    for lst in container.find_all(["ol", "ul"]):
        items = [item for item in _without_noise(_texts(lst.find_all("li"))) if item not in excluded]
        matches = [item for item in items if looks_like_instruction(item)]
        if not matches:
            continue
        score = len(matches) * 2 + (1 if lst.name == "ol" else 0)
        if score > best_score:
            best_score = score
            best_items = matches
    if best_items:
        return best_items
    paragraphs = _without_noise(_texts(container.find_all("p")))
    return [p for p in paragraphs if looks_like_instruction(p) and p not in excluded]


def _page_title(soup: BeautifulSoup) -> Optional[str]:
    title_tag = soup.find("h1") or soup.title
    return clean_text(title_tag.get_text()) if title_tag else None


def _meta_description(soup: BeautifulSoup) -> Optional[str]:
    meta = soup.find("meta", attrs={"name": "description"})
    content = meta.get("content") if meta else None
    return clean_text(content) if content else None


class HtmlRecipeScraper:
    """
    Pure-heuristic recipe extraction.

    JSON-LD first, then itemprop/class selectors (only navigation noise is
    filtered out of those), then list/paragraph scanning filtered by the text
    classifier. Raises ParseError when the page yields no recipe content.
    """

    def scrape(self, html: str, url: str) -> Recipe:
        soup = BeautifulSoup(html or "", "lxml")
        fields = extract_recipe_from_soup(soup, url)
        if fields is not None:
            logger.info("Using JSON-LD recipe data for %s", url)
            return recipe_from_fields(fields, RecipeMethod.SIMPLE, url=url)

        title = _page_title(soup)
        description = _meta_description(soup)
        clean_soup_for_content(soup)
        container = find_main_node(soup)
        if container is None:
            raise ParseError(f"No content found at {url}")

        ingredients = _structured_ingredients(container) or _list_after_heading(
            container, INGREDIENT_HEADING_RE
        )
        if not ingredients:
            ingredients = find_ingredient_candidates(container)

        instructions = _structured_instructions(container) or _list_after_heading(
            container, INSTRUCTION_HEADING_RE
        )
        if not instructions:
            instructions = find_instruction_candidates(container, exclude=ingredients)

        logger.info(
            "Heuristic scrape of %s: ingredients=%d, instructions=%d", url, len(ingredients), len(instructions)
        )
        if not ingredients and not instructions:
            raise ParseError(f"No recipe content found at {url}")

        servings = parse_servings_from_text(container.get_text(" ", strip=True))
        fields = StructuredRecipeFields(
            title=title,
            description=description,
            ingredients=ingredients,
            instructions=instructions,
            servings=str(servings) if servings is not None else None,
        )
        return recipe_from_fields(fields, RecipeMethod.SIMPLE, url=url)


def scrape_recipe(html: str, url: str) -> Recipe:
    return HtmlRecipeScraper().scrape(html, url)
