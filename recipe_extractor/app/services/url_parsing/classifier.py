"""Keyword and regex based text classification for scraped recipe content."""

import re
from typing import Dict, Iterable, List

from recipe_extractor.app.services.url_parsing.constants import (
    CATEGORY_KEYWORDS,
    COOKING_CONTEXT_TERMS,
    COOKING_VERBS,
    EXTRA_FOOD_TERMS,
    MEASUREMENT_PATTERN,
    NAVIGATION_TERMS,
    OTHER_CATEGORY,
    SECTION_ORDER,
)

_MEASUREMENT_RE = re.compile(MEASUREMENT_PATTERN, re.I)
_NAVIGATION_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(term) for term in NAVIGATION_TERMS) + r")\b", re.I
)
_NUMBERED_RE = re.compile(r"^\s*\d+\.")
_FOOD_TERMS = [kw for keywords in CATEGORY_KEYWORDS.values() for kw in keywords] + EXTRA_FOOD_TERMS


def classify(text: str) -> str:
    """Return the grocery category of an ingredient; first matching category wins."""
    lowered = (text or "").lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return OTHER_CATEGORY


def categorize(ingredients: Iterable[str]) -> Dict[str, List[str]]:
    """Group ingredient lines by category, skipping section headers."""
    buckets: Dict[str, List[str]] = {section: [] for section in SECTION_ORDER}
    for item in ingredients:
        text = (item or "").strip()
        if not text or text.endswith(":"):
            continue
        buckets[classify(text)].append(text)
    return {section: items for section, items in buckets.items() if items}


def has_measurement(text: str) -> bool:
    return bool(_MEASUREMENT_RE.search(text or ""))


def is_navigation_noise(text: str) -> bool:
    """Navigation/chrome text, unless it carries a measurement (then it is likely an ingredient)."""
    if not text:
        return False
    return bool(_NAVIGATION_RE.search(text)) and not has_measurement(text)


def looks_like_ingredient(text: str) -> bool:
    if not text or len(text) >= 200:
        return False
    lowered = text.lower()
    return has_measurement(text) or any(term in lowered for term in _FOOD_TERMS)


def _first_word(text: str) -> str:
    match = re.match(r"\s*([A-Za-zÀ-ÿ]+)", text)
    return match.group(1).lower() if match else ""


def looks_like_instruction(text: str) -> bool:
    if not text or not (20 < len(text) < 500):
        return False
    lowered = text.lower()
    return (
        _first_word(text) in COOKING_VERBS
        or bool(_NUMBERED_RE.match(text))
        or any(term in lowered for term in COOKING_CONTEXT_TERMS)
    )
