"""Ingredient name standardization for grocery lists."""

import re
from typing import List

from recipe_extractor.app.services.url_parsing.constants import (
    ESSENTIAL_QUALIFIERS,
    UNNECESSARY_QUALIFIERS,
)


def _removable_qualifiers() -> List[str]:
    return [
        qualifier
        for qualifier in UNNECESSARY_QUALIFIERS
        if not any(qualifier in essential for essential in ESSENTIAL_QUALIFIERS)
    ]


def standardize(name: str) -> str:
    """
    Standardize an ingredient name.

    Lowercases, drops filler qualifiers ("fresh", "ripe", ...) one at a time in
    declaration order, keeps any qualifier that is part of an essential one
    ("whole" in "whole grain"), then title-cases each word.
    """
    standardized = (name or "").lower()
    for qualifier in _removable_qualifiers():
        standardized = re.sub(rf"\b{re.escape(qualifier)}\s+", "", standardized)
    words = standardized.split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words).strip()


def standardize_all(names: List[str]) -> List[str]:
    return [standardize(name) for name in names]
