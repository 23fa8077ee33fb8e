"""URL recipe parsing package.

Text classification, ingredient normalization, quantity merging and the
markdown recipe contract, plus the HTML fetcher and the extractors built on
them: schema.org JSON-LD, heuristic HTML parsing and LLM response parsing.
"""

from recipe_extractor.app.services.url_parsing.classifier import (
    categorize,
    classify,
    is_navigation_noise,
    looks_like_ingredient,
    looks_like_instruction,
)
from recipe_extractor.app.services.url_parsing.html_fetcher import (
    fetch_html,
    is_private_host,
    validate_url,
)
from recipe_extractor.app.services.url_parsing.markdown import (
    MarkdownSection,
    ParsedMarkdown,
    clean_markdown,
    normalize_recipe_markdown,
    parse_markdown,
    parse_markdown_sections,
    render_markdown,
)
from recipe_extractor.app.services.url_parsing.normalizer import standardize, standardize_all
from recipe_extractor.app.services.url_parsing.quantity import (
    ParsedQuantity,
    format_quantity,
    merge_key,
    merge_quantities,
    parse,
    split_ingredient,
)

__all__ = [
    # Classification
    "categorize",
    "classify",
    "is_navigation_noise",
    "looks_like_ingredient",
    "looks_like_instruction",
    # HTML fetching
    "fetch_html",
    "is_private_host",
    "validate_url",
    # Markdown contract
    "MarkdownSection",
    "ParsedMarkdown",
    "clean_markdown",
    "normalize_recipe_markdown",
    "parse_markdown",
    "parse_markdown_sections",
    "render_markdown",
    # Normalization and quantities
    "ParsedQuantity",
    "format_quantity",
    "merge_key",
    "merge_quantities",
    "parse",
    "split_ingredient",
    "standardize",
    "standardize_all",
]
