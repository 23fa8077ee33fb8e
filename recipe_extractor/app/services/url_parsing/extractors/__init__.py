"""Recipe extractors for different parsing strategies."""

from recipe_extractor.app.services.url_parsing.extractors.heuristic import (
    HtmlRecipeScraper,
    scrape_recipe,
)
from recipe_extractor.app.services.url_parsing.extractors.llm import (
    build_page_content,
    parse_llm_response,
)
from recipe_extractor.app.services.url_parsing.extractors.schema_org import (
    extract_recipe_from_schema_org,
)

__all__ = [
    "HtmlRecipeScraper",
    "build_page_content",
    "extract_recipe_from_schema_org",
    "parse_llm_response",
    "scrape_recipe",
]
