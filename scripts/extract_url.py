#!/usr/bin/env python
"""
Run one recipe extraction and print the resulting markdown.

    python scripts/extract_url.py https://example.com/recipe [--mobile] [--simple]
"""
import argparse
import asyncio
import logging

from recipe_extractor.app.schemas.recipe import DeviceVariant, ExtractionStrategy
from recipe_extractor.app.services.errors import InvalidUrlError
from recipe_extractor.app.services.extraction_service import RecipeExtractionService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("extract_url")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract a recipe from a URL")
    parser.add_argument("url")
    parser.add_argument("--mobile", action="store_true", help="use the mobile device profile")
    parser.add_argument("--simple", action="store_true", help="skip the LLM and scrape the page directly")
    return parser.parse_args(argv)


async def run(url: str, variant: DeviceVariant, strategy: ExtractionStrategy) -> int:
    service = RecipeExtractionService()
    try:
        recipe = await service.extract(url, variant, strategy)
    except InvalidUrlError as exc:
        logger.error("%s", exc)
        return 2
    if recipe.is_degraded:
        logger.warning("Extraction degraded (%s)", recipe.method.value)
    print(recipe.markdown)
    return 1 if recipe.is_degraded else 0


def main(argv=None) -> int:
    args = parse_args(argv)
    variant = DeviceVariant.MOBILE if args.mobile else DeviceVariant.DESKTOP
    strategy = ExtractionStrategy.SIMPLE if args.simple else ExtractionStrategy.AUTO
    return asyncio.run(run(args.url, variant, strategy))


if __name__ == "__main__":
    raise SystemExit(main())
