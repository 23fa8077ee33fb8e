"""
Recipe extraction orchestration.

One request runs an explicit state machine:

    CACHE_CHECK -> PRIMARY_ATTEMPT -> COMPLETE
                        |
                        v
                    FALLBACK -> COMPLETE
                        |
                        v
                    DEGRADED -> COMPLETE

PRIMARY_ATTEMPT fetches the page and asks the LLM for the recipe, FALLBACK
runs the heuristic scraper on the page already fetched (a failed fetch goes
straight to DEGRADED) and DEGRADED builds a synthetic Recipe explaining the
failure. Every path ends in COMPLETE with a Recipe: a handler that raises
unexpectedly also lands in DEGRADED, so only an invalid URL ever raises out
of `extract`. Mobile and desktop run the same machine with different
DeviceProfile settings.

Concurrent calls for the same (url, variant, strategy) share one in-flight
task.
"""

import asyncio
import enum
import logging
from functools import lru_cache
from typing import Awaitable, Callable, Dict, Optional

from recipe_extractor.app.core.config import Settings, get_settings
from recipe_extractor.app.db.session import SessionLocal
from recipe_extractor.app.schemas.recipe import DeviceVariant, ExtractionStrategy, Recipe
from recipe_extractor.app.services.errors import (
    FetchError,
    FetchTimeoutError,
    LLMTimeoutError,
    ParseError,
    RecipeExtractorError,
)
from recipe_extractor.app.services.extraction_cache import CacheKey, DatabaseCacheStore, ExtractionCache
from recipe_extractor.app.services.llm_client import ChatCompletionClient
from recipe_extractor.app.services.url_parsing.extractors.heuristic import HtmlRecipeScraper
from recipe_extractor.app.services.url_parsing.extractors.llm import (
    build_page_content,
    parse_llm_response,
)
from recipe_extractor.app.services.url_parsing.html_fetcher import fetch_html, validate_url
from recipe_extractor.app.services.url_parsing.prompts import (
    DeviceProfile,
    build_user_prompt,
    get_device_profile,
)
from recipe_extractor.app.services.url_parsing.recipe_builder import build_degraded_recipe

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, str, float], Awaitable[str]]


class ExtractionState(str, enum.Enum):
    CACHE_CHECK = "cache_check"
    PRIMARY_ATTEMPT = "primary_attempt"
    FALLBACK = "fallback"
    DEGRADED = "degraded"
    COMPLETE = "complete"


class ExtractionRun:
    """Mutable bookkeeping for one pass through the state machine."""

    def __init__(self, url: str, variant: DeviceVariant, strategy: ExtractionStrategy, profile: DeviceProfile):
        self.url = url
        self.variant = variant
        self.strategy = strategy
        self.profile = profile
        self.key: CacheKey = ExtractionCache.make_key(url, variant, strategy)
        self.html: Optional[str] = None
        self.first_failure: Optional[Exception] = None
        self.recipe: Optional[Recipe] = None
        self.from_cache = False

    def record_failure(self, exc: Exception) -> None:
        if self.first_failure is None:
            self.first_failure = exc

    @property
    def timed_out(self) -> bool:
        return isinstance(self.first_failure, (FetchTimeoutError, LLMTimeoutError))


class RecipeExtractionService:
    def __init__(
        self,
        cache: Optional[ExtractionCache] = None,
        llm_client: Optional[ChatCompletionClient] = None,
        fetcher: Fetcher = fetch_html,
        scraper: Optional[HtmlRecipeScraper] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else ExtractionCache(ttl_ms=self.settings.extraction_cache_ttl_ms)
        self.llm_client = llm_client or ChatCompletionClient(self.settings)
        self.fetcher = fetcher
        self.scraper = scraper or HtmlRecipeScraper()
        self._in_flight: Dict[CacheKey, asyncio.Task] = {}
        self._handlers = {
            ExtractionState.CACHE_CHECK: self._check_cache,
            ExtractionState.PRIMARY_ATTEMPT: self._primary_attempt,
            ExtractionState.FALLBACK: self._fallback,
            ExtractionState.DEGRADED: self._degrade,
        }

    async def extract(
        self,
        url: str,
        variant: DeviceVariant = DeviceVariant.DESKTOP,
        strategy: ExtractionStrategy = ExtractionStrategy.AUTO,
    ) -> Recipe:
        """Always resolves to a Recipe; raises InvalidUrlError only for a bad URL."""
        target = validate_url(url)
        variant = DeviceVariant(variant)
        strategy = ExtractionStrategy(strategy)
        key = ExtractionCache.make_key(target, variant, strategy)

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(target, variant, strategy))
            self._in_flight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        else:
            logger.debug("Joining in-flight extraction for %s (%s)", target, variant.value)
        return await asyncio.shield(task)

    def _forget(self, key: CacheKey, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def _run(self, url: str, variant: DeviceVariant, strategy: ExtractionStrategy) -> Recipe:
        run = ExtractionRun(url, variant, strategy, get_device_profile(self.settings, variant))
        state = ExtractionState.CACHE_CHECK
        while state != ExtractionState.COMPLETE:
            logger.debug("Extraction %s [%s]: %s", url, variant.value, state.value)
            try:
                state = await self._handlers[state](run)
            except Exception as exc:  # noqa: BLE001
                if state == ExtractionState.DEGRADED:
                    raise
                logger.exception("Extraction %s [%s] failed in %s", url, variant.value, state.value)
                run.record_failure(exc)
                state = ExtractionState.DEGRADED

        if not run.from_cache:
            self.cache.set(run.key, run.recipe)
        logger.info("Extraction %s [%s] finished with method=%s", url, variant.value, run.recipe.method.value)
        return run.recipe

    async def _fetch(self, run: ExtractionRun) -> str:
        timeout = run.profile.fetch_timeout_seconds
        try:
            return await asyncio.wait_for(self.fetcher(run.url, run.profile.user_agent, timeout), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise FetchTimeoutError(run.url, timeout) from exc

    async def _check_cache(self, run: ExtractionRun) -> ExtractionState:
        cached = self.cache.get(run.key)
        if cached is not None:
            logger.debug("Cache hit for %s", run.url)
            run.recipe = cached
            run.from_cache = True
            return ExtractionState.COMPLETE
        if run.strategy == ExtractionStrategy.SIMPLE:
            return ExtractionState.FALLBACK
        return ExtractionState.PRIMARY_ATTEMPT

    async def _primary_attempt(self, run: ExtractionRun) -> ExtractionState:
        profile = run.profile
        try:
            run.html = await self._fetch(run)
            page = build_page_content(run.html, profile.content_chars)
            user_prompt = build_user_prompt(run.url, page.content, page.condensed, page.title)
            raw = await asyncio.wait_for(
                self.llm_client.complete(
                    profile.system_prompt,
                    user_prompt,
                    temperature=profile.temperature,
                    max_tokens=profile.max_tokens,
                    timeout=profile.llm_timeout_seconds,
                ),
                timeout=profile.llm_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("LLM extraction of %s timed out after %ss; falling back", run.url, profile.llm_timeout_seconds)
            run.record_failure(LLMTimeoutError(profile.llm_timeout_seconds))
            return ExtractionState.FALLBACK
        except RecipeExtractorError as exc:
            logger.warning("LLM extraction of %s failed: %s; falling back", run.url, exc)
            run.record_failure(exc)
            return ExtractionState.FALLBACK

        run.recipe = parse_llm_response(
            raw, profile.method_for(page.condensed), url=run.url, default_title=page.title
        )
        return ExtractionState.COMPLETE

    async def _fallback(self, run: ExtractionRun) -> ExtractionState:
        if run.html is None:
            if isinstance(run.first_failure, FetchError):
                logger.warning("Not refetching %s after failed fetch", run.url)
                return ExtractionState.DEGRADED
            try:
                run.html = await self._fetch(run)
            except RecipeExtractorError as exc:
                logger.warning("Fallback fetch of %s failed: %s", run.url, exc)
                run.record_failure(exc)
                return ExtractionState.DEGRADED
        try:
            run.recipe = self.scraper.scrape(run.html, run.url)
        except ParseError as exc:
            logger.warning("Heuristic scrape of %s failed: %s", run.url, exc)
            run.record_failure(exc)
            return ExtractionState.DEGRADED
        return ExtractionState.COMPLETE

    async def _degrade(self, run: ExtractionRun) -> ExtractionState:
        reason = str(run.first_failure) if run.first_failure else "unknown error"
        run.recipe = build_degraded_recipe(run.url, reason, run.timed_out)
        return ExtractionState.COMPLETE


@lru_cache
def get_extraction_service() -> RecipeExtractionService:
    """Process-wide service; its cache persists to the recipe_cache table unless disabled."""
    settings = get_settings()
    store = DatabaseCacheStore(SessionLocal) if settings.extraction_cache_persist else None
    cache = ExtractionCache(ttl_ms=settings.extraction_cache_ttl_ms, store=store)
    return RecipeExtractionService(cache=cache, settings=settings)


async def extract(
    url: str,
    variant: DeviceVariant = DeviceVariant.DESKTOP,
    strategy: ExtractionStrategy = ExtractionStrategy.AUTO,
) -> Recipe:
    return await get_extraction_service().extract(url, variant, strategy)
