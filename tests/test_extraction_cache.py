from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from recipe_extractor.app.db import models
from recipe_extractor.app.schemas.recipe import DeviceVariant, ExtractionStrategy, RecipeMethod
from recipe_extractor.app.services.extraction_cache import DEFAULT_TTL_MS, DatabaseCacheStore, ExtractionCache
from recipe_extractor.app.services.url_parsing.markdown import render_markdown
from recipe_extractor.app.services.url_parsing.recipe_builder import build_degraded_recipe, recipe_from_markdown

URL = "https://example.com/recipe"


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def make_recipe():
    return recipe_from_markdown(render_markdown("Soup", ["water"], ["Boil."]), RecipeMethod.DEEPSEEK, url=URL)


def test_default_ttl_is_seven_days():
    assert DEFAULT_TTL_MS == 604_800_000


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = ExtractionCache(ttl_ms=1000, clock=clock)
    key = ExtractionCache.make_key(URL, DeviceVariant.DESKTOP, ExtractionStrategy.AUTO)
    cache.set(key, make_recipe())

    clock.now = 999
    assert cache.get(key) is not None
    clock.now = 1000
    assert cache.get(key) is None
    assert len(cache) == 0


def test_keys_are_per_variant_and_strategy():
    cache = ExtractionCache(clock=FakeClock())
    desktop = ExtractionCache.make_key(URL, DeviceVariant.DESKTOP, ExtractionStrategy.AUTO)
    cache.set(desktop, make_recipe())
    assert cache.get(ExtractionCache.make_key(URL, "mobile", "auto")) is None
    assert cache.get(ExtractionCache.make_key(URL, "desktop", "simple")) is None
    assert cache.get(ExtractionCache.make_key(URL, "desktop", "auto")) is not None


def test_degraded_recipes_are_not_cached():
    cache = ExtractionCache(clock=FakeClock())
    key = ExtractionCache.make_key(URL, DeviceVariant.DESKTOP, ExtractionStrategy.AUTO)
    cache.set(key, build_degraded_recipe(URL, "boom", timed_out=False))
    assert cache.get(key) is None


def test_invalidate_and_clear():
    cache = ExtractionCache(clock=FakeClock())
    first = ExtractionCache.make_key(URL, DeviceVariant.DESKTOP, ExtractionStrategy.AUTO)
    second = ExtractionCache.make_key(URL, DeviceVariant.MOBILE, ExtractionStrategy.AUTO)
    cache.set(first, make_recipe())
    cache.set(second, make_recipe())
    cache.invalidate(first)
    assert cache.get(first) is None
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


def test_persistent_tier_outlives_the_memory_tier(session_factory):
    clock = FakeClock(now=100)
    key = ExtractionCache.make_key(URL, DeviceVariant.DESKTOP, ExtractionStrategy.AUTO)
    ExtractionCache(clock=clock, store=DatabaseCacheStore(session_factory)).set(key, make_recipe())

    restarted = ExtractionCache(clock=clock, store=DatabaseCacheStore(session_factory))
    assert len(restarted) == 0
    recipe = restarted.get(key)
    assert recipe is not None
    assert recipe.title == "Soup"
    assert recipe.markdown == make_recipe().markdown
    assert len(restarted) == 1


def test_expired_persistent_entry_is_deleted_on_read(session_factory):
    clock = FakeClock()
    store = DatabaseCacheStore(session_factory)
    key = ExtractionCache.make_key(URL, DeviceVariant.MOBILE, ExtractionStrategy.SIMPLE)
    ExtractionCache(ttl_ms=1000, clock=clock, store=store).set(key, make_recipe())
    with session_factory() as db:
        row = db.get(models.RecipeCacheEntry, (URL, "mobile", "simple"))
        assert row is not None
        assert row.timestamp_ms == 0

    clock.now = 1000
    assert ExtractionCache(ttl_ms=1000, clock=clock, store=store).get(key) is None
    with session_factory() as db:
        assert db.scalars(select(models.RecipeCacheEntry)).all() == []


def test_degraded_recipes_are_not_persisted(session_factory):
    store = DatabaseCacheStore(session_factory)
    key = ExtractionCache.make_key(URL, DeviceVariant.DESKTOP, ExtractionStrategy.AUTO)
    ExtractionCache(clock=FakeClock(), store=store).set(key, build_degraded_recipe(URL, "boom", timed_out=False))
    assert store.load(key) is None


def test_storage_failure_is_a_cache_miss():
    def broken_session():
        raise SQLAlchemyError("database is down")

    cache = ExtractionCache(clock=FakeClock(), store=DatabaseCacheStore(broken_session))
    key = ExtractionCache.make_key(URL, DeviceVariant.DESKTOP, ExtractionStrategy.AUTO)
    cache.set(key, make_recipe())
    assert cache.get(key) is not None
    cache.invalidate(key)
    assert cache.get(key) is None
