import logging
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_AVOID_PHRASES = [
    "Log In",
    "Sign Up",
    "Subscribe",
    "Newsletter",
    "Jump to Recipe",
    "Print Recipe",
    "Save Recipe",
    "Share",
    "Advertisement",
    "Comments",
    "Rate this recipe",
]


class Settings(BaseSettings):
    database_url: str = Field("sqlite:///./recipe_extractor.db", alias="DATABASE_URL")
    auth_secret_key: str = Field("change-me", alias="AUTH_SECRET_KEY")
    auth_algorithm: str = Field("HS256", alias="AUTH_ALGORITHM")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    llm_base_url: str = Field("https://api.deepseek.com/v1", alias="LLM_BASE_URL")
    llm_api_key: str | None = Field(None, alias="DEEPSEEK_API_KEY")
    llm_model_name: str = Field("deepseek-chat", alias="LLM_MODEL_NAME")
    llm_avoid_phrases: List[str] = Field(
        default_factory=lambda: list(DEFAULT_AVOID_PHRASES), alias="LLM_AVOID_PHRASES"
    )

    # Desktop profile
    desktop_llm_timeout_seconds: float = Field(45.0, alias="DESKTOP_LLM_TIMEOUT_SECONDS")
    desktop_llm_max_tokens: int = Field(4000, alias="DESKTOP_LLM_MAX_TOKENS")
    desktop_llm_temperature: float = Field(0.2, alias="DESKTOP_LLM_TEMPERATURE")
    desktop_content_chars: int = Field(15000, alias="DESKTOP_CONTENT_CHARS")
    desktop_fetch_timeout_seconds: float = Field(15.0, alias="DESKTOP_FETCH_TIMEOUT_SECONDS")
    desktop_user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36",
        alias="DESKTOP_USER_AGENT",
    )

    # Mobile profile: smaller prompt, token budget and deadlines
    mobile_llm_timeout_seconds: float = Field(20.0, alias="MOBILE_LLM_TIMEOUT_SECONDS")
    mobile_llm_max_tokens: int = Field(2000, alias="MOBILE_LLM_MAX_TOKENS")
    mobile_llm_temperature: float = Field(0.0, alias="MOBILE_LLM_TEMPERATURE")
    mobile_content_chars: int = Field(10000, alias="MOBILE_CONTENT_CHARS")
    mobile_fetch_timeout_seconds: float = Field(8.0, alias="MOBILE_FETCH_TIMEOUT_SECONDS")
    mobile_user_agent: str = Field(
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1",
        alias="MOBILE_USER_AGENT",
    )

    scraper_cookies: str | None = Field(None, alias="SCRAPER_COOKIES")
    extraction_cache_ttl_ms: int = Field(7 * 24 * 60 * 60 * 1000, alias="EXTRACTION_CACHE_TTL_MS")
    extraction_cache_persist: bool = Field(True, alias="EXTRACTION_CACHE_PERSIST")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
    )


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings
