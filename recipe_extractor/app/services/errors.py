"""
Exception taxonomy for recipe extraction and persistence.

Only InvalidUrlError and PersistenceError are meant to reach callers; the
extraction service recovers from every other error locally.
"""
from typing import Optional


class RecipeExtractorError(Exception):
    """Base exception for the recipe extractor"""
    pass


class InvalidUrlError(RecipeExtractorError, ValueError):
    """Raised when the caller supplies a malformed or disallowed URL"""
    def __init__(self, url: str, reason: str = "Invalid URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class FetchError(RecipeExtractorError):
    """Raised when the recipe site is unreachable or answers non-2xx"""
    def __init__(self, url: str, status: Optional[int] = None, status_text: str = ""):
        self.url = url
        self.status = status
        self.status_text = status_text
        detail = f"{status} {status_text}".strip() if status else status_text or "network error"
        super().__init__(f"Failed to fetch {url}: {detail}")


class FetchTimeoutError(FetchError):
    """Raised when fetching the page exceeds its deadline"""
    def __init__(self, url: str, timeout: float):
        self.timeout = timeout
        super().__init__(url, status_text=f"timed out after {timeout:g}s")


class LLMError(RecipeExtractorError):
    """Base class for failures of the LLM completion call"""
    pass


class LLMTransportError(LLMError):
    """Raised when the LLM endpoint fails or returns an unusable payload"""
    pass


class LLMTimeoutError(LLMError):
    """Raised when the LLM call exceeds its deadline"""
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"LLM completion timed out after {timeout:g}s")


class ParseError(RecipeExtractorError):
    """Raised when markdown/JSON/HTML does not yield recipe content"""
    pass


class PersistenceError(RecipeExtractorError):
    """Raised when the recipe store fails; propagated as-is"""
    pass


class NotFoundError(RecipeExtractorError):
    """Raised when a saved recipe or grocery item does not exist"""
    pass
