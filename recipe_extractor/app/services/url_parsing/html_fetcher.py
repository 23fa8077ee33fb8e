"""HTML fetching and URL validation utilities."""

import ipaddress
import json
import logging
import re
from typing import Dict, Optional
from urllib.parse import urlparse

import httpx

from recipe_extractor.app.core.config import get_settings
from recipe_extractor.app.services.errors import FetchError, FetchTimeoutError, InvalidUrlError

logger = logging.getLogger(__name__)

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://www.google.com/",
    "Connection": "keep-alive",
}


def is_private_host(host: str) -> bool:
    """Check if a host is private/localhost."""
    hostname = host.split(":")[0]
    try:
        ip = ipaddress.ip_address(hostname)
        return ip.is_private or ip.is_loopback
    except ValueError:
        return hostname.lower() in {"localhost"}


def validate_url(url: str) -> str:
    """Return the trimmed URL or raise InvalidUrlError."""
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidUrlError(candidate, "URL is required")
    parsed = urlparse(candidate)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidUrlError(candidate, "URL must start with http or https")
    if is_private_host(parsed.hostname or ""):
        raise InvalidUrlError(candidate, "Host is blocked (localhost/private)")
    return candidate


def _cookies() -> Dict[str, str]:
    raw = get_settings().scraper_cookies
    if not raw:
        return {}
    try:
        cookies = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("SCRAPER_COOKIES is not valid JSON; ignoring")
        return {}
    return cookies if isinstance(cookies, dict) else {}


def decode_html(response: httpx.Response) -> str:
    """Decode a response body using its declared charset, then <meta charset>, then utf-8."""
    content_type = response.headers.get("content-type", "")
    content_bytes = response.content
    encoding = None
    if "charset=" in content_type.lower():
        try:
            encoding = content_type.lower().split("charset=")[1].split(";")[0].strip().strip("\"'")
        except (IndexError, AttributeError):
            encoding = None
    try:
        return content_bytes.decode(encoding or "utf-8")
    except (UnicodeDecodeError, LookupError):
        text = content_bytes.decode("utf-8", errors="replace")
        encoding_match = re.search(r'<meta[^>]+charset=["\']?([^"\'>\s]+)', text, re.I)
        if encoding_match:
            detected = encoding_match.group(1).lower()
            if detected != "utf-8":
                try:
                    return content_bytes.decode(detected)
                except (UnicodeDecodeError, LookupError):
                    pass
        return text


async def fetch_html(url: str, user_agent: str, timeout: float, *, headers: Optional[dict] = None) -> str:
    """
    Fetch HTML for a URL with a device-appropriate User-Agent.

    Raises InvalidUrlError for disallowed URLs, FetchTimeoutError when the
    deadline passes and FetchError for network failures or non-2xx answers.
    A 401/403 is retried once with a permissive Accept header.
    """
    target = validate_url(url)
    request_headers = BASE_HEADERS | {"User-Agent": user_agent} | (headers or {})
    client_timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))

    async def _try_fetch(extra_headers: Optional[dict] = None) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=client_timeout,
            follow_redirects=True,
            headers=request_headers | (extra_headers or {}),
            cookies=_cookies(),
        ) as client:
            return await client.get(target)

    try:
        response = await _try_fetch()
        if response.status_code in {401, 403}:
            logger.info("Fetch of %s blocked with %s; retrying with permissive headers", target, response.status_code)
            response = await _try_fetch({"Accept": "*/*"})
    except httpx.TimeoutException as exc:
        raise FetchTimeoutError(target, timeout) from exc
    except httpx.HTTPError as exc:
        raise FetchError(target, status_text=f"Network error: {exc}") from exc

    if response.status_code >= 400:
        raise FetchError(target, status=response.status_code, status_text=response.reason_phrase)

    content_type = response.headers.get("content-type", "")
    if content_type and "text/html" not in content_type and "application/xhtml" not in content_type:
        raise FetchError(target, status=response.status_code, status_text=f"Unsupported content type: {content_type}")

    text = decode_html(response)
    if not text.strip():
        raise FetchError(target, status=response.status_code, status_text="Empty response body")
    logger.debug("Fetched %s (%d chars)", target, len(text))
    return text
