import asyncio
import logging
from typing import Dict, Optional

import httpx

from recipe_extractor.app.core.config import Settings, get_settings
from recipe_extractor.app.services.errors import LLMTimeoutError, LLMTransportError

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    """Text completion over an OpenAI-compatible /chat/completions endpoint."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _headers(self) -> Dict[str, str]:
        if not self.settings.llm_api_key:
            raise LLMTransportError("DEEPSEEK_API_KEY must be set for LLM extraction")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.llm_api_key}",
        }

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        timeout: float,
    ) -> str:
        """Return the assistant message content; raises LLMTimeoutError or LLMTransportError."""
        headers = self._headers()
        payload = {
            "model": self.settings.llm_model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
        }
        url = f"{self.settings.llm_base_url.rstrip('/')}/chat/completions"
        client_timeout = httpx.Timeout(timeout, connect=min(timeout, 10.0))
        try:
            async with httpx.AsyncClient(timeout=client_timeout) as client:
                response = await asyncio.wait_for(
                    client.post(url, json=payload, headers=headers), timeout=timeout
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise LLMTimeoutError(timeout) from exc
        except httpx.HTTPError as exc:
            raise LLMTransportError(f"LLM request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("LLM endpoint returned %s: %s", response.status_code, response.text[:500])
            raise LLMTransportError(f"LLM endpoint returned status {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMTransportError("LLM response was not JSON") from exc

        if isinstance(data, dict) and "error" in data:
            error_info = data["error"] if isinstance(data["error"], dict) else {"message": str(data["error"])}
            raise LLMTransportError(f"LLM error: {error_info.get('message', 'Unknown error')}")

        content = None
        choices = data.get("choices") if isinstance(data, dict) else None
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict):
                content = message.get("content")
        if not content or not isinstance(content, str):
            raise LLMTransportError("LLM response missing assistant content")
        logger.debug("LLM returned %d chars", len(content))
        return content
