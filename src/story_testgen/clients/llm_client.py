"""
LLM Client
Chat completion calls against an OpenAI-compatible API (Groq by default)
"""

import logging
from typing import Optional, Tuple

from openai import AsyncOpenAI, APIError

from story_testgen.config import LLMSettings

logger = logging.getLogger(__name__)


class LLMClient:
    """Async client for OpenAI-compatible chat completion endpoints."""

    def __init__(self, settings: LLMSettings, client: Optional[AsyncOpenAI] = None):
        """
        Initialize LLM client.

        Args:
            settings: Model name, endpoint, key and sampling parameters
            client: Preconfigured AsyncOpenAI instance (created from settings if None)
        """
        self.settings = settings
        self.model = settings.model
        self.enabled = settings.enabled
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                max_retries=0,
            )
        return self._client

    def status_label(self) -> str:
        """Get a status label for the LLM."""
        if not self.settings.api_key:
            return "AI: OFF (no key)"
        return f"AI: ON ({self.model})" if self.enabled else "AI: OFF"

    async def complete(self, system_prompt: str, user_prompt: str) -> Tuple[str, Optional[str]]:
        """
        Send one chat completion request.

        No retries are attempted; the caller decides how to fall back.

        Args:
            system_prompt: System message
            user_prompt: User message

        Returns:
            Tuple of (response_text, error_message); response_text is "" on failure
        """
        if not self.enabled:
            return ("", "AI disabled or missing API key")

        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
            )
        except APIError as e:
            status = getattr(e, "status_code", None)
            if status == 401:
                logger.error("Model API rejected the API key (401)")
            logger.warning("Model API call failed: %s", e)
            return ("", f"Model API error: {e}")

        if not resp.choices:
            return ("", "Model returned no choices")

        content = resp.choices[0].message.content
        if content is None:
            return ("", "Model returned empty content")

        logger.debug("Model returned %d characters", len(content))
        return (content, None)
