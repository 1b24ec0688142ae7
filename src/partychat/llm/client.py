"""OpenAI-compatible LLM client.

This wraps the `openai` Python SDK and provides a minimal interface for chat completions.
"""

from __future__ import annotations

from typing import Sequence

import httpx
import openai
from openai import OpenAI

from partychat.config import Settings
from partychat.errors import MISSING_OPENAI_KEY, CompletionError, ConfigurationError
from partychat.logging import get_logger
from partychat.models.chat import ChatMessage

logger = get_logger(__name__)


class LLMClient:
    """LLM client using OpenAI-compatible Chat Completions API."""

    def __init__(self, settings: Settings, *, http_client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._http_client = http_client
        self._client: OpenAI | None = None

    @property
    def model(self) -> str:
        return self._settings.openai_model

    def _get_client(self) -> OpenAI:
        if not self._settings.openai_api_key:
            raise ConfigurationError(MISSING_OPENAI_KEY)
        if self._client is None:
            self._client = OpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> str:
        """Generate a completion.

        Args:
            messages: Chat messages.
            temperature: Sampling temperature.
            max_tokens: Output length ceiling.

        Returns:
            Content of the first choice, or an empty string when there is none.
        """

        client = self._get_client()
        payload: list[dict[str, str]] = [{"role": m.role, "content": m.content} for m in messages]
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=payload,  # type: ignore[arg-type]
                temperature=temperature,
                max_tokens=max_tokens,
                stream=False,
            )
        except openai.APIStatusError as e:
            logger.error(
                "OpenAI error response",
                extra={"status_code": e.status_code, "body": e.response.text[:500]},
            )
            raise CompletionError(f"OpenAI API error {e.status_code}") from e
        except openai.OpenAIError as e:
            logger.error("OpenAI request failed", extra={"error_type": type(e).__name__, "error": str(e)})
            raise CompletionError(f"OpenAI request failed: {type(e).__name__}") from e

        if not resp.choices:
            return ""
        choice = resp.choices[0]
        if not choice.message or choice.message.content is None:
            return ""
        return choice.message.content

