"""Answer composition for a single chat turn.

One turn runs strictly in sequence: validate, search, build the prompt, complete, respond.
Nothing is kept between turns.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Protocol

from partychat.config import Settings
from partychat.errors import (
    CHAT_FAILED,
    INVALID_MESSAGES,
    MISSING_OPENAI_KEY,
    MISSING_TAVILY_KEY,
    ConfigurationError,
    ProcessingError,
    ValidationError,
)
from partychat.logging import get_logger, log_exception, set_stage
from partychat.models.chat import ChatAnswer, ChatMessage
from partychat.models.search import SearchResult
from partychat.prompts import build_grounding_instruction, build_system_prompt, format_context_block
from partychat.search.gateway import MAX_RESULTS, SearchGateway

logger = get_logger(__name__)

TEMPERATURE = 0.2
MAX_TOKENS = 1024


class CompletionClient(Protocol):
    def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float = ...,
        max_tokens: int = ...,
    ) -> str: ...


class AnswerComposer:
    """Answers the last message of a conversation from fresh web search results."""

    def __init__(self, settings: Settings, search_gateway: SearchGateway, llm: CompletionClient) -> None:
        self._settings = settings
        self._search = search_gateway
        self._llm = llm

    def system_prompt(self) -> str:
        return build_system_prompt(self._settings.party_name, self._settings.default_language)

    def build_messages(
        self,
        history: Sequence[ChatMessage],
        sources: Sequence[SearchResult],
    ) -> list[ChatMessage]:
        """Assemble the full completion message list.

        Args:
            history: Conversation so far, last entry being the active question.
            sources: Search results used as grounding context.

        Returns:
            System prompt, the caller's history, then the grounding instruction.
        """

        question = history[-1].content
        instruction = build_grounding_instruction(format_context_block(sources), question)
        return [
            ChatMessage(role="system", content=self.system_prompt()),
            *history,
            ChatMessage(role="user", content=instruction),
        ]

    def compose(self, messages: Sequence[ChatMessage]) -> ChatAnswer:
        """Answer the active question of `messages`.

        Raises:
            ValidationError: `messages` is empty or not a list of ChatMessage.
            ConfigurationError: a provider credential is missing.
            ProcessingError: anything failed once the search started.
        """

        set_stage("validate")
        if not isinstance(messages, (list, tuple)) or not messages:
            raise ValidationError(INVALID_MESSAGES)
        if not all(isinstance(m, ChatMessage) for m in messages):
            raise ValidationError(INVALID_MESSAGES)
        question = messages[-1].content

        if not self._settings.tavily_api_key:
            raise ConfigurationError(MISSING_TAVILY_KEY)
        if not self._settings.openai_api_key:
            raise ConfigurationError(MISSING_OPENAI_KEY)

        started = time.monotonic()
        try:
            set_stage("search")
            sources = self._search.search(question)[:MAX_RESULTS]

            set_stage("complete")
            completion_messages = self.build_messages(messages, sources)
            answer = self._llm.complete(
                completion_messages,
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except Exception as e:
            log_exception(logger, CHAT_FAILED, history_len=len(messages), error_type=type(e).__name__)
            raise ProcessingError(CHAT_FAILED) from e

        logger.info(
            "Chat turn answered",
            extra={
                "history_len": len(messages),
                "source_count": len(sources),
                "answer_len": len(answer),
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return ChatAnswer(answer=answer, sources=list(sources))
