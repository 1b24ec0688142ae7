"""Session-local conversation client.

The client owns the whole conversation: the service keeps nothing between turns, so every
submission re-sends the full history.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Union

import httpx

from partychat.logging import get_logger
from partychat.models.chat import ChatAnswer, ChatExchange, ChatMessage

logger = get_logger(__name__)

FALLBACK_MESSAGE = "Sorry, something went wrong."

Entry = Union[ChatMessage, ChatExchange]


class ExchangeLog:
    """Append-only, ordered record of the messages exchanged in a session."""

    def __init__(self) -> None:
        self._entries: list[Entry] = []

    def append(self, entry: Entry) -> None:
        self._entries.append(entry)

    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    def history(self) -> list[dict[str, str]]:
        """Wire form of the log: role and content only."""

        return [{"role": e.role, "content": e.content} for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(tuple(self._entries))


class ConversationClient:
    """Submits turns to `POST /api/chat` and records the results.

    Each submission moves the client from idle to submitting and back. While a submission is
    in flight (`loading`), further submissions are dropped without a network call.
    """

    def __init__(self, http: httpx.Client, *, chat_path: str = "/api/chat") -> None:
        self._http = http
        self._chat_path = chat_path
        self.log = ExchangeLog()
        self.input = ""
        self.loading = False

    def submit(self, text: str | None = None) -> bool:
        """Submit `text`, or the input buffer when omitted.

        Returns:
            False when the submission was rejected (blank input or already loading).
        """

        content = self.input if text is None else text
        if not content.strip() or self.loading:
            return False

        self.log.append(ChatMessage(role="user", content=content))
        self.input = ""
        self.loading = True
        try:
            self.log.append(self._request_answer())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Chat request failed", extra={"error_type": type(e).__name__, "error": str(e)})
            self.log.append(ChatMessage(role="assistant", content=FALLBACK_MESSAGE))
        finally:
            self.loading = False
        return True

    def _request_answer(self) -> ChatExchange:
        resp = self._http.post(self._chat_path, json={"messages": self.log.history()})
        resp.raise_for_status()
        answer = ChatAnswer.model_validate(resp.json())
        return ChatExchange(content=answer.answer, sources=answer.sources)
