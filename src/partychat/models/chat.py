"""Chat-related models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from partychat.models.search import SearchResult

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatExchange(ChatMessage):
    """An assistant reply annotated with the sources consulted to produce it."""

    role: Literal["assistant"] = "assistant"
    sources: list[SearchResult] = Field(default_factory=list)


class ChatRequest(BaseModel):
    """Body of `POST /api/chat`."""

    messages: list[ChatMessage] = Field(min_length=1)


class ChatAnswer(BaseModel):
    """Body of a successful `POST /api/chat` response."""

    answer: str
    sources: list[SearchResult] = Field(default_factory=list, max_length=5)


class SearchRequest(BaseModel):
    """Body of `POST /api/search`."""

    query: str = Field(min_length=1)
