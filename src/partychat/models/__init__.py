"""Pydantic models used across the project."""

from __future__ import annotations

from partychat.models.chat import ChatAnswer, ChatExchange, ChatMessage, ChatRequest, Role, SearchRequest
from partychat.models.search import SearchResult

__all__ = [
    "ChatAnswer",
    "ChatExchange",
    "ChatMessage",
    "ChatRequest",
    "Role",
    "SearchRequest",
    "SearchResult",
]
