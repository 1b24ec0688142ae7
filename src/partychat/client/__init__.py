"""Conversation client and its terminal renderer."""

from __future__ import annotations

from partychat.client.conversation import FALLBACK_MESSAGE, ConversationClient, ExchangeLog
from partychat.client.render import render_entry, render_thread

__all__ = [
    "FALLBACK_MESSAGE",
    "ConversationClient",
    "ExchangeLog",
    "render_entry",
    "render_thread",
]
