"""Error taxonomy.

Every error carries the message that is safe to show a caller. Upstream errors keep the
provider detail in their `__cause__` for logging only.
"""

from __future__ import annotations


class PartychatError(RuntimeError):
    """Base class for partychat errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PartychatError):
    """Malformed client input."""

    status_code = 400


class ConfigurationError(PartychatError):
    """A required credential or setting is missing."""


class UpstreamError(PartychatError):
    """A search or completion provider failed."""


class SearchError(UpstreamError):
    pass


class CompletionError(UpstreamError):
    pass


class ProcessingError(PartychatError):
    """Generic failure while answering a chat turn."""


MISSING_TAVILY_KEY = "Missing TAVILY_API_KEY"
MISSING_OPENAI_KEY = "Missing OPENAI_API_KEY"
INVALID_MESSAGES = "Invalid messages"
INVALID_QUERY = "Invalid query"
CHAT_FAILED = "Chat processing failed"
SEARCH_FAILED = "Search failed"
METHOD_NOT_ALLOWED = "Method not allowed"
