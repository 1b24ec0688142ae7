"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
import uuid
from typing import Any

from rich.logging import RichHandler


_request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("partychat_request_id", default="-")
_stage_var: contextvars.ContextVar[str] = contextvars.ContextVar("partychat_stage", default="-")


_RECORD_FIELDS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "request_id",
    "stage",
}


class RequestFormatter(logging.Formatter):
    """Formatter that appends the `extra={...}` fields of a record as sorted `key=value` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {k: v for k, v in record.__dict__.items() if k not in _RECORD_FIELDS and not k.startswith("_")}
        if not fields:
            return line
        pairs = (f"{k}={v!r}" if isinstance(v, str) else f"{k}={v}" for k, v in sorted(fields.items()))
        return f"{line} | {' '.join(pairs)}"


class _ContextFilter(logging.Filter):
    """Inject request context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.request_id = _request_id_var.get()  # type: ignore[attr-defined]
        record.stage = _stage_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def request_context(*, request_id: str | None = None, stage: str | None = None) -> Any:
    """Temporarily bind request context for structured logging.

    Args:
        request_id: Request identifier. A short random id is generated when omitted.
        stage: Optional stage name (`validate`, `search`, `complete`).
    """

    token_request = _request_id_var.set(request_id or uuid.uuid4().hex[:12])
    token_stage = _stage_var.set(stage or "-")
    try:
        yield
    finally:
        _request_id_var.reset(token_request)
        _stage_var.reset(token_stage)


def current_request_id() -> str:
    """Return the request id bound to the current context."""

    return _request_id_var.get()


def set_stage(stage: str) -> None:
    """Update current stage in context."""

    _stage_var.set(stage)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_ContextFilter())

    formatter = RequestFormatter(
        fmt="%(asctime)s %(levelname)s req=%(request_id)s stage=%(stage)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate handlers if configure_logging is called multiple times
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                h.addFilter(_ContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log an exception with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
