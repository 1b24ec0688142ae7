"""FastAPI app exposing the chat and raw search endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from partychat.config import Settings, load_settings
from partychat.errors import (
    INVALID_MESSAGES,
    INVALID_QUERY,
    METHOD_NOT_ALLOWED,
    MISSING_TAVILY_KEY,
    SEARCH_FAILED,
    ConfigurationError,
    PartychatError,
    ProcessingError,
    ValidationError,
)
from partychat.llm.client import LLMClient
from partychat.logging import configure_logging, current_request_id, get_logger, log_exception, request_context
from partychat.models.chat import ChatAnswer, ChatRequest, SearchRequest
from partychat.orchestrator.composer import AnswerComposer, CompletionClient
from partychat.search.gateway import SearchGateway, get_search_gateway

logger = get_logger(__name__)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


async def parse_chat_request(request: Request) -> ChatRequest:
    body = await _read_json(request)
    try:
        return ChatRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(INVALID_MESSAGES) from e


async def parse_search_request(request: Request) -> SearchRequest:
    # The missing credential outranks a malformed body.
    if not request.app.state.settings.tavily_api_key:
        raise ConfigurationError(MISSING_TAVILY_KEY)
    body = await _read_json(request)
    try:
        req = SearchRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(INVALID_QUERY) from e
    if not req.query.strip():
        raise ValidationError(INVALID_QUERY)
    return req


def get_composer(request: Request) -> AnswerComposer:
    return request.app.state.composer


def get_gateway(request: Request) -> SearchGateway:
    return request.app.state.search_gateway


def create_app(
    settings: Settings | None = None,
    *,
    search_gateway: SearchGateway | None = None,
    completion_client: CompletionClient | None = None,
) -> FastAPI:
    """Create FastAPI app.

    Args:
        settings: Settings shared by every request. Loaded from env when omitted.
        search_gateway: Search gateway override.
        completion_client: Completion client override.
    """

    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    gateway = search_gateway or get_search_gateway(settings)
    llm = completion_client or LLMClient(settings)

    app = FastAPI(title="partychat", version="0.1.0")
    app.state.settings = settings
    app.state.search_gateway = gateway
    app.state.composer = AnswerComposer(settings, gateway, llm)

    if settings.app_env == "dev":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_methods=["POST"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next: Any) -> Any:
        with request_context(request_id=request.headers.get("x-request-id")):
            response = await call_next(request)
            response.headers["x-request-id"] = current_request_id()
            return response

    @app.exception_handler(PartychatError)
    async def partychat_error_handler(request: Request, exc: PartychatError) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = METHOD_NOT_ALLOWED if exc.status_code == 405 else str(exc.detail)
        return JSONResponse({"error": message}, status_code=exc.status_code, headers=exc.headers)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/chat", response_model=ChatAnswer)
    def chat(
        req: ChatRequest = Depends(parse_chat_request),
        composer: AnswerComposer = Depends(get_composer),
    ) -> ChatAnswer:
        logger.info("API chat requested", extra={"history_len": len(req.messages)})
        return composer.compose(req.messages)

    @app.post("/api/search")
    def search(
        req: SearchRequest = Depends(parse_search_request),
        gateway: SearchGateway = Depends(get_gateway),
    ) -> JSONResponse:
        logger.info("API search requested", extra={"query_len": len(req.query)})
        try:
            data = gateway.search_raw(req.query)
        except (ConfigurationError, ValidationError):
            raise
        except Exception as e:
            log_exception(logger, SEARCH_FAILED, error_type=type(e).__name__)
            raise ProcessingError(SEARCH_FAILED) from e
        return JSONResponse(data)

    return app
