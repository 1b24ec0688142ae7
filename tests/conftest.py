"""Shared fixtures: settings and stubbed Tavily / OpenAI transports."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from partychat.config import Settings
from partychat.llm.client import LLMClient
from partychat.search.gateway import TavilySearchGateway


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "tavily_api_key": "tvly-test",
        "openai_api_key": "sk-test",
        "party_name": "AIADMK",
        "default_language": "ta",
        "app_env": "prod",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def tavily_item(n: int) -> dict[str, Any]:
    return {
        "url": f"https://example.com/{n}",
        "title": f"Title {n}",
        "content": f"Snippet {n}",
        "score": 1.0 - n / 100,
    }


@dataclass
class StubProvider:
    """Records requests and replies with a fixed status and JSON body."""

    body: Any
    status_code: int = 200
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


def completion_body(content: str | None) -> dict[str, Any]:
    choices = []
    if content is not None:
        choices.append(
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        )
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o",
        "choices": choices,
    }


def tavily_stub(count: int, status_code: int = 200) -> StubProvider:
    return StubProvider(
        body={"query": "q", "results": [tavily_item(i) for i in range(1, count + 1)]},
        status_code=status_code,
    )


def openai_stub(content: str | None = "Answer [^1][^2]", status_code: int = 200) -> StubProvider:
    if status_code != 200:
        return StubProvider(body={"error": {"message": "boom"}}, status_code=status_code)
    return StubProvider(body=completion_body(content))


def make_gateway(settings: Settings, stub: StubProvider) -> TavilySearchGateway:
    return TavilySearchGateway(
        api_key=settings.tavily_api_key,
        base_url=settings.tavily_api_base_url,
        transport=stub.transport,
    )


def make_llm(settings: Settings, stub: StubProvider) -> LLMClient:
    return LLMClient(settings, http_client=httpx.Client(transport=stub.transport))


@pytest.fixture()
def settings() -> Settings:
    return make_settings()
