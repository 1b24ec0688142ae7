"""Tests for the HTTP endpoints."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from conftest import StubProvider, make_gateway, make_llm, make_settings, openai_stub, tavily_item, tavily_stub
from partychat.api.app import create_app


def _client(
    search: StubProvider | None = None,
    completion: StubProvider | None = None,
    **overrides: Any,
) -> TestClient:
    settings = make_settings(**overrides)
    app = create_app(
        settings,
        search_gateway=make_gateway(settings, search or tavily_stub(2)),
        completion_client=make_llm(settings, completion or openai_stub()),
    )
    return TestClient(app)


def _chat_body(question: str = "What is the party's education policy?") -> dict[str, Any]:
    return {"messages": [{"role": "user", "content": question}]}


def test_chat_end_to_end() -> None:
    """It should return the completion text and the two search results."""

    search, completion = tavily_stub(2), openai_stub("Answer [^1][^2]")
    resp = _client(search, completion).post("/api/chat", json=_chat_body())

    assert resp.status_code == 200
    assert resp.json() == {
        "answer": "Answer [^1][^2]",
        "sources": [
            {"url": "https://example.com/1", "title": "Title 1", "snippet": "Snippet 1"},
            {"url": "https://example.com/2", "title": "Title 2", "snippet": "Snippet 2"},
        ],
    }
    grounding = completion.last_json()["messages"][-1]["content"]
    assert "1. Title 1: Snippet 1\nURL: https://example.com/1" in grounding
    assert "2. Title 2: Snippet 2\nURL: https://example.com/2" in grounding
    assert search.last_json()["query"] == "What is the party's education policy?"


def test_chat_sources_truncated_to_five() -> None:
    resp = _client(tavily_stub(9)).post("/api/chat", json=_chat_body())

    assert resp.status_code == 200
    assert [s["url"] for s in resp.json()["sources"]] == [f"https://example.com/{i}" for i in range(1, 6)]


@pytest.mark.parametrize("path", ["/api/chat", "/api/search"])
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
def test_non_post_is_405_with_allow_header(path: str, method: str) -> None:
    resp = _client().request(method, path)

    assert resp.status_code == 405
    assert resp.headers["allow"] == "POST"
    assert resp.json() == {"error": "Method not allowed"}


@pytest.mark.parametrize(
    "body",
    [
        {"messages": []},
        {"messages": "hello"},
        {"messages": {"role": "user", "content": "hi"}},
        {},
        {"messages": [{"role": "robot", "content": "hi"}]},
        {"messages": [{"role": "user", "content": 42}]},
    ],
)
def test_chat_invalid_messages(body: dict[str, Any]) -> None:
    search = tavily_stub(2)
    resp = _client(search).post("/api/chat", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid messages"}
    assert search.requests == []


def test_chat_malformed_json() -> None:
    resp = _client().post("/api/chat", content=b"{not json", headers={"content-type": "application/json"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid messages"}


def test_chat_missing_tavily_key() -> None:
    resp = _client(tavily_api_key=None).post("/api/chat", json=_chat_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Missing TAVILY_API_KEY"}


def test_chat_blank_question_is_processing_failure() -> None:
    """A blank last message passes validation and fails once the search is attempted."""

    search, completion = tavily_stub(2), openai_stub()
    body = {
        "messages": [
            {"role": "user", "content": "Who founded it?"},
            {"role": "assistant", "content": "A."},
            {"role": "user", "content": ""},
        ]
    }
    resp = _client(search, completion).post("/api/chat", json=body)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Chat processing failed"}
    assert search.requests == []
    assert completion.requests == []


def test_chat_blank_question_without_key() -> None:
    resp = _client(tavily_api_key=None).post("/api/chat", json={"messages": [{"role": "user", "content": "  "}]})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Missing TAVILY_API_KEY"}


def test_chat_missing_openai_key() -> None:
    search = tavily_stub(2)
    resp = _client(search, openai_api_key=None).post("/api/chat", json=_chat_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Missing OPENAI_API_KEY"}
    assert search.requests == []


@pytest.mark.parametrize(
    ("search", "completion"),
    [
        (tavily_stub(2, status_code=500), openai_stub()),
        (tavily_stub(2), openai_stub(status_code=429)),
    ],
)
def test_chat_upstream_failure_is_generic(search: StubProvider, completion: StubProvider) -> None:
    resp = _client(search, completion).post("/api/chat", json=_chat_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Chat processing failed"}


def test_search_returns_raw_payload() -> None:
    search = StubProvider(body={"query": "q", "answer": None, "results": [tavily_item(i) for i in range(1, 8)]})
    resp = _client(search).post("/api/search", json={"query": "party history"})

    assert resp.status_code == 200
    assert resp.json() == search.body


def test_search_missing_tavily_key() -> None:
    resp = _client(tavily_api_key=None).post("/api/search", json={"query": "q"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Missing TAVILY_API_KEY"}


@pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "q"}])
def test_search_missing_key_outranks_invalid_query(body: dict[str, Any]) -> None:
    """Without a Tavily key every search request reports the missing credential."""

    search = tavily_stub(1)
    resp = _client(search, tavily_api_key=None).post("/api/search", json=body)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Missing TAVILY_API_KEY"}
    assert search.requests == []


def test_search_upstream_failure() -> None:
    resp = _client(tavily_stub(0, status_code=503)).post("/api/search", json={"query": "q"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Search failed"}


@pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "  "}, {"query": 3}])
def test_search_invalid_query(body: dict[str, Any]) -> None:
    resp = _client().post("/api/search", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid query"}


def test_health_and_request_id() -> None:
    resp = _client().get("/health", headers={"x-request-id": "abc123"})

    assert resp.json() == {"status": "ok"}
    assert resp.headers["x-request-id"] == "abc123"
