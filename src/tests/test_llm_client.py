from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from interviews.llm_client import LLMClient, MockLLMClient, strip_code_fences
from pipeline.errors import CollaboratorCallError, ValidationError


def _client(handler, calls: list[httpx.Request]) -> LLMClient:
    def _record(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    return LLMClient(provider="groq", api_key="test-key", http_client=http_client)


def _complete(client: LLMClient) -> str:
    return asyncio.run(client.complete(system_prompt="sys", user_prompt="usr"))


def test_successful_completion_returns_stripped_content() -> None:
    calls: list[httpx.Request] = []
    client = _client(
        lambda request: httpx.Response(
            200,
            json={
                "choices": [{"message": {"content": "  Hello there  "}}],
                "usage": {"prompt_tokens": 12, "completion_tokens": 3},
            },
        ),
        calls,
    )

    assert _complete(client) == "Hello there"
    assert len(calls) == 1
    body = json.loads(calls[0].content)
    assert body["model"] == "llama-3.3-70b-versatile"
    assert body["messages"][1] == {"role": "user", "content": "usr"}
    assert calls[0].headers["authorization"] == "Bearer test-key"
    assert client.last_metrics["output_tokens"] == 3


def test_error_status_raises_after_single_attempt() -> None:
    calls: list[httpx.Request] = []
    client = _client(lambda request: httpx.Response(503, text="overloaded"), calls)

    with pytest.raises(CollaboratorCallError, match="HTTP 503"):
        _complete(client)
    assert len(calls) == 1


def test_transport_error_raises_collaborator_error() -> None:
    calls: list[httpx.Request] = []

    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(_refuse, calls)

    with pytest.raises(CollaboratorCallError):
        _complete(client)
    assert len(calls) == 1


def test_malformed_payload_raises_collaborator_error() -> None:
    calls: list[httpx.Request] = []
    client = _client(lambda request: httpx.Response(200, json={"choices": []}), calls)

    with pytest.raises(CollaboratorCallError, match="Invalid completion payload"):
        _complete(client)


def test_missing_api_key_rejected(monkeypatch) -> None:
    monkeypatch.delenv("GROQ_API_KEY", raising=False)

    with pytest.raises(ValidationError, match="GROQ_API_KEY"):
        LLMClient(provider="groq")


def test_unknown_provider_rejected() -> None:
    with pytest.raises(ValueError):
        LLMClient(provider="nope", api_key="x")


def test_strip_code_fences_handles_fences_and_preamble() -> None:
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('Sure! {"a": 1} Hope that helps') == '{"a": 1}'
    assert strip_code_fences("plain text") == "plain text"


def test_mock_client_is_deterministic_and_offline() -> None:
    async def _run() -> tuple[str, str]:
        async with MockLLMClient() as client:
            first = await client.complete("sys", "usr")
            second = await client.complete("sys", "usr")
        await client.aclose()
        return first, second

    first, second = asyncio.run(_run())
    assert first == second
