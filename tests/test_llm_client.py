"""Transport tests using ``httpx.MockTransport``."""
from __future__ import annotations

import json

import httpx
import pytest

from takeoff.config import get_settings
from takeoff.errors import ProviderConfigurationError, ProviderTransportError
from takeoff.llm_client import (
    AIProvider,
    ClaudeTransport,
    GeminiTransport,
    LLMClient,
    LLMRequest,
    build_request,
    create_default_client,
    describe_provider_error,
)


def _request(provider: AIProvider) -> LLMRequest:
    return build_request(provider, "List the equipment.", get_settings())


async def test_claude_transport_sends_messages_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"content": [{"type": "text", "text": '{"summary": "ok"}'}]}
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        transport = ClaudeTransport("sk-claude", http_client=http)
        answer = await transport(_request(AIProvider.CLAUDE))

    assert answer == '{"summary": "ok"}'
    sent = seen[0]
    assert sent.url == httpx.URL("https://api.anthropic.com/v1/messages")
    assert sent.headers["x-api-key"] == "sk-claude"
    assert sent.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(sent.content)
    assert body["model"] == get_settings().claude_model
    assert body["max_tokens"] == 4000
    assert body["temperature"] == pytest.approx(0.1)
    assert body["messages"] == [{"role": "user", "content": "List the equipment."}]


async def test_gemini_transport_joins_text_parts() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "candidates": [
                    {"content": {"parts": [{"text": '{"summary": '}, {"text": '"ok"}'}]}}
                ]
            },
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        transport = GeminiTransport("g-key", http_client=http)
        answer = await transport(_request(AIProvider.GEMINI))

    assert answer == '{"summary": "ok"}'
    sent = seen[0]
    assert sent.url.path.endswith(f"/models/{get_settings().gemini_model}:generateContent")
    assert sent.headers["x-goog-api-key"] == "g-key"
    body = json.loads(sent.content)
    assert body["contents"][0]["parts"][0]["text"] == "List the equipment."


async def test_error_status_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, text='{"type": "rate_limit_error"}')

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        transport = ClaudeTransport("sk-claude", http_client=http)
        with pytest.raises(ProviderTransportError) as exc:
            await transport(_request(AIProvider.CLAUDE))

    assert exc.value.status_code == 429
    assert exc.value.provider == "claude"
    assert "rate_limit_error" in (exc.value.detail or "")
    assert str(exc.value).startswith("API rate limit exceeded")


async def test_network_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        transport = GeminiTransport("g-key", http_client=http)
        with pytest.raises(ProviderTransportError) as exc:
            await transport(_request(AIProvider.GEMINI))

    assert exc.value.status_code is None


async def test_missing_api_key_fails_without_network() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not run
        raise AssertionError("no request expected")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        transport = ClaudeTransport("", http_client=http)
        with pytest.raises(ProviderConfigurationError):
            await transport(_request(AIProvider.CLAUDE))


async def test_client_routes_by_provider() -> None:
    calls: list[str] = []

    async def claude(request: LLMRequest) -> str:
        calls.append("claude")
        return "c"

    async def gemini(request: LLMRequest) -> str:
        calls.append("gemini")
        return "g"

    client = LLMClient({AIProvider.CLAUDE: claude, AIProvider.GEMINI: gemini})

    assert await client.complete(_request(AIProvider.GEMINI)) == "g"
    assert await client.complete(_request(AIProvider.CLAUDE)) == "c"
    assert calls == ["gemini", "claude"]


async def test_client_without_transport_raises() -> None:
    with pytest.raises(RuntimeError):
        await LLMClient().complete(_request(AIProvider.CLAUDE))


def test_default_client_has_both_providers() -> None:
    client = create_default_client(get_settings())

    assert set(client._transports) == {AIProvider.CLAUDE, AIProvider.GEMINI}


@pytest.mark.parametrize(
    "provider, status, body, expected",
    [
        (AIProvider.CLAUDE, 401, "", "Invalid API Key. Please check your CLAUDE_API_KEY"),
        (AIProvider.GEMINI, 400, "API_KEY_INVALID", "Invalid API Key. Please check your GEMINI_API_KEY"),
        (AIProvider.CLAUDE, 404, "not_found_error", 'The Claude model ("m") was not found'),
        (AIProvider.GEMINI, 429, "RESOURCE_EXHAUSTED", "API rate limit exceeded"),
        (AIProvider.CLAUDE, 529, "overloaded_error", "Claude API is temporarily overloaded"),
        (AIProvider.GEMINI, 500, "boom", "An error occurred: Gemini API error: 500 - boom"),
    ],
)
def test_describe_provider_error(provider, status, body, expected) -> None:
    assert describe_provider_error(provider, status, body, "m").startswith(expected)


def test_provider_display_names() -> None:
    assert AIProvider("claude").display_name == "Claude"
    assert AIProvider("gemini").display_name == "Gemini"
