"""Unit tests for the OpenRouterClient."""

import json

import httpx
import pytest

from mentor.infrastructure.openrouter.http_adapter import OpenRouterHttpAdapter
from mentor.infrastructure.openrouter.openrouter_client import OpenRouterClient
from mentor.domain.entities import ChatMessage
from mentor.domain.exceptions import ChatProviderError, ConfigurationError


# ── Helpers ──


def _mock_openrouter_response(
    content: str | None = "Hello!",
    model: str = "openai/gpt-5",
    prompt_tokens: int = 10,
    completion_tokens: int = 5,
    total_tokens: int = 15,
    cost: float | None = 0.00014,
) -> dict:
    """Build a mock OpenRouter JSON response."""
    return {
        "id": "chatcmpl-test123",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "model": model,
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": total_tokens,
            **({"cost": cost} if cost is not None else {}),
        },
    }


def _make_mock_transport(
    response_data: dict | None = None,
    status_code: int = 200,
    captured: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Create a mock transport that returns a fixed response."""

    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status_code, json=response_data or {})

    return httpx.MockTransport(handler)


def _client(transport: httpx.MockTransport, **kwargs) -> OpenRouterClient:
    return OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
        **kwargs,
    )


# ── Tests ──


def test_empty_api_key_is_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        OpenRouterClient(api_key="   ")

    assert exc_info.value.setting == "openrouter_api_key"


@pytest.mark.asyncio
async def test_complete_parses_response():
    """Non-streaming call correctly parses OpenRouter JSON response."""
    client = _client(_make_mock_transport(_mock_openrouter_response(content="The answer is 42.")))

    result = await client.complete(
        messages=[ChatMessage(role="user", content="What is 42?")],
        model="openai/gpt-5",
    )

    assert result.content == "The answer is 42."
    assert result.model == "openai/gpt-5"
    assert result.finish_reason == "stop"
    assert result.usage.prompt_tokens == 10
    assert result.usage.completion_tokens == 5
    assert result.usage.total_tokens == 15
    assert result.usage.cost == 0.00014
    assert result.provider == "openrouter"


@pytest.mark.asyncio
async def test_complete_sends_messages_and_headers():
    captured: list[httpx.Request] = []
    client = _client(
        _make_mock_transport(_mock_openrouter_response(), captured=captured),
        base_url="https://router.test/api/v1/",
        app_name="Mentor Test",
    )

    await client.complete(
        messages=[
            ChatMessage(role="system", content="Be brief."),
            ChatMessage(role="user", content="Hi"),
        ],
        model="openai/gpt-5",
        temperature=0.2,
    )

    request = captured[0]
    assert str(request.url) == "https://router.test/api/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["X-Title"] == "Mentor Test"
    body = json.loads(request.content)
    assert body["model"] == "openai/gpt-5"
    assert body["temperature"] == 0.2
    assert "max_tokens" not in body
    assert body["messages"] == [
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "Hi"},
    ]


@pytest.mark.asyncio
async def test_complete_null_content_becomes_empty_string():
    client = _client(_make_mock_transport(_mock_openrouter_response(content=None, cost=None)))

    result = await client.complete([ChatMessage(role="user", content="Hi")], "openai/gpt-5")

    assert result.content == ""
    assert result.usage.cost is None


@pytest.mark.asyncio
async def test_complete_error_handling():
    """Non-streaming call raises ChatProviderError on 4xx/5xx."""
    error_data = {"error": {"code": 429, "message": "Rate limit exceeded"}}
    client = _client(_make_mock_transport(error_data, status_code=429))

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete([ChatMessage(role="user", content="Hi")], "openai/gpt-5")

    assert exc_info.value.status_code == 429
    assert "Rate limit" in exc_info.value.message


@pytest.mark.asyncio
async def test_complete_error_in_body():
    """A 200 response carrying an error object is still a provider error."""
    error_data = {"error": {"code": 400, "message": "Model not found"}}
    client = _client(_make_mock_transport(error_data))

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete([ChatMessage(role="user", content="Hi")], "nope/model")

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Model not found"


@pytest.mark.asyncio
async def test_complete_without_choices():
    client = _client(_make_mock_transport({"model": "openai/gpt-5", "choices": []}))

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete([ChatMessage(role="user", content="Hi")], "openai/gpt-5")

    assert exc_info.value.message == "No choices in response"


@pytest.mark.asyncio
async def test_complete_transport_failure_maps_to_bad_gateway():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(httpx.MockTransport(handler))

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete([ChatMessage(role="user", content="Hi")], "openai/gpt-5")

    assert exc_info.value.status_code == 502
    assert "connection refused" in exc_info.value.message


@pytest.mark.asyncio
async def test_complete_invalid_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>gateway</html>")

    client = _client(httpx.MockTransport(handler))

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete([ChatMessage(role="user", content="Hi")], "openai/gpt-5")

    assert exc_info.value.status_code == 502


@pytest.mark.parametrize("code", ["rate_limited", None, 200, True])
@pytest.mark.asyncio
async def test_complete_error_in_body_with_unusable_code_maps_to_bad_gateway(code):
    error = {"message": "slow"} if code is None else {"code": code, "message": "slow"}
    client = _client(_make_mock_transport({"error": error}))

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete([ChatMessage(role="user", content="Hi")], "openai/gpt-5")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "slow"


def test_adapter_without_transport_error_mapping_cannot_be_built():
    class IncompleteAdapter(OpenRouterHttpAdapter):
        pass

    with pytest.raises(TypeError):
        IncompleteAdapter("key", "https://router.test", "Mentor", None, purpose="tests")
