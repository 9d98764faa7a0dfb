"""OpenRouter chat adapter — implements the ChatProvider interface.

Non-streaming completions against ``POST {base_url}/chat/completions``.
"""

import logging
from typing import Any

import httpx

from mentor.application.interfaces.chat_provider import ChatProvider
from mentor.domain.entities import ChatMessage, ChatCompletionResult, TokenUsage
from mentor.domain.exceptions import ChatProviderError
from mentor.infrastructure.openrouter.http_adapter import (
    DEFAULT_APP_NAME,
    DEFAULT_BASE_URL,
    OpenRouterHttpAdapter,
)

logger = logging.getLogger(__name__)


class OpenRouterClient(OpenRouterHttpAdapter, ChatProvider):
    """Infrastructure adapter — connects to the OpenRouter chat completions API."""

    timeout = 120.0

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        app_name: str = DEFAULT_APP_NAME,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, app_name, http_client, purpose="chat completions")

    def _transport_error(self, error: httpx.HTTPError) -> Exception:
        return ChatProviderError(self.provider_name, 502, f"Request failed: {error}")

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        body: dict[str, Any] = {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if temperature is not None:
            body["temperature"] = temperature
        if max_tokens is not None:
            body["max_tokens"] = max_tokens

        response = await self._post("chat/completions", body)
        data = self._checked_body(response)
        result = self._to_result(data)
        logger.debug(
            "Completion from %s: %d tokens, finish=%s",
            result.model,
            result.usage.total_tokens,
            result.finish_reason,
        )
        return result

    def _checked_body(self, response: httpx.Response) -> dict:
        """Decoded JSON body, or ChatProviderError for any failure shape."""
        try:
            data = response.json()
        except ValueError:
            data = None

        error = data.get("error") if isinstance(data, dict) else None
        if response.status_code != 200:
            message = error.get("message") if isinstance(error, dict) else None
            raise ChatProviderError(
                self.provider_name, response.status_code, message or response.text
            )
        if not isinstance(data, dict):
            raise ChatProviderError(self.provider_name, 502, "Response body is not valid JSON")
        # OpenRouter can report upstream failures inside a 200 body
        if error is not None:
            error = error if isinstance(error, dict) else {"message": str(error)}
            code = error.get("code")
            if isinstance(code, bool) or not isinstance(code, int) or not 400 <= code < 600:
                code = 502
            raise ChatProviderError(
                self.provider_name,
                code,
                str(error.get("message") or "Unknown error"),
            )
        return data

    def _to_result(self, data: dict) -> ChatCompletionResult:
        choices = data.get("choices") or []
        if not choices:
            raise ChatProviderError(self.provider_name, 500, "No choices in response")

        choice = choices[0]
        usage = data.get("usage") or {}
        return ChatCompletionResult(
            model=data.get("model", ""),
            content=(choice.get("message") or {}).get("content") or "",
            finish_reason=choice.get("finish_reason") or "stop",
            usage=TokenUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
                cost=usage.get("cost"),
            ),
            provider=self.provider_name,
        )
