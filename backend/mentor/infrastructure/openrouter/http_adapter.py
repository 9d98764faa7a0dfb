"""Shared HTTP plumbing for the OpenRouter adapters."""

from abc import ABC, abstractmethod

import httpx

from mentor.domain.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_APP_NAME = "Mentor Chat"


class OpenRouterHttpAdapter(ABC):
    """Credentials, headers and a single authenticated POST.

    An injected ``http_client`` is reused and left open; otherwise a client is
    created for each call and closed afterwards.
    """

    timeout: float = 60.0

    def __init__(
        self,
        api_key: str,
        base_url: str,
        app_name: str,
        http_client: httpx.AsyncClient | None,
        *,
        purpose: str,
    ):
        if not api_key or not api_key.strip():
            raise ConfigurationError("openrouter_api_key", f"API key missing for {purpose}.")
        self._api_key = api_key.strip()
        self._base_url = base_url.rstrip("/")
        self._app_name = app_name
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "openrouter"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._app_name,
        }

    @abstractmethod
    def _transport_error(self, error: httpx.HTTPError) -> Exception:
        """Domain exception raised when the request never got a response."""
        ...

    async def _post(self, path: str, payload: dict) -> httpx.Response:
        client = self._http_client or httpx.AsyncClient(timeout=self.timeout)
        try:
            return await client.post(
                f"{self._base_url}/{path}", headers=self._headers(), json=payload
            )
        except httpx.HTTPError as e:
            raise self._transport_error(e) from e
        finally:
            if self._http_client is None:
                await client.aclose()
