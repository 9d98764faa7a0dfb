"""Domain-specific exceptions — framework-independent."""


class ConfigurationError(Exception):
    """Raised when a required setting (e.g. a provider credential) is missing."""

    def __init__(self, setting: str, message: str | None = None):
        self.setting = setting
        super().__init__(message or f"Required setting '{setting}' is not configured")


class ChatProviderError(Exception):
    """Raised when a chat provider returns an error.

    Provider-agnostic — works for OpenRouter, Groq, OpenAI, etc.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class EmbeddingProviderError(Exception):
    """Raised when a single embedding request fails."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        prefix = f"[{provider}] {status_code}" if status_code is not None else f"[{provider}]"
        super().__init__(f"{prefix}: {message}")


class RetryExhaustedError(Exception):
    """Raised when an operation kept failing for its whole attempt budget."""

    def __init__(self, description: str, attempts: int, last_error: BaseException):
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{description} failed after {attempts} attempt(s): {last_error}"
        )


class EmbeddingRetriesExhaustedError(RetryExhaustedError):
    """Terminal embedding failure — no vector could be produced for the text."""


class InvalidChatRequestError(Exception):
    """Raised when a chat request carries no usable user message."""


class ReindexInProgressError(Exception):
    """Raised when a re-indexing pass is requested while another one runs."""
