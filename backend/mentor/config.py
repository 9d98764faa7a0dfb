from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Mentor Chat API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Shared client token checked on every protected endpoint
    public_api_token: str = ""

    # OpenRouter configuration
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_app_name: str = "Mentor Chat"

    # Models via OpenRouter
    chat_model: str = "openai/gpt-5"
    embedding_model: str = "google/gemini-embedding-001"
    embedding_dimensions: int = 768

    # Embedding retry — delay before retry i is base * multiplier**i seconds
    embedding_max_attempts: int = 5
    embedding_backoff_base: float = 1.0
    embedding_backoff_multiplier: float = 2.0

    # Knowledge base (paths relative to the working directory)
    kb_dir: str = "kb"
    kb_shard_pattern: str = "*.json.gz"
    retrieval_top_k: int = 6

    # Conversation memory
    max_history: int = 12

    # System prompt
    prompt_path: str = "prompts/base.md"
    fallback_system_prompt: str = "You are the Mentor. Answer clearly and concisely."
    empty_reply_text: str = "no answer"

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_retrieval: str = "INFO"        # Knowledge-base load, search, re-indexing
    log_level_openrouter: str = "INFO"       # OpenRouter chat + embedding clients

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
