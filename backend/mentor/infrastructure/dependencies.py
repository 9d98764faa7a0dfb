"""Runtime wiring and FastAPI dependency injection.

``build_runtime`` constructs every long-lived collaborator once at startup;
the lifespan stores the result on ``app.state.runtime`` and request handlers
reach it through the ``get_*`` dependencies below.
"""

import logging
import secrets
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request, status

from mentor.application.interfaces import ChatProvider, ConversationStore, PromptLoader
from mentor.application.services import ChatService, EmbeddingService, Retriever, RetryPolicy
from mentor.config import Settings
from mentor.infrastructure.knowledge.shard_loader import load_knowledge_base
from mentor.infrastructure.memory.in_memory_conversation_store import InMemoryConversationStore
from mentor.infrastructure.openrouter import OpenRouterClient, OpenRouterEmbeddingProvider
from mentor.infrastructure.prompts.file_prompt_loader import FilePromptLoader

logger = logging.getLogger(__name__)


@dataclass
class MentorRuntime:
    """Long-lived collaborators shared by all requests."""

    settings: Settings
    retriever: Retriever
    chat_service: ChatService
    conversation_store: ConversationStore
    prompt_loader: PromptLoader


def build_runtime(
    settings: Settings,
    *,
    chat_provider: ChatProvider | None = None,
    embedding_service: EmbeddingService | None = None,
) -> MentorRuntime:
    """Load the knowledge base and wire the retriever and chat service.

    Raises:
        ConfigurationError: If the OpenRouter API key is missing and no
            provider was injected.
    """
    if embedding_service is None:
        embedding_provider = OpenRouterEmbeddingProvider(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            app_name=settings.openrouter_app_name,
            model=settings.embedding_model,
            model_dimensions=settings.embedding_dimensions,
        )
        embedding_service = EmbeddingService(
            embedding_provider,
            RetryPolicy(
                max_attempts=settings.embedding_max_attempts,
                base_delay=settings.embedding_backoff_base,
                multiplier=settings.embedding_backoff_multiplier,
            ),
        )

    if chat_provider is None:
        chat_provider = OpenRouterClient(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            app_name=settings.openrouter_app_name,
        )

    knowledge_base = load_knowledge_base(settings.kb_dir, settings.kb_shard_pattern)
    retriever = Retriever(
        knowledge_base, embedding_service, default_k=settings.retrieval_top_k
    )
    conversation_store = InMemoryConversationStore(max_history=settings.max_history)
    prompt_loader = FilePromptLoader(settings.prompt_path, settings.fallback_system_prompt)

    chat_service = ChatService(
        retriever=retriever,
        chat_provider=chat_provider,
        conversation_store=conversation_store,
        prompt_loader=prompt_loader,
        model=settings.chat_model,
        top_k=settings.retrieval_top_k,
        empty_reply_text=settings.empty_reply_text,
    )

    if not settings.public_api_token.strip():
        logger.warning("PUBLIC_API_TOKEN is not configured; protected endpoints will reject all requests.")

    return MentorRuntime(
        settings=settings,
        retriever=retriever,
        chat_service=chat_service,
        conversation_store=conversation_store,
        prompt_loader=prompt_loader,
    )


def get_runtime(request: Request) -> MentorRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up",
        )
    return runtime


def get_retriever(runtime: MentorRuntime = Depends(get_runtime)) -> Retriever:
    return runtime.retriever


def get_chat_service(runtime: MentorRuntime = Depends(get_runtime)) -> ChatService:
    return runtime.chat_service


def get_prompt_loader(runtime: MentorRuntime = Depends(get_runtime)) -> PromptLoader:
    return runtime.prompt_loader


def require_api_token(
    runtime: MentorRuntime = Depends(get_runtime),
    authorization: str | None = Header(default=None),
    x_client_token: str | None = Header(default=None),
) -> None:
    """Accept ``Authorization: Bearer <token>`` or ``X-Client-Token: <token>``."""
    expected = runtime.settings.public_api_token.strip()

    bearer = ""
    if authorization and authorization.startswith("Bearer "):
        bearer = authorization[len("Bearer "):].strip()
    token = bearer or (x_client_token or "").strip()

    if not expected or not token or not secrets.compare_digest(token.encode(), expected.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_conversation_key(
    request: Request,
    x_user_id: str | None = Header(default=None),
    x_session_id: str | None = Header(default=None),
) -> str:
    """Stable conversation key: user id, then session id, then client address."""
    if x_user_id:
        return f"user:{x_user_id}"
    if x_session_id:
        return f"session:{x_session_id}"
    host = request.client.host if request.client else None
    return f"ip:{host or 'anon'}"
