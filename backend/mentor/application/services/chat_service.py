"""Chat use case — grounds the user's question in the knowledge base and calls the model.

Model input, in order:
  1. Base system prompt (PromptLoader)
  2. Knowledge context system message (retrieved chunks, or a "no context" notice)
  3. Source scratchpad (assistant message, only when there are hits)
  4. Stored conversation history
  5. The incoming messages
"""

import logging
import time

from mentor.application.interfaces.chat_provider import ChatProvider
from mentor.application.interfaces.conversation_store import ConversationStore
from mentor.application.interfaces.prompt_loader import PromptLoader
from mentor.application.services.retriever import DEFAULT_TOP_K, Retriever
from mentor.domain.entities import ChatMessage, ChatReply, ScoredHit
from mentor.domain.exceptions import (
    ChatProviderError,
    EmbeddingRetriesExhaustedError,
    InvalidChatRequestError,
)

logger = logging.getLogger(__name__)

_NO_CONTEXT_NOTICE = (
    "NO KNOWLEDGE-BASE CONTEXT AVAILABLE. If the question needs specialist "
    "knowledge, say so: 'there is not enough data in the knowledge base'."
)
_CONTEXT_HEADER = "CONTEXT (FROM KNOWLEDGE BASE)"
_SCRATCHPAD_HEADER = "(SCRATCHPAD – do not quote verbatim)\nSources:"
_CONTEXT_SEPARATOR = "\n\n---\n\n"


def build_context_message(hits: list[ScoredHit]) -> ChatMessage:
    """System message carrying the retrieved chunks as numbered sources."""
    if not hits:
        return ChatMessage(role="system", content=_NO_CONTEXT_NOTICE)
    blocks = _CONTEXT_SEPARATOR.join(
        f"#{i} SOURCE: {hit.source}\n{hit.text}" for i, hit in enumerate(hits, start=1)
    )
    return ChatMessage(role="system", content=f"{_CONTEXT_HEADER}\n{blocks}")


def build_scratchpad_message(hits: list[ScoredHit]) -> ChatMessage | None:
    """Assistant note listing the sources and scores, or None without hits."""
    if not hits:
        return None
    lines = "\n".join(
        f"#{i} {hit.source} (score={hit.score:.3f})" for i, hit in enumerate(hits, start=1)
    )
    return ChatMessage(role="assistant", content=f"{_SCRATCHPAD_HEADER}\n{lines}")


def last_user_text(messages: list[ChatMessage]) -> str:
    for message in reversed(messages):
        if message.role == "user":
            return message.content.strip()
    return ""


class ChatService:
    """Application service — retrieval-grounded chat with per-conversation memory."""

    def __init__(
        self,
        retriever: Retriever,
        chat_provider: ChatProvider,
        conversation_store: ConversationStore,
        prompt_loader: PromptLoader,
        *,
        model: str,
        top_k: int = DEFAULT_TOP_K,
        empty_reply_text: str = "no answer",
    ):
        self._retriever = retriever
        self._provider = chat_provider
        self._store = conversation_store
        self._prompt_loader = prompt_loader
        self._model = model
        self._top_k = top_k
        self._empty_reply_text = empty_reply_text

    async def reply(self, conversation_key: str, messages: list[ChatMessage]) -> ChatReply:
        """Answer the last user message of ``messages``.

        Raises:
            InvalidChatRequestError: No non-empty user message.
            ChatProviderError: The model call failed.
        """
        user_text = last_user_text(messages)
        if not user_text:
            raise InvalidChatRequestError("Missing user message.")

        hits, grounded = await self._retrieve(user_text)
        history = await self._store.get_history(conversation_key)

        model_input = [
            ChatMessage(role="system", content=self._prompt_loader.load()),
            build_context_message(hits),
        ]
        scratchpad = build_scratchpad_message(hits)
        if scratchpad is not None:
            model_input.append(scratchpad)
        model_input.extend(history)
        model_input.extend(messages)

        start = time.monotonic()
        try:
            result = await self._provider.complete(messages=model_input, model=self._model)
        except ChatProviderError as e:
            logger.error("Chat completion error: %s", e)
            raise

        answer = result.content.strip() or self._empty_reply_text
        logger.info(
            "Chat reply for %s: model=%s hits=%d grounded=%s tokens=%d in %dms",
            conversation_key,
            result.model or self._model,
            len(hits),
            grounded,
            result.usage.total_tokens,
            int((time.monotonic() - start) * 1000),
        )

        await self._store.append(conversation_key, ChatMessage(role="user", content=user_text))
        await self._store.append(conversation_key, ChatMessage(role="assistant", content=answer))

        return ChatReply(answer=answer, hits=hits, grounded=grounded)

    async def history(self, conversation_key: str) -> list[ChatMessage]:
        """User and assistant turns of a conversation, oldest first."""
        stored = await self._store.get_history(conversation_key)
        return [m for m in stored if m.role in ("user", "assistant")]

    async def _retrieve(self, query: str) -> tuple[list[ScoredHit], bool]:
        """Search the knowledge base; degrade to no context if embedding is down."""
        try:
            return await self._retriever.search(query, self._top_k), True
        except EmbeddingRetriesExhaustedError as e:
            logger.warning("Retrieval unavailable, answering without grounding: %s", e)
            return [], False
