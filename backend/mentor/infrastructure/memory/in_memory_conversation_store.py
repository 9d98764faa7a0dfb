"""In-memory conversation store — bounded per-key history for the process lifetime."""

import logging
from collections import defaultdict, deque

from mentor.application.interfaces.conversation_store import ConversationStore
from mentor.domain.entities import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 12


class InMemoryConversationStore(ConversationStore):
    """Keeps the last ``max_history`` messages per conversation key."""

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        if max_history < 1:
            raise ValueError("max_history must be at least 1")
        self._max_history = max_history
        self._conversations: defaultdict[str, deque[ChatMessage]] = defaultdict(
            lambda: deque(maxlen=self._max_history)
        )

    @property
    def max_history(self) -> int:
        return self._max_history

    def __len__(self) -> int:
        return len(self._conversations)

    async def get_history(self, key: str) -> list[ChatMessage]:
        conversation = self._conversations.get(key)
        return list(conversation) if conversation else []

    async def append(self, key: str, message: ChatMessage) -> None:
        self._conversations[key].append(message)

    async def clear(self, key: str) -> None:
        if self._conversations.pop(key, None) is not None:
            logger.debug("Cleared conversation %s", key)
