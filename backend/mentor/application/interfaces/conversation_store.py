"""Abstract interface (port) for per-conversation message history."""

from abc import ABC, abstractmethod

from mentor.domain.entities import ChatMessage


class ConversationStore(ABC):
    """Port for conversation memory keyed by a conversation key."""

    @abstractmethod
    async def get_history(self, key: str) -> list[ChatMessage]:
        """Return the stored messages for a conversation, oldest first."""
        ...

    @abstractmethod
    async def append(self, key: str, message: ChatMessage) -> None:
        """Append a message, trimming the oldest beyond the store's limit."""
        ...

    @abstractmethod
    async def clear(self, key: str) -> None:
        """Forget a conversation."""
        ...
