from .chat_provider import ChatProvider
from .conversation_store import ConversationStore
from .embedding_provider import EmbeddingProvider
from .prompt_loader import PromptLoader

__all__ = [
    "ChatProvider",
    "ConversationStore",
    "EmbeddingProvider",
    "PromptLoader",
]
