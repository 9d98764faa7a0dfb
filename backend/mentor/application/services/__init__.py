from .chat_service import ChatService
from .embedding_service import EmbeddingService
from .retriever import Retriever
from .retry_policy import RetryPolicy
from .similarity import cosine_similarity

__all__ = [
    "ChatService",
    "EmbeddingService",
    "Retriever",
    "RetryPolicy",
    "cosine_similarity",
]
