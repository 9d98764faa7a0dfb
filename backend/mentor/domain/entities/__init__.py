from .chat_message import ChatMessage, TokenUsage, ChatCompletionResult, ChatReply
from .knowledge_chunk import KnowledgeChunk, KnowledgeBase, ScoredHit, ReindexReport

__all__ = [
    "ChatMessage",
    "TokenUsage",
    "ChatCompletionResult",
    "ChatReply",
    "KnowledgeChunk",
    "KnowledgeBase",
    "ScoredHit",
    "ReindexReport",
]
