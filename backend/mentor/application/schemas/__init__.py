from .chat import (
    AckResponse,
    ChatMessageSchema,
    ChatRequest,
    ChatResponse,
    HistoryMessageSchema,
    HistoryResponse,
)
from .knowledge import (
    KnowledgeBaseStatsResponse,
    PromptInfoResponse,
    ReindexResponse,
    SearchDebugResponse,
    SearchResultSchema,
)

__all__ = [
    "AckResponse",
    "ChatMessageSchema",
    "ChatRequest",
    "ChatResponse",
    "HistoryMessageSchema",
    "HistoryResponse",
    "KnowledgeBaseStatsResponse",
    "PromptInfoResponse",
    "ReindexResponse",
    "SearchDebugResponse",
    "SearchResultSchema",
]
