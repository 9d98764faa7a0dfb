"""Domain entities for chat messages — framework-independent."""

from dataclasses import dataclass, field

from mentor.domain.entities.knowledge_chunk import ScoredHit


@dataclass
class ChatMessage:
    """A single message in a chat conversation."""

    role: str  # "system" | "user" | "assistant"
    content: str = ""


@dataclass
class TokenUsage:
    """Token usage statistics from a completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: float | None = None  # Cost in USD, if available from provider


@dataclass
class ChatCompletionResult:
    """Result from a chat completion call."""

    model: str
    content: str
    finish_reason: str  # "stop" | "length" | "error"
    usage: TokenUsage = field(default_factory=TokenUsage)
    provider: str = ""


@dataclass
class ChatReply:
    """What the chat use case hands back to the presentation layer."""

    answer: str
    hits: list[ScoredHit] = field(default_factory=list)
    grounded: bool = True
