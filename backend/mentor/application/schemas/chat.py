"""Pydantic v2 schemas (DTOs) for chat requests and responses."""

from pydantic import BaseModel, Field


class ChatMessageSchema(BaseModel):
    """A single text chat message."""

    role: str = Field(..., pattern=r"^(system|user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    """Request body for the chat endpoint.

    Either a full ``messages`` list or a single ``message`` string. When both
    are given, ``messages`` wins.
    """

    messages: list[ChatMessageSchema] = Field(
        default_factory=list, description="Conversation messages"
    )
    message: str | None = Field(default=None, description="Single user message")

    def resolved_messages(self) -> list[ChatMessageSchema]:
        if self.messages:
            return self.messages
        if self.message:
            return [ChatMessageSchema(role="user", content=self.message)]
        return []


class ChatResponse(BaseModel):
    """Response body for a chat reply."""

    ok: bool = True
    answer: str


class HistoryMessageSchema(BaseModel):
    """A conversation turn as shown in the chat UI."""

    who: str  # "user" | "bot"
    text: str


class HistoryResponse(BaseModel):
    """Stored conversation turns for the caller's conversation key."""

    ok: bool = True
    messages: list[HistoryMessageSchema] = Field(default_factory=list)


class AckResponse(BaseModel):
    """Bare acknowledgement."""

    ok: bool = True
