"""Chat endpoints — grounded chat, conversation history, client analytics."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from mentor.application.schemas import (
    AckResponse,
    ChatRequest,
    ChatResponse,
    HistoryMessageSchema,
    HistoryResponse,
)
from mentor.application.services import ChatService
from mentor.domain.entities import ChatMessage
from mentor.domain.exceptions import ChatProviderError, InvalidChatRequestError
from mentor.infrastructure.dependencies import (
    get_chat_service,
    get_conversation_key,
    require_api_token,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"], dependencies=[Depends(require_api_token)])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    conversation_key: str = Depends(get_conversation_key),
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer the last user message, grounded in the knowledge base.

    The user turn and the reply are added to the caller's conversation history.
    """
    messages = [
        ChatMessage(role=m.role, content=m.content) for m in request.resolved_messages()
    ]
    if not messages:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide messages or message.",
        )

    try:
        reply = await service.reply(conversation_key, messages)
    except InvalidChatRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ChatProviderError as e:
        raise HTTPException(
            status_code=e.status_code if 400 <= e.status_code < 600 else 502,
            detail=f"[{e.provider}] {e.message}",
        )

    return ChatResponse(answer=reply.answer)


@router.get("/history", response_model=HistoryResponse)
async def history(
    conversation_key: str = Depends(get_conversation_key),
    service: ChatService = Depends(get_chat_service),
) -> HistoryResponse:
    """Conversation turns for the chat UI, oldest first."""
    messages = await service.history(conversation_key)
    return HistoryResponse(
        messages=[
            HistoryMessageSchema(who="user" if m.role == "user" else "bot", text=m.content)
            for m in messages
        ]
    )


@router.post("/log", response_model=AckResponse)
async def log_analytics(payload: Any = Body(default=None)) -> AckResponse:
    """Lightweight client analytics — the payload is only written to the log."""
    logger.info("Client analytics: %s", json.dumps(payload or {}, ensure_ascii=False))
    return AckResponse()
