"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from mentor.presentation.api.v1.endpoints.health import router as health_router
from mentor.presentation.api.v1.endpoints.chat import router as chat_router
from mentor.presentation.api.v1.endpoints.knowledge import router as knowledge_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(chat_router)
router.include_router(knowledge_router)
