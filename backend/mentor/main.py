"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mentor.config import Settings, get_settings
from mentor.domain.exceptions import ConfigurationError
from mentor.infrastructure.dependencies import build_runtime
from mentor.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage
from mentor.infrastructure.logging.log_config import setup_logging
from mentor.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)
plog = PipelineLogger("mentor.startup")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — load the knowledge base and wire services.

    A missing provider credential raises ConfigurationError here and the
    application refuses to start.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)

    try:
        runtime = build_runtime(settings)
    except ConfigurationError as e:
        plog.step_error(PipelineStage.ERROR, "Refusing to start", error=e)
        raise
    app.state.runtime = runtime

    # Warm the prompt cache so a broken prompt file shows up at boot
    runtime.prompt_loader.load()

    plog.step_complete(
        PipelineStage.STARTUP,
        f"{settings.app_title} ready",
        chunks=len(runtime.retriever.knowledge_base),
        chat_model=settings.chat_model,
    )

    yield

    app.state.runtime = None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.runtime = None

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mentor.main:app",
        host="0.0.0.0",
        port=3000,
        reload=True,
    )
