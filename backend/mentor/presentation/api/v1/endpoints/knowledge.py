"""Knowledge-base endpoints — debug search, stats, and maintenance."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from mentor.application.interfaces import PromptLoader
from mentor.application.schemas import (
    KnowledgeBaseStatsResponse,
    PromptInfoResponse,
    ReindexResponse,
    SearchDebugResponse,
    SearchResultSchema,
)
from mentor.application.services import Retriever
from mentor.domain.exceptions import EmbeddingRetriesExhaustedError, ReindexInProgressError
from mentor.infrastructure.dependencies import (
    get_prompt_loader,
    get_retriever,
    require_api_token,
)
from mentor.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("KnowledgeBaseMaintenance")

router = APIRouter(tags=["Knowledge Base"], dependencies=[Depends(require_api_token)])


@router.get("/search/debug", response_model=SearchDebugResponse)
async def search_debug(
    q: str = Query(default="calendula", min_length=1),
    k: int = Query(default=6, ge=1, le=50),
    retriever: Retriever = Depends(get_retriever),
) -> SearchDebugResponse:
    """Run a raw retrieval query and show the ranked hits."""
    try:
        hits = await retriever.search(q, k)
    except EmbeddingRetriesExhaustedError as e:
        logger.error("Debug search failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search failed",
        )

    results = [SearchResultSchema.from_hit(hit) for hit in hits]
    return SearchDebugResponse(count=len(results), results=results)


@router.get("/kb-stats", response_model=KnowledgeBaseStatsResponse)
async def kb_stats(retriever: Retriever = Depends(get_retriever)) -> KnowledgeBaseStatsResponse:
    """Number of loaded chunks and how many of them carry a vector."""
    stats = retriever.stats()
    return KnowledgeBaseStatsResponse(chunks=stats["chunks"], embedded=stats["embedded"])


@router.get("/system-prompt-preview", response_model=PromptInfoResponse)
async def system_prompt_preview(
    prompt_loader: PromptLoader = Depends(get_prompt_loader),
) -> PromptInfoResponse:
    return PromptInfoResponse(length=len(prompt_loader.load()))


@router.post("/admin/reload-prompts", response_model=PromptInfoResponse)
async def reload_prompts(
    prompt_loader: PromptLoader = Depends(get_prompt_loader),
) -> PromptInfoResponse:
    """Drop the cached system prompt and read it again."""
    prompt_loader.invalidate()
    return PromptInfoResponse(length=len(prompt_loader.load()))


@router.post("/admin/reindex", response_model=ReindexResponse)
async def reindex(retriever: Retriever = Depends(get_retriever)) -> ReindexResponse:
    """Recompute every chunk embedding against a copy, then swap it in.

    Consumes one metered embedding call per chunk. Searches keep using the
    current base until the pass has finished.
    """
    try:
        with plog.timed_step(
            PipelineStage.REINDEX,
            "Re-indexing knowledge base",
            chunks=len(retriever.knowledge_base),
        ):
            report = await retriever.reindex_and_swap()
    except ReindexInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    plog.detail("Re-indexed copy swapped in", embedded=report.embedded, failed=report.failed)
    return ReindexResponse.from_report(report)
