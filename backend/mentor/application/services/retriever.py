"""Retriever — top-K semantic search over the in-memory knowledge base.

Flow per query:
  1. Embed the query (EmbeddingService, bounded retry)
  2. Score every embedded chunk with cosine similarity (linear scan)
  3. Stable sort by descending score — ties keep knowledge-base order
  4. Truncate to K
"""

import asyncio
import logging
import time

from mentor.application.services.embedding_service import EmbeddingService
from mentor.application.services.similarity import cosine_similarity
from mentor.domain.entities import KnowledgeBase, ReindexReport, ScoredHit
from mentor.domain.exceptions import EmbeddingRetriesExhaustedError, ReindexInProgressError

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 6


class Retriever:
    """Application service owning the knowledge base for the process lifetime.

    The base is read-only while searches run. Re-indexing is the one mutating
    operation; while traffic is live use ``reindex_and_swap``, which works on a
    copy and swaps it in under the re-indexing lock.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        embedding_service: EmbeddingService,
        *,
        default_k: int = DEFAULT_TOP_K,
    ):
        self._knowledge_base = knowledge_base
        self._embedding_service = embedding_service
        self._default_k = default_k
        self._reindex_lock = asyncio.Lock()

    @property
    def knowledge_base(self) -> KnowledgeBase:
        return self._knowledge_base

    @property
    def embedding_service(self) -> EmbeddingService:
        return self._embedding_service

    def replace_knowledge_base(self, knowledge_base: KnowledgeBase) -> None:
        """Swap in a wholly new base; in-flight searches keep the old one."""
        logger.info(
            "Knowledge base replaced: %d -> %d chunks",
            len(self._knowledge_base),
            len(knowledge_base),
        )
        self._knowledge_base = knowledge_base

    def stats(self) -> dict[str, int]:
        kb = self._knowledge_base
        return {"chunks": len(kb), "embedded": kb.embedded_count}

    async def search(self, query: str, k: int | None = None) -> list[ScoredHit]:
        """Return at most ``k`` chunks ranked by similarity to ``query``.

        Raises:
            EmbeddingRetriesExhaustedError: If the query could not be embedded.
        """
        kb = self._knowledge_base
        limit = self._default_k if k is None else k
        if kb.is_empty or limit <= 0:
            return []

        start = time.monotonic()
        query_vector = await self._embedding_service.embed(query)

        hits = [
            ScoredHit(chunk=chunk, score=cosine_similarity(query_vector, chunk.vector))
            for chunk in kb.chunks
            if chunk.vector is not None
        ]
        # sorted() is stable, also with reverse=True
        hits = sorted(hits, key=lambda hit: hit.score, reverse=True)[:limit]

        logger.debug(
            "Search scored %d chunk(s), returning %d in %dms",
            len(kb.chunks),
            len(hits),
            int((time.monotonic() - start) * 1000),
        )
        return hits

    async def reindex(self, knowledge_base: KnowledgeBase | None = None) -> ReindexReport:
        """(Re)compute the embedding of every chunk, in place.

        A chunk whose embedding fails terminally gets ``vector = None`` and the
        pass moves on; the chunk count never changes. Consumes one metered
        provider call per chunk (more on retries).
        """
        target = knowledge_base if knowledge_base is not None else self._knowledge_base

        async with self._reindex_lock:
            return await self._embed_all(target)

    async def reindex_and_swap(self) -> ReindexReport:
        """Re-index a copy of the live base and swap it in once finished.

        Searches keep using the current base until the swap.

        Raises:
            ReindexInProgressError: Another pass is already running.
        """
        if self._reindex_lock.locked():
            raise ReindexInProgressError("A re-indexing pass is already running.")

        async with self._reindex_lock:
            offline_copy = self._knowledge_base.copy()
            report = await self._embed_all(offline_copy)
            self.replace_knowledge_base(offline_copy)
            return report

    async def _embed_all(self, target: KnowledgeBase) -> ReindexReport:
        report = ReindexReport(total=len(target.chunks))
        model = self._embedding_service.provider.model
        logger.info("Re-indexing %d chunks using %s", report.total, model)

        for index, chunk in enumerate(target.chunks):
            try:
                chunk.vector = await self._embedding_service.embed(chunk.text)
                report.embedded += 1
            except EmbeddingRetriesExhaustedError as exc:
                logger.error(
                    "Failed to embed chunk %d (%s): %s. Skipping.",
                    index,
                    chunk.source,
                    exc,
                )
                chunk.vector = None
                report.failed += 1

        logger.info(
            "Re-indexing complete: %d embedded, %d failed",
            report.embedded,
            report.failed,
        )
        return report
