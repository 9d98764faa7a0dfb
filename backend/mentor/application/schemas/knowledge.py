"""Pydantic schemas for knowledge-base search, stats and maintenance."""

from pydantic import BaseModel, Field

from mentor.domain.entities import ReindexReport, ScoredHit

PREVIEW_LENGTH = 180


class SearchResultSchema(BaseModel):
    """A single hit in a debug search."""

    source: str
    score: float
    preview: str

    @classmethod
    def from_hit(cls, hit: ScoredHit) -> "SearchResultSchema":
        text = hit.text
        preview = text if len(text) <= PREVIEW_LENGTH else text[:PREVIEW_LENGTH] + "…"
        return cls(source=hit.source, score=round(hit.score, 4), preview=preview)


class SearchDebugResponse(BaseModel):
    """Ranked hits for a debug query."""

    count: int = 0
    results: list[SearchResultSchema] = Field(default_factory=list)


class KnowledgeBaseStatsResponse(BaseModel):
    """Size of the loaded knowledge base."""

    ok: bool = True
    chunks: int = 0
    embedded: int = 0


class PromptInfoResponse(BaseModel):
    """Length of the currently loaded system prompt."""

    ok: bool = True
    length: int = 0


class ReindexResponse(BaseModel):
    """Outcome of a re-indexing pass."""

    ok: bool = True
    total: int = 0
    embedded: int = 0
    failed: int = 0

    @classmethod
    def from_report(cls, report: ReindexReport) -> "ReindexResponse":
        return cls(total=report.total, embedded=report.embedded, failed=report.failed)
