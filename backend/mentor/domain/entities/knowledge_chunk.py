"""Domain entities for the knowledge base — chunks, the loaded base, scored hits."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class KnowledgeChunk:
    """A unit of knowledge-base content with its embedding vector.

    ``text`` and ``source`` never change after load. ``vector`` is replaced
    only by a re-indexing pass, and is ``None`` when embedding failed there.
    """

    text: str
    source: str
    vector: list[float] | None = None
    id: str | None = None

    @property
    def is_embedded(self) -> bool:
        return self.vector is not None


@dataclass
class KnowledgeBase:
    """Ordered collection of chunks assembled once at load time."""

    chunks: list[KnowledgeChunk] = field(default_factory=list)
    shard_files: list[Path] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.chunks)

    @property
    def is_empty(self) -> bool:
        return not self.chunks

    @property
    def embedded_count(self) -> int:
        return sum(1 for chunk in self.chunks if chunk.is_embedded)

    def copy(self) -> "KnowledgeBase":
        """Return an independent copy, safe to re-index while this one is searched."""
        return KnowledgeBase(
            chunks=[
                KnowledgeChunk(
                    text=c.text,
                    source=c.source,
                    vector=list(c.vector) if c.vector is not None else None,
                    id=c.id,
                )
                for c in self.chunks
            ],
            shard_files=list(self.shard_files),
        )


@dataclass(frozen=True)
class ScoredHit:
    """A chunk paired with its similarity to one query. Lives for one search."""

    chunk: KnowledgeChunk
    score: float

    @property
    def text(self) -> str:
        return self.chunk.text

    @property
    def source(self) -> str:
        return self.chunk.source


@dataclass
class ReindexReport:
    """Outcome of a re-indexing pass."""

    total: int = 0
    embedded: int = 0
    failed: int = 0
