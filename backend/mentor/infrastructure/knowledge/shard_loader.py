"""Knowledge-base shard loader — reads gzip-compressed JSON shards from disk.

Each shard is a gzip-compressed JSON array. Every element is an object with at
least ``text`` (string) and ``embedding`` (array of numbers), optionally
``source`` and ``id``. Shards are read in lexicographic filename order and
their valid records concatenated in order.

A shard that cannot be decompressed or parsed is skipped with a warning;
records missing text or a numeric embedding are dropped.
"""

import gzip
import json
import logging
import math
import zlib
from pathlib import Path
from typing import Any

from mentor.domain.entities import KnowledgeBase, KnowledgeChunk
from mentor.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("KnowledgeBaseLoader")

DEFAULT_SHARD_PATTERN = "*.json.gz"


class ShardFormatError(ValueError):
    """A shard decoded fine but does not hold a JSON array."""


def discover_shards(directory: Path, pattern: str = DEFAULT_SHARD_PATTERN) -> list[Path]:
    """Shard files in ``directory`` matching ``pattern``, sorted by filename."""
    return sorted(
        (p for p in directory.glob(pattern) if p.is_file()),
        key=lambda p: p.name,
    )


def load_knowledge_base(
    directory: str | Path,
    pattern: str = DEFAULT_SHARD_PATTERN,
) -> KnowledgeBase:
    """Load every recognized shard under ``directory`` into one KnowledgeBase.

    Never raises for bad shards or a missing directory: the result is simply
    smaller (possibly empty).
    """
    directory = Path(directory)
    plog.step_start(PipelineStage.KB_LOAD, f"Loading knowledge base from {directory}")

    if not directory.is_dir():
        plog.step_warning(
            PipelineStage.KB_LOAD,
            f"Knowledge-base directory {directory} does not exist — starting empty",
        )
        return KnowledgeBase()

    shard_paths = discover_shards(directory, pattern)
    if not shard_paths:
        plog.step_complete(
            PipelineStage.KB_LOAD, "No shards found — knowledge base is empty", pattern=pattern
        )
        return KnowledgeBase()

    kb = KnowledgeBase()
    for path in shard_paths:
        try:
            records = read_shard(path)
        except (OSError, EOFError, zlib.error, ValueError) as e:
            plog.step_warning(PipelineStage.SHARD, f"Skipping unreadable shard {path.name}", error=e)
            continue

        chunks = [c for c in (record_to_chunk(r, default_source=path.name) for r in records) if c]
        skipped = len(records) - len(chunks)
        if skipped:
            logger.debug("Shard %s: dropped %d invalid record(s)", path.name, skipped)

        kb.chunks.extend(chunks)
        kb.shard_files.append(path)
        plog.detail(f"{path.name}", chunks=len(chunks), skipped=skipped)

    plog.step_complete(
        PipelineStage.KB_LOAD,
        f"Knowledge base loaded with {len(kb)} chunks",
        shards=len(kb.shard_files),
        skipped_shards=len(shard_paths) - len(kb.shard_files),
    )
    return kb


def read_shard(path: Path) -> list[Any]:
    """Decompress and parse one shard, returning its raw records.

    Raises:
        OSError / EOFError / zlib.error: Not a valid gzip stream.
        ValueError: Not UTF-8 JSON, or the top level is not an array.
    """
    with gzip.open(path, "rt", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ShardFormatError(f"expected a JSON array, got {type(data).__name__}")
    return data


def record_to_chunk(record: Any, *, default_source: str) -> KnowledgeChunk | None:
    """Build a chunk from a shard record, or None if the record is invalid."""
    if not isinstance(record, dict):
        return None

    text = record.get("text")
    if not isinstance(text, str) or not text.strip():
        return None

    embedding = _to_vector(record.get("embedding"))
    if embedding is None:
        return None

    source = record.get("source")
    if not isinstance(source, str) or not source.strip():
        source = default_source

    record_id = record.get("id")
    return KnowledgeChunk(
        text=text,
        source=source,
        vector=embedding,
        id=str(record_id) if record_id is not None else None,
    )


def _to_vector(value: Any) -> list[float] | None:
    """Non-empty list of finite floats, or None if any element is not one."""
    if not isinstance(value, list) or not value:
        return None
    vector = []
    for x in value:
        if isinstance(x, bool) or not isinstance(x, (int, float)):
            return None
        try:
            number = float(x)
        except OverflowError:
            return None
        if not math.isfinite(number):
            return None
        vector.append(number)
    return vector
