"""Unit tests for the knowledge-base shard loader."""

import gzip
import json
from pathlib import Path

from mentor.infrastructure.knowledge.shard_loader import (
    discover_shards,
    load_knowledge_base,
    record_to_chunk,
)


# ── Helpers ──


def _write_shard(directory: Path, name: str, records) -> Path:
    path = directory / name
    with gzip.open(path, "wt", encoding="utf-8") as fh:
        json.dump(records, fh)
    return path


def _record(text: str, embedding=None, **extra) -> dict:
    return {"text": text, "embedding": embedding if embedding is not None else [0.1, 0.2], **extra}


# ── Tests ──


def test_loads_shards_in_filename_order(tmp_path):
    _write_shard(tmp_path, "kb-002.json.gz", [_record("third"), _record("fourth")])
    _write_shard(tmp_path, "kb-001.json.gz", [_record("first"), _record("second")])

    kb = load_knowledge_base(tmp_path)

    assert [c.text for c in kb.chunks] == ["first", "second", "third", "fourth"]
    assert [p.name for p in kb.shard_files] == ["kb-001.json.gz", "kb-002.json.gz"]


def test_record_fields_are_mapped(tmp_path):
    _write_shard(
        tmp_path,
        "herbs.json.gz",
        [_record("Calendula soothes skin.", [1, 0.5], source="herbal.pdf#p3", id=17)],
    )

    chunk = load_knowledge_base(tmp_path).chunks[0]

    assert chunk.text == "Calendula soothes skin."
    assert chunk.source == "herbal.pdf#p3"
    assert chunk.vector == [1.0, 0.5]
    assert chunk.id == "17"


def test_source_defaults_to_shard_file_name(tmp_path):
    _write_shard(tmp_path, "notes.json.gz", [_record("no source here")])

    assert load_knowledge_base(tmp_path).chunks[0].source == "notes.json.gz"


def test_invalid_records_are_dropped(tmp_path):
    _write_shard(
        tmp_path,
        "mixed.json.gz",
        [
            _record("valid"),
            {"text": "", "embedding": [0.1]},
            {"text": "   ", "embedding": [0.1]},
            {"embedding": [0.1]},
            {"text": "no embedding"},
            {"text": "string embedding", "embedding": "0.1,0.2"},
            {"text": "mixed embedding", "embedding": [0.1, "x"]},
            {"text": "bool embedding", "embedding": [True, False]},
            {"text": "empty embedding", "embedding": []},
            "not an object",
            _record("also valid"),
        ],
    )

    kb = load_knowledge_base(tmp_path)

    assert [c.text for c in kb.chunks] == ["valid", "also valid"]


def test_corrupt_shard_is_skipped(tmp_path):
    _write_shard(tmp_path, "a.json.gz", [_record("before")])
    (tmp_path / "b.json.gz").write_bytes(b"this is not gzip")
    with gzip.open(tmp_path / "c.json.gz", "wt", encoding="utf-8") as fh:
        fh.write("{ truncated json")
    _write_shard(tmp_path, "d.json.gz", [_record("after")])

    kb = load_knowledge_base(tmp_path)

    assert [c.text for c in kb.chunks] == ["before", "after"]
    assert [p.name for p in kb.shard_files] == ["a.json.gz", "d.json.gz"]


def test_non_array_shard_is_skipped(tmp_path):
    _write_shard(tmp_path, "object.json.gz", {"text": "x", "embedding": [1.0]})
    _write_shard(tmp_path, "list.json.gz", [_record("kept")])

    kb = load_knowledge_base(tmp_path)

    assert [c.text for c in kb.chunks] == ["kept"]


def test_files_not_matching_pattern_are_ignored(tmp_path):
    _write_shard(tmp_path, "kb.json.gz", [_record("kept")])
    (tmp_path / "readme.txt").write_text("ignore me")
    (tmp_path / "raw.json").write_text(json.dumps([_record("plain json")]))

    assert [c.text for c in load_knowledge_base(tmp_path).chunks] == ["kept"]


def test_custom_pattern(tmp_path):
    _write_shard(tmp_path, "part-1.kb.gz", [_record("custom")])
    _write_shard(tmp_path, "other.json.gz", [_record("default")])

    kb = load_knowledge_base(tmp_path, pattern="*.kb.gz")

    assert [c.text for c in kb.chunks] == ["custom"]


def test_empty_directory_yields_empty_base(tmp_path):
    kb = load_knowledge_base(tmp_path)

    assert kb.is_empty
    assert kb.shard_files == []


def test_missing_directory_yields_empty_base(tmp_path):
    assert load_knowledge_base(tmp_path / "does-not-exist").is_empty


def test_discover_shards_sorts_by_name(tmp_path):
    for name in ("b.json.gz", "a.json.gz", "c.json.gz"):
        _write_shard(tmp_path, name, [])

    assert [p.name for p in discover_shards(tmp_path)] == ["a.json.gz", "b.json.gz", "c.json.gz"]


def test_record_to_chunk_rejects_non_dict():
    assert record_to_chunk(["text", [1.0]], default_source="x") is None


def test_oversized_integer_embedding_drops_only_that_record(tmp_path):
    _write_shard(tmp_path, "a.json.gz", [{"text": "big", "embedding": [10**400, 1]}])
    _write_shard(tmp_path, "b.json.gz", [_record("ok")])

    kb = load_knowledge_base(tmp_path)

    assert [c.text for c in kb.chunks] == ["ok"]
    assert [p.name for p in kb.shard_files] == ["a.json.gz", "b.json.gz"]


def test_non_finite_embedding_values_are_rejected(tmp_path):
    _write_shard(
        tmp_path,
        "nan.json.gz",
        [
            {"text": "nan", "embedding": [float("nan"), 1.0]},
            {"text": "inf", "embedding": [float("inf")]},
            _record("finite"),
        ],
    )

    assert [c.text for c in load_knowledge_base(tmp_path).chunks] == ["finite"]
