"""Stable identifiers and cross-source deduplication."""

from __future__ import annotations

from typing import Iterable

from snippetfeed.ingestion.normalize import SnippetRecord


def make_object_id(prefix: str, native_id: object) -> str:
    """Build a source-prefixed objectID from an upstream id, guid, or link.

    Deterministic: the same prefix and native id always produce the same value,
    so re-running against unchanged upstream data reproduces the same IDs.
    """
    return f"{prefix}-{native_id}"


def dedupe_records(records: Iterable[SnippetRecord]) -> list[SnippetRecord]:
    """Collapse records sharing an objectID, keeping the last occurrence.

    The survivor replaces earlier records wholesale; fields are never merged.
    Output order is the key order of a dict built by iterating the input, i.e.
    each key sits where it was first seen and holds its last value.
    """
    by_id: dict[str, SnippetRecord] = {}
    for record in records:
        by_id[record.object_id] = record
    return list(by_id.values())
