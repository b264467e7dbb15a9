"""Canonical snippet record and tag normalization."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union

# Raw tag shapes seen upstream: an array, a comma-joined string, or nothing.
TagsValue = Union[list[str], tuple[str, ...], str, None]


@dataclass(frozen=True)
class SnippetRecord:
    """Canonical representation of one ingested content item."""

    object_id: str
    title: str
    url: str
    source: str
    snippet: str = ""
    tags: TagsValue = field(default_factory=list)
    published_at: str | None = None
    reading_time: int | None = None
    author: str | None = None

    def to_dict(self, include_preview: bool = True) -> dict[str, Any]:
        """Serialize to the output shape consumed by the search index.

        Optional fields are emitted only when the source provided them.
        Tags are expected to have been through normalize_record already.
        """
        data: dict[str, Any] = {
            "objectID": self.object_id,
            "title": self.title,
            "snippet": self.snippet,
        }
        if include_preview:
            data["preview"] = self.snippet
        data["url"] = self.url
        data["tags"] = list(self.tags or [])
        data["source"] = self.source
        if self.published_at is not None:
            data["publishedAt"] = self.published_at
        if self.reading_time is not None:
            data["readingTime"] = self.reading_time
        if self.author is not None:
            data["author"] = self.author
        return data


def _split_delimited(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def normalize_tags(value: Any) -> list[str]:
    """Coerce a raw tags value into an ordered list of trimmed, non-empty strings.

    - list/tuple: each string entry is trimmed; blanks and non-strings dropped
    - str: split on commas, trimmed, blanks dropped
    - anything else (including None): empty list

    Order is preserved. Duplicate tags within one record are kept.
    """
    if isinstance(value, str):
        return _split_delimited(value)
    if isinstance(value, (list, tuple)):
        return [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]
    return []


def normalize_record(record: SnippetRecord) -> SnippetRecord:
    """Return a copy of the record with its tags in canonical list form."""
    return replace(record, tags=normalize_tags(record.tags))
