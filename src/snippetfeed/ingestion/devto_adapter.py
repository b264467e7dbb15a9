"""dev.to source adapter: fetches articles tag by tag from the public API."""

from __future__ import annotations

import logging

import httpx

from snippetfeed.ingestion.adapter import SourceAdapter
from snippetfeed.ingestion.dedup import make_object_id
from snippetfeed.ingestion.normalize import SnippetRecord

logger = logging.getLogger(__name__)

_DEVTO_API_URL = "https://dev.to/api/articles"
_DEFAULT_TAGS = ["react", "javascript", "webdev", "ai", "programming", "typescript", "nodejs", "nextjs"]
_FETCH_DELAY = 2.0  # seconds between tag requests


def map_article(article: dict, source: str, id_prefix: str) -> SnippetRecord | None:
    """Map one dev.to article object to a SnippetRecord. Returns None without an id."""
    article_id = article.get("id")
    if article_id is None:
        return None

    user = article.get("user")
    author = user.get("name") if isinstance(user, dict) else None

    return SnippetRecord(
        object_id=make_object_id(id_prefix, article_id),
        title=article.get("title") or "",
        snippet=article.get("description") or "",
        url=article.get("url") or "",
        # tag_list is an array on the listing endpoint; the normalizer handles both
        tags=article.get("tag_list"),
        source=source,
        published_at=article.get("published_at"),
        reading_time=article.get("reading_time_minutes"),
        author=author or None,
    )


class DevToAdapter(SourceAdapter):
    """Adapter for the dev.to articles API, paginated per topic tag."""

    def __init__(self) -> None:
        self._name = "devto"
        self._api_url = _DEVTO_API_URL
        self._tags: list[str] = list(_DEFAULT_TAGS)
        self._per_tag_limit = 15
        self._source = "dev.to"
        self._id_prefix = "devto"
        # None means the shared client's default timeout applies
        self._timeout: float | None = None
        self.delay_seconds = _FETCH_DELAY

    @property
    def name(self) -> str:
        return self._name

    def configure(self, config: dict) -> None:
        self._name = config.get("name", "devto")
        self._api_url = config.get("api_url", _DEVTO_API_URL)
        self._tags = list(config.get("tags", _DEFAULT_TAGS))
        self._per_tag_limit = config.get("per_tag_limit", 15)
        self._source = config.get("source", "dev.to")
        self._id_prefix = config.get("id_prefix", "devto")
        self._timeout = config.get("timeout")
        self.delay_seconds = config.get("delay_seconds", _FETCH_DELAY)

    def units(self) -> list[str]:
        return list(self._tags)

    def describe_unit(self, unit: str) -> str:
        return f"tag:{unit}"

    async def fetch_unit(self, client: httpx.AsyncClient, tag: str) -> list[SnippetRecord]:
        kwargs = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        logger.info("Fetching dev.to articles for tag %s", tag)
        response = await client.get(
            self._api_url,
            params={"tag": tag, "per_page": self._per_tag_limit},
            **kwargs,
        )
        response.raise_for_status()
        articles = response.json()
        if not isinstance(articles, list):
            raise ValueError(
                f"Expected a list of articles for tag '{tag}', got {type(articles).__name__}"
            )

        records: list[SnippetRecord] = []
        for article in articles[: self._per_tag_limit]:
            if not isinstance(article, dict):
                continue
            record = map_article(article, self._source, self._id_prefix)
            if record is None:
                logger.debug("Skipping dev.to article without id for tag %s", tag)
                continue
            records.append(record)
        return records
