"""RSS/Atom feed source adapters."""

from __future__ import annotations

import logging
import re
from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from html import unescape
from typing import Any
from urllib.parse import urlparse

import feedparser
import httpx

from snippetfeed.ingestion.adapter import SourceAdapter
from snippetfeed.ingestion.dedup import make_object_id
from snippetfeed.ingestion.normalize import SnippetRecord

logger = logging.getLogger(__name__)

_HTML_TAG_RE = re.compile(r"<[^>]+>")

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
FEED_ACCEPT = "application/rss+xml, application/xml, text/xml, */*"

DEFAULT_KEYWORDS = (
    "react", "javascript", "typescript", "nodejs", "nextjs", "webdev", "ai", "programming",
)
MULTI_FEED_KEYWORDS = DEFAULT_KEYWORDS + ("css", "html", "web", "design")

HASHNODE_FEEDS = (
    "https://hashnode.com/n/react/rss.xml",
    "https://hashnode.com/n/javascript/rss.xml",
    "https://hashnode.com/n/web-development/rss.xml",
    "https://hashnode.com/n/artificial-intelligence/rss.xml",
    "https://hashnode.com/n/programming/rss.xml",
)


def strip_html(text: str) -> str:
    """Remove HTML tags and unescape entities."""
    return unescape(_HTML_TAG_RE.sub("", text)).strip()


def _as_list(value: Any) -> list:
    """Wrap a lone value into a one-element list; None becomes empty."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def source_slug_from_url(url: str) -> str:
    """Derive a short source slug from a feed URL's host (hashnode.com -> hashnode)."""
    host = (urlparse(url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    parts = [p for p in host.split(".") if p]
    if not parts:
        return "rss"
    return parts[-2] if len(parts) >= 2 else parts[0]


def _parse_pub_date(entry: dict) -> str | None:
    """Publication date as ISO 8601 when parseable, else the raw upstream string."""
    raw = entry.get("published") or entry.get("updated")
    if raw:
        try:
            return parsedate_to_datetime(raw).isoformat()
        except (ValueError, TypeError):
            return raw
    # feedparser sometimes provides only a parsed tuple
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed:
        try:
            return datetime(*parsed[:6], tzinfo=timezone.utc).isoformat()
        except (ValueError, TypeError):
            pass
    return None


def _entry_categories(entry: dict) -> list[str]:
    """Category terms of an entry, whether it carries one category or many."""
    terms: list[str] = []
    for tag in _as_list(entry.get("tags")):
        term = tag.get("term") if isinstance(tag, dict) else tag
        if isinstance(term, str) and term.strip():
            terms.append(term)
    if not terms:
        terms = [c for c in _as_list(entry.get("category")) if isinstance(c, str) and c.strip()]
    return terms


def keywords_from_title(title: str, keywords: frozenset[str] | set[str]) -> list[str]:
    """Title tokens (lower-cased, whitespace-split) that appear in the allow-list.

    Order follows the title; repeated tokens are kept.
    """
    return [word for word in title.lower().split() if word in keywords]


@dataclass(frozen=True)
class FeedTarget:
    """One feed URL and the source slug its items are attributed to."""

    url: str
    source: str


class FeedAdapter(SourceAdapter):
    """Shared fetch/parse/map logic for RSS and Atom feeds."""

    _default_name = "rss"
    _default_max_items = 15
    _default_delay = 3.0
    _default_keywords: tuple[str, ...] = DEFAULT_KEYWORDS

    def __init__(self) -> None:
        self._name = self._default_name
        self._feeds: list[FeedTarget] = []
        self._max_items_per_feed = self._default_max_items
        self._keywords = frozenset(self._default_keywords)
        self._timeout = 10.0
        self.delay_seconds = self._default_delay

    @property
    def name(self) -> str:
        return self._name

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": BROWSER_USER_AGENT, "Accept": FEED_ACCEPT}

    @property
    def feeds(self) -> list[FeedTarget]:
        return list(self._feeds)

    def configure(self, config: dict) -> None:
        self._name = config.get("name", self._default_name)
        self._max_items_per_feed = config.get("max_items_per_feed", self._default_max_items)
        self._keywords = frozenset(
            k.lower() for k in config.get("keywords", self._default_keywords)
        )
        self._timeout = config.get("timeout", 10.0)
        self.delay_seconds = config.get("delay_seconds", self._default_delay)
        self._feeds = self._parse_feeds(config)

    @abstractmethod
    def _parse_feeds(self, config: dict) -> list[FeedTarget]:
        """Build the feed list from adapter configuration."""

    def units(self) -> list[FeedTarget]:
        return list(self._feeds)

    def describe_unit(self, unit: FeedTarget) -> str:
        return unit.url

    async def fetch_unit(self, client: httpx.AsyncClient, feed: FeedTarget) -> list[SnippetRecord]:
        """Fetch and parse a single feed."""
        kwargs = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        logger.info("Fetching feed %s (%s)", feed.url, feed.source)
        response = await client.get(feed.url, headers=self.headers, **kwargs)
        response.raise_for_status()
        return self.parse_feed(response.text, feed)

    def parse_feed(self, text: str, feed: FeedTarget) -> list[SnippetRecord]:
        parsed = feedparser.parse(text)
        entries = _as_list(parsed.get("entries"))
        if not entries:
            logger.warning(
                "Feed %s has no items (bozo=%s)", feed.url, int(parsed.get("bozo", 0))
            )
            return []

        records: list[SnippetRecord] = []
        for entry in entries[: self._max_items_per_feed]:
            record = self.map_entry(entry, feed.source)
            if record is None:
                logger.debug("Skipping entry without guid or link in %s", feed.url)
                continue
            records.append(record)
        return records

    def map_entry(self, entry: dict, source: str) -> SnippetRecord | None:
        """Map one feed entry to a SnippetRecord. Returns None without guid or link."""
        link = entry.get("link")
        native_id = entry.get("id") or link
        if not native_id:
            return None

        title = (entry.get("title") or "").strip()
        tags = _entry_categories(entry) or keywords_from_title(title, self._keywords)
        author = entry.get("author") or f"{source} Author"

        return SnippetRecord(
            object_id=make_object_id(source, native_id),
            title=title,
            snippet=strip_html(entry.get("summary") or entry.get("description") or ""),
            url=link or "",
            tags=tags,
            source=source,
            published_at=_parse_pub_date(entry),
            author=author,
        )


class RSSAdapter(FeedAdapter):
    """Adapter for a family of same-shaped feeds sharing one source slug."""

    @property
    def headers(self) -> dict[str, str]:
        return {
            **super().headers,
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
        }

    def _parse_feeds(self, config: dict) -> list[FeedTarget]:
        """Accept feed configuration.

        Expected format:
        {
            "source": "hashnode",          # optional, else derived per feed URL
            "feeds": ["https://...", {"url": "...", "source": "..."}, ...]
        }
        """
        default_source = config.get("source")
        feeds: list[FeedTarget] = []
        for item in config.get("feeds", HASHNODE_FEEDS):
            if isinstance(item, str):
                url, source = item, None
            else:
                url, source = item["url"], item.get("source")
            feeds.append(FeedTarget(url, source or default_source or source_slug_from_url(url)))
        return feeds


class MultiFeedRSSAdapter(FeedAdapter):
    """Adapter for unrelated feeds, each mapped to its own source slug."""

    _default_name = "rss_multi"
    _default_max_items = 10
    _default_delay = 2.0
    _default_keywords = MULTI_FEED_KEYWORDS

    def _parse_feeds(self, config: dict) -> list[FeedTarget]:
        """Accept feed configuration.

        Expected format:
        {"feeds": [{"url": "...", "source": "css-tricks"}, ...]}
        """
        feeds: list[FeedTarget] = []
        for item in config.get("feeds", []):
            if not isinstance(item, dict):
                raise ValueError(f"Feed {item} has no source slug")
            if not item.get("source"):
                raise ValueError(f"Feed {item.get('url', 'unknown')} has no source slug")
            feeds.append(FeedTarget(item["url"], item["source"]))
        return feeds
