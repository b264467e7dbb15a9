"""Ingestion pipeline: source fetching, deduplication, and tag normalization."""

from snippetfeed.ingestion.devto_adapter import DevToAdapter
from snippetfeed.ingestion.registry import register_adapter
from snippetfeed.ingestion.rss_adapter import MultiFeedRSSAdapter, RSSAdapter

register_adapter("devto", DevToAdapter)
register_adapter("rss", RSSAdapter)
register_adapter("rss_multi", MultiFeedRSSAdapter)
