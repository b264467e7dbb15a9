"""Job functions: ingestion run and index upload."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx

from snippetfeed.config import Config
import snippetfeed.ingestion  # noqa: F401  registers adapters
from snippetfeed.ingestion.pipeline import PipelineSummary, run_pipeline
from snippetfeed.ingestion.registry import build_adapters
from snippetfeed.output.algolia import AlgoliaSink
from snippetfeed.output.sink import JsonFileSink, OutputSink, read_batch

logger = logging.getLogger(__name__)


def load_sources(path: str) -> list[dict]:
    """Read the adapter list from the static sources file."""
    with open(path, encoding="utf-8") as f:
        sources = json.load(f)
    return sources.get("adapters", [])


def _algolia_sink(config: Config) -> AlgoliaSink:
    if not config.algolia_enabled:
        raise ValueError("Algolia credentials are not configured")
    return AlgoliaSink(
        config.algolia_app_id,
        config.algolia_api_key,
        config.algolia_index_name,
        max_retries=config.algolia_max_retries,
    )


def build_sinks(config: Config) -> list[OutputSink]:
    """The JSON file always; Algolia too when indexing on ingest is enabled."""
    sinks: list[OutputSink] = [JsonFileSink(config.output_path)]
    if config.index_on_ingest:
        sinks.append(_algolia_sink(config))
    return sinks


def run_ingestion(config: Config) -> PipelineSummary:
    """Fetch all configured sources and write the deduplicated batch.

    Raises if the batch cannot be written.
    """
    adapters = build_adapters(load_sources(config.sources_config_path))
    sinks = build_sinks(config)

    async def _run() -> PipelineSummary:
        async with httpx.AsyncClient(
            timeout=config.http_timeout_seconds, follow_redirects=True
        ) as client:
            return await run_pipeline(
                adapters, sinks, client, include_preview=config.include_preview
            )

    summary = asyncio.run(_run())
    logger.info("Ingestion complete: %d unique records", summary.total)
    return summary


def run_index_upload(config: Config) -> int:
    """Push the last written batch to Algolia. Returns the number of records sent."""
    sink = _algolia_sink(config)
    records = read_batch(config.output_path)
    sink.write(records)
    return len(records)
