"""Pipeline orchestration: concurrent fetch, dedup, tag normalization, output."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import httpx

from snippetfeed.ingestion.adapter import AdapterResult, SourceAdapter, UnitOutcome
from snippetfeed.ingestion.dedup import dedupe_records
from snippetfeed.ingestion.normalize import SnippetRecord, normalize_record
from snippetfeed.output.sink import OutputSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineSummary:
    """Counts reported at the end of a pipeline run."""

    adapter_counts: dict[str, int]
    source_counts: dict[str, int]
    total: int
    failed_units: tuple[UnitOutcome, ...] = field(default_factory=tuple)


async def collect(
    adapters: Sequence[SourceAdapter], client: httpx.AsyncClient
) -> list[AdapterResult]:
    """Run every adapter concurrently and wait for all of them to settle.

    Results come back in adapter order. An adapter that raises despite its own
    per-unit isolation is logged and counted as an empty result.
    """
    settled = await asyncio.gather(
        *(adapter.fetch(client) for adapter in adapters), return_exceptions=True
    )
    results: list[AdapterResult] = []
    for adapter, outcome in zip(adapters, settled):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.error(
                "Adapter '%s' failed", adapter.name,
                exc_info=(type(outcome), outcome, outcome.__traceback__),
            )
            results.append(AdapterResult(adapter.name))
            continue
        results.append(outcome)
    return results


def build_batch(results: Iterable[AdapterResult]) -> list[SnippetRecord]:
    """Concatenate adapter outputs, drop duplicate objectIDs, normalize tags."""
    merged = [record for result in results for record in result.records]
    unique = dedupe_records(merged)
    return [normalize_record(record) for record in unique]


def count_by_source(records: Iterable[SnippetRecord]) -> dict[str, int]:
    return dict(Counter(record.source for record in records))


def summarize(results: Sequence[AdapterResult], batch: Sequence[SnippetRecord]) -> PipelineSummary:
    adapter_counts: dict[str, int] = {}
    failed: list[UnitOutcome] = []
    for result in results:
        adapter_counts[result.adapter] = adapter_counts.get(result.adapter, 0) + len(result.records)
        failed.extend(result.failed_units)
    return PipelineSummary(
        adapter_counts=adapter_counts,
        source_counts=count_by_source(batch),
        total=len(batch),
        failed_units=tuple(failed),
    )


def log_summary(summary: PipelineSummary) -> None:
    """Log the run summary as single-line records: totals, then one line per failed unit."""
    logger.info(
        "Run summary: total=%d adapters=%s sources=%s failed_units=%d",
        summary.total,
        summary.adapter_counts,
        dict(sorted(summary.source_counts.items())),
        len(summary.failed_units),
    )
    for outcome in summary.failed_units:
        logger.warning(
            "Failed unit: adapter=%s unit=%s error=%s",
            outcome.adapter, outcome.unit, outcome.error,
        )


async def run_pipeline(
    adapters: Sequence[SourceAdapter],
    sinks: Sequence[OutputSink],
    client: httpx.AsyncClient,
    include_preview: bool = True,
) -> PipelineSummary:
    """Fetch from all adapters, build the deduplicated batch, and write it out.

    An empty batch is a normal outcome and is still written. A sink failure
    is logged and re-raised, since nothing downstream can proceed without it.
    """
    logger.info("Starting pipeline with %d adapter(s)", len(adapters))
    results = await collect(adapters, client)
    batch = build_batch(results)
    payload = [record.to_dict(include_preview=include_preview) for record in batch]

    for sink in sinks:
        try:
            sink.write(payload)
        except Exception:
            logger.exception("Failed to write batch to %s", sink.name)
            raise

    summary = summarize(results, batch)
    log_summary(summary)
    return summary
