"""Source adapter interface."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from snippetfeed.ingestion.normalize import SnippetRecord
from snippetfeed.ingestion.pacing import Pacer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnitOutcome:
    """Outcome of one unit of work (one tag or one feed) within an adapter run."""

    adapter: str
    unit: str
    ok: bool
    record_count: int
    duration_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class AdapterResult:
    """Everything one adapter invocation produced."""

    adapter: str
    records: tuple[SnippetRecord, ...] = ()
    outcomes: tuple[UnitOutcome, ...] = ()

    @property
    def failed_units(self) -> tuple[UnitOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.ok)


class SourceAdapter(ABC):
    """Abstract base class for source adapters.

    Every adapter splits its work into ordered units (tags, feeds), fetches
    them one at a time through a Pacer, and maps upstream items into
    SnippetRecords. A failing unit is logged and contributes nothing; the
    remaining units still run.
    """

    delay_seconds: float = 0.0

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable adapter name."""

    @abstractmethod
    def configure(self, config: dict) -> None:
        """Accept adapter-specific configuration."""

    @abstractmethod
    def units(self) -> list[Any]:
        """Ordered units of work for one invocation."""

    @abstractmethod
    async def fetch_unit(self, client: httpx.AsyncClient, unit: Any) -> list[SnippetRecord]:
        """Fetch and map a single unit. May raise; fetch() isolates failures."""

    def describe_unit(self, unit: Any) -> str:
        return str(unit)

    async def fetch(self, client: httpx.AsyncClient) -> AdapterResult:
        """Fetch every unit in order and return the combined result."""
        pacer = Pacer(self.delay_seconds)
        records: list[SnippetRecord] = []
        outcomes: list[UnitOutcome] = []

        for unit in self.units():
            label = self.describe_unit(unit)
            await pacer.wait()
            started = time.monotonic()
            try:
                unit_records = await self.fetch_unit(client, unit)
            except Exception as exc:
                duration = time.monotonic() - started
                logger.exception(
                    "adapter=%s unit=%s outcome=failure duration=%.2fs",
                    self.name, label, duration,
                )
                outcomes.append(
                    UnitOutcome(self.name, label, False, 0, duration, error=repr(exc))
                )
                continue

            duration = time.monotonic() - started
            records.extend(unit_records)
            outcomes.append(
                UnitOutcome(self.name, label, True, len(unit_records), duration)
            )
            logger.info(
                "adapter=%s unit=%s outcome=success records=%d duration=%.2fs",
                self.name, label, len(unit_records), duration,
            )

        logger.info("Fetched %d items from %s", len(records), self.name)
        return AdapterResult(self.name, tuple(records), tuple(outcomes))
