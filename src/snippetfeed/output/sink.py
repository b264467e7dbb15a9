"""Output sinks: where a finished batch of snippet records goes."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class OutputSink(ABC):
    """Destination for a full pipeline batch. Each write replaces the previous one."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable sink name."""

    @abstractmethod
    def write(self, records: list[dict]) -> None:
        """Persist the batch. Raises on failure."""


class JsonFileSink(OutputSink):
    """Writes the batch as a single JSON array, overwriting the file atomically."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def name(self) -> str:
        return f"file:{self._path}"

    @property
    def path(self) -> Path:
        return self._path

    def write(self, records: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.info("Saved %d records to %s", len(records), self._path)


def read_batch(path: str | Path) -> list[dict]:
    """Load a batch previously written by JsonFileSink."""
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Expected a JSON array in {path}")
    return records
