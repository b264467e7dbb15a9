"""Adapter registry: maps type strings from the sources file to adapter classes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snippetfeed.ingestion.adapter import SourceAdapter

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type[SourceAdapter]] = {}


def register_adapter(type_name: str, cls: type[SourceAdapter]) -> None:
    """Register an adapter class for a given type name."""
    _REGISTRY[type_name] = cls


def get_adapter_class(type_name: str) -> type[SourceAdapter] | None:
    """Look up an adapter class by type name. Returns None if not found."""
    return _REGISTRY.get(type_name)


def registered_types() -> list[str]:
    """Return a sorted list of all registered adapter type names."""
    return sorted(_REGISTRY)


def build_adapters(adapter_configs: list[dict]) -> list[SourceAdapter]:
    """Instantiate and configure adapters from the sources file entries.

    Disabled entries are skipped silently; unknown types are logged and skipped.
    """
    adapters: list[SourceAdapter] = []
    for adapter_config in adapter_configs:
        adapter_type = adapter_config.get("type", "")
        if not adapter_config.get("enabled", True):
            logger.info("Adapter '%s' disabled, skipping", adapter_type)
            continue
        adapter_cls = get_adapter_class(adapter_type)
        if adapter_cls is None:
            logger.warning("Unknown adapter type '%s', skipping", adapter_type)
            continue
        adapter = adapter_cls()
        adapter.configure(adapter_config)
        adapters.append(adapter)
    return adapters
