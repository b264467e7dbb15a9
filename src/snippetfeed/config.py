"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Application configuration. All values sourced from environment variables."""

    # Optional: Output
    output_path: str = "./scraped-snippets.json"
    include_preview: bool = True

    # Optional: Ingestion
    sources_config_path: str = "./config/sources.json"
    http_timeout_seconds: float = 30.0
    fetch_interval_minutes: int = 0

    # Optional: Indexing (all three Algolia values or none)
    algolia_app_id: str | None = None
    algolia_api_key: str | None = None
    algolia_index_name: str | None = None
    index_on_ingest: bool = False
    algolia_max_retries: int = 3

    # Optional: Application
    log_level: str = "INFO"
    log_format: str = "json"
    app_env: str = "production"

    @property
    def algolia_enabled(self) -> bool:
        return bool(self.algolia_app_id and self.algolia_api_key and self.algolia_index_name)


_ALGOLIA_VARS = [
    "ALGOLIA_APP_ID",
    "ALGOLIA_ADMIN_API_KEY",
    "ALGOLIA_INDEX_NAME",
]

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def load_config(env_path: str | Path | None = None) -> Config:
    """Load configuration from environment variables.

    Loads a .env file if present (for local development). Algolia settings are
    all-or-none: setting only some of them raises ValueError listing the
    missing ones, as does INDEX_ON_INGEST without credentials.
    """
    load_dotenv(dotenv_path=env_path)

    present = [var for var in _ALGOLIA_VARS if os.environ.get(var)]
    missing = [var for var in _ALGOLIA_VARS if not os.environ.get(var)]
    index_on_ingest = _env_bool("INDEX_ON_INGEST", False)
    if (present or index_on_ingest) and missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return Config(
        # Optional: Output
        output_path=os.environ.get("OUTPUT_PATH", "./scraped-snippets.json"),
        include_preview=_env_bool("INCLUDE_PREVIEW", True),
        # Optional: Ingestion
        sources_config_path=os.environ.get("SOURCES_CONFIG_PATH", "./config/sources.json"),
        http_timeout_seconds=float(os.environ.get("HTTP_TIMEOUT_SECONDS", "30")),
        fetch_interval_minutes=int(os.environ.get("FETCH_INTERVAL_MINUTES", "0")),
        # Optional: Indexing
        algolia_app_id=os.environ.get("ALGOLIA_APP_ID") or None,
        algolia_api_key=os.environ.get("ALGOLIA_ADMIN_API_KEY") or None,
        algolia_index_name=os.environ.get("ALGOLIA_INDEX_NAME") or None,
        index_on_ingest=index_on_ingest,
        algolia_max_retries=int(os.environ.get("ALGOLIA_MAX_RETRIES", "3")),
        # Optional: Application
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
        app_env=os.environ.get("APP_ENV", "production"),
    )
