"""Application entry points: one-shot or scheduled ingestion, and index upload."""

from __future__ import annotations

import json
import logging
import sys

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from snippetfeed.config import Config, load_config
from snippetfeed.jobs import run_index_upload, run_ingestion

logger = logging.getLogger("snippetfeed")


class _JsonFormatter(logging.Formatter):
    """One JSON object per line; tracebacks go into the 'exc_info' field."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _setup_logging(log_level: str, log_format: str) -> None:
    """Configure root logger based on config."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _scheduled_ingestion(config: Config) -> None:
    """Scheduler job wrapper; a failed run is logged and the next one still fires."""
    try:
        run_ingestion(config)
    except Exception:
        logger.exception("Scheduled ingestion failed; scheduler will continue")


def _build_scheduler(config: Config) -> BlockingScheduler:
    """Create a BlockingScheduler running ingestion on the configured interval."""
    scheduler = BlockingScheduler()
    scheduler.add_job(
        _scheduled_ingestion,
        trigger=IntervalTrigger(minutes=config.fetch_interval_minutes),
        args=[config],
        id="ingestion",
        name="Snippet ingestion pipeline",
    )
    return scheduler


def main() -> None:
    """Load config, set up logging, run ingestion, and optionally keep scheduling it."""
    config = load_config()
    _setup_logging(config.log_level, config.log_format)

    logger.info(
        "snippetfeed starting (env=%s, sources=%s, output=%s)",
        config.app_env,
        config.sources_config_path,
        config.output_path,
    )

    if config.fetch_interval_minutes <= 0:
        try:
            run_ingestion(config)
        except Exception:
            logger.exception("Ingestion failed")
            sys.exit(1)
        return

    _scheduled_ingestion(config)
    scheduler = _build_scheduler(config)
    logger.info("Scheduler starting (every %d min)", config.fetch_interval_minutes)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler shutting down")


def upload_main() -> None:
    """Push the existing output batch to the configured Algolia index."""
    config = load_config()
    _setup_logging(config.log_level, config.log_format)
    try:
        count = run_index_upload(config)
    except Exception:
        logger.exception("Index upload failed")
        sys.exit(1)
    logger.info("Uploaded %d records", count)


if __name__ == "__main__":
    main()
