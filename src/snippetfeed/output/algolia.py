"""Algolia REST client: index settings and batched record upload."""

from __future__ import annotations

import logging
import time

import httpx

from snippetfeed.output.sink import OutputSink

logger = logging.getLogger(__name__)

ALGOLIA_HOST_TEMPLATE = "https://{app_id}.algolia.net"
_BATCH_SIZE = 1000

INDEX_SETTINGS = {
    "searchableAttributes": ["title", "snippet", "tags", "source"],
    "attributesForFaceting": ["searchable(tags)", "source"],
    "customRanking": ["desc(objectID)"],
    "highlightPreTag": "<mark>",
    "highlightPostTag": "</mark>",
}


def _is_permanent(exc: httpx.HTTPError) -> bool:
    """Client errors other than rate limiting will not succeed on retry."""
    if not isinstance(exc, httpx.HTTPStatusError):
        return False
    status = exc.response.status_code
    return 400 <= status < 500 and status != 429


class AlgoliaSink(OutputSink):
    """Pushes the batch into an Algolia index.

    Records are upserted by objectID. Failed requests are retried with
    exponential backoff: 2^attempt seconds (1s, 2s, 4s, ...). Client errors
    other than 429 are raised at once. The last error is raised once retries
    are exhausted.
    """

    def __init__(
        self,
        app_id: str,
        api_key: str,
        index_name: str,
        *,
        timeout: float = 30,
        max_retries: int = 3,
        batch_size: int = _BATCH_SIZE,
    ) -> None:
        self._app_id = app_id
        self._api_key = api_key
        self._index_name = index_name
        self._timeout = timeout
        self._max_retries = max_retries
        self._batch_size = batch_size

    @property
    def name(self) -> str:
        return f"algolia:{self._index_name}"

    def _url(self, path: str) -> str:
        base = ALGOLIA_HOST_TEMPLATE.format(app_id=self._app_id)
        return f"{base}/1/indexes/{self._index_name}{path}"

    def _request(self, method: str, path: str, payload: dict) -> dict:
        headers = {
            "X-Algolia-Application-Id": self._app_id,
            "X-Algolia-API-Key": self._api_key,
        }
        url = self._url(path)
        for attempt in range(self._max_retries):
            try:
                response = httpx.request(
                    method, url, headers=headers, json=payload, timeout=self._timeout
                )
                response.raise_for_status()
                return response.json()
            except httpx.HTTPError as exc:
                if _is_permanent(exc):
                    logger.error("Algolia %s %s rejected: %s", method, path, exc)
                    raise
                logger.warning(
                    "Algolia %s %s failed (attempt %d/%d): %s",
                    method, path, attempt + 1, self._max_retries, exc,
                )
                if attempt + 1 >= self._max_retries:
                    raise
                time.sleep(2**attempt)
        raise RuntimeError("max_retries must be at least 1")

    def apply_settings(self) -> None:
        self._request("PUT", "/settings", INDEX_SETTINGS)
        logger.info("Updated settings for index %s", self._index_name)

    def write(self, records: list[dict]) -> None:
        self.apply_settings()
        for start in range(0, len(records), self._batch_size):
            chunk = records[start : start + self._batch_size]
            self._request(
                "POST",
                "/batch",
                {"requests": [{"action": "updateObject", "body": r} for r in chunk]},
            )
        logger.info("Indexed %d records into %s", len(records), self._index_name)
