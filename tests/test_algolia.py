"""Tests for snippetfeed.output.algolia: Algolia indexing sink."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from snippetfeed.output.algolia import INDEX_SETTINGS, AlgoliaSink


def _ok_response(payload=None):
    resp = MagicMock()
    resp.raise_for_status = MagicMock()
    resp.json.return_value = payload or {"taskID": 1}
    return resp


def _error_response(status: int):
    resp = MagicMock()
    resp.raise_for_status.side_effect = httpx.HTTPStatusError(
        str(status), request=MagicMock(), response=MagicMock(status_code=status)
    )
    return resp


def _make_sink(**kwargs) -> AlgoliaSink:
    return AlgoliaSink("APPID", "admin-key", "snippets", **kwargs)


class TestAlgoliaSink:
    def test_name(self):
        assert _make_sink().name == "algolia:snippets"

    @patch("snippetfeed.output.algolia.httpx.request")
    def test_applies_settings_then_uploads(self, mock_request):
        mock_request.return_value = _ok_response()
        records = [{"objectID": "devto-1"}, {"objectID": "devto-2"}]

        _make_sink().write(records)

        assert mock_request.call_count == 2
        settings_call, batch_call = mock_request.call_args_list
        assert settings_call.args == (
            "PUT", "https://APPID.algolia.net/1/indexes/snippets/settings",
        )
        assert settings_call.kwargs["json"] == INDEX_SETTINGS
        assert batch_call.args == ("POST", "https://APPID.algolia.net/1/indexes/snippets/batch")
        assert batch_call.kwargs["json"] == {
            "requests": [
                {"action": "updateObject", "body": {"objectID": "devto-1"}},
                {"action": "updateObject", "body": {"objectID": "devto-2"}},
            ]
        }

    @patch("snippetfeed.output.algolia.httpx.request")
    def test_auth_headers(self, mock_request):
        mock_request.return_value = _ok_response()
        _make_sink().write([])
        headers = mock_request.call_args.kwargs["headers"]
        assert headers["X-Algolia-Application-Id"] == "APPID"
        assert headers["X-Algolia-API-Key"] == "admin-key"

    @patch("snippetfeed.output.algolia.httpx.request")
    def test_batches_large_uploads(self, mock_request):
        mock_request.return_value = _ok_response()
        records = [{"objectID": str(i)} for i in range(5)]
        _make_sink(batch_size=2).write(records)
        # settings + 3 batches
        assert mock_request.call_count == 4

    @patch("snippetfeed.output.algolia.time.sleep")
    @patch("snippetfeed.output.algolia.httpx.request")
    def test_retries_then_succeeds(self, mock_request, mock_sleep):
        mock_request.side_effect = [
            httpx.ConnectError("boom"),
            _ok_response(),
            _ok_response(),
        ]
        _make_sink().write([{"objectID": "1"}])
        assert mock_request.call_count == 3
        mock_sleep.assert_called_once_with(1)

    @patch("snippetfeed.output.algolia.time.sleep")
    @patch("snippetfeed.output.algolia.httpx.request")
    def test_raises_after_max_retries(self, mock_request, mock_sleep):
        mock_request.side_effect = httpx.ConnectError("boom")
        with pytest.raises(httpx.ConnectError):
            _make_sink(max_retries=3).write([{"objectID": "1"}])
        assert mock_request.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @patch("snippetfeed.output.algolia.time.sleep")
    @patch("snippetfeed.output.algolia.httpx.request")
    def test_http_status_error_retried(self, mock_request, mock_sleep):
        bad = _error_response(503)
        mock_request.side_effect = [bad, _ok_response(), _ok_response()]
        _make_sink().write([{"objectID": "1"}])
        assert mock_request.call_count == 3

    @patch("snippetfeed.output.algolia.time.sleep")
    @patch("snippetfeed.output.algolia.httpx.request")
    def test_client_error_not_retried(self, mock_request, mock_sleep):
        mock_request.return_value = _error_response(403)
        with pytest.raises(httpx.HTTPStatusError):
            _make_sink().write([{"objectID": "1"}])
        assert mock_request.call_count == 1
        mock_sleep.assert_not_called()

    @patch("snippetfeed.output.algolia.time.sleep")
    @patch("snippetfeed.output.algolia.httpx.request")
    def test_rate_limit_retried(self, mock_request, mock_sleep):
        mock_request.side_effect = [_error_response(429), _ok_response(), _ok_response()]
        _make_sink().write([{"objectID": "1"}])
        assert mock_request.call_count == 3
        mock_sleep.assert_called_once_with(1)
