"""
Tests for ctrm_advisor/integrations/sheets_sink.py.

All HTTP calls go through ``httpx.MockTransport``; nothing leaves the process.

What we test
------------
SheetsWebAppSink.persist():
  - POSTs the camelCase sheet row as JSON to the configured URL.
  - {"status": "success"} -> returns normally.
  - {"status": "error"} -> PersistenceError carrying the message.
  - HTTP 500 -> PersistenceError.
  - Non-JSON body -> PersistenceError.
  - Transport error -> PersistenceError.
  - Redirect to the content URL is followed.

LogOnlySink / build_sink():
  - Empty script_url -> LogOnlySink, which logs the record and never raises.
  - Non-empty script_url -> SheetsWebAppSink.
"""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from ctrm_advisor.config import StorageConfig
from ctrm_advisor.integrations.sheets_sink import (
    LogOnlySink,
    PersistenceError,
    SheetsWebAppSink,
    build_sink,
)
from ctrm_advisor.models.feedback import FeedbackRecord
from ctrm_advisor.taxonomy.answer_taxonomy import FeedbackRating

SCRIPT_URL = "https://script.example.com/macros/s/abc/exec"


@pytest.fixture
def record() -> FeedbackRecord:
    return FeedbackRecord(
        timestamp="2026-03-01T09:30:00Z",
        record_id="rec-1",
        feedback_rating=FeedbackRating.ACCURATE,
        generated_suggestion="Book a demo.",
        original_ideal_product="Aspect",
        original_strong_product="Allegro",
        org_size="Small/Startup",
    )


def _sink(handler) -> SheetsWebAppSink:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SheetsWebAppSink(SCRIPT_URL, timeout_seconds=5.0, client=client)


class TestSheetsWebAppSink:
    def test_success(self, record: FeedbackRecord) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "success"})

        _sink(handler).persist(record)

        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == SCRIPT_URL
        body = json.loads(seen[0].content)
        assert body["recordId"] == "rec-1"
        assert body["orgSize"] == "Small/Startup"
        assert body["feedbackRating"] == "accurate"

    def test_error_status_raises(self, record: FeedbackRecord) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "error", "message": "sheet locked"})

        with pytest.raises(PersistenceError, match="sheet locked"):
            _sink(handler).persist(record)

    def test_http_500_raises(self, record: FeedbackRecord) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(PersistenceError):
            _sink(handler).persist(record)

    def test_non_json_raises(self, record: FeedbackRecord) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>Sign in</html>")

        with pytest.raises(PersistenceError, match="unexpected response"):
            _sink(handler).persist(record)

    def test_transport_error_raises(self, record: FeedbackRecord) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route", request=request)

        with pytest.raises(PersistenceError):
            _sink(handler).persist(record)

    def test_follows_redirect(self, record: FeedbackRecord) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/exec"):
                return httpx.Response(
                    302, headers={"Location": "https://script.example.com/echo"}
                )
            return httpx.Response(200, json={"status": "success"})

        _sink(handler).persist(record)

    def test_requires_url(self) -> None:
        with pytest.raises(ValueError):
            SheetsWebAppSink("")


class TestBuildSink:
    def test_empty_url_logs_only(self, record: FeedbackRecord, caplog) -> None:
        sink = build_sink(StorageConfig())
        assert isinstance(sink, LogOnlySink)
        with caplog.at_level(logging.INFO, logger="ctrm_advisor.integrations.sheets_sink"):
            sink.persist(record)
        assert "rec-1" in caplog.text

    def test_url_builds_sheets_sink(self) -> None:
        sink = build_sink(StorageConfig(script_url=SCRIPT_URL, timeout_seconds=3.0))
        assert isinstance(sink, SheetsWebAppSink)
        assert sink.script_url == SCRIPT_URL
        assert sink.timeout_seconds == 3.0
