"""
Feedback persistence sinks.

``SheetsWebAppSink`` POSTs one ``FeedbackRecord`` as JSON to a spreadsheet
web app (e.g. a Google Apps Script ``doPost`` deployment) which appends it as
a row, matching JSON keys to the sheet's header row.

Web app contract:
  POST <script_url>
    → Body: FeedbackRecord.to_sheet_row() as JSON
    → 302 redirect to the script's content URL (followed automatically)
    → Returns: {"status": "success"} or {"status": "error", "message": "..."}

Every sink has an honest contract: ``persist()`` returns only after the row
was accepted and raises ``PersistenceError`` otherwise.  Sinks never retry
and never buffer; the caller keeps the record and decides whether to retry.

``LogOnlySink`` is used when no ``script_url`` is configured.  It writes the
record to the log and reports success, so local runs still show exactly
what would have been stored.
"""

from __future__ import annotations

import json
import logging
from typing import Optional, Protocol

import httpx

from ctrm_advisor.config import StorageConfig
from ctrm_advisor.models.feedback import FeedbackRecord

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Raised when a feedback record could not be stored."""


class FeedbackSink(Protocol):
    """Anything that can durably store one feedback record."""

    def persist(self, record: FeedbackRecord) -> None:
        """Store ``record``.

        Raises:
            PersistenceError: If the record was not stored.
        """
        ...


class SheetsWebAppSink:
    """Append feedback rows to a spreadsheet through its web-app endpoint.

    Args:
        script_url:      Deployed web-app URL, injected from ``StorageConfig``.
        timeout_seconds: Per-request timeout.
        client:          Optional ``httpx.Client`` (tests pass one with a
                         ``MockTransport``).
    """

    def __init__(
        self,
        script_url: str,
        timeout_seconds: float = 15.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not script_url:
            raise ValueError("script_url is required for SheetsWebAppSink.")
        self.script_url = script_url
        self.timeout_seconds = timeout_seconds
        self._client = client

    def persist(self, record: FeedbackRecord) -> None:
        """POST ``record`` and verify the web app reported success.

        Raises:
            PersistenceError: On transport errors, non-2xx responses,
                non-JSON replies, or a reply whose status is not "success".
        """
        payload = record.to_sheet_row()
        try:
            if self._client is not None:
                resp = self._client.post(
                    self.script_url,
                    json=payload,
                    timeout=self.timeout_seconds,
                    follow_redirects=True,
                )
            else:
                resp = httpx.post(
                    self.script_url,
                    json=payload,
                    timeout=self.timeout_seconds,
                    follow_redirects=True,
                )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Failed to send feedback record %s to spreadsheet: %s",
                record.record_id, exc,
            )
            raise PersistenceError("Could not save feedback to the spreadsheet.") from exc

        try:
            body = resp.json()
        except ValueError as exc:
            logger.error(
                "Spreadsheet web app returned a non-JSON reply for record %s: %.200s",
                record.record_id, resp.text,
            )
            raise PersistenceError(
                "Spreadsheet web app returned an unexpected response."
            ) from exc

        status = body.get("status") if isinstance(body, dict) else None
        if status != "success":
            message = body.get("message", "") if isinstance(body, dict) else ""
            logger.error(
                "Spreadsheet web app rejected record %s: status=%s message=%s",
                record.record_id, status, message,
            )
            raise PersistenceError(
                f"Spreadsheet web app rejected the feedback record: {message or status}."
            )

        logger.info("Feedback record %s saved to spreadsheet.", record.record_id)


class LogOnlySink:
    """Write feedback records to the log instead of a spreadsheet."""

    def persist(self, record: FeedbackRecord) -> None:
        logger.warning(
            "No storage.script_url configured; feedback record %s logged only.",
            record.record_id,
        )
        logger.info(
            "Feedback record:\n%s",
            json.dumps(record.to_sheet_row(), indent=2),
        )


def build_sink(config: StorageConfig) -> FeedbackSink:
    """Return the sink for ``config``: spreadsheet when a URL is set, else log-only."""
    if config.script_url:
        return SheetsWebAppSink(config.script_url, timeout_seconds=config.timeout_seconds)
    return LogOnlySink()
