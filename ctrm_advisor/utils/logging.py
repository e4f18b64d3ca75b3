"""
Logging setup for the CTRM Advisor.

``configure_logging(config)`` is called once by the CLI before any command
runs.  Library modules only ever do ``logging.getLogger(__name__)``.

Every questionnaire run gets a short session id.  ``session_logger()`` wraps
a module logger so each line it emits carries that id, which lets the
recommendation, the justification fallback and the stored feedback record
of one run be found together in the log::

    2026-03-01T09:30:00Z [INFO] ctrm_advisor.advisor [session=3f9a1c2e]: Recommendation | ...

With ``json_format = true`` each line is one JSON object instead; the
session id and any ``extra=`` fields become top-level keys::

    {"ts": "...", "level": "INFO", "logger": "...", "msg": "...", "session": "3f9a1c2e"}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, MutableMapping

if TYPE_CHECKING:
    from ctrm_advisor.config import LoggingConfig

LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s%(session_tag)s: %(message)s"

NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "openai")

# Attributes present on every LogRecord; anything else came from ``extra=``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "session_tag"}


class SessionLogAdapter(logging.LoggerAdapter):
    """Attach ``session`` to every record logged through this adapter."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("session", self.extra["session"])
        kwargs["extra"] = extra
        return msg, kwargs


def session_logger(logger: logging.Logger, session_id: str) -> SessionLogAdapter:
    return SessionLogAdapter(logger, {"session": session_id})


class _SessionTagFilter(logging.Filter):
    """Fill ``session_tag`` so the plain format works with or without a session."""

    def filter(self, record: logging.LogRecord) -> bool:
        session = getattr(record, "session", None)
        record.session_tag = f" [session={session}]" if session else ""
        return True


class _JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, plus extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonFormatter()
    return logging.Formatter(PLAIN_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(config: "LoggingConfig") -> None:
    """Install handlers on the root logger from ``config``.

    Console output goes to stderr so command output on stdout stays clean.
    A file handler is added when ``config.log_file`` is set (parent
    directories are created).  Replaces any handlers installed earlier.
    """
    level = logging.getLevelName(config.level)
    formatter = _build_formatter(config.json_format)
    session_tags = _SessionTagFilter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(session_tags)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
