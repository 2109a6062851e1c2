"""Structured Logging — JSON lines for board events.

Invariants:
    - Every line carries timestamp (event time, UTC), level, logger and message
    - Board context (entity_id, operation, error_code, counts, strategy) is added only when set
    - setup_logging is idempotent: calling it again replaces its own handler

Design Decisions:
    - stdlib logging with a small JSONFormatter
    - setup_logging called by opsmap.main.board_runtime before anything else logs
"""

import json
import logging
from datetime import datetime, timezone

BOARD_FIELDS = (
    "entity_id", "operation", "error_code",
    "campaign_count", "project_count", "strategy",
)
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# aiosqlite logs every cursor operation at DEBUG.
_CHATTY_LOGGERS = ("aiosqlite",)


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            name: getattr(record, name)
            for name in BOARD_FIELDS
            if getattr(record, name, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _BoardHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _BoardHandler)]:
        root.removeHandler(existing)

    handler = _BoardHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
