"""Structured Logging — one JSON object per line for the CRM service.

Invariants:
    - Every line carries timestamp (the record's own creation time, UTC), level,
      logger and message
    - Only CRM_FIELDS are lifted from `extra=`; anything else stays out of the line
    - Credentials never reach a log line: values under REDACTED_FIELDS are masked,
      and a session cookie value is never passed as an extra in the first place
    - Root handlers are replaced, not appended: a second setup_logging() call
      (tests, uvicorn reload) does not double every line
"""

import json
import logging
from datetime import datetime, timezone

CRM_FIELDS = (
    "admin_id", "entity_type", "entity_id", "action", "error_code", "path",
)
REDACTED_FIELDS = frozenset({"password", "password_hash", "token"})
REDACTED = "***"

# Chatty at INFO; raised so audit and auth events stay readable.
QUIET_LOGGERS = {"sqlalchemy.engine": logging.WARNING, "uvicorn.access": logging.WARNING}

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def crm_context(record: logging.LogRecord) -> dict:
    context = {}
    for key in CRM_FIELDS + tuple(REDACTED_FIELDS):
        if key not in record.__dict__ or record.__dict__[key] is None:
            continue
        context[key] = REDACTED if key in REDACTED_FIELDS else record.__dict__[key]
    return context


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **crm_context(record),
        }
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the CRM handler on the root logger and return it."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT),
    )
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    return handler
