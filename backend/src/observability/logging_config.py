"""Logging setup for the API process.

Every record passes through CorrelationFilter, which stamps it with the
current request id and caller. Output is one JSON object per line unless
LOG_JSON is false.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .correlation import get_caller_id, get_request_id

# Record attributes copied into the JSON line when a log call passes them
EXTRA_FIELDS = ("declaration_request_id", "outcome", "status_code", "duration_ms")


class CorrelationFilter(logging.Filter):
    """Attach request_id and caller_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        # An explicit user_id extra wins over the bound caller
        explicit = getattr(record, "user_id", None)
        record.caller_id = str(explicit) if explicit is not None else get_caller_id()
        return True


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", None),
            "message": record.getMessage(),
        }

        caller_id = getattr(record, "caller_id", None)
        if caller_id:
            log_data["caller_id"] = caller_id

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                value = getattr(record, field)
                log_data[field] = value if isinstance(value, (int, float)) else str(value)

        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger."""
    log_level = getattr(logging, level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"
        ))
    handler.addFilter(CorrelationFilter())
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
