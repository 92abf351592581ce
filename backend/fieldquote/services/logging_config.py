"""
logging_config.py — One-line-per-record logging for the quote service.

Engine modules log through named ``fieldquote.*`` loggers and attach
context via ``extra=``; this module decides how those records are written.
"""
import json
import logging
import sys
from datetime import datetime, timezone

# Record attributes copied into the JSON line when a caller passed them in ``extra``
QUOTE_FIELDS = ("quote_ref", "function_name", "duration_ms")
HTTP_FIELDS = ("request_id", "http_method", "http_path", "http_status")

_TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


class JSONFormatter(logging.Formatter):
    """Renders a record as a single JSON object."""

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for key in QUOTE_FIELDS + HTTP_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_output: bool = True):
    """
    Route all records to stdout.

    Args:
        level:       Root level name; unknown names fall back to INFO.
        json_output: JSON lines when True, plain text for local runs.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers = [handler]

    # The timing middleware already writes one line per request
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
