import sys
import json
import logging
from datetime import datetime, timezone

# Checkout fields that callers may attach with ``extra=``
CONTEXT_FIELDS = ("session_id", "mode")

QUIET_LOGGERS = ("stripe", "urllib3", "httpx")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with UTC ISO-8601 timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(
            (name, getattr(record, name)) for name in CONTEXT_FIELDS if hasattr(record, name)
        )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO") -> None:
    """
    Sends every log record, uvicorn's included, to stdout as JSON.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level.upper())

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
