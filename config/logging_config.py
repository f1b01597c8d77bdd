"""
Central logging configuration for the API.

- JSON lines when LOG_JSON=1 or RAILWAY_ENVIRONMENT is set, plain text otherwise.
- LOG_LEVEL from env (default INFO).
- Never log PII: no emails, names, tokens or profile fields in messages.
  Log internal ids and counts only.
"""
import json
import logging
import os
import sys
from typing import Any

# attributes passed through logger.*(..., extra={...}) that the JSON output keeps
_EXTRA_FIELDS = ("request_id", "method", "path", "status", "duration_ms")


def _json_serial(obj: Any):
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_serial)


def _use_json() -> bool:
    return (
        os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")
        or bool(os.getenv("RAILWAY_ENVIRONMENT"))
    )


def configure_logging() -> None:
    """Configure root logger: level from LOG_LEVEL, JSON format in production."""
    level_name = (os.getenv("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate handlers when reloading
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if _use_json():
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)

    # Reduce noise from third-party libs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
