"""Logging configuration for VidTube.

Development gets a readable line per record; production gets one JSON object
per line. Request-scoped values passed through ``extra=`` (the request log
middleware sets method, path, status and timing; handlers may add ids) are
copied into the JSON output.
"""

import json
import logging
import sys

from vidtube.config import get_settings

CONTEXT_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "user_id",
    "video_id",
)

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "multipart", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with any request context attached."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging() -> None:
    """Install the stdout handler on the root logger for the configured env."""
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)

    if settings.env == "prod":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s [%(name)s] %(message)s")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.log_level)

    quiet_level = logging.DEBUG if settings.log_level == "DEBUG" else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
