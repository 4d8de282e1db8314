"""
Root logger configuration for scripts.

Library modules only create ``logging.getLogger(__name__)`` loggers; entry
points call ``configure_logging()`` once to pick the output format from
settings ('console' for dev, 'json' for production log shippers).
"""

import json
import logging
from typing import Optional

from bolobey.config import Settings, settings as default_settings

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    return logging.Formatter(CONSOLE_FORMAT)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Attach a stream handler to the root logger using the configured format."""
    settings = settings or default_settings
    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(settings.log_format))
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        handlers=[handler],
    )
