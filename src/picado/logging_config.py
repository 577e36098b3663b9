"""
Centralized logging configuration for Picado.

Usage:
- Development (default): console lines at INFO level.
- Production: set LOG_FORMAT=json for one JSON object per line.

Environment variables (read through picado.config.settings):
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL
- LOG_FORMAT: console|json
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from picado.config import settings

CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """Render a log record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        level: Optional level name (e.g. "DEBUG"). Defaults to settings.log_level.
        fmt: Optional "console" or "json". Defaults to settings.log_format.
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    fmt = (fmt or settings.log_format).lower()

    # Avoid duplicate handlers if re-configuring
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stdout)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))

    root.setLevel(numeric_level)
    root.addHandler(handler)

    # SQL statements only in full debug
    is_debug = numeric_level <= logging.DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if is_debug else logging.WARNING)
