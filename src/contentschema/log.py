"""
Logging setup for contentschema.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed by the application (or the CLI) through ``configure_logging``.
JSON output emits one object per line so log shippers can ingest it
without parsing.

Usage:
    from contentschema.log import configure_logging

    configure_logging()                      # level/format from config
    configure_logging(level="debug", fmt="text")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from contentschema.config import get_config

ROOT_LOGGER = "contentschema"

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JsonLineFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    stream: Any = None,
) -> logging.Logger:
    """
    Install a single handler on the ``contentschema`` logger.

    Calling it again replaces the previous handler, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        level: Log level name; defaults to ``config.log_level``
        fmt: ``"json"`` or ``"text"``; defaults to ``config.log_format``
        stream: Output stream (defaults to stderr)

    Returns:
        The configured package logger
    """
    config = get_config()
    level = (level or config.log_level).upper()
    fmt = fmt or config.log_format

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, "_contentschema_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    handler._contentschema_handler = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
