"""Logging configuration"""

import json
import logging
import sys
from datetime import datetime, timezone

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Formatter that renders each record as a single JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", structured: bool = True) -> None:
    """
    Configure the root logger for the application.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Emit JSON lines instead of plain text
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    handler = logging.StreamHandler(sys.stdout)
    if structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    # Replace handlers so reloads don't duplicate output
    root.handlers = [handler]

    # SQL echo is controlled by settings.debug, keep the driver quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
