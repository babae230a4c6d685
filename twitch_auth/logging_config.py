"""
Logging configuration.

Logs go to stdout as one JSON object per line. Context passed through
`extra=` on a log call ends up as top-level keys of the object.

There is no handler for a hosted log service. Platforms that collect
stdout (Cloud Run, Kubernetes) pick the lines up as structured entries;
anything else can be attached to the root logger after
`setup_global_logging()` runs.
"""

import json
import logging
import os
import sys
from datetime import UTC, datetime


# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRIBUTES = set(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """
    Custom JSON log formatter.

    Produces structured logs with timestamp, severity, logger name and
    message, plus any extra fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            A JSON string representing the log record.
        """
        log_object = {
            "timestamp": datetime.now(UTC).isoformat(),
            "severity": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES and key not in log_object:
                log_object[key] = value

        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, default=str)


def setup_global_logging() -> None:
    """
    Configure the root logger.

    Installs a single stdout handler with JsonFormatter. The level comes
    from LOG_LEVEL (default INFO).
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Remove default handlers to avoid duplicate logs
    for h in root_logger.handlers[:]:
        if h is not handler:
            root_logger.removeHandler(h)
