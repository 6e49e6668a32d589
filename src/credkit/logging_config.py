"""
Logging setup for the credkit command-line interface and web service
"""

import json
import logging
from typing import Optional

from .config.partner_config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StructuredFormatter(logging.Formatter):
    """Formats each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Configure the ``credkit`` logger hierarchy.

    Replaces any handler installed by a previous call so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        config: Logging configuration (defaults to INFO, plain text)

    Returns:
        logging.Logger: The configured package logger
    """
    config = config or LoggingConfig()

    handler = logging.StreamHandler()
    if config.structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    package_logger = logging.getLogger("credkit")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)

    package_logger.addHandler(handler)
    package_logger.setLevel(config.level)
    return package_logger
