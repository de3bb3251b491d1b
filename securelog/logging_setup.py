"""Logging configuration for SecureLog.

Library modules only create loggers; handlers are installed here, by the
CLI or by applications that want SecureLog's format.
"""

import logging
import os
import sys
from typing import Any, Optional

from pythonjsonlogger.json import JsonFormatter


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter with SecureLog's field names."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")
        if "asctime" in log_record:
            log_record["timestamp"] = log_record.pop("asctime")

        log_record["service"] = "securelog"


def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure root logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var
               SECURELOG_LOG_LEVEL or WARNING.
        json_format: Whether to use JSON format. Defaults to env var
                     SECURELOG_LOG_FORMAT == 'json'.
    """
    if level is None:
        level = os.getenv("SECURELOG_LOG_LEVEL", "WARNING")
    level = level.upper()
    if json_format is None:
        json_format = os.getenv("SECURELOG_LOG_FORMAT", "text").lower() == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stdout carries the report
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = CustomJsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
