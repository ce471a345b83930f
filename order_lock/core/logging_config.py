"""
Logging Configuration Module

Centralized logging setup for the order lock validator.

Validator modules log through get_logger() with structured `extra`
fields (input index, order state, error code). The JSON formatter
emits those fields as top-level keys so a verifying node's log
aggregation can filter rejections by error code.
"""

import json
import logging
import sys

LOGGER_NAME = "order_lock"

# Attributes every LogRecord has; anything else came from `extra`
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, `extra` fields included"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure package-wide logging

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON lines for log aggregation

    Example:
        setup_logging(level="DEBUG", json_format=False)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JsonFormatter(datefmt='%Y-%m-%d %H:%M:%S')
    else:
        formatter = logging.Formatter(
            '[%(asctime)s] %(levelname)s [%(module)s:%(funcName)s:%(lineno)d] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get configured logger instance

    Args:
        name: Logger name (default: "order_lock")

    Returns:
        logging.Logger: Configured logger
    """
    return logging.getLogger(name)
