#!/usr/bin/env python3
"""
Logging configuration for the Cargo README MCP server.

Provides structured JSON logging with rotation. Every module logs through a
child of the ``crate_readme`` logger, so a single call to ``setup_logging``
routes the whole package into the same rotating file.
"""

import datetime
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "crate_readme"


class JsonFormatter(logging.Formatter):
    """Custom formatter to output logs in JSON format."""
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        # Structured context passed as extra={'extra_data': {...}}
        if hasattr(record, 'extra_data'):
            log_record.update(record.extra_data)
        if record.exc_info:
            log_record['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def setup_logging(logs_dir: Optional[Path] = None, level: Union[str, int] = logging.INFO) -> logging.Logger:
    """
    Configures the structured JSON logger.

    Args:
        logs_dir: Directory to store log files. If None, uses "./logs"
        level: Level name ("DEBUG", "INFO", ...) or numeric level

    Returns:
        Configured logger instance
    """
    if logs_dir is None:
        logs_dir = Path("./logs")

    logs_dir.mkdir(parents=True, exist_ok=True)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # stdout belongs to the MCP stdio transport
    logger.propagate = False

    if logger.handlers:
        return logger

    log_file = logs_dir / f"{datetime.date.today()}.log"

    handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding='utf-8'
    )
    handler.setFormatter(JsonFormatter())

    logger.addHandler(handler)
    return logger
