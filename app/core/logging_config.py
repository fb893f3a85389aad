"""
Logging configuration module for the application.

This module provides a centralized logging configuration system that:
1. Sets up console logging plus rotating plain-text and JSON log files
2. Reads levels and the log directory from the application settings
3. Keeps GitPython's own chatter at WARNING unless debugging
"""

import json
import logging
import logging.config
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from app.core.config import Settings, get_settings

# LogRecord attributes that are not "extra" context
_RESERVED_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class StructuredJSONFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per record.

    Values passed through ``extra=`` (for example ``ref`` or ``file_path``)
    are added as top-level keys next to the standard fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_logging_config(settings: Settings | None = None) -> Dict[str, Any]:
    """
    Build the dictConfig mapping for the given settings.

    Args:
        settings: Application settings, defaults to the cached singleton

    Returns:
        Dict[str, Any]: The logging configuration dictionary
    """
    settings = settings or get_settings()
    level = settings.LOG_LEVEL.upper()
    git_level = "DEBUG" if level == "DEBUG" else "WARNING"

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "app.core.logging_config.StructuredJSONFormatter",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": sys.stdout,
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": "default",
                "filename": str(log_dir / "code_review.log"),
                "maxBytes": 5 * 1024 * 1024,  # 5 MB
                "backupCount": 5,
                "encoding": "utf-8",
            },
            "json_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": "json",
                "filename": str(log_dir / "code_review.json.log"),
                "maxBytes": 5 * 1024 * 1024,  # 5 MB
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["console", "file"],
                "level": level,
                "propagate": False,
            },
            "git": {
                "handlers": ["console", "file"],
                "level": git_level,
                "propagate": False,
            },
            "app": {
                "handlers": ["console", "file", "json_file"],
                "level": level,
                "propagate": False,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def setup_logging(settings: Settings | None = None) -> None:
    """Configure the logging system from the application settings."""
    logging.config.dictConfig(get_logging_config(settings))
    logging.getLogger("app").debug("Logging system initialized")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger namespaced under ``app``.

    Args:
        name: The name for the logger, usually __name__ from the calling module

    Returns:
        logging.Logger: Configured logger instance
    """
    if name == "app" or name.startswith("app."):
        return logging.getLogger(name)
    return logging.getLogger(f"app.{name}")
