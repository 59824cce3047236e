"""Structured logging configuration with JSON output and rotation."""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from .config import BaseConfig

ROOT_LOGGER_NAME = "habitmaster"
LOG_FILENAME = "habitmaster.log"


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    # LogRecord attributes that are never copied into "extra"
    _STANDARD_ATTRS = frozenset(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
        | {"message", "asctime", "taskName"}
    )

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Attach console and rotating JSON file handlers to the package logger.

    Args:
        config: Application configuration providing DATA_DIR and DEV_MODE

    Returns:
        The configured ``habitmaster`` logger
    """
    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if config.DEV_MODE else logging.INFO)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)
    if config.DEV_MODE:
        console_format = "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"
        datefmt = "%H:%M:%S"
    else:
        console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        datefmt = "%Y-%m-%d %H:%M:%S"
    console_handler.setFormatter(logging.Formatter(fmt=console_format, datefmt=datefmt))
    root_logger.addHandler(console_handler)

    log_file = logs_dir / LOG_FILENAME
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(file_handler)

    root_logger.info(
        "Logging initialized",
        extra={"dev_mode": config.DEV_MODE, "log_file": str(log_file)},
    )
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger (``habitmaster.<name>``)."""

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = ["JSONFormatter", "get_logger", "setup_logging"]
