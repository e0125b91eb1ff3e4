"""
Logging setup for the shopping store.

Console output is human-readable. The optional rotating file gets one JSON
object per line, carrying the store context fields (operation, item id, ...)
that callers pass through `extra=`.
"""
from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from shopping_store.config import StoreConfig

LOGGER_NAME = "shopping_store"
LOG_FILE = "shopping_store.jsonl"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Fields the store attaches to records via `extra=`
CONTEXT_FIELDS = ("operation", "item_id", "category_id", "entry_id", "storage_key", "count")


def store_context(operation: str, **fields: Any) -> Dict[str, Any]:
    """Build the `extra=` mapping for a store log record, dropping None values."""
    context = {"operation": operation}
    context.update({k: v for k, v in fields.items() if v is not None})
    return context


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record: time, level, logger, message, store context."""

    def format(self, record: logging.LogRecord) -> str:
        line: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                line[field] = getattr(record, field)
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


class StoreLogger:
    """Configure the package logger from a StoreConfig.

    Handlers are attached once per logger name; building a second
    StoreLogger for the same name only updates the level.
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        name: str = LOGGER_NAME,
        console: bool = True,
        max_bytes: int = 5_000_000,  # 5 MB
        backup_count: int = 5,
    ) -> None:
        self.config = config or StoreConfig()
        self.logger = logging.getLogger(name)
        self.logger.setLevel(self.config.level)

        if self.logger.handlers:
            return

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            self.logger.addHandler(console_handler)

        if self.config.log_to_file:
            self.logger.addHandler(self._file_handler(max_bytes, backup_count))

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    @property
    def log_path(self) -> Path:
        return Path(self.config.log_dir) / LOG_FILE

    def _file_handler(self, max_bytes: int, backup_count: int) -> RotatingFileHandler:
        Path(self.config.log_dir).mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            self.log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(JsonLineFormatter())
        return handler

    def get_logger(self) -> logging.Logger:
        return self.logger
