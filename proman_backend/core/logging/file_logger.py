"""
Queue-backed file logging with rotation.

Request handlers only enqueue records; a listener thread writes them to the
rotating log file and the console.
"""

import logging
import queue
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from .structured_logger import build_console_handler, build_formatter

# Library loggers routed through the queue, with their minimum levels
LIBRARY_LOG_LEVELS = {
    "sqlalchemy": logging.WARNING,
    "alembic": logging.INFO,
    "aiosqlite": logging.WARNING,
    "asyncmy": logging.WARNING,
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
}


class FileLogger:
    """Owns the record queue, its listener and the rotating file handler."""

    def __init__(
        self,
        log_file_path: str = "logs/app.log",
        max_bytes: int = 50 * 1024 * 1024,  # 50MB
        backup_count: int = 5,
        log_level: str = "INFO",
        use_json_format: bool = True,
    ):
        self.log_path = Path(log_file_path)
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.level = logging.getLevelName(log_level.upper())
        self.use_json_format = use_json_format
        self._records: queue.SimpleQueue = queue.SimpleQueue()
        self._listener: QueueListener | None = None
        self.queue_handler = QueueHandler(self._records)
        self.queue_handler.setLevel(self.level)

    def _rotating_handler(self) -> RotatingFileHandler:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            self.log_path,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(self.level)
        handler.setFormatter(build_formatter(self.use_json_format))
        return handler

    def start(self) -> None:
        """Open the log file and start draining the queue.

        Raises:
            OSError: If the log directory or file cannot be created
        """
        handlers = [
            build_console_handler(self.level, self.use_json_format),
            self._rotating_handler(),
        ]
        self._listener = QueueListener(
            self._records, *handlers, respect_handler_level=True
        )
        self._listener.start()

    def get_queue_handler(self) -> QueueHandler:
        return self.queue_handler

    def stop(self) -> None:
        """Stop the listener after writing every queued record."""
        if self._listener:
            self._listener.stop()
            self._listener = None


def setup_file_logging(
    log_file_path: str = "logs/app.log",
    log_level: str = "INFO",
    use_json_format: bool = True,
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> FileLogger | None:
    """
    Start queue-backed file logging.

    Returns:
        The running FileLogger, or None when the log file cannot be opened
        so the caller can fall back to console logging
    """
    file_logger = FileLogger(
        log_file_path=log_file_path,
        max_bytes=max_bytes,
        backup_count=backup_count,
        log_level=log_level,
        use_json_format=use_json_format,
    )
    try:
        file_logger.start()
    except OSError as e:
        logging.getLogger("proman_backend").error(
            f"Failed to setup file logging at {log_file_path}: {e}"
        )
        return None
    return file_logger


def configure_external_loggers(queue_handler: QueueHandler) -> None:
    """Send the root logger and library loggers through ``queue_handler``."""
    for logger_name, level in LIBRARY_LOG_LEVELS.items():
        library_logger = logging.getLogger(logger_name)
        library_logger.handlers = [queue_handler]
        library_logger.propagate = False
        library_logger.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers = [queue_handler]
    root_logger.setLevel(queue_handler.level)

    logging.captureWarnings(True)
