"""
Central logging configuration for ProMan.

``setup_logging`` runs once from the application lifespan; modules obtain
their loggers through ``get_logger``.
"""

import logging

from .context import TransactionIdFilter
from .file_logger import FileLogger, configure_external_loggers, setup_file_logging
from .structured_logger import APP_LOGGER_NAME, setup_structured_logging


class LoggingConfig:
    """Tracks the active logging setup so it can be stopped on shutdown."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self.transaction_filter = TransactionIdFilter()
        self._is_configured = False

    def setup(
        self,
        log_to_file: bool = True,
        log_level: str = "INFO",
        log_file_path: str = "logs/app.log",
        use_json_format: bool = True,
        max_bytes: int = 50 * 1024 * 1024,
        backup_count: int = 5,
    ) -> logging.Logger:
        """Configure handlers once; later calls return the app logger unchanged.

        File logging falls back to console-only logging when the log file
        cannot be opened.
        """
        if self._is_configured:
            return get_logger()

        if log_to_file:
            self.file_logger = setup_file_logging(
                log_file_path=log_file_path,
                log_level=log_level,
                use_json_format=use_json_format,
                max_bytes=max_bytes,
                backup_count=backup_count,
            )

        if self.file_logger is not None:
            queue_handler = self.file_logger.get_queue_handler()
            queue_handler.addFilter(self.transaction_filter)
            configure_external_loggers(queue_handler)
            logging.getLogger(APP_LOGGER_NAME).setLevel(queue_handler.level)
        else:
            app_logger = setup_structured_logging(log_level, use_json_format)
            for handler in app_logger.handlers:
                handler.addFilter(self.transaction_filter)

        self._is_configured = True
        return get_logger()

    def shutdown(self) -> None:
        """Flush and stop file logging, if it was started."""
        if self.file_logger is not None:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


# Global logging configuration instance
_logging_config = LoggingConfig()


def setup_logging(
    log_to_file: bool = True,
    log_level: str = "INFO",
    log_file_path: str = "logs/app.log",
    log_format: str = "json",
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Set up application logging.

    Args:
        log_to_file: Whether to enable file logging
        log_level: Logging level
        log_file_path: Path to log file
        log_format: "json" for structured records, anything else for plain text
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured main logger instance
    """
    return _logging_config.setup(
        log_to_file=log_to_file,
        log_level=log_level,
        log_file_path=log_file_path,
        use_json_format=log_format.lower() == "json",
        max_bytes=max_bytes,
        backup_count=backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance under the application namespace.

    Args:
        name: Optional logger name; module paths already inside the
            namespace are used as-is

    Returns:
        Logger instance
    """
    if not name:
        return logging.getLogger(APP_LOGGER_NAME)
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def shutdown_logging() -> None:
    """Shutdown logging gracefully."""
    _logging_config.shutdown()
