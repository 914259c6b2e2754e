"""Logging infrastructure with action context."""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


def default_data_dir() -> Path:
    """Directory holding FinFlow data, config and logs."""
    return Path(os.getenv("FINFLOW_HOME", Path.home() / ".finflow"))


class ActionContextFilter(logging.Filter):
    """Add the current user action to log records."""

    def __init__(self):
        super().__init__()
        self.action: Optional[str] = None

    def filter(self, record):
        """Add action to record."""
        record.action = self.action or "idle"
        return True


class FinFlowLogger:
    """Centralized logging manager."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        max_file_size_mb: int = 10,
        backup_count: int = 30
    ):
        self.log_dir = log_dir or default_data_dir() / "logs"
        self.log_file = self.log_dir / "finflow.log"
        self.action_filter = ActionContextFilter()

        self.logger = logging.getLogger("finflow")
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [action:%(action)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8"
            )
        except OSError:
            # Read-only home: console logging only
            file_handler = None

        if file_handler is not None:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(self.action_filter)
            self.logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(self.action_filter)
        self.logger.addHandler(console_handler)

    def set_action_context(self, action: Optional[str]):
        """Set current action context for logging."""
        self.action_filter.action = action

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[FinFlowLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = FinFlowLogger(log_level)
    return _logger_instance.get_logger()


def configure_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 30
) -> logging.Logger:
    """Rebuild the global logger with explicit settings."""
    global _logger_instance
    _logger_instance = FinFlowLogger(log_level, log_dir, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def set_action_context(action: Optional[str]):
    """Set action context for logging."""
    if _logger_instance:
        _logger_instance.set_action_context(action)
