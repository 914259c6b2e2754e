"""Utility modules."""
from .logger import get_logger, configure_logging, set_action_context, default_data_dir
from .exceptions import (
    FinFlowError,
    ConfigError,
    LLMError,
    StorageError,
    WorkflowError
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_action_context",
    "default_data_dir",
    "FinFlowError",
    "ConfigError",
    "LLMError",
    "StorageError",
    "WorkflowError"
]
