"""Custom exception classes for FinFlow."""


class FinFlowError(Exception):
    """Base exception for FinFlow."""
    pass


class ConfigError(FinFlowError):
    """Configuration-related errors."""
    pass


class LLMError(FinFlowError):
    """Gemini request errors."""
    pass


class StorageError(FinFlowError):
    """Persistence layer errors."""
    pass


class WorkflowError(FinFlowError):
    """Commit workflow used out of order."""
    pass
