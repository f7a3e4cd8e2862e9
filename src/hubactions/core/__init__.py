"""Core modules for hubactions - centralized error definitions."""

from hubactions.core.errors import (
    ApprovalError,
    ConfigurationError,
    ExitCode,
    HubActionsError,
    OperationFailedError,
    ProviderError,
    TargetNotFoundError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "HubActionsError",
    "ApprovalError",
    "ConfigurationError",
    "OperationFailedError",
    "ProviderError",
    "TargetNotFoundError",
    "ValidationError",
    "format_error_message",
    "main_with_error_handling",
]
