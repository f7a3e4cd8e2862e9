"""
Unified error handling for hubactions commands.

This module provides standardized error types, exit codes, and
error reporting for all CLI commands.

Exit Codes:
- 0: Success
- 1: Failure (one or more targets failed, approval did not complete)
- 10: Configuration error
- 11: Provider error (remote API failure)
- 12: Validation error
- 13: Named target not found
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    FAILURE = 1
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    NOT_FOUND = 13
    UNKNOWN_ERROR = 127


class HubActionsError(Exception):
    """Base exception for hubactions errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(HubActionsError):
    """Raised for missing or invalid inputs."""

    exit_code = ExitCode.CONFIG_ERROR


class ProviderError(HubActionsError):
    """Raised when the remote API fails in a way that aborts the run."""

    exit_code = ExitCode.PROVIDER_ERROR


class ValidationError(HubActionsError):
    """Raised for validation failures (e.g. version not bumped)."""

    exit_code = ExitCode.VALIDATION_ERROR


class TargetNotFoundError(HubActionsError):
    """Raised when a named target is absent from the discovered list."""

    exit_code = ExitCode.NOT_FOUND


class ApprovalError(HubActionsError):
    """Raised when a collection version could not be approved."""

    exit_code = ExitCode.FAILURE


class OperationFailedError(HubActionsError):
    """Raised when one or more operations ended in a terminal failure."""

    exit_code = ExitCode.FAILURE


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Catches exceptions and converts them to appropriate exit codes with
    consistent error reporting.

    Usage:
        @main_with_error_handling()
        def my_command() -> int:
            # command implementation
            return 0

    Exit codes:
        - HubActionsError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except HubActionsError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                from hubactions.cli.ux import error as print_error

                print_error(format_error_message(e))
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: HubActionsError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
