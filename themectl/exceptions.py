"""Exception classes for the theme CLI.

This module defines custom exception classes used throughout the application
for proper error handling and user feedback. Components raise these errors;
only the workflow and the CLI entry point decide how they end the run.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Failure categories reported back to the top-level handler."""

    CONFIG_MISSING = "config_missing"
    CONFIG_INVALID = "config_invalid"
    CONFIG_INCOMPLETE = "config_incomplete"
    FETCH_FAILURE = "fetch_failure"
    NO_LIVE_THEME = "no_live_theme"
    NO_ELIGIBLE_THEMES = "no_eligible_themes"
    SAFETY_VIOLATION = "safety_violation"
    SYNC_FAILURE = "sync_failure"
    SERVER_FAILURE = "server_failure"
    PUSH_FAILURE = "push_failure"
    UNEXPECTED = "unexpected"


class ThemeCtlError(Exception):
    """Base exception class for all theme CLI errors."""

    kind: ErrorKind = ErrorKind.UNEXPECTED
    fatal: bool = True

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            hint: Optional remediation advice shown below the message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}


class ConfigError(ThemeCtlError):
    """Exception raised for configuration-related errors."""
    kind = ErrorKind.CONFIG_INVALID


class ConfigNotFoundError(ConfigError):
    """Raised when shopify.theme.toml is not in the working directory."""
    kind = ErrorKind.CONFIG_MISSING


class ConfigInvalidError(ConfigError):
    """Raised when no environment section can be parsed."""
    kind = ErrorKind.CONFIG_INVALID


class ConfigIncompleteError(ConfigError):
    """Raised when the environment lacks a store or password."""
    kind = ErrorKind.CONFIG_INCOMPLETE


class ThemeFetchError(ThemeCtlError):
    """Exception raised when the theme list cannot be fetched or parsed."""
    kind = ErrorKind.FETCH_FAILURE


class NoLiveThemeError(ThemeCtlError):
    """Exception raised when a fetched theme set has no single live theme."""
    kind = ErrorKind.NO_LIVE_THEME


class NoEligibleThemesError(ThemeCtlError):
    """Exception raised when only the live theme exists."""
    kind = ErrorKind.NO_ELIGIBLE_THEMES


class SafetyViolationError(ThemeCtlError):
    """Exception raised when a selected theme turns out to be the live theme."""

    kind = ErrorKind.SAFETY_VIOLATION

    def __init__(
        self,
        message: str,
        theme_id: Optional[int] = None,
        live_id: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            theme_id: ID of the rejected candidate theme
            live_id: ID of the live theme
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.theme_id = theme_id
        self.live_id = live_id


class CommandError(ThemeCtlError):
    """Base exception for failed Shopify CLI invocations."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            returncode: Exit status of the Shopify CLI process
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.returncode = returncode


class SyncError(CommandError):
    """Exception raised when pulling content fails. Never fatal."""
    kind = ErrorKind.SYNC_FAILURE
    fatal = False


class DevServerError(CommandError):
    """Exception raised when the dev server exits with an error."""
    kind = ErrorKind.SERVER_FAILURE


class PushError(CommandError):
    """Exception raised when pushing the theme fails."""
    kind = ErrorKind.PUSH_FAILURE


class PromptCancelled(ThemeCtlError):
    """Raised when the user interrupts an interactive prompt."""
    fatal = False


def format_error_for_user(error: Exception, debug: bool = False) -> str:
    """Format an error message for user display.

    Args:
        error: The exception to format
        debug: Whether to include debug information

    Returns:
        Formatted error message
    """
    if isinstance(error, SafetyViolationError):
        message = f"BLOCKED: {error.message}"
        if debug and error.theme_id is not None:
            message += f"\nCandidate ID: {error.theme_id}, live ID: {error.live_id}"
        return message

    if isinstance(error, CommandError):
        message = error.message
        if debug and error.returncode is not None:
            message += f"\nExit status: {error.returncode}"
        return message

    if isinstance(error, ThemeCtlError):
        message = error.message
        if debug and error.details:
            message += f"\nDetails: {error.details}"
        return message

    # Default formatting
    if debug:
        return f"Error: {str(error)}\nType: {type(error).__name__}"
    else:
        return f"Error: {str(error)}"
