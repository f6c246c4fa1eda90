"""Shopify theme CLI package.

A command-line wrapper around the Shopify CLI that lets developers pick a
non-live theme, sync content into the working copy and start the dev server
without ever touching the live theme.
"""

__version__ = "0.1.0"
__description__ = "Safe development workflow for Shopify themes"

# Re-export main classes for convenience
from .config import StoreCredentials, load_config
from .directory import ThemeDirectory, identify_live, sort_for_display, development_themes
from .safety import is_eligible, verify_target
from .shopify import ShopifyCLI, SyncSource, ServeResult
from .models import Theme, ThemeRole
from .workflow import DevWorkflow, PushWorkflow, ListWorkflow, WorkflowResult, WorkflowStep, Outcome
from .exceptions import (
    ThemeCtlError,
    ErrorKind,
    ConfigError,
    ConfigNotFoundError,
    ConfigInvalidError,
    ConfigIncompleteError,
    ThemeFetchError,
    NoLiveThemeError,
    NoEligibleThemesError,
    SafetyViolationError,
    SyncError,
    DevServerError,
    PushError,
    PromptCancelled,
)

__all__ = [
    "__version__",
    "__description__",
    "StoreCredentials",
    "load_config",
    "ThemeDirectory",
    "identify_live",
    "sort_for_display",
    "development_themes",
    "is_eligible",
    "verify_target",
    "ShopifyCLI",
    "SyncSource",
    "ServeResult",
    "Theme",
    "ThemeRole",
    "DevWorkflow",
    "PushWorkflow",
    "ListWorkflow",
    "WorkflowResult",
    "WorkflowStep",
    "Outcome",
    "ThemeCtlError",
    "ErrorKind",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigInvalidError",
    "ConfigIncompleteError",
    "ThemeFetchError",
    "NoLiveThemeError",
    "NoEligibleThemesError",
    "SafetyViolationError",
    "SyncError",
    "DevServerError",
    "PushError",
    "PromptCancelled",
]
