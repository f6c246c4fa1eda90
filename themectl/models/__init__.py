"""Data models for the theme CLI.

This package contains Pydantic models for the Shopify entities the
CLI reads from `shopify theme list --json`.
"""

from .theme import Theme, ThemeRole

__all__ = [
    "Theme",
    "ThemeRole",
]
