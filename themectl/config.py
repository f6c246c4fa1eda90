"""Configuration loading for the theme CLI.

This module reads the store credentials from the ``shopify.theme.toml`` file
that the Shopify CLI itself uses. Only the first ``[environments.<name>]``
section is used:

    [environments.env1]
    store = "your-store.myshopify.com"
    password = "shptka_xxxxx"
"""

import os
import re
import tomllib
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigNotFoundError, ConfigInvalidError, ConfigIncompleteError

CONFIG_FILENAME = "shopify.theme.toml"

CONFIG_TEMPLATE = (
    "[environments.env1]\n"
    'store = "your-store.myshopify.com"\n'
    'password = "shptka_xxxxx"'
)

# Environment variables read by the CLI
SHOPIFY_BIN_ENV = "THEMECTL_SHOPIFY_BIN"
OUTPUT_FORMAT_ENV = "THEMECTL_OUTPUT_FORMAT"
DEBUG_ENV = "THEMECTL_DEBUG"


class StoreCredentials(BaseModel):
    """Credentials for one store environment."""

    store: str = Field(..., description="Store domain, e.g. my-store.myshopify.com")
    password: str = Field(..., repr=False, description="Theme Access password")
    environment: str = Field(..., description="Name of the environment section")

    @field_validator("store", "password")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty")
        return v


SECTION_PATTERN = re.compile(r"^\[environments\.(\w+)\]$")
SETTING_PATTERN = re.compile(r'^(\w+)\s*=\s*"?([^"]*)"?$')


def _parse_lines(content: str) -> Dict[str, Dict[str, str]]:
    """Read environment sections one line at a time.

    Accepts unquoted values and skips lines it does not understand.
    """
    parsed: Dict[str, Dict[str, str]] = {}
    current: Optional[Dict[str, str]] = None

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        section = SECTION_PATTERN.match(line)
        if section:
            current = parsed.setdefault(section.group(1), {})
            continue

        if line.startswith("["):
            current = None
            continue

        setting = SETTING_PATTERN.match(line)
        if current is not None and setting:
            current[setting.group(1)] = setting.group(2)

    return parsed


def parse_environments(content: str) -> Dict[str, Dict[str, str]]:
    """Parse the environment sections of a shopify.theme.toml document.

    Args:
        content: Raw file content

    Returns:
        Mapping of environment name to its string settings, in file order

    Raises:
        ConfigInvalidError: If the content is neither valid TOML nor has any
            section the line parser can read
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        # Malformed TOML: read the sections line by line instead
        parsed = _parse_lines(content)
        if not parsed:
            raise ConfigInvalidError(f"Could not parse {CONFIG_FILENAME}: {e}")
        return parsed

    environments = data.get("environments")
    if not isinstance(environments, dict):
        return {}

    parsed: Dict[str, Dict[str, str]] = {}
    for name, section in environments.items():
        if not isinstance(section, dict):
            continue
        parsed[name] = {
            key: str(value)
            for key, value in section.items()
            if isinstance(value, (str, int, float, bool))
        }
    return parsed


def load_config(
    directory: Optional[Union[str, Path]] = None,
    filename: str = CONFIG_FILENAME,
) -> StoreCredentials:
    """Load store credentials from the first environment section.

    Args:
        directory: Directory holding the config file. Defaults to the cwd.
        filename: Config file name

    Returns:
        Credentials of the first environment

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigInvalidError: If no environment section can be parsed
        ConfigIncompleteError: If store or password is missing
    """
    config_path = Path(directory or os.getcwd()) / filename

    if not config_path.is_file():
        raise ConfigNotFoundError(
            f"{filename} not found!",
            hint=(
                "This file should be in your theme root directory.\n"
                "Create it with the following format:\n\n" + CONFIG_TEMPLATE
            ),
            details={"path": str(config_path)},
        )

    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigInvalidError(f"Could not read {filename}: {e}")

    environments = parse_environments(content)
    if not environments:
        raise ConfigInvalidError(
            f"No environment found in {filename}",
            hint="Add a section such as [environments.env1].",
        )

    env_name = next(iter(environments))
    section = environments[env_name]

    store = section.get("store", "").strip()
    password = section.get("password", "").strip()
    if not store or not password:
        raise ConfigIncompleteError(
            f"Missing store or password in {filename}",
            details={"environment": env_name},
        )

    return StoreCredentials(store=store, password=password, environment=env_name)


def get_shopify_executable() -> str:
    """Shopify CLI executable, overridable through the environment."""
    return os.getenv(SHOPIFY_BIN_ENV) or "shopify"


def debug_from_environment() -> bool:
    return os.getenv(DEBUG_ENV, "").lower() in ("1", "true", "yes")
