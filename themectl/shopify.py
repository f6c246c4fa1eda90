"""Shopify CLI wrapper.

This module runs the ``shopify theme`` commands the workflows depend on:
``list`` (parsed as JSON), ``pull`` and ``push`` (pass/fail) and ``dev``
(blocks until the developer stops it). The Shopify CLI is treated as a
black box. There are no timeouts and no retries.
"""

import json
import signal
import subprocess
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .config import StoreCredentials, get_shopify_executable
from .exceptions import (
    ThemeFetchError,
    SyncError,
    DevServerError,
    PushError,
)
from .models.theme import Theme

# Files to sync (content only, not schema)
CONTENT_FILES = [
    "config/settings_data.json",
    "locales/*",
    "templates/*.json",
    "templates/**/*.json",
]

# Files that must never be pulled over the local copy
EXCLUDED_FILES = [
    "config/settings_schema.json",
]

# Exit statuses meaning the child was stopped by Ctrl+C
INTERRUPT_RETURNCODES = (-signal.SIGINT, 128 + signal.SIGINT)


class ServeResult(str, Enum):
    """How a dev server session ended."""

    EXITED = "exited"
    STOPPED = "stopped"


class SyncSource(str, Enum):
    """Where content is pulled from before the dev server starts."""

    LIVE = "live"
    SELECTED = "selected"
    SKIP = "skip"


def content_patterns() -> List[str]:
    """Content globs passed to ``theme pull --only``."""
    return [pattern for pattern in CONTENT_FILES if pattern not in EXCLUDED_FILES]


def redact(args: Sequence[str]) -> List[str]:
    """Copy of ``args`` with the value after ``--password`` masked."""
    redacted = list(args)
    for index, arg in enumerate(redacted[:-1]):
        if arg == "--password":
            redacted[index + 1] = "***"
    return redacted


class ShopifyCLI:
    """Runs ``shopify theme`` commands for one store."""

    def __init__(
        self,
        credentials: StoreCredentials,
        executable: Optional[str] = None,
        console: Optional[Console] = None,
        debug: bool = False,
    ) -> None:
        """Initialize the wrapper.

        Args:
            credentials: Store and password to pass to every command
            executable: Shopify CLI executable. Defaults to ``shopify``
                or ``$THEMECTL_SHOPIFY_BIN``.
            console: Rich console used for debug output
            debug: Whether to echo command lines (password redacted)
        """
        self.credentials = credentials
        self.executable = executable or get_shopify_executable()
        self.console = console or Console()
        self.debug = debug

    def _command(self, subcommand: str, *extra: str) -> List[str]:
        return [
            self.executable,
            "theme", subcommand,
            "--store", self.credentials.store,
            "--password", self.credentials.password,
            *extra,
        ]

    def _echo(self, args: Sequence[str]) -> None:
        if self.debug:
            self.console.print(f"[dim]$ {escape(' '.join(redact(args)))}[/dim]")

    def _scrub(self, text: str) -> str:
        """Remove the password from text that may end up on screen."""
        return text.replace(self.credentials.password, "***")

    def list_themes(self) -> List[Theme]:
        """Fetch all themes of the store.

        Returns:
            Themes in the order the Shopify CLI reported them

        Raises:
            ThemeFetchError: If the command fails or its output is not a theme list
        """
        args = self._command("list", "--json")
        self._echo(args)

        try:
            result = subprocess.run(args, capture_output=True, text=True)
        except FileNotFoundError:
            raise ThemeFetchError(
                f"Shopify CLI not found: '{self.executable}'",
                hint="Install the Shopify CLI (shopify theme commands) and make sure it is on PATH.",
            )
        except OSError as e:
            raise ThemeFetchError(f"Failed to run the Shopify CLI: {e}")

        if result.returncode != 0:
            stderr = self._scrub((result.stderr or "").strip())
            raise ThemeFetchError(
                f"Failed to fetch themes: {stderr or 'shopify theme list exited with an error'}",
                details={"returncode": result.returncode},
            )

        try:
            payload = json.loads(result.stdout)
        except (TypeError, json.JSONDecodeError) as e:
            raise ThemeFetchError(f"Failed to parse theme list: {e}")

        if not isinstance(payload, list):
            raise ThemeFetchError("Failed to parse theme list: expected a JSON array")

        try:
            return [Theme.model_validate(item) for item in payload]
        except ValidationError as e:
            raise ThemeFetchError(
                f"Unexpected theme data from Shopify CLI: {e.error_count()} invalid field(s)",
                details={"errors": e.errors(include_url=False)},
            )

    def pull_content(self, source: SyncSource, theme: Optional[Theme] = None) -> None:
        """Pull content files into the working directory.

        Never deletes local files (``--nodelete``) and never touches the
        settings schema.

        Args:
            source: ``SyncSource.LIVE`` or ``SyncSource.SELECTED``
            theme: Source theme, required for ``SyncSource.SELECTED``

        Raises:
            SyncError: If the pull fails
        """
        extra = ["--nodelete"]
        if source == SyncSource.LIVE:
            extra.append("--live")
        elif source == SyncSource.SELECTED and theme is not None:
            extra.extend(["--theme", str(theme.id)])
        else:
            raise ValueError(f"Cannot pull from {source.value!r} without a theme")

        for pattern in content_patterns():
            extra.extend(["--only", pattern])

        args = self._command("pull", *extra)
        self._echo(args)

        try:
            result = subprocess.run(args)
        except OSError as e:
            raise SyncError(f"Failed to run the Shopify CLI: {e}")

        if result.returncode != 0:
            raise SyncError(
                f"shopify theme pull exited with status {result.returncode}",
                returncode=result.returncode,
            )

    def serve(self, theme: Theme) -> ServeResult:
        """Run ``shopify theme dev`` against ``theme`` until it stops.

        The child shares the terminal. Ctrl+C reaches both processes; the
        wrapper waits for the child to shut down and reports STOPPED.

        Raises:
            DevServerError: If the dev server exits with an error
        """
        args = self._command("dev", "--theme", str(theme.id))
        self._echo(args)

        try:
            process = subprocess.Popen(args)
        except OSError as e:
            raise DevServerError(f"Failed to start the dev server: {e}")

        try:
            returncode = process.wait()
        except KeyboardInterrupt:
            process.wait()
            return ServeResult.STOPPED

        if returncode == 0:
            return ServeResult.EXITED
        if returncode in INTERRUPT_RETURNCODES:
            return ServeResult.STOPPED

        raise DevServerError(
            f"Dev server error: shopify theme dev exited with status {returncode}",
            returncode=returncode,
        )

    def push(self, theme: Theme) -> None:
        """Upload the working directory to ``theme`` without deleting remote files.

        Raises:
            PushError: If the push fails
        """
        args = self._command("push", "--theme", str(theme.id), "--nodelete")
        self._echo(args)

        try:
            result = subprocess.run(args)
        except OSError as e:
            raise PushError(f"Failed to run the Shopify CLI: {e}")

        if result.returncode != 0:
            raise PushError(
                f"shopify theme push exited with status {result.returncode}",
                returncode=result.returncode,
            )
