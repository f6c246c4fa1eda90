"""Output rendering and formatting utilities.

This module provides the terminal display used by the workflows (banners,
status lines, the protected live theme) and the formatter behind
``themectl list``, which renders themes as a table, JSON or YAML.
"""

import json
import os
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import yaml
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import OUTPUT_FORMAT_ENV
from .exceptions import ThemeCtlError
from .models.theme import Theme

FORMATS = ("table", "json", "yaml")


class Display:
    """Status output shared by the workflows."""

    def __init__(self, console: Optional[Console] = None, debug: bool = False) -> None:
        self.console = console or Console()
        self.debug = debug

    def banner(self, title: str, store: str, subtitle: Optional[str] = None, style: str = "magenta") -> None:
        body = f"[bold white]{title}[/bold white]"
        if subtitle:
            body += f"\n[dim]{subtitle}[/dim]"
        self.console.print()
        self.console.print(Panel(body, border_style=f"bold {style}", box=box.DOUBLE, expand=False, padding=(0, 3)))
        self.console.print(f"  [dim]Store: {escape(store)}[/dim]")
        self.console.print()

    def divider(self) -> None:
        self.console.print("  [dim]" + "─" * 41 + "[/dim]")

    def section(self, title: str, style: str = "bold") -> None:
        self.console.print()
        self.divider()
        self.console.print(f"  [{style}]{title}[/{style}]")
        self.divider()
        self.console.print()

    def success(self, message: str) -> None:
        self.console.print(f"  [green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"  [yellow]⚠[/yellow] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"  [red]✗[/red] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"  [blue]ℹ[/blue] {message}")

    def debug_line(self, message: str) -> None:
        if self.debug:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    @contextmanager
    def spinner(self, description: str) -> Iterator[None]:
        """Show a transient spinner while the block runs."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            progress.add_task(description, total=None)
            yield

    def live_theme(self, live: Theme) -> None:
        """Show the protected live theme."""
        self.console.print()
        self.divider()
        self.console.print("  [bold red]LIVE THEME (protected):[/bold red]")
        self.console.print(f"  [red]  {escape(live.name)}[/red]")
        self.console.print(f"  [red]  ID: {live.id}[/red]")
        self.divider()
        self.console.print()

    def safety_summary(self, candidate: Theme, live: Theme) -> None:
        """Show target and live theme side by side before the safety check."""
        self.section("SAFETY VERIFICATION", style="bold yellow")
        self.console.print(f"  Target theme: [cyan]{escape(candidate.name)}[/cyan]")
        self.console.print(f"  Target ID:    [cyan]{candidate.id}[/cyan]")
        self.console.print()
        self.console.print(f"  Live theme:   [red]{escape(live.name)}[/red]")
        self.console.print(f"  Live ID:      [red]{live.id}[/red]")
        self.console.print()

    def failure(self, message: str, hint: Optional[str] = None) -> None:
        self.error(escape(message))
        if hint:
            self.console.print()
            for line in hint.splitlines():
                self.console.print(f"  [dim]{escape(line)}[/dim]" if line else "")
            self.console.print()


class OutputFormatter:
    """Renders theme listings as a table, JSON or YAML."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize output formatter.

        Args:
            console: Rich console instance. If None, creates a new one.
        """
        self.console = console or Console()

    def determine_format(self, format_override: Optional[str] = None) -> str:
        """Determine the output format to use.

        Args:
            format_override: Explicit format override

        Returns:
            Format name (table, json, yaml)
        """
        if format_override:
            return format_override.lower()

        env_format = os.environ.get(OUTPUT_FORMAT_ENV)
        if env_format:
            return env_format.lower()

        # Auto-detect based on terminal
        if sys.stdout.isatty():
            return "table"
        else:
            return "json"

    def render(self, themes: Sequence[Theme], format: Optional[str] = None) -> None:
        """Render themes in the requested format.

        Raises:
            ThemeCtlError: If the format is unknown
        """
        format_name = self.determine_format(format)

        if format_name == "table":
            self.render_table(themes)
        elif format_name == "json":
            self.render_json(themes)
        elif format_name == "yaml":
            self.render_yaml(themes)
        else:
            raise ThemeCtlError(
                f"Unknown output format: {format_name}",
                hint=f"Set {OUTPUT_FORMAT_ENV} to one of: {', '.join(FORMATS)}",
            )

    def render_table(self, themes: Sequence[Theme]) -> None:
        if not themes:
            self.console.print("[dim]No themes to display[/dim]")
            return

        table = Table(box=box.SIMPLE, show_header=True, header_style="dim")
        table.add_column("Role")
        table.add_column("Name", overflow="fold")
        table.add_column("ID", justify="right", style="dim")

        for theme in themes:
            if theme.is_live:
                table.add_row("[bold red]LIVE[/bold red]", f"[bold red]{escape(theme.name)}[/bold red]", str(theme.id))
            else:
                table.add_row(f"[dim]{escape(theme.role)}[/dim]", escape(theme.name), str(theme.id))

        self.console.print(table)
        self.console.print(f"  [dim]Total:[/dim] {len(themes)} themes")
        self.console.print("  [dim]Sorted:[/dim] Live first, then newest to oldest")
        self.console.print()

    def render_json(self, themes: Sequence[Theme]) -> None:
        print(json.dumps(self._rows(themes), indent=2, ensure_ascii=False))

    def render_yaml(self, themes: Sequence[Theme]) -> None:
        print(yaml.safe_dump(self._rows(themes), default_flow_style=False, allow_unicode=True, sort_keys=False), end="")

    def _rows(self, themes: Sequence[Theme]) -> List[Dict[str, Any]]:
        return [theme.to_row() for theme in themes]
