"""Main Typer application for the theme CLI.

This module contains the Typer app, the ``dev``, ``push``, ``list`` and
``help`` commands, and the single place where a workflow result becomes a
process exit status.
"""

import functools
import sys
from typing import Optional

import click
import typer
from rich.console import Console
from rich.markup import escape
from rich.traceback import install
from typer.core import TyperGroup

from . import __version__
from .config import debug_from_environment
from .exceptions import ThemeCtlError, format_error_for_user
from .prompts import RichPrompter
from .render import Display, OutputFormatter
from .workflow import DevWorkflow, ListWorkflow, Outcome, PushWorkflow, WorkflowResult

# Install rich traceback handler for better error display
install()

console = Console()


class ThemeCtlGroup(TyperGroup):
    """Command group that prints help text for unknown commands and options."""

    def unknown(self, ctx: click.Context, name: str) -> None:
        console.print()
        console.print(f"  [red]Unknown command: {escape(name)}[/red]")
        typer.echo(ctx.get_help())
        ctx.exit(1)

    def parse_args(self, ctx: click.Context, args):
        try:
            return super().parse_args(ctx, args)
        except click.NoSuchOption as e:
            self.unknown(ctx, e.option_name)

    def resolve_command(self, ctx: click.Context, args):
        cmd_name = args[0] if args else None
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            self.unknown(ctx, cmd_name)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="themectl",
    cls=ThemeCtlGroup,
    help="Shopify Theme CLI - Safe Development Workflow",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"themectl {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Shopify Theme CLI - Safe Development Workflow.

    Never lets you develop against or push to the live theme.

    Requirements:
        - shopify.theme.toml in current directory
        - Shopify CLI installed (shopify theme commands)

    Examples:
        # Start development server (syncs content first)
        themectl dev

        # Push theme to store (with safety checks)
        themectl push

        # List all themes in store
        themectl list
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug or debug_from_environment()
    ctx.obj["console"] = console

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)

    if ctx.obj["debug"]:
        console.print("[dim]Debug mode enabled[/dim]")


def finish(result: WorkflowResult, display: Display) -> None:
    """Turn a workflow result into the process exit status."""
    if result.outcome == Outcome.FAILED:
        display.failure(result.message, result.hint)
        if display.debug:
            display.debug_line(f"failed at step: {result.step.value} ({result.kind.value if result.kind else 'unknown'})")
        raise typer.Exit(1)

    raise typer.Exit(0)


def handle_exceptions(func):
    """Decorator to handle exceptions that escape a workflow."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ThemeCtlError as e:
            ctx = typer.get_current_context()
            debug = ctx.obj.get("debug", False) if ctx.obj else False
            console.print(f"  [red]✗[/red] {escape(format_error_for_user(e, debug))}")
            if e.hint:
                console.print(f"  [dim]{escape(e.hint)}[/dim]")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(0)
        except typer.Exit:
            raise
        except Exception as e:
            ctx = typer.get_current_context()
            debug = ctx.obj.get("debug", False) if ctx.obj else False

            if debug:
                console.print_exception()
            else:
                console.print(f"  [red]✗[/red] Unexpected error: {escape(str(e))}")
                console.print("[dim]Use --debug for more details[/dim]")
            raise typer.Exit(1)
    return wrapper


@app.command()
@handle_exceptions
def dev(ctx: typer.Context) -> None:
    """Start development server (syncs content from live first)."""
    display = Display(console, debug=ctx.obj["debug"])
    workflow = DevWorkflow(prompter=RichPrompter(console), display=display)
    finish(workflow.run(), display)


@app.command()
@handle_exceptions
def push(ctx: typer.Context) -> None:
    """Push theme to store (with safety checks)."""
    display = Display(console, debug=ctx.obj["debug"])
    workflow = PushWorkflow(prompter=RichPrompter(console), display=display)
    finish(workflow.run(), display)


@app.command("list")
@handle_exceptions
def list_themes(ctx: typer.Context) -> None:
    """List all themes in store."""
    formatter = OutputFormatter(console)
    output_format = formatter.determine_format()

    # Keep stdout clean for machine-readable output
    status_console = console if output_format == "table" else Console(stderr=True)
    display = Display(status_console, debug=ctx.obj["debug"])

    workflow = ListWorkflow(formatter=formatter, output_format=output_format, display=display)
    finish(workflow.run(), display)


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show this help message."""
    typer.echo(ctx.parent.get_help())


def cli():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        # Last resort error handling
        console.print(f"[red]Fatal error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    cli()
