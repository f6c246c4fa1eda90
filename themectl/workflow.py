"""Safe theme workflows.

Each workflow is a fixed sequence of steps:

    load config -> fetch themes -> identify live -> present choices
    -> select -> verify -> confirm -> (sync -> dev server | push)

Steps raise ``ThemeCtlError`` subclasses; ``run()`` turns them into a
``WorkflowResult`` so only the CLI entry point decides the exit status.
"""

from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict
from rich.markup import escape

from .config import StoreCredentials, load_config
from .directory import ThemeDirectory
from .exceptions import (
    ErrorKind,
    format_error_for_user,
    NoEligibleThemesError,
    PromptCancelled,
    ThemeCtlError,
    ThemeFetchError,
)
from .models.theme import Theme
from .prompts import Choice, Prompter
from .render import Display, OutputFormatter
from .safety import verify_target
from .shopify import CONTENT_FILES, ServeResult, ShopifyCLI, SyncSource

CliFactory = Callable[..., ShopifyCLI]
ConfigLoader = Callable[[], StoreCredentials]


class WorkflowStep(str, Enum):
    """Steps of the theme workflows, in execution order."""

    LOAD_CONFIG = "load_config"
    FETCH_THEMES = "fetch_themes"
    IDENTIFY_LIVE = "identify_live"
    PRESENT_CHOICES = "present_choices"
    SELECT_CANDIDATE = "select_candidate"
    VERIFY_ELIGIBILITY = "verify_eligibility"
    CONFIRM_PROCEED = "confirm_proceed"
    CHOOSE_SYNC_SOURCE = "choose_sync_source"
    PERFORM_SYNC = "perform_sync"
    START_DEV_SERVER = "start_dev_server"
    PUSH_THEME = "push_theme"
    RENDER_LIST = "render_list"


class Outcome(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class WorkflowResult(BaseModel):
    """Outcome of a workflow run."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    step: WorkflowStep
    message: str = ""
    kind: Optional[ErrorKind] = None
    hint: Optional[str] = None
    theme: Optional[Theme] = None

    @classmethod
    def completed(cls, step: WorkflowStep, message: str = "", theme: Optional[Theme] = None) -> "WorkflowResult":
        return cls(outcome=Outcome.COMPLETED, step=step, message=message, theme=theme)

    @classmethod
    def cancelled(cls, step: WorkflowStep, message: str = "Aborted by user") -> "WorkflowResult":
        return cls(outcome=Outcome.CANCELLED, step=step, message=message)

    @classmethod
    def failed(cls, step: WorkflowStep, error: ThemeCtlError) -> "WorkflowResult":
        return cls(
            outcome=Outcome.FAILED,
            step=step,
            message=format_error_for_user(error),
            kind=error.kind,
            hint=error.hint,
        )

    @property
    def ok(self) -> bool:
        return self.outcome != Outcome.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


class ThemeWorkflow:
    """Shared steps: config, fetch, live lookup, selection and verification."""

    title = "SHOPIFY THEME"
    subtitle: Optional[str] = None
    banner_style = "magenta"

    def __init__(
        self,
        prompter: Prompter,
        display: Optional[Display] = None,
        config_loader: ConfigLoader = load_config,
        cli_factory: CliFactory = ShopifyCLI,
    ) -> None:
        """Initialize the workflow.

        Args:
            prompter: Answers interactive questions
            display: Terminal output. If None, creates a new one.
            config_loader: Returns the store credentials
            cli_factory: Builds the Shopify CLI wrapper from credentials
        """
        self.prompter = prompter
        self.display = display or Display()
        self.config_loader = config_loader
        self.cli_factory = cli_factory

        self.step = WorkflowStep.LOAD_CONFIG
        self.visited: List[WorkflowStep] = []
        self.cli: Optional[ShopifyCLI] = None
        self.live: Optional[Theme] = None

    def _enter(self, step: WorkflowStep) -> None:
        self.step = step
        self.visited.append(step)
        self.display.debug_line(f"step: {step.value}")

    def run(self) -> WorkflowResult:
        """Run the workflow to completion, cancellation or failure."""
        try:
            return self._run()
        except PromptCancelled:
            self.display.console.print()
            self.display.info("Aborted by user")
            return WorkflowResult.cancelled(self.step)
        except KeyboardInterrupt:
            self.display.console.print()
            self.display.info("Operation cancelled by user")
            return WorkflowResult.cancelled(self.step, "Operation cancelled by user")
        except ThemeCtlError as e:
            return WorkflowResult.failed(self.step, e)

    def _run(self) -> WorkflowResult:
        raise NotImplementedError

    def load(self) -> StoreCredentials:
        self._enter(WorkflowStep.LOAD_CONFIG)
        credentials = self.config_loader()
        self.cli = self.cli_factory(
            credentials,
            console=self.display.console,
            debug=self.display.debug,
        )
        self.display.banner(self.title, credentials.store, self.subtitle, style=self.banner_style)
        self.display.debug_line(f"environment: {credentials.environment}")
        return credentials

    def fetch(self) -> ThemeDirectory:
        self._enter(WorkflowStep.FETCH_THEMES)
        try:
            with self.display.spinner("Fetching themes from store..."):
                themes = self.cli.list_themes()
        except ThemeFetchError:
            self.display.error("Failed to fetch themes")
            raise
        self.display.success("Themes loaded")
        return ThemeDirectory(themes)

    def identify_live(self, directory: ThemeDirectory) -> Theme:
        self._enter(WorkflowStep.IDENTIFY_LIVE)
        self.live = directory.live
        self.display.live_theme(self.live)
        return self.live

    def present_choices(self, directory: ThemeDirectory) -> List[Theme]:
        self._enter(WorkflowStep.PRESENT_CHOICES)
        choices = directory.choices()
        if not choices:
            raise NoEligibleThemesError(
                "No development themes found!",
                hint="Create a new theme in Shopify admin or use: shopify theme duplicate --live",
            )
        return choices

    def select(self, choices: List[Theme], message: str = "Select a theme to develop:") -> Theme:
        self._enter(WorkflowStep.SELECT_CANDIDATE)
        return self.prompter.select(
            message,
            [Choice(label=theme.name, value=theme, hint=f"ID: {theme.id}") for theme in choices],
        )

    def verify(self, candidate: Theme, live: Theme) -> Theme:
        self._enter(WorkflowStep.VERIFY_ELIGIBILITY)
        self.display.safety_summary(candidate, live)
        verify_target(candidate, live)
        self.display.success("Target is [bold]NOT[/bold] the live theme")
        self.display.console.print()
        return candidate

    def confirm(self, message: str) -> bool:
        self._enter(WorkflowStep.CONFIRM_PROCEED)
        return self.prompter.confirm(message, default=True)

    def select_target(self, message: str = "Select a theme to develop:") -> Theme:
        """Run the shared front half and return the verified target theme."""
        self.load()
        directory = self.fetch()
        live = self.identify_live(directory)
        choices = self.present_choices(directory)
        candidate = self.select(choices, message)
        return self.verify(candidate, live)


class DevWorkflow(ThemeWorkflow):
    """Pick a development theme, optionally sync content, run ``theme dev``."""

    title = "SHOPIFY THEME DEV"
    subtitle = "Safe development workflow"

    def _run(self) -> WorkflowResult:
        target = self.select_target()

        if not self.confirm("Proceed with development?"):
            self.display.info("Aborted by user")
            return WorkflowResult.cancelled(self.step)

        source = self.choose_sync_source(target)
        self.sync(source, target)
        return self.serve(target)

    def choose_sync_source(self, target: Theme) -> SyncSource:
        self._enter(WorkflowStep.CHOOSE_SYNC_SOURCE)
        self.display.console.print()
        return self.prompter.select(
            "How would you like to sync content?",
            [
                Choice(label="Pull from live theme", value=SyncSource.LIVE, hint=self.live.name),
                Choice(label="Pull from selected theme", value=SyncSource.SELECTED, hint=target.name),
                Choice(label="Skip pull (use local content)", value=SyncSource.SKIP),
            ],
        )

    def sync(self, source: SyncSource, target: Theme) -> bool:
        """Pull content from ``source``. Failures only produce a warning.

        Returns:
            True if content was pulled successfully
        """
        if source == SyncSource.SKIP:
            self.display.info("Skipping content sync, using local content")
            return False

        self._enter(WorkflowStep.PERFORM_SYNC)
        is_live = source == SyncSource.LIVE
        source_theme = self.live if is_live else target

        self.display.section(
            f"SYNCING CONTENT FROM {'LIVE' if is_live else 'SELECTED'} THEME",
            style="bold blue",
        )
        self.display.info(f"Source: {escape(source_theme.name)}")
        self.display.info(f"Pulling: {', '.join(CONTENT_FILES)}")
        self.display.console.print()

        try:
            self.cli.pull_content(source, None if is_live else target)
        except ThemeCtlError as e:
            if e.fatal:
                raise
            self.display.console.print()
            self.display.warning("Content sync had issues (may be partial)")
            self.display.warning(escape(e.message))
            return False

        self.display.console.print()
        self.display.success(f"Content synced from {escape(source_theme.name)}")
        return True

    def serve(self, target: Theme) -> WorkflowResult:
        self._enter(WorkflowStep.START_DEV_SERVER)
        self.display.section("STARTING DEV SERVER", style="bold green")
        self.display.info(f"Theme: {escape(target.name)} ({target.id})")
        self.display.info("Press Ctrl+C to stop")
        self.display.console.print()

        result = self.cli.serve(target)

        message = "Dev server stopped" if result == ServeResult.STOPPED else "Dev server exited"
        self.display.console.print()
        self.display.info(message)
        return WorkflowResult.completed(self.step, message, theme=target)


class PushWorkflow(ThemeWorkflow):
    """Pick a development theme and push the working directory to it."""

    title = "SHOPIFY THEME PUSH"
    subtitle = "Safe push workflow"
    banner_style = "yellow"

    def _run(self) -> WorkflowResult:
        target = self.select_target("Select a theme to push to:")

        if not self.confirm(f"Push local files to {escape(target.name)}?"):
            self.display.info("Aborted by user")
            return WorkflowResult.cancelled(self.step)

        self._enter(WorkflowStep.PUSH_THEME)

        self.display.section("PUSHING THEME", style="bold yellow")
        self.display.info(f"Theme: {escape(target.name)} ({target.id})")
        self.display.console.print()

        self.cli.push(target)

        self.display.console.print()
        self.display.success(f"Pushed to {escape(target.name)}")
        return WorkflowResult.completed(self.step, f"Pushed to {target.name}", theme=target)


class ListWorkflow(ThemeWorkflow):
    """Fetch and print every theme, live first, then newest to oldest."""

    title = "SHOPIFY THEME LIST"
    banner_style = "white"

    def __init__(
        self,
        formatter: Optional[OutputFormatter] = None,
        output_format: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(prompter=None, **kwargs)
        self.formatter = formatter or OutputFormatter()
        self.output_format = output_format

    def _run(self) -> WorkflowResult:
        self.load()
        directory = self.fetch()

        self._enter(WorkflowStep.RENDER_LIST)
        self.display.console.print()
        self.formatter.render(directory.sorted(), format=self.output_format)
        return WorkflowResult.completed(self.step, f"{len(directory)} themes")
