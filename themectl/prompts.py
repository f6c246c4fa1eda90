"""Interactive prompts.

Workflows only see the ``Prompter`` protocol, so tests can answer prompts
without a terminal. ``RichPrompter`` is the real implementation.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt

from .exceptions import PromptCancelled


@dataclass(frozen=True)
class Choice:
    """One entry of a selection menu."""

    label: str
    value: Any
    hint: Optional[str] = None


class Prompter(Protocol):
    """Capability to ask the user questions."""

    def select(self, message: str, choices: Sequence[Choice]) -> Any:
        """Ask for one of ``choices`` and return its value."""
        ...

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question."""
        ...


class RichPrompter:
    """Prompts on the terminal using rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def select(self, message: str, choices: Sequence[Choice]) -> Any:
        """Show a numbered menu and return the value of the picked entry.

        There is no default; the user must pick a number.

        Raises:
            ValueError: If ``choices`` is empty
            PromptCancelled: On Ctrl+C or end of input
        """
        if not choices:
            raise ValueError("Cannot select from an empty list")

        self.console.print(f"[cyan]? {message}[/cyan]")
        for number, choice in enumerate(choices, start=1):
            hint = f" [dim]({escape(choice.hint)})[/dim]" if choice.hint else ""
            self.console.print(f"  [bold]{number:>2}[/bold]. {escape(choice.label)}{hint}")

        try:
            answer = IntPrompt.ask(
                "  Enter number",
                console=self.console,
                choices=[str(number) for number in range(1, len(choices) + 1)],
                show_choices=False,
            )
        except (KeyboardInterrupt, EOFError):
            raise PromptCancelled("Selection cancelled")

        return choices[answer - 1].value

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question.

        Raises:
            PromptCancelled: On Ctrl+C or end of input
        """
        try:
            return Confirm.ask(f"[cyan]? {message}[/cyan]", console=self.console, default=default)
        except (KeyboardInterrupt, EOFError):
            raise PromptCancelled("Confirmation cancelled")
