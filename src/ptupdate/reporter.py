"""Operator-facing output and the confirmation prompt."""

from collections.abc import Callable
from typing import Final

from rich.console import Console
from rich.markup import escape

# Mark for action lines in the console log
ACTION_PREFIX: Final = "=> "


class Reporter:
    """Writes status lines to stdout and diagnostics to stderr.

    Diagnostics are prefixed with the program name, so they can be told apart
    when the updater runs inside a larger script.
    """

    def __init__(
        self,
        program_name: str,
        console: Console | None = None,
        err_console: Console | None = None,
        ask: Callable[[str], str] | None = None,
    ):
        self.program_name = program_name
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.err_console = err_console or Console(stderr=True, highlight=False, soft_wrap=True)
        self._ask = ask

    def info(self, text: str = "") -> None:
        self.console.print(escape(text))

    def action(self, text: str) -> None:
        self.console.print(f"[bold cyan]{ACTION_PREFIX}[/bold cyan]{escape(text)}")

    def success(self, text: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(text)}")

    def error(self, *lines: str) -> None:
        for line in lines:
            self.err_console.print(f"{escape(self.program_name)}: {escape(line)}", style="red")

    def ask(self, prompt: str) -> str:
        if self._ask is not None:
            return self._ask(prompt)
        return self.console.input(prompt, markup=False)

    def confirm(self, question: str) -> bool:
        """Ask a [Y/n] question; an empty answer means yes.

        End of input counts as no.
        """
        try:
            answer = self.ask(f"{question} [Y/n] ")
        except EOFError:
            self.info()
            return False
        return answer.strip().lower() in ("", "y")
