"""
Output formatting with Rich console.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from pawl_plan.config.defaults import LOG_PREFIX

_PREFIX = escape(LOG_PREFIX)

custom_theme = Theme({
    "warning": "yellow",
    "success": "green",
})


class ConsoleOutput:
    """Console output with Rich formatting.

    Warnings go to stderr so stdout only carries the confirmation an
    orchestrator may capture. Messages are never wrapped: a non-terminal
    console is 80 columns wide and callers match on whole lines.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.console = console or Console(theme=custom_theme)
        self.err_console = err_console or Console(theme=custom_theme, stderr=True)
        if console is not None:
            self.console.push_theme(custom_theme)
        if err_console is not None:
            self.err_console.push_theme(custom_theme)

    def print_success(self, text: str):
        """Print success text."""
        self.console.print(
            f"[success]{_PREFIX}[/success] {escape(text)}",
            highlight=False,
            soft_wrap=True,
        )

    def print_warning(self, text: str):
        """Print warning text."""
        self.err_console.print(
            f"[warning]{_PREFIX} Warning:[/warning] {escape(text)}",
            highlight=False,
            soft_wrap=True,
        )
