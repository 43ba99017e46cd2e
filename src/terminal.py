"""Terminal I/O for the menu loop, built on click.

Menu options are Choice(tag, label) pairs; choose() returns the tag of the
selected option, so callers never inspect display text.
"""
import sys
import time
from typing import Any, Iterable, NamedTuple, Optional, Sequence, Tuple

import click

from models import Task
from theme import PRIMARY, STATE_MARKERS, color, echo_color, state_color, state_label

# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home)
_CLEAR_SEQUENCE = "\033[3J\033[H\033[2J\033[H"


class Choice(NamedTuple):
    tag: Any
    label: str


class TerminalUI:
    def __init__(self, pause_seconds: float = 2.0, clear_screen: bool = True):
        self.pause_seconds = pause_seconds
        self.clear_screen = clear_screen

    # -------------------- output --------------------
    def echo(self, message: str = "") -> None:
        click.echo(message, color=echo_color())

    def heading(self, message: str) -> None:
        self.echo(color(message, fg=PRIMARY, bold=True))

    def info(self, message: str) -> None:
        self.echo(color(message, dim=True))

    def success(self, message: str) -> None:
        self.echo(color(message, fg="green"))

    def warning(self, message: str) -> None:
        self.echo(color(message, fg="yellow"))

    def error(self, message: str) -> None:
        click.echo(color(message, fg="red"), err=True, color=echo_color())

    def clear(self) -> None:
        if self.clear_screen and sys.stdout.isatty():
            click.echo(_CLEAR_SEQUENCE, nl=False)

    def show_tasks(self, rows: Iterable[Tuple[int, Task]]) -> None:
        for number, task in rows:
            marker = STATE_MARKERS[task.state]
            label = f"({state_label(task.state)})"
            self.echo(
                color(f"{number:>3}.", fg=PRIMARY, bold=True) + " "
                + color(f"{marker} {task.description} ", fg=state_color(task.state))
                + color(label, dim=True)
            )

    # -------------------- input --------------------
    def prompt_text(self, label: str) -> str:
        return click.prompt(label, default="", show_default=False, type=str)

    def prompt_int(self, label: str) -> Optional[int]:
        """Return the parsed integer, or None when the reply is not a number."""
        raw = click.prompt(label, default="", show_default=False, type=str).strip()
        try:
            return int(raw)
        except ValueError:
            return None

    def choose(self, title: str, choices: Sequence[Choice]) -> Any:
        """Number the choices, ask until a valid one is picked, return its tag."""
        if not choices:
            raise ValueError("choose() needs at least one choice")
        self.echo(color(title, fg="yellow", bold=True))
        for number, choice in enumerate(choices, start=1):
            self.echo(f"  {number}. {choice.label}")
        picked = click.prompt(
            "Select",
            type=click.IntRange(1, len(choices)),
            prompt_suffix=": ",
        )
        return choices[picked - 1].tag

    def pause(self) -> None:
        """Wait for a key press; off a TTY wait a fixed delay instead."""
        # click.pause is a no-op unless both streams are terminals
        if sys.stdin.isatty() and sys.stdout.isatty():
            click.pause(info=color("Press any key to continue...", dim=True))
        else:
            time.sleep(self.pause_seconds)
