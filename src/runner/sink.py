"""
Cue Status Output.

Human-facing status lines of the watch loop.
Requires Python 3.11+.
"""

from datetime import datetime
from pathlib import Path
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from runner.command import Command
from watcher.events import WatchError

CUE = "[green]\\[cue][/green]"
ERROR = "[red]Error:[/red]"


def printable(value: object) -> str:
    """
    Text safe to write to a UTF-8 stream, escaped for rich markup.

    File names that are not valid UTF-8 decode to lone surrogates, which
    a strict encoder refuses; they are shown as backslash escapes instead.
    """
    text = str(value).encode("utf-8", "backslashreplace").decode("utf-8")
    return escape(text)


class StatusSink(Protocol):
    """Receives status events from setup and from the run supervisor."""

    def checking_paths(self) -> None: ...

    def path_ok(self, path: Path) -> None: ...

    def checking_command(self) -> None: ...

    def command_ok(self, executable: str) -> None: ...

    def watching_started(self, command: Command) -> None: ...

    def changed(self, path: Path | str, at: datetime) -> None: ...

    def separator(self) -> None: ...

    def clear(self) -> None: ...

    def watch_error(self, error: WatchError) -> None: ...

    def spawn_error(self, error: Exception) -> None: ...

    def error(self, message: str) -> None: ...


class TerminalSink:
    """
    Renders status events with rich.

    Quiet mode hides status lines but never errors. Clearing the screen
    is a terminal action rather than status text and happens regardless.
    """

    def __init__(
        self,
        quiet: bool = False,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.quiet = quiet
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.err_console = err_console or Console(stderr=True, highlight=False, soft_wrap=True)

    def _status(self, markup: str) -> None:
        if not self.quiet:
            self.console.print(markup)

    def checking_paths(self) -> None:
        self._status(f"{CUE} checking paths...")

    def path_ok(self, path: Path) -> None:
        self._status(f"  [cyan]{printable(path)}[/cyan] [green]exists[/green]")

    def checking_command(self) -> None:
        self._status(f"{CUE} checking command...")

    def command_ok(self, executable: str) -> None:
        self._status(f"  '{printable(executable)}' [green]found[/green]")

    def watching_started(self, command: Command) -> None:
        self._status(f"{CUE} watching - will run '{printable(command)}' on changes")

    def changed(self, path: Path | str, at: datetime) -> None:
        self._status(
            f"{CUE} [cyan]{printable(path)}[/cyan] changed at {at.strftime('%H:%M:%S')}"
        )

    def separator(self) -> None:
        self._status("_" * max(self.console.width // 2, 1))

    def clear(self) -> None:
        self.console.clear()

    def watch_error(self, error: WatchError) -> None:
        self.err_console.print(f"{ERROR} watch error: {printable(error)}")

    def spawn_error(self, error: Exception) -> None:
        self.err_console.print(f"{ERROR} {printable(error)}")

    def error(self, message: str) -> None:
        self.err_console.print(f"{ERROR} {printable(message)}")
