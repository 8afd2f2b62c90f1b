"""
Cue Error Types.

Setup failures are fatal and reported before anything is watched or run.
Requires Python 3.11+.
"""

from pathlib import Path


class CueError(Exception):
    """Base class for every error cue reports to the user."""


class PathNotFoundError(CueError):
    """A watch target does not exist."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"'{path}' doesn't exist")


class WatchSetupError(CueError):
    """The OS refused to watch a path."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"failed to watch '{path}': {reason}")


class EmptyCommandError(CueError):
    """The command string contains no words."""

    def __init__(self) -> None:
        super().__init__("empty command")


class CommandSyntaxError(CueError):
    """The command string cannot be split into words."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"failed to parse command: {reason}")


class CommandNotFoundError(CueError):
    """The executable does not resolve on PATH."""

    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(f"command '{executable}' not found")


class SpawnError(CueError):
    """The OS failed to start the child process."""

    def __init__(self, executable: str, reason: str) -> None:
        self.executable = executable
        self.reason = reason
        super().__init__(f"failed to spawn '{executable}': {reason}")
