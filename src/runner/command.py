"""
Cue Command.

A command line resolved once from a shell-style string.
Requires Python 3.11+.
"""

import shlex
import shutil
from dataclasses import dataclass, field

from utils.errors import CommandNotFoundError, CommandSyntaxError, EmptyCommandError


@dataclass(frozen=True)
class Command:
    """Executable plus ordered arguments."""

    executable: str
    args: tuple[str, ...] = field(default_factory=tuple)
    source: str = ""

    @classmethod
    def parse(cls, run: str) -> "Command":
        """
        Split a command string into words the way a POSIX shell would.

        Args:
            run: Command string, e.g. ``cargo test -- --nocapture``

        Returns:
            Parsed command

        Raises:
            CommandSyntaxError: On unbalanced quotes or a dangling escape
            EmptyCommandError: If the string holds no words
        """
        try:
            words = shlex.split(run)
        except ValueError as e:
            raise CommandSyntaxError(run, str(e)) from e

        if not words:
            raise EmptyCommandError()

        return cls(executable=words[0], args=tuple(words[1:]), source=run)

    @property
    def argv(self) -> list[str]:
        """Argument vector handed to the OS."""
        return [self.executable, *self.args]

    def resolve(self) -> str:
        """
        Locate the executable on PATH.

        Returns:
            Full path of the executable

        Raises:
            CommandNotFoundError: If nothing on PATH matches
        """
        found = shutil.which(self.executable)
        if found is None:
            raise CommandNotFoundError(self.executable)
        return found

    def __str__(self) -> str:
        return self.source or shlex.join(self.argv)
