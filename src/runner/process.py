"""
Cue Child Process Slot.

Owns the single live child process of the supervisor.
Requires Python 3.11+.
"""

import subprocess
from collections.abc import Callable
from typing import Any

from runner.command import Command
from utils.errors import SpawnError
from utils.logger import LoggerMixin

PopenFactory = Callable[[list[str]], Any]


class ChildProcess(LoggerMixin):
    """
    Slot holding at most one spawned process.

    A handle is only ever dropped after the process was killed and
    reaped, or after it exited on its own. The child inherits the
    controlling terminal's stdin, stdout and stderr.
    """

    def __init__(self, command: Command, popen: PopenFactory | None = None) -> None:
        """
        Initialize the slot.

        Args:
            command: Command spawned on every (re)start
            popen: Process factory, subprocess.Popen by default
        """
        self._command = command
        self._popen = popen or subprocess.Popen
        self._proc: Any = None
        self._spawn_count = 0

    @property
    def command(self) -> Command:
        return self._command

    @property
    def pid(self) -> int | None:
        """PID of the current child, if any."""
        return self._proc.pid if self._proc is not None else None

    @property
    def is_alive(self) -> bool:
        """Check if a child is held and has not exited yet."""
        return self._proc is not None and self._proc.poll() is None

    @property
    def spawn_count(self) -> int:
        """Number of successful spawns so far."""
        return self._spawn_count

    def spawn(self) -> None:
        """
        Start the command in the empty slot.

        Raises:
            RuntimeError: If the slot is still occupied
            SpawnError: If the OS cannot start the process
        """
        if self._proc is not None:
            raise RuntimeError("child process slot is occupied")

        try:
            self._proc = self._popen(self._command.argv)
        except OSError as e:
            raise SpawnError(self._command.executable, e.strerror or str(e)) from e

        self._spawn_count += 1
        self.log.debug("child_spawned", pid=self._proc.pid, argv=self._command.argv)

    def terminate(self) -> None:
        """Kill the child and wait until it is reaped. The slot is cleared."""
        proc, self._proc = self._proc, None
        if proc is None:
            return

        try:
            proc.kill()
        except OSError as e:
            # Already exited
            self.log.debug("child_kill_failed", pid=proc.pid, error=str(e))

        try:
            returncode = proc.wait()
        except OSError as e:
            self.log.debug("child_wait_failed", pid=proc.pid, error=str(e))
        else:
            self.log.debug("child_reaped", pid=proc.pid, returncode=returncode)
