"""
Cue Run Supervisor.

Restarts a command whenever a watched path changes, never running two
instances at once.
Requires Python 3.11+.
"""

import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from runner.command import Command
from runner.process import ChildProcess, PopenFactory
from runner.sink import StatusSink
from utils.errors import SpawnError
from utils.logger import LoggerMixin
from watcher.events import ChangeEvent, WatchError, WatchItem

DEFAULT_DEBOUNCE_MS = 150
UNKNOWN_PATH = "?"


class SupervisorState(str, Enum):
    """Lifecycle states of the supervisor."""

    IDLE = "idle"
    RUNNING = "running"
    RESTARTING = "restarting"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def display_path(event: ChangeEvent) -> Path | str:
    """
    Canonical form of the first changed path, for display.

    Falls back to the raw path when it cannot be resolved, e.g. because
    it was deleted before the lookup.
    """
    raw = event.first_path
    if raw is None or not str(raw):
        return UNKNOWN_PATH
    try:
        return raw.resolve(strict=True)
    except (OSError, RuntimeError):
        return raw


class RunSupervisor(LoggerMixin):
    """
    Drives one logical execution of a command.

    All state (the debounce timestamp and the child slot) is owned here
    and only mutated from handle(), which runs on the single consumer
    thread. Debouncing is a trailing-edge filter: an event closer than
    the debounce interval to the last accepted one is dropped, and is
    never replayed later.
    """

    def __init__(
        self,
        command: Command,
        sink: StatusSink,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        no_clear: bool = False,
        popen: PopenFactory | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize the supervisor.

        Args:
            command: Resolved command to (re)run
            sink: Receives status events
            debounce_ms: Minimum milliseconds between two restarts, 0 disables
            no_clear: Print a separator instead of clearing before a restart
            popen: Process factory, subprocess.Popen by default
            clock: Monotonic clock in seconds used for debouncing
            wall_clock: Clock for the "changed at" timestamp
        """
        if debounce_ms < 0:
            raise ValueError("debounce_ms must not be negative")

        self._command = command
        self._sink = sink
        self._debounce = debounce_ms / 1000.0
        self._no_clear = no_clear
        self._child = ChildProcess(command, popen=popen)
        self._clock = clock
        self._wall_clock = wall_clock

        self._state = SupervisorState.IDLE
        self._last_run: float | None = None
        self._restarts = 0

    @property
    def state(self) -> SupervisorState:
        return self._state

    @property
    def child(self) -> ChildProcess:
        return self._child

    @property
    def restarts(self) -> int:
        """Number of accepted changes so far."""
        return self._restarts

    def start(self) -> None:
        """
        Run the command for the first time.

        Raises:
            SpawnError: If the initial spawn fails
        """
        if self._state is not SupervisorState.IDLE:
            return

        self._sink.watching_started(self._command)
        self._last_run = self._clock()
        self._child.spawn()
        self._state = SupervisorState.RUNNING

        self.log.info("supervisor_started", command=str(self._command), pid=self._child.pid)

    def handle(self, item: WatchItem) -> bool:
        """
        Process one item from the watcher.

        Args:
            item: Change event or watch error

        Returns:
            True if the item caused a restart
        """
        if isinstance(item, WatchError):
            self.log.warning("watch_error", path=str(item.path), error=item.message)
            self._sink.watch_error(item)
            return False

        if not item.is_significant:
            return False

        now = self._clock()
        if self._last_run is not None and now - self._last_run < self._debounce:
            self.log.debug("change_debounced", paths=[str(p) for p in item.paths])
            return False

        self._last_run = now
        self._restart(item)
        return True

    def run(self, events: Iterable[WatchItem]) -> None:
        """
        Start the command and react to events until the stream ends.

        Args:
            events: Watcher output, consumed in order
        """
        self.start()
        for item in events:
            self.handle(item)

    def stop(self) -> None:
        """Kill and reap the child, if any."""
        self._child.terminate()
        self._state = SupervisorState.IDLE
        self.log.info("supervisor_stopped", restarts=self._restarts)

    def _restart(self, event: ChangeEvent) -> None:
        self._state = SupervisorState.RESTARTING
        self._restarts += 1

        self._child.terminate()

        changed = display_path(event)
        if self._no_clear:
            self._sink.separator()
        else:
            self._sink.clear()
        self._sink.changed(changed, self._wall_clock())
        self._sink.separator()

        try:
            self._child.spawn()
        except SpawnError as e:
            # The slot stays empty until the next accepted change
            self.log.error("respawn_failed", error=str(e))
            self._sink.spawn_error(e)

        self._state = SupervisorState.RUNNING
        self.log.info("child_restarted", path=str(changed), pid=self._child.pid)
