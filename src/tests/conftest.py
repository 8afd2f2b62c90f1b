"""
Cue Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from runner.command import Command
from watcher.events import WatchError


class FakeClock:
    """Monotonic clock advanced by hand, in milliseconds."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0

    def at(self, ms: float) -> None:
        self.now = ms / 1000.0


class FakeProcess:
    """Stands in for subprocess.Popen."""

    def __init__(self, registry: "ProcessRegistry", argv: list[str]) -> None:
        self.registry = registry
        self.argv = argv
        self.pid = 1000 + len(registry.spawned)
        self.returncode: int | None = None
        self.killed = False

    def poll(self) -> int | None:
        return self.returncode

    def kill(self) -> None:
        if self.returncode is not None:
            raise ProcessLookupError(3, "No such process")
        self.killed = True

    def wait(self) -> int:
        if self.returncode is None:
            self.returncode = -9
        return self.returncode

    def exit(self, code: int = 0) -> None:
        """Let the process finish on its own."""
        self.returncode = code


class ProcessRegistry:
    """Popen factory recording every spawned FakeProcess."""

    def __init__(self) -> None:
        self.spawned: list[FakeProcess] = []
        self.fail_with: OSError | None = None

    def __call__(self, argv: list[str]) -> FakeProcess:
        assert not self.alive, "spawned while another child is still running"
        if self.fail_with is not None:
            raise self.fail_with
        proc = FakeProcess(self, argv)
        self.spawned.append(proc)
        return proc

    @property
    def alive(self) -> list[FakeProcess]:
        return [p for p in self.spawned if p.returncode is None]


class RecordingSink:
    """StatusSink collecting (event, payload) tuples."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def payloads(self, name: str) -> list[object]:
        return [payload for n, payload in self.events if n == name]

    def checking_paths(self) -> None:
        self.events.append(("checking_paths", None))

    def path_ok(self, path: Path) -> None:
        self.events.append(("path_ok", path))

    def checking_command(self) -> None:
        self.events.append(("checking_command", None))

    def command_ok(self, executable: str) -> None:
        self.events.append(("command_ok", executable))

    def watching_started(self, command: Command) -> None:
        self.events.append(("watching_started", command))

    def changed(self, path: Path | str, at: datetime) -> None:
        self.events.append(("changed", path))

    def separator(self) -> None:
        self.events.append(("separator", None))

    def clear(self) -> None:
        self.events.append(("clear", None))

    def watch_error(self, error: WatchError) -> None:
        self.events.append(("watch_error", error))

    def spawn_error(self, error: Exception) -> None:
        self.events.append(("spawn_error", error))

    def error(self, message: str) -> None:
        self.events.append(("error", message))


@pytest.fixture
def clock() -> FakeClock:
    """Hand-driven monotonic clock starting at 0."""
    return FakeClock()


@pytest.fixture
def processes() -> ProcessRegistry:
    """Fake process factory."""
    return ProcessRegistry()


@pytest.fixture
def sink() -> RecordingSink:
    """Sink recording status events."""
    return RecordingSink()


@pytest.fixture
def fixed_time() -> datetime:
    """Wall clock value used for 'changed at' lines."""
    return datetime(2024, 5, 1, 13, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def watch_tree(tmp_path: Path) -> Path:
    """A small directory tree to watch."""
    src = tmp_path / "src"
    nested = src / "pkg" / "deep"
    nested.mkdir(parents=True)
    (src / "main.py").write_text("print('hi')\n")
    (nested / "module.py").write_text("VALUE = 1\n")
    return src
