"""
Cue Path Watcher.

Recursive file system monitoring using watchdog.
Notifications are queued in arrival order and consumed by iterating
over the watcher.
Requires Python 3.11+.
"""

import contextlib
import queue
import time
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from utils.config import get_settings
from utils.errors import PathNotFoundError, WatchSetupError
from utils.logger import LoggerMixin
from watcher.events import ChangeEvent, WatchError, WatchItem

_CLOSED = object()


class QueueingHandler(FileSystemEventHandler, LoggerMixin):
    """
    Forwards every watchdog event to a queue.

    Nothing is filtered or coalesced here; that is the consumer's job.
    """

    def __init__(self, events: "queue.Queue[Any]") -> None:
        """
        Initialize the handler.

        Args:
            events: Queue shared with the consumer
        """
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Translate and enqueue a single event."""
        change = ChangeEvent.from_watchdog(event)
        self.log.debug("fs_event", kind=change.kind.value, paths=[str(p) for p in change.paths])
        self._events.put(change)


class PathWatcher(LoggerMixin):
    """
    Watches a fixed set of roots recursively.

    Every root is checked for existence before any watch is scheduled.
    Iterating over the watcher blocks for the next ChangeEvent or
    WatchError and only ends after close().
    """

    def __init__(
        self,
        paths: Iterable[Path | str],
        health_check_interval: float | None = None,
    ) -> None:
        """
        Initialize the path watcher.

        Args:
            paths: Roots to watch, at least one
            health_check_interval: Seconds between checks of the watch threads

        Raises:
            ValueError: If no path is given
            PathNotFoundError: If any path does not exist
        """
        roots = [Path(p) for p in paths]
        if not roots:
            raise ValueError("at least one path must be watched")

        for root in roots:
            if not root.exists():
                raise PathNotFoundError(root)

        settings = get_settings()

        self._roots = roots
        self._interval = health_check_interval or settings.runner.health_check_interval
        self._queue: queue.Queue[Any] = queue.Queue()
        self._handler = QueueingHandler(self._queue)
        self._observer: Observer | None = None
        self._watches: dict[Path, ObservedWatch] = {}
        self._closed = False

    @property
    def roots(self) -> list[Path]:
        """The watched roots, in the order given."""
        return list(self._roots)

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._observer is not None and not self._closed

    def start(self) -> None:
        """
        Schedule a recursive watch per root and start the observer.

        Raises:
            WatchSetupError: If the OS refuses a watch
        """
        if self._observer is not None:
            return

        observer = Observer()
        for root in self._roots:
            try:
                self._watches[root] = observer.schedule(
                    self._handler, str(root), recursive=True
                )
            except OSError as e:
                raise WatchSetupError(root, e.strerror or str(e)) from e

        observer.start()
        self._observer = observer

        self.log.info("path_watcher_started", paths=[str(r) for r in self._roots])

    def close(self) -> None:
        """Stop the observer and end iteration."""
        if self._closed:
            return
        self._closed = True

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5.0)

        self._queue.put(_CLOSED)
        self.log.info("path_watcher_stopped")

    def __iter__(self) -> Iterator[WatchItem]:
        """
        Yield events in the order the OS reported them.

        Watches are checked once per health-check interval whether or
        not events keep arriving.
        """
        next_check = time.monotonic() + self._interval
        while True:
            try:
                item = self._queue.get(timeout=max(next_check - time.monotonic(), 0.0))
            except queue.Empty:
                item = None

            if time.monotonic() >= next_check:
                self._check_health()
                next_check = time.monotonic() + self._interval

            if item is None:
                continue
            if item is _CLOSED:
                return
            yield item

    def _check_health(self) -> None:
        """Re-establish watches whose emitter thread has died."""
        if self._observer is None or self._closed:
            return

        alive = {
            emitter.watch
            for emitter in self._observer.emitters
            if emitter.is_alive()
        }

        for root, watch in list(self._watches.items()):
            if watch in alive:
                continue

            self.log.warning("watch_lost", path=str(root))
            with contextlib.suppress(KeyError):
                self._observer.unschedule(watch)
            del self._watches[root]

            try:
                self._watches[root] = self._observer.schedule(
                    self._handler, str(root), recursive=True
                )
            except OSError as e:
                # Roots are not re-validated after setup; a root that
                # cannot be watched again is dropped.
                self._queue.put(WatchError(e.strerror or str(e), root))
            else:
                self._queue.put(WatchError("watch interrupted, re-established", root))

    def __enter__(self) -> "PathWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
