"""
Cue Path Watcher Package.

File system monitoring feeding the run supervisor.
Requires Python 3.11+.
"""

from watcher.events import ChangeEvent, ChangeKind, WatchError, WatchItem
from watcher.path_watcher import PathWatcher

__all__ = ["ChangeEvent", "ChangeKind", "WatchError", "WatchItem", "PathWatcher"]
