"""
Cue Watch Events.

Items produced by the path watcher and consumed by the run supervisor.
Requires Python 3.11+.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
)


class ChangeKind(str, Enum):
    """Coarse kind of a filesystem change."""

    CREATED = "created"
    MODIFIED = "modified"
    OTHER = "other"


@dataclass(frozen=True)
class ChangeEvent:
    """A single filesystem notification and the paths it concerns."""

    kind: ChangeKind
    paths: tuple[Path, ...] = field(default_factory=tuple)

    @property
    def is_significant(self) -> bool:
        """Only creations and modifications may trigger a restart."""
        return self.kind in (ChangeKind.CREATED, ChangeKind.MODIFIED)

    @property
    def first_path(self) -> Path | None:
        """The path shown to the user, if any."""
        return self.paths[0] if self.paths else None

    @classmethod
    def from_watchdog(cls, event: FileSystemEvent) -> "ChangeEvent":
        """
        Translate a watchdog event.

        A move is reported as a modification of (source, destination),
        everything that is neither a creation nor a modification is OTHER.

        Args:
            event: Event delivered by a watchdog observer

        Returns:
            Equivalent ChangeEvent
        """
        paths = [Path(os.fsdecode(event.src_path))]

        if event.event_type == EVENT_TYPE_CREATED:
            kind = ChangeKind.CREATED
        elif event.event_type == EVENT_TYPE_MODIFIED:
            kind = ChangeKind.MODIFIED
        elif event.event_type == EVENT_TYPE_MOVED:
            kind = ChangeKind.MODIFIED
            dest = os.fsdecode(getattr(event, "dest_path", "") or "")
            if dest:
                paths.append(Path(dest))
        else:
            kind = ChangeKind.OTHER

        return cls(kind=kind, paths=tuple(paths))


@dataclass(frozen=True)
class WatchError:
    """A watch on one of the roots failed; the stream continues."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


WatchItem = ChangeEvent | WatchError
