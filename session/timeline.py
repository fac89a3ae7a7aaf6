from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Tuple

from session.errors import EmptyTimeline, ImageLoadFailure
from session.frame_generator import FrameRecord

logger = logging.getLogger(__name__)


ImageLoader = Callable[[Path], Any]


@dataclass(frozen=True)
class TimelineEntry:
    """A frame record and its loaded image, always added and removed together."""
    record: FrameRecord
    image: Any


class Timeline:
    """
    Ordered, navigable frames with a cursor.

    The cursor is a valid index whenever the timeline is not empty.
    """

    def __init__(self, entries: Iterable[TimelineEntry] = ()):
        self._entries: List[TimelineEntry] = list(entries)
        self._cursor = 0

    @classmethod
    def load(cls, records: Iterable[FrameRecord], loader: ImageLoader) -> Timeline:
        """
        Loads the image of every record; records whose image fails to load
        are left out.
        """
        entries = []
        for record in records:
            try:
                entries.append(TimelineEntry(record, loader(record.image_path)))
            except ImageLoadFailure as e:
                logger.warning("Dropping frame %d: %s", record.frame_index, e)
        return cls(entries)

    # ─────────────────────────────
    # Access
    # ─────────────────────────────
    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def last_index(self) -> int:
        return len(self._entries) - 1

    @property
    def records(self) -> Tuple[FrameRecord, ...]:
        return tuple(e.record for e in self._entries)

    @property
    def images(self) -> Tuple[Any, ...]:
        return tuple(e.image for e in self._entries)

    @property
    def current(self) -> Optional[TimelineEntry]:
        if not self._entries:
            return None
        return self._entries[self._cursor]

    # ─────────────────────────────
    # Mutation
    # ─────────────────────────────
    def move(self, step: int) -> int:
        """Moves the cursor by `step` with wraparound. Returns the new cursor."""
        if not self._entries:
            raise EmptyTimeline("No frames to navigate")
        self._cursor = (self._cursor + step) % len(self._entries)
        return self._cursor

    def branch(self, entry: TimelineEntry) -> int:
        """
        Drops every entry after the cursor, appends `entry` and moves the
        cursor onto it. Returns the number of dropped entries.
        """
        dropped = 0
        if self._entries:
            dropped = self.last_index - self._cursor
            del self._entries[self._cursor + 1:]

        self._entries.append(entry)
        self._cursor = self.last_index
        return dropped
