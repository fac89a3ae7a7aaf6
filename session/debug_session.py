from __future__ import annotations
import logging
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from astro.orientation import Orientation, OrientationRange, interpolate_orientation
from session.commands import Command, CommandKind
from session.errors import FrameGenerationFailure, ImageLoadFailure
from session.frame_generator import FrameRecord
from session.sequence_builder import SequenceBuilder
from session.star_index import rebuild_star_catalog_index
from session.timeline import ImageLoader, Timeline, TimelineEntry

logger = logging.getLogger(__name__)


UNKNOWN_ATTITUDE_TEXT = "Attitude is UNKNOWN"


class SessionState(Enum):
    IDLE = "idle"
    NAVIGATING = "navigating"
    EXTENDING = "extending"


def attitude_text(attitude: Optional[Orientation]) -> str:
    if attitude is None:
        return UNKNOWN_ATTITUDE_TEXT
    return f"RA: {attitude.ra:f} DE: {attitude.dec:f} Roll: {attitude.roll:f}"


class DebugSession:
    """
    Interactive exploration of a frame timeline.

    Owns the timeline, the orientation the next panned frame is generated
    at, and the star/catalog index of the displayed frame. Every command
    runs to completion (pipeline call included) before the next one.
    """

    def __init__(
        self,
        builder: SequenceBuilder,
        timeline: Timeline,
        target: Orientation,
        frame_count: int,
        image_loader: ImageLoader,
        star_names: Sequence[str] = (),
    ):
        self.builder = builder
        self.timeline = timeline
        self.target = target
        self.frame_count = frame_count
        self.image_loader = image_loader
        self.star_names = list(star_names)

        self.state = SessionState.IDLE
        self.star_index = np.empty(0, dtype=int)
        self.hud_text = UNKNOWN_ATTITUDE_TEXT
        self._refresh()

    @classmethod
    def start(
        cls,
        builder: SequenceBuilder,
        orientation_range: OrientationRange,
        frame_count: int,
        image_loader: ImageLoader,
        star_names: Sequence[str] = (),
    ) -> DebugSession:
        """
        Sweeps the range, loads every frame and puts the cursor on the first.
        Panning continues from the last requested sweep orientation.
        """
        records = builder.sweep(orientation_range, frame_count)
        timeline = Timeline.load(records, image_loader)
        target = interpolate_orientation(max(frame_count - 1, 0), frame_count, orientation_range)

        logger.info("Session started with %d frames", len(timeline))
        return cls(builder, timeline, target, frame_count, image_loader, star_names)

    # ─────────────────────────────
    # State
    # ─────────────────────────────
    @property
    def current_record(self) -> Optional[FrameRecord]:
        entry = self.timeline.current
        return entry.record if entry is not None else None

    @property
    def current_image(self):
        entry = self.timeline.current
        return entry.image if entry is not None else None

    def _refresh(self):
        record = self.current_record
        if record is None:
            self.star_index = np.empty(0, dtype=int)
            self.hud_text = UNKNOWN_ATTITUDE_TEXT
            return

        self.star_index = rebuild_star_catalog_index(record)
        self.hud_text = attitude_text(record.attitude)

    # ─────────────────────────────
    # Transitions
    # ─────────────────────────────
    def dispatch(self, command: Command) -> bool:
        """
        Applies one command. Returns True when the displayed frame changed.
        """
        kind = command.kind
        if kind is CommandKind.NAVIGATE_NEXT:
            return self.navigate(+1)
        if kind is CommandKind.NAVIGATE_PREV:
            return self.navigate(-1)
        if kind is CommandKind.ADJUST_RA:
            return self.extend(d_ra=command.delta)
        if kind is CommandKind.ADJUST_DEC:
            return self.extend(d_dec=command.delta)
        if kind is CommandKind.ADJUST_ROLL:
            return self.extend(d_roll=command.delta)
        raise ValueError(f"Unhandled command: {command}")

    def navigate(self, step: int) -> bool:
        """Raises EmptyTimeline when there is nothing to navigate."""
        self.state = SessionState.NAVIGATING
        try:
            before = self.timeline.cursor
            self.timeline.move(step)
            self._refresh()
            return self.timeline.cursor != before
        finally:
            self.state = SessionState.IDLE

    def extend(self, d_ra: float = 0.0, d_dec: float = 0.0, d_roll: float = 0.0) -> bool:
        """
        Generates one frame at the target shifted by the deltas and makes it
        the new last frame, discarding anything after the cursor.

        On pipeline or image failure nothing changes and False is returned.
        """
        self.state = SessionState.EXTENDING
        try:
            return self._extend(d_ra, d_dec, d_roll)
        finally:
            self.state = SessionState.IDLE

    def _extend(self, d_ra: float, d_dec: float, d_roll: float) -> bool:
        target = self.target.shifted(d_ra=d_ra, d_dec=d_dec, d_roll=d_roll)
        cursor = self.timeline.cursor
        kept = self.timeline.records[:cursor + 1]
        frame_index = max((r.frame_index for r in kept), default=-1) + 1

        logger.info(
            "Extending at RA %.2f DE %.2f Roll %.2f (frame %d)",
            target.ra, target.dec, target.roll, frame_index,
        )

        try:
            record = self.builder.pan(kept, frame_index, target)[-1]
        except FrameGenerationFailure as e:
            logger.warning("Extend dropped: %s", e)
            return False

        try:
            image = self.image_loader(record.image_path)
        except ImageLoadFailure as e:
            logger.warning("Extend dropped: %s", e)
            return False

        dropped = self.timeline.branch(TimelineEntry(record, image))
        if dropped:
            logger.info("Discarded %d frames after position %d", dropped, cursor)
            self.frame_count = cursor + 1
        self.frame_count += 1
        self.target = target

        self._refresh()
        return True

    def close(self):
        self.timeline = Timeline()
        self._refresh()
