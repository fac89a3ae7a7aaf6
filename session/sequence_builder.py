from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Sequence

from astro.orientation import Orientation, OrientationRange, interpolate_orientation
from session.errors import FrameGenerationFailure
from session.frame_generator import FrameGenerator, FrameRecord

logger = logging.getLogger(__name__)


class SequenceMode(Enum):
    SWEEP = "sweep"
    PANNING = "panning"


@dataclass(frozen=True)
class FrameRequest:
    frame_index: int
    orientation_range: OrientationRange
    mode: SequenceMode
    frame_count: int = 1

    @property
    def target(self) -> Orientation:
        if self.mode is SequenceMode.PANNING:
            return self.orientation_range.minimum
        return interpolate_orientation(self.frame_index, self.frame_count, self.orientation_range)


class SequenceBuilder:
    """
    Turns sweep / panning requests into frame records, in index order.
    """

    def __init__(self, generator: FrameGenerator):
        self.generator = generator

    @staticmethod
    def requests(orientation_range: OrientationRange, frame_count: int) -> Iterator[FrameRequest]:
        for frame in range(frame_count):
            yield FrameRequest(
                frame_index=frame,
                orientation_range=orientation_range,
                mode=SequenceMode.SWEEP,
                frame_count=frame_count,
            )

    def sweep(self, orientation_range: OrientationRange, frame_count: int) -> List[FrameRecord]:
        """
        One frame per index across the range. Frames that fail to generate
        (no pipeline output, unwritable images) are skipped, so the result can
        be shorter than frame_count.
        """
        records = []
        for request in self.requests(orientation_range, frame_count):
            logger.info("Sweep frame %d/%d", request.frame_index + 1, frame_count)
            try:
                records.append(self.run(request))
            except FrameGenerationFailure as e:
                logger.warning("Skipping frame %d: %s", request.frame_index, e)

        logger.info("Sweep produced %d of %d frames", len(records), frame_count)
        return records

    def pan(
        self,
        records: Sequence[FrameRecord],
        frame_index: int,
        orientation: Orientation,
    ) -> List[FrameRecord]:
        """
        Appends exactly one frame at `orientation` to `records`.
        Raises FrameGenerationFailure (records left untouched) on failure.
        """
        request = FrameRequest(
            frame_index=frame_index,
            orientation_range=OrientationRange.single(orientation),
            mode=SequenceMode.PANNING,
        )
        return list(records) + [self.run(request)]

    def run(self, request: FrameRequest) -> FrameRecord:
        return self.generator.generate(request.frame_index, request.target)
