from __future__ import annotations
import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from astro.orientation import Orientation
from pipeline.engine import PipelineEngine
from pipeline.options import PipelineOptions
from pipeline.types import PipelineOutput, Star
from session.errors import EmptyPipelineResult, FrameWriteFailure

logger = logging.getLogger(__name__)


FRAME_FILE = "frame_{:04d}.png"
FRAME_RAW_FILE = "frame_raw_{:04d}.png"

# Fixed selection for synthetic-frame debugging
CENTROID_ALGO = "cog"
ID_ALGO = "nearest"
ATTITUDE_ALGO = "dqm"


def frame_image_path(output_dir: str | Path, frame_index: int) -> Path:
    """Displayed frame image; the same index always maps to the same file."""
    return Path(output_dir) / FRAME_FILE.format(frame_index)


def frame_raw_path(output_dir: str | Path, frame_index: int) -> Path:
    return Path(output_dir) / FRAME_RAW_FILE.format(frame_index)


@dataclass(frozen=True)
class FrameRecord:
    frame_index: int
    orientation: Orientation                  # requested
    attitude: Optional[Orientation]           # estimated, None = unknown
    stars: Tuple[Star, ...]
    correspondences: Tuple[Tuple[int, int], ...]   # (star_index, catalog_index)
    image_path: Path


class FrameGenerator:
    """
    Runs the pipeline once for one target orientation and packages the result.
    Stateless between calls.
    """

    def __init__(self, engine: PipelineEngine, base_options: PipelineOptions, output_dir: str | Path):
        self.engine = engine
        self.base_options = base_options
        self.output_dir = Path(output_dir)

    def options_for(self, frame_index: int, orientation: Orientation) -> PipelineOptions:
        return dataclasses.replace(
            self.base_options,
            generate=1,
            generate_roll=orientation.roll,
            generate_ra=orientation.ra,
            generate_de=orientation.dec,
            centroid_algo=CENTROID_ALGO,
            id_algo=ID_ALGO,
            attitude_algo=ATTITUDE_ALGO,
            plot_raw_input=str(frame_image_path(self.output_dir, frame_index)),
            plot_input=str(frame_raw_path(self.output_dir, frame_index)),
        )

    def generate(self, frame_index: int, orientation: Orientation) -> FrameRecord:
        options = self.options_for(frame_index, orientation)

        inputs = self.engine.get_pipeline_input(options)
        pipeline = self.engine.set_pipeline(options)
        logger.debug("Frame %d: centroid algorithm %s", frame_index, options.centroid_algo)

        outputs = pipeline.go(inputs)
        if not outputs:
            raise EmptyPipelineResult(
                f"Pipeline returned no output for frame {frame_index} at {orientation}"
            )

        for output in outputs:
            _log_output(frame_index, output)

        try:
            self.engine.compare_outputs(inputs, outputs, options)
        except OSError as e:
            raise FrameWriteFailure(f"Could not write frame {frame_index}: {e}") from e

        first = outputs[0]
        correspondences = ()
        if first.star_ids and len(first.catalog) > 0:
            correspondences = tuple((sid.star_index, sid.catalog_index) for sid in first.star_ids)

        return FrameRecord(
            frame_index=frame_index,
            orientation=orientation,
            attitude=first.attitude,
            stars=tuple(first.stars or ()),
            correspondences=correspondences,
            image_path=Path(options.plot_raw_input),
        )


def _log_output(frame_index: int, output: PipelineOutput) -> None:
    if output.attitude is not None:
        a = output.attitude
        logger.info("Frame %d: RA: %f DE: %f Roll: %f", frame_index, a.ra, a.dec, a.roll)
    else:
        logger.info("Frame %d: Attitude is UNKNOWN", frame_index)

    if output.stars is None:
        logger.info("Frame %d: no stars", frame_index)
        return

    logger.debug("Frame %d: %d stars", frame_index, len(output.stars))
    for star in output.stars:
        logger.debug(
            "  star at (%.2f, %.2f), R=(%.2f, %.2f), mag=%.2f",
            star.x, star.y, star.radius_x, star.radius_y, star.magnitude,
        )

    if not output.star_ids or len(output.catalog) == 0:
        logger.debug("Frame %d: no starIds available", frame_index)
        return

    for sid in output.star_ids:
        if 0 <= sid.catalog_index < len(output.catalog):
            cs = output.catalog[sid.catalog_index]
            name = f"catalogName={cs.name} magnitude={cs.magnitude:.2f}"
        else:
            name = "catalogName=<invalid index>"
        logger.debug(
            "  starIndex=%d catalogIndex=%d %s weight=%.3f",
            sid.star_index, sid.catalog_index, name, sid.weight,
        )
