from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Protocol, Sequence

import cv2

from astro.attitude import angular_separation_deg
from pipeline.options import PipelineOptions
from pipeline.types import Catalog, PipelineInput, PipelineOutput
from solver.attitude_solver import estimate_attitude
from solver.sky_simulator import render_star_field
from solver.star_detection import detect_stars
from solver.star_identification import identify_nearest

logger = logging.getLogger(__name__)


class PipelineEngine(Protocol):
    def get_pipeline_input(self, options: PipelineOptions) -> List[PipelineInput]:
        ...

    def set_pipeline(self, options: PipelineOptions) -> "Pipeline":
        ...

    def compare_outputs(
        self,
        inputs: Sequence[PipelineInput],
        outputs: Sequence[PipelineOutput],
        options: PipelineOptions,
    ) -> None:
        ...


CENTROID_ALGORITHMS: Dict[str, Callable] = {
    "cog": detect_stars,
}

ID_ALGORITHMS: Dict[str, Callable] = {
    "nearest": identify_nearest,
}

ATTITUDE_ALGORITHMS: Dict[str, Callable] = {
    "dqm": estimate_attitude,
}


@dataclass
class Pipeline:
    """
    Centroid -> identify -> attitude. Any stage may be None (skipped).
    """
    centroid: Callable | None = None
    identify: Callable | None = None
    attitude: Callable | None = None
    id_tolerance_px: float = 4.0

    def go(self, inputs: Sequence[PipelineInput]) -> List[PipelineOutput]:
        return [self._run_one(i) for i in inputs]

    def _run_one(self, pipeline_input: PipelineInput) -> PipelineOutput:
        output = PipelineOutput(catalog=pipeline_input.catalog)

        if self.centroid is None:
            return output
        output.stars = tuple(self.centroid(pipeline_input.image))

        if self.identify is None:
            return output
        output.star_ids = tuple(self.identify(
            output.stars,
            pipeline_input.expected_positions,
            self.id_tolerance_px,
        ))

        if self.attitude is not None:
            output.attitude = self.attitude(
                output.stars,
                output.star_ids,
                pipeline_input.catalog,
                pipeline_input.camera,
            )

        return output


def _lookup(table: Dict[str, Callable], name: str, kind: str) -> Callable | None:
    if not name:
        return None
    try:
        return table[name]
    except KeyError:
        raise ValueError(f"Unknown {kind} algorithm: {name!r} (available: {', '.join(table)})") from None


class SyntheticPipelineEngine:
    """
    Pipeline engine working on synthetic frames rendered from a catalog.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def get_pipeline_input(self, options: PipelineOptions) -> List[PipelineInput]:
        inputs = []
        for _ in range(max(1, options.generate)):
            image, positions = render_star_field(
                self.catalog,
                options.target,
                options.camera,
                noise_sigma=options.noise_sigma,
                seed=options.seed,
            )
            inputs.append(PipelineInput(
                image=image,
                camera=options.camera,
                orientation=options.target,
                catalog=self.catalog,
                expected_positions=positions,
            ))
        return inputs

    def set_pipeline(self, options: PipelineOptions) -> Pipeline:
        return Pipeline(
            centroid=_lookup(CENTROID_ALGORITHMS, options.centroid_algo, "centroid"),
            identify=_lookup(ID_ALGORITHMS, options.id_algo, "identification"),
            attitude=_lookup(ATTITUDE_ALGORITHMS, options.attitude_algo, "attitude"),
            id_tolerance_px=options.id_tolerance_px,
        )

    def compare_outputs(
        self,
        inputs: Sequence[PipelineInput],
        outputs: Sequence[PipelineOutput],
        options: PipelineOptions,
    ) -> None:
        """
        Writes the requested plots for the first input and logs how far the
        outputs are from the truth the input was rendered with.
        """
        if not inputs:
            return

        first = inputs[0]
        if options.plot_raw_input:
            _write_png(options.plot_raw_input, first.image)

        if options.plot_input:
            vis = cv2.cvtColor(first.image, cv2.COLOR_GRAY2BGR)
            stars = outputs[0].stars if outputs and outputs[0].stars else ()
            for star in stars:
                cv2.circle(vis, (int(star.x), int(star.y)), 6, (0, 255, 0), 1)
            _write_png(options.plot_input, vis)

        for pipeline_input, output in zip(inputs, outputs):
            if output.attitude is None:
                logger.info("compare: attitude unknown")
            else:
                error = angular_separation_deg(output.attitude, pipeline_input.orientation)
                logger.info("compare: attitude error %.4f deg", error)

            detected = len(output.stars) if output.stars is not None else 0
            identified = len(output.star_ids) if output.star_ids is not None else 0
            logger.info(
                "compare: %d rendered, %d detected, %d identified",
                len(pipeline_input.expected_positions), detected, identified,
            )


def _write_png(path: str, image) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(path, image):
        raise OSError(f"Could not write {path}")
