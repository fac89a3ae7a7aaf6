from __future__ import annotations
from dataclasses import dataclass, field

from astro.orientation import Orientation
from pipeline.types import Camera


@dataclass
class PipelineOptions:
    """
    Everything one pipeline run needs: where to point, which algorithms to
    use and where to write the plots.
    """
    # Target of the current generated image
    generate: int = 1
    generate_roll: float = 0.0
    generate_ra: float = 0.0
    generate_de: float = 0.0

    # Algorithms
    centroid_algo: str = "cog"
    id_algo: str = "nearest"
    attitude_algo: str = "dqm"

    # Synthetic image
    camera: Camera = field(default_factory=Camera)
    noise_sigma: float = 2.0
    seed: int = 42
    id_tolerance_px: float = 4.0

    # Plots ("" = not written)
    plot_raw_input: str = ""
    plot_input: str = ""

    @property
    def target(self) -> Orientation:
        return Orientation(roll=self.generate_roll, ra=self.generate_ra, dec=self.generate_de)
