from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from astro.orientation import Orientation


@dataclass(frozen=True)
class Star:
    """
    Detected star: image position (px), elliptical radii (px), magnitude.
    """
    x: float
    y: float
    radius_x: float
    radius_y: float
    magnitude: float


@dataclass(frozen=True)
class StarIdentifier:
    star_index: int
    catalog_index: int
    weight: float = 1.0


@dataclass(frozen=True)
class CatalogStar:
    ra: float          # deg
    dec: float         # deg
    magnitude: float
    name: str = ""


Catalog = Tuple[CatalogStar, ...]


@dataclass(frozen=True)
class Camera:
    """
    Pinhole camera. Focal length derived from the horizontal field of view.
    """
    width: int = 1024
    height: int = 1024
    fov_deg: float = 20.0

    @property
    def focal_length_px(self) -> float:
        return (self.width / 2.0) / np.tan(np.radians(self.fov_deg) / 2.0)

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2.0, self.height / 2.0


@dataclass
class PipelineInput:
    """
    One synthetic frame ready to be processed.
    `expected_positions` maps catalog index -> (x, y) for every rendered star.
    """
    image: np.ndarray
    camera: Camera
    orientation: Orientation
    catalog: Catalog
    expected_positions: dict = field(default_factory=dict)


@dataclass
class PipelineOutput:
    attitude: Optional[Orientation] = None
    stars: Optional[Tuple[Star, ...]] = None
    star_ids: Optional[Tuple[StarIdentifier, ...]] = None
    catalog: Catalog = ()
