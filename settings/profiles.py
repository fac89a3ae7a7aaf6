from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from pipeline.types import Camera


@dataclass
class CameraSettings:
    width: int = 1024
    height: int = 1024
    fov_deg: float = 20.0

    def to_camera(self) -> Camera:
        return Camera(width=self.width, height=self.height, fov_deg=self.fov_deg)


@dataclass
class DebugSettings:
    output_dir: str = "sfml-tests"
    star_names_path: str = "starnames.csv"
    catalog_path: Optional[str] = None

    # Synthetic catalog, used when catalog_path is not set
    catalog_size: int = 5000
    seed: int = 42

    noise_sigma: float = 2.0
    id_tolerance_px: float = 4.0

    window_width: int = 1024
    window_height: int = 1024

    camera: CameraSettings = field(default_factory=CameraSettings)
