from typing import Dict, Tuple

import numpy as np

from astro.attitude import radec_to_vector, rotation_matrix
from astro.orientation import Orientation
from pipeline.types import Camera, Catalog


BACKGROUND_LEVEL = 10.0
PSF_SIGMA_PX = 1.2
PEAK_AT_MAG_1 = 250.0


def project_catalog(
    catalog: Catalog,
    orientation: Orientation,
    camera: Camera,
) -> Dict[int, Tuple[float, float]]:
    """
    Pixel position of every catalog star that falls on the sensor,
    keyed by catalog index.
    """
    if not catalog:
        return {}

    ra = np.array([s.ra for s in catalog])
    dec = np.array([s.dec for s in catalog])
    vectors = radec_to_vector(ra, dec)

    cam = vectors @ rotation_matrix(orientation).T
    f = camera.focal_length_px
    cx, cy = camera.center

    front = cam[:, 0] > 1e-9
    x = np.full(len(catalog), -1.0)
    y = np.full(len(catalog), -1.0)
    x[front] = cx + f * cam[front, 1] / cam[front, 0]
    y[front] = cy - f * cam[front, 2] / cam[front, 0]

    inside = front & (x >= 0) & (x < camera.width) & (y >= 0) & (y < camera.height)

    return {int(i): (float(x[i]), float(y[i])) for i in np.flatnonzero(inside)}


def unproject(x: float, y: float, camera: Camera) -> np.ndarray:
    """
    Camera-frame unit vector of a pixel position (inverse of project_catalog).
    """
    f = camera.focal_length_px
    cx, cy = camera.center
    v = np.array([1.0, (x - cx) / f, (cy - y) / f])
    return v / np.linalg.norm(v)


def _add_star(img: np.ndarray, x: float, y: float, peak: float, sigma: float = PSF_SIGMA_PX):
    h, w = img.shape
    r = int(max(3, sigma * 4))
    ix, iy = int(round(x)), int(round(y))
    x0, x1 = max(0, ix - r), min(w, ix + r + 1)
    y0, y1 = max(0, iy - r), min(h, iy + r + 1)
    if x0 >= x1 or y0 >= y1:
        return

    xs = np.arange(x0, x1) - x
    ys = np.arange(y0, y1) - y
    xx, yy = np.meshgrid(xs, ys)
    img[y0:y1, x0:x1] += peak * np.exp(-(xx * xx + yy * yy) / (2 * sigma * sigma))


def render_star_field(
    catalog: Catalog,
    orientation: Orientation,
    camera: Camera,
    noise_sigma: float = 2.0,
    seed: int = 42,
) -> Tuple[np.ndarray, Dict[int, Tuple[float, float]]]:
    """
    Synthetic 8-bit frame of the sky seen at `orientation`.
    Returns the image and the true pixel position of every rendered star.
    """
    rng = np.random.default_rng(seed)

    frame = np.full((camera.height, camera.width), BACKGROUND_LEVEL, dtype=np.float32)
    frame += rng.normal(0, noise_sigma, frame.shape).astype(np.float32)

    positions = project_catalog(catalog, orientation, camera)
    for idx, (x, y) in positions.items():
        peak = PEAK_AT_MAG_1 * 10 ** (-0.4 * (catalog[idx].magnitude - 1.0))
        _add_star(frame, x, y, peak=peak)

    frame = np.clip(frame, 0, 255).astype(np.uint8)
    return frame, positions
