import math
from typing import List

import cv2
import numpy as np

from pipeline.types import Star


def detect_stars(
    frame: np.ndarray,
    threshold_sigma: float = 5.0,
    min_area: int = 2,
    max_area: int = 500,
) -> List[Star]:
    """
    Centre-of-gravity centroiding.

    Pixels brighter than background + threshold_sigma * noise are grouped
    into 8-connected blobs; each blob yields its intensity-weighted centroid,
    second-moment radii and an instrumental magnitude.
    """
    if frame.ndim == 3:
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    else:
        gray = frame

    img = gray.astype(np.float32)
    background = float(np.median(img))
    # MAD -> sigma for gaussian noise
    noise = 1.4826 * float(np.median(np.abs(img - background)))
    noise = max(noise, 1.0)

    mask = (img > background + threshold_sigma * noise).astype(np.uint8)
    count, labels, stats, _ = cv2.connectedComponentsWithStats(mask, connectivity=8)

    stars = []
    for label in range(1, count):
        area = stats[label, cv2.CC_STAT_AREA]
        if not (min_area <= area <= max_area):
            continue

        x0 = stats[label, cv2.CC_STAT_LEFT]
        y0 = stats[label, cv2.CC_STAT_TOP]
        w = stats[label, cv2.CC_STAT_WIDTH]
        h = stats[label, cv2.CC_STAT_HEIGHT]

        ys, xs = np.nonzero(labels[y0:y0 + h, x0:x0 + w] == label)
        ys = ys + y0
        xs = xs + x0
        weights = np.clip(img[ys, xs] - background, 0, None)
        flux = float(weights.sum())
        if flux <= 0:
            continue

        cx = float((weights * xs).sum() / flux)
        cy = float((weights * ys).sum() / flux)
        rx = math.sqrt(float((weights * (xs - cx) ** 2).sum() / flux))
        ry = math.sqrt(float((weights * (ys - cy) ** 2).sum() / flux))

        stars.append(Star(
            x=cx,
            y=cy,
            radius_x=max(rx, 0.5),
            radius_y=max(ry, 0.5),
            magnitude=-2.5 * math.log10(flux),
        ))

    return stars
