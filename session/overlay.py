from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

import numpy as np

from pipeline.types import Star
from session.star_index import UNMATCHED


BOX_SCALE = 4.0
LABEL_SCALE = 8.0
LABEL_MARGIN = 4.0


def star_box(star: Star) -> Tuple[float, float, float, float]:
    """(x, y, w, h) of the box drawn around a detected star."""
    return (
        star.x - star.radius_x * BOX_SCALE,
        star.y - star.radius_y * BOX_SCALE,
        star.radius_x * 2 * BOX_SCALE,
        star.radius_y * 2 * BOX_SCALE,
    )


def label_anchor(star: Star) -> Tuple[float, float]:
    """Top-right corner of a star's name label."""
    return (
        star.x - star.radius_x * LABEL_SCALE - LABEL_MARGIN,
        star.y - star.radius_y * LABEL_SCALE - LABEL_MARGIN,
    )


def star_label(catalog_index: int, names: Sequence[str]) -> str:
    # Names are shifted by one (the table's first row is Sol); not verified
    # against every catalog.
    if 0 <= catalog_index + 1 < len(names):
        return f"{catalog_index}{names[catalog_index + 1]}"
    return f"{catalog_index} ?"


def matched_centroid(stars: Sequence[Star], star_index: np.ndarray) -> Optional[Tuple[float, float]]:
    """Mean position of all identified stars, None if there are none."""
    matched = [s for s, c in zip(stars, star_index) if c != UNMATCHED]
    if not matched:
        return None
    return (
        sum(s.x for s in matched) / len(matched),
        sum(s.y for s in matched) / len(matched),
    )


def star_labels(
    stars: Sequence[Star],
    star_index: np.ndarray,
    names: Sequence[str],
) -> List[Tuple[Star, str]]:
    return [
        (s, star_label(int(c), names))
        for s, c in zip(stars, star_index)
        if c >= 0
    ]
