import math
from typing import Dict, List, Sequence, Tuple

from pipeline.types import Star, StarIdentifier


def identify_nearest(
    stars: Sequence[Star],
    expected_positions: Dict[int, Tuple[float, float]],
    tolerance_px: float = 4.0,
) -> List[StarIdentifier]:
    """
    Pair each detected star with the closest expected catalog position.

    A catalog star is used at most once; pairs further apart than
    `tolerance_px` are left unidentified. Weight falls off linearly with
    distance (1 at the exact position, 0 at the tolerance).
    """
    candidates = []
    for star_index, star in enumerate(stars):
        for catalog_index, (x, y) in expected_positions.items():
            d = math.hypot(star.x - x, star.y - y)
            if d <= tolerance_px:
                candidates.append((d, star_index, catalog_index))

    candidates.sort()

    used_stars = set()
    used_catalog = set()
    ids = []
    for d, star_index, catalog_index in candidates:
        if star_index in used_stars or catalog_index in used_catalog:
            continue
        used_stars.add(star_index)
        used_catalog.add(catalog_index)
        weight = 1.0 - d / tolerance_px if tolerance_px > 0 else 1.0
        ids.append(StarIdentifier(star_index=star_index, catalog_index=catalog_index, weight=weight))

    ids.sort(key=lambda i: i.star_index)
    return ids
