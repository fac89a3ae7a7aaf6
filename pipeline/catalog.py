from __future__ import annotations
import csv
import logging
from pathlib import Path
from typing import List

import numpy as np

from pipeline.types import Catalog, CatalogStar

logger = logging.getLogger(__name__)


def load_catalog(path: str | Path) -> Catalog:
    """
    CSV catalog with a header row and columns: ra, dec, magnitude[, name].
    Angles in degrees.
    """
    stars = []
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            stars.append(CatalogStar(
                ra=float(row["ra"]),
                dec=float(row["dec"]),
                magnitude=float(row["magnitude"]),
                name=(row.get("name") or "").strip(),
            ))

    logger.info("Loaded %d catalog stars from %s", len(stars), path)
    return tuple(stars)


def synthetic_catalog(
    count: int = 5000,
    seed: int = 42,
    mag_min: float = 1.0,
    mag_max: float = 6.0,
) -> Catalog:
    """
    Stars uniformly distributed over the sphere, sorted brightest first.
    """
    rng = np.random.default_rng(seed)

    ra = rng.uniform(0.0, 360.0, count)
    dec = np.degrees(np.arcsin(rng.uniform(-1.0, 1.0, count)))
    mag = rng.uniform(mag_min, mag_max, count)

    order = np.argsort(mag)
    return tuple(
        CatalogStar(ra=float(ra[i]), dec=float(dec[i]), magnitude=float(mag[i]), name=f"SYN {n}")
        for n, i in enumerate(order)
    )


def load_star_names(path: str | Path) -> List[str]:
    """
    Newline-delimited star names. The first line is a header and is skipped;
    a name wrapped in double quotes is unquoted.

    Row N (after the header) is the name of catalog index N - 1, see
    session.overlay.star_label.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Star name table %s not found, labels will show indices only", path)
        return []

    names = []
    with open(path, "r", encoding="utf-8") as f:
        f.readline()
        for line in f:
            line = line.rstrip("\r\n")
            if len(line) >= 2 and line[0] == '"' and line[-1] == '"':
                line = line[1:-1]
            names.append(line)

    return names
