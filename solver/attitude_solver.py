from __future__ import annotations
from typing import Optional, Sequence

import numpy as np

from astro.attitude import orientation_from_matrix, quaternion_to_matrix, radec_to_vector
from astro.orientation import Orientation
from pipeline.types import Camera, Catalog, Star, StarIdentifier
from solver.sky_simulator import unproject


def davenport_q(
    body: np.ndarray,
    reference: np.ndarray,
    weights: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Davenport q-method: attitude matrix A minimising sum w |b - A r|^2.

    body, reference: (N, 3) unit vectors. Needs at least two
    non-parallel pairs to be well defined.
    """
    if weights is None:
        weights = np.ones(len(body))

    B = (weights[:, None, None] * body[:, :, None] * reference[:, None, :]).sum(axis=0)
    S = B + B.T
    sigma = np.trace(B)
    z = np.array([B[1, 2] - B[2, 1], B[2, 0] - B[0, 2], B[0, 1] - B[1, 0]])

    K = np.zeros((4, 4))
    K[:3, :3] = S - sigma * np.eye(3)
    K[:3, 3] = z
    K[3, :3] = z
    K[3, 3] = sigma

    values, vectors = np.linalg.eigh(K)
    q = vectors[:, int(np.argmax(values))]
    return quaternion_to_matrix(q)


def estimate_attitude(
    stars: Sequence[Star],
    star_ids: Sequence[StarIdentifier],
    catalog: Catalog,
    camera: Camera,
) -> Optional[Orientation]:
    """
    Orientation from identified stars, or None (unknown) with fewer than
    two usable identifications.
    """
    pairs = [
        sid for sid in star_ids
        if 0 <= sid.star_index < len(stars) and 0 <= sid.catalog_index < len(catalog)
    ]
    if len(pairs) < 2:
        return None

    body = np.array([
        unproject(stars[p.star_index].x, stars[p.star_index].y, camera) for p in pairs
    ])
    reference = radec_to_vector(
        np.array([catalog[p.catalog_index].ra for p in pairs]),
        np.array([catalog[p.catalog_index].dec for p in pairs]),
    )
    weights = np.array([max(p.weight, 1e-3) for p in pairs])

    return orientation_from_matrix(davenport_q(body, reference, weights))
