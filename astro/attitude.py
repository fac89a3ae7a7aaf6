from __future__ import annotations
import math

import numpy as np

from astro.orientation import Orientation, wrap_degrees


def radec_to_vector(ra_deg, dec_deg) -> np.ndarray:
    """
    Unit vector(s) in the celestial frame. Accepts scalars or arrays;
    arrays give shape (N, 3).
    """
    ra = np.radians(ra_deg)
    dec = np.radians(dec_deg)
    return np.stack([
        np.cos(dec) * np.cos(ra),
        np.cos(dec) * np.sin(ra),
        np.sin(dec),
    ], axis=-1)


def vector_to_radec(v: np.ndarray) -> tuple[float, float]:
    v = np.asarray(v, dtype=float)
    v = v / np.linalg.norm(v)
    ra = wrap_degrees(math.degrees(math.atan2(v[1], v[0])))
    dec = math.degrees(math.asin(max(-1.0, min(1.0, float(v[2])))))
    return ra, dec


def _east_north(ra_deg: float, dec_deg: float) -> tuple[np.ndarray, np.ndarray]:
    ra = math.radians(ra_deg)
    dec = math.radians(dec_deg)
    east = np.array([-math.sin(ra), math.cos(ra), 0.0])
    north = np.array([
        -math.sin(dec) * math.cos(ra),
        -math.sin(dec) * math.sin(ra),
        math.cos(dec),
    ])
    return east, north


def rotation_matrix(orientation: Orientation) -> np.ndarray:
    """
    Celestial -> camera rotation.

    Rows are the camera axes expressed in the celestial frame:
      0: boresight
      1: image x axis (east rotated by roll)
      2: image y axis (north rotated by roll)
    """
    boresight = radec_to_vector(orientation.ra, orientation.dec)
    east, north = _east_north(orientation.ra, orientation.dec)

    roll = math.radians(orientation.roll)
    x_axis = math.cos(roll) * east + math.sin(roll) * north
    y_axis = -math.sin(roll) * east + math.cos(roll) * north

    return np.vstack([boresight, x_axis, y_axis])


def orientation_from_matrix(m: np.ndarray) -> Orientation:
    ra, dec = vector_to_radec(m[0])
    east, north = _east_north(ra, dec)

    x_axis = m[1]
    roll = wrap_degrees(math.degrees(math.atan2(float(x_axis @ north), float(x_axis @ east))))

    return Orientation(roll=roll, ra=ra, dec=dec)


def quaternion_to_matrix(q: np.ndarray) -> np.ndarray:
    """
    Attitude matrix of a unit quaternion q = (x, y, z, w), scalar last.
    """
    q = np.asarray(q, dtype=float)
    q = q / np.linalg.norm(q)
    qv = q[:3]
    w = q[3]

    cross = np.array([
        [0.0, -qv[2], qv[1]],
        [qv[2], 0.0, -qv[0]],
        [-qv[1], qv[0], 0.0],
    ])

    return (w * w - qv @ qv) * np.eye(3) + 2.0 * np.outer(qv, qv) - 2.0 * w * cross


def angular_separation_deg(a: Orientation, b: Orientation) -> float:
    """
    Angle between two boresights, degrees.
    """
    va = radec_to_vector(a.ra, a.dec)
    vb = radec_to_vector(b.ra, b.dec)
    return math.degrees(math.acos(max(-1.0, min(1.0, float(va @ vb)))))
