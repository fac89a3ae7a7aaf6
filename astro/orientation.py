from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Orientation:
    """
    Camera pointing in degrees: roll, right ascension, declination.
    """
    roll: float
    ra: float
    dec: float

    def shifted(self, d_ra: float = 0.0, d_dec: float = 0.0, d_roll: float = 0.0) -> Orientation:
        """
        New orientation with the deltas applied.
        RA and roll wrap into [0, 360), declination clamps to [-90, 90].
        """
        return Orientation(
            roll=wrap_degrees(self.roll + d_roll),
            ra=wrap_degrees(self.ra + d_ra),
            dec=clamp_declination(self.dec + d_dec),
        )


@dataclass(frozen=True)
class OrientationRange:
    roll_min: float = 0.0
    roll_max: float = 0.0
    ra_min: float = 0.0
    ra_max: float = 0.0
    dec_min: float = 0.0
    dec_max: float = 0.0

    @classmethod
    def single(cls, orientation: Orientation) -> OrientationRange:
        return cls(
            roll_min=orientation.roll, roll_max=orientation.roll,
            ra_min=orientation.ra, ra_max=orientation.ra,
            dec_min=orientation.dec, dec_max=orientation.dec,
        )

    @property
    def minimum(self) -> Orientation:
        return Orientation(roll=self.roll_min, ra=self.ra_min, dec=self.dec_min)

    def collapsed(self) -> OrientationRange:
        """
        An unset (zero) max means "no sweep on this axis": max := min.
        """
        return OrientationRange(
            roll_min=self.roll_min,
            roll_max=self.roll_max if self.roll_max != 0 else self.roll_min,
            ra_min=self.ra_min,
            ra_max=self.ra_max if self.ra_max != 0 else self.ra_min,
            dec_min=self.dec_min,
            dec_max=self.dec_max if self.dec_max != 0 else self.dec_min,
        )


def wrap_degrees(value: float) -> float:
    return value % 360.0


def clamp_declination(value: float) -> float:
    return max(-90.0, min(90.0, value))


def _lerp(lo: float, hi: float, t: float) -> float:
    if t >= 1.0:
        return hi
    return lo + t * (hi - lo)


def interpolate_orientation(
    frame_index: int,
    frame_count: int,
    orientation_range: OrientationRange,
) -> Orientation:
    """
    Target orientation of one frame of a sweep over `orientation_range`.

    A single-frame sweep (or frame_count <= 1) always yields the range minimum.
    RA and roll wrap into [0, 360), declination clamps to [-90, 90].
    """
    r = orientation_range.collapsed()

    if frame_count <= 1:
        t = 0.0
    else:
        t = frame_index / (frame_count - 1)

    return Orientation(
        roll=wrap_degrees(_lerp(r.roll_min, r.roll_max, t)),
        ra=wrap_degrees(_lerp(r.ra_min, r.ra_max, t)),
        dec=clamp_declination(_lerp(r.dec_min, r.dec_max, t)),
    )
