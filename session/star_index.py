import numpy as np

from session.frame_generator import FrameRecord


UNMATCHED = -1


def rebuild_star_catalog_index(record: FrameRecord) -> np.ndarray:
    """
    Catalog index of every detected star of `record`, UNMATCHED where the
    star was not identified. Correspondences pointing outside the star list
    are ignored.
    """
    index = np.full(len(record.stars), UNMATCHED, dtype=int)
    for star_index, catalog_index in record.correspondences:
        if 0 <= star_index < len(record.stars):
            index[star_index] = catalog_index
    return index
