import os

import cv2
import numpy as np

from session.errors import ImageLoadFailure


def load_frame(path) -> np.ndarray:
    """
    Loads a persisted frame (PNG / JPG / TIF / BMP) for display.

    Returns a grayscale uint8 image stretched to the full 0..255 range.
    Raises ImageLoadFailure when the file is missing or cannot be decoded.
    """
    path = str(path)
    if not os.path.exists(path):
        raise ImageLoadFailure(f"Frame not found: {path}")

    img = cv2.imread(path, cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise ImageLoadFailure(f"Could not decode: {path}")

    img = img.astype(np.float32)
    img -= img.min()
    maxv = img.max()
    if maxv > 0:
        img /= maxv
    return (img * 255).astype(np.uint8)
