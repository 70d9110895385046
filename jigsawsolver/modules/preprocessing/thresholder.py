# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Foreground Thresholder
Turns the photographed tray into a binary mask for contour detection.
Three operations are applied in sequence:

  1. Grayscale  — BGR → single channel
  2. Denoise    — 5×5 Gaussian blur, sigma derived from the kernel size
  3. Threshold  — adaptive Gaussian-weighted local mean over 11 px,
                  offset 2, inverted so piece pixels come out as 255
"""

import cv2
import numpy as np

from jigsawsolver.utils.image_utils import bgr_to_gray
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)

# Must be odd
_BLUR_KERNEL = (5, 5)
# 0 → OpenCV derives sigma from the kernel size
_BLUR_SIGMA = 0

_THRESH_MAX_VALUE = 255
_THRESH_BLOCK_SIZE = 11
_THRESH_C = 2


def denoise(gray: np.ndarray) -> np.ndarray:
    return cv2.GaussianBlur(gray, _BLUR_KERNEL, _BLUR_SIGMA)


def adaptive_binarize(gray: np.ndarray) -> np.ndarray:
    """
    Locally thresholded, inverted binarisation.
    A pixel becomes 255 when it is darker than its Gaussian-weighted
    neighbourhood mean minus _THRESH_C.
    """
    return cv2.adaptiveThreshold(
        gray,
        _THRESH_MAX_VALUE,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY_INV,
        _THRESH_BLOCK_SIZE,
        _THRESH_C,
    )


def preprocess(img: np.ndarray) -> np.ndarray:
    """
    Full preprocessing: grayscale → blur → adaptive threshold.

    Args:
        img: BGR (or grayscale) uint8 array.

    Returns:
        uint8 binary mask (0 / 255), same H×W as img.
    """
    gray = bgr_to_gray(img)
    blurred = denoise(gray)
    del gray

    mask = adaptive_binarize(blurred)
    del blurred

    log.debug(
        "preprocessing_complete",
        shape=mask.shape,
        foreground_fraction=round(float(np.count_nonzero(mask)) / mask.size, 4),
    )
    return mask
