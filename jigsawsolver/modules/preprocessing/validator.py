# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Image Validator
Guards the pipeline entry. The core expects an already-decoded pixel
buffer; anything else fails fast here instead of deep inside OpenCV.

Raises ImageValidationError (subclass of ValueError) on any failure
so the API error handler maps it cleanly to HTTP 422.
"""

import numpy as np

from jigsawsolver.api.middleware.error_handler import ImageValidationError
from jigsawsolver.config import get_settings
from jigsawsolver.utils.image_utils import bytes_to_bgr
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)

# Supported upload formats by magic bytes
_MAGIC_BYTES: dict[str, bytes] = {
    "jpeg": b"\xff\xd8\xff",
    "png":  b"\x89PNG",
    "webp": b"RIFF",          # RIFF....WEBP — checked further below
}

# Adaptive thresholding needs at least one full 11×11 neighbourhood
_MIN_DIMENSION_PX = 11


def _detect_format(data: bytes) -> str | None:
    if data[:3] == _MAGIC_BYTES["jpeg"]:
        return "jpeg"
    if data[:4] == _MAGIC_BYTES["png"]:
        return "png"
    if data[:4] == _MAGIC_BYTES["webp"] and data[8:12] == b"WEBP":
        return "webp"
    return None


def validate_image_array(img: np.ndarray, label: str = "image") -> np.ndarray:
    """
    Check that img is a decoded uint8 pixel buffer the pipeline can run on.

    Accepts H×W (grayscale) or H×W×3 (BGR). Returns img unchanged.

    Raises:
        ImageValidationError: On wrong type, dtype, shape or size.
    """
    if not isinstance(img, np.ndarray):
        raise ImageValidationError(
            f"The {label} must be a numpy array, got {type(img).__name__}."
        )
    if img.dtype != np.uint8:
        raise ImageValidationError(
            f"The {label} must be uint8, got dtype {img.dtype}."
        )
    if img.ndim not in (2, 3) or (img.ndim == 3 and img.shape[2] != 3):
        raise ImageValidationError(
            f"The {label} must be a grayscale or 3-channel BGR buffer. "
            f"Got shape {img.shape}."
        )

    h, w = img.shape[:2]
    if h < _MIN_DIMENSION_PX or w < _MIN_DIMENSION_PX:
        raise ImageValidationError(
            f"The {label} resolution ({w}×{h}px) is too small. "
            f"Both dimensions must be at least {_MIN_DIMENSION_PX}px."
        )
    return img


def validate_image_bytes(data: bytes, label: str = "image") -> np.ndarray:
    """
    Validate uploaded bytes and return the decoded BGR array.

    Checks: non-empty, size limit, magic bytes (JPEG / PNG / WebP),
    OpenCV decodability, then validate_image_array().
    """
    settings = get_settings()

    if not data:
        raise ImageValidationError(f"The {label} file is empty.")

    size_mb = len(data) / (1024 * 1024)
    if len(data) > settings.upload_max_bytes:
        raise ImageValidationError(
            f"The {label} file is {size_mb:.1f} MB, which exceeds the "
            f"maximum allowed size of {settings.upload_max_mb} MB."
        )

    fmt = _detect_format(data)
    if fmt is None:
        raise ImageValidationError(
            f"The {label} file format is not supported. "
            "Please upload a JPEG, PNG, or WebP image."
        )

    try:
        img = bytes_to_bgr(data)
    except ValueError as e:
        raise ImageValidationError(
            f"The {label} file could not be decoded. "
            "The file may be corrupted or truncated."
        ) from e

    validate_image_array(img, label=label)
    log.debug(
        "image_validated",
        label=label,
        format=fmt,
        shape=img.shape,
        size_mb=round(size_mb, 2),
    )
    return img
