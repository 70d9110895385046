# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Image Conversion Utilities
All internal processing uses BGR uint8 numpy arrays (OpenCV convention).
Piece crops are stored as lossless PNG bytes.
"""

import cv2
import numpy as np


# ─── Encode / Decode ─────────────────────────────────────────────────────────

def bytes_to_bgr(data: bytes) -> np.ndarray:
    """Decode raw image bytes (upload or stored crop) to a BGR numpy array."""
    arr = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("Could not decode image bytes.")
    return img


def bgr_to_png_bytes(img: np.ndarray) -> bytes:
    """Encode a BGR numpy array to PNG bytes (lossless)."""
    success, buf = cv2.imencode(".png", img)
    if not success:
        raise RuntimeError("Failed to encode image to PNG bytes.")
    return buf.tobytes()


# ─── Color Space ─────────────────────────────────────────────────────────────

def bgr_to_gray(img: np.ndarray) -> np.ndarray:
    """Single-channel input is returned unchanged."""
    if img.ndim == 2:
        return img
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


# ─── Cropping ────────────────────────────────────────────────────────────────

def crop_rect(img: np.ndarray, x: int, y: int, w: int, h: int) -> np.ndarray:
    """
    Copy the (x, y, w, h) region out of img.
    Clamps to image boundaries; out-of-bounds coords never raise.
    """
    ih, iw = img.shape[:2]
    x1 = max(0, x)
    y1 = max(0, y)
    x2 = min(iw, x + w)
    y2 = min(ih, y + h)
    return img[y1:y2, x1:x2].copy()
