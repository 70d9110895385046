# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Dominant Color
Mean color of a piece's cropped region, used as a coarse similarity cue.
"""

import numpy as np


def _to_channel(value: float) -> int:
    return min(255, max(0, int(value)))


def dominant_color(roi: np.ndarray) -> tuple[int, int, int]:
    """
    Arithmetic mean per channel over the whole crop, truncated to int
    and clamped to [0, 255].

    Args:
        roi: BGR (H×W×3) or grayscale (H×W) uint8 crop.

    Returns:
        (r, g, b)
    """
    if roi.ndim == 2:
        v = _to_channel(float(roi.mean()))
        return v, v, v

    b, g, r = roi.reshape(-1, roi.shape[2])[:, :3].mean(axis=0)
    return _to_channel(r), _to_channel(g), _to_channel(b)
