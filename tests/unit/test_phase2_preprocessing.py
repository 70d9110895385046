# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 2 — Preprocessing module tests.
Covers the validator (buffers and uploaded bytes) and the
grayscale / blur / adaptive-threshold chain.
"""

import cv2
import numpy as np
import pytest


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _make_bgr_array(h: int, w: int, color: tuple = (100, 150, 200)) -> np.ndarray:
    """Create a solid-colour BGR uint8 array."""
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[:] = color
    return img


def _make_scene(h: int = 200, w: int = 300) -> np.ndarray:
    """Bright square on a black background, away from the image edges."""
    img = np.zeros((h, w, 3), dtype=np.uint8)
    cv2.rectangle(img, (100, 50), (199, 149), (200, 200, 200), -1)
    return img


def _encode_png(img: np.ndarray) -> bytes:
    _, buf = cv2.imencode(".png", img)
    return buf.tobytes()


def _encode_jpeg(img: np.ndarray, quality: int = 90) -> bytes:
    _, buf = cv2.imencode(".jpg", img, [cv2.IMWRITE_JPEG_QUALITY, quality])
    return buf.tobytes()


# ─── Validator: arrays ───────────────────────────────────────────────────────

def test_validate_array_accepts_bgr():
    from jigsawsolver.modules.preprocessing.validator import validate_image_array
    img = _make_bgr_array(64, 64)
    assert validate_image_array(img) is img


def test_validate_array_accepts_grayscale():
    from jigsawsolver.modules.preprocessing.validator import validate_image_array
    gray = np.zeros((32, 48), dtype=np.uint8)
    assert validate_image_array(gray) is gray


def test_validate_array_rejects_non_array():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    from jigsawsolver.modules.preprocessing.validator import validate_image_array
    with pytest.raises(ImageValidationError, match="numpy array"):
        validate_image_array([[0, 0], [0, 0]])


def test_validate_array_rejects_float_dtype():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    from jigsawsolver.modules.preprocessing.validator import validate_image_array
    with pytest.raises(ImageValidationError, match="uint8"):
        validate_image_array(np.zeros((64, 64, 3), dtype=np.float32))


def test_validate_array_rejects_rgba():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    from jigsawsolver.modules.preprocessing.validator import validate_image_array
    with pytest.raises(ImageValidationError, match="3-channel"):
        validate_image_array(np.zeros((64, 64, 4), dtype=np.uint8))


def test_validate_array_rejects_tiny_image():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    from jigsawsolver.modules.preprocessing.validator import validate_image_array
    with pytest.raises(ImageValidationError, match="too small"):
        validate_image_array(np.zeros((5, 64, 3), dtype=np.uint8))


def test_image_validation_error_is_value_error():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    assert issubclass(ImageValidationError, ValueError)


# ─── Validator: bytes ────────────────────────────────────────────────────────

def test_validate_png_bytes():
    from jigsawsolver.modules.preprocessing.validator import validate_image_bytes
    img = _make_bgr_array(100, 120)
    result = validate_image_bytes(_encode_png(img), label="test")
    assert result.shape == (100, 120, 3)
    assert np.array_equal(result, img)


def test_validate_jpeg_bytes():
    from jigsawsolver.modules.preprocessing.validator import validate_image_bytes
    result = validate_image_bytes(_encode_jpeg(_make_bgr_array(80, 80)))
    assert result.shape == (80, 80, 3)


def test_validate_empty_bytes_raises():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    from jigsawsolver.modules.preprocessing.validator import validate_image_bytes
    with pytest.raises(ImageValidationError, match="empty"):
        validate_image_bytes(b"")


def test_validate_unknown_format_raises():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    from jigsawsolver.modules.preprocessing.validator import validate_image_bytes
    with pytest.raises(ImageValidationError, match="not supported"):
        validate_image_bytes(b"GIF89a" + b"\x00" * 64)


def test_validate_truncated_png_raises():
    from jigsawsolver.api.middleware.error_handler import ImageValidationError
    from jigsawsolver.modules.preprocessing.validator import validate_image_bytes
    data = _encode_png(_make_bgr_array(64, 64))[:20]
    with pytest.raises(ImageValidationError):
        validate_image_bytes(data)


# ─── Thresholder ─────────────────────────────────────────────────────────────

def test_preprocess_returns_binary_mask_same_size():
    from jigsawsolver.modules.preprocessing.thresholder import preprocess
    mask = preprocess(_make_scene())
    assert mask.shape == (200, 300)
    assert mask.dtype == np.uint8
    assert set(np.unique(mask).tolist()) <= {0, 255}


def test_preprocess_uniform_image_is_empty():
    from jigsawsolver.modules.preprocessing.thresholder import preprocess
    mask = preprocess(_make_bgr_array(100, 100, (90, 90, 90)))
    assert not mask.any()


def test_preprocess_marks_dark_side_of_boundary():
    from jigsawsolver.modules.preprocessing.thresholder import preprocess
    mask = preprocess(_make_scene())
    # Interior of the bright square sits above its local mean → background
    assert mask[100, 150] == 0
    # Dark pixels hugging the square fall below the local mean → foreground
    assert mask[100, 201] == 255
    # Far background is flat → background
    assert mask[10, 10] == 0


def test_preprocess_accepts_grayscale():
    from jigsawsolver.modules.preprocessing.thresholder import preprocess
    gray = cv2.cvtColor(_make_scene(), cv2.COLOR_BGR2GRAY)
    color_mask = preprocess(_make_scene())
    assert np.array_equal(preprocess(gray), color_mask)


def test_denoise_preserves_shape():
    from jigsawsolver.modules.preprocessing.thresholder import denoise
    gray = np.random.default_rng(0).integers(0, 255, (50, 60), dtype=np.uint8)
    out = denoise(gray)
    assert out.shape == gray.shape
    # Blur must reduce pixel-to-pixel variation
    assert np.abs(np.diff(out.astype(int), axis=1)).mean() < \
        np.abs(np.diff(gray.astype(int), axis=1)).mean()
