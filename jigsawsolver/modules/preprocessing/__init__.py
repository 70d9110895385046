# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Preprocessing Module
Public API for the preprocessing stage.
"""

from jigsawsolver.modules.preprocessing.thresholder import (
    adaptive_binarize,
    denoise,
    preprocess,
)
from jigsawsolver.modules.preprocessing.validator import (
    validate_image_array,
    validate_image_bytes,
)

__all__ = [
    # Validator
    "validate_image_array",
    "validate_image_bytes",
    # Thresholder
    "denoise",
    "adaptive_binarize",
    "preprocess",
]
