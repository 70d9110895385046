# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Analysis Modules
Each subpackage is one stage of the core pipeline:

  preprocessing  — image validation + grayscale / blur / adaptive threshold
  segmentation   — external contour extraction + area filter
  features       — per-contour geometry, border, edge shape, dominant color
  matching       — pairwise color / edge / shape scoring and ranking
"""
