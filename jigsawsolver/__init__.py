# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""JigsawSolver — piece detection and pairwise interlock scoring."""

__version__ = "1.0.0"
