# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — /puzzles
Read and delete persisted pieces, grouped by puzzle_id.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response

from jigsawsolver.api.middleware.error_handler import PuzzleNotFoundError
from jigsawsolver.dependencies import PieceRepositoryDep
from jigsawsolver.models.piece import piece_summary

router = APIRouter(tags=["puzzles"])


@router.get("/puzzles", summary="List stored puzzle ids")
async def list_puzzles(repo: PieceRepositoryDep) -> dict:
    return {"puzzle_ids": repo.puzzle_ids()}


@router.get("/puzzles/{puzzle_id}/pieces", summary="List pieces of a puzzle")
async def list_pieces(puzzle_id: str, repo: PieceRepositoryDep) -> dict:
    pieces = repo.get_pieces(puzzle_id)
    if not pieces:
        raise PuzzleNotFoundError(puzzle_id)
    return {
        "puzzle_id": puzzle_id,
        "pieces": [piece_summary(p) for p in pieces],
    }


@router.get(
    "/puzzles/{puzzle_id}/pieces/{piece_id}/image",
    summary="PNG crop of one piece",
    response_class=Response,
)
async def piece_image(puzzle_id: str, piece_id: int, repo: PieceRepositoryDep) -> Response:
    piece = repo.get_piece(puzzle_id, piece_id)
    if piece is None:
        raise PuzzleNotFoundError(f"{puzzle_id}/{piece_id}")
    return Response(content=piece.image_data, media_type="image/png")


@router.delete("/puzzles/{puzzle_id}", summary="Delete all pieces of a puzzle")
async def delete_puzzle(puzzle_id: str, repo: PieceRepositoryDep) -> dict:
    removed = repo.delete_puzzle(puzzle_id)
    if removed == 0:
        raise PuzzleNotFoundError(puzzle_id)
    return {"puzzle_id": puzzle_id, "removed": removed}
