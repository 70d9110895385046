# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Piece Repository
Persistence interface for extracted pieces, keyed by puzzle_id.
Handed to the AnalysisService by its caller; the core pipeline never
touches it.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Optional

from jigsawsolver.models.piece import PuzzlePiece
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


class PieceRepository(ABC):

    @abstractmethod
    def insert_pieces(self, pieces: Iterable[PuzzlePiece]) -> int:
        """
        Store pieces, replacing any existing record with the same
        (puzzle_id, piece_id). Returns the number stored.
        """

    @abstractmethod
    def get_pieces(self, puzzle_id: str) -> list[PuzzlePiece]:
        """All pieces of a puzzle, oldest first (ties by piece_id)."""

    @abstractmethod
    def get_piece(self, puzzle_id: str, piece_id: int) -> Optional[PuzzlePiece]:
        """One piece, or None."""

    @abstractmethod
    def delete_piece(self, piece: PuzzlePiece) -> bool:
        """Remove one piece. Returns True if it was stored."""

    @abstractmethod
    def delete_puzzle(self, puzzle_id: str) -> int:
        """Remove every piece of a puzzle. Returns the count removed."""

    @abstractmethod
    def all_pieces(self) -> list[PuzzlePiece]:
        """Every stored piece, newest first."""

    def puzzle_ids(self) -> list[str]:
        seen: dict[str, None] = {}
        for p in reversed(self.all_pieces()):
            seen.setdefault(p.puzzle_id, None)
        return list(seen)


class InMemoryPieceRepository(PieceRepository):
    """Thread-safe dict-backed repository. Data is lost on restart."""

    def __init__(self) -> None:
        self._pieces: dict[tuple[str, int], PuzzlePiece] = {}
        self._lock = threading.RLock()

    def insert_pieces(self, pieces: Iterable[PuzzlePiece]) -> int:
        # Byte-identical crops within one batch are the same physical piece
        unique: dict[tuple[str, bytes], PuzzlePiece] = {}
        for p in pieces:
            unique.setdefault(p.content_key(), p)

        with self._lock:
            for p in unique.values():
                self._pieces[(p.puzzle_id, p.piece_id)] = p

        log.info("pieces_inserted", count=len(unique))
        return len(unique)

    def get_pieces(self, puzzle_id: str) -> list[PuzzlePiece]:
        with self._lock:
            pieces = [p for (pid, _), p in self._pieces.items() if pid == puzzle_id]
        return sorted(pieces, key=lambda p: (p.timestamp, p.piece_id))

    def get_piece(self, puzzle_id: str, piece_id: int) -> Optional[PuzzlePiece]:
        with self._lock:
            return self._pieces.get((puzzle_id, piece_id))

    def delete_piece(self, piece: PuzzlePiece) -> bool:
        key = (piece.puzzle_id, piece.piece_id)
        with self._lock:
            stored = self._pieces.get(key)
            if stored is None or stored != piece:
                return False
            del self._pieces[key]
        return True

    def delete_puzzle(self, puzzle_id: str) -> int:
        with self._lock:
            keys = [k for k in self._pieces if k[0] == puzzle_id]
            for k in keys:
                del self._pieces[k]
        log.info("puzzle_deleted", puzzle_id=puzzle_id, removed=len(keys))
        return len(keys)

    def all_pieces(self) -> list[PuzzlePiece]:
        with self._lock:
            pieces = list(self._pieces.values())
        return sorted(pieces, key=lambda p: (p.timestamp, p.piece_id), reverse=True)
