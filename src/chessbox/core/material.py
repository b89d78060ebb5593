"""Material - piece counters, pawn bitboards and king cache.

Every value here is derivable by scanning the :class:`~chessbox.core.board.Board`.
They are kept as caches so search and evaluation never rescan the grid, and
are only ever changed through :meth:`Material.add` / :meth:`Material.remove`.
"""

from __future__ import annotations

from dataclasses import dataclass

from chessbox.core.board import Board
from chessbox.core.coords import Coord
from chessbox.core.enums import Color, PieceType
from chessbox.core.piece import Piece

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2


@dataclass(frozen=True, slots=True)
class MaterialSummary:
    """Comparable snapshot of a :class:`Material`, indexed by ``int(color)``."""

    counts: tuple[tuple[int, ...], ...]
    pawns: tuple[int, ...]
    big: tuple[int, ...]
    major: tuple[int, ...]
    minor: tuple[int, ...]
    kings: tuple[Coord | None, ...]


class Material:
    """Per-color aggregate counters layered on the board grid."""

    __slots__ = ("_counts", "_pawns", "_big", "_major", "_minor", "_kings")

    def __init__(self) -> None:
        # [color][piece_type-1] -> number of pieces.
        self._counts: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        # [color] -> bitboard of pawn squares.
        self._pawns: list[int] = [0] * _COLOR_COUNT
        self._big: list[int] = [0] * _COLOR_COUNT
        self._major: list[int] = [0] * _COLOR_COUNT
        self._minor: list[int] = [0] * _COLOR_COUNT
        # [color] -> king square cache (None if king missing).
        self._kings: list[Coord | None] = [None] * _COLOR_COUNT

    @classmethod
    def from_board(cls, board: Board) -> Material:
        """Recompute every counter by scanning *board*."""
        material = cls()
        for coord, piece in board.occupied():
            material.add(piece, coord)
        return material

    # -- Mutation -----------------------------------------------------------

    def add(self, piece: Piece, coord: Coord) -> None:
        """Account for *piece* arriving on *coord*."""
        c = int(piece.color)
        self._counts[c][piece.piece_type - 1] += 1
        if piece.piece_type == PieceType.PAWN:
            self._pawns[c] |= coord.bit
            return
        self._big[c] += 1
        if piece.is_major:
            self._major[c] += 1
        elif piece.is_minor:
            self._minor[c] += 1
        elif piece.piece_type == PieceType.KING:
            self._kings[c] = coord

    def remove(self, piece: Piece, coord: Coord) -> None:
        """Account for *piece* leaving *coord*."""
        c = int(piece.color)
        self._counts[c][piece.piece_type - 1] -= 1
        if piece.piece_type == PieceType.PAWN:
            self._pawns[c] &= ~coord.bit
            return
        self._big[c] -= 1
        if piece.is_major:
            self._major[c] -= 1
        elif piece.is_minor:
            self._minor[c] -= 1
        elif piece.piece_type == PieceType.KING and self._kings[c] == coord:
            self._kings[c] = None

    # -- Queries ------------------------------------------------------------

    def count(self, color: Color | None, piece_type: PieceType) -> int:
        """Number of *piece_type* pieces; ``color=None`` counts both sides."""
        idx = piece_type - 1
        if color is None:
            return self._counts[0][idx] + self._counts[1][idx]
        return self._counts[int(color)][idx]

    def pawns_bitboard(self, color: Color | None = None) -> int:
        """Pawn bitboard; ``color=None`` gives the union of both sides."""
        if color is None:
            return self._pawns[0] | self._pawns[1]
        return self._pawns[int(color)]

    def big_pieces(self, color: Color) -> int:
        return self._big[int(color)]

    def major_pieces(self, color: Color) -> int:
        return self._major[int(color)]

    def minor_pieces(self, color: Color) -> int:
        return self._minor[int(color)]

    def king_square(self, color: Color) -> Coord | None:
        return self._kings[int(color)]

    # -- Copying / comparison -----------------------------------------------

    def summary(self) -> MaterialSummary:
        return MaterialSummary(
            counts=tuple(tuple(row) for row in self._counts),
            pawns=tuple(self._pawns),
            big=tuple(self._big),
            major=tuple(self._major),
            minor=tuple(self._minor),
            kings=tuple(self._kings),
        )

    def copy(self) -> Material:
        m = Material.__new__(Material)
        m._counts = [row.copy() for row in self._counts]
        m._pawns = self._pawns.copy()
        m._big = self._big.copy()
        m._major = self._major.copy()
        m._minor = self._minor.copy()
        m._kings = self._kings.copy()
        return m

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Material):
            return NotImplemented
        return self.summary() == other.summary()

    def __repr__(self) -> str:
        return f"Material({self.summary()!r})"
