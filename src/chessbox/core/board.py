"""Board - sentinel-padded mailbox grid."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Final, TypeAlias

from chessbox.core.coords import COORDS, GRID_SIZE, Coord, is_playable
from chessbox.core.errors import OffBoardError
from chessbox.core.piece import Piece


class OffBoard(Enum):
    """Sentinel marking a grid cell outside the playable region."""

    OFF_BOARD = "off-board"

    def __repr__(self) -> str:
        return "OFF_BOARD"


OFF_BOARD: Final = OffBoard.OFF_BOARD

# Empty is ``None``.
Cell: TypeAlias = Piece | None | OffBoard


class Board:
    """Fixed 120-cell grid mapping a padded index to its occupant.

    Sliding-ray scans step through raw indexes and stop on :data:`OFF_BOARD`
    instead of range-checking every step.
    """

    __slots__ = ("_cells",)

    def __init__(self) -> None:
        self._cells: list[Cell] = [OFF_BOARD] * GRID_SIZE
        for coord in COORDS:
            self._cells[coord.index] = None

    # -- Element access -----------------------------------------------------

    def __getitem__(self, where: Coord | int) -> Cell:
        if isinstance(where, Coord):
            return self._cells[where.index]
        return self._cells[where]

    def __setitem__(self, where: Coord | int, piece: Piece | None) -> None:
        index = where.index if isinstance(where, Coord) else where
        if not is_playable(index):
            raise OffBoardError(index)
        self._cells[index] = piece

    def piece_at(self, coord: Coord) -> Piece | None:
        cell = self._cells[coord.index]
        assert cell is not OFF_BOARD
        return cell

    def is_empty(self, coord: Coord) -> bool:
        return self._cells[coord.index] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Coord, Piece]]:
        """Yield ``(coord, piece)`` for every occupied square, a1 to h8."""
        cells = self._cells
        for coord in COORDS:
            piece = cells[coord.index]
            if isinstance(piece, Piece):
                yield coord, piece

    def rows(self) -> tuple[tuple[Piece | None, ...], ...]:
        """8x8 occupancy snapshot indexed ``[rank][file]`` (rank 1 first)."""
        return tuple(
            tuple(self.piece_at(COORDS[rank * 8 + file]) for file in range(8))
            for rank in range(8)
        )

    @property
    def cells(self) -> tuple[Cell, ...]:
        """All 120 cells, sentinels included."""
        return tuple(self._cells)

    # -- Copying ------------------------------------------------------------

    def copy(self) -> Board:
        b = Board.__new__(Board)
        b._cells = self._cells.copy()
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        lines: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self.piece_at(COORDS[rank * 8 + file])
                row.append(p.symbol if p else "·")
            lines.append(f"{rank + 1} {' '.join(row)}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
