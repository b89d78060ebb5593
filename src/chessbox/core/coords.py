"""Coordinates and padded-grid index arithmetic.

Grid layout (10 columns x 12 rows, two sentinel rows above and below the
board, one sentinel column on each side):

    index = (rank + 2) * 10 + (file + 1)

    a1=21, b1=22, ..., h1=28
    a2=31, ..., h2=38
    ...
    a8=91, ..., h8=98

Every other index in ``range(120)`` is permanently off the board. Bitboards
and hash tables use the dense numbering ``square = rank * 8 + file`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from chessbox.core.errors import OffBoardError

GRID_SIZE: Final = 120


class File(IntEnum):
    """Board file a-h."""

    A = 0
    B = 1
    C = 2
    D = 3
    E = 4
    F = 5
    G = 6
    H = 7

    def to_char(self) -> str:
        return chr(ord("a") + self.value)


class Rank(IntEnum):
    """Board rank 1-8."""

    ONE = 0
    TWO = 1
    THREE = 2
    FOUR = 3
    FIVE = 4
    SIX = 5
    SEVEN = 6
    EIGHT = 7

    def to_char(self) -> str:
        return chr(ord("1") + self.value)


def to_index(file: File, rank: Rank) -> int:
    """Padded grid index of (*file*, *rank*)."""
    return (rank + 2) * 10 + (file + 1)


@dataclass(frozen=True, slots=True)
class Coord:
    """Immutable (file, rank) pair. Every instance is a playable square."""

    file: File
    rank: Rank

    @property
    def index(self) -> int:
        """Index into the 120-cell padded grid."""
        return to_index(self.file, self.rank)

    @property
    def square(self) -> int:
        """Dense square number 0-63 (a1=0, h8=63)."""
        return self.rank * 8 + self.file

    @property
    def bit(self) -> int:
        """Single-bit bitboard mask for this square."""
        return 1 << self.square

    def __str__(self) -> str:
        return self.file.to_char() + self.rank.to_char()

    @classmethod
    def parse(cls, name: str) -> Coord:
        """Parse an algebraic name, e.g. ``'e4'``."""
        if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
            raise ValueError(f"Invalid square name: {name!r}")
        return cls(File(ord(name[0]) - ord("a")), Rank(int(name[1]) - 1))

    @classmethod
    def from_index(cls, index: int) -> Coord:
        """Coordinate at a padded grid *index*; sentinel indexes raise."""
        try:
            return _BY_INDEX[index]
        except KeyError:
            raise OffBoardError(index) from None

    @classmethod
    def from_square(cls, square: int) -> Coord:
        """Coordinate for a dense square number 0-63."""
        return COORDS[square]


COORDS: Final = tuple(Coord(File(sq & 7), Rank(sq >> 3)) for sq in range(64))
_BY_INDEX: Final = {c.index: c for c in COORDS}
PLAYABLE_INDICES: Final = frozenset(_BY_INDEX)


def is_playable(index: int) -> bool:
    """Whether a grid index belongs to the 8x8 region."""
    return index in PLAYABLE_INDICES


# ── Named coordinate constants ──────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = COORDS[0:8]
A2, B2, C2, D2, E2, F2, G2, H2 = COORDS[8:16]
A3, B3, C3, D3, E3, F3, G3, H3 = COORDS[16:24]
A4, B4, C4, D4, E4, F4, G4, H4 = COORDS[24:32]
A5, B5, C5, D5, E5, F5, G5, H5 = COORDS[32:40]
A6, B6, C6, D6, E6, F6, G6, H6 = COORDS[40:48]
A7, B7, C7, D7, E7, F7, G7, H7 = COORDS[48:56]
A8, B8, C8, D8, E8, F8, G8, H8 = COORDS[56:64]
