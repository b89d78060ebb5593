"""Zobrist keys for incremental position hashing."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from typing import Final

from chessbox.core.coords import Coord
from chessbox.core.enums import CastlingRights, Color
from chessbox.core.piece import Piece

DEFAULT_SEED: Final = 0xA5B3C7D9E1F23412
_MASK_64: Final = 0xFFFFFFFFFFFFFFFF

# Key table layout: 2*6*64 piece keys, 1 side key, 16 castling, 64 en passant.
_PIECE_SLOTS: Final = 2 * 6 * 64
_SIDE_SLOT: Final = _PIECE_SLOTS
_CASTLING_BASE: Final = _SIDE_SLOT + 1
_EN_PASSANT_BASE: Final = _CASTLING_BASE + 16


def _splitmix64(state: int) -> int:
    """Deterministic 64-bit bit-mixer suitable for static key generation."""
    z = (state + 0x9E3779B97F4A7C15) & _MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
    return z ^ (z >> 31)


class ZobristKeys:
    """Immutable table of 64-bit keys derived from a seed.

    A position key is the XOR of the keys of every piece on its square, the
    side key when Black is to move, the key of the castling-rights state and
    the en passant key when a target is set. XOR is its own inverse, so each
    change is applied and reverted with the same toggle.
    """

    __slots__ = ("seed", "_piece", "_side", "_castling", "_en_passant")

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self.seed = seed

        def nth(index: int) -> int:
            return _splitmix64((seed + index) & _MASK_64)

        # [color][piece_type-1][square]
        self._piece = tuple(
            tuple(
                tuple(nth(color * 384 + ptype * 64 + sq) for sq in range(64))
                for ptype in range(6)
            )
            for color in range(2)
        )
        self._side = nth(_SIDE_SLOT)
        self._castling = tuple(nth(_CASTLING_BASE + i) for i in range(16))
        self._en_passant = tuple(nth(_EN_PASSANT_BASE + sq) for sq in range(64))

    def piece(self, piece: Piece, coord: Coord) -> int:
        """Key for *piece* standing on *coord*."""
        return self._piece[int(piece.color)][piece.piece_type - 1][coord.square]

    def side_to_move(self) -> int:
        """Toggle key for Black to move."""
        return self._side

    def castling(self, rights: CastlingRights) -> int:
        return self._castling[int(rights) & 0xF]

    def en_passant(self, target: Coord) -> int:
        return self._en_passant[target.square]

    def compute(
        self,
        pieces: Iterable[tuple[Coord, Piece]],
        side_to_move: Color,
        castling: CastlingRights,
        en_passant: Coord | None,
    ) -> int:
        """Hash a full position from scratch."""
        key = self.castling(castling)
        if side_to_move == Color.BLACK:
            key ^= self._side
        if en_passant is not None:
            key ^= self.en_passant(en_passant)
        for coord, piece in pieces:
            key ^= self.piece(piece, coord)
        return key


@lru_cache(maxsize=None)
def keys_for_seed(seed: int = DEFAULT_SEED) -> ZobristKeys:
    """Shared key table for *seed*."""
    return ZobristKeys(seed)


def default_keys() -> ZobristKeys:
    """The process-wide default key table."""
    return keys_for_seed(DEFAULT_SEED)
