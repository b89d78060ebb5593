"""Transition descriptor supplied by move generation."""

from __future__ import annotations

from dataclasses import dataclass

from chessbox.core.coords import Coord
from chessbox.core.enums import MoveFlag, PieceType
from chessbox.core.piece import Piece

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Transition:
    """Immutable, pre-validated description of a single ply.

    ``captured`` is the piece removed by the move (for en passant, the pawn
    behind the destination). ``promotion`` is set together with
    :attr:`MoveFlag.PROMOTION`.
    """

    from_sq: Coord
    to_sq: Coord
    piece_type: PieceType
    captured: Piece | None = None
    promotion: PieceType | None = None
    flag: MoveFlag = MoveFlag.NORMAL

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_castle(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{self.from_sq}{self.to_sq}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)
