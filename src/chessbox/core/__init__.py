"""Core position layer — mailbox grid, aggregate state and reversible history.

Quick start::

    from chessbox.core import E2, E4, MoveFlag, PieceType, Position, Transition

    pos = Position.initial()
    pos.apply(Transition(E2, E4, PieceType.PAWN, flag=MoveFlag.DOUBLE_PAWN))
    pos.undo()
"""

from chessbox.core.board import OFF_BOARD, Board, Cell, OffBoard
from chessbox.core.config import PositionOptions
from chessbox.core.coords import (
    A1,
    A8,
    E1,
    E2,
    E4,
    E8,
    GRID_SIZE,
    H1,
    H8,
    PLAYABLE_INDICES,
    Coord,
    File,
    Rank,
    is_playable,
    to_index,
)
from chessbox.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessbox.core.errors import (
    ChessboxError,
    CorruptStateError,
    EmptyHistoryError,
    OffBoardError,
    TransitionError,
)
from chessbox.core.history import History, Undo
from chessbox.core.material import Material, MaterialSummary
from chessbox.core.move import Transition
from chessbox.core.piece import Piece
from chessbox.core.position import Position, PositionSnapshot, standard_placement
from chessbox.core.zobrist import ZobristKeys, default_keys

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "MoveFlag",
    "PieceType",
    # Coordinates
    "A1",
    "A8",
    "E1",
    "E2",
    "E4",
    "E8",
    "GRID_SIZE",
    "H1",
    "H8",
    "PLAYABLE_INDICES",
    "Coord",
    "File",
    "Rank",
    "is_playable",
    "to_index",
    # Domain objects
    "Board",
    "Cell",
    "History",
    "Material",
    "MaterialSummary",
    "OFF_BOARD",
    "OffBoard",
    "Piece",
    "Position",
    "PositionOptions",
    "PositionSnapshot",
    "Transition",
    "Undo",
    "ZobristKeys",
    "default_keys",
    "standard_placement",
    # Errors
    "ChessboxError",
    "CorruptStateError",
    "EmptyHistoryError",
    "OffBoardError",
    "TransitionError",
]
