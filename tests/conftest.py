"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from chessbox.core.config import PositionOptions
from chessbox.core.coords import COORDS, Coord, File, Rank
from chessbox.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessbox.core.move import Transition
from chessbox.core.piece import Piece
from chessbox.core.position import Position

Walker = Callable[[Position, int], list[Transition]]

_PROMOTIONS = (PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)

# side -> (castle flag, right, rook file, squares that must be empty)
_CASTLES: dict[Color, tuple[tuple[MoveFlag, CastlingRights, File, tuple[File, ...]], ...]] = {
    Color.WHITE: (
        (MoveFlag.CASTLE_KINGSIDE, CastlingRights.WHITE_KINGSIDE, File.H, (File.F, File.G)),
        (MoveFlag.CASTLE_QUEENSIDE, CastlingRights.WHITE_QUEENSIDE, File.A, (File.B, File.C, File.D)),
    ),
    Color.BLACK: (
        (MoveFlag.CASTLE_KINGSIDE, CastlingRights.BLACK_KINGSIDE, File.H, (File.F, File.G)),
        (MoveFlag.CASTLE_QUEENSIDE, CastlingRights.BLACK_QUEENSIDE, File.A, (File.B, File.C, File.D)),
    ),
}


def _castle_options(pos: Position) -> list[Transition]:
    side = pos.side_to_move
    rank = Rank.ONE if side == Color.WHITE else Rank.EIGHT
    king_sq = Coord(File.E, rank)
    if pos.piece_at(king_sq) != Piece(side, PieceType.KING):
        return []
    options = []
    for flag, right, rook_file, between in _CASTLES[side]:
        if not pos.castling & right:
            continue
        if pos.piece_at(Coord(rook_file, rank)) != Piece(side, PieceType.ROOK):
            continue
        if any(pos.piece_at(Coord(f, rank)) is not None for f in between):
            continue
        to_file = File.G if flag == MoveFlag.CASTLE_KINGSIDE else File.C
        options.append(Transition(king_sq, Coord(to_file, rank), PieceType.KING, flag=flag))
    return options


def _en_passant_options(pos: Position) -> list[Transition]:
    target = pos.en_passant
    if target is None or pos.piece_at(target) is not None:
        return []
    side = pos.side_to_move
    step = 1 if side == Color.WHITE else -1
    victim_rank = target.rank - step
    if not 0 <= victim_rank <= 7:
        return []
    victim_sq = Coord(target.file, Rank(victim_rank))
    victim = pos.piece_at(victim_sq)
    if victim != Piece(side.opposite, PieceType.PAWN):
        return []
    options = []
    for df in (-1, 1):
        f = target.file + df
        if not 0 <= f <= 7:
            continue
        origin = Coord(File(f), Rank(victim_rank))
        if pos.piece_at(origin) == Piece(side, PieceType.PAWN):
            options.append(
                Transition(origin, target, PieceType.PAWN, captured=victim, flag=MoveFlag.EN_PASSANT)
            )
    return options


def random_transition(pos: Position, rng: random.Random) -> Transition:
    """A pseudo-legal-shaped transition: consistent with the board, not with chess rules."""
    specials = _castle_options(pos) + _en_passant_options(pos)
    if specials and rng.random() < 0.5:
        return rng.choice(specials)

    side = pos.side_to_move
    own = [(c, p) for c in COORDS if (p := pos.piece_at(c)) is not None and p.color == side]
    origin, mover = rng.choice(own)
    targets = [
        c
        for c in COORDS
        if c != origin
        and ((p := pos.piece_at(c)) is None or (p.color != side and p.piece_type != PieceType.KING))
    ]
    dest = rng.choice(targets)
    captured = pos.piece_at(dest)

    if mover.piece_type == PieceType.PAWN:
        last_rank = Rank.EIGHT if side == Color.WHITE else Rank.ONE
        start_rank = Rank.TWO if side == Color.WHITE else Rank.SEVEN
        double_rank = Rank.FOUR if side == Color.WHITE else Rank.FIVE
        if dest.rank == last_rank:
            return Transition(
                origin, dest, PieceType.PAWN, captured=captured,
                promotion=rng.choice(_PROMOTIONS), flag=MoveFlag.PROMOTION,
            )
        if (
            captured is None
            and origin.rank == start_rank
            and dest.rank == double_rank
            and origin.file == dest.file
        ):
            return Transition(origin, dest, PieceType.PAWN, flag=MoveFlag.DOUBLE_PAWN)
    return Transition(origin, dest, mover.piece_type, captured=captured)


@pytest.fixture
def start() -> Position:
    """Fresh standard starting position."""
    return Position.initial()


@pytest.fixture
def checked() -> Position:
    """Starting position that re-verifies itself after every apply/undo."""
    return Position.initial(PositionOptions(verify_invariants=True))


@pytest.fixture
def walk() -> Callable[[int], Walker]:
    """Factory of seeded walkers: ``walk(seed)(pos, n)`` applies *n* transitions."""

    def make(seed: int) -> Walker:
        rng = random.Random(seed)

        def run(pos: Position, n: int) -> list[Transition]:
            applied = []
            for _ in range(n):
                t = random_transition(pos, rng)
                pos.apply(t)
                applied.append(t)
            return applied

        return run

    return make
