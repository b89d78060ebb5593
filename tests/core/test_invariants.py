"""Randomised apply/undo walks checking the bookkeeping invariants."""

from collections.abc import Callable

import pytest

from chessbox.core.board import OFF_BOARD
from chessbox.core.coords import COORDS, GRID_SIZE, PLAYABLE_INDICES
from chessbox.core.enums import Color, PieceType
from chessbox.core.position import Position

SEEDS = [1, 2, 3, 17, 2024]


def _scan(pos: Position) -> dict[str, object]:
    """Counters rebuilt from nothing but square reads."""
    counts = {(c, pt): 0 for c in Color for pt in PieceType}
    pawns = {c: 0 for c in Color}
    kings = {}
    for coord in COORDS:
        piece = pos.piece_at(coord)
        if piece is None:
            continue
        counts[(piece.color, piece.piece_type)] += 1
        if piece.piece_type == PieceType.PAWN:
            pawns[piece.color] |= coord.bit
        if piece.piece_type == PieceType.KING:
            kings[piece.color] = coord
    return {"counts": counts, "pawns": pawns, "kings": kings}


def _cached(pos: Position) -> dict[str, object]:
    return {
        "counts": {
            (c, pt): pos.piece_count(c, pt) for c in Color for pt in PieceType
        },
        "pawns": {c: pos.pawns_bitboard(c) for c in Color},
        "kings": {c: pos.king_square(c) for c in Color},
    }


def _assert_sentinels(pos: Position) -> None:
    for i in range(GRID_SIZE):
        if i not in PLAYABLE_INDICES:
            assert pos[i] is OFF_BOARD


class TestRandomWalks:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_each_step_round_trips(self, seed: int, walk: Callable) -> None:
        pos = Position.initial()
        step = walk(seed)
        for _ in range(150):
            before = pos.snapshot()
            (t,) = step(pos, 1)
            copy = pos.copy()
            pos.undo()
            assert pos.snapshot() == before, f"undo of {t} did not restore state"
            pos = copy

    @pytest.mark.parametrize("seed", SEEDS)
    def test_recompute_matches_incremental(self, seed: int, walk: Callable) -> None:
        pos = Position.initial()
        step = walk(seed)
        for _ in range(150):
            step(pos, 1)
            assert _cached(pos) == _scan(pos)
            for color in Color:
                big = sum(
                    pos.piece_count(color, pt) for pt in PieceType if pt != PieceType.PAWN
                )
                assert pos.big_pieces(color) == big
                assert pos.major_pieces(color) == (
                    pos.piece_count(color, PieceType.ROOK)
                    + pos.piece_count(color, PieceType.QUEEN)
                )
                assert pos.minor_pieces(color) == (
                    pos.piece_count(color, PieceType.KNIGHT)
                    + pos.piece_count(color, PieceType.BISHOP)
                )
            pos.verify()

    @pytest.mark.parametrize("n", [0, 1, 2, 7, 40, 120])
    def test_key_sequence_unwinds(self, n: int, walk: Callable) -> None:
        pos = Position.initial()
        initial = pos.snapshot()
        keys = [pos.key]
        step = walk(n)
        for _ in range(n):
            step(pos, 1)
            keys.append(pos.key)
        assert pos.ply == n
        for expected in reversed(keys[:-1]):
            pos.undo()
            assert pos.key == expected
        assert pos.snapshot() == initial
        _assert_sentinels(pos)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_sentinels_survive_walk(self, seed: int, walk: Callable) -> None:
        pos = Position.initial()
        walk(seed)(pos, 100)
        _assert_sentinels(pos)
        while pos.history_length:
            pos.undo()
        _assert_sentinels(pos)
        assert pos.snapshot() == Position.initial().snapshot()

    def test_walk_with_verification_enabled(self, checked: Position, walk: Callable) -> None:
        walk(99)(checked, 200)
        while checked.history_length:
            checked.undo()
        assert checked.ply == 0
