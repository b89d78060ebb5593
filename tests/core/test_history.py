"""Tests for the undo History stack."""

import pytest

from chessbox.core.coords import E2, E4, G1, F3
from chessbox.core.enums import CastlingRights, MoveFlag, PieceType
from chessbox.core.errors import EmptyHistoryError
from chessbox.core.history import History, Undo
from chessbox.core.move import Transition


def _record(t: Transition, key: int) -> Undo:
    return Undo(t, CastlingRights.ALL, None, 0, key)


class TestHistory:
    def test_lifo(self) -> None:
        history = History()
        first = _record(Transition(E2, E4, PieceType.PAWN, flag=MoveFlag.DOUBLE_PAWN), 1)
        second = _record(Transition(G1, F3, PieceType.KNIGHT), 2)
        history.push(first)
        history.push(second)
        assert len(history) == 2
        assert history.last is second
        assert history.pop() is second
        assert history.pop() is first
        assert not history

    def test_pop_empty_raises(self) -> None:
        history = History()
        with pytest.raises(EmptyHistoryError, match="No history to undo"):
            history.pop()
        assert len(history) == 0

    def test_empty_history_error_is_index_error(self) -> None:
        with pytest.raises(IndexError):
            History().pop()

    def test_copy_independence(self) -> None:
        history = History()
        history.push(_record(Transition(G1, F3, PieceType.KNIGHT), 5))
        copy = history.copy()
        copy.pop()
        assert len(history) == 1
        assert history.last is not None

    def test_record_is_immutable(self) -> None:
        record = _record(Transition(G1, F3, PieceType.KNIGHT), 5)
        with pytest.raises(AttributeError):
            record.position_key = 6  # type: ignore[misc]


class TestTransition:
    def test_uci(self) -> None:
        assert str(Transition(E2, E4, PieceType.PAWN)) == "e2e4"

    def test_uci_promotion(self) -> None:
        from chessbox.core.coords import E7, E8

        t = Transition(E7, E8, PieceType.PAWN, promotion=PieceType.QUEEN, flag=MoveFlag.PROMOTION)
        assert t.uci == "e7e8q"
