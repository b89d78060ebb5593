"""History stack of undo records."""

from __future__ import annotations

from dataclasses import dataclass

from chessbox.core.coords import Coord
from chessbox.core.enums import CastlingRights
from chessbox.core.errors import EmptyHistoryError
from chessbox.core.move import Transition


@dataclass(frozen=True, slots=True)
class Undo:
    """State captured immediately before *transition* was applied."""

    transition: Transition
    castling: CastlingRights
    en_passant: Coord | None
    fifty_move_counter: int
    position_key: int


class History:
    """LIFO of :class:`Undo` records; only the newest one can be reversed."""

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: list[Undo] = []

    def push(self, record: Undo) -> None:
        self._records.append(record)

    def pop(self) -> Undo:
        """Remove and return the newest record."""
        if not self._records:
            raise EmptyHistoryError()
        return self._records.pop()

    @property
    def last(self) -> Undo | None:
        return self._records[-1] if self._records else None

    def copy(self) -> History:
        h = History()
        h._records = self._records.copy()
        return h

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)
