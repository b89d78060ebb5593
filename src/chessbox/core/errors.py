"""Failure signals raised by the position layer.

None of these describe chess conditions. They report structural misuse of
the position (undoing nothing, writing outside the playable grid, applying a
transition that does not match the board) or a corrupted aggregate state.
"""

from __future__ import annotations


class ChessboxError(Exception):
    """Base class for every error raised by :mod:`chessbox.core`."""


class EmptyHistoryError(ChessboxError, IndexError):
    """``undo()`` was called with no applied transition to reverse."""

    def __init__(self) -> None:
        super().__init__("No history to undo")


class OffBoardError(ChessboxError, ValueError):
    """A grid index outside the playable 8x8 region was used as a square."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Grid index {index} is off the board")
        self.index = index


class TransitionError(ChessboxError, ValueError):
    """A transition descriptor disagrees with the current board."""


class CorruptStateError(ChessboxError, AssertionError):
    """Incrementally maintained state diverged from the board grid."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("Position state is corrupt: " + "; ".join(problems))
        self.problems = problems
