"""Position options."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class PositionOptions:
    """Behaviour switches for a :class:`~chessbox.core.position.Position`.

    Args:
        verify_invariants: Rescan the grid after every ``apply``/``undo`` and
            raise :class:`~chessbox.core.errors.CorruptStateError` on any
            divergence. Slow; meant for move-generator development and tests.
        zobrist_seed: Seed for a private key table. ``None`` shares the
            default table, so keys are comparable across positions.
    """

    verify_invariants: bool = False
    zobrist_seed: int | None = None
