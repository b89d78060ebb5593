"""Position — board grid + aggregate state with reversible apply/undo."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from chessbox.core.board import OFF_BOARD, Board, Cell
from chessbox.core.config import PositionOptions
from chessbox.core.coords import (
    A1,
    A8,
    GRID_SIZE,
    H1,
    H8,
    Coord,
    File,
    Rank,
    is_playable,
)
from chessbox.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessbox.core.errors import CorruptStateError, EmptyHistoryError, TransitionError
from chessbox.core.history import History, Undo
from chessbox.core.material import Material, MaterialSummary
from chessbox.core.move import Transition
from chessbox.core.piece import Piece
from chessbox.core.zobrist import default_keys, keys_for_seed

_LOGGER = logging.getLogger(__name__)

_BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

_ROOK_CORNERS: dict[Coord, CastlingRights] = {
    A1: CastlingRights.WHITE_QUEENSIDE,
    H1: CastlingRights.WHITE_KINGSIDE,
    A8: CastlingRights.BLACK_QUEENSIDE,
    H8: CastlingRights.BLACK_KINGSIDE,
}

# castle flag -> (rook origin file, rook destination file)
_ROOK_SLIDES: dict[MoveFlag, tuple[File, File]] = {
    MoveFlag.CASTLE_KINGSIDE: (File.H, File.F),
    MoveFlag.CASTLE_QUEENSIDE: (File.A, File.D),
}

_PROMOTABLE = frozenset(
    {PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN}
)


def standard_placement() -> dict[Coord, Piece]:
    """Piece placement of the standard starting position."""
    placement: dict[Coord, Piece] = {}
    for file, kind in zip(File, _BACK_RANK):
        placement[Coord(file, Rank.ONE)] = Piece(Color.WHITE, kind)
        placement[Coord(file, Rank.TWO)] = Piece(Color.WHITE, PieceType.PAWN)
        placement[Coord(file, Rank.SEVEN)] = Piece(Color.BLACK, PieceType.PAWN)
        placement[Coord(file, Rank.EIGHT)] = Piece(Color.BLACK, kind)
    return placement


@dataclass(frozen=True, slots=True)
class PositionSnapshot:
    """Every field of a position, frozen for equality checks."""

    cells: tuple[Cell, ...]
    material: MaterialSummary
    side_to_move: Color
    castling: CastlingRights
    en_passant: Coord | None
    fifty_move_counter: int
    key: int
    ply: int


class Position:
    """Full position: grid, counters, king cache, rights, clocks and key.

    The only mutation path is :meth:`apply` / :meth:`undo`. Every piece that
    lands on or leaves a square goes through :meth:`_put` / :meth:`_take`,
    which update the grid, the material counters and the key together.
    """

    __slots__ = (
        "_board",
        "_material",
        "_keys",
        "_options",
        "_side_to_move",
        "_castling",
        "_en_passant",
        "_fifty_move_counter",
        "_key",
        "_ply",
        "_history",
        "_key_counts",
    )

    def __init__(
        self,
        placement: Mapping[Coord, Piece] | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Coord | None = None,
        fifty_move_counter: int = 0,
        ply: int = 0,
        options: PositionOptions | None = None,
    ) -> None:
        self._options = options if options is not None else PositionOptions()
        seed = self._options.zobrist_seed
        self._keys = default_keys() if seed is None else keys_for_seed(seed)

        self._board = Board()
        self._material = Material()
        if placement is None:
            placement = standard_placement()
        for coord, piece in placement.items():
            self._board[coord] = piece
            self._material.add(piece, coord)

        self._side_to_move = side_to_move
        self._castling = castling
        self._en_passant = en_passant
        self._fifty_move_counter = fifty_move_counter
        self._ply = ply
        self._key = self._keys.compute(
            self._board.occupied(), side_to_move, castling, en_passant
        )
        self._history = History()
        self._key_counts: dict[int, int] = {self._key: 1}
        _LOGGER.debug("Position created: %d pieces, key %016x", len(placement), self._key)

    @classmethod
    def initial(cls, options: PositionOptions | None = None) -> Position:
        """Standard starting position."""
        return cls(options=options)

    # ── Core operations ──────────────────────────────────────────────────

    def apply(self, transition: Transition) -> None:
        """Apply *transition*, pushing an undo record first."""
        mover = self._check(transition)
        t = transition

        self._history.push(
            Undo(
                transition=t,
                castling=self._castling,
                en_passant=self._en_passant,
                fifty_move_counter=self._fifty_move_counter,
                position_key=self._key,
            )
        )

        self._take(t.from_sq)
        if t.captured is not None:
            self._take(self._capture_square(t))

        placed = mover
        if t.flag == MoveFlag.PROMOTION and t.promotion is not None:
            placed = Piece(mover.color, t.promotion)
        self._put(placed, t.to_sq)

        if t.flag in _ROOK_SLIDES:
            rook_from, rook_to = self._rook_slide(t)
            self._put(self._take(rook_from), rook_to)

        next_en_passant: Coord | None = None
        if t.flag == MoveFlag.DOUBLE_PAWN:
            next_en_passant = Coord(
                t.from_sq.file, Rank((t.from_sq.rank + t.to_sq.rank) // 2)
            )
        self._set_en_passant(next_en_passant)
        self._set_castling(self._castling_after(t, mover))

        if mover.piece_type == PieceType.PAWN or t.captured is not None:
            self._fifty_move_counter = 0
        else:
            self._fifty_move_counter += 1

        self._ply += 1
        self._side_to_move = self._side_to_move.opposite
        self._key ^= self._keys.side_to_move()
        self._key_counts[self._key] = self._key_counts.get(self._key, 0) + 1

        if self._options.verify_invariants:
            self.verify()

    def undo(self) -> Transition:
        """Reverse the most recent :meth:`apply` and return its transition."""
        if not self._history:
            _LOGGER.warning("undo() with empty history at ply %d", self._ply)
            raise EmptyHistoryError()
        record = self._history.pop()
        t = record.transition

        count = self._key_counts.get(self._key, 0) - 1
        if count > 0:
            self._key_counts[self._key] = count
        else:
            self._key_counts.pop(self._key, None)

        self._side_to_move = self._side_to_move.opposite
        self._key ^= self._keys.side_to_move()
        self._ply -= 1

        if t.flag in _ROOK_SLIDES:
            rook_from, rook_to = self._rook_slide(t)
            self._put(self._take(rook_to), rook_from)

        placed = self._take(t.to_sq)
        mover = placed
        if t.flag == MoveFlag.PROMOTION:
            mover = Piece(placed.color, PieceType.PAWN)
        self._put(mover, t.from_sq)
        if t.captured is not None:
            self._put(t.captured, self._capture_square(t))

        self._set_en_passant(record.en_passant)
        self._set_castling(record.castling)
        self._fifty_move_counter = record.fifty_move_counter

        if self._key != record.position_key:
            problems = [
                f"undo of {t} restored key {self._key:016x}, "
                f"expected {record.position_key:016x}"
            ]
            _LOGGER.error("Position key diverged: %s", problems[0])
            raise CorruptStateError(problems)

        if self._options.verify_invariants:
            self.verify()
        return t

    # ── Transition checks ────────────────────────────────────────────────

    def _check(self, t: Transition) -> Piece:
        """Cheap descriptor/board consistency checks; returns the mover."""
        board = self._board
        mover = board.piece_at(t.from_sq)
        if (
            mover is None
            or mover.color != self._side_to_move
            or mover.piece_type != t.piece_type
        ):
            raise self._reject(
                t,
                f"expected {self._side_to_move} {t.piece_type.name} on "
                f"{t.from_sq}, found {mover}",
            )
        if t.from_sq == t.to_sq:
            raise self._reject(t, "origin and destination are the same square")

        capture_sq = self._capture_square(t)
        occupant = board.piece_at(capture_sq)
        if occupant != t.captured:
            raise self._reject(
                t, f"{capture_sq} holds {occupant}, descriptor captures {t.captured}"
            )
        if t.captured is not None and t.captured.color == mover.color:
            raise self._reject(t, "cannot capture own piece")
        if t.flag == MoveFlag.EN_PASSANT and not board.is_empty(t.to_sq):
            raise self._reject(t, f"en passant destination {t.to_sq} is occupied")

        if t.flag == MoveFlag.PROMOTION and t.promotion not in _PROMOTABLE:
            raise self._reject(t, f"invalid promotion kind {t.promotion}")
        if t.flag != MoveFlag.PROMOTION and t.promotion is not None:
            raise self._reject(t, "promotion kind without PROMOTION flag")
        if (
            t.flag in (MoveFlag.DOUBLE_PAWN, MoveFlag.EN_PASSANT, MoveFlag.PROMOTION)
            and mover.piece_type != PieceType.PAWN
        ):
            raise self._reject(t, f"{t.flag.name} requires a pawn")

        if t.flag in _ROOK_SLIDES:
            if mover.piece_type != PieceType.KING:
                raise self._reject(t, "castling requires a king")
            if t.captured is not None:
                raise self._reject(t, "castling cannot capture")
            rook_from, rook_to = self._rook_slide(t)
            if t.to_sq in (rook_from, rook_to):
                raise self._reject(
                    t, f"king destination {t.to_sq} collides with the rook slide"
                )
            if board.piece_at(rook_from) != Piece(mover.color, PieceType.ROOK):
                raise self._reject(t, f"no castling rook on {rook_from}")
            if not board.is_empty(rook_to):
                raise self._reject(t, f"rook destination {rook_to} is occupied")
        return mover

    @staticmethod
    def _reject(t: Transition, reason: str) -> TransitionError:
        _LOGGER.warning("Rejected transition %s: %s", t, reason)
        return TransitionError(f"Inconsistent transition {t}: {reason}")

    @staticmethod
    def _capture_square(t: Transition) -> Coord:
        # En passant: the captured pawn sits beside the origin, behind the target.
        if t.flag == MoveFlag.EN_PASSANT:
            return Coord(t.to_sq.file, t.from_sq.rank)
        return t.to_sq

    @staticmethod
    def _rook_slide(t: Transition) -> tuple[Coord, Coord]:
        from_file, to_file = _ROOK_SLIDES[t.flag]
        rank = t.from_sq.rank
        return Coord(from_file, rank), Coord(to_file, rank)

    def _castling_after(self, t: Transition, mover: Piece) -> CastlingRights:
        rights = self._castling
        if mover.piece_type == PieceType.KING:
            if mover.color == Color.WHITE:
                rights &= ~CastlingRights.WHITE_BOTH
            else:
                rights &= ~CastlingRights.BLACK_BOTH
        for sq in (t.from_sq, t.to_sq):
            if sq in _ROOK_CORNERS:
                rights &= ~_ROOK_CORNERS[sq]
        return rights

    # ── Lock-step mutation helpers ───────────────────────────────────────

    def _put(self, piece: Piece, coord: Coord) -> None:
        occupant = self._board.piece_at(coord)
        if occupant is not None:
            _LOGGER.error("Refusing to place %s over %s on %s", piece, occupant, coord)
            raise CorruptStateError([f"{coord} already holds {occupant}"])
        self._board[coord] = piece
        self._material.add(piece, coord)
        self._key ^= self._keys.piece(piece, coord)

    def _take(self, coord: Coord) -> Piece:
        piece = self._board.piece_at(coord)
        assert piece is not None, f"no piece on {coord}"
        self._board[coord] = None
        self._material.remove(piece, coord)
        self._key ^= self._keys.piece(piece, coord)
        return piece

    def _set_castling(self, castling: CastlingRights) -> None:
        if castling == self._castling:
            return
        self._key ^= self._keys.castling(self._castling)
        self._castling = castling
        self._key ^= self._keys.castling(self._castling)

    def _set_en_passant(self, en_passant: Coord | None) -> None:
        if en_passant == self._en_passant:
            return
        if self._en_passant is not None:
            self._key ^= self._keys.en_passant(self._en_passant)
        self._en_passant = en_passant
        if self._en_passant is not None:
            self._key ^= self._keys.en_passant(self._en_passant)

    # ── Read access ──────────────────────────────────────────────────────

    def __getitem__(self, where: Coord | int) -> Cell:
        """Occupant of a coordinate or raw grid index (sentinels included)."""
        return self._board[where]

    def piece_at(self, coord: Coord) -> Piece | None:
        return self._board.piece_at(coord)

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def castling(self) -> CastlingRights:
        return self._castling

    @property
    def en_passant(self) -> Coord | None:
        return self._en_passant

    @property
    def fifty_move_counter(self) -> int:
        return self._fifty_move_counter

    @property
    def key(self) -> int:
        """Current Zobrist key."""
        return self._key

    @property
    def ply(self) -> int:
        return self._ply

    @property
    def options(self) -> PositionOptions:
        return self._options

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def last_transition(self) -> Transition | None:
        record = self._history.last
        return record.transition if record is not None else None

    def piece_count(self, color: Color | None, piece_type: PieceType) -> int:
        return self._material.count(color, piece_type)

    def pawns_bitboard(self, color: Color | None = None) -> int:
        return self._material.pawns_bitboard(color)

    def big_pieces(self, color: Color) -> int:
        return self._material.big_pieces(color)

    def major_pieces(self, color: Color) -> int:
        return self._material.major_pieces(color)

    def minor_pieces(self, color: Color) -> int:
        return self._material.minor_pieces(color)

    def king_square(self, color: Color) -> Coord:
        """Cached king coordinate for *color*."""
        sq = self._material.king_square(color)
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    def occupancy(self) -> tuple[tuple[Piece | None, ...], ...]:
        """8x8 snapshot indexed ``[rank][file]`` for renderers."""
        return self._board.rows()

    def repetition_count(self) -> int:
        """How many times the current key occurred along the applied line."""
        return self._key_counts.get(self._key, 0)

    # ── Verification / utilities ─────────────────────────────────────────

    def verify(self) -> None:
        """Recompute caches and key from the grid; raise on any divergence."""
        problems: list[str] = []
        cells = self._board.cells
        for index in range(GRID_SIZE):
            if (cells[index] is OFF_BOARD) == is_playable(index):
                problems.append(f"grid index {index} has wrong sentinel state")

        expected = Material.from_board(self._board)
        if expected != self._material:
            problems.append(
                f"material {self._material.summary()} != recomputed {expected.summary()}"
            )

        key = self._keys.compute(
            self._board.occupied(), self._side_to_move, self._castling, self._en_passant
        )
        if key != self._key:
            problems.append(f"key {self._key:016x} != recomputed {key:016x}")

        if problems:
            _LOGGER.error("Position invariants violated: %s", "; ".join(problems))
            raise CorruptStateError(problems)

    def snapshot(self) -> PositionSnapshot:
        return PositionSnapshot(
            cells=self._board.cells,
            material=self._material.summary(),
            side_to_move=self._side_to_move,
            castling=self._castling,
            en_passant=self._en_passant,
            fifty_move_counter=self._fifty_move_counter,
            key=self._key,
            ply=self._ply,
        )

    def copy(self) -> Position:
        """Independent clone, history included (one per search worker)."""
        pos = Position.__new__(Position)
        pos._board = self._board.copy()
        pos._material = self._material.copy()
        pos._keys = self._keys
        pos._options = self._options
        pos._side_to_move = self._side_to_move
        pos._castling = self._castling
        pos._en_passant = self._en_passant
        pos._fifty_move_counter = self._fifty_move_counter
        pos._key = self._key
        pos._ply = self._ply
        pos._history = self._history.copy()
        pos._key_counts = self._key_counts.copy()
        _LOGGER.debug("Position cloned at ply %d", self._ply)
        return pos

    def __repr__(self) -> str:
        ep = str(self._en_passant) if self._en_passant is not None else "-"
        return (
            f"{self._board!r}\n"
            f"{self._side_to_move} to move, castling {int(self._castling):04b}, "
            f"ep {ep}, fifty {self._fifty_move_counter}, ply {self._ply}, "
            f"key {self._key:016x}"
        )
