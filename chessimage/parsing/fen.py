"""
FEN Parsing – Piece Placement → Board
=====================================

Responsibilities:
  1. Split a FEN string into its space-separated fields.
  2. Expand the piece-placement field into an 8×8 grid of cells.
  3. Report malformed placements with a specific ``ParseError``.

Only the placement field is checked.  Symbols are *not* validated: any
non-digit character is accepted as an occupant, and the trailing fields
(active colour, castling, en passant, move counters) are kept verbatim
without interpretation.

Board orientation:
  FEN lists ranks top-down (rank 8 first).  ``Board`` stores them
  bottom-up, so FEN segment ``i`` lands at board rank ``7 - i`` and
  ``board.rank(0)`` is the white back rank in the starting position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

log = logging.getLogger(__name__)


BOARD_RANKS: int = 8
BOARD_FILES: int = 8

EMPTY: str = "_"  # marker for an unoccupied cell

# Canonical symbols: lowercase = black, uppercase = white
PIECE_SYMBOLS: Tuple[str, ...] = (
    "r", "n", "b", "q", "k", "p",
    "R", "N", "B", "Q", "K", "P",
)


# ── Errors ─────────────────────────────────────────────────────────────

class ParseError(ValueError):
    """A FEN placement field could not be turned into a board."""

    reason: str = "bad_fen"


class BadRankCount(ParseError):
    """The placement did not split into exactly 8 ``/``-separated ranks."""

    reason = "bad_rank_count"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Bad fen: expected {BOARD_RANKS} ranks, got {count}")


class BadRankLength(ParseError):
    """A rank did not expand to exactly 8 cells."""

    reason = "bad_rank_length"

    def __init__(self, rank: int, length: int) -> None:
        self.rank = rank          # chess rank number, 8 … 1
        self.length = length
        super().__init__(
            f"Bad fen: rank {rank} has {length} squares "
            f"(expected {BOARD_FILES})"
        )


# ── Data structures ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Board:
    """Immutable 8×8 grid indexed ``[rank][file]``, rank 0 at the bottom."""
    ranks: Tuple[Tuple[str, ...], ...]

    def __post_init__(self) -> None:
        if len(self.ranks) != BOARD_RANKS or any(
            len(rank) != BOARD_FILES for rank in self.ranks
        ):
            raise ValueError("Board must have 8 ranks of 8 cells")

    def __getitem__(self, square: Tuple[int, int]) -> str:
        rank, file = square
        return self.ranks[rank][file]

    def rank(self, index: int) -> Tuple[str, ...]:
        """Return board rank *index* (0 = bottom) as a tuple of cells."""
        return self.ranks[index]

    def piece_at(self, rank: int, file: int) -> Optional[str]:
        """Return the occupant at ``(rank, file)`` or ``None`` if empty."""
        cell = self.ranks[rank][file]
        return None if cell == EMPTY else cell

    def occupied(self) -> Iterator[Tuple[int, int, str]]:
        """Yield ``(rank, file, symbol)`` for every occupied cell."""
        for r, rank in enumerate(self.ranks):
            for f, cell in enumerate(rank):
                if cell != EMPTY:
                    yield r, f, cell

    def symbols(self) -> frozenset:
        """Distinct occupant symbols present on the board."""
        return frozenset(symbol for _, _, symbol in self.occupied())

    def to_text(self) -> str:
        """Render the grid as text, top rank first, one line per rank."""
        return "\n".join(" ".join(rank) for rank in reversed(self.ranks))


@dataclass(frozen=True)
class Position:
    """A parsed board plus the raw trailing FEN fields.

    The trailing fields are the literal text of each space-separated
    field (``None`` when the FEN stops early).  They are not validated.
    """
    board: Board
    active: Optional[str] = None
    castling: Optional[str] = None
    en_passant: Optional[str] = None
    halfmove: Optional[str] = None
    fullmove: Optional[str] = None


# ── Parsing ────────────────────────────────────────────────────────────

def _expand_rank(segment: str, rank_number: int) -> Tuple[str, ...]:
    cells = []
    for ch in segment:
        if "0" <= ch <= "9":
            cells.extend([EMPTY] * int(ch))
        else:
            cells.append(ch)
    if len(cells) != BOARD_FILES:
        raise BadRankLength(rank_number, len(cells))
    return tuple(cells)


def parse_placement(placement: str) -> Board:
    """Expand a FEN piece-placement field into a ``Board``.

    Parameters
    ----------
    placement : str
        e.g. ``rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR``.

    Returns
    -------
    Board

    Raises
    ------
    BadRankCount
        If the field does not contain exactly 8 ranks.
    BadRankLength
        If a rank does not expand to exactly 8 cells.
    """
    segments = placement.split("/")
    if len(segments) != BOARD_RANKS:
        raise BadRankCount(len(segments))

    ranks = [()] * BOARD_RANKS
    for i, segment in enumerate(segments):
        # Segment 0 is rank 8 and goes to the top of the board
        ranks[BOARD_RANKS - 1 - i] = _expand_rank(segment, BOARD_RANKS - i)
    return Board(ranks=tuple(ranks))


def parse_fen(fen: str) -> Board:
    """Parse the piece placement of *fen*, ignoring any trailing fields."""
    return parse_placement(fen.split(" ")[0])


def parse_position(fen: str) -> Position:
    """Parse *fen* into a ``Position`` keeping the trailing fields raw."""
    fields = fen.split(" ")
    board = parse_placement(fields[0])
    extra = fields[1:6] + [None] * (5 - len(fields[1:6]))
    return Position(board, *extra)


def log_board(board: Board, level: int = logging.DEBUG) -> None:
    """Write the board to the module logger, one rank per line."""
    for r in range(BOARD_RANKS - 1, -1, -1):
        log.log(level, "%d %s", r + 1, " ".join(board.rank(r)))
