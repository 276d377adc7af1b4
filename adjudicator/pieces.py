from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


@dataclass(frozen=True)
class Square:
    """A board coordinate; file and rank both run 0..7 (a1 is (0, 0))."""

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not (0 <= self.file < 8 and 0 <= self.rank < 8):
            raise ValueError(f"Square out of range: ({self.file}, {self.rank})")

    @classmethod
    def parse(cls, name: str) -> "Square":
        if len(name) != 2 or name[0] not in FILE_NAMES or name[1] not in RANK_NAMES:
            raise ValueError(f"Invalid square name: {name!r}")
        return cls(FILE_NAMES.index(name[0]), RANK_NAMES.index(name[1]))

    @property
    def index(self) -> int:
        return self.rank * 8 + self.file

    @property
    def name(self) -> str:
        return FILE_NAMES[self.file] + RANK_NAMES[self.rank]

    def __str__(self) -> str:
        return self.name


# Fixed scan order: rank by rank from a1, so SQUARES[i].index == i
SQUARES: Tuple[Square, ...] = tuple(Square(f, r) for r in range(8) for f in range(8))


class PieceKind(IntEnum):
    # Values double as the piece code stored in a position fingerprint
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class Side(Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE

    @property
    def color_bit(self) -> int:
        return 0 if self is Side.WHITE else 8

    @property
    def home_rank(self) -> int:
        return 0 if self is Side.WHITE else 7


@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    side: Side

    @property
    def code(self) -> int:
        """4-bit code: kind in the low three bits, 8 for black."""
        return int(self.kind) | self.side.color_bit
