"""Read-only board views consumed by the draw tracker.

The tracker never mutates a board. It only needs to ask, per square, which
piece stands there, whether that pawn may be taken en passant on the next
move, and whether a king or rook has moved. ``SimpleBoard`` answers these
from its own bookkeeping; ``ChessBoardSnapshot`` derives them from a
python-chess ``Board``.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Set, Tuple

import chess

from .pieces import Piece, PieceKind, Side, Square


class BoardSnapshot(Protocol):
    def piece_at(self, square: Square) -> Optional[Piece]:
        ...

    def is_en_passant_capturable(self, square: Square) -> bool:
        ...

    def has_moved(self, square: Square) -> bool:
        ...


def side_from_color(color: chess.Color) -> Side:
    return Side.WHITE if color == chess.WHITE else Side.BLACK


_BACK_RANK = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


class SimpleBoard:
    """Dictionary-backed snapshot for hosts that keep their own board.

    Pieces are placed and moved directly; no legality checks are made.
    ``move`` keeps the "has moved" and en-passant tags up to date the way a
    rules engine would.
    """

    def __init__(self, pieces: Optional[Dict[Square, Piece]] = None) -> None:
        self._pieces: Dict[Square, Piece] = dict(pieces or {})
        self._moved: Set[Square] = set()
        self._en_passant: Optional[Square] = None

    @classmethod
    def starting_position(cls) -> "SimpleBoard":
        board = cls()
        for file, kind in enumerate(_BACK_RANK):
            board.place(Square(file, 0), Piece(kind, Side.WHITE))
            board.place(Square(file, 1), Piece(PieceKind.PAWN, Side.WHITE))
            board.place(Square(file, 6), Piece(PieceKind.PAWN, Side.BLACK))
            board.place(Square(file, 7), Piece(kind, Side.BLACK))
        return board

    @classmethod
    def from_placement(cls, placement: Iterable[Tuple[str, Piece]]) -> "SimpleBoard":
        """Build a board from ``("e1", Piece(...))`` pairs."""
        board = cls()
        for name, piece in placement:
            board.place(Square.parse(name), piece)
        return board

    def copy(self) -> "SimpleBoard":
        other = SimpleBoard(self._pieces)
        other._moved = set(self._moved)
        other._en_passant = self._en_passant
        return other

    def place(self, square: Square, piece: Piece, moved: bool = False) -> None:
        self._pieces[square] = piece
        if moved:
            self._moved.add(square)
        else:
            self._moved.discard(square)
        if self._en_passant == square:
            self._en_passant = None

    def remove(self, square: Square) -> Optional[Piece]:
        self._moved.discard(square)
        if self._en_passant == square:
            self._en_passant = None
        return self._pieces.pop(square, None)

    def move(self, src: Square, dst: Square) -> Optional[Piece]:
        """Move the piece on ``src`` to ``dst`` and return whatever was captured."""
        piece = self._pieces.get(src)
        if piece is None:
            raise ValueError(f"No piece on {src}")
        self._en_passant = None
        captured = self.remove(dst)
        self.remove(src)
        self.place(dst, piece, moved=True)
        if piece.kind is PieceKind.PAWN and abs(dst.rank - src.rank) == 2:
            self._en_passant = dst
        return captured

    def set_en_passant(self, square: Optional[Square]) -> None:
        self._en_passant = square

    def mark_moved(self, square: Square) -> None:
        self._moved.add(square)

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self._pieces.get(square)

    def is_en_passant_capturable(self, square: Square) -> bool:
        piece = self._pieces.get(square)
        return (
            square == self._en_passant
            and piece is not None
            and piece.kind is PieceKind.PAWN
        )

    def has_moved(self, square: Square) -> bool:
        return square in self._moved


class ChessBoardSnapshot:
    """Adapter presenting a python-chess ``Board`` as a ``BoardSnapshot``.

    python-chess does not remember which pieces have moved, only the
    castling rights that follow from it. A king on its home square counts as
    unmoved while its side keeps any castling right, a corner rook while the
    right on its corner survives. Every other piece reports as moved.
    """

    def __init__(self, board: chess.Board) -> None:
        self._board = board

    @property
    def board(self) -> chess.Board:
        return self._board

    def piece_at(self, square: Square) -> Optional[Piece]:
        piece = self._board.piece_at(square.index)
        if piece is None:
            return None
        return Piece(PieceKind(piece.piece_type), side_from_color(piece.color))

    def is_en_passant_capturable(self, square: Square) -> bool:
        ep_square = self._board.ep_square
        if ep_square is None:
            return False
        piece = self._board.piece_at(square.index)
        if piece is None or piece.piece_type != chess.PAWN:
            return False
        # The double-stepped pawn stands just past the skipped square
        if chess.square_rank(ep_square) == 2:
            return square.index == ep_square + 8 and piece.color == chess.WHITE
        return square.index == ep_square - 8 and piece.color == chess.BLACK

    def has_moved(self, square: Square) -> bool:
        piece = self._board.piece_at(square.index)
        if piece is None:
            return True
        rights = self._board.clean_castling_rights()
        if piece.piece_type == chess.KING:
            home = chess.E1 if piece.color == chess.WHITE else chess.E8
            if square.index != home:
                return True
            back_rank = chess.BB_RANK_1 if piece.color == chess.WHITE else chess.BB_RANK_8
            return not (rights & back_rank)
        if piece.piece_type == chess.ROOK:
            return not (rights & chess.BB_SQUARES[square.index])
        return True
