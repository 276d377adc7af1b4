from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Tuple

from .board import BoardSnapshot
from .pieces import SQUARES, PieceKind, Side, Square


class CastlingRights(IntFlag):
    NONE = 0
    WHITE_KINGSIDE = 1
    WHITE_QUEENSIDE = 2
    BLACK_KINGSIDE = 4
    BLACK_QUEENSIDE = 8


NO_EN_PASSANT = -1

_KINGSIDE = {Side.WHITE: CastlingRights.WHITE_KINGSIDE, Side.BLACK: CastlingRights.BLACK_KINGSIDE}
_QUEENSIDE = {Side.WHITE: CastlingRights.WHITE_QUEENSIDE, Side.BLACK: CastlingRights.BLACK_QUEENSIDE}


@dataclass(frozen=True)
class PositionFingerprint:
    """Identity of a position for repetition counting.

    Two positions repeat only when every field matches: side to move,
    castling rights, en-passant file and all 64 square codes.
    """

    side_to_move: Side
    castling: CastlingRights
    en_passant_file: int
    squares: Tuple[int, ...]

    @classmethod
    def of(cls, board: BoardSnapshot, side_to_move: Side) -> "PositionFingerprint":
        return cls(
            side_to_move=side_to_move,
            castling=castling_rights(board),
            en_passant_file=en_passant_file(board),
            squares=piece_codes(board),
        )


def piece_codes(board: BoardSnapshot) -> Tuple[int, ...]:
    codes = []
    for square in SQUARES:
        piece = board.piece_at(square)
        codes.append(0 if piece is None else piece.code)
    return tuple(codes)


def en_passant_file(board: BoardSnapshot) -> int:
    """File of the pawn that may be taken en passant, or -1.

    Standard chess allows at most one such pawn; should a board report more,
    the first one in scan order wins.
    """
    for square in SQUARES:
        piece = board.piece_at(square)
        if piece is not None and piece.kind is PieceKind.PAWN and board.is_en_passant_capturable(square):
            return square.file
    return NO_EN_PASSANT


def _unmoved(board: BoardSnapshot, square: Square, kind: PieceKind, side: Side) -> bool:
    piece = board.piece_at(square)
    return (
        piece is not None
        and piece.kind is kind
        and piece.side is side
        and not board.has_moved(square)
    )


def castling_rights(board: BoardSnapshot) -> CastlingRights:
    """Derive castling rights from unmoved kings and rooks on their home squares.

    A right is kept only while both the king and the matching rook sit
    unmoved on their original squares. This never looks at how a right was
    lost, so it is an approximation of real rights tracking.
    """
    rights = CastlingRights.NONE
    for side in (Side.WHITE, Side.BLACK):
        rank = side.home_rank
        if not _unmoved(board, Square(4, rank), PieceKind.KING, side):
            continue
        if _unmoved(board, Square(7, rank), PieceKind.ROOK, side):
            rights |= _KINGSIDE[side]
        if _unmoved(board, Square(0, rank), PieceKind.ROOK, side):
            rights |= _QUEENSIDE[side]
    return rights
