"""Board-driving helpers shared by the test modules."""

from __future__ import annotations

from typing import Iterable, List, Optional

import chess

from adjudicator import ChessBoardSnapshot, DrawTracker, Piece, PieceKind, Side, SimpleBoard, Square
from adjudicator.board import side_from_color
from adjudicator.pieces import SQUARES
from adjudicator.tracker import DrawEvent

KNIGHT_SHUFFLE = ["g1f3", "g8f6", "f3g1", "f6g8"]


def play(board: chess.Board, tracker: DrawTracker, moves: Iterable[str]) -> List[Optional[DrawEvent]]:
    """Push each move and feed the result to the tracker, collecting events."""
    events = []
    for uci in moves:
        move = chess.Move.from_uci(uci)
        was_capture = board.is_capture(move)
        was_pawn_move = board.piece_type_at(move.from_square) == chess.PAWN
        board.push(move)
        events.append(
            tracker.observe(ChessBoardSnapshot(board), side_from_color(board.turn), was_pawn_move, was_capture)
        )
    return events


def distinct_boards(n: int) -> List[SimpleBoard]:
    """``n`` boards with kings and a rook each, no two in the same position."""
    free = [sq for sq in SQUARES if sq not in (Square(0, 0), Square(7, 7))]
    boards = []
    for white_rook in free:
        for black_rook in free:
            if white_rook == black_rook:
                continue
            board = SimpleBoard()
            board.place(Square(0, 0), Piece(PieceKind.KING, Side.WHITE), moved=True)
            board.place(Square(7, 7), Piece(PieceKind.KING, Side.BLACK), moved=True)
            board.place(white_rook, Piece(PieceKind.ROOK, Side.WHITE), moved=True)
            board.place(black_rook, Piece(PieceKind.ROOK, Side.BLACK), moved=True)
            boards.append(board)
            if len(boards) == n:
                return boards
    return boards


def fen_snapshot(fen: str) -> ChessBoardSnapshot:
    return ChessBoardSnapshot(chess.Board(fen))
