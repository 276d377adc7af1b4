from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import chess

from .board import ChessBoardSnapshot, side_from_color
from .fingerprint import PositionFingerprint
from .pieces import Side
from .scores import ScoreStore
from .tracker import Automatic, Claimable, DrawEvent, DrawTracker

logger = logging.getLogger(__name__)


@dataclass
class GameOutcome:
    result: str
    reason: str
    winner: Optional[str] = None


class Game:
    """Wraps python-chess Board and adjudicates draws after every move.

    python-chess decides legality, checkmate and stalemate. Everything
    else that can end a game in a draw goes through the ``DrawTracker``,
    which sees each completed move exactly once.
    """

    def __init__(
        self,
        starting_fen: Optional[str] = None,
        language: str = "en",
        score_store: Optional[ScoreStore] = None,
        win_points: int = 10,
    ) -> None:
        self.tracker = DrawTracker(language)
        self.score_store = score_store
        self.win_points = win_points
        self.reset(starting_fen)

    def reset(self, starting_fen: Optional[str] = None) -> None:
        self.board = chess.Board(fen=starting_fen) if starting_fen else chess.Board()
        self.last_move_was_capture: bool = False
        self.last_move_was_pawn_move: bool = False
        self.pending_claim: Optional[Claimable] = None
        self.outcome: Optional[GameOutcome] = None
        self.tracker.reset(ChessBoardSnapshot(self.board), side_from_color(self.board.turn))
        # A position set up from FEN may already be over
        if self.board.is_checkmate():
            winner = side_from_color(not self.board.turn)
            self._finish("1-0" if winner is Side.WHITE else "0-1", "Checkmate.", winner=winner.value)
        elif self.board.is_stalemate():
            self._finish("1/2-1/2", "Stalemate (FIDE 5.2.1).")

    def get_full_fen(self) -> str:
        return self.board.fen()

    def get_turn_color(self) -> str:
        return side_from_color(self.board.turn).value

    def get_legal_moves(self) -> List[str]:
        if self.is_game_over():
            return []
        return [move.uci() for move in self.board.legal_moves]

    def is_game_over(self) -> bool:
        return self.outcome is not None

    def get_result(self) -> Optional[str]:
        return self.outcome.result if self.outcome else None

    def current_fingerprint(self) -> PositionFingerprint:
        return PositionFingerprint.of(ChessBoardSnapshot(self.board), side_from_color(self.board.turn))

    def push_uci(self, uci: str) -> Optional[DrawEvent]:
        if self.is_game_over():
            raise ValueError("Game is over")

        move = chess.Move.from_uci(uci)
        if move in self.board.legal_moves:
            return self._play(move)

        # Auto-queen promotion if user sends e7e8 or similar without suffix
        if len(uci) == 4:
            from_sq = chess.parse_square(uci[:2])
            to_sq = chess.parse_square(uci[2:])
            piece = self.board.piece_at(from_sq)
            if piece and piece.piece_type == chess.PAWN:
                to_rank = chess.square_rank(to_sq)
                if (piece.color == chess.WHITE and to_rank == 7) or (
                    piece.color == chess.BLACK and to_rank == 0
                ):
                    promo_move = chess.Move(from_sq, to_sq, promotion=chess.QUEEN)
                    if promo_move in self.board.legal_moves:
                        return self._play(promo_move)

        raise ValueError(f"Illegal move: {uci}")

    def _play(self, move: chess.Move) -> Optional[DrawEvent]:
        # Moving instead of claiming gives the claim up
        self.pending_claim = None
        self.last_move_was_capture = self.board.is_capture(move)
        self.last_move_was_pawn_move = self.board.piece_type_at(move.from_square) == chess.PAWN
        mover = side_from_color(self.board.turn)
        self.board.push(move)

        if self.board.is_checkmate():
            self._finish("1-0" if mover is Side.WHITE else "0-1", "Checkmate.", winner=mover.value)
            if self.score_store is not None:
                self.score_store.add_win(mover, self.win_points)
            return None
        if self.board.is_stalemate():
            self._finish("1/2-1/2", "Stalemate (FIDE 5.2.1).")
            return None

        event = self.tracker.observe(
            ChessBoardSnapshot(self.board),
            side_from_color(self.board.turn),
            self.last_move_was_pawn_move,
            self.last_move_was_capture,
        )
        if isinstance(event, Automatic):
            self._finish("1/2-1/2", event.reason)
        elif isinstance(event, Claimable):
            self.pending_claim = event
        return event

    def claim_draw(self) -> GameOutcome:
        if self.pending_claim is None:
            raise ValueError("No draw can be claimed in this position")
        reason = self.pending_claim.reason
        self.pending_claim = None
        return self._finish("1/2-1/2", reason)

    def decline_draw(self) -> None:
        if self.pending_claim is None:
            raise ValueError("No draw claim to decline")
        self.pending_claim = None

    def _finish(self, result: str, reason: str, winner: Optional[str] = None) -> GameOutcome:
        self.outcome = GameOutcome(result=result, reason=reason, winner=winner)
        logger.info("game over %s: %s", result, reason)
        return self.outcome

    def snapshot(self) -> Dict[str, object]:
        last_uci: Optional[str] = None
        if self.board.move_stack:
            last_uci = self.board.move_stack[-1].uci()

        in_check = self.board.is_check()
        check_square: Optional[str] = None
        if in_check:
            king_sq = self.board.king(self.board.turn)
            if king_sq is not None:
                check_square = chess.SQUARE_NAMES[king_sq]

        return {
            "fen": self.get_full_fen(),
            "turn": self.get_turn_color(),
            "legal_moves": self.get_legal_moves(),
            "game_over": self.is_game_over(),
            "result": self.get_result(),
            "outcome_reason": self.outcome.reason if self.outcome else None,
            "last_move": last_uci,
            "in_check": in_check,
            "check_square": check_square,
            "last_move_capture": self.last_move_was_capture,
            "last_move_pawn": self.last_move_was_pawn_move,
            "halfmove_clock": self.tracker.halfmove_clock,
            # None once over: a dead-position draw never enters the table
            "repetitions": None if self.is_game_over() else self.tracker.occurrences(self.current_fingerprint()),
            "draw_claim": event_to_dict(self.pending_claim),
        }


def event_to_dict(event: Optional[DrawEvent]) -> Optional[Dict[str, str]]:
    if event is None:
        return None
    return {
        "kind": event.kind,
        "rule": event.rule.name.lower(),
        "article": event.rule.article,
        "reason": event.reason,
    }
