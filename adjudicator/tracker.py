"""FIDE draw adjudication after each completed move.

Laws of Chess (01/01/2023):
- claimable: threefold repetition (9.2), 50-move rule (9.3)
- automatic: fivefold repetition (9.6.1), 75-move rule (9.6.2)
- immediate: dead position (5.2.2)

Stalemate (5.2.1) ends the game before the tracker is consulted and is left
to the rules collaborator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from .board import BoardSnapshot
from .fingerprint import PositionFingerprint
from .pieces import SQUARES, PieceKind, Side

logger = logging.getLogger(__name__)


class DrawRule(Enum):
    DEAD_POSITION = "5.2.2"
    FIVEFOLD_REPETITION = "9.6.1"
    SEVENTY_FIVE_MOVE = "9.6.2"
    THREEFOLD_REPETITION = "9.2"
    FIFTY_MOVE = "9.3"

    @property
    def article(self) -> str:
        return self.value


class DeadPosition(Enum):
    BARE_KINGS = "bare_kings"
    SINGLE_MINOR = "single_minor"
    MINOR_EACH = "minor_each"
    TWO_KNIGHTS = "two_knights"


@dataclass(frozen=True)
class Automatic:
    """The game is drawn; the host must end it."""

    rule: DrawRule
    reason: str

    is_automatic = True
    kind = "automatic"


@dataclass(frozen=True)
class Claimable:
    """The side to move may claim a draw or play on."""

    rule: DrawRule
    reason: str

    is_automatic = False
    kind = "claimable"


DrawEvent = Union[Automatic, Claimable]


REASONS: Dict[str, Dict[object, str]] = {
    "en": {
        DeadPosition.BARE_KINGS: "Dead position (kings only) - draw (FIDE 5.2.2).",
        DeadPosition.SINGLE_MINOR: "Dead position (king and minor piece) - draw (FIDE 5.2.2).",
        DeadPosition.MINOR_EACH: "Dead position (minor pieces only) - draw (FIDE 5.2.2).",
        DeadPosition.TWO_KNIGHTS: "Dead position (king and two knights vs king) - draw (FIDE 5.2.2).",
        DrawRule.FIVEFOLD_REPETITION: "Fivefold repetition (FIDE 9.6.1).",
        DrawRule.SEVENTY_FIVE_MOVE: "75-move rule (FIDE 9.6.2).",
        DrawRule.THREEFOLD_REPETITION: "Threefold repetition (FIDE 9.2) - a draw may be claimed.",
        DrawRule.FIFTY_MOVE: "50-move rule (FIDE 9.3) - a draw may be claimed.",
    },
    "de": {
        DeadPosition.BARE_KINGS: "Dead Position (nur Könige) - Remis (FIDE 5.2.2).",
        DeadPosition.SINGLE_MINOR: "Dead Position (König + leichte Figur) - Remis (FIDE 5.2.2).",
        DeadPosition.MINOR_EACH: "Dead Position (nur leichte Figuren) - Remis (FIDE 5.2.2).",
        DeadPosition.TWO_KNIGHTS: "Dead Position (König + zwei Springer gegen König) - Remis (FIDE 5.2.2).",
        DrawRule.FIVEFOLD_REPETITION: "Fünffache Stellungswiederholung (FIDE 9.6.1).",
        DrawRule.SEVENTY_FIVE_MOVE: "75-Züge-Regel (FIDE 9.6.2).",
        DrawRule.THREEFOLD_REPETITION: "Dreifache Stellungswiederholung (FIDE 9.2) - Remis kann reklamiert werden.",
        DrawRule.FIFTY_MOVE: "50-Züge-Regel (FIDE 9.3) - Remis kann reklamiert werden.",
    },
}


def classify_dead_position(board: BoardSnapshot) -> Optional[DeadPosition]:
    """Return the dead-position class of ``board``, or None.

    Only material configurations where no side can ever mate are accepted:
    bare kings, a single minor piece, one minor piece each, or two knights
    against a bare king. Anything else, including positions that are dead for
    reasons this count cannot see, is reported as alive.
    """
    bishops = {Side.WHITE: 0, Side.BLACK: 0}
    knights = {Side.WHITE: 0, Side.BLACK: 0}

    for square in SQUARES:
        piece = board.piece_at(square)
        if piece is None:
            continue
        if piece.kind in (PieceKind.PAWN, PieceKind.ROOK, PieceKind.QUEEN):
            return None
        if piece.kind is PieceKind.BISHOP:
            bishops[piece.side] += 1
        elif piece.kind is PieceKind.KNIGHT:
            knights[piece.side] += 1

    for side in (Side.WHITE, Side.BLACK):
        # bishop and knight, or bishop pair, can force mate
        if bishops[side] >= 2 or (bishops[side] and knights[side]):
            return None

    minors = {side: bishops[side] + knights[side] for side in (Side.WHITE, Side.BLACK)}
    total = minors[Side.WHITE] + minors[Side.BLACK]

    if total == 0:
        return DeadPosition.BARE_KINGS
    if total == 1:
        return DeadPosition.SINGLE_MINOR
    if total == 2:
        if minors[Side.WHITE] == 1 and minors[Side.BLACK] == 1:
            return DeadPosition.MINOR_EACH
        for side in (Side.WHITE, Side.BLACK):
            if knights[side] == 2 and minors[side.opponent] == 0:
                return DeadPosition.TWO_KNIGHTS
    return None


class DrawTracker:
    """Halfmove clock and repetition table for one game.

    Call ``reset`` once before the first move and ``observe`` once after
    every completed move. The tracker never ends a game itself; it reports an
    ``Automatic`` or ``Claimable`` event and leaves the decision to the host.
    A declined claim leaves the tracker untouched.
    """

    CLAIMABLE_REPETITIONS = 3
    AUTOMATIC_REPETITIONS = 5
    # 50 and 75 moves by each player
    CLAIMABLE_HALFMOVES = 100
    AUTOMATIC_HALFMOVES = 150

    def __init__(self, language: str = "en") -> None:
        if language not in REASONS:
            raise ValueError(f"Unsupported draw reason language: {language}")
        self.language = language
        self._reasons = REASONS[language]
        self._halfmove_clock = 0
        self._seen: Dict[PositionFingerprint, int] = {}

    @property
    def halfmove_clock(self) -> int:
        return self._halfmove_clock

    @property
    def seen_positions(self) -> int:
        return len(self._seen)

    def occurrences(self, fingerprint: PositionFingerprint) -> int:
        return self._seen.get(fingerprint, 0)

    def reset(self, board: BoardSnapshot, side_to_move: Side) -> None:
        self._halfmove_clock = 0
        self._seen.clear()
        self._register(PositionFingerprint.of(board, side_to_move))

    def observe(
        self,
        board: BoardSnapshot,
        side_to_move: Side,
        was_pawn_move: bool,
        was_capture: bool,
    ) -> Optional[DrawEvent]:
        """Account for the move just played and report at most one draw event.

        Priority: dead position, fivefold, 75-move, threefold, 50-move. A dead
        position returns before the clock and table are touched.
        """
        dead = classify_dead_position(board)
        if dead is not None:
            return self._event(Automatic(DrawRule.DEAD_POSITION, self._reasons[dead]))

        if was_pawn_move or was_capture:
            self._halfmove_clock = 0
        else:
            self._halfmove_clock += 1

        count = self._register(PositionFingerprint.of(board, side_to_move))
        logger.debug("halfmove clock %d, position seen %d time(s)", self._halfmove_clock, count)

        if count >= self.AUTOMATIC_REPETITIONS:
            return self._event(self._automatic(DrawRule.FIVEFOLD_REPETITION))
        if self._halfmove_clock >= self.AUTOMATIC_HALFMOVES:
            return self._event(self._automatic(DrawRule.SEVENTY_FIVE_MOVE))
        if count >= self.CLAIMABLE_REPETITIONS:
            return self._event(self._claimable(DrawRule.THREEFOLD_REPETITION))
        if self._halfmove_clock >= self.CLAIMABLE_HALFMOVES:
            return self._event(self._claimable(DrawRule.FIFTY_MOVE))
        return None

    def _register(self, fingerprint: PositionFingerprint) -> int:
        count = self._seen.get(fingerprint, 0) + 1
        self._seen[fingerprint] = count
        return count

    def _automatic(self, rule: DrawRule) -> Automatic:
        return Automatic(rule, self._reasons[rule])

    def _claimable(self, rule: DrawRule) -> Claimable:
        return Claimable(rule, self._reasons[rule])

    @staticmethod
    def _event(event: DrawEvent) -> DrawEvent:
        logger.info("%s draw: %s", event.kind, event.reason)
        return event
