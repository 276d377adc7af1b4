"""FIDE draw adjudication for a two-player chess client.

Modules:
- pieces: squares, piece kinds and sides
- board: read-only board snapshots (in-memory and python-chess backed)
- fingerprint: position identity for repetition counting
- tracker: halfmove clock, repetition table and dead-position check
- scores: cumulative win points over an injected key-value store
- game: game orchestration atop python-chess
"""

from .board import BoardSnapshot, ChessBoardSnapshot, SimpleBoard
from .fingerprint import CastlingRights, PositionFingerprint
from .game import Game, GameOutcome
from .pieces import Piece, PieceKind, Side, Square
from .scores import JsonFileStore, MemoryStore, ScoreStore
from .tracker import Automatic, Claimable, DrawRule, DrawTracker

__all__ = [
    "Automatic",
    "BoardSnapshot",
    "CastlingRights",
    "ChessBoardSnapshot",
    "Claimable",
    "DrawRule",
    "DrawTracker",
    "Game",
    "GameOutcome",
    "JsonFileStore",
    "MemoryStore",
    "Piece",
    "PieceKind",
    "PositionFingerprint",
    "ScoreStore",
    "Side",
    "SimpleBoard",
    "Square",
]
