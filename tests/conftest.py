from __future__ import annotations

import chess
import pytest

from adjudicator import ChessBoardSnapshot, DrawTracker, Side


@pytest.fixture
def start_board() -> chess.Board:
    return chess.Board()


@pytest.fixture
def tracker(start_board: chess.Board) -> DrawTracker:
    t = DrawTracker()
    t.reset(ChessBoardSnapshot(start_board), Side.WHITE)
    return t
