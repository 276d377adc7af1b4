from __future__ import annotations

import chess
import pytest

from adjudicator import Automatic, ChessBoardSnapshot, Claimable, DrawRule, DrawTracker, Side
from adjudicator.fingerprint import PositionFingerprint
from adjudicator.tracker import DeadPosition, classify_dead_position

from helpers import KNIGHT_SHUFFLE, distinct_boards, fen_snapshot, play


def _tracker_over(boards):
    tracker = DrawTracker()
    tracker.reset(boards[0], Side.WHITE)
    return tracker


def test_reset_then_unchanged_board_counts_two(tracker, start_board):
    snapshot = ChessBoardSnapshot(start_board)
    event = tracker.observe(snapshot, Side.WHITE, False, False)
    assert event is None
    assert tracker.occurrences(PositionFingerprint.of(snapshot, Side.WHITE)) == 2
    assert tracker.halfmove_clock == 1


def test_reset_clears_previous_game(tracker, start_board):
    play(start_board, tracker, KNIGHT_SHUFFLE * 2)
    tracker.reset(ChessBoardSnapshot(chess.Board()), Side.WHITE)
    assert tracker.halfmove_clock == 0
    assert tracker.seen_positions == 1


def test_threefold_is_claimable_on_third_occurrence(tracker, start_board):
    events = play(start_board, tracker, KNIGHT_SHUFFLE * 2)
    assert events[:7] == [None] * 7
    assert isinstance(events[7], Claimable)
    assert events[7].rule is DrawRule.THREEFOLD_REPETITION
    assert "9.2" in events[7].reason


def test_fivefold_is_automatic_exactly_on_fifth_occurrence(tracker, start_board):
    events = play(start_board, tracker, KNIGHT_SHUFFLE * 4)
    automatic = [i for i, e in enumerate(events) if isinstance(e, Automatic)]
    assert automatic == [15]
    assert events[15].rule is DrawRule.FIVEFOLD_REPETITION
    # claims offered at the third and fourth occurrences were simply not taken
    assert all(isinstance(e, Claimable) for e in events[7:15])


def test_en_passant_availability_distinguishes_positions(tracker, start_board):
    events = play(start_board, tracker, ["e2e4", "e7e5"] + KNIGHT_SHUFFLE * 2)
    # right after e7e5 the e5 pawn could be taken en passant, so that
    # occurrence does not count with the later ones
    assert events[-1] is None
    events = play(start_board, tracker, KNIGHT_SHUFFLE)
    assert isinstance(events[-1], Claimable)


def test_fifty_move_rule_claimable_on_hundredth_halfmove():
    boards = distinct_boards(151)
    tracker = _tracker_over(boards)
    events = [tracker.observe(b, Side.WHITE, False, False) for b in boards[1:100]]
    assert events == [None] * 99
    event = tracker.observe(boards[100], Side.WHITE, False, False)
    assert isinstance(event, Claimable)
    assert event.rule is DrawRule.FIFTY_MOVE
    assert tracker.halfmove_clock == 100


@pytest.mark.parametrize("pawn_move, capture", [(True, False), (False, True), (True, True)])
def test_pawn_move_or_capture_on_hundredth_halfmove_resets_clock(pawn_move, capture):
    boards = distinct_boards(101)
    tracker = _tracker_over(boards)
    for b in boards[1:100]:
        tracker.observe(b, Side.WHITE, False, False)
    assert tracker.observe(boards[100], Side.WHITE, pawn_move, capture) is None
    assert tracker.halfmove_clock == 0


def test_seventy_five_move_rule_automatic_on_hundred_fiftieth_halfmove():
    boards = distinct_boards(151)
    tracker = _tracker_over(boards)
    events = [tracker.observe(b, Side.WHITE, False, False) for b in boards[1:150]]
    assert not any(isinstance(e, Automatic) for e in events)
    assert all(e is None for e in events[:99])
    assert all(isinstance(e, Claimable) and e.rule is DrawRule.FIFTY_MOVE for e in events[99:])
    event = tracker.observe(boards[150], Side.WHITE, False, False)
    assert isinstance(event, Automatic)
    assert event.rule is DrawRule.SEVENTY_FIVE_MOVE


def test_seventy_five_move_rule_outranks_threefold():
    boards = distinct_boards(148)
    tracker = _tracker_over(boards)
    for b in boards[1:148]:
        tracker.observe(b, Side.WHITE, False, False)
    assert tracker.observe(boards[1], Side.WHITE, False, False).rule is DrawRule.FIFTY_MOVE
    assert tracker.observe(boards[1], Side.WHITE, False, False).rule is DrawRule.THREEFOLD_REPETITION
    event = tracker.observe(boards[1], Side.WHITE, False, False)
    assert tracker.halfmove_clock == 150
    assert isinstance(event, Automatic)
    assert event.rule is DrawRule.SEVENTY_FIVE_MOVE


def test_fivefold_outranks_seventy_five_move_rule():
    boards = distinct_boards(147)
    tracker = _tracker_over(boards)
    for b in boards[1:147]:
        tracker.observe(b, Side.WHITE, False, False)
    for _ in range(3):
        tracker.observe(boards[1], Side.WHITE, False, False)
    event = tracker.observe(boards[1], Side.WHITE, False, False)
    assert tracker.halfmove_clock == 150
    assert event.rule is DrawRule.FIVEFOLD_REPETITION


@pytest.mark.parametrize(
    "fen, expected",
    [
        ("8/8/8/4k3/8/8/8/4K3 w - - 0 1", DeadPosition.BARE_KINGS),
        ("8/8/8/4k3/8/8/8/2B1K3 w - - 0 1", DeadPosition.SINGLE_MINOR),
        ("8/8/8/4k3/8/8/1n6/4K3 w - - 0 1", DeadPosition.SINGLE_MINOR),
        ("8/8/8/4k3/8/8/8/1N2K1N1 w - - 0 1", DeadPosition.TWO_KNIGHTS),
        ("1n4n1/8/8/4k3/8/8/8/4K3 b - - 0 1", DeadPosition.TWO_KNIGHTS),
        ("2b5/8/8/4k3/8/8/8/2B1K3 w - - 0 1", DeadPosition.MINOR_EACH),
        ("1n6/8/8/4k3/8/8/8/2B1K3 w - - 0 1", DeadPosition.MINOR_EACH),
        ("1n6/8/8/4k3/8/8/8/1N2K3 w - - 0 1", DeadPosition.MINOR_EACH),
        # mate is possible or the count cannot rule it out
        ("8/8/8/4k3/8/8/8/1NB1K3 w - - 0 1", None),
        ("8/8/8/4k3/8/8/8/2B1KB2 w - - 0 1", None),
        ("1n6/8/8/4k3/8/8/8/1N2K1N1 w - - 0 1", None),
        ("2b2b2/8/8/4k3/8/8/8/4K3 w - - 0 1", None),
        ("8/8/8/4k3/8/8/4P3/4K3 w - - 0 1", None),
        ("8/8/8/4k3/8/8/8/R3K3 w - - 0 1", None),
        ("8/8/8/4k3/8/8/8/3QK3 w - - 0 1", None),
        ("8/8/8/4k3/8/p7/8/4K3 w - - 0 1", None),
    ],
)
def test_classify_dead_position(fen, expected):
    assert classify_dead_position(fen_snapshot(fen)) is expected


@pytest.mark.parametrize(
    "fen",
    [
        "8/8/8/4k3/8/8/8/4K3 w - - 0 1",
        "8/8/8/4k3/8/8/8/2B1K3 b - - 0 1",
        "8/8/8/4k3/8/8/8/1N2K1N1 b - - 0 1",
        "2b5/8/8/4k3/8/8/8/2B1K3 w - - 0 1",
    ],
)
def test_dead_position_is_automatic(fen):
    tracker = DrawTracker()
    tracker.reset(ChessBoardSnapshot(chess.Board()), Side.WHITE)
    event = tracker.observe(fen_snapshot(fen), Side.WHITE, False, True)
    assert isinstance(event, Automatic)
    assert event.rule is DrawRule.DEAD_POSITION
    assert "5.2.2" in event.reason


@pytest.mark.parametrize(
    "fen",
    [
        "8/8/8/4k3/8/8/8/1NB1K3 b - - 0 1",
        "8/8/8/4k3/8/8/8/2B1KB2 b - - 0 1",
    ],
)
def test_mating_material_gives_no_event(fen):
    tracker = DrawTracker()
    tracker.reset(ChessBoardSnapshot(chess.Board()), Side.WHITE)
    assert tracker.observe(fen_snapshot(fen), Side.BLACK, False, True) is None


def test_dead_position_leaves_clock_and_table_alone(tracker, start_board):
    play(start_board, tracker, ["g1f3", "g8f6", "f3g1"])
    seen = tracker.seen_positions
    event = tracker.observe(fen_snapshot("8/8/8/4k3/8/8/8/4K3 w - - 0 1"), Side.WHITE, False, False)
    assert event.rule is DrawRule.DEAD_POSITION
    assert tracker.halfmove_clock == 3
    assert tracker.seen_positions == seen


def test_reasons_follow_language():
    tracker = DrawTracker(language="de")
    board = chess.Board()
    tracker.reset(ChessBoardSnapshot(board), Side.WHITE)
    events = play(board, tracker, KNIGHT_SHUFFLE * 2)
    assert "Dreifache Stellungswiederholung" in events[-1].reason
    assert tracker.language == "de"


def test_unknown_language_rejected():
    with pytest.raises(ValueError, match="Unsupported"):
        DrawTracker(language="xx")


def test_events_are_distinct_values():
    automatic = Automatic(DrawRule.FIFTY_MOVE, "r")
    claimable = Claimable(DrawRule.FIFTY_MOVE, "r")
    assert automatic != claimable
    assert automatic.is_automatic and not claimable.is_automatic
    assert automatic.kind == "automatic" and claimable.kind == "claimable"
    assert DrawRule.SEVENTY_FIVE_MOVE.article == "9.6.2"
