"""Tests for the game session controller."""

import pytest

from oxo.game import EMPTY, GameStatus, InvalidMove
from oxo.session import GameSession


def test_two_player_session_alternates():
    session = GameSession()
    assert session.play(0) is False
    assert session.play(4) is False
    assert session.game.cells[0] == "X"
    assert session.game.cells[4] == "O"
    assert session.move_log == [
        {"player": "X", "cellIndex": 0},
        {"player": "O", "cellIndex": 4},
    ]
    assert session.status_text() == "Player X's turn"


def test_computer_never_opens():
    session = GameSession(vs_computer=True)
    assert session.request_computer_move() is None
    assert session.game.cells == [EMPTY] * 9
    assert session.status_text() == "Player X's turn"


def test_human_move_schedules_computer():
    session = GameSession(vs_computer=True)
    assert session.play(4) is True
    assert session.computer_pending
    assert session.status_text() == "Computer's turn"
    assert session.selectable_cells() == []

    with pytest.raises(InvalidMove):
        session.play(0)

    index = session.request_computer_move()
    assert index is not None
    assert session.game.cells[index] == "O"
    assert not session.computer_pending
    assert session.game.current_player == "X"
    assert session.move_log[-1] == {"player": "O", "cellIndex": index}


def test_human_cannot_move_for_computer():
    session = GameSession(vs_computer=True)
    session.play(4)
    session.computer_pending = False
    with pytest.raises(InvalidMove):
        session.play(0)


def test_rejected_move_leaves_state_unchanged():
    session = GameSession()
    session.play(4)
    before = session.snapshot("g")
    with pytest.raises(InvalidMove):
        session.play(4)
    assert session.snapshot("g") == before


def test_win_and_status_text():
    session = GameSession()
    for index in (0, 3, 1, 4, 2):
        session.play(index)
    assert session.game.status is GameStatus.WON
    assert session.status_text() == "Player X wins!"
    assert session.selectable_cells() == []
    with pytest.raises(InvalidMove):
        session.play(8)


def test_computer_game_result_text():
    session = GameSession(vs_computer=True)
    # X always takes the lowest free cell
    session.play(1)
    session.request_computer_move()
    while session.game.active:
        session.play(session.game.available_moves()[0])
        if session.computer_pending:
            session.request_computer_move()
    assert session.game.winner in ("O", None)
    if session.game.winner == "O":
        assert session.status_text() == "Computer wins!"
    else:
        assert session.status_text() == "It's a draw!"


def test_draw_text():
    session = GameSession()
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        session.play(index)
    assert session.game.status is GameStatus.DRAW
    assert session.status_text() == "It's a draw!"


def test_no_computer_move_after_game_ends():
    session = GameSession(vs_computer=True)
    session.vs_computer = False
    for index in (0, 3, 1, 4, 2):
        session.play(index)
    session.vs_computer = True
    assert session.request_computer_move() is None


def test_reset_clears_everything():
    session = GameSession(vs_computer=True)
    session.play(0)
    session.reset()
    session.reset()
    assert session.game.cells == [EMPTY] * 9
    assert session.game.current_player == "X"
    assert session.game.active
    assert session.move_log == []
    assert not session.computer_pending
    assert session.vs_computer


def test_mode_toggle_restarts():
    session = GameSession()
    session.play(0)
    session.set_vs_computer(True)
    assert session.vs_computer
    assert session.game.cells == [EMPTY] * 9
    assert session.move_log == []


def test_sessions_are_independent():
    first = GameSession()
    second = GameSession()
    first.play(0)
    assert second.game.cells == [EMPTY] * 9
    assert second.move_log == []


def test_snapshot_shape():
    session = GameSession(vs_computer=True)
    session.play(4)
    state = session.snapshot("abc")
    assert state["id"] == "abc"
    assert state["cells"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["status"] == "in_progress"
    assert state["computerPending"] is True
    assert state["vsComputer"] is True
    assert state["selectable"] == []
    assert state["lastMove"] == {"player": "X", "cellIndex": 4}
    assert state["statusText"] == "Computer's turn"
