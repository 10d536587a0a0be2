"""Exhaustive minimax opponent for 3x3 tic-tac-toe."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from .game import EMPTY, TicTacToeGame, Player, check_win

logger = logging.getLogger(__name__)

MAXIMIZER: Player = "O"
MINIMIZER: Player = "X"

Cells = Tuple[str, ...]


def _place(cells: Cells, index: int, mark: str) -> Cells:
    # Copy-on-recurse: every level of the search gets its own board value
    return cells[:index] + (mark,) + cells[index + 1 :]


class _Counter:
    __slots__ = ("nodes",)

    def __init__(self) -> None:
        self.nodes = 0


def _search(cells: Cells, maximizing: bool, counter: Optional[_Counter]) -> int:
    if counter is not None:
        counter.nodes += 1

    if check_win(cells, MAXIMIZER):
        return 1
    if check_win(cells, MINIMIZER):
        return -1
    empties = [i for i, c in enumerate(cells) if c == EMPTY]
    if not empties:
        return 0

    # Scores ignore depth: a win in one move and a win in five are both 1.
    if maximizing:
        return max(_search(_place(cells, i, MAXIMIZER), False, counter) for i in empties)
    return min(_search(_place(cells, i, MINIMIZER), True, counter) for i in empties)


def minimax(cells: Sequence[str], maximizing: bool) -> int:
    """Score a position from O's point of view: 1 win, 0 draw, -1 loss."""
    return _search(tuple(cells), maximizing, None)


def get_best_move(cells: Sequence[str]) -> Optional[int]:
    """Pick O's move; ties go to the lowest index. None if the board is full."""
    return _best_move(tuple(cells), None)


def _best_move(cells: Cells, counter: Optional[_Counter]) -> Optional[int]:
    best_score = -2
    move: Optional[int] = None
    for index, cell in enumerate(cells):
        if cell != EMPTY:
            continue
        score = _search(_place(cells, index, MAXIMIZER), False, counter)
        if score > best_score:
            best_score, move = score, index
    return move


@dataclass
class MinimaxAI:
    """Computer opponent that always plays O.

    - MinimaxAI()
    - choose(game) -> cell index
    """

    player: Player = MAXIMIZER
    last_nodes: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.player != MAXIMIZER:
            raise ValueError("The computer opponent only plays O")

    def choose(self, game: TicTacToeGame) -> int:
        if not game.active:
            raise ValueError("Game already finished")
        if game.current_player != self.player:
            raise ValueError("It is not the computer's turn")

        counter = _Counter()
        move = _best_move(tuple(game.cells), counter)
        self.last_nodes = counter.nodes
        if move is None:
            raise RuntimeError("No valid moves available")
        logger.debug("Computer picks cell %d after %d nodes", move, counter.nodes)
        return move
