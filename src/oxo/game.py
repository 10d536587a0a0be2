"""Core rules and turn tracking for a single game of tic-tac-toe."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = ""
PLAYERS: Tuple[Player, Player] = ("X", "O")

WIN_COMBOS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

logger = logging.getLogger(__name__)


class InvalidMove(ValueError):
    """Raised when a move targets a taken cell, a bad index, or a finished game."""


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


# ---------- Terminal checks ----------


def check_win(cells: Sequence[str], player: Player) -> bool:
    """True if ``player`` holds all three cells of any winning line."""
    return any(
        cells[a] == player and cells[b] == player and cells[c] == player
        for a, b, c in WIN_COMBOS
    )


def is_full(cells: Sequence[str]) -> bool:
    return all(c != EMPTY for c in cells)


def is_draw(cells: Sequence[str]) -> bool:
    # A full board that completes a line is a win, not a draw.
    if check_win(cells, "X") or check_win(cells, "O"):
        return False
    return is_full(cells)


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    cells: List[str] = field(default_factory=lambda: [EMPTY] * 9)
    current_player: Player = "X"
    active: bool = True
    winner: Optional[Player] = None
    drawn: bool = False

    def __post_init__(self) -> None:
        if len(self.cells) != 9:
            raise ValueError("A board has exactly 9 cells")
        # Boards built directly (tests, clones) may already be terminal
        self._update_state()

    # ---- API used by the session & AI ----

    def reset(self) -> None:
        self.cells = [EMPTY] * 9
        self.current_player = "X"
        self.active = True
        self.winner = None
        self.drawn = False

    def is_full(self) -> bool:
        return is_full(self.cells)

    def is_selectable(self, index: int) -> bool:
        return self.active and 0 <= index < 9 and self.cells[index] == EMPTY

    def available_moves(self) -> List[int]:
        if not self.active:
            return []
        return [i for i, c in enumerate(self.cells) if c == EMPTY]

    @property
    def status(self) -> GameStatus:
        if self.winner:
            return GameStatus.WON
        if self.drawn:
            return GameStatus.DRAW
        return GameStatus.IN_PROGRESS

    def apply_move(self, index: int, player: Player) -> List[str]:
        """Claim ``index`` for ``player`` and advance the turn.

        Returns the updated cells. Raises :class:`InvalidMove` without
        touching the board if the move is not legal right now.
        """
        if not self.active:
            raise InvalidMove("Game already finished")
        if not isinstance(index, int) or not 0 <= index < 9:
            raise InvalidMove(f"Cell index {index!r} is out of range")
        if player not in PLAYERS:
            raise InvalidMove(f"Unknown player {player!r}")
        if player != self.current_player:
            raise InvalidMove(f"It is not {player}'s turn")
        if self.cells[index] != EMPTY:
            raise InvalidMove(f"Cell {index} is already taken")

        self.cells[index] = player
        logger.debug("%s takes cell %d", player, index)

        self._update_state()
        if self.active:
            self.current_player = other_player(player)
        return list(self.cells)

    def clone(self) -> "TicTacToeGame":
        g = TicTacToeGame(cells=self.cells.copy(), current_player=self.current_player)
        g.active = self.active
        g.winner = self.winner
        g.drawn = self.drawn
        return g

    # ---- helpers ----

    def _update_state(self) -> None:
        for player in PLAYERS:
            if check_win(self.cells, player):
                self.winner = player
                self.drawn = False
                self.active = False
                return
        if self.is_full():
            self.winner = None
            self.drawn = True
            self.active = False
