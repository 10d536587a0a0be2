"""Game session: one board, its mode flag, and the computer opponent."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .ai import MinimaxAI
from .game import GameStatus, InvalidMove, TicTacToeGame

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and, in computer mode, its AI opponent.

    All mutation goes through ``play``, ``request_computer_move``, ``reset``
    and ``set_vs_computer``; callers hold ``lock`` when they share a session
    between threads.
    """

    game: TicTacToeGame = field(default_factory=TicTacToeGame)
    vs_computer: bool = False
    computer: MinimaxAI = field(default_factory=MinimaxAI)
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    computer_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    # ---- inbound ----

    def play(self, index: int) -> bool:
        """Apply a human move for the current mover.

        Returns True when the computer should answer next; the caller is
        expected to invoke :meth:`request_computer_move` (possibly later).
        """
        game = self.game
        if self.computer_pending:
            raise InvalidMove("Computer is completing its move")
        if self.vs_computer and game.active and game.current_player == self.computer.player:
            raise InvalidMove("It is the computer's turn")

        player = game.current_player
        game.apply_move(index, player)
        self.move_log.append({"player": player, "cellIndex": index})
        self._log_outcome()

        should_schedule = (
            self.vs_computer
            and game.active
            and game.current_player == self.computer.player
        )
        if should_schedule:
            self.computer_pending = True
        return should_schedule

    def request_computer_move(self) -> Optional[int]:
        try:
            game = self.game
            if not self.vs_computer or not game.active:
                return None
            if game.current_player != self.computer.player:
                return None
            index = self.computer.choose(game)
            game.apply_move(index, self.computer.player)
            self.move_log.append({"player": self.computer.player, "cellIndex": index})
            self._log_outcome()
            return index
        finally:
            self.computer_pending = False

    def reset(self) -> None:
        self.game.reset()
        self.move_log.clear()
        self.computer_pending = False

    def set_vs_computer(self, enabled: bool) -> None:
        self.vs_computer = bool(enabled)
        self.reset()

    # ---- outbound ----

    def status_text(self) -> str:
        game = self.game
        if game.status is GameStatus.WON:
            if self.vs_computer and game.winner == self.computer.player:
                return "Computer wins!"
            return f"Player {game.winner} wins!"
        if game.status is GameStatus.DRAW:
            return "It's a draw!"
        if self.vs_computer and game.current_player == self.computer.player:
            return "Computer's turn"
        return f"Player {game.current_player}'s turn"

    def selectable_cells(self) -> List[int]:
        if self.computer_pending:
            return []
        if self.vs_computer and self.game.current_player == self.computer.player:
            return []
        return [i for i in range(9) if self.game.is_selectable(i)]

    def snapshot(self, session_id: str) -> Dict[str, object]:
        game = self.game
        state: Dict[str, object] = {
            "id": session_id,
            "cells": list(game.cells),
            "currentPlayer": game.current_player,
            "status": game.status.value,
            "winner": game.winner,
            "drawn": game.drawn,
            "active": game.active,
            "vsComputer": self.vs_computer,
            "selectable": self.selectable_cells(),
            "moveLog": list(self.move_log),
            "computerPending": self.computer_pending,
            "statusText": self.status_text(),
        }
        if self.move_log:
            state["lastMove"] = self.move_log[-1]
        return state

    # ---- helpers ----

    def _log_outcome(self) -> None:
        if not self.game.active:
            logger.info("Game over: %s", self.status_text())
