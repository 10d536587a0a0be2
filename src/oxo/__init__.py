"""OXO package exposing game logic, the minimax opponent, and the web application."""

from .ai import MinimaxAI, get_best_move, minimax
from .game import InvalidMove, TicTacToeGame, check_win, is_draw
from .session import GameSession
from .ui import app

__all__ = [
    "GameSession",
    "InvalidMove",
    "MinimaxAI",
    "TicTacToeGame",
    "app",
    "check_win",
    "get_best_move",
    "is_draw",
    "minimax",
]
