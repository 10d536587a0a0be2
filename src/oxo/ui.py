"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import os
import random
import time
import uuid
from typing import Dict, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import InvalidMove
from .session import GameSession

logger = logging.getLogger(__name__)

SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="OXO", description="Tic-tac-toe with a minimax opponent")


def _delay_from_env() -> Tuple[float, float]:
    raw = os.environ.get("OXO_AI_DELAY")
    if raw is None:
        return (0.5, 0.5)
    seconds = max(0.0, float(raw))
    return (seconds, seconds)


# Pause before the computer answers, purely for pacing
AI_THINK_DELAY: Tuple[float, float] = _delay_from_env()


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    vs_computer: bool = Field(
        default=False,
        alias="vsComputer",
        description="Play against the minimax computer opponent as O",
    )


class ModeRequest(BaseModel):
    """Request payload for toggling the computer opponent (restarts the game)."""

    model_config = ConfigDict(populate_by_name=True)

    vs_computer: bool = Field(alias="vsComputer")


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(vs_computer: bool) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(vs_computer=vs_computer)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s (vs computer: %s)", session_id, vs_computer)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        session.request_computer_move()


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        return session.snapshot(game_id)


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        try:
            should_schedule_ai = session.play(cell_index)
        except InvalidMove as exc:
            logger.warning("Rejected move %d on game %s: %s", cell_index, game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.vs_computer)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.reset()
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/mode")
def set_mode(game_id: str, request: ModeRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.set_vs_computer(request.vs_computer)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>OXO</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      .controls {
        display: flex;
        gap: 1rem;
        justify-content: center;
        align-items: center;
        margin-bottom: 1.25rem;
      }
      button {
        font-size: 1rem;
        padding: 0.55rem 0.95rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 5.5rem);
        grid-template-rows: repeat(3, 5.5rem);
        gap: 0.4rem;
        justify-content: center;
        margin: 0 auto 1rem;
      }
      #board.thinking {
        opacity: 0.75;
      }
      .cell {
        display: flex;
        align-items: center;
        justify-content: center;
        font-size: 2.6rem;
        font-weight: 700;
        border-radius: 12px;
        background: rgba(226, 232, 255, 0.9);
        cursor: pointer;
      }
      .cell.taken,
      .cell.locked {
        cursor: default;
      }
      .cell.x {
        color: #3a66ff;
      }
      .cell.o {
        color: #e0465e;
      }
      #game-status {
        font-weight: 600;
        min-height: 1.5rem;
      }
      #message {
        color: #b3261e;
        min-height: 1.25rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>OXO</h1>
      <div class=\"controls\">
        <label><input type=\"checkbox\" id=\"ai-toggle\" /> Play against computer</label>
        <button id=\"restart-button\" type=\"button\">Restart</button>
      </div>
      <div id=\"board\"></div>
      <p id=\"game-status\"></p>
      <p id=\"message\"></p>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('game-status');
      const messageEl = document.getElementById('message');
      const restartButton = document.getElementById('restart-button');
      const aiToggle = document.getElementById('ai-toggle');

      let gameId = null;
      let gameState = null;
      let pollHandle = null;
      let isRequestPending = false;

      async function request(path, body) {
        const options = body === undefined
          ? { method: 'POST' }
          : {
              method: 'POST',
              headers: { 'Content-Type': 'application/json' },
              body: JSON.stringify(body),
            };
        const response = await fetch(path, options);
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          throw new Error(typeof payload?.detail === 'string' ? payload.detail : 'Request failed');
        }
        return response.json();
      }

      function stopPolling() {
        if (pollHandle !== null) {
          clearTimeout(pollHandle);
          pollHandle = null;
        }
      }

      function ensurePolling() {
        if (pollHandle !== null) return;
        pollHandle = window.setTimeout(pollState, 250);
      }

      async function pollState() {
        pollHandle = null;
        if (!gameId) return;
        try {
          const response = await fetch(`/api/game/${gameId}`);
          if (response.ok) {
            setState(await response.json());
          }
        } catch (error) {
          console.error('Polling failed', error);
        } finally {
          if (gameState?.computerPending) ensurePolling();
        }
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        aiToggle.checked = data.vsComputer;
        render();
        if (data.computerPending) {
          ensurePolling();
        } else {
          stopPolling();
        }
      }

      function render() {
        boardEl.innerHTML = '';
        boardEl.classList.toggle('thinking', Boolean(gameState?.computerPending));
        const selectable = new Set(gameState ? gameState.selectable : []);
        for (let index = 0; index < 9; index += 1) {
          const cell = document.createElement('div');
          const mark = gameState ? gameState.cells[index] : '';
          cell.classList.add('cell');
          cell.dataset.cell = String(index);
          if (mark) {
            cell.textContent = mark;
            cell.classList.add('taken', mark === 'X' ? 'x' : 'o');
          }
          if (selectable.has(index)) {
            cell.addEventListener('click', () => sendMove(index), { once: true });
          } else {
            cell.classList.add('locked');
          }
          boardEl.appendChild(cell);
        }
        statusEl.textContent = gameState ? gameState.statusText : '';
      }

      async function startGame() {
        if (isRequestPending) return;
        isRequestPending = true;
        stopPolling();
        messageEl.textContent = '';
        try {
          const data = gameId
            ? await request(`/api/game/${gameId}/mode`, { vsComputer: aiToggle.checked })
            : await request('/api/game', { vsComputer: aiToggle.checked });
          setState(data);
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function restartGame() {
        if (isRequestPending || !gameId) return;
        isRequestPending = true;
        stopPolling();
        messageEl.textContent = '';
        try {
          setState(await request(`/api/game/${gameId}/restart`));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function sendMove(cellIndex) {
        if (isRequestPending || !gameId || !gameState?.active) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          setState(await request(`/api/game/${gameId}/move`, { cellIndex }));
        } catch (error) {
          messageEl.textContent = error.message || 'Invalid move';
          render();
        } finally {
          isRequestPending = false;
        }
      }

      aiToggle.addEventListener('change', startGame);
      restartButton.addEventListener('click', restartGame);
      startGame();
    </script>
  </body>
</html>
"""
