"""In-memory session registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from classic_snake.engine import GameEngine
from classic_snake.server.models import SessionSummary
from classic_snake.settings import Settings

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100


@dataclass
class GameSession:
    """One player's engine plus the sockets watching it."""

    session_id: str
    engine: GameEngine
    sockets: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    last_active: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def ticking(self) -> bool:
        return self._task is not None and not self._task.done()

    def touch(self) -> None:
        self.last_active = time.monotonic()

    def summary(self) -> SessionSummary:
        engine = self.engine
        return SessionSummary(
            session_id=self.session_id,
            state=engine.state,
            score=engine.score,
            high_score=engine.high_score,
            speed=engine.speed,
            surface_width=engine.surface_width,
            surface_height=engine.surface_height,
        )


class SessionManager:
    """Central registry managing all game sessions."""

    def __init__(
        self,
        max_sessions: int = _MAX_SESSIONS,
        settings: Settings | None = None,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: dict[str, GameSession] = {}
        self._max_sessions = max_sessions
        self.settings = settings

    def create_session(
        self,
        surface_width: int = 800,
        surface_height: int = 600,
        seed: int | None = None,
    ) -> GameSession:
        """Create an idle session and return it.

        Raises ValueError if the surface is unplayable, or if the registry is
        full and every existing session is ticking.
        """
        engine = GameEngine(
            surface_width, surface_height, settings=self.settings, seed=seed,
        )
        self._prune_idle_sessions(reserve=1)
        if len(self._sessions) >= self._max_sessions:
            raise ValueError(
                f"Session limit of {self._max_sessions} reached; "
                "all sessions are active.",
            )
        session_id = uuid.uuid4().hex[:12]
        session = GameSession(session_id=session_id, engine=engine)
        self._sessions[session_id] = session
        logger.info(
            "Session %s created (%dx%d px).",
            session_id, surface_width, surface_height,
        )
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def require(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def start_game(self, session_id: str) -> GameSession:
        """(Re)start the game and make sure its tick loop is running."""
        session = self.require(session_id)
        async with session.lock:
            session.engine.start_game()
            session.touch()
        if not session.ticking:
            session._task = asyncio.create_task(self._tick_loop(session))
        return session

    async def key_down(self, session_id: str, direction: str) -> None:
        session = self.require(session_id)
        async with session.lock:
            session.engine.key_down(direction)
            session.touch()

    async def _tick_loop(self, session: GameSession) -> None:
        """Tick the engine, broadcasting state, until the game ends.

        The interval is re-read from the engine before every sleep, since
        it shrinks as food is eaten.
        """
        engine = session.engine
        try:
            while engine.playing:
                await asyncio.sleep(engine.speed / 1000.0)
                async with session.lock:
                    state = engine.update()
                await self._broadcast(session, state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception(
                "Tick loop error in session %s.", session.session_id,
            )

    def _prune_idle_sessions(self, reserve: int = 0) -> None:
        """Evict the least recently active idle sessions beyond the cap.

        ``reserve`` slots are freed on top of the cap for sessions about to
        be registered.
        """
        overflow = len(self._sessions) + reserve - self._max_sessions
        if overflow <= 0:
            return

        idle = [s for s in self._sessions.values() if not s.ticking]
        idle.sort(key=lambda s: s.last_active)
        for stale in idle[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d idle sessions (retaining up to %d).",
            min(overflow, len(idle)),
            self._max_sessions,
        )

    async def _broadcast(self, session: GameSession, state: dict) -> None:
        """Send game state to every connected socket."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in session.sockets:
                session.sockets.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        tasks = [s._task for s in self._sessions.values() if s.ticking]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("SessionManager cleanup complete.")
