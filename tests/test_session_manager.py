"""Tests for the in-memory session registry and tick loop."""

from __future__ import annotations

import asyncio
import json

import pytest
from starlette.websockets import WebSocketState

from classic_snake.engine import GameState
from classic_snake.server.session_manager import SessionManager
from classic_snake.settings import Settings

# 10ms ticks on a 320x320 surface: the snake hits the right wall on tick 10.
FAST = Settings(initial_speed=10, min_speed=5)


class FakeSocket:
    def __init__(self, fail: bool = False):
        self.client_state = WebSocketState.CONNECTED
        self.sent: list[dict] = []
        self.fail = fail

    async def send_text(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("socket gone")
        self.sent.append(json.loads(text))


async def _finish(session) -> None:
    await asyncio.wait_for(session._task, timeout=5)


class TestRegistry:
    def test_invalid_max_sessions(self):
        with pytest.raises(ValueError, match="at least 1"):
            SessionManager(max_sessions=0)

    def test_create_and_get(self):
        manager = SessionManager()
        session = manager.create_session(320, 320)
        assert manager.get_session(session.session_id) is session
        assert session.engine.state == GameState.GAME_OVER

    def test_require_unknown(self):
        with pytest.raises(KeyError):
            SessionManager().require("missing")

    def test_surface_too_small(self):
        with pytest.raises(ValueError):
            SessionManager().create_session(32, 32)

    def test_prunes_oldest_idle(self):
        manager = SessionManager(max_sessions=2)
        first = manager.create_session()
        second = manager.create_session()
        second.touch()
        third = manager.create_session()
        remaining = {s.session_id for s in manager.list_sessions()}
        assert remaining == {second.session_id, third.session_id}
        assert manager.get_session(first.session_id) is None

    @pytest.mark.asyncio
    async def test_new_session_survives_when_others_tick(self):
        manager = SessionManager(max_sessions=2)
        busy = manager.create_session()
        idle = manager.create_session()
        await manager.start_game(busy.session_id)
        fresh = manager.create_session()
        assert manager.get_session(fresh.session_id) is fresh
        assert manager.get_session(idle.session_id) is None
        assert manager.get_session(busy.session_id) is busy
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_create_refused_when_all_sessions_tick(self):
        manager = SessionManager(max_sessions=2)
        for _ in range(2):
            session = manager.create_session()
            await manager.start_game(session.session_id)
        with pytest.raises(ValueError, match="limit of 2"):
            manager.create_session()
        assert len(manager.list_sessions()) == 2
        await manager.cleanup()


class TestTickLoop:
    @pytest.mark.asyncio
    async def test_runs_until_game_over(self):
        manager = SessionManager(settings=FAST)
        session = manager.create_session(320, 320, seed=0)
        await manager.start_game(session.session_id)
        assert session.ticking
        await _finish(session)
        assert session.engine.state == GameState.GAME_OVER
        assert session.engine.tick == 10
        assert not session.ticking

    @pytest.mark.asyncio
    async def test_broadcasts_each_tick(self):
        manager = SessionManager(settings=FAST)
        session = manager.create_session(320, 320, seed=0)
        good, bad = FakeSocket(), FakeSocket(fail=True)
        session.sockets.extend([good, bad])
        await manager.start_game(session.session_id)
        await _finish(session)
        assert [msg["tick"] for msg in good.sent] == list(range(1, 11))
        assert good.sent[-1]["state"] == "game_over"
        assert bad not in session.sockets

    @pytest.mark.asyncio
    async def test_restart_after_game_over(self):
        manager = SessionManager(settings=FAST)
        session = manager.create_session(320, 320, seed=0)
        await manager.start_game(session.session_id)
        await _finish(session)
        first_task = session._task
        await manager.start_game(session.session_id)
        assert session._task is not first_task
        await _finish(session)
        assert session.engine.tick == 10

    @pytest.mark.asyncio
    async def test_key_down_applies_on_next_tick(self):
        manager = SessionManager()
        session = manager.create_session(320, 320, seed=0)
        async with session.lock:
            session.engine.start_game()
        await manager.key_down(session.session_id, "up")
        session.engine.update()
        assert session.engine.snake.direction.name == "UP"

    @pytest.mark.asyncio
    async def test_cleanup_cancels_loops(self):
        manager = SessionManager()
        session = manager.create_session(800, 600, seed=0)
        await manager.start_game(session.session_id)
        await manager.cleanup()
        assert not session.ticking
