"""Load test: many sessions ticking simultaneously."""

from __future__ import annotations

import asyncio

import pytest

from classic_snake.engine import GameState
from classic_snake.server.session_manager import SessionManager
from classic_snake.settings import Settings


class TestConcurrentSessions:
    @pytest.mark.asyncio
    async def test_50_concurrent_sessions(self):
        """Run 50 fast sessions at once; every snake reaches the wall."""
        manager = SessionManager(settings=Settings(initial_speed=10, min_speed=5))
        session_ids = [
            manager.create_session(320, 320, seed=i).session_id
            for i in range(50)
        ]

        for sid in session_ids:
            await manager.start_game(sid)

        for _ in range(200):
            await asyncio.sleep(0.05)
            if all(
                manager.get_session(sid).engine.state == GameState.GAME_OVER
                for sid in session_ids
            ):
                break

        finished = [
            manager.get_session(sid) for sid in session_ids
            if manager.get_session(sid).engine.state == GameState.GAME_OVER
        ]
        assert len(finished) == 50, f"Only {len(finished)}/50 sessions finished"
        assert all(s.engine.tick == 10 for s in finished)
        await manager.cleanup()
