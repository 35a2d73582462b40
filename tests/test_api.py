"""REST API endpoint tests."""

from __future__ import annotations

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from classic_snake.server.app import create_app
from classic_snake.server.session_manager import SessionManager

BASE = "http://test"


@pytest.fixture()
def app():
    application = create_app()
    application.state.session_manager = SessionManager()
    return application


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
    await app.state.session_manager.cleanup()


async def _create(client, **body) -> str:
    resp = await client.post("/sessions", json=body)
    assert resp.status_code == 201
    return resp.json()["session_id"]


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_create_default(self, client):
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert data["state"] == "game_over"
        assert data["score"] == 0
        assert data["high_score"] == 0
        assert data["surface_width"] == 800
        assert data["surface_height"] == 600
        assert "session_id" in data

    @pytest.mark.asyncio
    async def test_create_custom_surface(self, client):
        resp = await client.post(
            "/sessions",
            json={"surface_width": 320, "surface_height": 240, "seed": 5},
        )
        assert resp.status_code == 201
        assert resp.json()["surface_width"] == 320

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"surface_width": 0},
            {"surface_height": -16},
            {"surface_width": 48},
            {"surface_width": 64, "surface_height": 64},
            {"surface_width": 10_000},
        ],
    )
    async def test_create_invalid_surface(self, client, body):
        resp = await client.post("/sessions", json=body)
        assert resp.status_code == 422


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        resp = await client.get("/sessions")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_list_after_create(self, client):
        session_id = await _create(client)
        resp = await client.get("/sessions")
        assert [s["session_id"] for s in resp.json()] == [session_id]

    @pytest.mark.asyncio
    async def test_get_includes_game_state(self, client):
        session_id = await _create(client)
        resp = await client.get(f"/sessions/{session_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] == session_id
        assert data["game"]["state"] == "game_over"
        assert data["game"]["grid"] == {"max_width": 49, "max_height": 36}

    @pytest.mark.asyncio
    async def test_get_nonexistent(self, client):
        resp = await client.get("/sessions/nope")
        assert resp.status_code == 404


class TestStartAndInput:
    @pytest.mark.asyncio
    async def test_start(self, client):
        session_id = await _create(client, seed=1)
        resp = await client.post(f"/sessions/{session_id}/start")
        assert resp.status_code == 200
        data = resp.json()
        assert data["state"] == "playing"
        assert data["speed"] == 150

    @pytest.mark.asyncio
    async def test_start_nonexistent(self, client):
        resp = await client.post("/sessions/nope/start")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_tick_loop_advances(self, client):
        session_id = await _create(client, seed=1)
        await client.post(f"/sessions/{session_id}/start")
        await asyncio.sleep(0.5)
        resp = await client.get(f"/sessions/{session_id}")
        assert resp.json()["game"]["tick"] >= 1

    @pytest.mark.asyncio
    async def test_key_buffered(self, client, app):
        session_id = await _create(client, seed=1)
        await client.post(f"/sessions/{session_id}/start")
        resp = await client.post(
            f"/sessions/{session_id}/keys", json={"direction": "up"},
        )
        assert resp.status_code == 202
        assert resp.json() == {"status": "buffered", "direction": "up"}
        engine = app.state.session_manager.get_session(session_id).engine
        engine.update()
        assert engine.snake.direction.name == "UP"

    @pytest.mark.asyncio
    async def test_invalid_direction(self, client):
        session_id = await _create(client)
        resp = await client.post(
            f"/sessions/{session_id}/keys", json={"direction": "sideways"},
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_key_nonexistent(self, client):
        resp = await client.post("/sessions/nope/keys", json={"direction": "up"})
        assert resp.status_code == 404


class TestSnapshot:
    @pytest.mark.asyncio
    async def test_snapshot_jpeg(self, client):
        session_id = await _create(client, surface_width=320, surface_height=320)
        resp = await client.get(f"/sessions/{session_id}/snapshot")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/jpeg"
        assert resp.content[:2] == b"\xff\xd8"

    @pytest.mark.asyncio
    async def test_snapshot_without_caption(self, client):
        session_id = await _create(client, surface_width=320, surface_height=320)
        resp = await client.get(
            f"/sessions/{session_id}/snapshot", params={"caption": "false"},
        )
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_snapshot_nonexistent(self, client):
        resp = await client.get("/sessions/nope/snapshot")
        assert resp.status_code == 404
