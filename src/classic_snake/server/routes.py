"""REST API route handlers for session lifecycle and input."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from classic_snake.render import snapshot_bytes
from classic_snake.server.models import (
    CreateSessionRequest,
    KeyRequest,
    SessionSummary,
)
from classic_snake.server.session_manager import GameSession, SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _require(request: Request, session_id: str) -> GameSession:
    try:
        return _get_manager(request).require(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create an idle game session bound to a surface size."""
    try:
        session = _get_manager(request).create_session(
            surface_width=body.surface_width,
            surface_height=body.surface_height,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List all sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata plus the full engine state."""
    session = _require(request, session_id)
    result = session.summary().model_dump(mode="json")
    result["game"] = session.engine.get_state()
    return result


@router.post("/{session_id}/start")
async def start_game(session_id: str, request: Request) -> SessionSummary:
    """Start (or restart) the game and its tick loop."""
    _require(request, session_id)
    session = await _get_manager(request).start_game(session_id)
    return session.summary()


@router.post("/{session_id}/keys", status_code=202)
async def key_down(session_id: str, body: KeyRequest, request: Request) -> dict:
    """Buffer a direction change for the next tick."""
    _require(request, session_id)
    await _get_manager(request).key_down(session_id, body.direction)
    return {"status": "buffered", "direction": body.direction}


@router.get(
    "/{session_id}/snapshot",
    response_class=Response,
    responses={200: {"content": {"image/jpeg": {}}}},
)
async def snapshot(
    session_id: str, request: Request, caption: bool = True,
) -> Response:
    """Render the current scene as a JPEG."""
    session = _require(request, session_id)
    async with session.lock:
        data = snapshot_bytes(session.engine, caption=caption)
    return Response(content=data, media_type="image/jpeg")
