"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from classic_snake.engine import GameState

# Coarse schema bound; the engine also rejects surfaces too small for the
# configured starting snake.
MIN_SURFACE_PX = 64


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    surface_width: int = Field(default=800, ge=MIN_SURFACE_PX, le=4096)
    surface_height: int = Field(default=600, ge=MIN_SURFACE_PX, le=4096)
    seed: int | None = None


class KeyRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/keys."""

    direction: Literal["left", "right", "up", "down"]


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: GameState
    score: int
    high_score: int
    speed: int
    surface_width: int
    surface_height: int


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
