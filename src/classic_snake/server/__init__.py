"""HTTP and WebSocket front end for the snake engine."""

from classic_snake.server.app import create_app

__all__ = ["create_app"]
