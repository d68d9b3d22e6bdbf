"""
API Module - HTTP interface for a browser front end.

Exposes game sessions via REST. All state is session-scoped and
in-memory; no accounts, no persistence.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    FlipRequest,
    PreviewRequest,
    # Responses
    GameStateResponse,
    FlipResponse,
    GameListResponse,
    EndGameResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    CardView,
    ErrorCode,
    GameStatusValue,
)
from .service import GameService
from .app import create_app

__all__ = [
    "CreateGameRequest",
    "FlipRequest",
    "PreviewRequest",
    "GameStateResponse",
    "FlipResponse",
    "GameListResponse",
    "EndGameResponse",
    "HealthResponse",
    "ErrorResponse",
    "CardView",
    "ErrorCode",
    "GameStatusValue",
    "GameService",
    "create_app",
]
