"""
FastAPI Application - REST API for a browser front end.

Endpoints:
    POST   /api/v1/games                    Create a game
    GET    /api/v1/games                    List active games
    GET    /api/v1/games/{id}               Get game state
    DELETE /api/v1/games/{id}               End a game
    POST   /api/v1/games/{id}/flip          Flip a card
    POST   /api/v1/games/{id}/hide          Flip a pending mismatch back now
    POST   /api/v1/games/{id}/restart       Deal a new game with the same options
    POST   /api/v1/games/{id}/preview       Toggle the show-all preview
    POST   /api/v1/games/{id}/music-ended   Report the victory music finished

Mismatched cards flip back on their own after the reveal delay; clients
poll GET /games/{id} (or call /hide) to pick that up.
"""

from typing import Optional, Union
import logging
import os

from .. import __version__

# Environment configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None, settings=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (creates new if not provided)
        settings: Optional GameSettings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import GameService
    from .schemas import (
        CreateGameRequest,
        FlipRequest,
        PreviewRequest,
        GameStateResponse,
        FlipResponse,
        GameListResponse,
        EndGameResponse,
        HealthResponse,
        ErrorResponse,
        ErrorCode,
    )
    from ..config import GameSettings
    from ..engine_core.errors import InvalidPairCount
    from ..ports.timer import AsyncioTimerService
    from ..session import SessionManager

    app = FastAPI(
        title="Memory Match API",
        description="Concentration card game: flip two cards, keep the pairs.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance; timers run on the server's event loop
    if service is None:
        settings = settings or GameSettings.from_env()
        service = GameService(
            session_manager=SessionManager(settings=settings, timer=AsyncioTimerService())
        )
    api_service = service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def respond(result, status_code: int = 404):
        """Pass responses through, turn ErrorResponse into JSON errors."""
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, status_code=status_code)
        return result

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(body: Optional[CreateGameRequest] = None) -> Union[GameStateResponse, JSONResponse]:
        """
        Create a new game.

        Invalid overrides are ignored rather than rejected.
        """
        try:
            return api_service.create_game(body or CreateGameRequest())
        except InvalidPairCount as e:
            logger.error(f"Cannot create game: {e}")
            return make_error_response(
                ErrorCode.INVALID_PAIR_COUNT,
                str(e),
                details={"minimum": e.minimum, "maximum": e.maximum},
            )

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game(game_id))

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(game_id: str) -> EndGameResponse:
        success = api_service.end_game(game_id)
        return EndGameResponse(success=success, game_id=game_id)

    # =========================================================================
    # Play Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/flip",
        response_model=FlipResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Flip a card",
    )
    async def flip_card(game_id: str, body: FlipRequest) -> Union[FlipResponse, JSONResponse]:
        """
        Flip a card.

        Clicks that have no effect (third card, matched card, unknown id)
        return `accepted=false` with the unchanged state.
        """
        return respond(api_service.flip(game_id, body.card_id))

    @app.post(
        "/api/v1/games/{game_id}/hide",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Flip a pending mismatch back immediately",
    )
    async def hide_cards(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.hide(game_id))

    @app.post(
        "/api/v1/games/{game_id}/restart",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Restart with a new shuffle",
    )
    async def restart_game(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.restart(game_id))

    @app.post(
        "/api/v1/games/{game_id}/preview",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Toggle preview mode",
    )
    async def set_preview(game_id: str, body: PreviewRequest) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.set_preview(game_id, body.enabled))

    @app.post(
        "/api/v1/games/{game_id}/music-ended",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Report that the victory music finished",
    )
    async def music_ended(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.finish_music(game_id))

    # =========================================================================
    # System
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="ok",
            version=__version__,
            active_games=len(api_service.list_games()),
        )

    @app.get("/", tags=["System"])
    async def root():
        return {
            "name": "Memory Match API",
            "version": __version__,
            "docs": "/api/docs",
        }

    return app
