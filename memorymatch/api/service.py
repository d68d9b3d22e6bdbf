"""
API Service - Business logic layer between the HTTP app and the controller.

The service:
1. Translates requests to controller calls
2. Manages sessions
3. Formats responses (hiding faces of face-down cards)

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    CardView,
    CreateGameRequest,
    ErrorCode,
    ErrorResponse,
    FlipResponse,
    GameStateResponse,
    GameStatusValue,
)
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)


@dataclass
class GameService:
    """
    Main API service.

    Usage:
        service = GameService()
        game = service.create_game(CreateGameRequest(difficulty="easy"))
        result = service.flip(game.game_id, card_id=3)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        """Create a new game session."""
        session = self.session_manager.create_session(
            pair_count=request.pair_count,
            difficulty=request.difficulty,
            theme=request.theme,
            progress=request.progress,
            seed=request.seed,
        )
        return self._build_game_state(session)

    def get_game(self, game_id: str) -> GameStateResponse | ErrorResponse:
        session = self._get(game_id)
        if not session:
            return self._not_found(game_id)
        return self._build_game_state(session)

    def flip(self, game_id: str, card_id: int) -> FlipResponse | ErrorResponse:
        """Flip a card; no-op clicks come back with accepted=False."""
        session = self._get(game_id)
        if not session:
            return self._not_found(game_id)

        result = session.controller.flip_card(card_id)
        if not result.accepted:
            logger.debug(f"Game {game_id}: click on card {card_id} ignored")

        return FlipResponse(
            accepted=result.accepted,
            matched=result.matched,
            mismatched=result.mismatched,
            victory=result.victory,
            cleared_pending=result.cleared_pending,
            game=self._build_game_state(session),
        )

    def hide(self, game_id: str) -> GameStateResponse | ErrorResponse:
        """Flip back a pending mismatch right away."""
        session = self._get(game_id)
        if not session:
            return self._not_found(game_id)
        session.controller.hide_now()
        return self._build_game_state(session)

    def restart(self, game_id: str) -> GameStateResponse | ErrorResponse:
        session = self._get(game_id)
        if not session:
            return self._not_found(game_id)
        session.controller.restart()
        return self._build_game_state(session)

    def set_preview(self, game_id: str, enabled: bool) -> GameStateResponse | ErrorResponse:
        session = self._get(game_id)
        if not session:
            return self._not_found(game_id)
        session.controller.toggle_preview(enabled)
        return self._build_game_state(session)

    def finish_music(self, game_id: str) -> GameStateResponse | ErrorResponse:
        """Client reports the victory music ended."""
        session = self._get(game_id)
        if not session:
            return self._not_found(game_id)
        session.audio.finish_music()
        return self._build_game_state(session)

    def end_game(self, game_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(game_id, reason)

    def list_games(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get(self, game_id: str) -> Session | None:
        session = self.session_manager.get_session(game_id)
        if session:
            session.touch()
        return session

    @staticmethod
    def _not_found(game_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Game {game_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _build_game_state(self, session: Session) -> GameStateResponse:
        controller = session.controller
        state = controller.state

        cards = []
        for card in state.cards:
            face = controller.describe_card(card)
            face_up = card.is_revealed or card.is_matched or state.is_preview_mode
            cards.append(CardView(
                id=card.id,
                image_id=card.image_id if face_up else None,
                is_revealed=card.is_revealed,
                is_matched=card.is_matched,
                image=face["image"],
                alt=face["alt"],
            ))

        return GameStateResponse(
            game_id=session.session_id,
            status=GameStatusValue(state.status.value),
            moves=state.moves,
            pair_count=state.pair_count,
            matched_pairs=state.matched_pair_count,
            selected_card_ids=list(state.selected_card_ids),
            is_preview_mode=state.is_preview_mode,
            theme=state.theme,
            difficulty=state.difficulty.value if state.difficulty else None,
            seed=session.seed,
            pending_hide=controller.has_pending_hide,
            back_image=controller.images.get_back_image_path(),
            cards=cards,
            sounds=session.audio.drain(),
        )
