"""
Session Manager - Creates and manages game sessions.

A session is one player's game behind the HTTP API:
- Created when the player starts a game
- Holds the GameController (and through it the current GameState)
- Destroyed when the player leaves or the session goes stale

Sessions are in-memory only. Nothing is persisted.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable
import logging
import time
import uuid

from ..config import GameSettings
from ..engine_core.shuffle import SeededFisherYates
from ..ports.audio import RecordingAudio
from ..ports.timer import ThreadingTimerService, TimerService
from .game_loop import GameController

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains the controller driving the game and activity timestamps
    used for expiry.
    """
    session_id: str
    controller: GameController
    created_at: float
    last_activity: float = 0.0
    seed: int | None = None

    def touch(self):
        self.last_activity = time.time()

    @property
    def audio(self) -> RecordingAudio:
        return self.controller.audio


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their own controller and audio recorder
    - Track active sessions
    - Clean up stale sessions

    One timer service is shared by every session.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        timer: TimerService | None = None,
        audio_factory: Callable[[], RecordingAudio] = RecordingAudio,
    ):
        self.settings = settings or GameSettings()
        self.timer = timer or ThreadingTimerService()
        self.audio_factory = audio_factory
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        pair_count: Any = None,
        difficulty: str | None = None,
        theme: str | None = None,
        progress: Any = None,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            pair_count: Optional pair count override (ignored if out of range)
            difficulty: Difficulty tier name
            theme: Image theme
            progress: Optional number of pre-matched pairs
            seed: Seed for a reproducible layout

        Returns:
            New Session with a READY (or pre-progressed) game
        """
        session_id = str(uuid.uuid4())
        shuffler = SeededFisherYates(seed) if seed is not None else None

        def on_completed(moves: int):
            logger.info(f"Session {session_id} completed in {moves} moves")

        controller = GameController(
            self.settings,
            timer=self.timer,
            audio=self.audio_factory(),
            shuffler=shuffler,
            on_completed=on_completed,
            pair_count=pair_count,
            progress=progress,
            theme=theme,
            difficulty=difficulty,
        )

        now = time.time()
        session = Session(
            session_id=session_id,
            controller=controller,
            created_at=now,
            last_activity=now,
            seed=seed,
        )
        self._sessions[session_id] = session
        logger.info(f"Created session {session_id} ({controller.state.pair_count} pairs)")
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and release its timer and music.

        Returns False if the session didn't exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.controller.close()
        logger.info(f"Ended session {session_id} ({reason})")
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> list[str]:
        """
        End sessions idle for longer than max_age.

        Called periodically to free memory.
        """
        max_age = max_age_seconds or self.settings.session_max_age_seconds
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
