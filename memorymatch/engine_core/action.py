"""
Action System - Actions, payloads, and results.

Actions are an envelope around the pure transition functions so that
callers (controller, API, replays) can route every state change through
a single apply_action() call and keep a history.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Player input
    REVEAL_CARD = "reveal_card"
    SET_PREVIEW = "set_preview"
    RESET_GAME = "reset_game"

    # Sequencing steps driven by the controller
    CHECK_MATCHES = "check_matches"
    HIDE_UNMATCHED = "hide_unmatched"
    FORCE_CLEAR = "force_clear"
    COMPLETE_VICTORY = "complete_victory"


@dataclass
class ActionPayload:
    """
    Payload for an action.

    Different action types use different fields; unused ones stay None.
    """
    card_id: int | None = None
    enabled: bool | None = None  # SET_PREVIEW
    shuffler: Any | None = None  # RESET_GAME
    celebrate: bool = True  # CHECK_MATCHES


@dataclass
class Action:
    """A complete action to be applied to the game state."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None  # set when the controller dispatches it

    @classmethod
    def reveal(cls, card_id: int) -> Action:
        """Factory for revealing a card."""
        return cls(ActionType.REVEAL_CARD, ActionPayload(card_id=card_id))

    @classmethod
    def check_matches(cls, celebrate: bool = True) -> Action:
        return cls(ActionType.CHECK_MATCHES, ActionPayload(celebrate=celebrate))

    @classmethod
    def hide_unmatched(cls) -> Action:
        return cls(ActionType.HIDE_UNMATCHED)

    @classmethod
    def force_clear(cls) -> Action:
        return cls(ActionType.FORCE_CLEAR)

    @classmethod
    def reset(cls, shuffler: Any | None = None) -> Action:
        """Factory for a reset with an optional shuffle strategy."""
        return cls(ActionType.RESET_GAME, ActionPayload(shuffler=shuffler))

    @classmethod
    def set_preview(cls, enabled: bool) -> Action:
        return cls(ActionType.SET_PREVIEW, ActionPayload(enabled=enabled))

    @classmethod
    def complete_victory(cls) -> Action:
        return cls(ActionType.COMPLETE_VICTORY)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    `changed` is False when the action was a no-op (the new state equals
    the old one); the caller decides whether to give feedback for that.
    """
    success: bool
    new_state: Any | None = None  # GameState
    changed: bool = False
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changed: bool,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            changed=changed,
            state_changes=changes or [],
        )
