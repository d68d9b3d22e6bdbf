"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the game
controller.

Error Codes:
- INVALID_PAIR_COUNT: Server configuration yields an unsupported pair count
- SESSION_NOT_FOUND: Game does not exist or has expired
- VALIDATION_ERROR: Request body could not be parsed
- INTERNAL_ERROR: Unexpected failure
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class GameStatusValue(str, Enum):
    """Game status values."""
    READY = "ready"
    IN_PROGRESS = "in_progress"
    VICTORY_PENDING = "victory_pending"
    COMPLETED = "completed"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_PAIR_COUNT = "INVALID_PAIR_COUNT"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardView(BaseModel):
    """
    A card as a front end should draw it.

    `image_id` is only filled in while the card is face-up.
    """
    id: int
    image_id: Optional[int] = None
    is_revealed: bool = False
    is_matched: bool = False
    image: str = Field("", description="Path of the face currently shown")
    alt: str = ""

    model_config = {"from_attributes": True}


# =============================================================================
# Requests
# =============================================================================

class CreateGameRequest(BaseModel):
    """
    Options for a new game.

    Out-of-range values are not rejected: they are ignored and the server
    defaults apply.
    """
    pair_count: Optional[int] = Field(None, description="Number of pairs (2-12)")
    difficulty: Optional[str] = Field(None, description="easy or hard")
    theme: Optional[str] = Field(None, description="impressionist or robgon")
    progress: Optional[Union[int, str]] = Field(
        None, description="Pairs to pre-match (demo/testing)"
    )
    seed: Optional[int] = Field(None, description="Seed for a reproducible layout")


class FlipRequest(BaseModel):
    """Click on a card."""
    card_id: int


class PreviewRequest(BaseModel):
    """Turn the show-all-cards preview on or off."""
    enabled: bool = True


# =============================================================================
# Responses
# =============================================================================

class GameStateResponse(BaseModel):
    """Full game state for display."""
    game_id: str
    status: GameStatusValue
    moves: int = 0
    pair_count: int = 0
    matched_pairs: int = 0
    selected_card_ids: list[int] = Field(default_factory=list)
    is_preview_mode: bool = False
    theme: Optional[str] = None
    difficulty: Optional[str] = None
    seed: Optional[int] = Field(None, description="Seed the game was created with; replays its deals")
    pending_hide: bool = Field(False, description="Unmatched cards will flip back soon")
    back_image: str = ""
    cards: list[CardView] = Field(default_factory=list)
    sounds: list[str] = Field(
        default_factory=list, description="Sounds the client should play, oldest first"
    )
    api_version: str = "v1"


class FlipResponse(BaseModel):
    """Result of a card flip."""
    accepted: bool = Field(description="False when the click had no effect")
    matched: bool = False
    mismatched: bool = False
    victory: bool = False
    cleared_pending: bool = False
    game: GameStateResponse


class GameListResponse(BaseModel):
    """Active game ids."""
    games: list[str] = Field(default_factory=list)
    count: int = 0


class EndGameResponse(BaseModel):
    success: bool
    game_id: str


class HealthResponse(BaseModel):
    """Service health."""
    status: str = "ok"
    version: str
    active_games: int = 0


class ErrorResponse(BaseModel):
    """Error payload."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None
