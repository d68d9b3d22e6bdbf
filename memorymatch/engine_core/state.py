"""
Game State - The immutable snapshot the engine operates on.

Design principles:
- Immutable: every transition returns a new GameState, never mutates
- Serializable: to_dict() gives a plain view for the API and CLI
- Logic-free: transitions live in the reducer, not here
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class GameStatus(Enum):
    """Lifecycle of one game."""
    READY = "ready"  # Deck built, nothing revealed yet
    IN_PROGRESS = "in_progress"
    VICTORY_PENDING = "victory_pending"  # All matched, celebration still running
    COMPLETED = "completed"


class Difficulty(Enum):
    """Difficulty tiers (select the pair count at game start)."""
    EASY = "easy"
    HARD = "hard"


@dataclass(frozen=True)
class Card:
    """
    One physical card on the table.

    Note: `id` identifies this instance, `image_id` identifies the pair.
    """
    id: int
    image_id: int
    is_revealed: bool = False
    is_matched: bool = False

    def reveal(self) -> Card:
        """Return the card face-up."""
        return replace(self, is_revealed=True)

    def hide(self) -> Card:
        """Return the card face-down."""
        return replace(self, is_revealed=False)

    def match(self) -> Card:
        """Return the card as matched (matched cards stay face-up)."""
        return replace(self, is_revealed=True, is_matched=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "image_id": self.image_id,
            "is_revealed": self.is_revealed,
            "is_matched": self.is_matched,
        }


@dataclass(frozen=True)
class GameState:
    """
    Complete game snapshot at a point in time.

    Replaced wholesale by every transition in the reducer.
    """
    cards: tuple[Card, ...] = ()
    status: GameStatus = GameStatus.READY
    moves: int = 0
    selected_card_ids: tuple[int, ...] = ()
    is_preview_mode: bool = False

    # Configuration echo (deck construction only, not matching)
    theme: str | None = None
    difficulty: Difficulty | None = None

    @property
    def pair_count(self) -> int:
        return len(self.cards) // 2

    @property
    def matched_pair_count(self) -> int:
        return sum(1 for c in self.cards if c.is_matched) // 2

    @property
    def all_matched(self) -> bool:
        """True when every card is matched (False for an empty deck)."""
        return bool(self.cards) and all(c.is_matched for c in self.cards)

    @property
    def is_finished(self) -> bool:
        """Both terminal statuses mean every card is matched."""
        return self.status in {GameStatus.VICTORY_PENDING, GameStatus.COMPLETED}

    def get_card(self, card_id: int) -> Card | None:
        """Get card by instance id."""
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def with_cards(self, cards: list[Card] | tuple[Card, ...]) -> GameState:
        """Return new state with the card sequence replaced."""
        return self._copy_with(cards=tuple(cards))

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        if "selected_card_ids" in kwargs:
            kwargs["selected_card_ids"] = tuple(kwargs["selected_card_ids"])
        if "cards" in kwargs:
            kwargs["cards"] = tuple(kwargs["cards"])
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Plain representation for serialization."""
        return {
            "cards": [c.to_dict() for c in self.cards],
            "status": self.status.value,
            "moves": self.moves,
            "selected_card_ids": list(self.selected_card_ids),
            "is_preview_mode": self.is_preview_mode,
            "theme": self.theme,
            "difficulty": self.difficulty.value if self.difficulty else None,
        }
