"""
Game Setup - Creates initial game states.

This module handles:
- Pair count bounds (configurable, 2-12 by default)
- Building and shuffling the deck
- Difficulty tiers (pair count per tier)
- Pre-matched progress for demos and tests

Invalid pair counts raise InvalidPairCount. Invalid progress values are
ignored and the plain initial state is returned.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .deck import ImageRef, create_deck
from .errors import InvalidPairCount
from .shuffle import Shuffler, as_shuffler
from .state import Card, Difficulty, GameState, GameStatus

DEFAULT_MIN_PAIRS = 2
DEFAULT_MAX_PAIRS = 12

DIFFICULTY_PAIRS: dict[Difficulty, int] = {
    Difficulty.EASY: 5,
    Difficulty.HARD: 12,
}

ShuffleFn = Shuffler | Callable[[list[Card]], list[Card]] | None


@dataclass(frozen=True)
class PairBounds:
    """Supported range of pair counts (inclusive)."""
    minimum: int = DEFAULT_MIN_PAIRS
    maximum: int = DEFAULT_MAX_PAIRS

    def __post_init__(self):
        if self.minimum < 1 or self.maximum < self.minimum:
            raise ValueError(f"Invalid pair bounds: {self.minimum}-{self.maximum}")

    def contains(self, pair_count: Any) -> bool:
        return (
            isinstance(pair_count, int)
            and not isinstance(pair_count, bool)
            and self.minimum <= pair_count <= self.maximum
        )

    def check(self, pair_count: Any) -> int:
        """Return `pair_count` or raise InvalidPairCount."""
        if not self.contains(pair_count):
            raise InvalidPairCount(pair_count, self.minimum, self.maximum)
        return pair_count


DEFAULT_BOUNDS = PairBounds()


def pairs_for_difficulty(
    difficulty: Difficulty | str,
    table: dict[Difficulty, int] | None = None,
) -> int:
    """Pair count for a difficulty tier."""
    tier = Difficulty(difficulty)
    return (table or DIFFICULTY_PAIRS)[tier]


def _image_ids(pair_count: int, images: Sequence[ImageRef | int] | None, bounds: PairBounds) -> list[int]:
    """Resolve the image ids for the deck, checking they are distinct."""
    if images is None:
        return list(range(1, pair_count + 1))

    ids = [img.id if isinstance(img, ImageRef) else int(img) for img in images]
    if len(ids) != pair_count or len(set(ids)) != pair_count:
        raise InvalidPairCount(
            pair_count,
            bounds.minimum,
            bounds.maximum,
            reason=(
                f"Expected {pair_count} distinct image ids, got {len(set(ids))} "
                f"distinct out of {len(ids)}"
            ),
        )
    return ids


def initialize_game(
    pair_count: int,
    shuffler: ShuffleFn = None,
    *,
    images: Sequence[ImageRef | int] | None = None,
    bounds: PairBounds = DEFAULT_BOUNDS,
    theme: str | None = None,
    difficulty: Difficulty | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        pair_count: Number of pairs on the table
        shuffler: Shuffle strategy or plain function (random by default)
        images: Exactly `pair_count` distinct image ids (defaults to 1..n)
        bounds: Supported pair count range
        theme: Echoed into the state for the asset layer
        difficulty: Echoed into the state

    Returns:
        READY state with a shuffled, face-down deck
    """
    bounds.check(pair_count)
    deck = create_deck(_image_ids(pair_count, images, bounds))
    shuffled = as_shuffler(shuffler)(deck)

    return GameState(
        cards=tuple(shuffled),
        status=GameStatus.READY,
        moves=0,
        selected_card_ids=(),
        is_preview_mode=False,
        theme=theme,
        difficulty=difficulty,
    )


def parse_progress(progress: Any, pair_count: int) -> int | None:
    """
    Parse a progress override.

    Accepts ints or numeric strings (as they come from a query string).
    Returns None for anything outside 0..pair_count.
    """
    if progress is None or isinstance(progress, bool):
        return None
    if isinstance(progress, str):
        text = progress.strip()
        if not text.lstrip("+-").isdigit():
            return None
        progress = int(text)
    if not isinstance(progress, int):
        return None
    if progress < 0 or progress > pair_count:
        return None
    return progress


def apply_progress(state: GameState, progress: int) -> GameState:
    """
    Pre-match the first `progress` distinct images in deck order.

    One move is counted per pre-matched pair.
    """
    image_order: list[int] = []
    for card in state.cards:
        if card.image_id not in image_order:
            image_order.append(card.image_id)
    to_match = set(image_order[:progress])

    cards = [c.match() if c.image_id in to_match else c for c in state.cards]
    status = (
        GameStatus.VICTORY_PENDING if progress == state.pair_count
        else GameStatus.IN_PROGRESS
    )
    return state._copy_with(cards=cards, moves=progress, status=status)


def initialize_game_with_progress(
    pair_count: int,
    progress: Any,
    shuffler: ShuffleFn = None,
    **kwargs,
) -> GameState:
    """
    Set up a game with some pairs already matched.

    A progress of 0, or any invalid value, returns the plain initial state.
    """
    state = initialize_game(pair_count, shuffler, **kwargs)
    parsed = parse_progress(progress, pair_count)
    if not parsed:
        return state
    return apply_progress(state, parsed)


def resolve_pair_count(
    override: Any = None,
    difficulty: Difficulty | str | None = None,
    bounds: PairBounds = DEFAULT_BOUNDS,
    default: int = DEFAULT_MAX_PAIRS,
    table: dict[Difficulty, int] | None = None,
) -> int:
    """
    Pick the pair count from configuration inputs.

    An in-bounds override wins, then the difficulty tier, then `default`.
    Invalid overrides and unknown tiers are ignored.
    """
    if override is not None:
        candidate = override
        if isinstance(candidate, str) and candidate.strip().isdigit():
            candidate = int(candidate.strip())
        if bounds.contains(candidate):
            return candidate

    if difficulty is not None:
        try:
            return pairs_for_difficulty(difficulty, table)
        except (ValueError, KeyError):
            pass

    return default
