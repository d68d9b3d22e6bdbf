"""
Engine Core - Pure game state management for the memory game.

The engine:
1. Builds a paired deck (deck factory)
2. Shuffles it (Fisher-Yates, random or seeded)
3. Holds the immutable GameState
4. Applies transitions via the reducer

It never schedules timers, plays sounds or logs; that is the
controller's job (see memorymatch.session).
"""

from .state import Card, GameState, GameStatus, Difficulty
from .errors import MemoryMatchError, InvalidPairCount, DeckIntegrityError
from .shuffle import (
    Shuffler,
    FisherYatesRandom,
    SeededFisherYates,
    IdentityShuffle,
    DEFAULT_SHUFFLER,
    shuffle,
    seeded_shuffle,
)
from .deck import ImageRef, create_deck, create_cards, validate_deck
from .setup import (
    PairBounds,
    DEFAULT_BOUNDS,
    initialize_game,
    initialize_game_with_progress,
    parse_progress,
    pairs_for_difficulty,
    resolve_pair_count,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import (
    Reducer,
    apply_action,
    can_select_card,
    reveal_card,
    select_card,
    check_for_matches,
    do_selected_cards_match,
    are_all_cards_matched,
    hide_unmatched_cards,
    clear_selected_cards,
    force_clear_selection,
    reset_game,
    set_preview_mode,
    complete_victory,
)

__all__ = [
    "Card",
    "GameState",
    "GameStatus",
    "Difficulty",
    "MemoryMatchError",
    "InvalidPairCount",
    "DeckIntegrityError",
    "Shuffler",
    "FisherYatesRandom",
    "SeededFisherYates",
    "IdentityShuffle",
    "DEFAULT_SHUFFLER",
    "shuffle",
    "seeded_shuffle",
    "ImageRef",
    "create_deck",
    "create_cards",
    "validate_deck",
    "PairBounds",
    "DEFAULT_BOUNDS",
    "initialize_game",
    "initialize_game_with_progress",
    "parse_progress",
    "pairs_for_difficulty",
    "resolve_pair_count",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "can_select_card",
    "reveal_card",
    "select_card",
    "check_for_matches",
    "do_selected_cards_match",
    "are_all_cards_matched",
    "hide_unmatched_cards",
    "clear_selected_cards",
    "force_clear_selection",
    "reset_game",
    "set_preview_mode",
    "complete_victory",
]
