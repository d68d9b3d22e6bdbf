"""
Reducer - Pure state transitions for the memory game.

Every transition takes a GameState and returns a GameState. When the
preconditions of a transition do not hold it returns the input state
object itself, so callers can detect "nothing happened" with `is` or ==.

Design principles:
- Pure functions: (state, args) -> new_state, no I/O, no logging
- Guards instead of exceptions for user input
- Match evaluation is a separate step from revealing, so the caller
  controls sequencing (sounds, delays)
- Timers live outside; every function is safe to call redundantly
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Callable

from .action import Action, ActionResult, ActionType
from .errors import InvalidPairCount
from .setup import PairBounds, ShuffleFn, initialize_game
from .state import GameState, GameStatus

MAX_SELECTED = 2


def can_select_card(state: GameState, card_id: int) -> bool:
    """Whether reveal_card() would accept this card."""
    if len(state.selected_card_ids) >= MAX_SELECTED:
        return False
    card = state.get_card(card_id)
    return card is not None and not card.is_matched and not card.is_revealed


def reveal_card(state: GameState, card_id: int) -> GameState:
    """
    Turn a card face-up and add it to the selection.

    No-op when two cards are already selected or the card is missing,
    matched or already face-up. The second reveal of a turn counts a move.
    """
    if not can_select_card(state, card_id):
        return state

    cards = [c.reveal() if c.id == card_id else c for c in state.cards]
    selected = state.selected_card_ids + (card_id,)
    moves = state.moves + 1 if len(selected) == MAX_SELECTED else state.moves
    status = GameStatus.IN_PROGRESS if state.status == GameStatus.READY else state.status

    return state._copy_with(
        cards=cards,
        selected_card_ids=selected,
        moves=moves,
        status=status,
    )


select_card = reveal_card


def do_selected_cards_match(state: GameState) -> bool:
    """True when exactly two cards are selected and share an image."""
    if len(state.selected_card_ids) != MAX_SELECTED:
        return False
    first_id, second_id = state.selected_card_ids
    first = state.get_card(first_id)
    second = state.get_card(second_id)
    if first is None or second is None:
        return False
    return first.image_id == second.image_id


def are_all_cards_matched(state: GameState) -> bool:
    return state.all_matched


def check_for_matches(state: GameState, *, celebrate: bool = True) -> GameState:
    """
    Evaluate the two selected cards.

    Match: both cards matched, selection cleared, and the game moves to
    VICTORY_PENDING (COMPLETED when `celebrate` is False) once every card
    is matched.
    Mismatch: the state comes back unchanged; the cards stay face-up and
    selected until hide_unmatched_cards() runs.
    """
    if len(state.selected_card_ids) != MAX_SELECTED:
        return state

    first_id, second_id = state.selected_card_ids
    if state.get_card(first_id) is None or state.get_card(second_id) is None:
        return state

    if not do_selected_cards_match(state):
        return state

    selected = set(state.selected_card_ids)
    cards = [c.match() if c.id in selected else c for c in state.cards]
    new_state = state._copy_with(cards=cards, selected_card_ids=())

    if new_state.all_matched:
        final = GameStatus.VICTORY_PENDING if celebrate else GameStatus.COMPLETED
        new_state = new_state._copy_with(status=final)
    return new_state


def hide_unmatched_cards(state: GameState) -> GameState:
    """
    Flip back every face-up unmatched card and clear the selection.

    No-op unless exactly two cards are selected. Matched cards are never
    touched. This is what the delayed auto-hide calls.
    """
    if len(state.selected_card_ids) != MAX_SELECTED:
        return state

    cards = [
        c.hide() if c.is_revealed and not c.is_matched else c
        for c in state.cards
    ]
    return state._copy_with(cards=cards, selected_card_ids=())


clear_selected_cards = hide_unmatched_cards


def force_clear_selection(state: GameState) -> GameState:
    """
    Immediate cleanup used when a third card is clicked during the delay.

    Hides every face-up unmatched card and resets the selected cards to
    face-down and unmatched, whatever the selection size. A pending
    selection never holds a confirmed match, so this cannot undo one.
    """
    selected = set(state.selected_card_ids)
    cards = []
    for card in state.cards:
        if card.id in selected:
            card = replace(card, is_revealed=False, is_matched=False)
        elif card.is_revealed and not card.is_matched:
            card = card.hide()
        cards.append(card)

    if tuple(cards) == state.cards and not state.selected_card_ids:
        return state
    return state._copy_with(cards=cards, selected_card_ids=())


def reset_game(
    state: GameState,
    shuffler: ShuffleFn = None,
    bounds: PairBounds | None = None,
) -> GameState:
    """
    Start over with a freshly shuffled deck of the same size.

    The same image ids, theme and difficulty are reused; all progress is
    discarded.
    """
    pair_count = state.pair_count
    if bounds is None:
        bounds = PairBounds(1, max(pair_count, 1))
    images = sorted({c.image_id for c in state.cards})
    return initialize_game(
        pair_count,
        shuffler,
        images=images if len(images) == pair_count else None,
        bounds=bounds,
        theme=state.theme,
        difficulty=state.difficulty,
    )


def set_preview_mode(state: GameState, on: bool) -> GameState:
    """
    Toggle the "see all cards" overlay.

    Turning it on also marks every card face-up. Turning it off only drops
    the overlay flag. Moves and status are untouched.
    """
    on = bool(on)
    if on:
        cards = [c if c.is_revealed else c.reveal() for c in state.cards]
        new_state = state._copy_with(cards=cards, is_preview_mode=True)
    else:
        new_state = state._copy_with(is_preview_mode=False)
    return state if new_state == state else new_state


def complete_victory(state: GameState) -> GameState:
    """Finish the celebration: VICTORY_PENDING -> COMPLETED."""
    if state.status != GameStatus.VICTORY_PENDING:
        return state
    return state._copy_with(status=GameStatus.COMPLETED)


@dataclass
class Reducer:
    """
    Applies Action envelopes to game state.

    Stateless - all state is in GameState.
    """
    celebrate: bool = True

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with the new state (possibly identical to the
        input) or an error for unknown actions and impossible resets.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            new_state = handler(state, action)
        except InvalidPairCount as e:
            return ActionResult.failure(str(e), error_code="INVALID_PAIR_COUNT")

        changed = new_state is not state and new_state != state
        changes = [action.action_type.value] if changed else []
        return ActionResult.success_with_state(new_state, changed=changed, changes=changes)

    def _get_handler(self, action_type: ActionType) -> Callable[[GameState, Action], GameState] | None:
        """Get the handler function for an action type."""
        handlers = {
            ActionType.REVEAL_CARD: lambda s, a: reveal_card(s, a.payload.card_id),
            ActionType.CHECK_MATCHES: lambda s, a: check_for_matches(
                s, celebrate=self.celebrate and a.payload.celebrate
            ),
            ActionType.HIDE_UNMATCHED: lambda s, a: hide_unmatched_cards(s),
            ActionType.FORCE_CLEAR: lambda s, a: force_clear_selection(s),
            ActionType.RESET_GAME: lambda s, a: reset_game(s, a.payload.shuffler),
            ActionType.SET_PREVIEW: lambda s, a: set_preview_mode(s, bool(a.payload.enabled)),
            ActionType.COMPLETE_VICTORY: lambda s, a: complete_victory(s),
        }
        return handlers.get(action_type)


def apply_action(state: GameState, action: Action, celebrate: bool = True) -> ActionResult:
    """Convenience wrapper around Reducer.apply()."""
    return Reducer(celebrate=celebrate).apply(state, action)
